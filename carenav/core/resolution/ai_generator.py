"""AI-backed resolution generator.

Sends the issue to the configured chat-completions model and validates the
JSON it returns against ``ResolutionMap``.  If the client is in mock mode,
the request fails, or the reply does not validate, the rule-based generator
produces the map instead.
"""

from __future__ import annotations

from typing import Any

import httpx
from pydantic import ValidationError

from carenav.common.enums import category_label
from carenav.common.exceptions import ResolutionParseError
from carenav.common.logging import get_logger
from carenav.core.resolution.base import GeneratedResolution, ResolutionGenerator
from carenav.core.resolution.prompts import build_system_prompt, detail_lines
from carenav.core.resolution.rule_based import RuleBasedResolutionGenerator, select_builder
from carenav.core.resolution.schemas import IssueInput, ResolutionMap
from carenav.integrations.ai_client import AIClient

logger = get_logger("resolution.ai")


def build_user_message(issue: IssueInput) -> str:
    parts = [
        f"## Issue Type: {category_label(issue.category)}",
        f"\n## User's Description:\n{issue.description}",
    ]

    details = detail_lines(issue)
    if details:
        parts.append("\n## Additional Details:\n" + "\n".join(details))

    if issue.has_documents:
        parts.append("\n## Documents:\nThe user has uploaded documents related to this issue.")

    parts.append(
        "\n\nAnalyze this situation and return the Issue Resolution Map as a JSON object."
    )
    return "\n".join(parts)


def parse_resolution_map(data: dict[str, Any]) -> ResolutionMap:
    """Validate model output, renumbering steps that arrive without an order."""
    if not isinstance(data, dict) or not data:
        raise ResolutionParseError("Model returned no resolution map")

    steps = data.get("nextSteps")
    if isinstance(steps, list):
        data = {
            **data,
            "nextSteps": [
                {**step, "order": index}
                for index, step in enumerate(steps, start=1)
                if isinstance(step, dict)
            ],
        }

    try:
        return ResolutionMap.model_validate(data)
    except ValidationError as e:
        raise ResolutionParseError(f"Invalid resolution map: {e.error_count()} errors") from e


class AIResolutionGenerator(ResolutionGenerator):
    name = "ai"

    def __init__(
        self,
        client: AIClient | None = None,
        fallback: ResolutionGenerator | None = None,
    ) -> None:
        self._client = client or AIClient()
        self._fallback = fallback or RuleBasedResolutionGenerator()

    async def generate(self, issue: IssueInput) -> ResolutionMap:
        return (await self.generate_with_source(issue)).resolution_map

    async def generate_with_source(self, issue: IssueInput) -> GeneratedResolution:
        # Same contract as the rule-based strategy: reject before any network call.
        select_builder(issue.category)

        if self._client.is_mock:
            logger.info("AI client in mock mode, using rule-based resolution")
            return await self._fallback.generate_with_source(issue)

        try:
            data = await self._client.complete_json(
                build_system_prompt(issue.category),
                build_user_message(issue),
            )
            resolution = parse_resolution_map(data)
        except (httpx.HTTPError, ValueError) as e:
            # ResolutionParseError, json.JSONDecodeError and malformed replies are ValueErrors
            logger.warning("LLM resolution failed, using fallback: %s", e)
            return await self._fallback.generate_with_source(issue)

        logger.info(
            "Resolution generated via LLM: category=%s likelihood=%s steps=%d",
            issue.category,
            resolution.likelihood_of_success,
            len(resolution.next_steps),
        )
        return GeneratedResolution(resolution, self.name)
