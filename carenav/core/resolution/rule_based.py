"""Deterministic, template-driven resolution generator.

No network calls and no shared state: the same ``IssueInput`` always yields
the same ``ResolutionMap``, so instances are safe to share across requests.
"""

from __future__ import annotations

from collections.abc import Callable

from carenav.common.enums import IssueCategory
from carenav.common.exceptions import UnknownCategoryError
from carenav.common.logging import get_logger
from carenav.core.resolution.base import ResolutionGenerator
from carenav.core.resolution.builders import (
    build_bill,
    build_claim_pending,
    build_denial,
    build_prior_auth,
    build_records,
)
from carenav.core.resolution.schemas import IssueInput, ResolutionMap

logger = get_logger("resolution.rules")

Builder = Callable[[IssueInput], ResolutionMap]

BUILDERS: dict[IssueCategory, Builder] = {
    IssueCategory.DENIAL: build_denial,
    IssueCategory.BILL: build_bill,
    IssueCategory.PRIOR_AUTH: build_prior_auth,
    IssueCategory.RECORDS: build_records,
    IssueCategory.CLAIM_PENDING: build_claim_pending,
}

if set(BUILDERS) != set(IssueCategory):
    raise RuntimeError("BUILDERS must cover every IssueCategory")


def select_builder(category: str) -> Builder:
    """Return the builder for *category* or raise ``UnknownCategoryError``."""
    try:
        key = IssueCategory(category)
    except ValueError:
        raise UnknownCategoryError(category) from None
    return BUILDERS[key]


class RuleBasedResolutionGenerator(ResolutionGenerator):
    name = "rules"

    async def generate(self, issue: IssueInput) -> ResolutionMap:
        builder = select_builder(issue.category)
        resolution = builder(issue)
        logger.debug(
            "Built %s resolution: likelihood=%s steps=%d",
            issue.category,
            resolution.likelihood_of_success,
            len(resolution.next_steps),
        )
        return resolution
