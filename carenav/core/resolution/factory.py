"""Strategy selection for resolution generation."""

from __future__ import annotations

from functools import lru_cache

from carenav.common.enums import ResolutionStrategy
from carenav.common.logging import get_logger
from carenav.config import settings
from carenav.core.resolution.ai_generator import AIResolutionGenerator
from carenav.core.resolution.base import ResolutionGenerator
from carenav.core.resolution.rule_based import RuleBasedResolutionGenerator
from carenav.integrations.ai_client import AIClient

logger = get_logger("resolution.factory")


def create_resolution_generator(strategy: str | None = None) -> ResolutionGenerator:
    """Build the generator named by *strategy* (default: ``settings.RESOLUTION_STRATEGY``).

    ``auto`` picks the AI strategy only when a real AI key is configured.
    """
    try:
        chosen = ResolutionStrategy(strategy or settings.RESOLUTION_STRATEGY)
    except ValueError:
        raise ValueError(f"Unknown resolution strategy: {strategy or settings.RESOLUTION_STRATEGY}") from None

    if chosen == ResolutionStrategy.AUTO:
        chosen = ResolutionStrategy.RULES if AIClient().is_mock else ResolutionStrategy.AI

    if chosen == ResolutionStrategy.AI:
        logger.info("Using AI-backed resolution generator")
        return AIResolutionGenerator()

    logger.info("Using rule-based resolution generator")
    return RuleBasedResolutionGenerator()


@lru_cache
def get_resolution_generator() -> ResolutionGenerator:
    """Process-wide generator; FastAPI dependency, overridable in tests."""
    return create_resolution_generator()
