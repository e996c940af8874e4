"""Issue intake: generate the resolution map, then store the issue and its map."""

from __future__ import annotations

import uuid
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from carenav.common.exceptions import NotFoundError
from carenav.common.logging import get_logger
from carenav.core.resolution.base import ResolutionGenerator
from carenav.core.resolution.schemas import IssueInput, ResolutionMap
from carenav.db.models.issue import Issue
from carenav.db.models.resolution import Resolution

logger = get_logger("issues.service")


def issue_to_input(issue: Issue) -> IssueInput:
    return IssueInput(
        category=issue.category,
        description=issue.description,
        insurer_name=issue.insurer_name,
        provider_name=issue.provider_name,
        amount_involved=float(issue.amount_involved) if issue.amount_involved is not None else None,
        date_of_service=issue.date_of_service,
        has_documents=issue.has_documents,
    )


def resolution_to_map(resolution: Resolution) -> ResolutionMap:
    """Rebuild a ``ResolutionMap`` from its stored row."""
    return ResolutionMap.model_validate(
        {
            "whatIsHappening": resolution.what_is_happening,
            "whoIsResponsible": resolution.who_is_responsible,
            "likelihoodOfSuccess": resolution.likelihood_of_success,
            "likelihoodReason": resolution.likelihood_reason,
            "nextSteps": resolution.next_steps,
            "documentsNeeded": resolution.documents_needed,
            "estimatedTimeframe": resolution.estimated_timeframe,
            "warnings": resolution.warnings,
        }
    )


class IssueService:
    def __init__(self, generator: ResolutionGenerator) -> None:
        self.generator = generator

    async def create_issue(
        self,
        issue_input: IssueInput,
        session_id: str,
        db: AsyncSession,
    ) -> tuple[Issue, ResolutionMap]:
        """Generate a resolution map for *issue_input* and persist both.

        The map is generated before anything is written, so an
        ``UnknownCategoryError`` leaves no rows behind.
        """
        generated = await self.generator.generate_with_source(issue_input)
        resolution_map = generated.resolution_map

        payload = resolution_map.model_dump(mode="json", by_alias=True)
        resolution = Resolution(
            what_is_happening=resolution_map.what_is_happening,
            who_is_responsible=payload["whoIsResponsible"],
            likelihood_of_success=resolution_map.likelihood_of_success,
            likelihood_reason=resolution_map.likelihood_reason,
            next_steps=payload["nextSteps"],
            documents_needed=payload["documentsNeeded"],
            estimated_timeframe=resolution_map.estimated_timeframe,
            warnings=payload["warnings"],
            generator=generated.generator,
        )
        issue = Issue(
            session_id=session_id,
            category=issue_input.category,
            description=issue_input.description,
            insurer_name=issue_input.insurer_name,
            provider_name=issue_input.provider_name,
            amount_involved=(
                Decimal(str(issue_input.amount_involved))
                if issue_input.amount_involved is not None
                else None
            ),
            date_of_service=issue_input.date_of_service,
            has_documents=issue_input.has_documents,
            resolution=resolution,
        )
        db.add(issue)
        await db.flush()

        logger.info(
            "Created %s issue %s (likelihood=%s, generator=%s)",
            issue.category,
            issue.id,
            resolution_map.likelihood_of_success,
            generated.generator,
        )
        return issue, resolution_map


async def get_issue(issue_id: uuid.UUID, db: AsyncSession) -> Issue:
    result = await db.execute(select(Issue).where(Issue.id == issue_id))
    issue = result.scalar_one_or_none()
    if not issue:
        raise NotFoundError("Issue", str(issue_id))
    return issue


async def list_session_issues(session_id: str, db: AsyncSession) -> list[Issue]:
    result = await db.execute(
        select(Issue)
        .where(Issue.session_id == session_id)
        .order_by(Issue.created_at.desc())
    )
    return list(result.scalars().all())
