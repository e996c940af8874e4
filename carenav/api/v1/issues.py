import math
import uuid

from fastapi import APIRouter, Depends, Request, Response
from sqlalchemy.ext.asyncio import AsyncSession

from carenav.api.deps import ensure_session_id, get_db, get_session_id
from carenav.api.v1.schemas import IssueCreateResponse, IssueListResponse, IssueResponse
from carenav.common.exceptions import BadRequestError, UnknownCategoryError
from carenav.common.rate_limit import rate_limit
from carenav.core.issues.service import (
    IssueService,
    get_issue,
    list_session_issues,
    resolution_to_map,
)
from carenav.core.resolution.base import ResolutionGenerator
from carenav.core.resolution.factory import get_resolution_generator
from carenav.core.resolution.schemas import IssueInput
from carenav.db.models.issue import Issue

router = APIRouter(prefix="/issues", tags=["Issues"])


def _issue_response(issue: Issue) -> IssueResponse:
    return IssueResponse(
        id=issue.id,
        category=issue.category,
        description=issue.description,
        insurer_name=issue.insurer_name,
        provider_name=issue.provider_name,
        amount_involved=float(issue.amount_involved) if issue.amount_involved is not None else None,
        date_of_service=issue.date_of_service,
        has_documents=issue.has_documents,
        created_at=issue.created_at,
        resolution=resolution_to_map(issue.resolution) if issue.resolution else None,
    )


@router.post(
    "",
    response_model=IssueCreateResponse,
    status_code=201,
    dependencies=[Depends(rate_limit("create_issue"))],
)
async def create_issue(
    body: IssueInput,
    request: Request,
    response: Response,
    generator: ResolutionGenerator = Depends(get_resolution_generator),
    db: AsyncSession = Depends(get_db),
):
    if not body.description.strip():
        raise BadRequestError("A description of the issue is required")
    if body.amount_involved is not None and not math.isfinite(body.amount_involved):
        raise BadRequestError("amountInvolved must be a finite number")

    session_id = ensure_session_id(request, response)
    try:
        issue, resolution = await IssueService(generator).create_issue(body, session_id, db)
    except UnknownCategoryError as e:
        raise BadRequestError(f"Unsupported issue type: {e.category}")
    return IssueCreateResponse(issue_id=issue.id, resolution=resolution)


@router.get("", response_model=IssueListResponse)
async def list_issues(
    session_id: str | None = Depends(get_session_id),
    db: AsyncSession = Depends(get_db),
):
    if not session_id:
        return IssueListResponse(issues=[], total=0)
    issues = await list_session_issues(session_id, db)
    return IssueListResponse(issues=[_issue_response(i) for i in issues], total=len(issues))


@router.get("/{issue_id}", response_model=IssueResponse)
async def get_issue_detail(
    issue_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
):
    return _issue_response(await get_issue(issue_id, db))
