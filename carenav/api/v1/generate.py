import uuid

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from carenav.api.deps import get_db
from carenav.api.v1.schemas import (
    AppealLetterRequest,
    ComplaintLetterRequest,
    GeneratedDocumentBody,
    GeneratedDocumentResponse,
    PhoneScriptRequest,
)
from carenav.common.enums import PhoneScriptTarget
from carenav.common.exceptions import BadRequestError
from carenav.common.rate_limit import rate_limit
from carenav.core.documents.generator import (
    GeneratedDocument,
    generate_appeal_letter,
    generate_complaint_letter,
    generate_phone_script,
)
from carenav.core.issues.service import get_issue, issue_to_input, resolution_to_map
from carenav.core.resolution.schemas import IssueInput, ResolutionMap

router = APIRouter(
    prefix="/generate",
    tags=["Generate"],
    dependencies=[Depends(rate_limit("generate_document"))],
)


async def _load_context(
    issue_id: uuid.UUID, db: AsyncSession
) -> tuple[IssueInput, ResolutionMap | None]:
    issue = await get_issue(issue_id, db)
    resolution = resolution_to_map(issue.resolution) if issue.resolution else None
    return issue_to_input(issue), resolution


def _wrap(document: GeneratedDocument) -> GeneratedDocumentResponse:
    return GeneratedDocumentResponse(document=GeneratedDocumentBody(**document.model_dump()))


@router.post("/appeal-letter", response_model=GeneratedDocumentResponse)
async def appeal_letter(
    body: AppealLetterRequest,
    db: AsyncSession = Depends(get_db),
):
    issue, resolution = await _load_context(body.issue_id, db)
    return _wrap(await generate_appeal_letter(issue, resolution))


@router.post("/phone-script", response_model=GeneratedDocumentResponse)
async def phone_script(
    body: PhoneScriptRequest,
    db: AsyncSession = Depends(get_db),
):
    try:
        target = PhoneScriptTarget(body.target)
    except ValueError:
        raise BadRequestError("Invalid target. Must be 'insurance', 'provider', or 'both'")

    issue, resolution = await _load_context(body.issue_id, db)
    return _wrap(await generate_phone_script(issue, target, resolution))


@router.post("/complaint-letter", response_model=GeneratedDocumentResponse)
async def complaint_letter(
    body: ComplaintLetterRequest,
    db: AsyncSession = Depends(get_db),
):
    issue, resolution = await _load_context(body.issue_id, db)
    return _wrap(await generate_complaint_letter(issue, body.recipient, resolution))
