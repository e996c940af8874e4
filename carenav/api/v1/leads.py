from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from carenav.api.deps import get_db
from carenav.api.v1.schemas import LeadCreateRequest, LeadCreateResponse
from carenav.common.logging import get_logger
from carenav.common.rate_limit import rate_limit
from carenav.core.issues.service import get_issue
from carenav.db.models.lead import LeadCapture

logger = get_logger("api.leads")

router = APIRouter(prefix="/leads", tags=["Leads"])


@router.post(
    "",
    response_model=LeadCreateResponse,
    status_code=201,
    dependencies=[Depends(rate_limit("general"))],
)
async def create_lead(
    body: LeadCreateRequest,
    db: AsyncSession = Depends(get_db),
):
    issue = await get_issue(body.issue_id, db)

    lead = LeadCapture(
        issue_id=issue.id,
        email=body.email,
        phone=body.phone or None,
        preferred_contact=body.preferred_contact.value,
        notes=body.notes or None,
    )
    db.add(lead)
    await db.flush()

    logger.info("Lead %s captured for issue %s", lead.id, issue.id)
    return LeadCreateResponse(lead_id=lead.id)
