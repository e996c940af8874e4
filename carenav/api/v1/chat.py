import uuid

from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse
from sqlalchemy.ext.asyncio import AsyncSession

from carenav.api.deps import get_db
from carenav.api.v1.schemas import ChatHistoryResponse, ChatMessageResponse, ChatRequest
from carenav.common.rate_limit import rate_limit
from carenav.core.chat.service import ChatService
from carenav.core.issues.service import get_issue

router = APIRouter(prefix="/chat", tags=["Chat"])

SSE_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
    "X-Accel-Buffering": "no",
}


@router.post("/{issue_id}", dependencies=[Depends(rate_limit("chat"))])
async def send_message(
    issue_id: uuid.UUID,
    body: ChatRequest,
    db: AsyncSession = Depends(get_db),
):
    """Stream the assistant's reply as Server-Sent Events."""
    issue = await get_issue(issue_id, db)
    stream = await ChatService().start_reply(issue, body.message, db)
    return StreamingResponse(stream, media_type="text/event-stream", headers=SSE_HEADERS)


@router.get("/{issue_id}", response_model=ChatHistoryResponse)
async def get_history(
    issue_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
):
    await get_issue(issue_id, db)
    messages = await ChatService().get_history(issue_id, db)
    return ChatHistoryResponse(
        messages=[
            ChatMessageResponse(id=m.id, role=m.role, content=m.content, created_at=m.created_at)
            for m in messages
        ]
    )
