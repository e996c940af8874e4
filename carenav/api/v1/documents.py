import uuid
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from carenav.api.deps import get_db
from carenav.api.v1.schemas import DocumentListResponse, DocumentResponse, DocumentUploadResponse
from carenav.common.exceptions import BadRequestError, NotFoundError, PayloadTooLargeError
from carenav.common.logging import get_logger
from carenav.common.rate_limit import rate_limit
from carenav.config import settings
from carenav.core.documents.analyzer import analyze_document
from carenav.core.issues.service import get_issue
from carenav.db.models.document import Document
from carenav.integrations.storage import StorageClient

logger = get_logger("api.documents")

router = APIRouter(prefix="/documents", tags=["Documents"])

ALLOWED_TYPES = {
    "application/pdf",
    "image/jpeg", "image/jpg", "image/png", "image/gif", "image/webp", "image/heic",
    "application/msword",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    "text/plain",
}


def _document_response(doc: Document) -> DocumentResponse:
    return DocumentResponse(
        id=doc.id,
        issue_id=doc.issue_id,
        filename=doc.filename,
        original_name=doc.original_name,
        content_type=doc.content_type,
        size_bytes=doc.size_bytes,
        document_type=doc.document_type,
        analysis=doc.analysis,
        created_at=doc.created_at,
    )


@router.post(
    "",
    response_model=DocumentUploadResponse,
    status_code=201,
    dependencies=[Depends(rate_limit("upload_document"))],
)
async def upload_document(
    issue_id: uuid.UUID = Form(..., alias="issueId"),
    file: UploadFile = File(...),
    analyze: bool = Form(False),
    db: AsyncSession = Depends(get_db),
):
    content_type = file.content_type or "application/octet-stream"
    if content_type not in ALLOWED_TYPES:
        raise BadRequestError(
            f"File type '{content_type}' is not allowed. Upload a PDF, image, Word or text file."
        )

    content = await file.read()
    max_bytes = settings.MAX_UPLOAD_SIZE_MB * 1024 * 1024
    if len(content) > max_bytes:
        raise PayloadTooLargeError(f"File exceeds max size of {settings.MAX_UPLOAD_SIZE_MB} MB")

    issue = await get_issue(issue_id, db)

    analysis = None
    if analyze:
        analysis = await analyze_document(
            content,
            content_type,
            f"Issue type: {issue.category}\nDescription: {issue.description}",
        )

    storage = StorageClient()
    original_name = file.filename or "unnamed"
    stored = await storage.upload_file(
        file_content=content,
        original_name=original_name,
        content_type=content_type,
        folder=f"issues/{issue_id}",
    )

    doc = Document(
        issue_id=issue.id,
        filename=stored["filename"],
        original_name=original_name,
        file_key=stored["file_key"],
        content_type=content_type,
        size_bytes=stored["size_bytes"],
    )
    if analysis is not None:
        doc.document_type = analysis.document_type.value
        doc.analysis = analysis.model_dump(mode="json", by_alias=True)

    issue.has_documents = True
    db.add(doc)
    try:
        await db.flush()
    except Exception:
        # No row points at the file, so it must not outlive the request.
        await storage.delete_file(stored["file_key"])
        raise

    logger.info("Document %s uploaded for issue %s (%d bytes)", doc.id, issue.id, len(content))
    return DocumentUploadResponse(document=_document_response(doc))


@router.get("", response_model=DocumentListResponse)
async def list_documents(
    issue_id: uuid.UUID = Query(..., alias="issueId"),
    db: AsyncSession = Depends(get_db),
):
    result = await db.execute(
        select(Document)
        .where(Document.issue_id == issue_id, Document.is_deleted.is_(False))
        .order_by(Document.created_at.desc())
    )
    return DocumentListResponse(documents=[_document_response(d) for d in result.scalars().all()])


@router.delete("/{document_id}", status_code=204)
async def delete_document(
    document_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
):
    result = await db.execute(
        select(Document).where(Document.id == document_id, Document.is_deleted.is_(False))
    )
    doc = result.scalar_one_or_none()
    if not doc:
        raise NotFoundError("Document", str(document_id))

    await StorageClient().delete_file(doc.file_key)
    doc.is_deleted = True
    doc.deleted_at = datetime.now(timezone.utc)
    await db.flush()
