"""Request and response bodies shared by the v1 routers."""

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field
from pydantic.alias_generators import to_camel

from carenav.common.enums import ComplaintRecipient, ContactPreference
from carenav.core.resolution.schemas import ResolutionMap


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ---------- Issues ----------


class IssueCreateResponse(CamelModel):
    issue_id: uuid.UUID
    resolution: ResolutionMap


class IssueResponse(CamelModel):
    id: uuid.UUID
    category: str
    description: str
    insurer_name: str | None
    provider_name: str | None
    amount_involved: float | None
    date_of_service: str | None
    has_documents: bool
    created_at: datetime
    resolution: ResolutionMap | None


class IssueListResponse(CamelModel):
    issues: list[IssueResponse]
    total: int


# ---------- Chat ----------


class ChatRequest(CamelModel):
    message: str = Field(..., min_length=1)


class ChatMessageResponse(CamelModel):
    id: uuid.UUID
    role: str
    content: str
    created_at: datetime


class ChatHistoryResponse(CamelModel):
    messages: list[ChatMessageResponse]


# ---------- Generated documents ----------


class AppealLetterRequest(CamelModel):
    issue_id: uuid.UUID


class PhoneScriptRequest(CamelModel):
    issue_id: uuid.UUID
    # Validated in the endpoint so an unknown target is a 400, not a 422
    target: str = "insurance"


class ComplaintLetterRequest(CamelModel):
    issue_id: uuid.UUID
    recipient: ComplaintRecipient = ComplaintRecipient.STATE_COMMISSIONER


class GeneratedDocumentBody(CamelModel):
    title: str
    content: str
    instructions: str


class GeneratedDocumentResponse(CamelModel):
    document: GeneratedDocumentBody


# ---------- Uploaded documents ----------


class DocumentResponse(CamelModel):
    id: uuid.UUID
    issue_id: uuid.UUID
    filename: str
    original_name: str
    content_type: str
    size_bytes: int
    document_type: str | None
    analysis: dict | None
    created_at: datetime


class DocumentListResponse(CamelModel):
    documents: list[DocumentResponse]


class DocumentUploadResponse(CamelModel):
    document: DocumentResponse


# ---------- Leads ----------


class LeadCreateRequest(CamelModel):
    issue_id: uuid.UUID
    email: EmailStr
    phone: str | None = None
    preferred_contact: ContactPreference = ContactPreference.EMAIL
    notes: str | None = None


class LeadCreateResponse(CamelModel):
    lead_id: uuid.UUID
