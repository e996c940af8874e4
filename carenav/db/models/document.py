import uuid

from sqlalchemy import ForeignKey, Integer, String
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from carenav.common.enums import DocumentType
from carenav.db.base import BaseModel, JSONType, SoftDeleteMixin


class Document(BaseModel, SoftDeleteMixin):
    __tablename__ = "documents"

    issue_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("issues.id"), nullable=False, index=True
    )
    filename: Mapped[str] = mapped_column(String(255), nullable=False)
    original_name: Mapped[str] = mapped_column(String(255), nullable=False)
    file_key: Mapped[str] = mapped_column(String(500), nullable=False, unique=True)
    content_type: Mapped[str] = mapped_column(String(100), nullable=False)
    size_bytes: Mapped[int] = mapped_column(Integer, nullable=False)
    document_type: Mapped[DocumentType | None] = mapped_column(String(30), nullable=True)
    analysis: Mapped[dict | None] = mapped_column(JSONType, nullable=True)

    # Relationships
    issue = relationship("Issue", back_populates="documents")
