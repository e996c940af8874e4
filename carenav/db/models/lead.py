import uuid

from sqlalchemy import ForeignKey, String, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from carenav.common.enums import ContactPreference
from carenav.db.base import BaseModel


class LeadCapture(BaseModel):
    """Contact details left by a user who wants follow-up help."""

    __tablename__ = "lead_captures"

    issue_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("issues.id"), nullable=False, index=True
    )
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    phone: Mapped[str | None] = mapped_column(String(50), nullable=True)
    preferred_contact: Mapped[ContactPreference] = mapped_column(
        String(20), nullable=False, default=ContactPreference.EMAIL
    )
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Relationships
    issue = relationship("Issue", back_populates="leads")
