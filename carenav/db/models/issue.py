from decimal import Decimal

from sqlalchemy import Boolean, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from carenav.common.enums import IssueCategory
from carenav.db.base import BaseModel


class Issue(BaseModel):
    __tablename__ = "issues"

    session_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    category: Mapped[IssueCategory] = mapped_column(String(30), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    insurer_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    provider_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    amount_involved: Mapped[Decimal | None] = mapped_column(Numeric, nullable=True)
    date_of_service: Mapped[str | None] = mapped_column(String(50), nullable=True)
    has_documents: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    # Relationships
    resolution = relationship(
        "Resolution", back_populates="issue", uselist=False, lazy="selectin"
    )
    conversation = relationship("Conversation", back_populates="issue", uselist=False)
    documents = relationship("Document", back_populates="issue")
    leads = relationship("LeadCapture", back_populates="issue")
