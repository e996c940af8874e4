import uuid

from sqlalchemy import ForeignKey, String, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from carenav.common.enums import Likelihood
from carenav.db.base import BaseModel, JSONType


class Resolution(BaseModel):
    """A stored ResolutionMap.  List/structured fields are kept as JSON."""

    __tablename__ = "resolutions"

    issue_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("issues.id"), nullable=False, unique=True
    )
    what_is_happening: Mapped[str] = mapped_column(Text, nullable=False)
    who_is_responsible: Mapped[dict] = mapped_column(JSONType, nullable=False)
    likelihood_of_success: Mapped[Likelihood] = mapped_column(String(10), nullable=False)
    likelihood_reason: Mapped[str] = mapped_column(Text, nullable=False)
    next_steps: Mapped[list] = mapped_column(JSONType, nullable=False, default=list)
    documents_needed: Mapped[list] = mapped_column(JSONType, nullable=False, default=list)
    estimated_timeframe: Mapped[str] = mapped_column(String(255), nullable=False)
    warnings: Mapped[list] = mapped_column(JSONType, nullable=False, default=list)
    generator: Mapped[str] = mapped_column(String(20), nullable=False, default="rules")

    # Relationships
    issue = relationship("Issue", back_populates="resolution")
