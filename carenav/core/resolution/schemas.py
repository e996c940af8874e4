"""Pydantic models for the resolution engine.

``IssueInput`` is what a caller hands to a ``ResolutionGenerator``;
``ResolutionMap`` is the only thing a generator returns.  Both serialise
with camelCase aliases (``whatIsHappening``, ``insurerName`` ...) so the
stored JSON matches what the web client reads.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from carenav.common.enums import Likelihood


class _CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


# ---------------------------------------------------------------------------
# Input
# ---------------------------------------------------------------------------


class IssueInput(_CamelModel):
    """A user's issue as submitted from the intake form.

    ``category`` is plain text rather than ``IssueCategory`` so that an
    unsupported value reaches the generator and fails there with
    ``UnknownCategoryError``.
    """

    category: str = Field(..., description="One of the IssueCategory values")
    description: str = Field(..., description="Free-text description, used verbatim")
    insurer_name: str | None = Field(None, description="Insurance company name")
    provider_name: str | None = Field(None, description="Healthcare provider name")
    amount_involved: float | None = Field(None, description="Dollar amount in dispute")
    date_of_service: str | None = Field(None, description="Date of service as entered")
    has_documents: bool = Field(False, description="Whether documents were uploaded")


# ---------------------------------------------------------------------------
# Output
# ---------------------------------------------------------------------------


class ResponsibleParty(_CamelModel):
    name: str = Field(..., min_length=1)
    role: str = Field(..., min_length=1)
    contact_method: str = Field(..., min_length=1)


class WhoIsResponsible(_CamelModel):
    parties: list[ResponsibleParty] = Field(..., min_length=1)
    primary_contact: str = Field(..., min_length=1)


class NextStep(_CamelModel):
    order: int = Field(..., ge=1)
    action: str = Field(..., min_length=1)
    details: str = Field(..., min_length=1)
    deadline: str | None = None


class ResolutionMap(_CamelModel):
    """A complete resolution map.  Partial maps cannot be constructed."""

    what_is_happening: str = Field(..., min_length=1)
    who_is_responsible: WhoIsResponsible
    likelihood_of_success: Likelihood
    likelihood_reason: str = Field(..., min_length=1)
    next_steps: list[NextStep] = Field(..., min_length=1)
    documents_needed: list[str] = Field(..., min_length=1)
    estimated_timeframe: str = Field(..., min_length=1)
    warnings: list[str] = Field(default_factory=list)

    model_config = ConfigDict(use_enum_values=True)

    @model_validator(mode="after")
    def _check_step_order(self) -> ResolutionMap:
        for index, step in enumerate(self.next_steps, start=1):
            if step.order != index:
                raise ValueError(
                    f"next_steps must be numbered 1..n without gaps "
                    f"(position {index} has order {step.order})"
                )
        return self
