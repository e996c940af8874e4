"""Structured analysis of uploaded healthcare documents.

Images the vision model accepts are sent to the AI client.  Plain text is
scanned locally with regexes.  Anything else (PDF, Word) gets a minimal
analysis recording only that the file was received.
"""

from __future__ import annotations

import base64
import re
from typing import Any

import httpx
from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel

from carenav.common.enums import DocumentType
from carenav.common.logging import get_logger
from carenav.integrations.ai_client import AIClient

logger = get_logger("documents.analyzer")

VISION_MEDIA_TYPES: dict[str, str] = {
    "image/jpeg": "image/jpeg",
    "image/jpg": "image/jpeg",
    "image/png": "image/png",
    "image/gif": "image/gif",
    "image/webp": "image/webp",
}

DOCUMENT_ANALYSIS_PROMPT = """You are analyzing a healthcare document (EOB, medical bill, denial letter, insurance card, or medical records) uploaded by someone seeking help with a healthcare administrative issue.

Extract the information that would help them understand their bill or claim, appeal a denial, verify charges, or contact the right parties.

Return a JSON object with this structure:
{
  "documentType": "eob" | "denial_letter" | "bill" | "insurance_card" | "medical_records" | "other",
  "summary": "Brief 1-2 sentence summary of what this document is",
  "extractedData": {
    "claimNumber": "...", "dateOfService": "...", "provider": "...", "insurer": "...",
    "amountBilled": 0, "amountPaid": 0, "amountOwed": 0,
    "denialReason": "...", "denialCode": "...", "appealDeadline": "...",
    "memberID": "...", "groupNumber": "..."
  },
  "keyFindings": ["3-5 specific things the person should know"],
  "relevantForIssue": "How this document helps resolve their issue"
}

Only include extractedData fields you actually find. Amounts are plain numbers without a $ sign. Use "other" if the document type is unclear."""


class DocumentAnalysis(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    document_type: DocumentType = DocumentType.OTHER
    summary: str
    extracted_data: dict[str, Any] = Field(default_factory=dict)
    key_findings: list[str] = Field(default_factory=list)
    relevant_for_issue: str = ""


def is_vision_supported(mime_type: str) -> bool:
    return mime_type in VISION_MEDIA_TYPES


# ---------------------------------------------------------------------------
# Plain-text extraction
# ---------------------------------------------------------------------------

_CLAIM_RE = re.compile(r"claim\s*(?:number|no\.?|#)?\s*[:#]?\s*([A-Z0-9-]{5,})", re.IGNORECASE)
_MEMBER_RE = re.compile(r"member\s*(?:id|number|#)\s*[:#]?\s*([A-Z0-9-]{5,})", re.IGNORECASE)
_GROUP_RE = re.compile(r"group\s*(?:number|no\.?|#)\s*[:#]?\s*([A-Z0-9-]{3,})", re.IGNORECASE)
_DATE_RE = re.compile(r"\b(\d{1,2}/\d{1,2}/\d{2,4}|\d{4}-\d{2}-\d{2})\b")
_AMOUNT_RE = re.compile(r"\$\s?(\d{1,3}(?:,\d{3})*(?:\.\d{2})?|\d+(?:\.\d{2})?)")

# First match wins, so the more specific document kinds come first.
_TYPE_KEYWORDS: list[tuple[DocumentType, tuple[str, ...]]] = [
    (DocumentType.EOB, ("explanation of benefits", "this is not a bill")),
    (DocumentType.DENIAL_LETTER, ("denied", "denial", "not covered", "adverse benefit")),
    (DocumentType.BILL, ("amount due", "balance due", "statement date", "please pay")),
    (DocumentType.MEDICAL_RECORDS, ("diagnosis", "chief complaint", "progress note", "discharge summary")),
    (DocumentType.INSURANCE_CARD, ("rx bin", "rxbin", "copay", "subscriber")),
]


def classify_text(text: str) -> DocumentType:
    lowered = text.lower()
    for doc_type, keywords in _TYPE_KEYWORDS:
        if any(k in lowered for k in keywords):
            return doc_type
    return DocumentType.OTHER


def extract_text_fields(text: str) -> dict[str, Any]:
    data: dict[str, Any] = {}
    if m := _CLAIM_RE.search(text):
        data["claimNumber"] = m.group(1)
    if m := _MEMBER_RE.search(text):
        data["memberID"] = m.group(1)
    if m := _GROUP_RE.search(text):
        data["groupNumber"] = m.group(1)
    if m := _DATE_RE.search(text):
        data["dateOfService"] = m.group(1)

    amounts = [float(a.replace(",", "")) for a in _AMOUNT_RE.findall(text)]
    if amounts:
        data["amounts"] = amounts
        data["amountBilled"] = max(amounts)
    return data


def analyze_text(text: str, issue_context: str | None = None) -> DocumentAnalysis:
    doc_type = classify_text(text)
    data = extract_text_fields(text)

    findings: list[str] = []
    if "claimNumber" in data:
        findings.append(f"Claim number {data['claimNumber']} is referenced in this document.")
    if "memberID" in data:
        findings.append(f"Member ID {data['memberID']} appears on this document.")
    if "dateOfService" in data:
        findings.append(f"The first date found is {data['dateOfService']}.")
    if "amountBilled" in data:
        findings.append(f"The largest dollar amount listed is ${data['amountBilled']:,.2f}.")
    if not findings:
        findings.append("No claim numbers, IDs, dates or amounts were found automatically.")

    relevance = "Keep this document with your records; reference it when you contact the responsible party."
    if issue_context:
        relevance = f"Use this document as supporting evidence for: {issue_context}"

    return DocumentAnalysis(
        document_type=doc_type,
        summary=f"Text document classified as {doc_type.value.replace('_', ' ')}.",
        extracted_data=data,
        key_findings=findings,
        relevant_for_issue=relevance,
    )


def minimal_analysis(mime_type: str) -> DocumentAnalysis:
    return DocumentAnalysis(
        document_type=DocumentType.OTHER,
        summary=f"Uploaded {mime_type} document. Automatic analysis is not available for this format.",
        key_findings=["Review this document manually for claim numbers, dates and amounts."],
    )


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


async def analyze_document(
    content: bytes,
    mime_type: str,
    issue_context: str | None = None,
    client: AIClient | None = None,
) -> DocumentAnalysis:
    if mime_type == "text/plain":
        return analyze_text(content.decode("utf-8", errors="replace"), issue_context)

    if not is_vision_supported(mime_type):
        return minimal_analysis(mime_type)

    client = client or AIClient()
    if client.is_mock:
        logger.info("AI client in mock mode, skipping image analysis")
        return minimal_analysis(mime_type)

    prompt = DOCUMENT_ANALYSIS_PROMPT
    if issue_context:
        prompt += f"\n\nContext about the user's issue:\n{issue_context}"

    try:
        data = await client.analyze_image(
            prompt,
            base64.b64encode(content).decode("ascii"),
            VISION_MEDIA_TYPES[mime_type],
        )
        analysis = DocumentAnalysis.model_validate(data)
        logger.info("Image analyzed as %s", analysis.document_type.value)
        return analysis
    except (httpx.HTTPError, ValueError, KeyError, ValidationError) as e:
        logger.warning("LLM document analysis failed, using fallback: %s", e)
        return minimal_analysis(mime_type)
