"""Appeal letters, phone scripts and complaint letters for an issue.

Each generator asks the AI client for the document text.  When the client is
in mock mode or the call fails, a fixed template is filled in with the issue
details instead, leaving ``[BRACKETED]`` placeholders for the user.
"""

from __future__ import annotations

from datetime import date

import httpx
from pydantic import BaseModel

from carenav.common.enums import ComplaintRecipient, PhoneScriptTarget, category_label
from carenav.common.logging import get_logger
from carenav.core.resolution.prompts import detail_lines
from carenav.core.resolution.schemas import IssueInput, ResolutionMap
from carenav.integrations.ai_client import AIClient

logger = get_logger("documents.generator")


class GeneratedDocument(BaseModel):
    title: str
    content: str
    instructions: str


APPEAL_LETTER_PROMPT = """You are an expert at writing healthcare insurance appeal letters. Generate a professional, compelling appeal letter based on the patient's situation.

The letter should:
1. Be addressed to the insurance company's appeals department
2. Include placeholders for information the patient needs to fill in: [YOUR NAME], [YOUR ADDRESS], [MEMBER ID], [CLAIM NUMBER], [DATE OF SERVICE], etc.
3. Reference the specific denial reason and counter it with logical arguments
4. Cite relevant regulations if applicable (ACA provisions, state mandates, ERISA for employer plans)
5. Request a specific action (coverage, payment, reconsideration)
6. Maintain a professional but firm tone
7. Be 1-2 pages in length

Format the letter with a date, address placeholders, a RE: line with claim info, body paragraphs and a signature line. Return the letter ready to be copied and customized."""

PHONE_SCRIPT_PROMPT = """You are an expert at helping patients navigate difficult phone calls with insurance companies and healthcare providers. Generate a detailed phone script based on the patient's situation.

Format as a clear, easy-to-follow script with:
- BEFORE THE CALL: Things to prepare
- OPENING: What to say when connected
- KEY QUESTIONS: Numbered list of questions to ask
- IF THEY SAY...: Common responses and how to handle them
- CLOSING: How to end the call and what to confirm
- AFTER THE CALL: What to document

Be conversational but professional, and include tips for escalation."""

COMPLAINT_LETTER_PROMPT = """You are an expert at writing formal complaint letters to healthcare regulatory bodies. Generate a professional complaint letter to the {recipient}.

The letter should:
1. Clearly state this is a formal complaint
2. Include relevant identifying information (placeholders)
3. Describe the issue factually and chronologically
4. Reference any relevant laws or regulations
5. State what resolution is being sought
6. Maintain a professional, factual tone
7. List supporting documentation to attach

Format properly as a formal letter."""

APPEAL_INSTRUCTIONS = (
    "Replace all [BRACKETED] placeholders with your actual information before sending. "
    "Send via certified mail and keep a copy for your records."
)
PHONE_SCRIPT_INSTRUCTIONS = (
    "Have this script ready during your call. Take notes on everything discussed, "
    "including the name of the person you spoke with, reference numbers, and any promises made."
)
COMPLAINT_INSTRUCTIONS = (
    "Fill in all placeholders, attach copies of relevant documents, and send via "
    "certified mail. Keep copies of everything."
)

PHONE_SCRIPT_TITLES: dict[str, str] = {
    PhoneScriptTarget.INSURANCE.value: "Insurance Company",
    PhoneScriptTarget.PROVIDER.value: "Healthcare Provider",
    PhoneScriptTarget.BOTH.value: "Insurance & Provider",
}

COMPLAINT_RECIPIENT_LABELS: dict[str, str] = {
    ComplaintRecipient.STATE_COMMISSIONER.value: "State Insurance Commissioner",
    ComplaintRecipient.CMS.value: "Centers for Medicare & Medicaid Services (CMS)",
    ComplaintRecipient.HOSPITAL_PATIENT_ADVOCATE.value: "Hospital Patient Advocate",
}


def build_generation_context(
    issue: IssueInput,
    document_kind: str,
    resolution: ResolutionMap | None = None,
) -> str:
    parts = [
        f"Please generate a {document_kind} for the following situation:",
        "",
        f"Issue Type: {category_label(issue.category)}",
        "",
        f"Patient's Description: {issue.description}",
        *(line.lstrip("- ") for line in detail_lines(issue)),
    ]
    if resolution is not None:
        parts += [
            "",
            "Resolution Map Analysis:",
            f"- Situation: {resolution.what_is_happening}",
            f"- Likelihood of Success: {resolution.likelihood_of_success}",
        ]
    return "\n".join(parts)


async def _generate_text(client: AIClient, system: str, user: str) -> str:
    """AI text, or ``""`` when the caller should use its template."""
    if client.is_mock:
        return ""
    try:
        return (await client.complete_text(system, user)).strip()
    except (httpx.HTTPError, ValueError) as e:
        # malformed replies surface as ValueError from AIClient
        logger.warning("LLM document generation failed, using template: %s", e)
        return ""


# ---------------------------------------------------------------------------
# Templates
# ---------------------------------------------------------------------------


def _amount_text(issue: IssueInput) -> str:
    if issue.amount_involved:
        return f"${issue.amount_involved:,.2f}"
    return "[AMOUNT]"


def appeal_letter_template(issue: IssueInput) -> str:
    insurer = issue.insurer_name or "[INSURANCE COMPANY NAME]"
    provider = issue.provider_name or "[PROVIDER NAME]"
    service_date = issue.date_of_service or "[DATE OF SERVICE]"
    return f"""{date.today():%B %d, %Y}

[YOUR NAME]
[YOUR ADDRESS]
[CITY, STATE ZIP]

{insurer}
Attn: Appeals Department
[APPEALS DEPARTMENT ADDRESS]

RE: Appeal of {category_label(issue.category)}
Member ID: [MEMBER ID]
Claim Number: [CLAIM NUMBER]
Date of Service: {service_date}
Provider: {provider}
Amount: {_amount_text(issue)}

To Whom It May Concern:

I am writing to formally appeal the decision regarding the claim referenced above. I am requesting a full review of this decision under my plan's internal appeal process.

Summary of the situation:
{issue.description}

The services I received were recommended by my treating provider and were medically necessary. I have enclosed supporting documentation, including a letter of medical necessity from my provider and relevant medical records. Under the Affordable Care Act, I am entitled to a full and fair review of this decision, and if applicable, an independent external review.

I respectfully request that you reverse this decision and approve coverage for the services listed above. Please send me a written response, including the specific plan provisions and clinical criteria used in your review.

Sincerely,

[YOUR SIGNATURE]
[YOUR NAME]
[PHONE NUMBER]

Enclosures: Denial letter, Explanation of Benefits, letter of medical necessity, medical records
"""


def phone_script_template(issue: IssueInput, target: PhoneScriptTarget) -> str:
    if target == PhoneScriptTarget.INSURANCE:
        callee = issue.insurer_name or "the insurance company"
    elif target == PhoneScriptTarget.PROVIDER:
        callee = issue.provider_name or "the healthcare provider"
    else:
        callee = "both the insurance company and healthcare provider"

    return f"""PHONE SCRIPT: Calling {callee}

BEFORE THE CALL:
- Member ID: [MEMBER ID]
- Claim or account number: [CLAIM NUMBER]
- Date of service: {issue.date_of_service or "[DATE OF SERVICE]"}
- Amount in question: {_amount_text(issue)}
- Any letters, bills or EOBs you received
- Pen and paper to take notes

OPENING:
"Hi, my name is [YOUR NAME]. I'm calling about a {category_label(issue.category).lower()} for a service on {issue.date_of_service or "[DATE OF SERVICE]"}. Before we start, may I have your name and a reference number for this call?"

KEY QUESTIONS:
1. What is the current status of this claim or account?
2. What is the specific reason for the decision or charge?
3. What do I need to provide to resolve this?
4. What is the deadline for me to act?
5. Can you send me that in writing?

IF THEY SAY...:
- "There's nothing we can do." -> "I understand. May I speak with a supervisor, and can you tell me how to file a formal appeal or grievance?"
- "You'll need to call someone else." -> "Can you transfer me directly and give me their number in case we get disconnected?"
- "It's being processed." -> "What is the expected completion date, and is anything missing from my file?"

CLOSING:
"Thank you. To confirm, you said [SUMMARY OF NEXT STEPS]. Your name is [REPRESENTATIVE NAME] and the reference number is [REFERENCE NUMBER], correct?"

AFTER THE CALL:
- Write down the date, time, representative's name and reference number
- Note every promise made and any deadline mentioned
- Follow up in writing if anything was agreed
"""


def complaint_letter_template(issue: IssueInput, recipient: ComplaintRecipient) -> str:
    label = COMPLAINT_RECIPIENT_LABELS[recipient.value]
    parties = ", ".join(
        name for name in (issue.insurer_name, issue.provider_name) if name
    ) or "[COMPANY OR PROVIDER NAME]"
    return f"""{date.today():%B %d, %Y}

[YOUR NAME]
[YOUR ADDRESS]
[CITY, STATE ZIP]
[PHONE NUMBER]

{label}
[RECIPIENT ADDRESS]

RE: Formal Complaint Regarding {parties}

Dear {label}:

I am writing to file a formal complaint regarding a {category_label(issue.category).lower()} involving {parties}.

Identifying information:
- Member ID: [MEMBER ID]
- Claim Number: [CLAIM NUMBER]
- Date of Service: {issue.date_of_service or "[DATE OF SERVICE]"}
- Amount in Dispute: {_amount_text(issue)}

Description of the issue:
{issue.description}

I have attempted to resolve this matter directly without success. I am requesting that your office review this complaint, investigate the handling of my case, and help bring it to a fair resolution.

Copies of relevant correspondence and documentation are enclosed.

Sincerely,

[YOUR SIGNATURE]
[YOUR NAME]

Enclosures: [LIST OF ENCLOSED DOCUMENTS]
"""


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


async def generate_appeal_letter(
    issue: IssueInput,
    resolution: ResolutionMap | None = None,
    client: AIClient | None = None,
) -> GeneratedDocument:
    client = client or AIClient()
    content = await _generate_text(
        client, APPEAL_LETTER_PROMPT, build_generation_context(issue, "appeal letter", resolution)
    )
    return GeneratedDocument(
        title="Insurance Appeal Letter",
        content=content or appeal_letter_template(issue),
        instructions=APPEAL_INSTRUCTIONS,
    )


async def generate_phone_script(
    issue: IssueInput,
    target: PhoneScriptTarget = PhoneScriptTarget.INSURANCE,
    resolution: ResolutionMap | None = None,
    client: AIClient | None = None,
) -> GeneratedDocument:
    target = PhoneScriptTarget(target)
    client = client or AIClient()
    if target == PhoneScriptTarget.INSURANCE:
        description = f"calling {issue.insurer_name or 'the insurance company'}"
    elif target == PhoneScriptTarget.PROVIDER:
        description = f"calling {issue.provider_name or 'the healthcare provider'}"
    else:
        description = "calling both the insurance company and healthcare provider"

    content = await _generate_text(
        client,
        PHONE_SCRIPT_PROMPT,
        build_generation_context(issue, f"phone script for {description}", resolution),
    )
    return GeneratedDocument(
        title=f"Phone Script - {PHONE_SCRIPT_TITLES[target.value]}",
        content=content or phone_script_template(issue, target),
        instructions=PHONE_SCRIPT_INSTRUCTIONS,
    )


async def generate_complaint_letter(
    issue: IssueInput,
    recipient: ComplaintRecipient = ComplaintRecipient.STATE_COMMISSIONER,
    resolution: ResolutionMap | None = None,
    client: AIClient | None = None,
) -> GeneratedDocument:
    recipient = ComplaintRecipient(recipient)
    client = client or AIClient()
    label = COMPLAINT_RECIPIENT_LABELS[recipient.value]
    content = await _generate_text(
        client,
        COMPLAINT_LETTER_PROMPT.format(recipient=label),
        build_generation_context(issue, f"formal complaint letter to {label}", resolution),
    )
    return GeneratedDocument(
        title=f"Complaint Letter - {label}",
        content=content or complaint_letter_template(issue, recipient),
        instructions=COMPLAINT_INSTRUCTIONS,
    )
