"""Category-specific resolution map templates.

Each ``build_*`` function is a pure function from ``IssueInput`` to a
fully-populated ``ResolutionMap``.  Supplied insurer / provider names are
interpolated verbatim; when absent, each builder falls back to its own
generic noun phrase.  The free-text description is never inspected.
"""

from __future__ import annotations

from carenav.common.enums import Likelihood
from carenav.core.resolution.schemas import (
    IssueInput,
    NextStep,
    ResolutionMap,
    ResponsibleParty,
    WhoIsResponsible,
)

GENERIC_INSURER = "your insurance company"
GENERIC_PROVIDER = "your healthcare provider"

# Amount thresholds (USD) that move the likelihood estimate.
DENIAL_HIGH_AMOUNT = 1000
BILL_HIGH_AMOUNT = 2000


def _steps(*steps: tuple[str, str, str | None]) -> list[NextStep]:
    """Number ``(action, details, deadline)`` tuples from 1."""
    return [
        NextStep(order=i, action=action, details=details, deadline=deadline)
        for i, (action, details, deadline) in enumerate(steps, start=1)
    ]


def _amount(issue: IssueInput) -> float:
    return issue.amount_involved or 0


# ---------------------------------------------------------------------------
# Insurance denial
# ---------------------------------------------------------------------------


def build_denial(issue: IssueInput) -> ResolutionMap:
    insurer = issue.insurer_name or GENERIC_INSURER
    provider = issue.provider_name or GENERIC_PROVIDER
    high_amount = _amount(issue) > DENIAL_HIGH_AMOUNT

    if issue.insurer_name:
        who = f"Your insurance company ({insurer})"
    else:
        who = "Your insurance company"

    if high_amount:
        likelihood = Likelihood.MEDIUM
        reason = (
            "Higher-value denials often require more documentation and persistence, "
            "but many are still successfully appealed with proper evidence."
        )
    else:
        likelihood = Likelihood.HIGH
        reason = (
            "Many denials are due to administrative errors or missing information "
            "that can be corrected. First-level appeals have a good success rate."
        )

    return ResolutionMap(
        what_is_happening=(
            f"{who} has denied coverage for a claim. This means they've decided not "
            "to pay for a service you received. Denials happen for many reasons: the "
            'service may have been deemed "not medically necessary," it may not be '
            "covered under your plan, or there may have been a coding or administrative "
            "error. The good news: most denials can be appealed, and a significant "
            "percentage of appeals succeed."
        ),
        who_is_responsible=WhoIsResponsible(
            parties=[
                ResponsibleParty(
                    name=insurer,
                    role="Insurance Company",
                    contact_method="Call the member services number on your insurance card",
                ),
                ResponsibleParty(
                    name=provider,
                    role="Healthcare Provider",
                    contact_method="Contact their billing department",
                ),
            ],
            primary_contact=(
                f"Start with {insurer}'s member services to understand the exact denial reason"
            ),
        ),
        likelihood_of_success=likelihood,
        likelihood_reason=reason,
        next_steps=_steps(
            (
                "Get the Denial Letter",
                f"Request a written denial letter from {insurer} if you haven't received "
                "one. This letter must include the specific reason code for denial.",
                "Within 7 days",
            ),
            (
                "Understand the Denial Reason",
                "Read the denial code carefully. Common reasons include: lack of medical "
                "necessity, out-of-network provider, missing pre-authorization, or benefit "
                "exclusion.",
                None,
            ),
            (
                "Check Your Appeal Rights",
                "Your denial letter must include information about your appeal rights and "
                "deadlines. Most plans give you 180 days to file an internal appeal.",
                None,
            ),
            (
                "Gather Supporting Documentation",
                f"Contact {provider} to request medical records and a letter of medical "
                "necessity from your treating physician.",
                "Within 14 days",
            ),
            (
                "File Internal Appeal",
                "Submit a written appeal letter with all supporting documentation. Send via "
                "certified mail and keep copies of everything.",
                "Check your denial letter for specific deadline",
            ),
        ),
        documents_needed=[
            "Written denial letter with reason code",
            "Your insurance policy/plan documents",
            "Explanation of Benefits (EOB)",
            "Medical records related to the denied service",
            "Letter of medical necessity from your doctor",
            "Any prior authorization documentation",
        ],
        estimated_timeframe="4-8 weeks for internal appeal decision",
        warnings=[
            "Don't miss appeal deadlines - they're strictly enforced",
            "Keep copies of all correspondence",
            "If internal appeal fails, you have the right to an external review",
            "Never pay a denied claim until you've exhausted appeals",
        ],
    )


# ---------------------------------------------------------------------------
# Confusing or incorrect bill
# ---------------------------------------------------------------------------


def build_bill(issue: IssueInput) -> ResolutionMap:
    provider = issue.provider_name or GENERIC_PROVIDER
    insurer = issue.insurer_name or GENERIC_INSURER
    high_amount = _amount(issue) > BILL_HIGH_AMOUNT

    # Larger bills carry more line items, so more room for errors and negotiation.
    if high_amount:
        likelihood = Likelihood.HIGH
        reason = (
            "Higher bills have more line items that can contain errors. Providers are "
            "often willing to negotiate or correct mistakes on larger bills."
        )
    else:
        likelihood = Likelihood.MEDIUM
        reason = (
            "Even smaller bills may contain errors. Always request an itemized statement "
            "to verify charges."
        )

    return ResolutionMap(
        what_is_happening=(
            f"You've received a medical bill from {provider} that seems confusing, "
            "unexpected, or potentially incorrect. Medical billing is notoriously "
            "complex, and studies show that up to 80% of medical bills contain errors. "
            "Common issues include: duplicate charges, unbundling (charging separately "
            "for services that should be billed together), charges for services not "
            "received, incorrect insurance information, and balance billing (charging "
            f"you for amounts {insurer} should cover)."
        ),
        who_is_responsible=WhoIsResponsible(
            parties=[
                ResponsibleParty(
                    name=provider,
                    role="Healthcare Provider (Billing Department)",
                    contact_method="Call the billing phone number on your bill",
                ),
                ResponsibleParty(
                    name=insurer,
                    role="Insurance Company",
                    contact_method="Call member services to verify what they paid",
                ),
            ],
            primary_contact=(
                f"Start with {provider}'s billing department to request an itemized bill"
            ),
        ),
        likelihood_of_success=likelihood,
        likelihood_reason=reason,
        next_steps=_steps(
            (
                "Request an Itemized Bill",
                f"Call {provider}'s billing department and request a detailed itemized "
                "statement showing every charge with procedure codes (CPT codes) and "
                "diagnosis codes (ICD codes).",
                "Do this before paying anything",
            ),
            (
                "Compare to Your EOB",
                f"Get your Explanation of Benefits (EOB) from {insurer} for the same date "
                "of service. Compare what insurance paid vs. what you're being billed.",
                None,
            ),
            (
                "Check for Common Errors",
                "Look for: duplicate charges, services you didn't receive, incorrect dates, "
                "wrong insurance information, and charges that should be covered.",
                None,
            ),
            (
                "Dispute Any Errors",
                "Call the billing department to dispute specific charges. Document the "
                "date, time, and name of everyone you speak with.",
                None,
            ),
            (
                "Negotiate if Valid",
                "If charges are valid but unaffordable, ask about: payment plans, financial "
                "assistance programs, prompt-pay discounts, or reduced rates for "
                "uninsured/underinsured patients.",
                None,
            ),
        ),
        documents_needed=[
            "Original bill received",
            "Itemized statement with CPT/ICD codes",
            "Explanation of Benefits (EOB) from insurance",
            "Your insurance card and policy information",
            "Any receipts or records from the visit",
            "Notes from calls with billing department",
        ],
        estimated_timeframe="2-4 weeks to resolve billing disputes",
        warnings=[
            "Never pay a bill without an itemized statement",
            "Don't ignore bills - they can be sent to collections",
            "Keep records of all phone calls and correspondence",
            "You have the right to dispute charges within 60 days of receiving the bill",
            "If sent to collections, you still have rights to verify the debt",
        ],
    )


# ---------------------------------------------------------------------------
# Prior authorization
# ---------------------------------------------------------------------------


def build_prior_auth(issue: IssueInput) -> ResolutionMap:
    insurer = issue.insurer_name or GENERIC_INSURER
    provider = issue.provider_name or GENERIC_PROVIDER

    return ResolutionMap(
        what_is_happening=(
            "Prior authorization (pre-auth) is insurance company permission required "
            "before certain medical services, medications, or procedures. Your prior "
            f"auth with {insurer} may be pending review, denied, or expired. This is "
            "one of the most frustrating parts of healthcare: insurers use it to "
            "control costs, but it can delay necessary care. Know that "
            f'{provider} can request an "expedited" or "urgent" review for '
            "time-sensitive situations."
        ),
        who_is_responsible=WhoIsResponsible(
            parties=[
                ResponsibleParty(
                    name=provider,
                    role="Healthcare Provider",
                    contact_method="Contact the office that ordered the service/procedure",
                ),
                ResponsibleParty(
                    name=insurer,
                    role="Insurance Company (Utilization Management)",
                    contact_method="Call the prior authorization department number",
                ),
            ],
            primary_contact=(
                f"Start with {provider}, since they typically submit prior auth "
                "requests on your behalf"
            ),
        ),
        likelihood_of_success=Likelihood.MEDIUM,
        likelihood_reason=(
            "Prior auth issues are often resolved once the right documentation is "
            "submitted. If denied, appeals based on medical necessity have reasonable "
            "success rates."
        ),
        next_steps=_steps(
            (
                "Verify Request Status",
                f"Call {provider} to confirm a prior auth request was submitted and get "
                "the reference/tracking number.",
                "Immediately",
            ),
            (
                "Check Insurance Status",
                f"Call {insurer}'s prior auth department with the reference number to "
                "check status. Ask: Is it pending? Denied? What additional information "
                "is needed?",
                None,
            ),
            (
                "Request Expedited Review if Urgent",
                "If this is time-sensitive (needed within 72 hours), ask your doctor to "
                "request an urgent/expedited review. Insurers must respond within 24-72 "
                "hours for urgent requests, compared with 5-15 business days for "
                "standard requests.",
                None,
            ),
            (
                "Provide Missing Documentation",
                f"If prior auth is pending due to missing info, work with {provider} to "
                "submit required clinical documentation immediately.",
                None,
            ),
            (
                "Appeal if Denied",
                "If denied, your doctor can request a peer-to-peer review (your doctor "
                "talks to the insurance company's doctor) or file a formal appeal with "
                "additional medical justification.",
                None,
            ),
        ),
        documents_needed=[
            "Prior authorization reference/tracking number",
            "Prescription or order for the service/medication",
            "Clinical notes supporting medical necessity",
            "Previous treatments tried (for step therapy requirements)",
            "Insurance policy showing covered services",
            "Doctor's letter of medical necessity",
        ],
        estimated_timeframe="Standard: 5-15 business days; Urgent: 24-72 hours",
        warnings=[
            "Don't schedule procedures without confirmed prior auth",
            "Prior authorizations can expire - check validity dates",
            "Some insurers require prior auth even for generic medications",
            "If you proceed without required prior auth, you may be responsible for full cost",
            "For urgent medical needs, go to the ER - prior auth isn't required for emergencies",
        ],
    )


# ---------------------------------------------------------------------------
# Medical records request
# ---------------------------------------------------------------------------


def build_records(issue: IssueInput) -> ResolutionMap:
    provider = issue.provider_name or "the healthcare provider"

    return ResolutionMap(
        what_is_happening=(
            f"You're trying to obtain your medical records from {provider}. Under HIPAA "
            "(Health Insurance Portability and Accountability Act), you have the legal "
            "right to access your medical records within 30 days of request (or 60 days "
            "for records not stored on-site). Providers can charge reasonable fees for "
            "copies but cannot deny access. Common reasons for needing records: "
            "transferring to a new doctor, reviewing your own health history, or "
            "preparing for a legal matter."
        ),
        who_is_responsible=WhoIsResponsible(
            parties=[
                ResponsibleParty(
                    name=provider,
                    role="Healthcare Provider (Medical Records Department)",
                    contact_method=(
                        "Contact the medical records or health information management "
                        "(HIM) department"
                    ),
                ),
            ],
            primary_contact=(
                f"{provider}'s medical records department, which is often separate "
                "from the main office"
            ),
        ),
        likelihood_of_success=Likelihood.HIGH,
        likelihood_reason=(
            "You have a legal right to your records under HIPAA. Providers must comply. "
            "Delays are usually administrative, not denials."
        ),
        next_steps=_steps(
            (
                "Submit Written Request",
                f"Send a written request to {provider}'s medical records department. "
                "Include: your full name, date of birth, dates of service, specific "
                "records requested, and how you want them delivered (mail, email, "
                "patient portal).",
                "Start immediately",
            ),
            (
                "Complete Authorization Form",
                "Most providers require their own authorization form. Call to request one "
                "or download it from their website. This must be signed and may need "
                "notarization for some requests.",
                None,
            ),
            (
                "Specify What You Need",
                "Be specific: office visit notes, lab results, imaging reports, operative "
                "notes, discharge summaries, etc. Request 'complete medical records' if "
                "unsure.",
                None,
            ),
            (
                "Follow Up at 15 Days",
                "If you haven't heard back in 15 days, call to check status. They have "
                "30 days to comply (60 if records are off-site).",
                "15 days after request",
            ),
            (
                "File Complaint if Delayed",
                "If they don't comply within legal timeframes, you can file a complaint "
                "with the HHS Office for Civil Rights (OCR).",
                None,
            ),
        ),
        documents_needed=[
            "Government-issued photo ID",
            "Completed records request/authorization form",
            "List of specific records or dates needed",
            "Method of delivery preference",
            "Payment for copying fees (if applicable)",
        ],
        estimated_timeframe="15-30 days (legally required)",
        warnings=[
            "Providers can charge reasonable copying fees - ask about costs upfront",
            "Electronic records must be provided in electronic format if you request it",
            "You can request records be sent directly to another provider",
            "Providers cannot withhold records due to unpaid medical bills",
            "You can request amendments to incorrect information in your records",
        ],
    )


# ---------------------------------------------------------------------------
# Pending claim
# ---------------------------------------------------------------------------


def build_claim_pending(issue: IssueInput) -> ResolutionMap:
    insurer = issue.insurer_name or GENERIC_INSURER
    provider = issue.provider_name or GENERIC_PROVIDER

    return ResolutionMap(
        what_is_happening=(
            f'Your insurance claim with {insurer} is in "pending" status, meaning it '
            "hasn't been fully processed yet. Claims can pend for various reasons: "
            "waiting for additional information, coordination of benefits questions, "
            "provider credentialing issues, or simply a backlog. Most claims should "
            "process within 30-45 days. A pending claim does NOT mean it's denied; "
            "it's just not finalized yet."
        ),
        who_is_responsible=WhoIsResponsible(
            parties=[
                ResponsibleParty(
                    name=insurer,
                    role="Insurance Company (Claims Department)",
                    contact_method="Call member services and ask for claims status",
                ),
                ResponsibleParty(
                    name=provider,
                    role="Healthcare Provider",
                    contact_method="Contact billing to verify claim was submitted correctly",
                ),
            ],
            primary_contact=(
                f"{insurer}'s claims department; ask specifically why the claim is pending"
            ),
        ),
        likelihood_of_success=Likelihood.HIGH,
        likelihood_reason=(
            "Most pending claims are eventually processed and paid. The key is "
            "identifying what's holding up processing and addressing it quickly."
        ),
        next_steps=_steps(
            (
                "Get Claim Details",
                f"Call {insurer} and get: claim number, date received, current status, "
                "and specific reason for pending status. Write everything down.",
                "Within 7 days",
            ),
            (
                "Identify the Hold-Up",
                "Common reasons: missing information from provider, coordination of "
                "benefits (COB) questions, medical records needed, or claim under review.",
                None,
            ),
            (
                "Address the Issue",
                f"Work with {provider} and {insurer} to provide whatever is needed. If "
                "COB, complete the COB questionnaire. If records are needed, authorize "
                "their release.",
                "Within 7-14 days",
            ),
            (
                "Request Timeline",
                "Ask the insurance company when you can expect a decision. Most states "
                "require claims to be processed within 30-45 days of receiving all "
                "information.",
                None,
            ),
            (
                "Escalate if Necessary",
                "If the claim pends beyond 45 days with no resolution, ask to escalate to "
                "a supervisor or file a complaint with your state's insurance commissioner.",
                None,
            ),
        ),
        documents_needed=[
            "Claim number and date of service",
            "Insurance member ID and group number",
            "Explanation of Benefits (EOB) if any",
            "Provider's billing statement",
            "Any correspondence from insurance about the claim",
            "Coordination of Benefits form (if applicable)",
        ],
        estimated_timeframe="2-4 weeks once all information is provided",
        warnings=[
            "Don't pay the provider until insurance processes the claim",
            "A pending claim is NOT a denial - don't panic",
            "Keep notes of every call: date, time, representative name, reference numbers",
            "If you have multiple insurance plans, COB must be resolved first",
            "Providers typically can't send you to collections while claims are pending",
        ],
    )
