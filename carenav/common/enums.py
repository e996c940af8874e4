import enum


class IssueCategory(str, enum.Enum):
    DENIAL = "denial"
    BILL = "bill"
    PRIOR_AUTH = "prior_auth"
    RECORDS = "records"
    CLAIM_PENDING = "claim_pending"


ISSUE_CATEGORY_LABELS: dict[str, str] = {
    IssueCategory.DENIAL.value: "Insurance Denial",
    IssueCategory.BILL.value: "Medical Bill / EOB Issue",
    IssueCategory.PRIOR_AUTH.value: "Prior Authorization Issue",
    IssueCategory.RECORDS.value: "Medical Records Request",
    IssueCategory.CLAIM_PENDING.value: "Pending Insurance Claim",
}


def category_label(category: str) -> str:
    return ISSUE_CATEGORY_LABELS.get(category, category)


class Likelihood(str, enum.Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class ResolutionStrategy(str, enum.Enum):
    AUTO = "auto"
    RULES = "rules"
    AI = "ai"


class MessageRole(str, enum.Enum):
    USER = "user"
    ASSISTANT = "assistant"


class ContactPreference(str, enum.Enum):
    EMAIL = "email"
    PHONE = "phone"
    TEXT = "text"


class PhoneScriptTarget(str, enum.Enum):
    INSURANCE = "insurance"
    PROVIDER = "provider"
    BOTH = "both"


class ComplaintRecipient(str, enum.Enum):
    STATE_COMMISSIONER = "state_commissioner"
    CMS = "cms"
    HOSPITAL_PATIENT_ADVOCATE = "hospital_patient_advocate"


class DocumentType(str, enum.Enum):
    EOB = "eob"
    DENIAL_LETTER = "denial_letter"
    BILL = "bill"
    INSURANCE_CARD = "insurance_card"
    MEDICAL_RECORDS = "medical_records"
    OTHER = "other"
