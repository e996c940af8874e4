import uuid

import httpx
import pytest

from carenav.common.enums import ComplaintRecipient, PhoneScriptTarget
from carenav.core.documents.generator import (
    generate_appeal_letter,
    generate_complaint_letter,
    generate_phone_script,
)
from carenav.core.resolution.schemas import IssueInput


class FakeTextClient:
    def __init__(self, reply: str = "", error: Exception | None = None):
        self.reply = reply
        self.error = error
        self.prompts: list[tuple[str, str]] = []

    @property
    def is_mock(self) -> bool:
        return False

    async def complete_text(self, system, user, temperature=0.7, max_tokens=2048):
        self.prompts.append((system, user))
        if self.error:
            raise self.error
        return self.reply


ISSUE = IssueInput(
    category="denial",
    description="Blue Cross denied my MRI",
    insurer_name="Blue Cross",
    provider_name="City Imaging",
    amount_involved=850,
)


# ---------- Endpoints ----------


@pytest.mark.asyncio
async def test_appeal_letter(client, denial_issue):
    response = await client.post(
        "/api/v1/generate/appeal-letter", json={"issueId": denial_issue["issueId"]}
    )
    assert response.status_code == 200
    document = response.json()["document"]
    assert document["title"] == "Insurance Appeal Letter"
    assert "[YOUR NAME]" in document["content"]
    assert "Blue Cross" in document["content"]
    assert "certified mail" in document["instructions"]


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "target,title",
    [
        ("insurance", "Phone Script - Insurance Company"),
        ("provider", "Phone Script - Healthcare Provider"),
        ("both", "Phone Script - Insurance & Provider"),
    ],
)
async def test_phone_script(client, denial_issue, target, title):
    response = await client.post(
        "/api/v1/generate/phone-script",
        json={"issueId": denial_issue["issueId"], "target": target},
    )
    assert response.status_code == 200
    document = response.json()["document"]
    assert document["title"] == title
    assert "BEFORE THE CALL" in document["content"]


@pytest.mark.asyncio
async def test_phone_script_invalid_target(client, denial_issue):
    response = await client.post(
        "/api/v1/generate/phone-script",
        json={"issueId": denial_issue["issueId"], "target": "lawyer"},
    )
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_complaint_letter(client, denial_issue):
    response = await client.post(
        "/api/v1/generate/complaint-letter",
        json={"issueId": denial_issue["issueId"], "recipient": "cms"},
    )
    assert response.status_code == 200
    document = response.json()["document"]
    assert document["title"] == "Complaint Letter - Centers for Medicare & Medicaid Services (CMS)"
    assert "formal complaint" in document["content"]


@pytest.mark.asyncio
async def test_generate_unknown_issue(client):
    response = await client.post(
        "/api/v1/generate/appeal-letter", json={"issueId": str(uuid.uuid4())}
    )
    assert response.status_code == 404


# ---------- Generators ----------


@pytest.mark.asyncio
async def test_appeal_letter_uses_model_text():
    client = FakeTextClient(reply="  Dear Appeals Department, ...  ")
    document = await generate_appeal_letter(ISSUE, client=client)
    assert document.content == "Dear Appeals Department, ..."
    system, user = client.prompts[0]
    assert "appeal letter" in system
    assert "Insurance Company: Blue Cross" in user
    assert "Amount Involved: $850.00" in user


@pytest.mark.asyncio
async def test_appeal_letter_template_on_failure():
    client = FakeTextClient(error=httpx.ReadTimeout("timed out"))
    document = await generate_appeal_letter(ISSUE, client=client)
    assert "[MEMBER ID]" in document.content
    assert "City Imaging" in document.content
    assert "$850.00" in document.content


@pytest.mark.asyncio
async def test_phone_script_target_names_callee():
    client = FakeTextClient(reply="script")
    await generate_phone_script(ISSUE, PhoneScriptTarget.PROVIDER, client=client)
    assert "phone script for calling City Imaging" in client.prompts[0][1]


@pytest.mark.asyncio
async def test_complaint_template_mentions_parties():
    document = await generate_complaint_letter(
        ISSUE, ComplaintRecipient.HOSPITAL_PATIENT_ADVOCATE, client=FakeTextClient(reply="")
    )
    assert document.title == "Complaint Letter - Hospital Patient Advocate"
    assert "Blue Cross, City Imaging" in document.content
