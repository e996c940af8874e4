import uuid

import pytest
from sqlalchemy import select

from carenav.db.models.lead import LeadCapture


@pytest.mark.asyncio
async def test_create_lead(client, db_session, denial_issue):
    response = await client.post(
        "/api/v1/leads",
        json={
            "issueId": denial_issue["issueId"],
            "email": "pat@example.com",
            "phone": "555-0100",
            "preferredContact": "phone",
        },
    )
    assert response.status_code == 201
    lead_id = uuid.UUID(response.json()["leadId"])

    lead = (await db_session.execute(select(LeadCapture).where(LeadCapture.id == lead_id))).scalar_one()
    assert lead.email == "pat@example.com"
    assert lead.preferred_contact == "phone"
    assert lead.notes is None


@pytest.mark.asyncio
async def test_create_lead_defaults_to_email(client, denial_issue):
    response = await client.post(
        "/api/v1/leads",
        json={"issueId": denial_issue["issueId"], "email": "pat@example.com"},
    )
    assert response.status_code == 201


@pytest.mark.asyncio
async def test_create_lead_unknown_issue(client):
    response = await client.post(
        "/api/v1/leads",
        json={"issueId": str(uuid.uuid4()), "email": "pat@example.com"},
    )
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_create_lead_invalid_email(client, denial_issue):
    response = await client.post(
        "/api/v1/leads",
        json={"issueId": denial_issue["issueId"], "email": "not-an-email"},
    )
    assert response.status_code == 422
