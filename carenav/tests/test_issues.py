import uuid

import pytest
from sqlalchemy import select

from carenav.config import Settings, settings
from carenav.core.resolution.ai_generator import AIResolutionGenerator
from carenav.core.resolution.factory import get_resolution_generator
from carenav.db.models.resolution import Resolution
from carenav.main import app


@pytest.mark.asyncio
async def test_create_issue(client):
    response = await client.post(
        "/api/v1/issues",
        json={
            "category": "denial",
            "description": "My insurance denied my MRI claim",
            "insurerName": "Blue Cross",
            "hasDocuments": False,
        },
    )
    assert response.status_code == 201
    data = response.json()
    uuid.UUID(data["issueId"])

    resolution = data["resolution"]
    assert "denied" in resolution["whatIsHappening"]
    assert "Blue Cross" in resolution["whatIsHappening"]
    assert resolution["likelihoodOfSuccess"] == "high"
    assert resolution["nextSteps"][0]["order"] == 1
    assert resolution["whoIsResponsible"]["parties"][0]["contactMethod"]


@pytest.mark.asyncio
async def test_create_issue_sets_session_cookie(client):
    response = await client.post(
        "/api/v1/issues",
        json={"category": "records", "description": "Need my records"},
    )
    assert response.status_code == 201
    cookie = response.headers["set-cookie"]
    assert f"{settings.SESSION_COOKIE_NAME}=" in cookie
    assert "HttpOnly" in cookie
    assert f"Max-Age={30 * 24 * 60 * 60}" in cookie


@pytest.mark.asyncio
async def test_create_issue_unknown_category(client):
    response = await client.post(
        "/api/v1/issues",
        json={"category": "unknown", "description": "Some issue"},
    )
    assert response.status_code == 400
    assert response.json()["detail"] == "Unsupported issue type: unknown"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "body",
    [
        {"description": "Missing category"},
        {"category": "bill"},
    ],
)
async def test_create_issue_missing_fields(client, body):
    response = await client.post("/api/v1/issues", json=body)
    assert response.status_code == 422


@pytest.mark.asyncio
@pytest.mark.parametrize("description", ["", "   "])
async def test_create_issue_blank_description(client, description):
    response = await client.post(
        "/api/v1/issues",
        json={"category": "denial", "description": description},
    )
    assert response.status_code == 400
    assert response.json()["detail"] == "A description of the issue is required"


@pytest.mark.asyncio
async def test_create_issue_non_finite_amount(client):
    response = await client.post(
        "/api/v1/issues",
        content=b'{"category": "bill", "description": "Huge bill", "amountInvolved": Infinity}',
        headers={"Content-Type": "application/json"},
    )
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_create_issue_large_amount(client):
    response = await client.post(
        "/api/v1/issues",
        json={"category": "bill", "description": "Huge bill", "amountInvolved": 12_345_678_901.25},
    )
    assert response.status_code == 201
    assert response.json()["resolution"]["likelihoodOfSuccess"] == "high"

    issue = await client.get(f"/api/v1/issues/{response.json()['issueId']}")
    assert issue.json()["amountInvolved"] == 12_345_678_901.25


@pytest.mark.asyncio
async def test_stored_generator_names_fallback_strategy(client, db_session):
    app.dependency_overrides[get_resolution_generator] = lambda: AIResolutionGenerator()

    response = await client.post(
        "/api/v1/issues",
        json={"category": "prior_auth", "description": "My MRI needs approval"},
    )
    assert response.status_code == 201

    result = await db_session.execute(
        select(Resolution).where(Resolution.issue_id == uuid.UUID(response.json()["issueId"]))
    )
    assert result.scalar_one().generator == "rules"


@pytest.mark.asyncio
async def test_get_issue(client, denial_issue):
    response = await client.get(f"/api/v1/issues/{denial_issue['issueId']}")
    assert response.status_code == 200
    data = response.json()
    assert data["id"] == denial_issue["issueId"]
    assert data["category"] == "denial"
    assert data["insurerName"] == "Blue Cross"
    assert data["amountInvolved"] == 850
    assert data["hasDocuments"] is False
    assert data["resolution"] == denial_issue["resolution"]


@pytest.mark.asyncio
async def test_get_issue_not_found(client):
    response = await client.get(f"/api/v1/issues/{uuid.uuid4()}")
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_list_issues_for_session(client):
    first = await client.post(
        "/api/v1/issues", json={"category": "bill", "description": "Confusing bill"}
    )
    second = await client.post(
        "/api/v1/issues", json={"category": "claim_pending", "description": "Stuck claim"}
    )

    response = await client.get("/api/v1/issues")
    assert response.status_code == 200
    data = response.json()
    assert data["total"] == 2
    # Newest first
    assert [i["id"] for i in data["issues"]] == [
        second.json()["issueId"],
        first.json()["issueId"],
    ]


@pytest.mark.asyncio
async def test_list_issues_other_session(client, denial_issue):
    client.cookies.clear()
    response = await client.get(
        "/api/v1/issues", headers={"Cookie": f"{settings.SESSION_COOKIE_NAME}=someone-else"}
    )
    assert response.status_code == 200
    assert response.json()["total"] == 0


@pytest.mark.asyncio
async def test_health(client):
    response = await client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["service"] == "carenav"
    modes = {i["name"]: i["mode"] for i in data["integrations"]}
    assert modes == {"ai": "mock", "storage": "local"}


def test_settings_do_not_define_app_url():
    assert "APP_URL" not in Settings.model_fields
