from collections.abc import AsyncGenerator

import httpx
import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from carenav.common.rate_limit import limiter
from carenav.config import settings
from carenav.core.resolution.rule_based import RuleBasedResolutionGenerator
from carenav.db.base import Base
from carenav.db.models import *  # noqa: F401,F403 - ensure all models loaded

# In-memory SQLite shared by every connection of one test's engine
TEST_DATABASE_URL = "sqlite+aiosqlite://"


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
async def db_session(test_engine) -> AsyncGenerator[AsyncSession, None]:
    session_factory = async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False
    )
    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest.fixture
async def client(db_session):
    from carenav.api.deps import get_db
    from carenav.core.resolution.factory import get_resolution_generator
    from carenav.main import app

    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_resolution_generator] = RuleBasedResolutionGenerator

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture(autouse=True)
def test_settings(monkeypatch, tmp_path):
    """Mock AI, temporary storage and a fresh rate limiter for every test."""
    monkeypatch.setattr(settings, "AI_API_KEY", "mock_test_key")
    monkeypatch.setattr(settings, "STORAGE_LOCAL_PATH", str(tmp_path / "storage"))
    monkeypatch.setattr(settings, "RATE_LIMIT_ENABLED", True)
    limiter.reset()
    yield
    limiter.reset()


@pytest.fixture
async def denial_issue(client) -> dict:
    resp = await client.post(
        "/api/v1/issues",
        json={
            "category": "denial",
            "description": "My insurance denied my MRI claim",
            "insurerName": "Blue Cross",
            "providerName": "City Imaging",
            "amountInvolved": 850,
            "dateOfService": "2026-03-14",
        },
    )
    assert resp.status_code == 201
    return resp.json()


@pytest.fixture
def live_ai(monkeypatch):
    """Run AIClient in live mode against a scripted completions endpoint.

    Returns a setter for the endpoint's reply; the setter returns the list of
    requests the endpoint has received.
    """
    reply = {"status_code": 200, "json": {}}
    received: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        received.append(request)
        return httpx.Response(reply["status_code"], json=reply["json"])

    real_async_client = httpx.AsyncClient

    def scripted_client(*args, **kwargs):
        return real_async_client(*args, transport=httpx.MockTransport(handler), **kwargs)

    monkeypatch.setattr(settings, "AI_API_KEY", "sk-live-test")
    monkeypatch.setattr(httpx, "AsyncClient", scripted_client)

    def respond(body, status_code: int = 200) -> list[httpx.Request]:
        reply["json"] = body
        reply["status_code"] = status_code
        return received

    return respond
