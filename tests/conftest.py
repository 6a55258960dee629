import os
import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

# ------------------------------------------------------------------
# FORCE TESTING MODE
# Must be set BEFORE importing app.main so database.py builds the
# in-memory SQLite engine (one shared connection via StaticPool).
# ------------------------------------------------------------------
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["SECRET_KEY"] = "test-secret-key-with-enough-length-for-hs256"
os.environ["ENV"] = "test"
os.environ["DISCORD_WEBHOOKS"] = "{}"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ.pop("REDIS_URL", None)
os.environ.pop("DISCORD_DEFAULT_WEBHOOK", None)

from sqlmodel import SQLModel

from app.main import app
from app.core.database import AsyncSessionLocal, engine, init_db
from app.models.enums import AdminRole
from app.services.application_service import create_application
from app.services.auth_service import create_user

PASSWORD = "password123"


@pytest_asyncio.fixture(autouse=True)
async def fresh_db():
    """Every test starts from empty tables."""
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.drop_all)
    await init_db()
    yield


@pytest_asyncio.fixture
async def client():
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as ac:
        yield ac


async def _make_admin(username: str, role: AdminRole = AdminRole.Admin, department: str | None = None):
    async with AsyncSessionLocal() as s:
        return await create_user(s, username=username, password=PASSWORD, role=role, department=department)


async def _login(client, username: str) -> dict:
    res = await client.post("/api/admin/login", json={"username": username, "password": PASSWORD})
    assert res.status_code == 200, res.text
    return {"Authorization": f"Bearer {res.json()['access_token']}"}


@pytest.fixture
def make_admin():
    return _make_admin


@pytest.fixture
def login(client):
    async def _do(username: str) -> dict:
        return await _login(client, username)
    return _do


@pytest_asyncio.fixture
async def admin_headers(client):
    await _make_admin("reviewer", AdminRole.Admin)
    return await _login(client, "reviewer")


@pytest_asyncio.fixture
async def super_headers(client):
    await _make_admin("owner", AdminRole.SuperAdmin)
    return await _login(client, "owner")


async def _make_application(**overrides):
    """Stores one application; keyword overrides are applied after insert."""
    data = {
        "discord_username": overrides.pop("discord_username", "player#1"),
        "department": overrides.pop("department", "ocso"),
        "answers": overrides.pop("answers", [f"answer {i}" for i in range(10)]),
        "applicant_email": overrides.pop("applicant_email", None),
        "applicant_age": overrides.pop("applicant_age", None),
    }
    async with AsyncSessionLocal() as s:
        app_row = await create_application(s, data)
        if overrides:
            for key, value in overrides.items():
                setattr(app_row, key, value)
            s.add(app_row)
            await s.commit()
            await s.refresh(app_row)
        return app_row


@pytest.fixture
def make_application():
    return _make_application
