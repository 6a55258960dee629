from datetime import timedelta

import pytest
from sqlmodel import select

from app.core.clock import utcnow
from app.core.database import AsyncSessionLocal
from app.core.rbac import Capability, can, has_role
from app.models.enums import AdminRole
from app.models.user_session import UserSession
from app.services.auth_service import create_login_response, get_user_by_username


async def session_rows():
    async with AsyncSessionLocal() as s:
        return (await s.execute(select(UserSession))).scalars().all()


@pytest.mark.asyncio
async def test_login_issues_token_and_session_row(client, make_admin):
    await make_admin("reviewer")

    res = await client.post("/api/admin/login", json={"username": "reviewer", "password": "password123"})
    assert res.status_code == 200
    body = res.json()
    assert body["token_type"] == "bearer"
    assert body["expires_in"] == 24 * 3600
    assert body["user"]["username"] == "reviewer"
    assert body["user"]["login_count"] == 1
    assert "password_hash" not in body["user"]
    assert len(await session_rows()) == 1


@pytest.mark.asyncio
async def test_wrong_password_and_inactive_user(client, make_admin):
    user = await make_admin("reviewer")

    res = await client.post("/api/admin/login", json={"username": "reviewer", "password": "nope"})
    assert res.status_code == 401

    async with AsyncSessionLocal() as s:
        stored = await get_user_by_username(s, "reviewer")
        stored.is_active = False
        s.add(stored)
        await s.commit()

    res = await client.post("/api/admin/login", json={"username": user.username, "password": "password123"})
    assert res.status_code == 401


@pytest.mark.asyncio
async def test_session_check(client, admin_headers):
    res = await client.get("/api/admin/session", headers=admin_headers)
    assert res.status_code == 200
    body = res.json()
    assert body["authenticated"] is True
    assert body["roles"] == ["admin"]
    assert "manage_settings" not in body["capabilities"]

    res = await client.get("/api/admin/session")
    assert res.json() == {"authenticated": False, "user": None, "roles": [], "capabilities": []}


@pytest.mark.asyncio
async def test_session_older_than_a_day_is_cleared(client, make_admin):
    user = await make_admin("reviewer")

    async with AsyncSessionLocal() as s:
        stale = await create_login_response(s, user, now=utcnow() - timedelta(hours=25))
    headers = {"Authorization": f"Bearer {stale.access_token}"}
    assert len(await session_rows()) == 1

    res = await client.get("/api/admin/session", headers=headers)
    assert res.json()["authenticated"] is False
    assert await session_rows() == []

    res = await client.get("/api/applications/", headers=headers)
    assert res.status_code == 401


@pytest.mark.asyncio
async def test_logout_revokes_the_token(client, admin_headers):
    res = await client.post("/api/admin/logout", headers=admin_headers)
    assert res.status_code == 204

    res = await client.get("/api/admin/me", headers=admin_headers)
    assert res.status_code == 401
    assert await session_rows() == []


@pytest.mark.asyncio
async def test_garbage_token_is_rejected(client):
    res = await client.get("/api/admin/me", headers={"Authorization": "Bearer not-a-jwt"})
    assert res.status_code == 401


def test_super_admin_passes_every_role_check():
    for role in AdminRole:
        assert has_role(AdminRole.SuperAdmin, role)

    assert has_role("admin", "admin")
    assert not has_role(AdminRole.Admin, AdminRole.SuperAdmin)
    assert not has_role(AdminRole.DepartmentHead, AdminRole.Admin)
    assert not has_role("janitor", AdminRole.Admin)


def test_capability_table():
    class User:
        def __init__(self, role):
            self.role = role

    assert can(User(AdminRole.SuperAdmin), Capability.ManageSettings)
    assert can(User(AdminRole.Admin), Capability.ManageTemplates)
    assert not can(User(AdminRole.Admin), Capability.ManageSettings)
    assert not can(User(AdminRole.DepartmentHead), Capability.ViewAuditLog)
    assert can(User(AdminRole.DepartmentHead), Capability.BulkUpdateApplications)


@pytest.mark.asyncio
async def test_login_is_rate_limited(client, make_admin):
    from app.core.rate_limiter import limiter

    await make_admin("reviewer")
    limiter.reset()
    limiter.enabled = True
    try:
        codes = [
            (await client.post("/api/admin/login", json={"username": "reviewer", "password": "nope"})).status_code
            for _ in range(11)
        ]
    finally:
        limiter.enabled = False
        limiter.reset()

    assert codes[:10] == [401] * 10
    assert codes[10] == 429
