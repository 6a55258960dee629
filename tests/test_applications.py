import pytest

from app.core.database import AsyncSessionLocal
from app.models.enums import ApplicationPriority
from app.services.application_service import get_application


@pytest.mark.asyncio
async def test_dashboard_requires_login(client):
    res = await client.get("/api/applications/")
    assert res.status_code in (401, 403)


@pytest.mark.asyncio
async def test_list_is_newest_first_and_filtered(client, admin_headers, make_application):
    await make_application(discord_username="first#1", department="staff")
    await make_application(discord_username="second#2", department="ocso")

    res = await client.get("/api/applications/", headers=admin_headers)
    assert res.status_code == 200
    assert [a["discord_username"] for a in res.json()] == ["second#2", "first#1"]

    res = await client.get("/api/applications/?department=staff", headers=admin_headers)
    assert [a["discord_username"] for a in res.json()] == ["first#1"]

    res = await client.get("/api/applications/?status=bogus", headers=admin_headers)
    assert res.status_code == 400


@pytest.mark.asyncio
async def test_stats_endpoint(client, admin_headers, make_application):
    await make_application()
    await make_application(priority=ApplicationPriority.Urgent)

    res = await client.get("/api/applications/stats", headers=admin_headers)
    assert res.status_code == 200
    stats = res.json()
    assert stats["total"] == 2
    assert stats["pending"] == 2
    assert stats["urgent_priority"] == 1
    assert stats["today_applications"] == 2


@pytest.mark.asyncio
async def test_detail_includes_transitions_and_questions(client, admin_headers, make_application):
    app_row = await make_application()

    res = await client.get(f"/api/applications/{app_row.id}", headers=admin_headers)
    assert res.status_code == 200
    body = res.json()
    assert body["available_transitions"] == ["under_review", "interview_scheduled", "approved", "rejected"]
    assert len(body["questions"]) == 10
    assert body["comments"] == []

    res = await client.get("/api/applications/00000000-0000-0000-0000-000000000000", headers=admin_headers)
    assert res.status_code == 404


@pytest.mark.asyncio
async def test_status_update_records_reviewer(client, admin_headers, make_application):
    app_row = await make_application()

    res = await client.patch(
        f"/api/applications/{app_row.id}/status",
        json={"status": "under_review", "notes": "Looks promising"},
        headers=admin_headers,
    )
    assert res.status_code == 200
    body = res.json()
    assert body["status"] == "under_review"
    assert body["notes"] == "Looks promising"
    assert body["reviewed_by"] is not None
    assert body["reviewed_at"] is not None

    detail = await client.get(f"/api/applications/{app_row.id}", headers=admin_headers)
    assert detail.json()["available_transitions"] == ["pending"]


@pytest.mark.asyncio
async def test_two_approvals_last_reason_wins(client, admin_headers, make_application):
    app_row = await make_application()
    url = f"/api/applications/{app_row.id}/status"

    first = await client.patch(url, json={"status": "approved", "final_decision_reason": "first"}, headers=admin_headers)
    second = await client.patch(url, json={"status": "approved", "final_decision_reason": "second"}, headers=admin_headers)

    assert first.status_code == 200
    assert second.status_code == 200

    async with AsyncSessionLocal() as s:
        stored = await get_application(s, app_row.id)
    assert stored.status.value == "approved"
    assert stored.final_decision_reason == "second"


@pytest.mark.asyncio
async def test_invalid_status_is_rejected(client, admin_headers, make_application):
    app_row = await make_application()
    res = await client.patch(
        f"/api/applications/{app_row.id}/status",
        json={"status": "hired"},
        headers=admin_headers,
    )
    assert res.status_code == 422


@pytest.mark.asyncio
async def test_attachments(client, admin_headers, make_application):
    app_row = await make_application()
    url = f"/api/applications/{app_row.id}/attachments"

    res = await client.post(
        url,
        json={"filename": "id.png", "file_url": "https://files.test/id.png", "file_size": 1024, "mime_type": "image/png"},
        headers=admin_headers,
    )
    assert res.status_code == 201
    attachment_id = res.json()["id"]

    listed = await client.get(url, headers=admin_headers)
    assert [a["filename"] for a in listed.json()] == ["id.png"]

    res = await client.delete(f"{url}/{attachment_id}", headers=admin_headers)
    assert res.status_code == 204
    assert (await client.get(url, headers=admin_headers)).json() == []
