import pytest
from unittest.mock import AsyncMock, patch
from sqlmodel import select

from app.core.config import settings
from app.core.database import AsyncSessionLocal
from app.core.departments import DEPARTMENT_QUESTIONS, get_department
from app.core.errors import WebhookDeliveryError
from app.models.application import Application
from app.models.enums import AdminRole
from app.schemas.intake import IntakeSubmission
from app.services.intake_service import build_webhook_payload

WEBHOOK = "https://discord.test/api/webhooks/1/abc"


def ocso_payload(**extra):
    return {
        "department": "ocso",
        "discord_username": "player#1",
        "answers": [f"Answer {i}" for i in range(1, 11)],
        **extra,
    }


async def stored_applications():
    async with AsyncSessionLocal() as s:
        result = await s.execute(select(Application))
        return result.scalars().all()


def test_payload_has_identity_fields_and_one_field_per_question():
    data = IntakeSubmission(**ocso_payload())
    payload = build_webhook_payload(data, get_department("ocso"), DEPARTMENT_QUESTIONS)

    embed = payload["embeds"][0]
    names = [f["name"] for f in embed["fields"]]

    assert "📱 Discord Username" in names
    assert "🏢 Department" in names
    assert "📅 Application Date" in names
    assert len([n for n in names if n.startswith("❓ ")]) == 10
    assert embed["fields"][0]["value"] == "player#1"
    assert embed["color"] == get_department("ocso").color
    assert "timestamp" in embed


def test_payload_includes_optional_identity_fields_only_when_given():
    data = IntakeSubmission(**ocso_payload(applicant_age=19, timezone="EST"))
    embed = build_webhook_payload(data, get_department("ocso"), DEPARTMENT_QUESTIONS)["embeds"][0]
    names = [f["name"] for f in embed["fields"]]

    assert "🎂 Age" in names
    assert "🌍 Timezone" in names
    assert "📧 Email" not in names


@pytest.mark.asyncio
async def test_submit_posts_webhook_and_stores_row(client, monkeypatch):
    monkeypatch.setitem(settings.DISCORD_WEBHOOKS, "ocso", WEBHOOK)

    with patch("app.services.webhook_service.send_webhook", new=AsyncMock(return_value=204)) as mock_send:
        res = await client.post("/api/intake/applications", json=ocso_payload())

    assert res.status_code == 201
    body = res.json()
    assert body["status"] == "success"
    assert body["webhook_sent"] is True
    assert body["persisted"] is True

    url, payload = mock_send.call_args[0]
    assert url == WEBHOOK
    question_fields = [f for f in payload["embeds"][0]["fields"] if f["name"].startswith("❓ ")]
    assert len(question_fields) == 10

    rows = await stored_applications()
    assert len(rows) == 1
    assert rows[0].status.value == "pending"
    assert rows[0].priority.value == "normal"


@pytest.mark.asyncio
async def test_webhook_failure_is_reported_and_nothing_stored(client, monkeypatch):
    monkeypatch.setitem(settings.DISCORD_WEBHOOKS, "ocso", WEBHOOK)

    failing = AsyncMock(side_effect=WebhookDeliveryError("Discord webhook returned HTTP 500", 500))
    with patch("app.services.webhook_service.send_webhook", new=failing):
        res = await client.post("/api/intake/applications", json=ocso_payload())

    assert res.status_code == 502
    assert await stored_applications() == []


@pytest.mark.asyncio
async def test_missing_webhook_is_skipped_and_row_still_stored(client):
    with patch("app.services.webhook_service.send_webhook", new=AsyncMock()) as mock_send:
        res = await client.post("/api/intake/applications", json=ocso_payload())

    assert res.status_code == 201
    assert res.json()["webhook_sent"] is False
    assert res.json()["persisted"] is True
    mock_send.assert_not_called()
    assert len(await stored_applications()) == 1


@pytest.mark.asyncio
async def test_store_failure_does_not_fail_submission(client, monkeypatch):
    monkeypatch.setitem(settings.DISCORD_WEBHOOKS, "ocso", WEBHOOK)

    with patch("app.services.webhook_service.send_webhook", new=AsyncMock(return_value=204)), \
         patch("app.services.intake_service.create_application", new=AsyncMock(side_effect=RuntimeError("db down"))):
        res = await client.post("/api/intake/applications", json=ocso_payload())

    assert res.status_code == 201
    assert res.json()["webhook_sent"] is True
    assert res.json()["persisted"] is False
    assert res.json()["application_id"] is None


@pytest.mark.asyncio
async def test_missing_answer_is_rejected_before_any_network_call(client, monkeypatch):
    monkeypatch.setitem(settings.DISCORD_WEBHOOKS, "ocso", WEBHOOK)
    payload = ocso_payload()
    payload["answers"][3] = "   "

    with patch("app.services.webhook_service.send_webhook", new=AsyncMock()) as mock_send:
        res = await client.post("/api/intake/applications", json=payload)

    assert res.status_code == 400
    assert res.json()["detail"] == "Please answer all questions."
    mock_send.assert_not_called()


@pytest.mark.asyncio
async def test_blank_handle_and_unknown_department_are_rejected(client):
    res = await client.post("/api/intake/applications", json=ocso_payload(discord_username="   "))
    assert res.status_code == 422

    res = await client.post("/api/intake/applications", json=ocso_payload(department="nasa"))
    assert res.status_code == 400


@pytest.mark.asyncio
async def test_maintenance_mode_closes_intake(client):
    from app.services.settings_service import upsert_setting

    async with AsyncSessionLocal() as s:
        await upsert_setting(s, "maintenance_mode", True)

    res = await client.post("/api/intake/applications", json=ocso_payload())
    assert res.status_code == 503


@pytest.mark.asyncio
async def test_new_application_notifies_reviewers(client, make_admin):
    admin = await make_admin("reviewer")
    head = await make_admin("fhp_head", role=AdminRole.DepartmentHead, department="fhp")

    res = await client.post("/api/intake/applications", json=ocso_payload())
    assert res.status_code == 201

    from app.services.notification_service import list_notifications

    async with AsyncSessionLocal() as s:
        assert len(await list_notifications(s, admin.id)) == 1
        # Department heads only hear about their own department
        assert await list_notifications(s, head.id) == []


@pytest.mark.asyncio
async def test_department_catalog_lists_questions(client):
    res = await client.get("/api/intake/departments")
    assert res.status_code == 200
    ids = [d["id"] for d in res.json()]
    assert ids[0] == "staff"
    assert "ocso" in ids

    res = await client.get("/api/intake/departments/staff")
    assert res.status_code == 200
    assert len(res.json()["questions"]) == 10

    res = await client.get("/api/intake/departments/unknown")
    assert res.status_code == 404
