import pytest

from app.models.enums import AdminRole
from app.services.audit_service import NO_CHANGES, format_changes, search_logs


def test_changes_list_only_differing_keys():
    old = {"status": "pending", "priority": "normal"}
    new = {"status": "approved", "priority": "normal"}
    assert format_changes(old, new) == ["status: pending → approved"]


def test_change_values_are_clipped_to_twenty_characters():
    old = {"notes": "a" * 50}
    new = {"notes": None}
    assert format_changes(old, new) == [f"notes: {'a' * 20} → null"]


def test_missing_snapshot_means_no_changes_tracked():
    assert format_changes(None, {"status": "pending"}) == NO_CHANGES
    assert format_changes({"status": "pending"}, None) == NO_CHANGES


def test_identical_snapshots_mean_no_changes_tracked():
    snapshot = {"status": "pending", "priority": "normal"}
    assert format_changes(snapshot, dict(snapshot)) == NO_CHANGES


def test_search_matches_action_table_username_and_resource():
    rows = [
        {"action": "update", "resource_type": "applications", "username": "reviewer", "resource_id": "abc"},
        {"action": "create", "resource_type": "admin_users", "username": None, "resource_id": "xyz"},
    ]
    assert search_logs(rows, "REVIEW") == [rows[0]]
    assert search_logs(rows, "xyz") == [rows[1]]
    assert search_logs(rows, None) == rows


@pytest.mark.asyncio
async def test_status_change_is_recorded_with_actor(client, admin_headers, make_application):
    app_row = await make_application()

    await client.patch(
        f"/api/applications/{app_row.id}/status",
        json={"status": "approved"},
        headers=admin_headers,
    )

    res = await client.get(
        "/api/audit-logs/?action=update&resource_type=applications",
        headers=admin_headers,
    )
    assert res.status_code == 200
    rows = res.json()
    assert len(rows) == 1
    assert rows[0]["username"] == "reviewer"
    assert rows[0]["resource_id"] == str(app_row.id)
    assert "status: pending → approved" in rows[0]["changes"]


@pytest.mark.asyncio
async def test_created_rows_have_no_tracked_changes(client, admin_headers, make_application):
    await make_application()

    res = await client.get("/api/audit-logs/?action=create&search=applications", headers=admin_headers)
    assert res.status_code == 200
    rows = res.json()
    assert len(rows) == 1
    assert rows[0]["changes"] == NO_CHANGES
    assert rows[0]["user_id"] is None


@pytest.mark.asyncio
async def test_password_hash_never_lands_in_the_trail(client, admin_headers):
    res = await client.get("/api/audit-logs/?resource_type=admin_users", headers=admin_headers)
    assert res.status_code == 200
    assert res.json()
    for row in res.json():
        assert "password_hash" not in (row["new_values"] or {})


@pytest.mark.asyncio
async def test_department_heads_cannot_read_the_trail(client, make_admin, login):
    await make_admin("head", AdminRole.DepartmentHead, department="ocpd")
    headers = await login("head")

    res = await client.get("/api/audit-logs/", headers=headers)
    assert res.status_code == 403
    assert res.json()["detail"] == "You don't have permission to view the audit log."
