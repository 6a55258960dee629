from datetime import datetime, timedelta, timezone

import pytest

from app.models.application import Application
from app.models.enums import ApplicationPriority, ApplicationStatus
from app.services.analytics_service import aggregate

NOW = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)


def build(department, status, days_ago):
    created = NOW - timedelta(days=days_ago)
    return Application(
        discord_username="p#1",
        department=department,
        answers=[],
        status=status,
        priority=ApplicationPriority.Normal,
        created_at=created,
        updated_at=created,
    )


@pytest.fixture
def apps():
    return [
        build("ocso", ApplicationStatus.Pending, 0),
        build("ocso", ApplicationStatus.Approved, 1),
        build("staff", ApplicationStatus.Rejected, 1),
        build("fhp", ApplicationStatus.Pending, 20),
        build("fwc", ApplicationStatus.Pending, 60),
    ]


def test_seven_day_window(apps):
    summary = aggregate(apps, 7, NOW)

    assert summary["total"] == 3
    assert len(summary["daily"]) == 7
    assert summary["daily"][-1] == {"date": "2026-10-19", "applications": 1}
    assert summary["daily"][-2] == {"date": "2026-10-18", "applications": 2}
    assert summary["daily"][0]["applications"] == 0
    assert summary["by_status"] == {"pending": 1, "approved": 1, "rejected": 1}
    assert summary["by_department"] == {"ocso": 2, "staff": 1}


def test_daily_buckets_are_capped_at_fourteen_days(apps):
    summary = aggregate(apps, 90, NOW)

    assert summary["total"] == 5
    assert len(summary["daily"]) == 14
    # Rows older than the buckets still count towards the totals
    assert sum(d["applications"] for d in summary["daily"]) == 3
    assert summary["by_department"]["fwc"] == 1


def test_unsupported_window(apps):
    with pytest.raises(ValueError):
        aggregate(apps, 14, NOW)


@pytest.mark.asyncio
async def test_analytics_endpoint(client, admin_headers, make_application):
    await make_application()

    res = await client.get("/api/analytics/?days=30", headers=admin_headers)
    assert res.status_code == 200
    body = res.json()
    assert body["total"] == 1
    assert len(body["daily"]) == 14
    assert body["stats"]["total"] == 1

    res = await client.get("/api/analytics/?days=5", headers=admin_headers)
    assert res.status_code == 400
