from datetime import datetime, timezone

import pytest

from app.models.application import Application
from app.models.enums import ApplicationPriority, ApplicationStatus
from app.services.export_service import CSV_HEADER, mailto_link, print_html, to_csv

CREATED = datetime(2026, 10, 1, 12, 0, tzinfo=timezone.utc)


def build(handle, email=None, age=None):
    return Application(
        discord_username=handle,
        department="ocso",
        answers=[],
        status=ApplicationStatus.Pending,
        priority=ApplicationPriority.Normal,
        applicant_email=email,
        applicant_age=age,
        created_at=CREATED,
        updated_at=CREATED,
    )


def test_csv_has_seven_columns_and_one_row_per_application():
    apps = [build("a#1", "a@example.com", 18), build("b#2")]
    lines = to_csv(apps).split("\n")

    assert lines[0] == "Discord Username,Department,Status,Priority,Applied Date,Email,Age"
    assert len(CSV_HEADER) == 7
    assert len(lines) == 1 + len(apps)
    assert lines[1] == "a#1,ocso,pending,normal,10/01/2026,a@example.com,18"
    assert lines[2] == "b#2,ocso,pending,normal,10/01/2026,,"


def test_empty_export_is_just_the_header():
    assert to_csv([]) == ",".join(CSV_HEADER)


def test_mailto_skips_applicants_without_email():
    apps = [build("a#1", "a@example.com"), build("b#2"), build("c#3", "c@example.com")]
    assert mailto_link(apps) == "mailto:a@example.com,c@example.com"


def test_print_view_renders_rows_and_prints_on_load():
    html = print_html([build("a#1", "a@example.com")])

    assert "window.print()" in html
    assert "a@example.com" in html
    assert "<table>" in html


@pytest.mark.asyncio
async def test_export_endpoint_matches_filtered_count(client, admin_headers, make_application):
    await make_application(discord_username="x#1", department="staff")
    await make_application(discord_username="y#2", department="ocso")
    await make_application(discord_username="z#3", department="ocso")

    res = await client.get("/api/applications/export.csv?department=ocso", headers=admin_headers)
    assert res.status_code == 200
    assert res.headers["content-type"].startswith("text/csv")
    assert len(res.text.split("\n")) == 1 + 2

    res = await client.get("/api/applications/mailto", headers=admin_headers)
    assert res.json() == {"href": "mailto:", "recipients": 0}

    res = await client.get("/api/applications/print", headers=admin_headers)
    assert res.status_code == 200
    assert "window.print()" in res.text
