import pytest

from app.core.database import AsyncSessionLocal
from app.core.departments import STAFF_QUESTIONS
from app.models.enums import AdminRole
from app.services.template_service import (
    detect_variables,
    questions_for_department,
    render_template,
    seed_default_email_templates,
)


def test_render_replaces_declared_variables_only():
    rendered = render_template(
        "Welcome to {department}",
        "Dear {applicant_name}, signed {reviewer_name}",
        ["applicant_name", "department", "reviewer_name"],
        {"applicant_name": "John Doe", "department": "OCPD"},
    )
    assert rendered["subject"] == "Welcome to OCPD"
    # A declared variable without a value stays as its token
    assert rendered["body"] == "Dear John Doe, signed {reviewer_name}"


def test_detect_variables_keeps_first_seen_order():
    assert detect_variables("Hi {name}", "{dept} / {name}") == ["name", "dept"]


@pytest.mark.asyncio
async def test_default_templates_and_preview(client, admin_headers):
    async with AsyncSessionLocal() as s:
        assert await seed_default_email_templates(s) == 3

    res = await client.get("/api/templates/email", headers=admin_headers)
    assert res.status_code == 200
    templates = {t["name"]: t for t in res.json()}
    assert set(templates) == {"Application Received", "Application Approved", "Application Rejected"}

    approved = templates["Application Approved"]
    res = await client.post(
        f"/api/templates/email/{approved['id']}/preview",
        json={"values": {"applicant_name": "Jane"}},
        headers=admin_headers,
    )
    assert res.status_code == 200
    assert res.json()["body"].startswith("Dear Jane,")
    assert "{department}" not in res.json()["body"]


@pytest.mark.asyncio
async def test_email_template_crud(client, admin_headers):
    res = await client.post(
        "/api/templates/email",
        json={"name": "Interview", "subject": "Interview for {department}", "body": "Hi {applicant_name}"},
        headers=admin_headers,
    )
    assert res.status_code == 201
    created = res.json()
    assert created["variables"] == ["department", "applicant_name"]

    duplicate = await client.post(
        "/api/templates/email",
        json={"name": "Interview", "subject": "x", "body": "y"},
        headers=admin_headers,
    )
    assert duplicate.status_code == 400

    res = await client.put(
        f"/api/templates/email/{created['id']}",
        json={"subject": "Interview invitation"},
        headers=admin_headers,
    )
    assert res.json()["subject"] == "Interview invitation"

    res = await client.delete(f"/api/templates/email/{created['id']}", headers=admin_headers)
    assert res.status_code == 204


@pytest.mark.asyncio
async def test_application_template_overrides_questions(client, admin_headers):
    async with AsyncSessionLocal() as s:
        assert await questions_for_department(s, "staff") == STAFF_QUESTIONS

    res = await client.post(
        "/api/templates/application",
        json={"name": "Short staff form", "department": "staff", "questions": ["Why staff?", "Any questions?"]},
        headers=admin_headers,
    )
    assert res.status_code == 201
    template_id = res.json()["id"]

    catalog = await client.get("/api/intake/departments/staff")
    assert catalog.json()["questions"] == ["Why staff?", "Any questions?"]

    res = await client.delete(f"/api/templates/application/{template_id}", headers=admin_headers)
    assert res.json()["is_active"] is False

    catalog = await client.get("/api/intake/departments/staff")
    assert catalog.json()["questions"] == STAFF_QUESTIONS


@pytest.mark.asyncio
async def test_application_template_validation(client, admin_headers):
    res = await client.post(
        "/api/templates/application",
        json={"name": "Broken", "department": "nasa", "questions": ["?"]},
        headers=admin_headers,
    )
    assert res.status_code == 400


@pytest.mark.asyncio
async def test_department_heads_cannot_manage_templates(client, make_admin, login):
    await make_admin("head", AdminRole.DepartmentHead, department="ocso")
    headers = await login("head")

    res = await client.get("/api/templates/email", headers=headers)
    assert res.status_code == 403
