# app/services/template_service.py

from datetime import datetime
from typing import Dict, List, Optional
import re
import uuid

from loguru import logger
from sqlmodel import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import IntegrityError

from app.core.clock import utcnow
from app.core.config import settings
from app.core.departments import DEFAULT_QUESTIONS, get_department
from app.core.errors import NotFoundError
from app.models.template import ApplicationTemplate, EmailTemplate

SIGNATURE = f"{settings.COMMUNITY_NAME} Management Team"

DEFAULT_EMAIL_TEMPLATES = [
    {
        "name": "Application Received",
        "subject": "Application Received - {department}",
        "body": (
            "Dear {applicant_name},\n\n"
            "Thank you for your interest in joining {department}. We have received your "
            "application and it is currently under review.\n\n"
            "Application Details:\n"
            "- Department: {department}\n"
            "- Submitted: {application_date}\n"
            "- Status: Pending Review\n\n"
            "Our team will review your application and get back to you within 3-5 business days.\n\n"
            f"Best regards,\n{SIGNATURE}"
        ),
        "variables": ["applicant_name", "department", "application_date"],
    },
    {
        "name": "Application Approved",
        "subject": "Congratulations! Your application has been approved",
        "body": (
            "Dear {applicant_name},\n\n"
            "Congratulations! We are pleased to inform you that your application to join "
            "{department} has been approved.\n\n"
            "Next Steps:\n"
            "1. Join our Discord server if you haven't already\n"
            "2. Attend the next orientation session\n"
            "3. Complete your training requirements\n\n"
            "Best regards,\n{reviewer_name}\n{department} Management"
        ),
        "variables": ["applicant_name", "department", "reviewer_name"],
    },
    {
        "name": "Application Rejected",
        "subject": "Application Update - {department}",
        "body": (
            "Dear {applicant_name},\n\n"
            "Thank you for your interest in joining {department}. After careful review, we have "
            "decided not to move forward with your application at this time.\n\n"
            "We encourage you to reapply in the future.\n\n"
            "Best regards,\n{reviewer_name}\n{department} Management"
        ),
        "variables": ["applicant_name", "department", "reviewer_name"],
    },
]


def sample_variables(now: Optional[datetime] = None) -> Dict[str, str]:
    return {
        "applicant_name": "John Doe",
        "department": "Orlando City Police Department",
        "status": "approved",
        "application_date": (now or utcnow()).strftime("%d-%m-%Y"),
        "reviewer_name": "Admin User",
    }


def render_template(subject: str, body: str, variables: List[str], values: Dict[str, str]) -> Dict[str, str]:
    """
    Literal {name} token replacement for each declared variable. A variable
    without a value is left as its {name} token.
    """
    for name in variables:
        token = "{" + name + "}"
        replacement = str(values.get(name, token))
        subject = subject.replace(token, replacement)
        body = body.replace(token, replacement)
    return {"subject": subject, "body": body}


def detect_variables(*texts: str) -> List[str]:
    found = []
    for text in texts:
        for name in re.findall(r"\{([a-zA-Z_][a-zA-Z0-9_]*)\}", text or ""):
            if name not in found:
                found.append(name)
    return found


# ---------------------------------------
# Email templates
# ---------------------------------------
async def list_email_templates(session: AsyncSession) -> List[EmailTemplate]:
    result = await session.execute(select(EmailTemplate).order_by(EmailTemplate.name))
    return result.scalars().all()


async def get_email_template(session: AsyncSession, template_id: uuid.UUID) -> EmailTemplate:
    template = await session.get(EmailTemplate, template_id)
    if not template:
        raise NotFoundError("Template not found")
    return template


async def save_email_template(
    session: AsyncSession,
    data: dict,
    template_id: Optional[uuid.UUID] = None,
) -> EmailTemplate:
    if template_id:
        template = await get_email_template(session, template_id)
    else:
        template = EmailTemplate(name="", subject="", body="")

    for field in ("name", "subject", "body", "is_active"):
        if data.get(field) is not None:
            setattr(template, field, data[field])

    if not template.name.strip() or not template.subject.strip() or not template.body.strip():
        raise ValueError("Name, subject and body are required")

    if data.get("variables") is not None:
        template.variables = list(data["variables"])
    elif not template_id:
        template.variables = detect_variables(template.subject, template.body)

    template.updated_at = utcnow()
    session.add(template)

    try:
        await session.commit()
    except IntegrityError:
        await session.rollback()
        raise ValueError("A template with this name already exists")

    await session.refresh(template)
    return template


async def delete_email_template(session: AsyncSession, template_id: uuid.UUID) -> None:
    template = await get_email_template(session, template_id)
    await session.delete(template)
    await session.commit()


async def seed_default_email_templates(session: AsyncSession) -> int:
    existing = {t.name for t in await list_email_templates(session)}
    created = 0
    for data in DEFAULT_EMAIL_TEMPLATES:
        if data["name"] not in existing:
            session.add(EmailTemplate(**data))
            created += 1
    if created:
        await session.commit()
        logger.info(f"Seeded {created} default email templates")
    return created


# ---------------------------------------
# Application templates (question sets)
# ---------------------------------------
async def list_application_templates(session: AsyncSession, department: Optional[str] = None) -> List[ApplicationTemplate]:
    query = select(ApplicationTemplate).order_by(ApplicationTemplate.department, ApplicationTemplate.name)
    if department:
        query = query.where(ApplicationTemplate.department == department)
    result = await session.execute(query)
    return result.scalars().all()


async def save_application_template(
    session: AsyncSession,
    data: dict,
    template_id: Optional[uuid.UUID] = None,
    created_by: Optional[uuid.UUID] = None,
) -> ApplicationTemplate:
    if template_id:
        template = await session.get(ApplicationTemplate, template_id)
        if not template:
            raise NotFoundError("Template not found")
    else:
        template = ApplicationTemplate(name="", department="", created_by=created_by)

    for field in ("name", "department", "description", "requirements", "is_active"):
        if data.get(field) is not None:
            setattr(template, field, data[field])

    if data.get("questions") is not None:
        questions = [q.strip() for q in data["questions"] if q and q.strip()]
        if not questions:
            raise ValueError("A template needs at least one question")
        template.questions = questions

    if not template.name.strip():
        raise ValueError("Template name is required")
    if get_department(template.department) is None:
        raise ValueError(f"Unknown department '{template.department}'")
    if not template.questions:
        raise ValueError("A template needs at least one question")

    template.updated_at = utcnow()
    session.add(template)
    await session.commit()
    await session.refresh(template)
    return template


async def questions_for_department(session: AsyncSession, department_id: str) -> List[str]:
    """Newest active template for the department wins, else the built-in set."""
    result = await session.execute(
        select(ApplicationTemplate)
        .where(
            ApplicationTemplate.department == department_id,
            ApplicationTemplate.is_active == True,  # noqa: E712
        )
        .order_by(ApplicationTemplate.updated_at.desc())
        .limit(1)
    )
    template = result.scalar_one_or_none()
    if template and template.questions:
        return list(template.questions)
    return list(DEFAULT_QUESTIONS.get(department_id, []))
