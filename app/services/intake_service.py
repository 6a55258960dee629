# app/services/intake_service.py

from datetime import datetime
from typing import List, Optional

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.clock import utcnow
from app.core.config import settings
from app.core.departments import Department, get_open_department
from app.models.enums import NotificationType
from app.schemas.intake import IntakeResult, IntakeSubmission
from app.services import webhook_service
from app.services.application_service import create_application
from app.services.notification_service import notify_reviewers
from app.services.settings_service import get_setting_value
from app.services.template_service import questions_for_department

SPACER = "\u200b"
# Discord rejects embed field values over 1024 characters
FIELD_VALUE_LIMIT = 1024


class IntakeClosedError(RuntimeError):
    """New applications are switched off (maintenance mode)."""


def _clip(value: str, limit: int = FIELD_VALUE_LIMIT) -> str:
    return value if len(value) <= limit else value[: limit - 3] + "..."


# ---------------------------------------
# Validation (runs before any network call)
# ---------------------------------------
def validate_submission(data: IntakeSubmission, questions: List[str]) -> Department:
    department = get_open_department(data.department)
    if department is None:
        raise ValueError("Please select an open department.")

    if not (data.discord_username or "").strip():
        raise ValueError("Please provide your Discord username.")

    if len(data.answers) != len(questions) or any(not (a or "").strip() for a in data.answers):
        raise ValueError("Please answer all questions.")

    return department


# ---------------------------------------
# Discord payload
# ---------------------------------------
def build_webhook_payload(
    data: IntakeSubmission,
    department: Department,
    questions: List[str],
    now: Optional[datetime] = None,
) -> dict:
    now = now or utcnow()

    fields = [
        {"name": "📱 Discord Username", "value": data.discord_username.strip(), "inline": True},
        {"name": "🏢 Department", "value": department.full_name, "inline": True},
        {"name": "📅 Application Date", "value": now.strftime("%m/%d/%Y"), "inline": True},
    ]

    if data.applicant_email:
        fields.append({"name": "📧 Email", "value": str(data.applicant_email), "inline": True})
    if data.applicant_age is not None:
        fields.append({"name": "🎂 Age", "value": str(data.applicant_age), "inline": True})
    if data.timezone:
        fields.append({"name": "🌍 Timezone", "value": data.timezone, "inline": True})

    fields.append({"name": SPACER, "value": SPACER, "inline": False})

    for question, answer in zip(questions, data.answers):
        fields.append({
            "name": f"❓ {question}",
            "value": _clip(answer.strip() or "No answer provided"),
            "inline": False,
        })

    embed = {
        "title": f"🏛️ {settings.COMMUNITY_NAME} - {department.name} Application",
        "color": department.color,
        "description": department.motto,
        "fields": fields,
        "footer": {"text": f"{settings.COMMUNITY_NAME} {department.name} Team"},
        "timestamp": now.isoformat(),
    }

    payload = {"embeds": [embed]}
    if settings.WEBHOOK_USERNAME:
        payload["username"] = settings.WEBHOOK_USERNAME
    if settings.WEBHOOK_AVATAR_URL:
        payload["avatar_url"] = settings.WEBHOOK_AVATAR_URL
    return payload


async def resolve_webhook_url(session: AsyncSession, department_id: str) -> Optional[str]:
    if not await get_setting_value(session, "discord_webhook_enabled", True):
        return None
    return webhook_service.webhook_url_for(department_id)


# ---------------------------------------
# Submission
# ---------------------------------------
async def submit_application(
    session: AsyncSession,
    data: IntakeSubmission,
    now: Optional[datetime] = None,
) -> IntakeResult:
    """
    Validate, post to Discord, then store the row.

    The webhook is the authoritative delivery: if it fails, WebhookDeliveryError
    propagates and nothing is stored. The insert is best-effort; a failure is
    logged and the submission still succeeds.
    """
    if await get_setting_value(session, "maintenance_mode", False):
        raise IntakeClosedError("Applications are temporarily closed for maintenance.")

    questions = await questions_for_department(session, data.department)
    department = validate_submission(data, questions)

    webhook_sent = False
    url = await resolve_webhook_url(session, department.id)
    if url:
        payload = build_webhook_payload(data, department, questions, now)
        await webhook_service.send_webhook(url, payload)
        webhook_sent = True
    else:
        logger.info(f"No webhook configured for '{department.id}', skipping Discord delivery")

    try:
        app = await create_application(session, data.model_dump())
        application_id = app.id
    except Exception as e:
        logger.error(f"Application from {data.discord_username} was delivered but not stored: {e}")
        return IntakeResult(webhook_sent=webhook_sent, persisted=False)

    try:
        await notify_reviewers(
            session,
            title="New application",
            message=f"{data.discord_username} applied to {department.name}",
            department=department.id,
            type=NotificationType.Info,
            action_url=f"/admin/applications/{application_id}",
        )
    except Exception as e:
        await session.rollback()
        logger.warning(f"Could not notify reviewers about application {application_id}: {e}")

    logger.info(f"Application {application_id} submitted for {department.id}")
    return IntakeResult(application_id=application_id, webhook_sent=webhook_sent, persisted=True)
