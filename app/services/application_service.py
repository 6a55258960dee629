# app/services/application_service.py

from datetime import datetime, timedelta
from typing import Iterable, List, Optional
import uuid

from loguru import logger
from sqlmodel import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.clock import as_utc, utcnow
from app.core.errors import NotFoundError
from app.models.application import Application
from app.models.attachment import ApplicationAttachment
from app.models.enums import ApplicationStatus, ApplicationPriority
from app.schemas.application import ApplicationFilters, ApplicationStats

# Quick-transition menu shown on the detail view
PENDING_TRANSITIONS = [
    ApplicationStatus.UnderReview,
    ApplicationStatus.InterviewScheduled,
    ApplicationStatus.Approved,
    ApplicationStatus.Rejected,
]
RESET_TRANSITIONS = [ApplicationStatus.Pending]


def _start_of_day(now: datetime) -> datetime:
    return now.replace(hour=0, minute=0, second=0, microsecond=0)


def dedupe_tags(tags: Iterable[str]) -> List[str]:
    seen = []
    for tag in tags or []:
        tag = (tag or "").strip()
        if tag and tag not in seen:
            seen.append(tag)
    return seen


# ---------------------------------------
# Filtering (pure)
# ---------------------------------------
def date_range_floor(date_range: str, now: Optional[datetime] = None) -> Optional[datetime]:
    now = as_utc(now or utcnow())
    if date_range == "today":
        return _start_of_day(now)
    if date_range == "7days":
        return now - timedelta(days=7)
    if date_range == "30days":
        return now - timedelta(days=30)
    return None


def matches_filters(app: Application, filters: ApplicationFilters, floor: Optional[datetime]) -> bool:
    status = app.status.value if isinstance(app.status, ApplicationStatus) else str(app.status)
    priority = app.priority.value if isinstance(app.priority, ApplicationPriority) else str(app.priority)

    if filters.status != "all" and status != filters.status:
        return False
    if filters.department != "all" and (app.department or "").lower() != filters.department:
        return False
    if filters.priority != "all" and priority != filters.priority:
        return False

    if filters.search:
        needle = filters.search.strip().lower()
        haystack = (app.discord_username, app.applicant_email, app.notes)
        if needle and not any(value and needle in value.lower() for value in haystack):
            return False

    if floor is not None and as_utc(app.created_at) < floor:
        return False

    return True


def filter_applications(
    applications: Iterable[Application],
    filters: ApplicationFilters,
    now: Optional[datetime] = None,
) -> List[Application]:
    floor = date_range_floor(filters.date_range, now)
    return [app for app in applications if matches_filters(app, filters, floor)]


def available_transitions(status: ApplicationStatus) -> List[ApplicationStatus]:
    if ApplicationStatus(status) == ApplicationStatus.Pending:
        return list(PENDING_TRANSITIONS)
    return list(RESET_TRANSITIONS)


# ---------------------------------------
# Reads
# ---------------------------------------
async def list_applications(session: AsyncSession) -> List[Application]:
    result = await session.execute(select(Application).order_by(Application.created_at.desc()))
    return result.scalars().all()


async def get_application(session: AsyncSession, application_id) -> Application:
    if not isinstance(application_id, uuid.UUID):
        try:
            application_id = uuid.UUID(str(application_id))
        except ValueError:
            raise NotFoundError("Application not found")

    app = await session.get(Application, application_id)
    if not app:
        raise NotFoundError("Application not found")
    return app


def compute_stats(applications: Iterable[Application], now: Optional[datetime] = None) -> ApplicationStats:
    now = as_utc(now or utcnow())
    today = _start_of_day(now)
    week = now - timedelta(days=7)
    month = now - timedelta(days=30)

    stats = ApplicationStats()
    for app in applications:
        stats.total += 1

        status = ApplicationStatus(app.status).value
        setattr(stats, status, getattr(stats, status) + 1)

        priority = ApplicationPriority(app.priority)
        if priority == ApplicationPriority.High:
            stats.high_priority += 1
        elif priority == ApplicationPriority.Urgent:
            stats.urgent_priority += 1

        if app.interview_scheduled:
            stats.interviews_scheduled += 1

        created = as_utc(app.created_at)
        if created >= today:
            stats.today_applications += 1
        if created >= week:
            stats.this_week_applications += 1
        if created >= month:
            stats.this_month_applications += 1

    return stats


async def get_application_stats(session: AsyncSession, now: Optional[datetime] = None) -> ApplicationStats:
    return compute_stats(await list_applications(session), now)


async def list_attachments(session: AsyncSession, application_id: uuid.UUID) -> List[ApplicationAttachment]:
    result = await session.execute(
        select(ApplicationAttachment)
        .where(ApplicationAttachment.application_id == application_id)
        .order_by(ApplicationAttachment.created_at.asc())
    )
    return result.scalars().all()


# ---------------------------------------
# Writes
# ---------------------------------------
async def create_application(session: AsyncSession, data: dict) -> Application:
    """
    Inserts a freshly submitted application. New rows always start as
    pending / normal priority.
    """
    app = Application(
        discord_username=data["discord_username"].strip(),
        department=data["department"],
        answers=list(data.get("answers") or []),
        tags=dedupe_tags(data.get("tags") or []),
        applicant_email=data.get("applicant_email"),
        applicant_age=data.get("applicant_age"),
        previous_experience=data.get("previous_experience"),
        timezone=data.get("timezone"),
        availability=data.get("availability"),
        status=ApplicationStatus.Pending,
        priority=ApplicationPriority.Normal,
    )

    session.add(app)

    try:
        await session.commit()
        await session.refresh(app)
        return app
    except Exception:
        await session.rollback()
        raise


async def update_status(
    session: AsyncSession,
    application_id,
    status: ApplicationStatus,
    reviewer_id: uuid.UUID,
    notes: Optional[str] = None,
    final_decision_reason: Optional[str] = None,
    now: Optional[datetime] = None,
) -> Application:
    """
    Writes the new status plus reviewer and review time, then returns the
    row as re-read from the store. Concurrent writers: last write wins.
    """
    now = now or utcnow()
    app = await get_application(session, application_id)

    app.status = ApplicationStatus(status)
    app.reviewed_by = reviewer_id
    app.reviewed_at = now
    app.updated_at = now

    if notes is not None:
        app.notes = notes or None
    if final_decision_reason is not None:
        app.final_decision_reason = final_decision_reason or None

    session.add(app)

    try:
        await session.commit()
    except Exception:
        await session.rollback()
        logger.exception(f"Failed to update status of application {app.id}")
        raise

    await session.refresh(app)
    return app


async def add_attachment(
    session: AsyncSession,
    application_id,
    data: dict,
    uploaded_by: Optional[uuid.UUID] = None,
) -> ApplicationAttachment:
    app = await get_application(session, application_id)

    filename = (data.get("filename") or "").strip()
    file_url = (data.get("file_url") or "").strip()
    if not filename or not file_url:
        raise ValueError("Attachment filename and file_url are required")

    attachment = ApplicationAttachment(
        application_id=app.id,
        filename=filename,
        file_url=file_url,
        file_size=data.get("file_size"),
        mime_type=data.get("mime_type"),
        uploaded_by=uploaded_by,
    )
    session.add(attachment)
    await session.commit()
    await session.refresh(attachment)
    return attachment


async def delete_attachment(session: AsyncSession, application_id: uuid.UUID, attachment_id: uuid.UUID) -> None:
    attachment = await session.get(ApplicationAttachment, attachment_id)
    if not attachment or attachment.application_id != application_id:
        raise NotFoundError("Attachment not found")

    await session.delete(attachment)
    await session.commit()
