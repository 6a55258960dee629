# app/services/bulk_service.py

from datetime import datetime
from typing import Optional
import uuid

from loguru import logger
from sqlmodel import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.clock import as_utc, utcnow
from app.models.application import Application
from app.models.enums import ApplicationStatus, ApplicationPriority
from app.schemas.application import BulkActionRequest, BulkActionResult
from app.services.application_service import dedupe_tags

# Actions that must go through the confirmation step that collects a reason
REASON_REQUIRED = {"approve", "reject"}


def _require_value(request: BulkActionRequest, label: str) -> str:
    value = (request.value or "").strip()
    if not value:
        raise ValueError(f"{label} is required for '{request.action}'")
    return value


def _parse_interview_date(raw: str) -> datetime:
    try:
        parsed = datetime.fromisoformat(raw.replace("Z", "+00:00"))
    except ValueError:
        raise ValueError(f"Invalid interview date '{raw}'. Use an ISO date-time.")
    return as_utc(parsed)


def _build_mutation(request: BulkActionRequest, reviewer_id: uuid.UUID, now: datetime):
    """
    Validates the request up front and returns a function applying the
    change to one row. Validation errors are raised before any row is read.
    """
    action = request.action

    if action in REASON_REQUIRED:
        reason = (request.reason or "").strip()
        if not reason:
            raise ValueError(f"A reason is required to {action} applications")
        status = ApplicationStatus.Approved if action == "approve" else ApplicationStatus.Rejected

        def decide(app: Application):
            app.status = status
            app.final_decision_reason = reason
            app.reviewed_by = reviewer_id
            app.reviewed_at = now
        return decide

    if action == "set_status":
        raw = _require_value(request, "Status")
        try:
            status = ApplicationStatus(raw.lower())
        except ValueError:
            raise ValueError(f"Unknown status '{raw}'")

        def set_status(app: Application):
            app.status = status
            app.reviewed_by = reviewer_id
            app.reviewed_at = now
        return set_status

    if action == "schedule_interview":
        interview_date = _parse_interview_date(_require_value(request, "Interview date"))

        def schedule(app: Application):
            app.status = ApplicationStatus.InterviewScheduled
            app.interview_scheduled = True
            app.interview_date = interview_date
            app.reviewed_by = reviewer_id
            app.reviewed_at = now
        return schedule

    if action == "set_priority":
        raw = _require_value(request, "Priority")
        try:
            priority = ApplicationPriority(raw.lower())
        except ValueError:
            raise ValueError(f"Unknown priority '{raw}'")

        def set_priority(app: Application):
            app.priority = priority
        return set_priority

    if action == "add_tag":
        tag = _require_value(request, "Tag")

        def add_tag(app: Application):
            # Assign a new list so the JSON column is flagged dirty
            app.tags = dedupe_tags([*(app.tags or []), tag])
        return add_tag

    if action == "remove_tag":
        tag = _require_value(request, "Tag")

        def remove_tag(app: Application):
            app.tags = [t for t in (app.tags or []) if t != tag]
        return remove_tag

    raise ValueError(f"Unsupported bulk action '{action}'")


async def apply_bulk_action(
    session: AsyncSession,
    request: BulkActionRequest,
    reviewer_id: uuid.UUID,
    now: Optional[datetime] = None,
) -> BulkActionResult:
    """
    Applies one action to every selected application inside a single
    transaction. Rows are locked while they are read and rewritten, so tag
    edits are a set union / difference rather than a racing read-then-write.
    """
    now = now or utcnow()
    ids = set(request.application_ids)
    if not ids:
        raise ValueError("No applications selected")

    mutate = _build_mutation(request, reviewer_id, now)

    result = await session.execute(
        select(Application)
        .where(Application.id.in_(ids))
        .with_for_update()
    )
    apps = result.scalars().all()

    updated = []
    for app in apps:
        mutate(app)
        app.updated_at = now
        session.add(app)
        updated.append(app.id)

    try:
        await session.commit()
    except Exception:
        await session.rollback()
        logger.exception(f"Bulk action '{request.action}' failed for {len(ids)} applications")
        raise

    missing = sorted(ids - set(updated), key=str)
    if missing:
        logger.warning(f"Bulk action '{request.action}': {len(missing)} applications not found")

    logger.info(f"Bulk action '{request.action}' applied to {len(updated)} applications")

    return BulkActionResult(
        action=request.action,
        requested=len(ids),
        updated=sorted(updated, key=str),
        missing=missing,
    )
