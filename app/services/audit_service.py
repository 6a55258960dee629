# app/services/audit_service.py

from datetime import date, datetime, timedelta
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional
from uuid import UUID

from loguru import logger
from sqlalchemy import event, inspect
from sqlalchemy.orm import Session
from sqlmodel import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.clock import utcnow
from app.models.admin_user import AdminUser
from app.models.audit import AuditLog
from app.models.enums import AuditAction

# Tables whose writes are recorded. Sessions and the audit table itself are not.
TRACKED_TABLES = {
    "applications",
    "admin_users",
    "application_comments",
    "system_settings",
    "email_templates",
    "application_templates",
}

# Never copied into a snapshot
REDACTED_COLUMNS = {"password_hash"}

AUDIT_PAGE_SIZE = 100
CHANGE_VALUE_BUDGET = 20
NO_CHANGES = "no changes tracked"


# ===================================================================
# WRITE SIDE: flush hook acting as the database trigger
# ===================================================================
def _jsonable(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, UUID):
        return str(value)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, dict):
        return {k: _jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple, set)):
        return [_jsonable(v) for v in value]
    return value


def _table_name(obj) -> Optional[str]:
    return getattr(obj, "__tablename__", None)


def _primary_key(obj) -> Optional[str]:
    identity = inspect(obj).mapper.primary_key_from_instance(obj)
    if not identity or identity[0] is None:
        return None
    return str(identity[0])


def _snapshot(obj) -> Dict[str, Any]:
    state = inspect(obj)
    return {
        attr.key: _jsonable(attr.value)
        for attr in state.attrs
        if attr.key not in REDACTED_COLUMNS
    }


def _changed_columns(obj) -> tuple[Dict[str, Any], Dict[str, Any]]:
    old_values: Dict[str, Any] = {}
    new_values: Dict[str, Any] = {}
    for attr in inspect(obj).attrs:
        if attr.key in REDACTED_COLUMNS:
            continue
        history = attr.history
        if not history.has_changes():
            continue
        old_values[attr.key] = _jsonable(history.deleted[0]) if history.deleted else None
        new_values[attr.key] = _jsonable(history.added[0]) if history.added else None
    return old_values, new_values


def _record_changes(session: Session, flush_context, instances) -> None:
    actor_id = session.info.get("actor_id")
    ip_address = session.info.get("ip_address")
    user_agent = session.info.get("user_agent")

    entries: List[AuditLog] = []

    def entry(action: AuditAction, obj, old, new):
        entries.append(AuditLog(
            user_id=actor_id,
            action=action.value,
            resource_type=_table_name(obj),
            resource_id=_primary_key(obj),
            old_values=old,
            new_values=new,
            ip_address=ip_address,
            user_agent=user_agent,
        ))

    for obj in session.new:
        if _table_name(obj) in TRACKED_TABLES:
            entry(AuditAction.Create, obj, None, _snapshot(obj))

    for obj in session.dirty:
        if _table_name(obj) in TRACKED_TABLES and session.is_modified(obj, include_collections=False):
            old, new = _changed_columns(obj)
            if new:
                entry(AuditAction.Update, obj, old, new)

    for obj in session.deleted:
        if _table_name(obj) in TRACKED_TABLES:
            entry(AuditAction.Delete, obj, _snapshot(obj), None)

    for log_entry in entries:
        session.add(log_entry)


_hooks_registered = False


def register_audit_hooks() -> None:
    """Attach the audit recorder to every ORM session (sync and async)."""
    global _hooks_registered
    if _hooks_registered:
        return
    event.listen(Session, "before_flush", _record_changes)
    _hooks_registered = True
    logger.info("Audit trail hooks registered for: {}", ", ".join(sorted(TRACKED_TABLES)))


def bind_actor(
    session: AsyncSession,
    actor_id: Optional[UUID],
    ip_address: Optional[str] = None,
    user_agent: Optional[str] = None,
) -> None:
    """Attribute every write made through this session to the given admin."""
    session.info["actor_id"] = actor_id
    if ip_address:
        session.info["ip_address"] = ip_address
    if user_agent:
        session.info["user_agent"] = user_agent


# ===================================================================
# READ SIDE: audit trail viewer
# ===================================================================
async def list_audit_logs(
    session: AsyncSession,
    action: Optional[str] = None,
    resource_type: Optional[str] = None,
    user_id: Optional[UUID] = None,
    days: Optional[int] = None,
    limit: int = AUDIT_PAGE_SIZE,
    now: Optional[datetime] = None,
) -> List[dict]:
    query = (
        select(AuditLog, AdminUser.username, AdminUser.role)
        .join(AdminUser, AdminUser.id == AuditLog.user_id, isouter=True)
        .order_by(AuditLog.created_at.desc())
        .limit(limit)
    )

    if action:
        query = query.where(AuditLog.action == action.lower())
    if resource_type:
        query = query.where(AuditLog.resource_type == resource_type)
    if user_id:
        query = query.where(AuditLog.user_id == user_id)
    if days:
        threshold = (now or utcnow()) - timedelta(days=days)
        query = query.where(AuditLog.created_at >= threshold)

    result = await session.execute(query)

    rows = []
    for log, username, role in result.all():
        rows.append({
            "id": log.id,
            "user_id": log.user_id,
            "username": username,
            "user_role": role.value if isinstance(role, Enum) else role,
            "action": log.action,
            "resource_type": log.resource_type,
            "resource_id": log.resource_id,
            "old_values": log.old_values,
            "new_values": log.new_values,
            "ip_address": log.ip_address,
            "user_agent": log.user_agent,
            "created_at": log.created_at,
            "changes": format_changes(log.old_values, log.new_values),
        })
    return rows


def search_logs(rows: Iterable[dict], term: Optional[str]) -> List[dict]:
    rows = list(rows)
    if not term:
        return rows

    needle = term.lower()

    def matches(row: dict) -> bool:
        haystack = (
            row.get("action"),
            row.get("resource_type"),
            row.get("username"),
            row.get("resource_id"),
        )
        return any(value and needle in str(value).lower() for value in haystack)

    return [row for row in rows if matches(row)]


def _clip(value: Any, budget: int) -> str:
    text = "null" if value is None else str(value)
    return text[:budget]


def format_changes(
    old_values: Optional[Dict[str, Any]],
    new_values: Optional[Dict[str, Any]],
    budget: int = CHANGE_VALUE_BUDGET,
) -> List[str] | str:
    """
    Fields whose value differs between the two snapshots, rendered as
    `field: old → new` with each side clipped to `budget` characters.
    """
    if not old_values or not new_values:
        return NO_CHANGES

    changes = []
    for key, new in new_values.items():
        old = old_values.get(key)
        if old != new:
            changes.append(f"{key}: {_clip(old, budget)} → {_clip(new, budget)}")
    return changes or NO_CHANGES
