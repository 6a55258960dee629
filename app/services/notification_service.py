# app/services/notification_service.py

from typing import List, Optional
import uuid

from sqlalchemy import delete, update
from sqlmodel import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import NotFoundError
from app.models.admin_user import AdminUser
from app.models.enums import AdminRole, NotificationType
from app.models.notification import Notification

NOTIFICATION_PAGE_SIZE = 20


async def create_notification(
    session: AsyncSession,
    user_id: uuid.UUID,
    title: str,
    message: str,
    type: NotificationType = NotificationType.Info,
    action_url: Optional[str] = None,
) -> Notification:
    notification = Notification(
        user_id=user_id,
        title=title,
        message=message,
        type=type,
        action_url=action_url,
    )
    session.add(notification)
    await session.commit()
    await session.refresh(notification)
    return notification


async def list_notifications(
    session: AsyncSession,
    user_id: uuid.UUID,
    unread_only: bool = False,
    limit: int = NOTIFICATION_PAGE_SIZE,
) -> List[Notification]:
    query = (
        select(Notification)
        .where(Notification.user_id == user_id)
        .order_by(Notification.created_at.desc())
        .limit(limit)
    )
    if unread_only:
        query = query.where(Notification.is_read == False)  # noqa: E712

    result = await session.execute(query)
    return result.scalars().all()


def unread_count(notifications: List[Notification]) -> int:
    return sum(1 for n in notifications if not n.is_read)


async def _owned(session: AsyncSession, notification_id: uuid.UUID, user_id: uuid.UUID) -> Notification:
    notification = await session.get(Notification, notification_id)
    # Someone else's notification looks exactly like a missing one
    if not notification or notification.user_id != user_id:
        raise NotFoundError("Notification not found")
    return notification


async def mark_as_read(session: AsyncSession, notification_id: uuid.UUID, user_id: uuid.UUID) -> Notification:
    notification = await _owned(session, notification_id, user_id)
    if not notification.is_read:
        notification.is_read = True
        session.add(notification)
        await session.commit()
        await session.refresh(notification)
    return notification


async def mark_all_as_read(session: AsyncSession, user_id: uuid.UUID) -> int:
    result = await session.execute(
        update(Notification)
        .where(Notification.user_id == user_id, Notification.is_read == False)  # noqa: E712
        .values(is_read=True)
    )
    await session.commit()
    return result.rowcount or 0


async def delete_notification(session: AsyncSession, notification_id: uuid.UUID, user_id: uuid.UUID) -> None:
    notification = await _owned(session, notification_id, user_id)
    await session.delete(notification)
    await session.commit()


async def delete_all_read(session: AsyncSession, user_id: uuid.UUID) -> int:
    result = await session.execute(
        delete(Notification)
        .where(Notification.user_id == user_id, Notification.is_read == True)  # noqa: E712
    )
    await session.commit()
    return result.rowcount or 0


async def notify_reviewers(
    session: AsyncSession,
    title: str,
    message: str,
    department: Optional[str] = None,
    type: NotificationType = NotificationType.Info,
    action_url: Optional[str] = None,
) -> int:
    """
    Fans a notification out to every active admin. Department heads only
    hear about their own department.
    """
    result = await session.execute(select(AdminUser).where(AdminUser.is_active == True))  # noqa: E712
    recipients = [
        user for user in result.scalars().all()
        if user.role != AdminRole.DepartmentHead or user.department == department
    ]

    for user in recipients:
        session.add(Notification(
            user_id=user.id,
            title=title,
            message=message,
            type=type,
            action_url=action_url,
        ))
    await session.commit()
    return len(recipients)
