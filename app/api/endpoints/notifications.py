# app/api/endpoints/notifications.py

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from uuid import UUID

from app.api.deps import get_current_user, get_db_session
from app.core.errors import NotFoundError
from app.models.admin_user import AdminUser
from app.schemas.notification import NotificationList, NotificationRead
from app.services import notification_service

router = APIRouter(prefix="/api/notifications", tags=["Notifications"])


@router.get("/", response_model=NotificationList)
async def get_notifications(
    unread_only: bool = Query(False),
    session: AsyncSession = Depends(get_db_session),
    current_user: AdminUser = Depends(get_current_user),
):
    items = await notification_service.list_notifications(session, current_user.id, unread_only=unread_only)
    return NotificationList(
        items=[NotificationRead.model_validate(n) for n in items],
        unread_count=notification_service.unread_count(items),
    )


@router.post("/{notification_id}/read", response_model=NotificationRead)
async def mark_read(
    notification_id: UUID,
    session: AsyncSession = Depends(get_db_session),
    current_user: AdminUser = Depends(get_current_user),
):
    try:
        return await notification_service.mark_as_read(session, notification_id, current_user.id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.post("/read-all")
async def mark_all_read(
    session: AsyncSession = Depends(get_db_session),
    current_user: AdminUser = Depends(get_current_user),
):
    updated = await notification_service.mark_all_as_read(session, current_user.id)
    return {"updated": updated}


@router.delete("/read")
async def clear_read(
    session: AsyncSession = Depends(get_db_session),
    current_user: AdminUser = Depends(get_current_user),
):
    deleted = await notification_service.delete_all_read(session, current_user.id)
    return {"deleted": deleted}


@router.delete("/{notification_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_notification(
    notification_id: UUID,
    session: AsyncSession = Depends(get_db_session),
    current_user: AdminUser = Depends(get_current_user),
):
    try:
        await notification_service.delete_notification(session, notification_id, current_user.id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return None
