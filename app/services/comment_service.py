# app/services/comment_service.py

from typing import List
import uuid

from sqlmodel import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import NotFoundError, PermissionDeniedError
from app.models.admin_user import AdminUser
from app.models.comment import ApplicationComment
from app.services.application_service import get_application


async def list_comments(session: AsyncSession, application_id: uuid.UUID) -> List[dict]:
    result = await session.execute(
        select(ApplicationComment, AdminUser.username, AdminUser.role)
        .join(AdminUser, AdminUser.id == ApplicationComment.admin_id, isouter=True)
        .where(ApplicationComment.application_id == application_id)
        .order_by(ApplicationComment.created_at.asc())
    )

    return [
        {
            "id": comment.id,
            "application_id": comment.application_id,
            "admin_id": comment.admin_id,
            "comment": comment.comment,
            "is_internal": comment.is_internal,
            "created_at": comment.created_at,
            "updated_at": comment.updated_at,
            "admin": {"username": username, "role": getattr(role, "value", role)} if username else None,
        }
        for comment, username, role in result.all()
    ]


async def add_comment(
    session: AsyncSession,
    application_id,
    author: AdminUser,
    text: str,
    is_internal: bool = True,
) -> ApplicationComment:
    text = (text or "").strip()
    if not text:
        raise ValueError("Comment text is required")

    # Comments always hang off an existing application
    app = await get_application(session, application_id)

    comment = ApplicationComment(
        application_id=app.id,
        admin_id=author.id,
        comment=text,
        is_internal=is_internal,
    )
    session.add(comment)
    await session.commit()
    await session.refresh(comment)
    return comment


async def delete_comment(
    session: AsyncSession,
    application_id: uuid.UUID,
    comment_id: uuid.UUID,
    requester: AdminUser,
) -> None:
    comment = await session.get(ApplicationComment, comment_id)
    if not comment or comment.application_id != application_id:
        raise NotFoundError("Comment not found")

    if comment.admin_id != requester.id:
        raise PermissionDeniedError("You can only delete your own comments")

    await session.delete(comment)
    await session.commit()
