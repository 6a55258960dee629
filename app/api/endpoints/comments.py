# app/api/endpoints/comments.py

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List
from uuid import UUID

from app.api.deps import get_db_session, require_commenter
from app.core.errors import NotFoundError, PermissionDeniedError
from app.models.admin_user import AdminUser
from app.schemas.comment import CommentCreate, CommentRead
from app.services.application_service import get_application
from app.services.comment_service import add_comment, delete_comment, list_comments

router = APIRouter(prefix="/api/applications/{application_id}/comments", tags=["Comments"])


@router.get("/", response_model=List[CommentRead])
async def get_comments(
    application_id: UUID,
    session: AsyncSession = Depends(get_db_session),
    _: AdminUser = Depends(require_commenter),
):
    try:
        await get_application(session, application_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return await list_comments(session, application_id)


@router.post("/", response_model=CommentRead, status_code=status.HTTP_201_CREATED)
async def post_comment(
    application_id: UUID,
    payload: CommentCreate,
    session: AsyncSession = Depends(get_db_session),
    current_user: AdminUser = Depends(require_commenter),
):
    try:
        comment = await add_comment(
            session,
            application_id,
            author=current_user,
            text=payload.comment,
            is_internal=payload.is_internal,
        )
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return CommentRead(
        **comment.model_dump(),
        admin={"username": current_user.username, "role": current_user.role.value},
    )


@router.delete("/{comment_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_comment(
    application_id: UUID,
    comment_id: UUID,
    session: AsyncSession = Depends(get_db_session),
    current_user: AdminUser = Depends(require_commenter),
):
    try:
        await delete_comment(session, application_id, comment_id, current_user)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except PermissionDeniedError as e:
        raise HTTPException(status_code=403, detail=str(e))
    return None
