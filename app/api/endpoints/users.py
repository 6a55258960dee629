# app/api/endpoints/users.py

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List
from uuid import UUID

from app.api.deps import get_db_session, require_user_manager
from app.core.departments import get_department
from app.core.errors import NotFoundError
from app.models.admin_user import AdminUser
from app.schemas.user import AdminUserCreate, AdminUserRead, AdminUserUpdate
from app.services.auth_service import (
    create_user,
    delete_user_by_id,
    list_users,
    toggle_user_status,
    update_user,
)

router = APIRouter(prefix="/api/admin/users", tags=["Users (Super Admin)"])


# -------------------------------------------------------------------
# List all admin accounts (newest first)
# -------------------------------------------------------------------
@router.get("/", response_model=List[AdminUserRead])
async def get_all_users(
    session: AsyncSession = Depends(get_db_session),
    _: AdminUser = Depends(require_user_manager),
):
    return await list_users(session)


# -------------------------------------------------------------------
# Create an admin account
# -------------------------------------------------------------------
@router.post("/", response_model=AdminUserRead, status_code=status.HTTP_201_CREATED)
async def create_new_user(
    data: AdminUserCreate,
    session: AsyncSession = Depends(get_db_session),
    current_user: AdminUser = Depends(require_user_manager),
):
    if data.department and not get_department(data.department):
        raise HTTPException(400, detail=f"Unknown department '{data.department}'")

    try:
        return await create_user(
            session,
            username=data.username,
            password=data.password,
            role=data.role,
            email=data.email,
            department=data.department,
            created_by=current_user.id,
        )
    except ValueError as e:
        raise HTTPException(400, detail=str(e))


# -------------------------------------------------------------------
# Update role / department / active flag / password
# -------------------------------------------------------------------
@router.put("/{user_id}", response_model=AdminUserRead)
async def update_user_endpoint(
    user_id: UUID,
    data: AdminUserUpdate,
    session: AsyncSession = Depends(get_db_session),
    current_user: AdminUser = Depends(require_user_manager),
):
    if data.department and not get_department(data.department):
        raise HTTPException(400, detail=f"Unknown department '{data.department}'")

    if user_id == current_user.id and data.is_active is False:
        raise HTTPException(400, detail="You cannot deactivate your own account")

    try:
        return await update_user(
            session,
            user_id=user_id,
            email=data.email,
            role=data.role,
            department=data.department,
            is_active=data.is_active,
            password=data.password,
        )
    except NotFoundError as e:
        raise HTTPException(404, detail=str(e))
    except ValueError as e:
        raise HTTPException(400, detail=str(e))


# -------------------------------------------------------------------
# Toggle active flag
# -------------------------------------------------------------------
@router.post("/{user_id}/toggle-status", response_model=AdminUserRead)
async def toggle_status(
    user_id: UUID,
    session: AsyncSession = Depends(get_db_session),
    current_user: AdminUser = Depends(require_user_manager),
):
    try:
        return await toggle_user_status(session, user_id, current_user.id)
    except NotFoundError as e:
        raise HTTPException(404, detail=str(e))
    except ValueError as e:
        raise HTTPException(400, detail=str(e))


# -------------------------------------------------------------------
# Delete an admin account (never yourself)
# -------------------------------------------------------------------
@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_user(
    user_id: UUID,
    session: AsyncSession = Depends(get_db_session),
    current_user: AdminUser = Depends(require_user_manager),
):
    try:
        await delete_user_by_id(session, user_id, current_user.id)
    except NotFoundError as e:
        raise HTTPException(404, detail=str(e))
    except ValueError as e:
        raise HTTPException(400, detail=str(e))

    return None
