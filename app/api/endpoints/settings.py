# app/api/endpoints/settings.py

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List

from app.api.deps import get_db_session, require_settings_manager
from app.models.admin_user import AdminUser
from app.schemas.settings import SettingUpdate, SettingsBulkUpdate, SystemSettingRead
from app.services import settings_service

router = APIRouter(prefix="/api/settings", tags=["System Settings (Super Admin)"])


@router.get("/", response_model=List[SystemSettingRead])
async def get_settings(
    session: AsyncSession = Depends(get_db_session),
    _: AdminUser = Depends(require_settings_manager),
):
    return await settings_service.list_settings(session)


@router.put("/", response_model=List[SystemSettingRead])
async def save_all_settings(
    payload: SettingsBulkUpdate,
    session: AsyncSession = Depends(get_db_session),
    current_user: AdminUser = Depends(require_settings_manager),
):
    try:
        return await settings_service.save_settings(session, payload.settings, updated_by=current_user.id)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.put("/{setting_key}", response_model=SystemSettingRead)
async def save_setting(
    setting_key: str,
    payload: SettingUpdate,
    session: AsyncSession = Depends(get_db_session),
    current_user: AdminUser = Depends(require_settings_manager),
):
    try:
        return await settings_service.upsert_setting(
            session,
            setting_key,
            payload.value,
            updated_by=current_user.id,
            description=payload.description,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
