# app/services/settings_service.py

from typing import Any, Dict, List, Optional
import uuid

from loguru import logger
from sqlmodel import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.clock import utcnow
from app.models.system_setting import SystemSetting

DEFAULT_SETTINGS = [
    ("application_auto_approval", False, "Automatically approve applications that meet certain criteria"),
    ("max_applications_per_user", 3, "Maximum number of applications a user can submit"),
    ("application_cooldown_hours", 24, "Hours a user must wait between applications"),
    ("email_notifications_enabled", True, "Send email notifications for application updates"),
    ("discord_webhook_enabled", True, "Send notifications to Discord webhook"),
    ("maintenance_mode", False, "Enable maintenance mode (disables new applications)"),
]


def check_value(value: Any) -> Any:
    # bool is checked first: it is also an int
    if isinstance(value, (bool, int, float, str)):
        return value
    raise ValueError("Setting values must be a boolean, number or string")


async def list_settings(session: AsyncSession) -> List[SystemSetting]:
    result = await session.execute(select(SystemSetting).order_by(SystemSetting.setting_key))
    return result.scalars().all()


async def get_setting_value(session: AsyncSession, key: str, default: Any = None) -> Any:
    setting = await session.get(SystemSetting, key)
    if setting is None or setting.setting_value is None:
        return default
    return setting.setting_value


async def upsert_setting(
    session: AsyncSession,
    key: str,
    value: Any,
    updated_by: Optional[uuid.UUID] = None,
    description: Optional[str] = None,
    commit: bool = True,
) -> SystemSetting:
    key = (key or "").strip()
    if not key:
        raise ValueError("Setting key is required")

    setting = await session.get(SystemSetting, key)
    if setting is None:
        setting = SystemSetting(setting_key=key)

    setting.setting_value = check_value(value)
    if description is not None:
        setting.description = description
    setting.updated_by = updated_by
    setting.updated_at = utcnow()
    session.add(setting)

    if commit:
        await session.commit()
        await session.refresh(setting)
    return setting


async def save_settings(
    session: AsyncSession,
    values: Dict[str, Any],
    updated_by: Optional[uuid.UUID] = None,
) -> List[SystemSetting]:
    """Saves every key in one transaction."""
    for key, value in values.items():
        await upsert_setting(session, key, value, updated_by=updated_by, commit=False)
    await session.commit()
    return await list_settings(session)


async def seed_default_settings(session: AsyncSession) -> int:
    created = 0
    for key, value, description in DEFAULT_SETTINGS:
        if await session.get(SystemSetting, key) is None:
            session.add(SystemSetting(setting_key=key, setting_value=value, description=description))
            created += 1
    if created:
        await session.commit()
        logger.info(f"Seeded {created} default system settings")
    return created
