# app/services/auth_service.py

from sqlalchemy import delete
from sqlmodel import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import IntegrityError
from datetime import datetime
from typing import Optional
import uuid

import jwt
from loguru import logger

from app.core.clock import as_utc, utcnow
from app.core.errors import NotFoundError
from app.core.rbac import capabilities_for, has_role
from app.core.security import (
    ALGORITHM,
    hash_password,
    verify_password,
    create_access_token,
    decode_token,
)
from app.core.config import settings
from app.models.admin_user import AdminUser
from app.models.enums import AdminRole
from app.models.notification import Notification
from app.models.user_session import UserSession
from app.schemas.auth import LoginResponse, SessionInfo
from app.schemas.user import AdminUserRead


# ============================================================================
# FETCH USER
# ============================================================================
async def get_user_by_username(session: AsyncSession, username: str) -> AdminUser | None:
    result = await session.execute(select(AdminUser).where(AdminUser.username == username))
    return result.scalar_one_or_none()


async def get_user_by_id(session: AsyncSession, user_id) -> AdminUser | None:
    if not isinstance(user_id, uuid.UUID):
        try:
            user_id = uuid.UUID(str(user_id))
        except ValueError:
            return None
    return await session.get(AdminUser, user_id)


# ============================================================================
# CREATE USER
# ============================================================================
async def create_user(
    session: AsyncSession,
    username: str,
    password: str,
    role: AdminRole = AdminRole.Admin,
    email: str | None = None,
    department: str | None = None,
    created_by: uuid.UUID | None = None,
) -> AdminUser:

    username = username.strip()
    if not username:
        raise ValueError("Username is required")
    if not password:
        raise ValueError("Password is required")

    # Department heads are scoped to one department
    if role == AdminRole.DepartmentHead and not department:
        raise ValueError("Department heads must be assigned to a department")

    user = AdminUser(
        username=username,
        email=email,
        password_hash=hash_password(password),
        role=role,
        department=department if role == AdminRole.DepartmentHead else None,
        created_by=created_by,
    )

    session.add(user)

    try:
        await session.commit()
        await session.refresh(user)
        return user

    except IntegrityError:
        await session.rollback()
        raise ValueError("User with this username already exists")


# ============================================================================
# AUTHENTICATE
# ============================================================================
async def authenticate_user(session: AsyncSession, username: str, password: str) -> AdminUser | None:
    user = await get_user_by_username(session, username.strip())
    if not user or not user.is_active:
        return None

    if not verify_password(password, user.password_hash):
        return None

    return user


async def create_login_response(
    session: AsyncSession,
    user: AdminUser,
    ip_address: str | None = None,
    user_agent: str | None = None,
    now: datetime | None = None,
) -> LoginResponse:
    now = now or utcnow()

    token, jti, expires_at = create_access_token(
        subject=str(user.id),
        issued_at=now,
        data={"role": user.role.value},
    )

    session.add(UserSession(
        user_id=user.id,
        session_token=jti,
        ip_address=ip_address,
        user_agent=user_agent,
        expires_at=expires_at,
        created_at=now,
        last_accessed=now,
    ))

    user.last_login = now
    user.login_count = (user.login_count or 0) + 1
    session.add(user)

    await session.commit()
    await session.refresh(user)

    logger.info(f"Admin '{user.username}' logged in")

    return LoginResponse(
        access_token=token,
        expires_at=expires_at,
        expires_in=int((expires_at - now).total_seconds()),
        user=AdminUserRead.model_validate(user),
    )


# ============================================================================
# SESSIONS
# ============================================================================
def _token_claims(token: str) -> tuple[dict | None, bool]:
    """(claims, expired). Claims are None when the token is not ours at all."""
    try:
        return decode_token(token), False
    except jwt.ExpiredSignatureError:
        # Signature is still checked; only the expiry is skipped so we can find the row
        claims = jwt.decode(
            token,
            settings.SECRET_KEY,
            algorithms=[ALGORITHM],
            options={"verify_exp": False},
        )
        return claims, True
    except jwt.InvalidTokenError:
        return None, False


async def clear_session(session: AsyncSession, jti: str) -> None:
    await session.execute(delete(UserSession).where(UserSession.session_token == jti))
    await session.commit()


async def load_session(
    session: AsyncSession,
    token: str,
    now: datetime | None = None,
) -> AdminUser | None:
    """
    Resolves a bearer token to its active admin. Stale sessions (older than
    the session window) are deleted and reported as unauthenticated.
    """
    now = now or utcnow()

    claims, expired = _token_claims(token)
    if not claims or not claims.get("jti"):
        return None

    jti = claims["jti"]
    result = await session.execute(select(UserSession).where(UserSession.session_token == jti))
    stored = result.scalar_one_or_none()
    if not stored:
        return None

    if expired or as_utc(stored.expires_at) <= now:
        logger.info(f"Session {jti[:8]} expired, clearing it")
        await clear_session(session, jti)
        return None

    user = await get_user_by_id(session, stored.user_id)
    if not user or not user.is_active:
        return None

    stored.last_accessed = now
    session.add(stored)
    await session.commit()

    return user


async def logout(session: AsyncSession, token: str) -> None:
    claims, _ = _token_claims(token)
    if claims and claims.get("jti"):
        await clear_session(session, claims["jti"])


def build_session_info(user: Optional[AdminUser]) -> SessionInfo:
    if user is None:
        return SessionInfo(authenticated=False)

    return SessionInfo(
        authenticated=True,
        user=AdminUserRead.model_validate(user),
        roles=[role for role in AdminRole if has_role(user.role, role)],
        capabilities=sorted(c.value for c in capabilities_for(user.role)),
    )


# ============================================================================
# USER MANAGEMENT
# ============================================================================
async def list_users(session: AsyncSession) -> list[AdminUser]:
    result = await session.execute(select(AdminUser).order_by(AdminUser.created_at.desc()))
    return result.scalars().all()


async def delete_user_by_id(session: AsyncSession, user_id, requester_id) -> None:
    user = await get_user_by_id(session, user_id)
    if not user:
        raise NotFoundError("User not found")

    if user.id == requester_id:
        raise ValueError("You cannot delete your own account")

    await session.execute(delete(UserSession).where(UserSession.user_id == user.id))
    await session.execute(delete(Notification).where(Notification.user_id == user.id))
    await session.delete(user)

    try:
        await session.commit()
    except IntegrityError:
        await session.rollback()
        raise ValueError("User still owns reviews or comments. Deactivate the account instead.")


async def update_user(
    session: AsyncSession,
    user_id,
    email: str | None = None,
    role: AdminRole | None = None,
    department: str | None = None,
    is_active: bool | None = None,
    password: str | None = None,
) -> AdminUser:

    user = await get_user_by_id(session, user_id)
    if not user:
        raise NotFoundError("User not found")

    if email is not None:
        user.email = email or None

    if role is not None:
        if role == AdminRole.DepartmentHead and not (department or user.department):
            raise ValueError("Department heads must be assigned to a department")
        user.role = role

    if department is not None:
        if user.role != AdminRole.DepartmentHead:
            raise ValueError("Only department heads can have a department")
        user.department = department

    if user.role != AdminRole.DepartmentHead:
        user.department = None

    if is_active is not None:
        user.is_active = is_active

    if password:
        user.password_hash = hash_password(password)

    user.updated_at = utcnow()
    session.add(user)

    try:
        await session.commit()
        await session.refresh(user)
        return user

    except IntegrityError:
        await session.rollback()
        raise ValueError("Failed to update user")


async def toggle_user_status(session: AsyncSession, user_id, requester_id) -> AdminUser:
    user = await get_user_by_id(session, user_id)
    if not user:
        raise NotFoundError("User not found")
    if user.id == requester_id:
        raise ValueError("You cannot deactivate your own account")
    return await update_user(session, user.id, is_active=not user.is_active)
