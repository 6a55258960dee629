# app/api/endpoints/auth.py

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.rate_limiter import limiter
from app.schemas.auth import LoginRequest, LoginResponse, SessionInfo
from app.schemas.user import AdminUserRead
from app.models.admin_user import AdminUser
from app.services.auth_service import (
    authenticate_user,
    build_session_info,
    create_login_response,
    load_session,
    logout,
)
from app.api.deps import (
    bearer_scheme,
    client_ip,
    get_current_user,
    get_db_session,
    optional_bearer_scheme,
)

router = APIRouter(prefix="/api/admin", tags=["Auth"])


# -------------------------------------------------------------------
# LOGIN
# -------------------------------------------------------------------
@router.post("/login", response_model=LoginResponse)
@limiter.limit(settings.LOGIN_RATE_LIMIT)
async def login(
    payload: LoginRequest,
    request: Request,
    session: AsyncSession = Depends(get_db_session),
):
    user = await authenticate_user(session, payload.username, payload.password)

    if not user:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid username or password")

    return await create_login_response(
        session,
        user,
        ip_address=client_ip(request),
        user_agent=request.headers.get("user-agent"),
    )


# -------------------------------------------------------------------
# SESSION CHECK (never 401s; a stale session is cleared)
# -------------------------------------------------------------------
@router.get("/session", response_model=SessionInfo)
async def session_check(
    credentials: HTTPAuthorizationCredentials | None = Depends(optional_bearer_scheme),
    session: AsyncSession = Depends(get_db_session),
):
    if not credentials:
        return build_session_info(None)

    user = await load_session(session, credentials.credentials)
    return build_session_info(user)


# -------------------------------------------------------------------
# LOGOUT
# -------------------------------------------------------------------
@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
async def logout_endpoint(
    credentials: HTTPAuthorizationCredentials = Depends(bearer_scheme),
    session: AsyncSession = Depends(get_db_session),
):
    await logout(session, credentials.credentials)
    return None


# -------------------------------------------------------------------
# GET CURRENT ADMIN
# -------------------------------------------------------------------
@router.get("/me", response_model=AdminUserRead)
async def me(current_user: AdminUser = Depends(get_current_user)):
    return current_user
