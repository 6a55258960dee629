# app/api/deps.py

from typing import AsyncGenerator, Optional
from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_session
from app.core.rbac import Capability, DENIED_MESSAGES, can
from app.services.audit_service import bind_actor
from app.services.auth_service import load_session
from app.models.admin_user import AdminUser


# ------------------------------------------------------------
# HTTP Bearer Authentication
# ------------------------------------------------------------
bearer_scheme = HTTPBearer(auto_error=True)
optional_bearer_scheme = HTTPBearer(auto_error=False)


# ------------------------------------------------------------
# DB Session
# ------------------------------------------------------------
async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    async for session in get_session():
        yield session


def client_ip(request: Request) -> Optional[str]:
    return request.client.host if request.client else None


# ------------------------------------------------------------
# Get current logged-in admin from the session token
# ------------------------------------------------------------
async def get_current_user(
    request: Request,
    credentials: HTTPAuthorizationCredentials = Depends(bearer_scheme),
    session: AsyncSession = Depends(get_db_session),
) -> AdminUser:

    user = await load_session(session, credentials.credentials)

    if not user:
        raise HTTPException(status.HTTP_401_UNAUTHORIZED, "Session expired or invalid. Please log in again.")

    # Every write made through this request's session is attributed to this admin
    bind_actor(
        session,
        user.id,
        ip_address=client_ip(request),
        user_agent=request.headers.get("user-agent"),
    )

    return user


# ------------------------------------------------------------
# Capability-based access control
# ------------------------------------------------------------
def require_capability(capability: Capability):
    """
    Raises 403 before the endpoint body runs, so gated rows are never
    fetched for an admin whose role lacks the capability.
    """

    async def checker(current_user: AdminUser = Depends(get_current_user)):
        if not can(current_user, capability):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=DENIED_MESSAGES.get(capability, "Access denied"),
            )
        return current_user

    return checker


# ------------------------------------------------------------
# Exposed dependencies for routers
# ------------------------------------------------------------

require_reviewer = require_capability(Capability.ReviewApplications)
require_bulk_editor = require_capability(Capability.BulkUpdateApplications)
require_commenter = require_capability(Capability.CommentOnApplications)
require_analytics = require_capability(Capability.ViewAnalytics)
require_audit_viewer = require_capability(Capability.ViewAuditLog)
require_template_manager = require_capability(Capability.ManageTemplates)
require_settings_manager = require_capability(Capability.ManageSettings)
require_user_manager = require_capability(Capability.ManageUsers)
