from pydantic import BaseModel
from typing import List, Optional
from datetime import datetime

from app.models.enums import AdminRole
from app.schemas.user import AdminUserRead


# -------------------------------------------------------------------
# LOGIN REQUEST
# -------------------------------------------------------------------
class LoginRequest(BaseModel):
    username: str
    password: str


# -------------------------------------------------------------------
# TOKEN + USER DETAILS (Used for login response)
# -------------------------------------------------------------------
class LoginResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_in: int
    expires_at: datetime
    user: AdminUserRead


# -------------------------------------------------------------------
# SESSION CHECK (never raises for a stale token)
# -------------------------------------------------------------------
class SessionInfo(BaseModel):
    authenticated: bool
    user: Optional[AdminUserRead] = None
    roles: List[AdminRole] = []
    capabilities: List[str] = []
