from typing import Any, Dict, Optional
from uuid import UUID
from datetime import datetime
from pydantic import BaseModel

from app.models.enums import AdminRole


# ---------------------------------------------------------
# CREATE USER (Super admin creates any admin)
# ---------------------------------------------------------
class AdminUserCreate(BaseModel):
    username: str
    password: str
    role: AdminRole = AdminRole.Admin
    email: Optional[str] = None
    department: Optional[str] = None   # Only required for department heads

    class Config:
        json_schema_extra = {
            "examples": [
                {"username": "reviewer", "password": "password123", "role": "admin"},
                {"username": "ocso_head", "password": "password123", "role": "department_head", "department": "ocso"},
            ]
        }


# ---------------------------------------------------------
# UPDATE USER (Super admin edits)
# ---------------------------------------------------------
class AdminUserUpdate(BaseModel):
    email: Optional[str] = None
    role: Optional[AdminRole] = None
    department: Optional[str] = None
    is_active: Optional[bool] = None
    password: Optional[str] = None


# ---------------------------------------------------------
# READ USER (response)
# ---------------------------------------------------------
class AdminUserRead(BaseModel):
    id: UUID
    username: str
    email: Optional[str] = None
    role: AdminRole
    department: Optional[str] = None
    permissions: Dict[str, bool] = {}
    is_active: bool
    last_login: Optional[datetime] = None
    login_count: int = 0
    avatar_url: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True
