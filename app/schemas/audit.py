from pydantic import BaseModel
from typing import Any, Dict, List, Optional, Union
from uuid import UUID
from datetime import datetime

from app.models.enums import AuditAction


class AuditLogRead(BaseModel):
    id: UUID
    user_id: Optional[UUID] = None

    # Joined from admin_users
    username: Optional[str] = None
    user_role: Optional[str] = None

    action: AuditAction
    resource_type: str
    resource_id: Optional[str] = None
    old_values: Optional[Dict[str, Any]] = None
    new_values: Optional[Dict[str, Any]] = None
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None
    created_at: datetime

    # "field: old → new" lines, or "no changes tracked"
    changes: Union[List[str], str] = []

    class Config:
        from_attributes = True
