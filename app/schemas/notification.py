from pydantic import BaseModel
from typing import List, Optional
from uuid import UUID
from datetime import datetime

from app.models.enums import NotificationType


class NotificationRead(BaseModel):
    id: UUID
    title: str
    message: str
    type: NotificationType
    is_read: bool
    action_url: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True


class NotificationList(BaseModel):
    items: List[NotificationRead]
    # Counted over the fetched page only
    unread_count: int
