from pydantic import BaseModel
from typing import Optional
from uuid import UUID
from datetime import datetime


class CommentCreate(BaseModel):
    comment: str
    is_internal: bool = True


class CommentAuthor(BaseModel):
    username: str
    role: Optional[str] = None


class CommentRead(BaseModel):
    id: UUID
    application_id: UUID
    admin_id: UUID
    comment: str
    is_internal: bool
    created_at: datetime
    updated_at: datetime
    admin: Optional[CommentAuthor] = None

    class Config:
        from_attributes = True
