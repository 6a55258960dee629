from sqlmodel import SQLModel, Field, Column
from sqlalchemy import Boolean, DateTime, ForeignKey, String, Text, Uuid
from sqlalchemy import Enum as PGEnum
from datetime import datetime
import uuid
from typing import Optional

from app.core.clock import utcnow
from app.models.application import enum_values
from app.models.enums import NotificationType


class Notification(SQLModel, table=True):
    __tablename__ = "notifications"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        sa_column=Column(Uuid(as_uuid=True), primary_key=True)
    )

    user_id: uuid.UUID = Field(
        sa_column=Column(Uuid(as_uuid=True), ForeignKey("admin_users.id", ondelete="CASCADE"), nullable=False, index=True)
    )

    title: str = Field(sa_column=Column(String(200), nullable=False))
    message: str = Field(sa_column=Column(Text, nullable=False))

    type: NotificationType = Field(
        default=NotificationType.Info,
        sa_column=Column(PGEnum(NotificationType, name="notification_type", values_callable=enum_values), nullable=False)
    )

    is_read: bool = Field(default=False, sa_column=Column(Boolean, nullable=False, default=False))
    action_url: Optional[str] = Field(default=None, sa_column=Column(String, nullable=True))

    created_at: datetime = Field(
        default_factory=utcnow,
        sa_column=Column(DateTime(timezone=True), nullable=False)
    )
