# app/models/user_session.py

from sqlmodel import SQLModel, Field, Column
from sqlalchemy import DateTime, ForeignKey, String, Uuid
from datetime import datetime
import uuid
from typing import Optional

from app.core.clock import utcnow


class UserSession(SQLModel, table=True):
    __tablename__ = "user_sessions"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        sa_column=Column(Uuid(as_uuid=True), primary_key=True)
    )

    user_id: uuid.UUID = Field(
        sa_column=Column(Uuid(as_uuid=True), ForeignKey("admin_users.id", ondelete="CASCADE"), nullable=False, index=True)
    )

    # jti claim of the issued token
    session_token: str = Field(sa_column=Column(String(64), nullable=False, unique=True, index=True))

    ip_address: Optional[str] = Field(default=None, sa_column=Column(String(64), nullable=True))
    user_agent: Optional[str] = Field(default=None, sa_column=Column(String, nullable=True))

    expires_at: datetime = Field(sa_column=Column(DateTime(timezone=True), nullable=False))

    created_at: datetime = Field(
        default_factory=utcnow,
        sa_column=Column(DateTime(timezone=True), nullable=False)
    )
    last_accessed: datetime = Field(
        default_factory=utcnow,
        sa_column=Column(DateTime(timezone=True), nullable=False)
    )
