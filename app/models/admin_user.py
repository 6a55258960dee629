# app/models/admin_user.py

from sqlmodel import SQLModel, Field, Column
from sqlalchemy import Boolean, DateTime, Integer, String, JSON, Uuid
from sqlalchemy import Enum as PGEnum
from datetime import datetime
import uuid
from typing import Any, Dict, Optional

from app.core.clock import utcnow
from app.models.application import enum_values
from app.models.enums import AdminRole


class AdminUser(SQLModel, table=True):
    __tablename__ = "admin_users"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        sa_column=Column(Uuid(as_uuid=True), primary_key=True)
    )

    username: str = Field(sa_column=Column(String(64), nullable=False, unique=True, index=True))
    email: Optional[str] = Field(default=None, sa_column=Column(String(255), nullable=True))
    password_hash: str = Field(sa_column=Column(String, nullable=False))

    role: AdminRole = Field(
        default=AdminRole.Admin,
        sa_column=Column(PGEnum(AdminRole, name="admin_role", values_callable=enum_values), nullable=False)
    )

    # Department head scope (catalog id), unused for the other roles
    department: Optional[str] = Field(default=None, sa_column=Column(String(32), nullable=True))

    permissions: Dict[str, bool] = Field(default_factory=dict, sa_column=Column(JSON, nullable=False))
    preferences: Dict[str, Any] = Field(default_factory=dict, sa_column=Column(JSON, nullable=False))

    is_active: bool = Field(default=True, sa_column=Column(Boolean, nullable=False, default=True))

    last_login: Optional[datetime] = Field(
        default=None,
        sa_column=Column(DateTime(timezone=True), nullable=True)
    )
    login_count: int = Field(default=0, sa_column=Column(Integer, nullable=False, default=0))
    avatar_url: Optional[str] = Field(default=None, sa_column=Column(String, nullable=True))

    created_by: Optional[uuid.UUID] = Field(
        default=None,
        sa_column=Column(Uuid(as_uuid=True), nullable=True)
    )

    created_at: datetime = Field(
        default_factory=utcnow,
        sa_column=Column(DateTime(timezone=True), nullable=False)
    )
    updated_at: datetime = Field(
        default_factory=utcnow,
        sa_column=Column(DateTime(timezone=True), nullable=False)
    )
