#app/models/audit.py

from sqlmodel import SQLModel, Field
from sqlalchemy import Column, DateTime, JSON
from typing import Optional, Dict, Any
from uuid import UUID, uuid4
from datetime import datetime

from app.core.clock import utcnow


class AuditLog(SQLModel, table=True):
    __tablename__ = "audit_logs"

    id: UUID = Field(default_factory=uuid4, primary_key=True)

    # Who did it (null for anonymous writes such as public intake)
    user_id: Optional[UUID] = Field(default=None, index=True)

    # "create" / "update" / "delete"
    action: str = Field(index=True)

    # Table name of the affected row (e.g. "applications")
    resource_type: str = Field(index=True)
    resource_id: Optional[str] = None

    # Column snapshots before / after the write
    old_values: Optional[Dict[str, Any]] = Field(default=None, sa_column=Column(JSON, nullable=True))
    new_values: Optional[Dict[str, Any]] = Field(default=None, sa_column=Column(JSON, nullable=True))

    # Security context
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None

    created_at: datetime = Field(
        default_factory=utcnow,
        sa_column=Column(DateTime(timezone=True), nullable=False, index=True)
    )
