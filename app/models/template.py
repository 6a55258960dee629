from sqlmodel import SQLModel, Field, Column
from sqlalchemy import Boolean, DateTime, String, Text, JSON, Uuid
from datetime import datetime
import uuid
from typing import Any, Dict, List, Optional

from app.core.clock import utcnow


class EmailTemplate(SQLModel, table=True):
    __tablename__ = "email_templates"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        sa_column=Column(Uuid(as_uuid=True), primary_key=True)
    )

    name: str = Field(sa_column=Column(String(128), nullable=False, unique=True))
    subject: str = Field(sa_column=Column(String(255), nullable=False))
    body: str = Field(sa_column=Column(Text, nullable=False))

    # Names usable as {name} tokens in subject and body
    variables: List[str] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))

    is_active: bool = Field(default=True, sa_column=Column(Boolean, nullable=False, default=True))

    created_at: datetime = Field(
        default_factory=utcnow,
        sa_column=Column(DateTime(timezone=True), nullable=False)
    )
    updated_at: datetime = Field(
        default_factory=utcnow,
        sa_column=Column(DateTime(timezone=True), nullable=False)
    )


class ApplicationTemplate(SQLModel, table=True):
    __tablename__ = "application_templates"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        sa_column=Column(Uuid(as_uuid=True), primary_key=True)
    )

    name: str = Field(sa_column=Column(String(128), nullable=False))
    department: str = Field(sa_column=Column(String(32), nullable=False, index=True))
    description: Optional[str] = Field(default=None, sa_column=Column(Text, nullable=True))

    # Overrides the department's default question set while active
    questions: List[str] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    requirements: Dict[str, Any] = Field(default_factory=dict, sa_column=Column(JSON, nullable=False))

    is_active: bool = Field(default=True, sa_column=Column(Boolean, nullable=False, default=True))

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
