from sqlmodel import SQLModel, Field, Column
from sqlalchemy import Boolean, DateTime, ForeignKey, Text, Uuid
from datetime import datetime
import uuid

from app.core.clock import utcnow


class ApplicationComment(SQLModel, table=True):
    __tablename__ = "application_comments"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        sa_column=Column(Uuid(as_uuid=True), primary_key=True)
    )

    application_id: uuid.UUID = Field(
        sa_column=Column(Uuid(as_uuid=True), ForeignKey("applications.id"), nullable=False, index=True)
    )

    admin_id: uuid.UUID = Field(
        sa_column=Column(Uuid(as_uuid=True), ForeignKey("admin_users.id"), nullable=False)
    )

    comment: str = Field(sa_column=Column(Text, nullable=False))

    # Internal notes are only visible to reviewers
    is_internal: bool = Field(default=True, sa_column=Column(Boolean, nullable=False, default=True))

    created_at: datetime = Field(
        default_factory=utcnow,
        sa_column=Column(DateTime(timezone=True), nullable=False)
    )
    updated_at: datetime = Field(
        default_factory=utcnow,
        sa_column=Column(DateTime(timezone=True), nullable=False)
    )
