from sqlmodel import SQLModel, Field, Column
from sqlalchemy import BigInteger, DateTime, ForeignKey, String, Uuid
from datetime import datetime
import uuid
from typing import Optional

from app.core.clock import utcnow


class ApplicationAttachment(SQLModel, table=True):
    __tablename__ = "application_attachments"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        sa_column=Column(Uuid(as_uuid=True), primary_key=True)
    )

    application_id: uuid.UUID = Field(
        sa_column=Column(Uuid(as_uuid=True), ForeignKey("applications.id"), nullable=False, index=True)
    )

    filename: str = Field(sa_column=Column(String(255), nullable=False))
    file_url: str = Field(sa_column=Column(String, nullable=False))
    file_size: Optional[int] = Field(default=None, sa_column=Column(BigInteger, nullable=True))
    mime_type: Optional[str] = Field(default=None, sa_column=Column(String(128), nullable=True))

    uploaded_by: Optional[uuid.UUID] = Field(
        default=None,
        sa_column=Column(Uuid(as_uuid=True), nullable=True)
    )

    created_at: datetime = Field(
        default_factory=utcnow,
        sa_column=Column(DateTime(timezone=True), nullable=False)
    )
