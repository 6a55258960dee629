from sqlmodel import SQLModel, Field, Column
from sqlalchemy import DateTime, String, Text, JSON, Uuid
from datetime import datetime
import uuid
from typing import Any, Optional

from app.core.clock import utcnow


class SystemSetting(SQLModel, table=True):
    __tablename__ = "system_settings"

    setting_key: str = Field(sa_column=Column(String(100), primary_key=True))

    # bool / number / string, stored as JSON so the type survives the round trip
    setting_value: Any = Field(default=None, sa_column=Column(JSON, nullable=True))

    description: Optional[str] = Field(default=None, sa_column=Column(Text, nullable=True))

    updated_by: Optional[uuid.UUID] = Field(
        default=None,
        sa_column=Column(Uuid(as_uuid=True), nullable=True)
    )
    updated_at: datetime = Field(
        default_factory=utcnow,
        sa_column=Column(DateTime(timezone=True), nullable=False)
    )
