# app/models/application.py

from sqlmodel import SQLModel, Field, Column
from sqlalchemy import Boolean, Integer, String, Text, DateTime, ForeignKey, JSON, Uuid
from sqlalchemy import Enum as PGEnum
from datetime import datetime
import uuid
from typing import List, Optional

from app.core.clock import utcnow
from app.models.enums import ApplicationStatus, ApplicationPriority


def enum_values(enum_cls):
    # Store the lowercase wire values ("under_review"), not the member names
    return [member.value for member in enum_cls]


class Application(SQLModel, table=True):
    __tablename__ = "applications"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        sa_column=Column(Uuid(as_uuid=True), primary_key=True)
    )

    discord_username: str = Field(
        sa_column=Column(String(100), nullable=False, index=True)
    )

    # Department catalog id ("staff", "ocso", ...)
    department: str = Field(
        sa_column=Column(String(32), nullable=False, index=True)
    )

    # Answers in the same order as the department's question set
    answers: List[str] = Field(
        default_factory=list,
        sa_column=Column(JSON, nullable=False)
    )

    status: ApplicationStatus = Field(
        default=ApplicationStatus.Pending,
        sa_column=Column(
            PGEnum(ApplicationStatus, name="application_status", values_callable=enum_values),
            nullable=False,
        )
    )

    priority: ApplicationPriority = Field(
        default=ApplicationPriority.Normal,
        sa_column=Column(
            PGEnum(ApplicationPriority, name="application_priority", values_callable=enum_values),
            nullable=False,
        )
    )

    tags: List[str] = Field(
        default_factory=list,
        sa_column=Column(JSON, nullable=False)
    )

    # --- Applicant information ---
    applicant_email: Optional[str] = Field(default=None, sa_column=Column(String(255), nullable=True))
    applicant_age: Optional[int] = Field(default=None, sa_column=Column(Integer, nullable=True))
    previous_experience: Optional[str] = Field(default=None, sa_column=Column(Text, nullable=True))
    timezone: Optional[str] = Field(default=None, sa_column=Column(String(64), nullable=True))
    availability: Optional[str] = Field(default=None, sa_column=Column(Text, nullable=True))

    # --- Review information ---
    reviewed_by: Optional[uuid.UUID] = Field(
        default=None,
        sa_column=Column(Uuid(as_uuid=True), ForeignKey("admin_users.id"), nullable=True)
    )
    reviewed_at: Optional[datetime] = Field(
        default=None,
        sa_column=Column(DateTime(timezone=True), nullable=True)
    )
    notes: Optional[str] = Field(default=None, sa_column=Column(Text, nullable=True))

    # --- Interview information ---
    interview_scheduled: bool = Field(
        default=False,
        sa_column=Column(Boolean, nullable=False, default=False)
    )
    interview_date: Optional[datetime] = Field(
        default=None,
        sa_column=Column(DateTime(timezone=True), nullable=True)
    )
    interview_notes: Optional[str] = Field(default=None, sa_column=Column(Text, nullable=True))

    final_decision_reason: Optional[str] = Field(default=None, sa_column=Column(Text, nullable=True))

    created_at: datetime = Field(
        default_factory=utcnow,
        sa_column=Column(DateTime(timezone=True), nullable=False, index=True)
    )

    updated_at: datetime = Field(
        default_factory=utcnow,
        sa_column=Column(DateTime(timezone=True), nullable=False)
    )
