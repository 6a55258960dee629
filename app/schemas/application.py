# app/schemas/application.py

from pydantic import BaseModel, field_validator
from typing import List, Literal, Optional
from uuid import UUID
from datetime import datetime

from app.models.enums import ApplicationStatus, ApplicationPriority


DateRange = Literal["today", "7days", "30days", "all"]


# ============================================================
# APPLICATION READ (Dashboard / Detail)
# ============================================================
class ApplicationRead(BaseModel):
    id: UUID
    discord_username: str
    department: str
    answers: List[str] = []
    status: ApplicationStatus
    priority: ApplicationPriority
    tags: List[str] = []

    applicant_email: Optional[str] = None
    applicant_age: Optional[int] = None
    previous_experience: Optional[str] = None
    timezone: Optional[str] = None
    availability: Optional[str] = None

    reviewed_by: Optional[UUID] = None
    reviewed_at: Optional[datetime] = None
    notes: Optional[str] = None

    interview_scheduled: bool = False
    interview_date: Optional[datetime] = None
    interview_notes: Optional[str] = None

    final_decision_reason: Optional[str] = None

    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


# ============================================================
# DASHBOARD FILTERS (AND semantics, "all" disables a field)
# ============================================================
class ApplicationFilters(BaseModel):
    status: str = "all"
    department: str = "all"
    priority: str = "all"
    search: Optional[str] = None
    date_range: DateRange = "all"

    @field_validator("status")
    @classmethod
    def check_status(cls, value: str) -> str:
        value = (value or "all").strip().lower()
        if value != "all" and value not in {s.value for s in ApplicationStatus}:
            raise ValueError(f"Unknown status '{value}'")
        return value

    @field_validator("priority")
    @classmethod
    def check_priority(cls, value: str) -> str:
        value = (value or "all").strip().lower()
        if value != "all" and value not in {p.value for p in ApplicationPriority}:
            raise ValueError(f"Unknown priority '{value}'")
        return value

    @field_validator("department")
    @classmethod
    def normalize_department(cls, value: str) -> str:
        return (value or "all").strip().lower()


# ============================================================
# SINGLE-RECORD STATUS UPDATE
# ============================================================
class StatusUpdateRequest(BaseModel):
    status: ApplicationStatus
    notes: Optional[str] = None
    final_decision_reason: Optional[str] = None


# ============================================================
# STATS (get_application_stats)
# ============================================================
class ApplicationStats(BaseModel):
    total: int = 0
    pending: int = 0
    under_review: int = 0
    interview_scheduled: int = 0
    approved: int = 0
    rejected: int = 0
    high_priority: int = 0
    urgent_priority: int = 0
    interviews_scheduled: int = 0
    today_applications: int = 0
    this_week_applications: int = 0
    this_month_applications: int = 0


# ============================================================
# BULK ACTIONS
# ============================================================
BulkActionName = Literal[
    "approve",
    "reject",
    "set_status",
    "schedule_interview",
    "set_priority",
    "add_tag",
    "remove_tag",
]


class BulkActionRequest(BaseModel):
    action: BulkActionName
    application_ids: List[UUID]
    value: Optional[str] = None
    reason: Optional[str] = None


class BulkActionResult(BaseModel):
    action: BulkActionName
    requested: int
    updated: List[UUID] = []
    missing: List[UUID] = []
    # The caller always clears its selection and re-fetches afterwards
    clear_selection: bool = True
    refresh: bool = True


# ============================================================
# ATTACHMENTS
# ============================================================
class AttachmentCreate(BaseModel):
    filename: str
    file_url: str
    file_size: Optional[int] = None
    mime_type: Optional[str] = None


class AttachmentRead(AttachmentCreate):
    id: UUID
    application_id: UUID
    uploaded_by: Optional[UUID] = None
    created_at: datetime

    class Config:
        from_attributes = True


# ============================================================
# DETAIL VIEW
# ============================================================
class ApplicationDetail(ApplicationRead):
    questions: List[str] = []
    comments: List[dict] = []
    attachments: List[AttachmentRead] = []
    available_transitions: List[ApplicationStatus] = []


class MailtoLink(BaseModel):
    href: str
    recipients: int
