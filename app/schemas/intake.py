from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field, field_validator


class IntakeSubmission(BaseModel):
    department: str
    discord_username: str
    answers: List[str]

    applicant_email: Optional[EmailStr] = None
    applicant_age: Optional[int] = Field(default=None, ge=1, le=120)
    previous_experience: Optional[str] = None
    timezone: Optional[str] = None
    availability: Optional[str] = None

    @field_validator("department")
    @classmethod
    def normalize_department(cls, v: str) -> str:
        return (v or "").strip().lower()

    @field_validator("discord_username")
    @classmethod
    def strip_handle(cls, v: str) -> str:
        v = (v or "").strip()
        if not v:
            raise ValueError("Please provide your Discord username.")
        return v

    class Config:
        json_schema_extra = {
            "example": {
                "department": "ocso",
                "discord_username": "player#1",
                "answers": ["..."] * 10,
                "timezone": "EST",
            }
        }


class IntakeResult(BaseModel):
    status: str = "success"
    application_id: Optional[UUID] = None
    webhook_sent: bool
    persisted: bool


class DepartmentRequirementsRead(BaseModel):
    min_age: int
    discord_required: bool
    mic_required: bool
    background_check: bool
    training_required: bool
    experience_preferred: bool


class DepartmentRead(BaseModel):
    id: str
    name: str
    full_name: str
    description: str
    motto: str
    is_open: bool
    color: int
    requirements: DepartmentRequirementsRead
    questions: List[str] = []
