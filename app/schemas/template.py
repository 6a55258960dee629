from pydantic import BaseModel
from typing import Any, Dict, List, Optional
from uuid import UUID
from datetime import datetime


# ---------------------------------------------------------
# EMAIL TEMPLATES
# ---------------------------------------------------------
class EmailTemplateCreate(BaseModel):
    name: str
    subject: str
    body: str
    variables: Optional[List[str]] = None
    is_active: bool = True


class EmailTemplateUpdate(BaseModel):
    name: Optional[str] = None
    subject: Optional[str] = None
    body: Optional[str] = None
    variables: Optional[List[str]] = None
    is_active: Optional[bool] = None


class EmailTemplateRead(BaseModel):
    id: UUID
    name: str
    subject: str
    body: str
    variables: List[str] = []
    is_active: bool
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class TemplatePreviewRequest(BaseModel):
    # Missing values fall back to the built-in sample data
    values: Dict[str, str] = {}


class TemplatePreview(BaseModel):
    subject: str
    body: str


# ---------------------------------------------------------
# APPLICATION TEMPLATES (question sets)
# ---------------------------------------------------------
class ApplicationTemplateCreate(BaseModel):
    name: str
    department: str
    description: Optional[str] = None
    questions: List[str]
    requirements: Dict[str, Any] = {}
    is_active: bool = True


class ApplicationTemplateUpdate(BaseModel):
    name: Optional[str] = None
    department: Optional[str] = None
    description: Optional[str] = None
    questions: Optional[List[str]] = None
    requirements: Optional[Dict[str, Any]] = None
    is_active: Optional[bool] = None


class ApplicationTemplateRead(BaseModel):
    id: UUID
    name: str
    department: str
    description: Optional[str] = None
    questions: List[str] = []
    requirements: Dict[str, Any] = {}
    is_active: bool
    created_by: Optional[UUID] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
