from enum import Enum

class ApplicationStatus(str, Enum):
    Pending = "pending"
    UnderReview = "under_review"
    InterviewScheduled = "interview_scheduled"
    Approved = "approved"
    Rejected = "rejected"


class ApplicationPriority(str, Enum):
    Low = "low"
    Normal = "normal"
    High = "high"
    Urgent = "urgent"


class AdminRole(str, Enum):
    Admin = "admin"
    SuperAdmin = "super_admin"
    DepartmentHead = "department_head"


class NotificationType(str, Enum):
    Info = "info"
    Success = "success"
    Warning = "warning"
    Error = "error"


class AuditAction(str, Enum):
    Create = "create"
    Update = "update"
    Delete = "delete"
