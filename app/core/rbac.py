# app/core/rbac.py

from enum import Enum

from app.models.enums import AdminRole


class Capability(str, Enum):
    ReviewApplications = "review_applications"
    BulkUpdateApplications = "bulk_update_applications"
    CommentOnApplications = "comment_on_applications"
    ViewAnalytics = "view_analytics"
    ViewAuditLog = "view_audit_log"
    ManageTemplates = "manage_templates"
    ManageSettings = "manage_settings"
    ManageUsers = "manage_users"


_REVIEWER = frozenset({
    Capability.ReviewApplications,
    Capability.BulkUpdateApplications,
    Capability.CommentOnApplications,
    Capability.ViewAnalytics,
})

# Super admin holds every capability, so it passes every role check.
ROLE_CAPABILITIES = {
    AdminRole.DepartmentHead: _REVIEWER,
    AdminRole.Admin: _REVIEWER | {Capability.ViewAuditLog, Capability.ManageTemplates},
    AdminRole.SuperAdmin: frozenset(Capability),
}

DENIED_MESSAGES = {
    Capability.ManageSettings: "You don't have permission to manage system settings.",
    Capability.ManageUsers: "You don't have permission to manage users.",
    Capability.ManageTemplates: "You don't have permission to manage email templates.",
    Capability.ViewAuditLog: "You don't have permission to view the audit log.",
}


def normalize_role(role) -> AdminRole | None:
    if isinstance(role, AdminRole):
        return role
    try:
        return AdminRole(str(role).strip().lower())
    except ValueError:
        return None


def has_role(user_role, role) -> bool:
    """
    True when the user holds `role` exactly, or is a super admin.
    """
    current = normalize_role(user_role)
    return current is not None and (current == normalize_role(role) or current == AdminRole.SuperAdmin)


def capabilities_for(user_role) -> frozenset:
    return ROLE_CAPABILITIES.get(normalize_role(user_role), frozenset())


def can(user, capability: Capability) -> bool:
    return capability in capabilities_for(user.role)

