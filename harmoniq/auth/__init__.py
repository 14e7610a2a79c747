"""
Harmoniq Safety - Authentication, roles and permissions.
"""
from .permissions import ROLE_PERMISSIONS, ROLES, has_permission, has_role, permissions_for
from .session import company_by_slug, require_user, session_user

__all__ = [
    "ROLES",
    "ROLE_PERMISSIONS",
    "company_by_slug",
    "has_permission",
    "has_role",
    "permissions_for",
    "require_user",
    "session_user",
]
