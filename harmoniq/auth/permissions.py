"""
Harmoniq Safety - Roles & permissions
"""
from typing import Dict, List, Optional

ROLES = ("super_admin", "company_admin", "manager", "employee")

ALL_PERMISSIONS = [
    "incidents.view_own", "incidents.view_team", "incidents.view_all",
    "incidents.create", "incidents.edit_own", "incidents.edit_all",
    "incidents.delete", "incidents.assign", "incidents.investigate",
    "checklists.view", "checklists.complete", "checklists.create_templates", "checklists.manage",
    "reports.view_own", "reports.view_team", "reports.view_all", "reports.export",
    "users.view", "users.create", "users.edit", "users.delete", "users.manage_roles",
    "teams.view", "teams.create", "teams.edit", "teams.delete", "teams.manage_members",
    "settings.view", "settings.edit", "settings.billing",
]

ROLE_PERMISSIONS: Dict[str, List[str]] = {
    "super_admin": list(ALL_PERMISSIONS),
    "company_admin": list(ALL_PERMISSIONS),
    "manager": [
        "incidents.view_own",
        "incidents.view_team",
        "incidents.create",
        "incidents.edit_own",
        "incidents.edit_all",
        "incidents.assign",
        "incidents.investigate",
        "checklists.view",
        "checklists.complete",
        "checklists.create_templates",
        "reports.view_own",
        "reports.view_team",
        "reports.export",
        "users.view",
        "teams.view",
        "teams.manage_members",
    ],
    "employee": [
        "incidents.view_own",
        "incidents.create",
        "incidents.edit_own",
        "checklists.view",
        "checklists.complete",
        "reports.view_own",
    ],
}

# Roles that work in the management dashboard rather than the employee app
DASHBOARD_ROLES = ("super_admin", "company_admin", "manager")
ADMIN_ROLES = ("super_admin", "company_admin")


def permissions_for(user: Optional[Dict]) -> List[str]:
    if not user:
        return []
    perms = list(ROLE_PERMISSIONS.get(user.get("role"), []))
    for extra in user.get("custom_permissions") or []:
        if extra in ALL_PERMISSIONS and extra not in perms:
            perms.append(extra)
    return perms


def has_permission(user: Optional[Dict], permission: str) -> bool:
    return permission in permissions_for(user)


def has_role(user: Optional[Dict], roles) -> bool:
    return bool(user) and user.get("role") in roles
