"""
Harmoniq Safety - Session user & tenant resolution
"""
from typing import Dict, Iterable, Optional, Tuple

from fastapi import Request

from ..errors import NotAuthenticated, NotFound, PermissionDenied
from ..stores import get_store
from .permissions import has_permission, has_role


def session_user(request: Request) -> Optional[Dict]:
    user_id = request.session.get("user_id")
    if not user_id:
        return None
    user = get_store("users").get_by_id(user_id)
    if not user or user.get("status") == "inactive":
        return None
    return user


def company_by_slug(slug: str) -> Dict:
    company = get_store("companies").find(slug=slug)
    if not company:
        raise NotFound(f"Company '{slug}' not found")
    return company


def require_user(
    request: Request,
    slug: Optional[str] = None,
    permission: Optional[str] = None,
    roles: Optional[Iterable[str]] = None,
) -> Tuple[Dict, Optional[Dict]]:
    """Resolve (user, company) for a request or raise.

    Users may only act inside their own company; super admins may act in any.
    """
    user = session_user(request)
    if user is None:
        raise NotAuthenticated()

    company = None
    if slug is not None:
        company = company_by_slug(slug)
        if user.get("role") != "super_admin" and user.get("company_id") != company["id"]:
            raise PermissionDenied("Not a member of this company")

    if permission and not has_permission(user, permission):
        raise PermissionDenied(f"Missing permission: {permission}")
    if roles is not None and not has_role(user, tuple(roles)):
        raise PermissionDenied("Role not allowed")
    return user, company
