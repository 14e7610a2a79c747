"""
Harmoniq Safety - Reference resolution

Records point at each other by id. When the target is gone the display
falls back to a placeholder instead of failing.
"""
from typing import Dict, Optional

from ..stores import get_store

UNKNOWN = "Unknown"
UNKNOWN_TEAM = "Unknown Team"
UNASSIGNED = "Unassigned"


def display_name(user: Optional[Dict]) -> str:
    if not user:
        return UNKNOWN
    name = f"{user.get('first_name') or ''} {user.get('last_name') or ''}".strip()
    return name or user.get("full_name") or user.get("email") or UNKNOWN


def user_name(user_id: Optional[str]) -> str:
    return display_name(get_store("users").get_by_id(user_id)) if user_id else UNKNOWN


def team_name(team_id: Optional[str]) -> str:
    team = get_store("teams").get_by_id(team_id) if team_id else None
    return team["name"] if team else UNKNOWN_TEAM


def assignee_name(user_id: Optional[str] = None, team_id: Optional[str] = None) -> str:
    """User name, else team name, else 'Unassigned'."""
    if user_id:
        return user_name(user_id)
    if team_id:
        return team_name(team_id)
    return UNASSIGNED


def technician_name(user_id: Optional[str]) -> str:
    if not user_id:
        return UNASSIGNED
    return user_name(user_id)


def location_name(location_id: Optional[str]) -> str:
    loc = get_store("locations").get_by_id(location_id) if location_id else None
    return loc["name"] if loc else UNKNOWN


def asset_name(asset_id: Optional[str]) -> str:
    asset = get_store("assets").get_by_id(asset_id) if asset_id else None
    return asset["name"] if asset else UNKNOWN
