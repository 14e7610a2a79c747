"""
Harmoniq Safety - Directory: companies, location hierarchy, teams and users.
"""
from .names import UNASSIGNED, UNKNOWN, UNKNOWN_TEAM, assignee_name, location_name, team_name, user_name
from .routes import router

__all__ = [
    "UNASSIGNED",
    "UNKNOWN",
    "UNKNOWN_TEAM",
    "assignee_name",
    "location_name",
    "router",
    "team_name",
    "user_name",
]
