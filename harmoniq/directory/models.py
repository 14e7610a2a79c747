"""
Harmoniq Safety - Directory models (companies, locations, teams, users)
"""
import logging
import re
from typing import Dict, List, Optional

from ..common.text import is_valid_email, sanitize_text
from ..errors import NotFound, ValidationError
from ..stores import get_store
from .names import display_name

logger = logging.getLogger("harmoniq.directory")

COUNTRIES = ("NL", "SE", "US")
LANGUAGES = ("en", "nl", "sv")
COMPANY_STATUSES = ("trial", "active", "suspended", "cancelled")
TIERS = ("starter", "professional", "enterprise", "custom")
LOCATION_TYPES = ("site", "building", "floor", "zone", "room")
USER_ROLES = ("super_admin", "company_admin", "manager", "employee")
USER_TYPES = ("internal", "external", "contractor", "visitor")

_COUNTRY_DEFAULTS = {
    "US": {"language": "en", "currency": "USD"},
    "NL": {"language": "nl", "currency": "EUR"},
    "SE": {"language": "sv", "currency": "SEK"},
}


def slugify(value: str) -> str:
    slug = re.sub(r"[^a-z0-9]+", "-", (value or "").lower()).strip("-")
    return slug or "company"


def _require(data: Dict, *keys):
    missing = [k for k in keys if not data.get(k)]
    if missing:
        raise ValidationError(f"Missing required field(s): {', '.join(missing)}")


def _pick(data: Dict, allowed) -> Dict:
    return {k: data[k] for k in allowed if k in data}


# ================================================================
# COMPANIES
# ================================================================

COMPANY_FIELDS = (
    "name", "app_name", "country", "language", "status", "logo_url",
    "primary_color", "secondary_color", "font_family", "ui_style",
    "tier", "seat_limit", "currency", "trial_ends_at",
)


def list_companies() -> List[Dict]:
    return get_store("companies").items()


def get_company(company_id: str) -> Optional[Dict]:
    return get_store("companies").get_by_id(company_id)


def _validate_company(data: Dict):
    if "country" in data and data["country"] not in COUNTRIES:
        raise ValidationError(f"Unsupported country: {data['country']}")
    if "language" in data and data["language"] not in LANGUAGES:
        raise ValidationError(f"Unsupported language: {data['language']}")
    if "status" in data and data["status"] not in COMPANY_STATUSES:
        raise ValidationError(f"Invalid status: {data['status']}")
    if "tier" in data and data["tier"] not in TIERS:
        raise ValidationError(f"Invalid tier: {data['tier']}")


def create_company(data: Dict) -> Dict:
    _require(data, "name")
    _validate_company(data)
    store = get_store("companies")

    slug = slugify(data.get("slug") or data["name"])
    base, n = slug, 2
    while store.find(slug=slug):
        slug = f"{base}-{n}"
        n += 1

    country = data.get("country", "US")
    defaults = _COUNTRY_DEFAULTS.get(country, _COUNTRY_DEFAULTS["US"])
    company = {
        "name": sanitize_text(data["name"], 200),
        "slug": slug,
        "app_name": data.get("app_name"),
        "country": country,
        "language": data.get("language", defaults["language"]),
        "status": data.get("status", "trial"),
        "logo_url": data.get("logo_url"),
        "primary_color": data.get("primary_color", "#2563eb"),
        "secondary_color": data.get("secondary_color", "#1e40af"),
        "font_family": data.get("font_family", "Inter"),
        "ui_style": data.get("ui_style", "rounded"),
        "tier": data.get("tier", "starter"),
        "seat_limit": int(data.get("seat_limit", 10)),
        "currency": data.get("currency", defaults["currency"]),
        "trial_ends_at": data.get("trial_ends_at"),
    }
    created = store.add(company)
    # Owner company_id is the company itself
    return store.update(created["id"], {"company_id": created["id"]})


def update_company(company_id: str, data: Dict) -> Dict:
    changes = _pick(data, COMPANY_FIELDS)
    _validate_company(changes)
    updated = get_store("companies").update(company_id, changes)
    if updated is None:
        raise NotFound("Company not found")
    return updated


# ================================================================
# LOCATIONS
# ================================================================

LOCATION_FIELDS = ("name", "type", "parent_id", "address", "gps_lat", "gps_lng", "qr_code", "metadata")


def list_locations(company_id: str, loc_type: str = None, parent_id: str = None) -> List[Dict]:
    locations = get_store("locations").items_for_company(company_id)
    if loc_type:
        locations = [l for l in locations if l.get("type") == loc_type]
    if parent_id is not None:
        locations = [l for l in locations if (l.get("parent_id") or "") == parent_id]
    return [_with_counts(l) for l in locations]


def _with_counts(location: Dict) -> Dict:
    loc = dict(location)
    users = get_store("users").items_for_company(location.get("company_id"))
    assets = get_store("assets").items_for_company(location.get("company_id"))
    loc["employee_count"] = sum(1 for u in users if u.get("location_id") == location["id"])
    loc["asset_count"] = sum(
        1 for a in assets
        if a.get("location_id") == location["id"] and a.get("status") != "retired"
    )
    return loc


def get_location(company_id: str, location_id: str) -> Dict:
    loc = get_store("locations").get_by_id(location_id)
    if not loc or loc.get("company_id") != company_id:
        raise NotFound("Location not found")
    return loc


def get_location_detail(company_id: str, location_id: str) -> Dict:
    loc = _with_counts(get_location(company_id, location_id))
    all_locs = get_store("locations").items_for_company(company_id)
    loc["children"] = [_with_counts(l) for l in all_locs if l.get("parent_id") == location_id]
    parent = next((l for l in all_locs if l["id"] == loc.get("parent_id")), None)
    loc["parent"] = {"id": parent["id"], "name": parent["name"], "type": parent["type"]} if parent else None
    loc["path"] = location_path(all_locs, location_id)
    return loc


def location_path(locations: List[Dict], location_id: str) -> List[str]:
    """Names from the root down to the location."""
    by_id = {l["id"]: l for l in locations}
    path, seen = [], set()
    current = by_id.get(location_id)
    while current and current["id"] not in seen:
        seen.add(current["id"])
        path.append(current["name"])
        current = by_id.get(current.get("parent_id"))
    return list(reversed(path))


def location_tree(company_id: str) -> List[Dict]:
    """Nest locations under their parents. Orphans become roots."""
    locations = [_with_counts(l) for l in get_store("locations").items_for_company(company_id)]
    by_id = {l["id"]: dict(l, children=[]) for l in locations}
    roots = []
    for loc in by_id.values():
        parent = by_id.get(loc.get("parent_id"))
        if parent is not None:
            parent["children"].append(loc)
        else:
            roots.append(loc)
    return roots


def _would_cycle(locations: List[Dict], location_id: str, new_parent_id: Optional[str]) -> bool:
    by_id = {l["id"]: l for l in locations}
    current = new_parent_id
    seen = set()
    while current:
        if current == location_id:
            return True
        if current in seen:
            return True
        seen.add(current)
        current = (by_id.get(current) or {}).get("parent_id")
    return False


def _check_parent(company_id: str, parent_id: Optional[str]):
    if not parent_id:
        return
    parent = get_store("locations").get_by_id(parent_id)
    if not parent or parent.get("company_id") != company_id:
        raise ValidationError("Parent location not found")


def create_location(company_id: str, data: Dict) -> Dict:
    _require(data, "name")
    loc_type = data.get("type", "site")
    if loc_type not in LOCATION_TYPES:
        raise ValidationError(f"Invalid location type: {loc_type}")
    _check_parent(company_id, data.get("parent_id"))
    return get_store("locations").add({
        "company_id": company_id,
        "parent_id": data.get("parent_id") or None,
        "type": loc_type,
        "name": sanitize_text(data["name"], 200),
        "address": data.get("address"),
        "gps_lat": data.get("gps_lat"),
        "gps_lng": data.get("gps_lng"),
        "qr_code": data.get("qr_code"),
        "metadata": data.get("metadata") or {},
    })


def update_location(company_id: str, location_id: str, data: Dict) -> Dict:
    get_location(company_id, location_id)
    changes = _pick(data, LOCATION_FIELDS)
    if "type" in changes and changes["type"] not in LOCATION_TYPES:
        raise ValidationError(f"Invalid location type: {changes['type']}")
    if "parent_id" in changes:
        changes["parent_id"] = changes["parent_id"] or None
        _check_parent(company_id, changes["parent_id"])
        all_locs = get_store("locations").items_for_company(company_id)
        if _would_cycle(all_locs, location_id, changes["parent_id"]):
            raise ValidationError("A location cannot be moved under itself")
    return get_store("locations").update(location_id, changes)


def delete_location(company_id: str, location_id: str) -> bool:
    get_location(company_id, location_id)
    children = get_store("locations").filter(company_id, parent_id=location_id)
    if children:
        raise ValidationError("Location has child locations; move or delete them first")
    return get_store("locations").remove(location_id)


# ================================================================
# TEAMS
# ================================================================

TEAM_FIELDS = ("name", "description", "color", "leader_id", "permissions", "is_default", "status")


def _team_view(team: Dict) -> Dict:
    users = get_store("users")
    view = dict(team)
    members = []
    for uid in team.get("member_ids") or []:
        members.append({"id": uid, "name": display_name(users.get_by_id(uid))})
    view["members"] = members
    view["leader_name"] = display_name(users.get_by_id(team.get("leader_id"))) if team.get("leader_id") else None
    return view


def list_teams(company_id: str) -> List[Dict]:
    return [_team_view(t) for t in get_store("teams").items_for_company(company_id)]


def get_team(company_id: str, team_id: str) -> Dict:
    team = get_store("teams").get_by_id(team_id)
    if not team or team.get("company_id") != company_id:
        raise NotFound("Team not found")
    return _team_view(team)


def _company_user_ids(company_id: str, user_ids) -> List[str]:
    users = get_store("users")
    result = []
    for uid in user_ids or []:
        user = users.get_by_id(uid)
        if not user or user.get("company_id") != company_id:
            raise ValidationError(f"User {uid} is not in this company")
        if uid not in result:
            result.append(uid)
    return result


def _sync_user_teams(team_id: str, member_ids: List[str], previous: List[str]):
    users = get_store("users")
    for uid in set(member_ids) - set(previous):
        user = users.get_by_id(uid)
        if user:
            team_ids = list(user.get("team_ids") or [])
            if team_id not in team_ids:
                team_ids.append(team_id)
            users.update(uid, {"team_ids": team_ids})
    for uid in set(previous) - set(member_ids):
        user = users.get_by_id(uid)
        if user:
            users.update(uid, {"team_ids": [t for t in user.get("team_ids") or [] if t != team_id]})


def create_team(company_id: str, data: Dict) -> Dict:
    _require(data, "name")
    member_ids = _company_user_ids(company_id, data.get("member_ids"))
    leader_id = data.get("leader_id") or None
    if leader_id:
        _company_user_ids(company_id, [leader_id])
    team = get_store("teams").add({
        "company_id": company_id,
        "name": sanitize_text(data["name"], 200),
        "description": data.get("description"),
        "color": data.get("color", "#6b7280"),
        "leader_id": leader_id,
        "member_ids": member_ids,
        "member_count": len(member_ids),
        "permissions": data.get("permissions") or [],
        "is_default": bool(data.get("is_default", False)),
        "status": data.get("status", "active"),
    })
    _sync_user_teams(team["id"], member_ids, [])
    return _team_view(team)


def update_team(company_id: str, team_id: str, data: Dict) -> Dict:
    current = get_team(company_id, team_id)
    changes = _pick(data, TEAM_FIELDS)
    if changes.get("leader_id"):
        _company_user_ids(company_id, [changes["leader_id"]])
    if "member_ids" in data:
        member_ids = _company_user_ids(company_id, data["member_ids"])
        changes["member_ids"] = member_ids
        changes["member_count"] = len(member_ids)
        _sync_user_teams(team_id, member_ids, current.get("member_ids") or [])
    return _team_view(get_store("teams").update(team_id, changes))


def add_team_member(company_id: str, team_id: str, user_id: str) -> Dict:
    team = get_team(company_id, team_id)
    members = list(team.get("member_ids") or [])
    if user_id not in members:
        members = members + _company_user_ids(company_id, [user_id])
    return update_team(company_id, team_id, {"member_ids": members})


def remove_team_member(company_id: str, team_id: str, user_id: str) -> Dict:
    team = get_team(company_id, team_id)
    members = [m for m in team.get("member_ids") or [] if m != user_id]
    changes = {"member_ids": members}
    if team.get("leader_id") == user_id:
        changes["leader_id"] = None
    return update_team(company_id, team_id, changes)


def delete_team(company_id: str, team_id: str) -> bool:
    team = get_team(company_id, team_id)
    _sync_user_teams(team_id, [], team.get("member_ids") or [])
    return get_store("teams").remove(team_id)


# ================================================================
# USERS
# ================================================================

USER_FIELDS = (
    "first_name", "middle_name", "last_name", "role", "user_type", "account_type",
    "gender", "department", "job_title", "employee_id", "status", "location_id",
    "language", "theme", "avatar_url", "notification_prefs", "custom_permissions",
)


def _full_name(first: str, middle: Optional[str], last: str) -> str:
    return " ".join(p for p in (first, middle, last) if p)


def list_users(company_id: str, role: str = None, status: str = None, search: str = None) -> List[Dict]:
    users = get_store("users").items_for_company(company_id)
    if role:
        users = [u for u in users if u.get("role") == role]
    if status:
        users = [u for u in users if u.get("status") == status]
    if search:
        s = search.lower()
        users = [
            u for u in users
            if s in (u.get("full_name") or "").lower() or s in (u.get("email") or "").lower()
        ]
    return users


def get_user(company_id: str, user_id: str) -> Dict:
    user = get_store("users").get_by_id(user_id)
    if not user or user.get("company_id") != company_id:
        raise NotFound("User not found")
    return user


def seats_used(company_id: str) -> int:
    return sum(1 for u in get_store("users").items_for_company(company_id) if u.get("status") != "inactive")


def create_user(company: Dict, data: Dict) -> Dict:
    _require(data, "email", "first_name", "last_name")
    email = data["email"].strip().lower()
    if not is_valid_email(email):
        raise ValidationError("Invalid email address")
    users = get_store("users")
    if any((u.get("email") or "").lower() == email for u in users.items()):
        raise ValidationError("A user with this email already exists")
    role = data.get("role", "employee")
    if role not in USER_ROLES or role == "super_admin":
        raise ValidationError(f"Invalid role: {role}")
    if seats_used(company["id"]) >= int(company.get("seat_limit") or 0):
        raise ValidationError("Seat limit reached for this company")
    if data.get("location_id"):
        get_location(company["id"], data["location_id"])

    first = sanitize_text(data["first_name"], 100)
    last = sanitize_text(data["last_name"], 100)
    middle = sanitize_text(data.get("middle_name"), 100) or None
    user = users.add({
        "company_id": company["id"],
        "email": email,
        "first_name": first,
        "middle_name": middle,
        "last_name": last,
        "full_name": _full_name(first, middle, last),
        "role": role,
        "user_type": data.get("user_type", "internal"),
        "account_type": data.get("account_type", "standard"),
        "gender": data.get("gender"),
        "department": data.get("department"),
        "job_title": data.get("job_title"),
        "employee_id": data.get("employee_id"),
        "status": "active",
        "location_id": data.get("location_id"),
        "language": data.get("language", company.get("language", "en")),
        "theme": "system",
        "two_factor_enabled": False,
        "last_login_at": None,
        "team_ids": [],
        "custom_permissions": list(data.get("custom_permissions") or []),
    })
    logger.info("User %s created in %s", user["id"], company["id"])
    return user


def update_user(company_id: str, user_id: str, data: Dict) -> Dict:
    current = get_user(company_id, user_id)
    changes = _pick(data, USER_FIELDS)
    if "role" in changes and (changes["role"] not in USER_ROLES or changes["role"] == "super_admin"):
        raise ValidationError(f"Invalid role: {changes['role']}")
    if changes.get("location_id"):
        get_location(company_id, changes["location_id"])
    if {"first_name", "middle_name", "last_name"} & set(changes):
        merged = dict(current, **changes)
        changes["full_name"] = _full_name(merged.get("first_name"), merged.get("middle_name"), merged.get("last_name"))
    return get_store("users").update(user_id, changes)


def delete_user(company_id: str, user_id: str) -> bool:
    user = get_user(company_id, user_id)
    teams = get_store("teams")
    for team_id in user.get("team_ids") or []:
        team = teams.get_by_id(team_id)
        if team:
            members = [m for m in team.get("member_ids") or [] if m != user_id]
            changes = {"member_ids": members, "member_count": len(members)}
            if team.get("leader_id") == user_id:
                changes["leader_id"] = None
            teams.update(team_id, changes)
    return get_store("users").remove(user_id)
