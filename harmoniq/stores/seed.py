"""
Harmoniq Safety - Demo seed data

Builders return fresh lists so dates stay relative to the day the store is
first loaded.
"""
import datetime

TS_FORMAT = "%Y-%m-%d %H:%M:%S"


def _day(offset: int = 0) -> str:
    return (datetime.date.today() + datetime.timedelta(days=offset)).isoformat()


def _stamp(days_ago: float = 0) -> str:
    return (datetime.datetime.now() - datetime.timedelta(days=days_ago)).strftime(TS_FORMAT)


def _years_ago(years: int) -> str:
    return (datetime.date.today() - datetime.timedelta(days=int(years * 365.25))).isoformat()


# ================================================================
# DIRECTORY
# ================================================================

def seed_companies():
    ts = _stamp(400)
    return [
        {
            "id": "comp-1", "name": "Nexus Manufacturing", "slug": "nexus",
            "app_name": "Nexus Safety", "country": "US", "language": "en",
            "status": "active", "logo_url": None,
            "primary_color": "#2563eb", "secondary_color": "#1e40af",
            "font_family": "Inter", "ui_style": "rounded",
            "tier": "professional", "seat_limit": 50, "currency": "USD",
            "trial_ends_at": None, "created_at": ts, "updated_at": ts,
        },
        {
            "id": "comp-2", "name": "Van der Berg Logistiek", "slug": "vdberg",
            "app_name": None, "country": "NL", "language": "nl",
            "status": "active", "logo_url": None,
            "primary_color": "#ea580c", "secondary_color": "#9a3412",
            "font_family": "Inter", "ui_style": "square",
            "tier": "starter", "seat_limit": 2, "currency": "EUR",
            "trial_ends_at": None, "created_at": ts, "updated_at": ts,
        },
        {
            "id": "comp-3", "name": "Nordisk Bygg AB", "slug": "nordisk",
            "app_name": None, "country": "SE", "language": "sv",
            "status": "trial", "logo_url": None,
            "primary_color": "#0f766e", "secondary_color": "#115e59",
            "font_family": "Inter", "ui_style": "rounded",
            "tier": "starter", "seat_limit": 10, "currency": "SEK",
            "trial_ends_at": _day(14), "created_at": ts, "updated_at": ts,
        },
    ]


def _user(uid, company_id, email, first, last, role, **extra):
    record = {
        "id": uid, "company_id": company_id, "email": email,
        "first_name": first, "middle_name": None, "last_name": last,
        "full_name": f"{first} {last}",
        "role": role, "user_type": "internal", "account_type": "standard",
        "gender": None, "department": None, "job_title": None,
        "employee_id": None, "status": "active", "location_id": None,
        "language": "en", "theme": "system", "two_factor_enabled": False,
        "last_login_at": None, "team_ids": [], "custom_permissions": [],
    }
    record.update(extra)
    return record


def seed_users():
    return [
        _user("usr-super", "comp-1", "admin@harmoniq.io", "Platform", "Admin", "super_admin",
              account_type="admin"),
        _user("usr-1", "comp-1", "sarah.johnson@nexus.com", "Sarah", "Johnson", "company_admin",
              department="HSE", job_title="HSE Director", team_ids=["team-1"]),
        _user("usr-2", "comp-1", "mike.chen@nexus.com", "Mike", "Chen", "manager",
              department="Operations", job_title="Plant Manager", team_ids=["team-1"],
              account_type="safety_officer"),
        _user("usr-3", "comp-1", "emma.wilson@nexus.com", "Emma", "Wilson", "employee",
              department="Assembly", job_title="Operator", team_ids=["team-1"],
              location_id="loc-2"),
        _user("usr-4", "comp-1", "james.brown@nexus.com", "James", "Brown", "employee",
              department="Maintenance", job_title="Technician", team_ids=["team-2"],
              location_id="loc-2"),
        _user("usr-5", "comp-2", "pieter@vdberg.nl", "Pieter", "de Vries", "company_admin",
              language="nl"),
        _user("usr-6", "comp-3", "anna@nordiskbygg.se", "Anna", "Lindqvist", "company_admin",
              language="sv"),
    ]


def seed_teams():
    ts = _stamp(300)
    return [
        {
            "id": "team-1", "company_id": "comp-1", "name": "Safety Committee",
            "description": "Cross-functional safety committee", "color": "#2563eb",
            "leader_id": "usr-2", "member_ids": ["usr-1", "usr-2", "usr-3"],
            "member_count": 3, "permissions": [], "is_default": True,
            "status": "active", "created_at": ts, "updated_at": ts,
        },
        {
            "id": "team-2", "company_id": "comp-1", "name": "Maintenance Crew",
            "description": "Plant maintenance technicians", "color": "#16a34a",
            "leader_id": "usr-4", "member_ids": ["usr-4"],
            "member_count": 1, "permissions": [], "is_default": False,
            "status": "active", "created_at": ts, "updated_at": ts,
        },
    ]


def _location(lid, company_id, name, loc_type, parent_id=None, address=None):
    return {
        "id": lid, "company_id": company_id, "parent_id": parent_id,
        "type": loc_type, "name": name, "address": address,
        "gps_lat": None, "gps_lng": None, "qr_code": None, "metadata": {},
    }


def seed_locations():
    return [
        _location("loc-1", "comp-1", "Detroit Plant", "site", address="1200 Industrial Ave, Detroit, MI"),
        _location("loc-2", "comp-1", "Assembly Hall A", "building", parent_id="loc-1"),
        _location("loc-3", "comp-1", "Ground Floor", "floor", parent_id="loc-2"),
        _location("loc-4", "comp-1", "Warehouse North", "site", address="80 Dock Rd, Detroit, MI"),
        _location("loc-5", "comp-2", "Rotterdam Depot", "site", address="Waalhaven 12, Rotterdam"),
    ]


# ================================================================
# ASSETS & MAINTENANCE
# ================================================================

def _asset(aid, company_id, name, tag, category, **extra):
    record = {
        "id": aid, "company_id": company_id, "location_id": None,
        "parent_asset_id": None, "is_system": False,
        "name": name, "asset_tag": tag, "serial_number": None,
        "barcode": None, "qr_code": None,
        "category": category, "sub_category": None, "asset_type": "static",
        "criticality": "medium", "department": None,
        "manufacturer": None, "model": None, "model_number": None,
        "specifications": None,
        "manufactured_date": None, "purchase_date": None,
        "installation_date": None, "warranty_expiry": None,
        "expected_life_years": None,
        "condition": "good", "condition_notes": None,
        "last_condition_assessment": None,
        "purchase_cost": None, "current_value": None,
        "depreciation_rate": None, "currency": "USD",
        "maintenance_frequency_days": None, "last_maintenance_date": None,
        "next_maintenance_date": None, "maintenance_notes": None,
        "requires_certification": False, "requires_calibration": False,
        "calibration_frequency_days": None, "last_calibration_date": None,
        "next_calibration_date": None, "safety_instructions": None,
        "status": "active", "decommission_date": None, "disposal_method": None,
    }
    record.update(extra)
    return record


def seed_assets():
    return [
        _asset("ast-1", "comp-1", "Hydraulic Press HP-200", "AST-0001", "machinery",
               location_id="loc-2", serial_number="HP200-7781", criticality="high",
               department="Assembly", manufacturer="Schuler", model="HP-200",
               purchase_date=_years_ago(3), expected_life_years=15,
               warranty_expiry=_day(20), purchase_cost=185000.0,
               next_maintenance_date=_day(-2), maintenance_frequency_days=90),
        _asset("ast-2", "comp-1", "Forklift FL-3", "AST-0002", "vehicle",
               location_id="loc-4", asset_type="movable", condition="fair",
               manufacturer="Toyota", model="8FGU25", purchase_date=_years_ago(6),
               expected_life_years=10, warranty_expiry=_day(-30),
               purchase_cost=32000.0),
        _asset("ast-3", "comp-1", "Fire Extinguisher Bank B", "AST-0003", "fire_safety",
               location_id="loc-3", condition="excellent", criticality="critical",
               requires_calibration=True, calibration_frequency_days=365,
               next_calibration_date=_day(60), purchase_date=_years_ago(1)),
        _asset("ast-4", "comp-1", "Old Conveyor C1", "AST-0004", "machinery",
               location_id="loc-2", status="retired", condition="poor",
               warranty_expiry=_day(-400), decommission_date=_day(-30)),
        _asset("ast-5", "comp-2", "Reach Truck RT-1", "AST-0101", "vehicle",
               location_id="loc-5", asset_type="movable", currency="EUR",
               purchase_date=_years_ago(2)),
    ]


def seed_asset_inspections():
    return [
        {"id": "ins-1", "asset_id": "ast-1", "company_id": "comp-1", "inspector_id": "usr-4",
         "checklist_id": None, "result": "pass", "notes": None, "media_urls": [],
         "incident_id": None, "inspected_at": _stamp(30)},
        {"id": "ins-2", "asset_id": "ast-1", "company_id": "comp-1", "inspector_id": "usr-4",
         "checklist_id": None, "result": "fail", "notes": "Guard latch broken",
         "media_urls": [], "incident_id": None, "inspected_at": _stamp(5)},
        {"id": "ins-3", "asset_id": "ast-2", "company_id": "comp-1", "inspector_id": "usr-3",
         "checklist_id": None, "result": "pass", "notes": None, "media_urls": [],
         "incident_id": None, "inspected_at": _stamp(10)},
    ]


def seed_maintenance_schedules():
    return [
        {"id": "sch-1", "asset_id": "ast-1", "company_id": "comp-1",
         "name": "Hydraulic oil change", "description": "Drain and replace hydraulic fluid",
         "frequency_value": 3, "frequency_unit": "months",
         "last_completed_date": _day(-95), "next_due_date": _day(-5),
         "assigned_to_user_id": "usr-4", "assigned_to_team_id": None,
         "priority": "high", "notify_days_before": 7, "is_active": True},
        {"id": "sch-2", "asset_id": "ast-1", "company_id": "comp-1",
         "name": "Safety guard inspection", "description": None,
         "frequency_value": 1, "frequency_unit": "weeks",
         "last_completed_date": _day(-4), "next_due_date": _day(3),
         "assigned_to_user_id": None, "assigned_to_team_id": "team-2",
         "priority": "medium", "notify_days_before": 7, "is_active": True},
        {"id": "sch-3", "asset_id": "ast-2", "company_id": "comp-1",
         "name": "Annual service", "description": "Manufacturer service",
         "frequency_value": 1, "frequency_unit": "years",
         "last_completed_date": _day(-245), "next_due_date": _day(120),
         "assigned_to_user_id": None, "assigned_to_team_id": None,
         "priority": "low", "notify_days_before": 14, "is_active": True},
    ]


def seed_downtime_logs():
    return [
        {"id": "dt-1", "asset_id": "ast-1", "company_id": "comp-1",
         "start_date": _stamp(20), "end_date": _stamp(19.5), "duration_hours": 12.5,
         "reason": "Hydraulic leak", "category": "breakdown",
         "reported_by_user_id": "usr-4", "resolved_by_user_id": "usr-4",
         "production_impact": "partial", "notes": None},
    ]


def seed_corrective_actions():
    return [
        {"id": "ca-1", "company_id": "comp-1", "asset_id": "ast-1", "inspection_id": "ins-2",
         "description": "Replace broken guard latch", "severity": "high",
         "assigned_to": "usr-4", "due_date": _day(5), "status": "open",
         "resolution_notes": None, "completed_at": None},
    ]


def seed_work_orders():
    return [
        {"id": "wo-1", "company_id": "comp-1", "asset_id": "ast-1",
         "title": "Replace hydraulic seals", "description": "Seals leaking on main cylinder",
         "priority": "high", "status": "requested", "requested_by": "usr-2",
         "assigned_to": "usr-4", "due_date": _day(7), "estimated_hours": 6,
         "actual_hours": None, "parts_cost": None, "labor_cost": None,
         "corrective_action_id": None, "completed_at": None, "parts_used": []},
    ]


# ================================================================
# INCIDENTS
# ================================================================

def _incident(iid, company_id, ref, reporter, itype, severity, status, title, days_ago, **extra):
    created = _stamp(days_ago)
    record = {
        "id": iid, "company_id": company_id, "reference_number": ref,
        "reporter_id": reporter, "type": itype, "type_other": None,
        "severity": severity, "priority": severity,
        "title": title, "description": title,
        "incident_date": created[:10], "incident_time": created[11:16],
        "lost_time": False, "lost_time_amount": None, "active_hazard": False,
        "location_id": None, "building": None, "floor": None, "zone": None,
        "room": None, "gps_lat": None, "gps_lng": None,
        "location_description": None, "asset_id": None, "media_urls": [],
        "status": status, "flagged": False,
        "resolved_at": None, "resolved_by": None, "resolution_notes": None,
        "investigation": None, "actions": [], "comments": [], "timeline": [],
        "created_at": created, "updated_at": created,
    }
    record.update(extra)
    return record


def seed_incidents():
    return [
        _incident("inc-1", "comp-1", "INC-100001", "usr-3", "injury", "high", "new",
                  "Hand laceration at press station", 2,
                  location_id="loc-2", asset_id="ast-1", lost_time=True, lost_time_amount=8,
                  active_hazard=True),
        _incident("inc-2", "comp-1", "INC-100002", "usr-4", "near_miss", "medium", "in_progress",
                  "Forklift near miss in aisle 4", 6,
                  location_id="loc-4", asset_id="ast-2",
                  investigation={
                      "investigator": "Mike Chen", "startDate": _day(-5),
                      "status": "in_progress", "rootCauseCategory": "",
                      "rootCauseOther": "", "rootCauseDescription": "",
                      "contributingFactors": [], "lessonsLearned": "",
                      "witnesses": [], "notes": "", "attachments": [],
                  },
                  actions=[{
                      "id": "act-1", "title": "Paint pedestrian walkway",
                      "description": "Mark aisle 4 walkway", "priority": "high",
                      "dueDate": _day(10), "actionType": "preventive",
                      "status": "pending", "ticketId": "TKT-1",
                      "ticketStatus": "open", "assignee": "James Brown",
                      "createdAt": _stamp(5),
                  }]),
        _incident("inc-3", "comp-1", "INC-100003", "usr-3", "equipment_failure", "low", "resolved",
                  "Conveyor belt slipped", 3,
                  location_id="loc-3", resolved_at=_stamp(1), resolved_by="usr-2",
                  resolution_notes="Belt tension adjusted"),
        _incident("inc-4", "comp-2", "INC-200001", "usr-5", "spill", "medium", "new",
                  "Diesel spill at dock 2", 1, location_id="loc-5"),
    ]


def seed_tickets():
    ts = _stamp(5)
    return [
        {"id": "TKT-1", "company_id": "comp-1", "title": "Paint pedestrian walkway",
         "description": "Mark aisle 4 walkway", "priority": "high", "status": "new",
         "due_date": _day(10), "assigned_to": "usr-4", "assigned_groups": [],
         "incident_ids": ["inc-2"], "created_by": "usr-2",
         "created_at": ts, "updated_at": ts},
    ]


# ================================================================
# CHECKLISTS & RISK
# ================================================================

def seed_checklist_templates():
    return [
        {"id": "tpl-1", "company_id": "comp-1", "name": "Daily Workplace Safety Check",
         "description": "Start-of-shift walk-through", "category": "general",
         "assignment": "all", "recurrence": "daily", "is_active": True,
         "items": [
             {"id": "q1", "question": "Emergency exits clear?", "type": "yes_no_na", "required": True, "order": 1},
             {"id": "q2", "question": "Fire extinguishers in place?", "type": "pass_fail", "required": True, "order": 2},
             {"id": "q3", "question": "Housekeeping rating", "type": "rating", "required": True, "order": 3},
             {"id": "q4", "question": "Other observations", "type": "text", "required": False, "order": 4},
         ]},
    ]


def seed_risk_evaluations():
    submitted = _stamp(4)
    return [
        {"id": "rsk-1", "company_id": "comp-1", "submitter_id": "usr-2",
         "country": "US", "form_type": "jha", "location_id": "loc-2",
         "reference_number": "JHA-2026-001", "status": "submitted",
         "reviewed_by": None, "reviewed_at": None, "submitted_at": submitted,
         "responses": {
             "jobTitle": "Press die change", "department": "Assembly",
             "jobSteps": [
                 {"step": "Lock out press", "hazard": "Unexpected start-up",
                  "severity": 5, "probability": 2, "controls": "LOTO procedure"},
                 {"step": "Remove die", "hazard": "Crushed hands",
                  "severity": 4, "probability": 3, "controls": "Die cart, gloves"},
             ],
             "ppeRequired": ["safety_glasses", "gloves", "steel_toe_boots"],
             "additionalNotes": "Two-person job",
         },
         "created_at": submitted},
    ]


SEED_BUILDERS = {
    "companies": seed_companies,
    "users": seed_users,
    "teams": seed_teams,
    "locations": seed_locations,
    "assets": seed_assets,
    "asset_inspections": seed_asset_inspections,
    "maintenance_schedules": seed_maintenance_schedules,
    "downtime_logs": seed_downtime_logs,
    "corrective_actions": seed_corrective_actions,
    "work_orders": seed_work_orders,
    "incidents": seed_incidents,
    "tickets": seed_tickets,
    "checklist_templates": seed_checklist_templates,
    "risk_evaluations": seed_risk_evaluations,
}
