"""
Harmoniq Safety - Incident Tests
=================================
Tests: Visibility, reporting, workflow, investigation, actions/tickets,
comments, timeline, dashboard stats, analytics
"""

import datetime

import pytest
from tests.conftest import API, save_artifact, store_count

from harmoniq.incidents.stats import analytics, dashboard_stats
from harmoniq.incidents.workflow import action_status_for_ticket, can_close


# ============================================================================
# PURE RULES
# ============================================================================

class TestIncidentRules:

    def test_can_close(self):
        assert can_close({"actions": []})
        assert can_close({"actions": [{"status": "completed"}]})
        assert not can_close({"actions": [{"status": "completed"}, {"status": "pending"}]})

    @pytest.mark.parametrize("ticket,action", [
        ("open", "pending"), ("in_progress", "in_progress"), ("resolved", "completed"),
    ])
    def test_action_status_follows_ticket(self, ticket, action):
        assert action_status_for_ticket(ticket) == action

    def test_dashboard_stats_empty(self):
        stats = dashboard_stats([])
        assert stats["total_incidents"] == 0
        assert stats["compliance_rate"] == 100
        assert stats["ltir"] == 0

    def test_analytics_fixed_clock(self):
        now = datetime.datetime(2026, 3, 15, 9, 0, 0)
        incidents = [
            {"type": "injury", "severity": "high", "status": "resolved", "lost_time": True,
             "incident_date": "2026-03-01", "created_at": "2026-03-01 08:00:00",
             "resolved_at": "2026-03-01 18:00:00", "location_id": "l1"},
            {"type": "near_miss", "severity": "low", "status": "new",
             "incident_date": "2026-02-10", "created_at": "2026-02-10 08:00:00", "location_id": "l2"},
            {"type": "near_miss", "severity": "low", "status": "new",
             "incident_date": "2025-01-10", "created_at": "2025-01-10 08:00:00"},
        ]
        result = analytics(incidents, 2, date_range="last_90_days", now=now)
        assert result["total_incidents"] == 2
        assert result["lost_time_incidents"] == 1
        assert result["avg_resolution_hours"] == 10
        assert result["ltir"] == 50.0
        assert result["trir"] == 1.0
        assert result["compliance_rate"] == 50
        assert result["by_type"] == {"Injury": 1, "Near Miss": 1}
        march = next(m for m in result["months"] if m["month_key"] == "2026-03")
        assert march["incidents"] == 1
        assert march["compliance_rate"] == 100
        assert march["month"] == "Mar '26"

    def test_analytics_filters(self):
        now = datetime.datetime(2026, 3, 15, 9, 0, 0)
        incidents = [
            {"type": "fire", "severity": "critical", "status": "new", "incident_date": "2026-03-01",
             "location_id": "l1"},
            {"type": "fire", "severity": "low", "status": "new", "incident_date": "2026-03-02",
             "location_id": "l2"},
        ]
        assert analytics(incidents, 1, date_range="all_time", severity="critical", now=now)["total_incidents"] == 1
        assert analytics(incidents, 1, date_range="all_time", location_id="l2", now=now)["total_incidents"] == 1


# ============================================================================
# VISIBILITY
# ============================================================================

class TestVisibility:

    def test_employee_sees_own(self, employee_session):
        data = employee_session.get(f"{API}/incidents").json()
        assert [i["id"] for i in data["incidents"]] == ["inc-1", "inc-3"]
        assert data["incidents"][0]["reporter_name"] == "Emma Wilson"
        assert data["incidents"][0]["location_name"] == "Assembly Hall A"

    def test_manager_sees_team(self, manager_session):
        ids = {i["id"] for i in manager_session.get(f"{API}/incidents").json()["incidents"]}
        assert ids == {"inc-1", "inc-3"}

    def test_admin_sees_all(self, admin_session):
        data = admin_session.get(f"{API}/incidents").json()
        assert data["total"] == 3
        assert [i["id"] for i in data["incidents"]] == ["inc-1", "inc-3", "inc-2"]

    def test_hidden_incident_is_404(self, employee_session):
        assert employee_session.get(f"{API}/incidents/inc-2").status_code == 404

    def test_other_tenant_is_404(self, admin_session):
        assert admin_session.get(f"{API}/incidents/inc-4").status_code == 404

    def test_filters(self, admin_session):
        high = admin_session.get(f"{API}/incidents?severity=high").json()["incidents"]
        assert [i["id"] for i in high] == ["inc-1"]
        search = admin_session.get(f"{API}/incidents?search=forklift").json()["incidents"]
        assert [i["id"] for i in search] == ["inc-2"]
        by_ref = admin_session.get(f"{API}/incidents?search=INC-100003").json()["incidents"]
        assert [i["id"] for i in by_ref] == ["inc-3"]


# ============================================================================
# REPORTING & EDITING
# ============================================================================

class TestReporting:

    def test_report_incident(self, employee_session):
        resp = employee_session.post(f"{API}/incidents", json={
            "title": "Slippery floor near dock", "type": "hazard", "severity": "low",
            "location_id": "loc-4", "active_hazard": True,
        })
        assert resp.status_code == 200
        incident = resp.json()["incident"]
        assert incident["reference_number"].startswith("INC-")
        assert len(incident["reference_number"]) == 10
        assert incident["status"] == "new"
        assert incident["priority"] == "low"
        assert incident["reporter_id"] == "usr-3"
        assert incident["actions"] == []

    def test_report_validation(self, employee_session):
        assert employee_session.post(f"{API}/incidents", json={"type": "fire"}).status_code == 400
        assert employee_session.post(f"{API}/incidents", json={"title": "X"}).status_code == 400
        bad = employee_session.post(f"{API}/incidents", json={"title": "X", "type": "alien"})
        assert bad.status_code == 400

    def test_reporter_edits_own(self, employee_session):
        resp = employee_session.put(f"{API}/incidents/inc-1", json={"severity": "critical"})
        assert resp.status_code == 200
        assert resp.json()["incident"]["severity"] == "critical"

    def test_blank_title_rejected(self, employee_session):
        assert employee_session.put(f"{API}/incidents/inc-1", json={"title": "  "}).status_code == 400

    def test_delete_unlinks_tickets(self, admin_session):
        assert admin_session.delete(f"{API}/incidents/inc-2").status_code == 200
        ticket = admin_session.get(f"{API}/tickets").json()["tickets"][0]
        assert ticket["id"] == "TKT-1"
        assert ticket["incident_ids"] == []

    def test_manager_cannot_delete(self, manager_session):
        assert manager_session.delete(f"{API}/incidents/inc-1").status_code == 403


# ============================================================================
# WORKFLOW
# ============================================================================

class TestWorkflow:

    def test_employee_cannot_change_status(self, employee_session):
        resp = employee_session.post(f"{API}/incidents/inc-1/status", json={"status": "resolved"})
        assert resp.status_code == 403

    def test_resolve_without_actions(self, manager_session):
        resp = manager_session.post(f"{API}/incidents/inc-1/status", json={
            "status": "resolved", "resolution_notes": "Guard refitted",
        })
        assert resp.status_code == 200
        incident = resp.json()["incident"]
        assert incident["status"] == "resolved"
        assert incident["resolved_by"] == "usr-2"
        assert incident["resolution_notes"] == "Guard refitted"
        assert incident["timeline"][-1]["description"] == "Status changed to Resolved"

    def test_reopen_clears_resolution(self, manager_session):
        resp = manager_session.post(f"{API}/incidents/inc-3/status", json={"status": "in_progress"})
        incident = resp.json()["incident"]
        assert incident["resolved_at"] is None
        assert incident["resolved_by"] is None

    def test_invalid_status(self, manager_session):
        resp = manager_session.post(f"{API}/incidents/inc-1/status", json={"status": "done"})
        assert resp.status_code == 400

    def test_open_action_blocks_resolve(self, admin_session):
        resp = admin_session.post(f"{API}/incidents/inc-2/status", json={"status": "resolved"})
        assert resp.status_code == 400
        assert resp.json()["error"] == "Cannot resolve: 1 action(s) still open"
        detail = admin_session.get(f"{API}/incidents/inc-2").json()
        assert detail["can_close"] is False
        assert [t["id"] for t in detail["tickets"]] == ["TKT-1"]

    def test_ticket_resolution_unblocks(self, admin_session):
        resp = admin_session.post(f"{API}/incidents/inc-2/actions/act-1/ticket-status", json={
            "status": "resolved", "notes": "Walkway painted",
        })
        assert resp.status_code == 200
        action = resp.json()["action"]
        assert action["status"] == "completed"
        assert action["resolutionNotes"] == "Walkway painted"
        ticket = admin_session.get(f"{API}/tickets?incident_id=inc-2").json()["tickets"][0]
        assert ticket["status"] == "resolved"

        resolved = admin_session.post(f"{API}/incidents/inc-2/status", json={"status": "resolved"})
        assert resolved.status_code == 200

    def test_add_action_opens_ticket(self, admin_session):
        before = store_count("tickets")
        resp = admin_session.post(f"{API}/incidents/inc-1/actions", json={
            "title": "Refit guard", "assignee": "James Brown", "dueDate": "2026-12-01",
            "priority": "high", "actionType": "preventive",
        })
        assert resp.status_code == 200
        action = resp.json()["action"]
        assert action["id"].startswith("act-")
        assert action["status"] == "pending"
        assert action["ticketStatus"] == "open"
        assert action["createdBy"] == "Sarah Johnson"
        assert store_count("tickets") == before + 1

        tickets = admin_session.get(f"{API}/tickets?incident_id=inc-1").json()["tickets"]
        assert tickets[0]["id"] == action["ticketId"]
        assert tickets[0]["status"] == "new"

    def test_add_action_validation(self, admin_session):
        resp = admin_session.post(f"{API}/incidents/inc-1/actions", json={"title": "No assignee"})
        assert resp.status_code == 400
        resp = admin_session.post(f"{API}/incidents/inc-1/actions", json={
            "title": "T", "assignee": "A", "dueDate": "2026-12-01", "actionType": "magic",
        })
        assert resp.status_code == 400


class TestInvestigation:

    def test_start_moves_new_to_in_progress(self, manager_session):
        resp = manager_session.post(f"{API}/incidents/inc-1/investigation", json={"investigator": "usr-2"})
        assert resp.status_code == 200
        incident = resp.json()["incident"]
        assert incident["status"] == "in_progress"
        assert incident["investigation"]["investigator"] == "usr-2"
        assert incident["investigation"]["witnesses"] == []

    def test_start_twice(self, admin_session):
        resp = admin_session.post(f"{API}/incidents/inc-2/investigation", json={"investigator": "usr-1"})
        assert resp.status_code == 400

    def test_update_and_witness(self, admin_session):
        bad = admin_session.put(f"{API}/incidents/inc-2/investigation", json={"rootCauseCategory": "gremlins"})
        assert bad.status_code == 400
        ok = admin_session.put(f"{API}/incidents/inc-2/investigation", json={
            "rootCauseCategory": "training", "lessonsLearned": "Refresher course",
            "status": "completed",
        })
        assert ok.status_code == 200
        assert ok.json()["incident"]["investigation"]["status"] == "completed"

        witness = admin_session.post(f"{API}/incidents/inc-2/investigation/witnesses", json={
            "name": "Emma Wilson", "statement": "Saw the forklift reverse without a spotter",
        })
        assert witness.status_code == 200
        witnesses = witness.json()["incident"]["investigation"]["witnesses"]
        assert witnesses[-1]["name"] == "Emma Wilson"

    def test_witness_needs_investigation(self, admin_session):
        resp = admin_session.post(f"{API}/incidents/inc-1/investigation/witnesses", json={
            "name": "A", "statement": "B",
        })
        assert resp.status_code == 400

    def test_employee_cannot_investigate(self, employee_session):
        resp = employee_session.post(f"{API}/incidents/inc-1/investigation", json={"investigator": "usr-3"})
        assert resp.status_code == 403


class TestCommentsAndTimeline:

    def test_comment(self, employee_session):
        resp = employee_session.post(f"{API}/incidents/inc-1/comments", json={"text": "Bandaged on site"})
        assert resp.status_code == 200
        assert resp.json()["comment"]["user"] == "Emma Wilson"

    def test_empty_comment(self, employee_session):
        assert employee_session.post(f"{API}/incidents/inc-1/comments", json={"text": "  "}).status_code == 400

    def test_timeline_order(self, manager_session):
        manager_session.post(f"{API}/incidents/inc-1/status", json={"status": "in_review"})
        manager_session.post(f"{API}/incidents/inc-1/comments", json={"text": "x" * 60})
        events = manager_session.get(f"{API}/incidents/inc-1/timeline").json()["events"]
        assert [e["type"] for e in events] == ["created", "status", "comment"]
        assert events[0]["user"] == "Emma Wilson"
        assert events[1]["description"] == "Status changed to In Review"
        assert events[2]["description"] == "x" * 50 + "..."
        save_artifact("incident_timeline.json", events)

    def test_seeded_timeline_has_investigation_and_action(self, admin_session):
        events = admin_session.get(f"{API}/incidents/inc-2/timeline").json()["events"]
        types = [e["type"] for e in events]
        assert types[0] == "created"
        assert "investigation" in types
        assert "action" in types


# ============================================================================
# STATS & ANALYTICS
# ============================================================================

class TestStats:

    def test_dashboard_stats(self, admin_session):
        stats = admin_session.get(f"{API}/incidents/stats").json()["stats"]
        assert stats["total_incidents"] == 3
        assert stats["open_incidents"] == 2
        assert stats["avg_resolution_time_hours"] == 48
        assert stats["ltir"] == 6.7
        assert stats["compliance_rate"] == 33.3

    def test_analytics_all_time(self, manager_session):
        data = manager_session.get(f"{API}/analytics?range=all_time").json()["analytics"]
        assert data["total_incidents"] == 3
        assert data["lost_time_incidents"] == 1
        assert data["by_type"] == {"Injury": 1, "Near Miss": 1, "Equipment Failure": 1}
        assert data["compliance_rate"] == 33
        assert data["trir"] == 0.8
        assert data["ltir"] == 33.3
        assert sum(m["incidents"] for m in data["months"]) == 3

    def test_analytics_requires_dashboard_role(self, employee_session):
        assert employee_session.get(f"{API}/analytics").status_code == 403

    def test_analytics_export(self, manager_session):
        resp = manager_session.get(f"{API}/analytics/export.csv")
        assert resp.status_code == 200
        lines = resp.content.decode("utf-8-sig").splitlines()
        assert lines[0] == "Reference,Title,Type,Severity,Status,Location,Date"
        assert len(lines) == 3
        save_artifact("incidents_analytics.csv", resp.content, subdir="exported_reports")


# ============================================================================
# TICKETS
# ============================================================================

class TestTickets:

    def test_list(self, manager_session):
        tickets = manager_session.get(f"{API}/tickets").json()["tickets"]
        assert tickets[0]["assignee_name"] == "James Brown"

    def test_create(self, manager_session):
        resp = manager_session.post(f"{API}/tickets", json={"title": "Buy cones", "priority": "low"})
        assert resp.status_code == 200
        ticket = resp.json()["ticket"]
        assert ticket["id"].startswith("TKT-")
        assert ticket["status"] == "new"
        assert ticket["created_by"] == "usr-2"

    def test_create_invalid(self, manager_session):
        assert manager_session.post(f"{API}/tickets", json={"title": "X", "status": "lost"}).status_code == 400
        assert manager_session.post(f"{API}/tickets", json={"title": "X", "incident_ids": ["inc-4"]}).status_code == 404

    def test_assignee_updates(self, technician_session):
        resp = technician_session.put(f"{API}/tickets/TKT-1", json={"status": "in_progress"})
        assert resp.status_code == 200
        assert resp.json()["ticket"]["status"] == "in_progress"

    def test_others_cannot_update(self, employee_session):
        assert employee_session.put(f"{API}/tickets/TKT-1", json={"status": "closed"}).status_code == 403

    def test_employee_cannot_list(self, employee_session):
        assert employee_session.get(f"{API}/tickets").status_code == 403
