"""
Harmoniq Safety - Asset & Maintenance Tests
============================================
Tests: Asset register, QR labels, CSV/XLSX, inspections, downtime,
corrective actions, health score, alerts, maintenance schedules, work orders
"""

import datetime
import io

import pytest
from tests.conftest import API, save_artifact, store_count

from harmoniq.assets.alerts import alert_severity, compute_asset_alerts
from harmoniq.assets.health import compute_health, downtime_penalty, health_label
from harmoniq.maintenance.schedule import (
    add_months, is_due_soon, is_overdue, maintenance_compliance, next_due_from, schedule_state,
)

NOW = datetime.datetime(2026, 1, 1, 12, 0, 0)
TODAY = datetime.date.today()


# ============================================================================
# HEALTH SCORE (pure)
# ============================================================================

class TestHealthScore:

    def test_new_asset_good_condition(self):
        health = compute_health({"condition": "good"}, [], [], [], now=NOW)
        assert health["score"] == 95
        assert health["pass_rate"] == 0
        assert health["label"].startswith("Good condition")

    def test_all_penalties(self):
        asset = {"condition": "fair", "purchase_date": "2017-01-01", "expected_life_years": 10}
        inspections = [{"result": "pass"}, {"result": "fail"}]
        schedules = [
            {"next_due_date": "2025-12-01", "is_active": True},
            {"next_due_date": "2026-03-01", "is_active": True},
        ]
        downtime = [{"duration_hours": 12}, {"duration_hours": None}]
        health = compute_health(asset, inspections, schedules, downtime, now=NOW)
        # 100 - 15 (insp) - 12.5 (maint) - 15 (fair) - 5 (downtime) - 10 (age) = 42.5
        assert health["score"] == 43
        assert health["overdue_schedules"] == 1
        assert health["downtime_hours"] == 12
        assert health["label"].startswith("Poor condition")

    def test_inactive_schedules_ignored(self):
        schedules = [{"next_due_date": "2020-01-01", "is_active": False}]
        health = compute_health({"condition": "excellent"}, [], schedules, [], now=NOW)
        assert health["score"] == 100
        assert health["active_schedules"] == 0

    def test_score_clamped_at_zero(self):
        asset = {"condition": "critical", "purchase_date": "2000-01-01", "expected_life_years": 5}
        health = compute_health(asset, [{"result": "fail"}], [{"next_due_date": "2020-01-01"}],
                                [{"duration_hours": 500}], now=NOW)
        assert health["score"] == 0

    @pytest.mark.parametrize("hours,penalty", [(0, 0), (10, 0), (10.5, 5), (41, 10), (101, 15)])
    def test_downtime_penalty(self, hours, penalty):
        assert downtime_penalty(hours) == penalty

    def test_labels(self):
        assert health_label(80).startswith("Good")
        assert health_label(50).startswith("Fair")
        assert health_label(49).startswith("Poor")


# ============================================================================
# ALERTS (pure)
# ============================================================================

class TestAlerts:

    def test_expired_and_upcoming(self):
        asset = {
            "id": "a1", "name": "Pump", "status": "active",
            "warranty_expiry": "2025-12-20",
            "next_maintenance_date": "2026-01-15",
            "next_calibration_date": "2026-01-05",
        }
        alerts = compute_asset_alerts([asset], now=NOW, window_days=90)
        assert [a["type"] for a in alerts] == ["warranty_expired", "maintenance_due"]
        assert alerts[0]["severity"] == "critical"
        assert alerts[0]["id"] == "alert_warranty_a1"
        assert alerts[0]["title"] == "Pump: Warranty expired"
        assert alerts[1]["severity"] == "warning"

    def test_calibration_only_when_required(self):
        asset = {"id": "a2", "name": "Gauge", "requires_calibration": True,
                 "next_calibration_date": "2026-03-01"}
        alerts = compute_asset_alerts([asset], now=NOW, window_days=90)
        assert len(alerts) == 1
        assert alerts[0]["type"] == "calibration_due"
        assert alerts[0]["severity"] == "info"

    def test_outside_window_and_retired_skipped(self):
        far = {"id": "a3", "name": "Far", "warranty_expiry": "2027-01-01"}
        retired = {"id": "a4", "name": "Old", "status": "retired", "warranty_expiry": "2020-01-01"}
        assert compute_asset_alerts([far, retired], now=NOW, window_days=90) == []

    def test_severity_thresholds(self):
        assert alert_severity(-0.5) == "critical"
        assert alert_severity(30) == "warning"
        assert alert_severity(31) == "info"


# ============================================================================
# SCHEDULE DATE RULES (pure)
# ============================================================================

class TestScheduleRules:

    def test_add_months_clamps(self):
        assert add_months(datetime.date(2024, 1, 31), 1) == datetime.date(2024, 2, 29)
        assert add_months(datetime.date(2025, 11, 30), 3) == datetime.date(2026, 2, 28)

    @pytest.mark.parametrize("value,unit,expected", [
        (10, "days", datetime.date(2026, 1, 11)),
        (2, "weeks", datetime.date(2026, 1, 15)),
        (3, "months", datetime.date(2026, 4, 1)),
        (1, "years", datetime.date(2027, 1, 1)),
    ])
    def test_next_due_from(self, value, unit, expected):
        assert next_due_from(datetime.date(2026, 1, 1), value, unit) == expected

    def test_unknown_unit(self):
        with pytest.raises(ValueError):
            next_due_from(datetime.date(2026, 1, 1), 1, "fortnights")

    def test_due_today_is_not_overdue(self):
        schedule = {"next_due_date": "2026-01-01", "notify_days_before": 7}
        assert not is_overdue(schedule, NOW)
        assert is_due_soon(schedule, NOW)
        assert schedule_state(schedule, NOW) == "due_soon"

    def test_states(self):
        assert schedule_state({"next_due_date": "2025-12-31"}, NOW) == "overdue"
        assert schedule_state({"next_due_date": "2026-06-01", "notify_days_before": 7}, NOW) == "scheduled"
        assert schedule_state({"next_due_date": "2025-01-01", "is_active": False}, NOW) == "inactive"

    def test_compliance(self):
        assert maintenance_compliance([], NOW) == 100
        schedules = [{"next_due_date": "2025-12-01"}, {"next_due_date": "2026-02-01"},
                     {"next_due_date": "2026-03-01"}]
        assert maintenance_compliance(schedules, NOW) == 67


# ============================================================================
# ASSET REGISTER API
# ============================================================================

class TestAssetRegister:

    def test_list_excludes_retired(self, employee_session):
        data = employee_session.get(f"{API}/assets").json()
        assert data["total"] == 3
        assert "ast-4" not in {a["id"] for a in data["assets"]}

    def test_list_include_retired(self, employee_session):
        data = employee_session.get(f"{API}/assets?include_retired=true").json()
        assert data["total"] == 4

    def test_filters(self, employee_session):
        by_search = employee_session.get(f"{API}/assets?search=press").json()["assets"]
        assert [a["id"] for a in by_search] == ["ast-1"]
        by_category = employee_session.get(f"{API}/assets?category=vehicle").json()["assets"]
        assert [a["id"] for a in by_category] == ["ast-2"]

    def test_tenant_isolation(self, admin_session):
        assert admin_session.get(f"{API}/assets/ast-5").status_code == 404

    def test_detail(self, employee_session):
        asset = employee_session.get(f"{API}/assets/ast-1").json()["asset"]
        assert asset["location_name"] == "Assembly Hall A"
        assert len(asset["inspections"]) == 2
        assert asset["inspections"][0]["id"] == "ins-2"
        assert len(asset["schedules"]) == 2
        assert asset["corrective_actions"][0]["id"] == "ca-1"
        assert asset["health"]["score"] == 63
        save_artifact("asset_detail.json", asset)

    def test_health_endpoint(self, employee_session):
        health = employee_session.get(f"{API}/assets/ast-1/health").json()["health"]
        assert health["pass_rate"] == 50
        assert health["overdue_schedules"] == 1
        assert health["downtime_hours"] == 12.5

    def test_create_asset(self, admin_session):
        resp = admin_session.post(f"{API}/assets", json={
            "name": "Drill Press DP-1", "category": "tool", "location_id": "loc-2",
        })
        assert resp.status_code == 200
        asset = resp.json()["asset"]
        assert asset["asset_tag"] == "AST-0005"
        assert asset["currency"] == "USD"
        assert asset["condition"] == "good"
        assert asset["qr_code"]

        scanned = admin_session.get(f"{API}/assets/scan/{asset['qr_code']}").json()["asset"]
        assert scanned["id"] == asset["id"]

    def test_create_validation(self, admin_session):
        assert admin_session.post(f"{API}/assets", json={"name": ""}).status_code == 400
        assert admin_session.post(f"{API}/assets", json={"name": "X", "category": "spaceship"}).status_code == 400
        dup = admin_session.post(f"{API}/assets", json={"name": "X", "asset_tag": "AST-0001"})
        assert dup.status_code == 400
        assert "already exists" in dup.json()["error"]
        foreign = admin_session.post(f"{API}/assets", json={"name": "X", "location_id": "loc-5"})
        assert foreign.status_code == 400

    def test_employee_cannot_create(self, employee_session):
        assert employee_session.post(f"{API}/assets", json={"name": "X"}).status_code == 403

    def test_update_and_retire(self, manager_session):
        resp = manager_session.put(f"{API}/assets/ast-2", json={"condition": "poor"})
        assert resp.json()["asset"]["condition"] == "poor"
        retired = manager_session.delete(f"{API}/assets/ast-2").json()["asset"]
        assert retired["status"] == "retired"
        assert retired["decommission_date"] == TODAY.isoformat()

    def test_scan_unknown(self, employee_session):
        assert employee_session.get(f"{API}/assets/scan/no-such-code").status_code == 404

    def test_stats(self, manager_session):
        stats = manager_session.get(f"{API}/assets/stats").json()["stats"]
        assert stats["total_assets"] == 3
        assert stats["by_status"] == {"active": 3, "retired": 1}
        assert stats["overdue_schedules"] == 1
        assert stats["open_corrective_actions"] == 1
        assert stats["critical_alerts"] == 2

    def test_alerts(self, employee_session):
        alerts = employee_session.get(f"{API}/assets/alerts").json()["alerts"]
        kinds = {(a["asset_id"], a["type"]) for a in alerts}
        assert ("ast-1", "maintenance_overdue") in kinds
        assert ("ast-2", "warranty_expired") in kinds
        assert ("ast-3", "calibration_due") in kinds
        assert alerts[0]["severity"] == "critical"
        assert not any(a["asset_id"] == "ast-4" for a in alerts)


# ============================================================================
# QR / EXPORT / IMPORT
# ============================================================================

class TestAssetFiles:

    def test_qr_png(self, employee_session):
        resp = employee_session.get(f"{API}/assets/ast-1/qr.png")
        assert resp.status_code == 200
        assert resp.headers["content-type"] == "image/png"
        assert resp.content.startswith(b"\x89PNG")

    def test_qr_batch_zip(self, manager_session):
        import zipfile
        resp = manager_session.post(f"{API}/assets/qr/batch", json={"asset_ids": ["ast-1", "ast-2"]})
        assert resp.status_code == 200
        names = zipfile.ZipFile(io.BytesIO(resp.content)).namelist()
        assert sorted(names) == ["AST-0001.png", "AST-0002.png"]

    def test_qr_batch_empty(self, manager_session):
        assert manager_session.post(f"{API}/assets/qr/batch", json={"asset_ids": []}).status_code == 400

    def test_print_sheet(self, manager_session):
        resp = manager_session.get(f"{API}/assets/qr/print-sheet")
        assert resp.status_code == 200
        assert "Asset QR Labels" in resp.text
        assert "AST-0001" in resp.text
        assert '<div class="loc">Assembly Hall A</div>' in resp.text

    def test_export_csv(self, admin_session):
        resp = admin_session.get(f"{API}/assets/export.csv")
        assert resp.status_code == 200
        assert resp.content.startswith(b"\xef\xbb\xbf")
        assert "assets-export-" in resp.headers["content-disposition"]
        lines = resp.content.decode("utf-8-sig").splitlines()
        assert lines[0].startswith("name,asset_tag,serial_number,category")
        assert len(lines) == 5
        save_artifact("assets_export.csv", resp.content, subdir="exported_reports")

    def test_export_requires_permission(self, employee_session):
        assert employee_session.get(f"{API}/assets/export.csv").status_code == 403

    def test_export_xlsx(self, admin_session):
        import openpyxl
        resp = admin_session.get(f"{API}/assets/export.xlsx")
        assert resp.status_code == 200
        ws = openpyxl.load_workbook(io.BytesIO(resp.content)).active
        assert ws.title == "Assets"
        assert ws["A1"].value == "name"
        assert ws.max_row == 5

    def test_import_csv(self, admin_session):
        csv_text = (
            "name,asset_tag,category,purchase_cost\n"
            "Welder W1,,tool,1200\n"
            ",,,\n"
            "Lathe L2,AST-0001,badcat,abc\n"
        )
        resp = admin_session.post(
            f"{API}/assets/import",
            files={"file": ("assets.csv", csv_text.encode("utf-8"), "text/csv")},
        )
        assert resp.status_code == 200
        assert resp.json()["imported"] == 2
        assert resp.json()["skipped"] == 1

        lathe = admin_session.get(f"{API}/assets?search=lathe").json()["assets"][0]
        assert lathe["category"] == "other"
        assert lathe["asset_tag"] != "AST-0001"
        assert lathe["purchase_cost"] is None
        welder = admin_session.get(f"{API}/assets?search=welder").json()["assets"][0]
        assert welder["purchase_cost"] == 1200.0

    def test_import_unterminated_quote_counts_as_skipped(self, admin_session):
        csv_text = (
            "name,category\n"
            "Welder W1,tool\n"
            "\"Grinder G2,tool\n"
            "Drill D3,tool\n"
        )
        resp = admin_session.post(
            f"{API}/assets/import",
            files={"file": ("assets.csv", csv_text.encode("utf-8"), "text/csv")},
        )
        assert resp.status_code == 200
        assert resp.json() == {"ok": True, "imported": 1, "skipped": 2}
        assert store_count("assets", "data LIKE '%Welder W1%'") == 1
        assert store_count("assets", "data LIKE '%Drill D3%'") == 0

    def test_import_without_rows(self, admin_session):
        resp = admin_session.post(
            f"{API}/assets/import",
            files={"file": ("assets.csv", b"name,category\n", "text/csv")},
        )
        assert resp.status_code == 400


# ============================================================================
# INSPECTIONS, DOWNTIME, CORRECTIVE ACTIONS
# ============================================================================

class TestInspections:

    def test_failed_item_opens_action(self, technician_session):
        before = store_count("corrective_actions")
        resp = technician_session.post(f"{API}/assets/ast-2/inspections", json={
            "answers": {"v1": "pass", "v3": "fail"}, "condition": "fair",
        })
        assert resp.status_code == 200
        inspection = resp.json()["inspection"]
        assert inspection["result"] == "needs_attention"
        assert inspection["reference_number"].startswith("INS-")
        assert store_count("corrective_actions") == before + 1

        actions = technician_session.get(f"{API}/corrective-actions?asset_id=ast-2").json()["actions"]
        assert actions[0]["description"] == "Failed: Tires - adequate tread and pressure"
        assert actions[0]["severity"] == "medium"

    def test_pass_opens_nothing(self, technician_session):
        before = store_count("corrective_actions")
        resp = technician_session.post(f"{API}/assets/ast-1/inspections", json={
            "answers": {"m1": "pass", "m2": "pass"},
        })
        assert resp.json()["inspection"]["result"] == "pass"
        assert store_count("corrective_actions") == before

    def test_explicit_fail_uses_notes(self, technician_session):
        technician_session.post(f"{API}/assets/ast-3/inspections", json={
            "result": "fail", "notes": "Pressure gauge in red",
        })
        actions = technician_session.get(f"{API}/corrective-actions?asset_id=ast-3").json()["actions"]
        assert actions[0]["description"] == "Pressure gauge in red"
        assert actions[0]["severity"] == "critical"

    def test_invalid_result(self, technician_session):
        resp = technician_session.post(f"{API}/assets/ast-1/inspections", json={"result": "meh"})
        assert resp.status_code == 400


class TestDowntime:

    def test_start_and_end(self, technician_session):
        resp = technician_session.post(f"{API}/assets/ast-2/downtime", json={
            "reason": "Flat tire", "category": "breakdown", "production_impact": "partial",
            "start_date": "2026-01-01 08:00:00",
        })
        assert resp.status_code == 200
        log_id = resp.json()["downtime"]["id"]
        asset = technician_session.get(f"{API}/assets/ast-2").json()["asset"]
        assert asset["status"] == "maintenance"

        again = technician_session.post(f"{API}/assets/ast-2/downtime", json={"reason": "Again"})
        assert again.status_code == 400

        ended = technician_session.post(f"{API}/downtime/{log_id}/end",
                                        json={"end_date": "2026-01-01 12:30:00"})
        assert ended.status_code == 200
        assert ended.json()["downtime"]["duration_hours"] == 4.5
        asset = technician_session.get(f"{API}/assets/ast-2").json()["asset"]
        assert asset["status"] == "active"

    def test_end_before_start(self, technician_session):
        log_id = technician_session.post(f"{API}/assets/ast-2/downtime", json={
            "reason": "Leak", "start_date": "2026-01-02 08:00:00",
        }).json()["downtime"]["id"]
        resp = technician_session.post(f"{API}/downtime/{log_id}/end",
                                       json={"end_date": "2026-01-01 08:00:00"})
        assert resp.status_code == 400

    def test_reason_required(self, technician_session):
        assert technician_session.post(f"{API}/assets/ast-2/downtime", json={}).status_code == 400


class TestCorrectiveActions:

    def test_non_assignee_denied(self, employee_session):
        resp = employee_session.put(f"{API}/corrective-actions/ca-1", json={"status": "completed"})
        assert resp.status_code == 403

    def test_assignee_completes(self, technician_session):
        resp = technician_session.put(f"{API}/corrective-actions/ca-1", json={
            "status": "completed", "resolution_notes": "Latch replaced",
        })
        assert resp.status_code == 200
        action = resp.json()["action"]
        assert action["status"] == "completed"
        assert action["completed_at"]

    def test_overdue_not_settable(self, manager_session):
        resp = manager_session.put(f"{API}/corrective-actions/ca-1", json={"status": "overdue"})
        assert resp.status_code == 400

    def test_overdue_is_derived(self, manager_session):
        manager_session.put(f"{API}/corrective-actions/ca-1", json={"due_date": "2020-01-01"})
        action = manager_session.get(f"{API}/corrective-actions/ca-1").json()["action"]
        assert action["status"] == "overdue"
        assert action["assignee_name"] == "James Brown"


# ============================================================================
# MAINTENANCE
# ============================================================================

class TestMaintenance:

    def test_overview(self, manager_session):
        data = manager_session.get(f"{API}/maintenance").json()
        assert len(data["schedules"]) == 3
        assert data["overdue"] == 1
        assert data["due_soon"] == 1
        assert data["compliance"] == 67
        first = data["schedules"][0]
        assert first["id"] == "sch-1"
        assert first["state"] == "overdue"
        assert first["assignee_name"] == "James Brown"

    def test_overview_compliance_counts_inactive_schedules(self, manager_session):
        manager_session.delete(f"{API}/maintenance/sch-2")
        manager_session.put(f"{API}/maintenance/sch-3", json={"is_active": False})
        data = manager_session.get(f"{API}/maintenance").json()
        # sch-1 active and overdue, sch-3 inactive
        assert data["overdue"] == 1
        assert data["compliance"] == 50

    def test_overview_state_filter(self, manager_session):
        data = manager_session.get(f"{API}/maintenance?state=due_soon").json()
        assert [s["id"] for s in data["schedules"]] == ["sch-2"]
        assert data["schedules"][0]["assignee_name"] == "Maintenance Crew"

    def test_complete_rolls_forward(self, technician_session):
        resp = technician_session.post(f"{API}/maintenance/sch-1/complete", json={"notes": "Oil changed"})
        assert resp.status_code == 200
        data = resp.json()
        expected = add_months(TODAY, 3).isoformat()
        assert data["schedule"]["next_due_date"] == expected
        assert data["schedule"]["last_completed_date"] == TODAY.isoformat()
        assert data["schedule"]["state"] == "scheduled"
        assert data["log"]["notes"] == "Oil changed"
        asset = technician_session.get(f"{API}/assets/ast-1").json()["asset"]
        assert asset["next_maintenance_date"] == expected

    def test_complete_without_body(self, manager_session):
        resp = manager_session.post(f"{API}/maintenance/sch-3/complete")
        assert resp.status_code == 200

    def test_unassigned_employee_cannot_complete(self, employee_session):
        assert employee_session.post(f"{API}/maintenance/sch-1/complete", json={}).status_code == 403

    def test_create_schedule(self, manager_session):
        resp = manager_session.post(f"{API}/assets/ast-2/schedules", json={
            "name": "Tire check", "frequency_value": 2, "frequency_unit": "weeks",
        })
        assert resp.status_code == 200
        schedule = resp.json()["schedule"]
        assert schedule["next_due_date"] == (TODAY + datetime.timedelta(days=14)).isoformat()
        assert schedule["priority"] == "medium"

    def test_create_schedule_validation(self, manager_session):
        bad_unit = manager_session.post(f"{API}/assets/ast-2/schedules", json={
            "name": "X", "frequency_unit": "decades",
        })
        assert bad_unit.status_code == 400
        bad_value = manager_session.post(f"{API}/assets/ast-2/schedules", json={
            "name": "X", "frequency_value": 0,
        })
        assert bad_value.status_code == 400

    def test_create_schedule_null_fields_use_defaults(self, manager_session):
        resp = manager_session.post(f"{API}/assets/ast-2/schedules", json={
            "name": "Belt check", "frequency_value": None, "frequency_unit": None,
            "priority": None, "notify_days_before": None,
        })
        assert resp.status_code == 200
        schedule = resp.json()["schedule"]
        assert schedule["frequency_unit"] == "months"
        assert schedule["frequency_value"] == 1
        assert schedule["priority"] == "medium"
        assert schedule["notify_days_before"] == 7
        assert schedule["next_due_date"] == add_months(TODAY, 1).isoformat()

    @pytest.mark.parametrize("notify", ["soon", -1, "3 days"])
    def test_create_schedule_bad_notify_days(self, manager_session, notify):
        resp = manager_session.post(f"{API}/assets/ast-2/schedules", json={
            "name": "Belt check", "notify_days_before": notify,
        })
        assert resp.status_code == 400

    def test_update_schedule_rejects_null_unit(self, manager_session):
        resp = manager_session.put(f"{API}/maintenance/sch-3", json={"frequency_unit": None})
        assert resp.status_code == 400
        resp = manager_session.put(f"{API}/maintenance/sch-3", json={"notify_days_before": None})
        assert resp.status_code == 400

    def test_update_and_delete(self, manager_session):
        resp = manager_session.put(f"{API}/maintenance/sch-3", json={"is_active": False})
        assert resp.json()["schedule"]["is_active"] is False
        assert manager_session.delete(f"{API}/maintenance/sch-3").status_code == 200
        assert store_count("maintenance_schedules", "id = 'sch-3'") == 0


class TestWorkOrders:

    def test_list_with_summary(self, manager_session):
        data = manager_session.get(f"{API}/work-orders").json()
        assert data["summary"]["requested"] == 1
        assert data["work_orders"][0]["technician_name"] == "James Brown"
        assert data["work_orders"][0]["asset_name"] == "Hydraulic Press HP-200"

    def test_invalid_transition(self, manager_session):
        resp = manager_session.post(f"{API}/work-orders/wo-1/status", json={"status": "completed"})
        assert resp.status_code == 400

    def test_lifecycle_closes_corrective_action(self, manager_session):
        manager_session.put(f"{API}/work-orders/wo-1", json={"actual_hours": 5})
        for status in ("approved", "in_progress", "completed"):
            resp = manager_session.post(f"{API}/work-orders/wo-1/status", json={"status": status})
            assert resp.status_code == 200, resp.text
        assert resp.json()["work_order"]["completed_at"]

    def test_completion_closes_linked_action(self, technician_session):
        order = technician_session.post(f"{API}/work-orders", json={
            "title": "Fix latch", "asset_id": "ast-1", "assigned_to": "usr-4",
            "corrective_action_id": "ca-1",
        }).json()["work_order"]
        assert order["status"] == "requested"
        approved = technician_session.post(f"{API}/work-orders/{order['id']}/status",
                                               json={"status": "approved"})
        assert approved.status_code == 200
        technician_session.post(f"{API}/work-orders/{order['id']}/status", json={"status": "in_progress"})
        technician_session.post(f"{API}/work-orders/{order['id']}/status", json={"status": "completed"})
        action = technician_session.get(f"{API}/corrective-actions/ca-1").json()["action"]
        assert action["status"] == "completed"

    def test_title_required(self, employee_session):
        assert employee_session.post(f"{API}/work-orders", json={}).status_code == 400
