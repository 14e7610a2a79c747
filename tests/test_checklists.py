"""
Harmoniq Safety - Checklist Tests
==================================
Tests: Template CRUD, template visibility, submissions (required items,
summary, visibility), built-in asset inspection templates
"""

import pytest
from tests.conftest import API, COMPANY_ADMIN, EMPLOYEE, MANAGER, TECHNICIAN, login, store_count

from harmoniq.checklists.submissions import missing_required, summarize
from harmoniq.checklists.templates import inspection_template_for


TEMPLATE = {"items": [
    {"id": "a", "type": "yes_no_na", "required": True},
    {"id": "b", "type": "pass_fail", "required": True},
    {"id": "c", "type": "rating", "required": True},
    {"id": "d", "type": "text", "required": False},
]}

FULL_RESPONSES = [
    {"item_id": "q1", "value": "yes"},
    {"item_id": "q2", "value": "fail", "comment": "Extinguisher missing at bay 3"},
    {"item_id": "q3", "value": "4"},
]


def _new_template(client, **overrides):
    body = {
        "name": "Forklift Pre-Shift",
        "recurrence": "daily",
        "items": [
            {"question": "Horn works?", "type": "yes_no_na"},
            {"question": "Seat belt", "type": "pass_fail"},
            {"question": "Comments", "type": "text", "required": False},
        ],
    }
    body.update(overrides)
    return client.post(f"{API}/checklists/templates", json=body)


# ============================================================================
# PURE RULES
# ============================================================================

class TestSummary:

    def test_counts(self):
        responses = [
            {"item_id": "a", "value": "yes"},
            {"item_id": "b", "value": "pass"},
            {"item_id": "c", "value": "3"},
            {"item_id": "d", "value": "fine"},
        ]
        summary = summarize(TEMPLATE, responses)
        assert summary["passed"] == 2
        assert summary["failed"] == 0
        assert summary["average_rating"] == 3.0
        assert summary["result"] == "pass"

    def test_any_failure_fails(self):
        summary = summarize(TEMPLATE, [{"item_id": "a", "value": "No"}, {"item_id": "b", "value": "pass"}])
        assert summary["failed"] == 1
        assert summary["result"] == "fail"

    def test_na_and_booleans(self):
        summary = summarize(TEMPLATE, [{"item_id": "a", "value": "na"}, {"item_id": "b", "value": True}])
        assert summary["na"] == 1
        assert summary["passed"] == 1
        assert summary["average_rating"] is None

    def test_unparsable_rating_ignored(self):
        summary = summarize(TEMPLATE, [{"item_id": "c", "value": "good"}, {"item_id": "c", "value": 5}])
        assert summary["average_rating"] == 5.0

    def test_missing_required(self):
        assert missing_required(TEMPLATE, [{"item_id": "a", "value": "yes"}, {"item_id": "b", "value": "  "}]) == ["b", "c"]
        assert missing_required(TEMPLATE, [
            {"item_id": "a", "value": "no"}, {"item_id": "b", "value": False}, {"item_id": "c", "value": 0},
        ]) == []


# ============================================================================
# TEMPLATES
# ============================================================================

class TestTemplates:

    def test_list_seeded(self, employee_session):
        resp = employee_session.get(f"{API}/checklists/templates")
        assert resp.status_code == 200
        templates = resp.json()["templates"]
        assert [t["id"] for t in templates] == ["tpl-1"]

    def test_get(self, employee_session):
        template = employee_session.get(f"{API}/checklists/templates/tpl-1").json()["template"]
        assert template["name"] == "Daily Workplace Safety Check"
        assert len(template["items"]) == 4

    def test_create_assigns_ids_and_order(self, manager_session):
        resp = _new_template(manager_session)
        assert resp.status_code == 200, resp.text
        template = resp.json()["template"]
        assert template["is_active"] is True
        assert [i["order"] for i in template["items"]] == [1, 2, 3]
        assert all(i["id"] for i in template["items"])
        assert template["items"][0]["required"] is True
        assert template["items"][2]["required"] is False
        assert store_count("checklist_templates", "company_id = ?", ("comp-1",)) == 2

    def test_employee_cannot_create(self, employee_session):
        assert _new_template(employee_session).status_code == 403

    @pytest.mark.parametrize("overrides,message", [
        ({"name": ""}, "Template name is required"),
        ({"items": []}, "A checklist needs at least one item"),
        ({"items": [{"question": "Q", "type": "slider"}]}, "Invalid item type: slider"),
        ({"items": [{"type": "text"}]}, "Item 1 has no question"),
        ({"recurrence": "hourly"}, "Invalid recurrence: hourly"),
        ({"assignment": "everyone"}, "Invalid assignment: everyone"),
    ])
    def test_create_validation(self, admin_session, overrides, message):
        resp = _new_template(admin_session, **overrides)
        assert resp.status_code == 400
        assert resp.json()["error"] == message

    def test_update(self, admin_session):
        resp = admin_session.put(f"{API}/checklists/templates/tpl-1",
                                 json={"name": "Shift Start Check", "recurrence": "weekly"})
        assert resp.status_code == 200
        template = resp.json()["template"]
        assert template["name"] == "Shift Start Check"
        assert template["recurrence"] == "weekly"
        assert len(template["items"]) == 4

    def test_inactive_hidden_from_employees(self, client, admin_session):
        admin_session.put(f"{API}/checklists/templates/tpl-1", json={"is_active": False})
        admin_ids = [t["id"] for t in admin_session.get(f"{API}/checklists/templates").json()["templates"]]
        assert "tpl-1" in admin_ids

        login(client, EMPLOYEE)
        assert client.get(f"{API}/checklists/templates").json()["templates"] == []

    def test_delete_unused_template(self, admin_session):
        template_id = _new_template(admin_session).json()["template"]["id"]
        resp = admin_session.delete(f"{API}/checklists/templates/{template_id}")
        assert resp.status_code == 200
        assert resp.json()["deleted"] is True
        assert admin_session.get(f"{API}/checklists/templates/{template_id}").status_code == 404

    def test_delete_used_template_deactivates(self, client, employee_session):
        employee_session.post(f"{API}/checklists/submissions",
                              json={"template_id": "tpl-1", "responses": FULL_RESPONSES})
        login(client, COMPANY_ADMIN)
        resp = client.delete(f"{API}/checklists/templates/tpl-1")
        assert resp.status_code == 200
        body = resp.json()
        assert body["deleted"] is False
        assert body["deactivated"] is True
        assert client.get(f"{API}/checklists/templates/tpl-1").json()["template"]["is_active"] is False

    def test_other_tenant_template_404(self, nl_admin_session):
        resp = nl_admin_session.get("/api/companies/vdberg/checklists/templates/tpl-1")
        assert resp.status_code == 404


# ============================================================================
# SUBMISSIONS
# ============================================================================

class TestSubmissions:

    def test_submit(self, employee_session):
        resp = employee_session.post(f"{API}/checklists/submissions",
                                     json={"template_id": "tpl-1", "location_id": "loc-2",
                                           "responses": FULL_RESPONSES})
        assert resp.status_code == 200, resp.text
        submission = resp.json()["submission"]
        assert submission["status"] == "submitted"
        assert submission["submitter_id"] == "usr-3"
        assert submission["submitted_at"]
        assert submission["summary"] == {
            "passed": 1, "failed": 1, "na": 0, "average_rating": 4.0, "result": "fail",
        }
        assert submission["responses"][1]["comment"] == "Extinguisher missing at bay 3"
        assert submission["responses"][0]["photo_urls"] == []

    def test_required_items_enforced(self, employee_session):
        resp = employee_session.post(f"{API}/checklists/submissions",
                                     json={"template_id": "tpl-1", "responses": FULL_RESPONSES[:1]})
        assert resp.status_code == 400
        assert resp.json()["error"] == "Required items not answered: q2, q3"

    def test_draft_skips_required_check(self, employee_session):
        resp = employee_session.post(f"{API}/checklists/submissions",
                                     json={"template_id": "tpl-1", "status": "draft",
                                           "responses": FULL_RESPONSES[:1]})
        assert resp.status_code == 200
        submission = resp.json()["submission"]
        assert submission["status"] == "draft"
        assert submission["submitted_at"] is None

    def test_unknown_item(self, employee_session):
        resp = employee_session.post(f"{API}/checklists/submissions",
                                     json={"template_id": "tpl-1",
                                           "responses": FULL_RESPONSES + [{"item_id": "zz", "value": "yes"}]})
        assert resp.status_code == 400
        assert resp.json()["error"] == "Unknown checklist item: zz"

    def test_invalid_status(self, employee_session):
        resp = employee_session.post(f"{API}/checklists/submissions",
                                     json={"template_id": "tpl-1", "status": "approved",
                                           "responses": FULL_RESPONSES})
        assert resp.status_code == 400

    def test_inactive_template_rejected(self, client, admin_session):
        admin_session.put(f"{API}/checklists/templates/tpl-1", json={"is_active": False})
        login(client, EMPLOYEE)
        resp = client.post(f"{API}/checklists/submissions",
                           json={"template_id": "tpl-1", "responses": FULL_RESPONSES})
        assert resp.status_code == 400
        assert resp.json()["error"] == "Checklist template is inactive"

    def test_unknown_template(self, employee_session):
        resp = employee_session.post(f"{API}/checklists/submissions",
                                     json={"template_id": "tpl-999", "responses": []})
        assert resp.status_code == 404

    def test_visibility(self, client, employee_session):
        mine = employee_session.post(f"{API}/checklists/submissions",
                                     json={"template_id": "tpl-1", "responses": FULL_RESPONSES}).json()["submission"]

        login(client, TECHNICIAN)
        theirs = client.post(f"{API}/checklists/submissions",
                             json={"template_id": "tpl-1", "responses": FULL_RESPONSES}).json()["submission"]
        listed = client.get(f"{API}/checklists/submissions").json()["submissions"]
        assert [s["id"] for s in listed] == [theirs["id"]]
        assert client.get(f"{API}/checklists/submissions/{mine['id']}").status_code == 404

        login(client, MANAGER)
        listed = client.get(f"{API}/checklists/submissions").json()["submissions"]
        assert {s["id"] for s in listed} == {mine["id"], theirs["id"]}
        names = {s["submitter_name"] for s in listed}
        assert names == {"Emma Wilson", "James Brown"}
        assert client.get(f"{API}/checklists/submissions/{mine['id']}").status_code == 200

    def test_filter_by_status(self, manager_session):
        manager_session.post(f"{API}/checklists/submissions",
                             json={"template_id": "tpl-1", "status": "draft", "responses": []})
        manager_session.post(f"{API}/checklists/submissions",
                             json={"template_id": "tpl-1", "responses": FULL_RESPONSES})
        drafts = manager_session.get(f"{API}/checklists/submissions?status=draft").json()["submissions"]
        assert len(drafts) == 1
        assert drafts[0]["status"] == "draft"


# ============================================================================
# INSPECTION TEMPLATES
# ============================================================================

class TestInspectionTemplates:

    def test_machinery_items(self):
        template = inspection_template_for("machinery")
        assert template["is_default"] is False
        ids = [i["id"] for i in template["items"]]
        assert ids == ["m1", "m2", "m3", "m4", "m5", "m6", "m7"]
        assert template["items"][5]["type"] == "rating"
        assert template["items"][5]["options"] == ["Poor", "Fair", "Good", "Excellent"]
        assert template["items"][-1]["type"] == "text"
        assert template["items"][-1]["required"] is False

    def test_unknown_category_default(self):
        template = inspection_template_for("spaceship")
        assert template["is_default"] is True
        assert template["items"][0]["id"] == "visual"

    def test_copies_are_independent(self):
        first = inspection_template_for("tool")
        first["items"][0]["label"] = "changed"
        assert inspection_template_for("tool")["items"][0]["label"] == "Clean and free of damage"

    def test_route(self, employee_session):
        resp = employee_session.get(f"{API}/inspection-templates/vehicle")
        assert resp.status_code == 200
        labels = [i["label"] for i in resp.json()["template"]["items"]]
        assert "Tires - adequate tread and pressure" in labels
        assert "Mileage / odometer reading" in labels

    def test_route_requires_login(self, anon_client):
        assert anon_client.get(f"{API}/inspection-templates/vehicle").status_code == 401
