"""
QA Scenario Hub
Tests — Project API.

Covers:
    - Project CRUD and validation
    - Visibility (owner / member / outsider)
    - Cascade delete
    - Markdown export endpoint
"""

from app.models import db as _db
from app.models.scenario import Scenario, TestCase
from app.models.testing import TestRun
from tests.conftest import PRD_TEXT, auth_headers, create_project, make_user


class TestCreateProject:
    def test_create_minimal(self, client, owner, owner_headers):
        res = client.post("/api/v1/projects", json={
            "title": "Pickup v2",
            "prd_content": PRD_TEXT,
        }, headers=owner_headers)
        assert res.status_code == 201
        data = res.get_json()["data"]
        assert data["title"] == "Pickup v2"
        assert data["platform"] == "CONSUMER_APP"
        assert data["user_id"] == owner.id
        assert data["counts"] == {"scenarios": 0, "test_runs": 0}

    def test_create_full(self, client, owner_headers):
        data = create_project(
            client, owner_headers,
            description="Release 2.3",
            prd_notion_url="https://notion.so/prd-123",
            app_version="2.3.0",
            platform="BOTH",
            release_date="2026-11-01",
        )
        assert data["release_date"] == "2026-11-01"
        assert data["prd_notion_url"] == "https://notion.so/prd-123"
        assert data["platform"] == "BOTH"

    def test_validation_errors_are_collected(self, client, owner_headers):
        res = client.post("/api/v1/projects", json={
            "title": "",
            "prd_content": "short",
            "platform": "WATCH",
            "prd_notion_url": "notion page",
            "release_date": "someday",
        }, headers=owner_headers)
        assert res.status_code == 400
        err = res.get_json()["error"]
        assert err["code"] == "VALIDATION_ERROR"
        assert set(err["details"]) == {"title", "prd_content", "platform", "prd_notion_url", "release_date"}


class TestReadProjects:
    def test_list_only_visible_projects(self, client, owner_headers):
        mine = create_project(client, owner_headers, title="Mine")
        other = make_user("other@monandol.io", name="Other")
        create_project(client, auth_headers(other), title="Theirs")

        res = client.get("/api/v1/projects", headers=owner_headers)
        titles = [p["title"] for p in res.get_json()["data"]]
        assert titles == [mine["title"]]

    def test_member_sees_shared_project(self, client, owner_headers, project):
        member = make_user("member@monandol.io", name="Member")
        client.post(f"/api/v1/projects/{project['id']}/members",
                    json={"email": member.email}, headers=owner_headers)

        res = client.get("/api/v1/projects", headers=auth_headers(member))
        assert [p["id"] for p in res.get_json()["data"]] == [project["id"]]

        detail = client.get(f"/api/v1/projects/{project['id']}", headers=auth_headers(member))
        assert detail.status_code == 200
        assert detail.get_json()["data"]["my_role"] == "MEMBER"

    def test_outsider_gets_404(self, client, project):
        outsider = make_user("outsider@monandol.io", name="Outsider")
        res = client.get(f"/api/v1/projects/{project['id']}", headers=auth_headers(outsider))
        assert res.status_code == 404

    def test_detail_orders_scenarios_and_steps(self, client, owner_headers, project):
        for title in ("First", "Second"):
            client.post(f"/api/v1/projects/{project['id']}/scenarios", json={
                "title": title,
                "test_cases": [{"action": "a1", "expected": "e1"}, {"action": "a2", "expected": "e2"}],
            }, headers=owner_headers)

        data = client.get(f"/api/v1/projects/{project['id']}", headers=owner_headers).get_json()["data"]
        assert [s["title"] for s in data["scenarios"]] == ["First", "Second"]
        assert [s["order"] for s in data["scenarios"]] == [0, 1]
        assert [tc["step"] for tc in data["scenarios"][0]["test_cases"]] == [1, 2]
        assert data["my_role"] == "OWNER"


class TestUpdateDeleteProject:
    def test_partial_update(self, client, owner_headers, project):
        res = client.put(f"/api/v1/projects/{project['id']}",
                         json={"app_version": "3.0.0"}, headers=owner_headers)
        assert res.status_code == 200
        data = res.get_json()["data"]
        assert data["app_version"] == "3.0.0"
        assert data["title"] == project["title"]

    def test_member_cannot_update(self, client, owner_headers, project):
        member = make_user("member@monandol.io")
        client.post(f"/api/v1/projects/{project['id']}/members",
                    json={"email": member.email, "role": "MEMBER"}, headers=owner_headers)
        res = client.put(f"/api/v1/projects/{project['id']}",
                         json={"title": "Hijacked"}, headers=auth_headers(member))
        assert res.status_code == 403

    def test_admin_member_can_update_but_not_delete(self, client, owner_headers, project):
        admin = make_user("admin@monandol.io")
        client.post(f"/api/v1/projects/{project['id']}/members",
                    json={"email": admin.email, "role": "ADMIN"}, headers=owner_headers)
        headers = auth_headers(admin)
        assert client.put(f"/api/v1/projects/{project['id']}",
                          json={"title": "Renamed"}, headers=headers).status_code == 200
        assert client.delete(f"/api/v1/projects/{project['id']}", headers=headers).status_code == 403

    def test_delete_cascades(self, client, owner_headers, project):
        pid = project["id"]
        client.post(f"/api/v1/projects/{pid}/scenarios", json={
            "title": "Cascade me", "test_cases": [{"action": "a", "expected": "e"}],
        }, headers=owner_headers)
        client.post("/api/v1/test-runs", json={
            "project_id": pid, "name": "RC1", "app_version": "1.0.0",
        }, headers=owner_headers)

        res = client.delete(f"/api/v1/projects/{pid}", headers=owner_headers)
        assert res.status_code == 200

        _db.session.expire_all()
        assert Scenario.query.count() == 0
        assert TestCase.query.count() == 0
        assert TestRun.query.count() == 0
        assert client.get(f"/api/v1/projects/{pid}", headers=owner_headers).status_code == 404


class TestExportEndpoint:
    def test_export_is_markdown_attachment(self, client, owner_headers):
        project = create_project(client, owner_headers, title="Lunch Deals 2.0!")
        client.post(f"/api/v1/projects/{project['id']}/scenarios",
                    json={"title": "Happy path"}, headers=owner_headers)

        res = client.get(f"/api/v1/projects/{project['id']}/export", headers=owner_headers)
        assert res.status_code == 200
        assert res.mimetype == "text/markdown"
        disposition = res.headers["Content-Disposition"]
        assert disposition.startswith("attachment;")
        assert "Lunch-Deals-20-" in disposition
        assert disposition.endswith(".md")
        body = res.get_data(as_text=True)
        assert body.startswith("# Lunch Deals 2.0!")
        assert "Happy path" in body
