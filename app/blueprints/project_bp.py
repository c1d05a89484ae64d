"""
QA Scenario Hub
Project Blueprint — CRUD API for projects, members, export and manual scenarios.

Endpoints:
    Projects:
        GET    /api/v1/projects                          — Projects I own or belong to
        POST   /api/v1/projects                          — Create project
        GET    /api/v1/projects/<id>                     — Detail (+ scenarios, test cases)
        PUT    /api/v1/projects/<id>                     — Partial update
        DELETE /api/v1/projects/<id>                     — Delete (owner only)

    Members:
        GET    /api/v1/projects/<id>/members             — Owner + members
        POST   /api/v1/projects/<id>/members             — Invite by email
        DELETE /api/v1/projects/<id>/members/<mid>       — Remove member

    Other:
        GET    /api/v1/projects/<id>/export              — Markdown download
        POST   /api/v1/projects/<id>/scenarios           — Add a manual scenario
"""

from urllib.parse import quote

from flask import Blueprint, Response, g

from app.auth import login_required
from app.services import project_service, scenario_service
from app.services.export_service import export_filename, render_project_markdown
from app.utils.errors import api_ok
from app.utils.helpers import json_body

project_bp = Blueprint("project", __name__, url_prefix="/api/v1/projects")


# ═════════════════════════════════════════════════════════════════════════════
# PROJECTS
# ═════════════════════════════════════════════════════════════════════════════

@project_bp.route("", methods=["GET"])
@login_required
def list_projects():
    projects = project_service.list_projects(g.current_user.id)
    return api_ok([p.to_dict() for p in projects])


@project_bp.route("", methods=["POST"])
@login_required
def create_project():
    data = json_body()
    project = project_service.create_project(g.current_user.id, data)
    return api_ok(project.to_dict(), status=201)


@project_bp.route("/<int:project_id>", methods=["GET"])
@login_required
def get_project(project_id):
    """Project with ordered scenarios, their test cases and assignees."""
    project = project_service.get_project_for(project_id, g.current_user.id)
    data = project.to_dict(include_scenarios=True)
    data["my_role"] = project.member_role(g.current_user.id)
    return api_ok(data)


@project_bp.route("/<int:project_id>", methods=["PUT"])
@login_required
def update_project(project_id):
    data = json_body()
    project = project_service.update_project(project_id, g.current_user.id, data)
    return api_ok(project.to_dict())


@project_bp.route("/<int:project_id>", methods=["DELETE"])
@login_required
def delete_project(project_id):
    project_service.delete_project(project_id, g.current_user.id)
    return api_ok({"message": "Project deleted", "id": project_id})


# ═════════════════════════════════════════════════════════════════════════════
# MEMBERS
# ═════════════════════════════════════════════════════════════════════════════

@project_bp.route("/<int:project_id>/members", methods=["GET"])
@login_required
def list_members(project_id):
    return api_ok(project_service.list_members(project_id, g.current_user.id))


@project_bp.route("/<int:project_id>/members", methods=["POST"])
@login_required
def invite_member(project_id):
    data = json_body()
    member = project_service.invite_member(project_id, g.current_user.id, data)
    return api_ok(member.to_dict(), status=201)


@project_bp.route("/<int:project_id>/members/<int:member_id>", methods=["DELETE"])
@login_required
def remove_member(project_id, member_id):
    project_service.remove_member(project_id, g.current_user.id, member_id)
    return api_ok({"message": "Member removed", "id": member_id})


# ═════════════════════════════════════════════════════════════════════════════
# EXPORT / MANUAL SCENARIOS
# ═════════════════════════════════════════════════════════════════════════════

@project_bp.route("/<int:project_id>/export", methods=["GET"])
@login_required
def export_project(project_id):
    project = project_service.get_project_for(project_id, g.current_user.id)
    filename = export_filename(project.title)
    return Response(
        render_project_markdown(project),
        mimetype="text/markdown",
        headers={"Content-Disposition": f"attachment; filename*=UTF-8''{quote(filename)}"},
    )


@project_bp.route("/<int:project_id>/scenarios", methods=["POST"])
@login_required
def create_scenario(project_id):
    data = json_body()
    scenario = scenario_service.create_scenario(project_id, g.current_user.id, data)
    return api_ok(scenario.to_dict(include_test_cases=True), status=201)
