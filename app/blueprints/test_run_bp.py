"""
QA Scenario Hub
Test Run Blueprint — execution snapshots.

Endpoints:
    GET    /api/v1/test-runs?project_id=<pid>   — Runs with stats, newest first
    POST   /api/v1/test-runs                    — Create run (+ one NOT_RUN result per scenario)
    GET    /api/v1/test-runs/<id>               — Run with results and stats
    PATCH  /api/v1/test-runs/<id>               — Update one result
    DELETE /api/v1/test-runs/<id>               — Delete run
"""

from flask import Blueprint, g, request

from app.auth import login_required
from app.core.exceptions import ValidationError
from app.services import test_run_service
from app.utils.errors import api_ok
from app.utils.helpers import int_field, json_body

test_run_bp = Blueprint("test_run", __name__, url_prefix="/api/v1/test-runs")


@test_run_bp.route("", methods=["GET"])
@login_required
def list_runs():
    raw = request.args.get("project_id")
    if not raw:
        raise ValidationError("project_id is required", details={"project_id": ["required"]})
    runs = test_run_service.list_runs(int_field(raw, "project_id"), g.current_user.id)
    return api_ok([r.to_dict() for r in runs])


@test_run_bp.route("", methods=["POST"])
@login_required
def create_run():
    """
    Body: { "project_id": 1, "name": "...", "app_version": "2.3.0", "environment": "STAGING" }
    """
    data = json_body()
    run = test_run_service.create_run(g.current_user.id, data)
    return api_ok(run.to_dict(include_results=True), status=201)


@test_run_bp.route("/<int:run_id>", methods=["GET"])
@login_required
def get_run(run_id):
    run = test_run_service.get_run(run_id, g.current_user.id)
    return api_ok(run.to_dict(include_results=True))


@test_run_bp.route("/<int:run_id>", methods=["PATCH"])
@login_required
def update_result(run_id):
    """
    Body: { "result_id": 7, "status": "PASS", "note": "..." }
    """
    data = json_body()
    result = test_run_service.update_result(run_id, g.current_user.id, data)
    return api_ok(result.to_dict())


@test_run_bp.route("/<int:run_id>", methods=["DELETE"])
@login_required
def delete_run(run_id):
    test_run_service.delete_run(run_id, g.current_user.id)
    return api_ok({"message": "Test run deleted", "id": run_id})
