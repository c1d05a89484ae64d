"""
QA Scenario Hub
Scenario Blueprint — execution status and step editing.

Endpoints:
    PATCH  /api/v1/scenarios/<id>/status                 — Record status / note / bug / assignee
    POST   /api/v1/scenarios/<id>/test-cases             — Append a step
    DELETE /api/v1/scenarios/<id>/test-cases/<tc_id>     — Delete a step, renumber the rest
"""

from flask import Blueprint, g

from app.auth import login_required
from app.services import scenario_service
from app.utils.errors import api_ok
from app.utils.helpers import json_body

scenario_bp = Blueprint("scenario", __name__, url_prefix="/api/v1/scenarios")


@scenario_bp.route("/<int:scenario_id>/status", methods=["PATCH"])
@login_required
def update_status(scenario_id):
    """
    Body: { "status": "FAIL", "failure_note": "...", "bug_ticket_url": "...", "assignee_id": 3 }
    """
    data = json_body()
    scenario = scenario_service.update_status(scenario_id, g.current_user.id, data)
    return api_ok(scenario.to_dict(include_test_cases=True))


@scenario_bp.route("/<int:scenario_id>/test-cases", methods=["POST"])
@login_required
def add_test_case(scenario_id):
    data = json_body()
    test_case = scenario_service.add_test_case(scenario_id, g.current_user.id, data)
    return api_ok(test_case.to_dict(), status=201)


@scenario_bp.route("/<int:scenario_id>/test-cases/<int:test_case_id>", methods=["DELETE"])
@login_required
def delete_test_case(scenario_id, test_case_id):
    remaining = scenario_service.delete_test_case(scenario_id, g.current_user.id, test_case_id)
    return api_ok({"test_cases": [tc.to_dict() for tc in remaining]})
