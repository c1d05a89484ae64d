"""
QA Scenario Hub
AI Blueprint — scenario generation.

Endpoints:
    POST /api/v1/generate    Body: { "project_id": int }

Replaces every scenario of the project with a freshly generated set.
"""

from flask import Blueprint, current_app, g

from app.ai.assistants import ScenarioGenerator
from app.auth import login_required
from app.core.exceptions import ValidationError
from app.utils.errors import api_ok
from app.utils.helpers import int_field, json_body

ai_bp = Blueprint("ai", __name__, url_prefix="/api/v1")


def _get_gateway():
    """Gateway override registered on the app (tests), else None → built from config."""
    return current_app.extensions.get("llm_gateway")


@ai_bp.route("/generate", methods=["POST"])
@login_required
def generate_scenarios():
    data = json_body()
    if data.get("project_id") is None:
        raise ValidationError("project_id is required", details={"project_id": ["required"]})
    project_id = int_field(data["project_id"], "project_id")

    generator = ScenarioGenerator(gateway=_get_gateway())
    scenarios = generator.generate(project_id, g.current_user.id)
    return api_ok({
        "project_id": project_id,
        "count": len(scenarios),
        "scenarios": [s.to_dict(include_test_cases=True) for s in scenarios],
    })
