"""
User Blueprint — user directory and the caller's assigned scenarios.

Endpoints:
    GET /api/v1/users          — All users (id, name, email) ordered by name
    GET /api/v1/my/scenarios   — Scenarios assigned to me, grouped by project
"""

from flask import Blueprint, g

from app.auth import login_required
from app.services import auth_service, scenario_service
from app.utils.errors import api_ok

user_bp = Blueprint("user", __name__, url_prefix="/api/v1")


@user_bp.route("/users", methods=["GET"])
@login_required
def list_users():
    return api_ok([u.to_brief() for u in auth_service.list_users()])


@user_bp.route("/my/scenarios", methods=["GET"])
@login_required
def my_scenarios():
    return api_ok(scenario_service.my_scenarios(g.current_user.id))
