"""
Auth Blueprint — registration and JWT login.

Endpoints:
  POST /api/v1/auth/register    — Company email + password → account
  POST /api/v1/auth/login       — Email + password → JWT access token
  GET  /api/v1/auth/me          — Current user profile
"""

from flask import Blueprint, g

from app.auth import login_required
from app.services import auth_service
from app.services.jwt_service import generate_access_token
from app.utils.errors import api_ok
from app.utils.helpers import json_body

auth_bp = Blueprint("auth", __name__, url_prefix="/api/v1/auth")


@auth_bp.route("/register", methods=["POST"])
def register():
    """
    Body: { "name": "...", "email": "...", "password": "...", "confirm_password": "..." }
    """
    data = json_body()
    user = auth_service.register_user(data)
    return api_ok({"message": "Registration complete", "user": user.to_dict()}, status=201)


@auth_bp.route("/login", methods=["POST"])
def login():
    """
    Body: { "email": "...", "password": "..." }
    """
    data = json_body()
    user = auth_service.authenticate_user(data.get("email"), data.get("password"))
    token = generate_access_token(user.id, user.email)
    return api_ok({**token, "user": user.to_dict()})


@auth_bp.route("/me", methods=["GET"])
@login_required
def me():
    return api_ok(g.current_user.to_dict())
