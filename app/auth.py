"""
QA Scenario Hub
Authentication decorator.

Security model:
    - Every /api/v1/* endpoint except auth login/register and health
      requires a valid JWT access token (Authorization: Bearer <token>)
    - Project-level access (view / manage / owner) is checked in the
      service layer, not here
"""

import functools
import logging

from flask import g

from app.core.exceptions import AuthenticationError
from app.models import db
from app.models.auth import User

logger = logging.getLogger(__name__)


def login_required(f):
    """
    Decorator: resolve ``g.current_user`` from the JWT or answer 401.

    Usage:
        @project_bp.route("/projects", methods=["GET"])
        @login_required
        def list_projects(): ...
    """

    @functools.wraps(f)
    def decorated(*args, **kwargs):
        user_id = getattr(g, "jwt_user_id", None)
        if not user_id:
            raise AuthenticationError(getattr(g, "jwt_error", None) or "Authentication required")

        user = db.session.get(User, user_id)
        if not user:
            logger.warning("Token for unknown user id=%s", user_id)
            raise AuthenticationError("Authentication required")

        g.current_user = user
        return f(*args, **kwargs)

    return decorated
