"""
JWT Auth Middleware — Parses JWT from Authorization header, sets g.jwt_user_id.

The hook never rejects a request on its own; endpoints decorated with
``login_required`` turn a missing or invalid token into 401.
"""

import logging

import jwt as pyjwt
from flask import g, request

from app.services.jwt_service import decode_access_token

logger = logging.getLogger(__name__)

# Paths that skip JWT auth entirely
JWT_SKIP_PREFIXES = (
    "/api/v1/auth/login",
    "/api/v1/auth/register",
    "/api/v1/health",
)


def init_jwt_middleware(app):
    """Register JWT middleware as a before_request hook."""

    @app.before_request
    def _jwt_auth():
        g.jwt_user_id = None
        g.jwt_error = None

        path = request.path
        if not path.startswith("/api/v1/"):
            return
        for prefix in JWT_SKIP_PREFIXES:
            if path.startswith(prefix):
                return

        auth_header = request.headers.get("Authorization", "")
        if not auth_header.startswith("Bearer "):
            return

        token = auth_header[7:]  # Strip "Bearer "

        try:
            payload = decode_access_token(token)
            g.jwt_user_id = int(payload.get("sub"))
        except pyjwt.ExpiredSignatureError:
            g.jwt_error = "Token has expired"
        except (pyjwt.InvalidTokenError, TypeError, ValueError):
            logger.debug("Rejected bearer token on %s", path)
            g.jwt_error = "Invalid token"
