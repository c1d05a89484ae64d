"""
Rate limiting configuration.

Applies per-blueprint rate limits using Flask-Limiter.
The Limiter instance is created in app/__init__.py with no default limits;
this module applies granular limits per route category.

Usage:
    from app.middleware.rate_limiter import init_rate_limits
    init_rate_limits(app, limiter)
"""

import logging

logger = logging.getLogger(__name__)

GENERATE_LIMIT = "10/minute"
AUTH_LIMIT = "20/minute"
API_LIMIT = "120/minute"


def init_rate_limits(app, limiter):
    """
    Apply rate limits to API blueprints.

    Limits (per remote IP):
        - Generation:        10/minute  (one LLM call each)
        - Login / register:  20/minute  (credential guessing)
        - Other API:         120/minute
        - Health checks:     exempt

    Rate limiting is disabled in testing mode.
    """

    if app.config.get("TESTING"):
        app.logger.info("Rate limiter disabled (TESTING=True)")
        return

    bp = app.blueprints.get("ai")
    if bp:
        limiter.limit(GENERATE_LIMIT)(bp)

    bp = app.blueprints.get("auth")
    if bp:
        limiter.limit(AUTH_LIMIT)(bp)

    for bp_name in ("project", "scenario", "test_run", "user"):
        bp = app.blueprints.get(bp_name)
        if bp:
            limiter.limit(API_LIMIT)(bp)

    bp = app.blueprints.get("health")
    if bp:
        limiter.exempt(bp)

    app.logger.info(
        "Rate limiter configured — generate: %s, auth: %s, api: %s",
        GENERATE_LIMIT, AUTH_LIMIT, API_LIMIT,
    )
