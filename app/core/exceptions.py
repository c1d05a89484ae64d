"""
Platform-wide exception hierarchy.

Services raise these types; the application-level error handlers in
``app/__init__.py`` turn them into the standard JSON error envelope, so
blueprints never build error responses for business-rule failures.

Usage:
    from app.core.exceptions import NotFoundError, ValidationError

    raise NotFoundError(resource="Project", resource_id=42)
    raise ValidationError("title is required", details={"title": ["required"]})
"""


class AppError(Exception):
    """Base class: every subclass carries an HTTP status and an error code."""

    status_code = 500
    code = "INTERNAL_ERROR"

    def __init__(self, message: str, code: str | None = None) -> None:
        self.message = message
        if code:
            self.code = code
        super().__init__(message)


class NotFoundError(AppError):
    """Raised when a requested resource does not exist or is not visible to the caller.

    Projects the caller cannot see are reported as missing, not forbidden, so
    their existence is not disclosed.

    Args:
        resource: Human-readable model/entity name (e.g. "Project", "TestRun").
        resource_id: The PK that was looked up. Included in logs and message.
    """

    status_code = 404
    code = "NOT_FOUND"

    def __init__(
        self,
        resource: str,
        resource_id: int | str | None = None,
        message: str | None = None,
    ) -> None:
        self.resource = resource
        self.resource_id = resource_id
        if message is None:
            message = f"{resource}"
            if resource_id is not None:
                message += f" id={resource_id}"
            message += " not found"
        super().__init__(message)


class ValidationError(AppError):
    """Raised when request input is malformed or violates a field rule.

    Maps to HTTP 400.

    Args:
        message: Human-readable explanation of what failed.
        details: Optional field-level breakdown. Keys are field names;
                 values are lists of error descriptions.
    """

    status_code = 400
    code = "VALIDATION_ERROR"

    def __init__(self, message: str, details: dict | None = None, code: str | None = None) -> None:
        self.details = details or {}
        super().__init__(message, code=code)


class AuthenticationError(AppError):
    """No valid identity on the request. Maps to HTTP 401."""

    status_code = 401
    code = "UNAUTHORIZED"


class ForbiddenError(AppError):
    """Authenticated but lacking the project role the operation needs. Maps to HTTP 403."""

    status_code = 403
    code = "FORBIDDEN"


class ConflictError(AppError):
    """Raised when an operation would duplicate an existing record.

    Maps to HTTP 409.

    Args:
        message: Human-readable explanation.
        code: Specific conflict code (USER_EXISTS, ALREADY_MEMBER, ...).
    """

    status_code = 409
    code = "CONFLICT"


class ConfigurationError(AppError):
    """A required setting (e.g. the LLM API key) is missing. Maps to HTTP 500."""

    status_code = 500
    code = "CONFIG_ERROR"


class GenerationError(AppError):
    """Scenario generation failed: provider error or unparseable response."""

    status_code = 500
    code = "GENERATION_ERROR"
