"""
Auth Service — registration, password login, user lookup.
"""

import logging
from datetime import datetime, timezone

from email_validator import EmailNotValidError, validate_email
from flask import current_app

from app.core.exceptions import AuthenticationError, ConflictError, ValidationError
from app.models import db
from app.models.auth import User
from app.utils.crypto import hash_password, verify_password
from app.utils.errors import E
from app.utils.helpers import FieldErrors, is_strong_password, string_field

logger = logging.getLogger(__name__)


def _normalize_email(raw) -> str:
    valid = validate_email(raw, check_deliverability=False)
    return valid.normalized.lower()


def register_user(data: dict) -> User:
    """
    Create an account for an address on the allowed company domain.

    Body keys: name, email, password, confirm_password.
    """
    errors = FieldErrors()

    name = string_field(data, "name")
    if not name or len(name) < 2:
        errors.add("name", "name must be at least 2 characters")

    email = None
    raw_email = string_field(data, "email")
    try:
        email = _normalize_email(raw_email or "")
    except EmailNotValidError as e:
        errors.add("email", f"Invalid email: {e}")

    password = data.get("password")
    if not is_strong_password(password):
        errors.add("password", "password must be at least 8 characters and contain a letter and a digit")
    if data.get("confirm_password") != password:
        errors.add("confirm_password", "passwords do not match")

    errors.raise_if_any()

    domain = current_app.config.get("ALLOWED_EMAIL_DOMAIN", "monandol.io")
    if not email.endswith(f"@{domain}"):
        raise ValidationError(f"Only @{domain} email addresses can register", code=E.INVALID_EMAIL_DOMAIN)

    if User.query.filter_by(email=email).first():
        raise ConflictError("A user with this email already exists", code=E.USER_EXISTS)

    user = User(name=name, email=email, password_hash=hash_password(password))
    db.session.add(user)
    db.session.commit()
    logger.info("User %s registered", user.id)
    return user


def authenticate_user(email, password) -> User:
    """Authenticate with email + password. Returns User on success."""
    if not email or not password or not isinstance(email, str) or not isinstance(password, str):
        raise ValidationError("Email and password are required")

    user = User.query.filter_by(email=email.strip().lower()).first()
    if not user or not verify_password(password, user.password_hash):
        logger.warning("Failed login for %s", email)
        raise AuthenticationError("Invalid email or password")

    user.last_login_at = datetime.now(timezone.utc)
    db.session.commit()
    return user


def list_users() -> list[User]:
    """All users ordered by name, for assignee pickers."""
    return User.query.order_by(User.name, User.id).all()
