"""Project CRUD and membership service with owner/member access checks.

Access levels:
    view    owner or any member
    manage  owner or ADMIN member
    owner   project owner only

Projects the caller cannot see are reported as not found.
"""

from __future__ import annotations

import logging

from sqlalchemy import or_

from app.core.exceptions import ConflictError, ForbiddenError, NotFoundError
from app.models import db
from app.models.auth import User
from app.models.project import MEMBER_ROLES, PLATFORMS, Project, ProjectMember
from app.utils.errors import E
from app.utils.helpers import FieldErrors, is_valid_url, parse_date, string_field

logger = logging.getLogger(__name__)

ACCESS_VIEW = "view"
ACCESS_MANAGE = "manage"
ACCESS_OWNER = "owner"

_MANAGE_ROLES = {"OWNER", "ADMIN"}


def get_project_for(project_id: int, user_id: int, level: str = ACCESS_VIEW) -> Project:
    """Load a project and check that ``user_id`` holds ``level`` access on it."""
    project = db.session.get(Project, project_id)
    if not project:
        raise NotFoundError(resource="Project", resource_id=project_id)

    role = project.member_role(user_id)
    if role is None:
        raise NotFoundError(resource="Project", resource_id=project_id)

    if level == ACCESS_MANAGE and role not in _MANAGE_ROLES:
        logger.warning("User %s (%s) denied manage access to project %s", user_id, role, project_id)
        raise ForbiddenError("Only the owner or an ADMIN member can do this")
    if level == ACCESS_OWNER and role != "OWNER":
        logger.warning("User %s (%s) denied owner access to project %s", user_id, role, project_id)
        raise ForbiddenError("Only the project owner can do this")
    return project


# ═════════════════════════════════════════════════════════════════════════════
# Projects
# ═════════════════════════════════════════════════════════════════════════════

def list_projects(user_id: int) -> list[Project]:
    """Projects the user owns or is a member of, most recently updated first."""
    member_ids = db.session.query(ProjectMember.project_id).filter(ProjectMember.user_id == user_id)
    return (
        Project.query
        .filter(or_(Project.user_id == user_id, Project.id.in_(member_ids)))
        .order_by(Project.updated_at.desc(), Project.id.desc())
        .all()
    )


def _validate_project_fields(data: dict, errors: FieldErrors, *, partial: bool) -> dict:
    """Validate the writable project fields and return the normalised values."""
    values = {}

    if not partial or "title" in data:
        title = string_field(data, "title")
        if not title:
            errors.add("title", "title is required")
        elif len(title) > 200:
            errors.add("title", "title must be at most 200 characters")
        values["title"] = title

    if not partial or "prd_content" in data:
        prd = string_field(data, "prd_content", strip=False)
        if not prd or len(prd.strip()) < 10:
            errors.add("prd_content", "prd_content must be at least 10 characters")
        values["prd_content"] = prd

    if not partial or "platform" in data:
        platform = data.get("platform") or ("CONSUMER_APP" if not partial else None)
        if not isinstance(platform, str) or platform not in PLATFORMS:
            errors.add("platform", f"platform must be one of {sorted(PLATFORMS)}")
        values["platform"] = platform

    if "description" in data:
        values["description"] = string_field(data, "description") or None

    if "prd_notion_url" in data:
        url = string_field(data, "prd_notion_url")
        if url and not is_valid_url(url):
            errors.add("prd_notion_url", "prd_notion_url must be a valid URL")
        values["prd_notion_url"] = url or None

    if "app_version" in data:
        values["app_version"] = string_field(data, "app_version") or None

    if "release_date" in data:
        try:
            values["release_date"] = parse_date(data.get("release_date"))
        except ValueError as exc:
            errors.add("release_date", str(exc))

    return values


def create_project(user_id: int, data: dict) -> Project:
    errors = FieldErrors()
    values = _validate_project_fields(data, errors, partial=False)
    errors.raise_if_any()

    project = Project(user_id=user_id, **values)
    db.session.add(project)
    db.session.commit()
    logger.info("Project %s created by user %s", project.id, user_id)
    return project


def update_project(project_id: int, user_id: int, data: dict) -> Project:
    """Partial update; only the keys present in ``data`` change."""
    project = get_project_for(project_id, user_id, ACCESS_MANAGE)

    errors = FieldErrors()
    values = _validate_project_fields(data, errors, partial=True)
    errors.raise_if_any()

    for key, value in values.items():
        setattr(project, key, value)
    db.session.commit()
    return project


def delete_project(project_id: int, user_id: int) -> None:
    """Delete a project with its scenarios, test runs and memberships."""
    project = get_project_for(project_id, user_id, ACCESS_OWNER)
    db.session.delete(project)
    db.session.commit()
    logger.info("Project %s deleted by user %s", project_id, user_id)


# ═════════════════════════════════════════════════════════════════════════════
# Members
# ═════════════════════════════════════════════════════════════════════════════

def list_members(project_id: int, user_id: int) -> dict:
    """Owner plus explicit members."""
    project = get_project_for(project_id, user_id, ACCESS_VIEW)
    return {
        "owner": project.owner.to_brief() if project.owner else None,
        "members": [m.to_dict() for m in project.members],
    }


def invite_member(project_id: int, user_id: int, data: dict) -> ProjectMember:
    """Add a registered user to the project by email."""
    project = get_project_for(project_id, user_id, ACCESS_MANAGE)

    errors = FieldErrors()
    email = (string_field(data, "email") or "").lower()
    if not email:
        errors.add("email", "email is required")
    role = data.get("role") or "MEMBER"
    if not isinstance(role, str) or role not in MEMBER_ROLES:
        errors.add("role", f"role must be one of {sorted(MEMBER_ROLES)}")
    errors.raise_if_any()

    invitee = User.query.filter_by(email=email).first()
    if not invitee:
        raise NotFoundError(resource="User", message=f"No registered user with email {email}")
    if invitee.id == project.user_id:
        raise ConflictError("User already owns this project", code=E.ALREADY_OWNER)
    if ProjectMember.query.filter_by(project_id=project.id, user_id=invitee.id).first():
        raise ConflictError("User is already a member of this project", code=E.ALREADY_MEMBER)

    member = ProjectMember(project_id=project.id, user_id=invitee.id, role=role)
    db.session.add(member)
    db.session.commit()
    logger.info("User %s added to project %s as %s", invitee.id, project.id, role)
    return member


def remove_member(project_id: int, user_id: int, member_id: int) -> None:
    project = get_project_for(project_id, user_id, ACCESS_MANAGE)
    member = ProjectMember.query.filter_by(id=member_id, project_id=project.id).first()
    if not member:
        raise NotFoundError(resource="ProjectMember", resource_id=member_id)
    db.session.delete(member)
    db.session.commit()
