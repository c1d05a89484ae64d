"""Project domain model — a PRD plus the scenarios and test runs derived from it."""

from datetime import datetime, timezone

from app.models import db


PLATFORMS = {"CONSUMER_APP", "SELLER_APP", "BOTH"}
MEMBER_ROLES = {"ADMIN", "MEMBER"}


class Project(db.Model):
    """A product release under test, owned by one user and shared with members."""

    __tablename__ = "projects"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(
        db.Integer,
        db.ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    title = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text, nullable=True)
    prd_content = db.Column(db.Text, nullable=False)
    prd_notion_url = db.Column(db.String(500), nullable=True)
    app_version = db.Column(db.String(50), nullable=True)
    platform = db.Column(
        db.String(20), nullable=False, default="CONSUMER_APP",
        comment="CONSUMER_APP | SELLER_APP | BOTH",
    )
    release_date = db.Column(db.Date, nullable=True)

    created_at = db.Column(
        db.DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    updated_at = db.Column(
        db.DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    # ── Relationships
    owner = db.relationship("User", back_populates="projects")
    members = db.relationship(
        "ProjectMember", back_populates="project",
        cascade="all, delete-orphan", order_by="ProjectMember.invited_at",
    )
    scenarios = db.relationship(
        "Scenario", back_populates="project",
        cascade="all, delete-orphan", order_by="Scenario.sort_order",
    )
    test_runs = db.relationship(
        "TestRun", back_populates="project",
        cascade="all, delete-orphan", order_by="desc(TestRun.started_at)",
    )

    def member_role(self, user_id):
        """Return OWNER / ADMIN / MEMBER for ``user_id``, or None for outsiders."""
        if self.user_id == user_id:
            return "OWNER"
        for m in self.members:
            if m.user_id == user_id:
                return m.role
        return None

    def to_dict(self, include_scenarios=False):
        result = {
            "id": self.id,
            "user_id": self.user_id,
            "title": self.title,
            "description": self.description,
            "prd_content": self.prd_content,
            "prd_notion_url": self.prd_notion_url,
            "app_version": self.app_version,
            "platform": self.platform,
            "release_date": self.release_date.isoformat() if self.release_date else None,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
            "counts": {
                "scenarios": len(self.scenarios),
                "test_runs": len(self.test_runs),
            },
        }
        if include_scenarios:
            result["scenarios"] = [s.to_dict(include_test_cases=True) for s in self.scenarios]
        return result

    def __repr__(self):
        return f"<Project {self.id}: {self.title}>"


class ProjectMember(db.Model):
    """Non-owner access to a project. The owner is never stored here."""

    __tablename__ = "project_members"

    id = db.Column(db.Integer, primary_key=True)
    project_id = db.Column(
        db.Integer, db.ForeignKey("projects.id", ondelete="CASCADE"), nullable=False
    )
    user_id = db.Column(
        db.Integer, db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    role = db.Column(db.String(20), nullable=False, default="MEMBER", comment="ADMIN | MEMBER")
    invited_at = db.Column(db.DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))

    __table_args__ = (
        db.UniqueConstraint("project_id", "user_id", name="uq_project_member"),
        db.Index("ix_project_members_user_id", "user_id"),
    )

    project = db.relationship("Project", back_populates="members")
    user = db.relationship("User", back_populates="project_memberships")

    def to_dict(self):
        return {
            "id": self.id,
            "project_id": self.project_id,
            "user_id": self.user_id,
            "role": self.role,
            "invited_at": self.invited_at.isoformat() if self.invited_at else None,
            "user": self.user.to_brief() if self.user else None,
        }

    def __repr__(self):
        return f"<ProjectMember project#{self.project_id} user#{self.user_id} {self.role}>"
