"""
QA Scenario Hub
Scenario domain models — PRD → Scenario → TestCase (ordered steps).

Models:
    - Scenario: titled group of user-journey steps, generated by the LLM
      or added manually, with its own execution status and assignee
    - TestCase: one action / expected-result step inside a scenario
"""

from datetime import datetime, timezone

from app.models import db


# ── Constants ────────────────────────────────────────────────────────────────

SCENARIO_CATEGORIES = (
    "POSITIVE",
    "NEGATIVE",
    "EDGE_CASE",
    "PAYMENT",
    "PICKUP",
    "LOCATION",
    "NOTIFICATION",
    "TIME_SENSITIVE",
    "INVENTORY",
    "AUTH",
    "NETWORK",
)
PRIORITIES = ("CRITICAL", "HIGH", "MEDIUM", "LOW")
DEVICE_TYPES = ("ANDROID", "IOS", "BOTH")
EXECUTION_STATUSES = ("NOT_RUN", "PASS", "FAIL", "BLOCKED", "SKIPPED")

DEFAULT_CATEGORY = "POSITIVE"
DEFAULT_PRIORITY = "MEDIUM"
DEFAULT_DEVICE_TYPE = "BOTH"


class Scenario(db.Model):
    """
    Test scenario for one project.

    ``status`` tracks the latest ad-hoc execution of the scenario itself and
    is independent of any TestRunResult recorded for it.
    """

    __tablename__ = "scenarios"

    id = db.Column(db.Integer, primary_key=True)
    project_id = db.Column(
        db.Integer, db.ForeignKey("projects.id", ondelete="CASCADE"), nullable=False, index=True,
    )
    title = db.Column(db.String(500), nullable=False)
    description = db.Column(db.Text, nullable=True)

    category = db.Column(db.String(30), default=DEFAULT_CATEGORY)
    priority = db.Column(db.String(20), default=DEFAULT_PRIORITY, comment="CRITICAL | HIGH | MEDIUM | LOW")
    device_type = db.Column(db.String(20), default=DEFAULT_DEVICE_TYPE, comment="ANDROID | IOS | BOTH")
    sort_order = db.Column(db.Integer, default=0)

    # Execution
    status = db.Column(
        db.String(20), default="NOT_RUN",
        comment="NOT_RUN | PASS | FAIL | BLOCKED | SKIPPED",
    )
    failure_note = db.Column(db.Text, nullable=True)
    bug_ticket_url = db.Column(db.String(500), nullable=True)
    executed_at = db.Column(db.DateTime(timezone=True), nullable=True)
    executed_by_id = db.Column(
        db.Integer, db.ForeignKey("users.id", ondelete="SET NULL"), nullable=True,
    )
    assignee_id = db.Column(
        db.Integer, db.ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True,
    )

    created_at = db.Column(
        db.DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
    )
    updated_at = db.Column(
        db.DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    # ── Relationships
    project = db.relationship("Project", back_populates="scenarios")
    assignee = db.relationship("User", foreign_keys=[assignee_id])
    executed_by = db.relationship("User", foreign_keys=[executed_by_id])
    test_cases = db.relationship(
        "TestCase", back_populates="scenario",
        cascade="all, delete-orphan", order_by="TestCase.step",
    )
    run_results = db.relationship(
        "TestRunResult", back_populates="scenario",
        cascade="all, delete-orphan",
    )

    def to_dict(self, include_test_cases=False):
        result = {
            "id": self.id,
            "project_id": self.project_id,
            "title": self.title,
            "description": self.description,
            "category": self.category,
            "priority": self.priority,
            "device_type": self.device_type,
            "order": self.sort_order,
            "status": self.status,
            "failure_note": self.failure_note,
            "bug_ticket_url": self.bug_ticket_url,
            "executed_at": self.executed_at.isoformat() if self.executed_at else None,
            "executed_by_id": self.executed_by_id,
            "assignee_id": self.assignee_id,
            "assignee": self.assignee.to_brief() if self.assignee else None,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }
        if include_test_cases:
            result["test_cases"] = [tc.to_dict() for tc in self.test_cases]
        return result

    def __repr__(self):
        return f"<Scenario {self.id}: {self.title}>"


class TestCase(db.Model):
    """
    Atomic step within a scenario.

    Step numbers form a contiguous 1..N sequence per scenario; the scenario
    service renumbers after every deletion.
    """

    __test__ = False  # not a pytest class
    __tablename__ = "test_cases"

    id = db.Column(db.Integer, primary_key=True)
    scenario_id = db.Column(
        db.Integer, db.ForeignKey("scenarios.id", ondelete="CASCADE"),
        nullable=False, index=True,
    )
    step = db.Column(db.Integer, nullable=False, comment="Sequential step number")
    action = db.Column(db.Text, nullable=False, default="", comment="What the user does")
    expected = db.Column(db.Text, nullable=False, default="", comment="What the user should see")

    created_at = db.Column(
        db.DateTime(timezone=True), default=lambda: datetime.now(timezone.utc),
    )

    scenario = db.relationship("Scenario", back_populates="test_cases")

    def to_dict(self):
        return {
            "id": self.id,
            "scenario_id": self.scenario_id,
            "step": self.step,
            "action": self.action,
            "expected": self.expected,
        }

    def __repr__(self):
        return f"<TestCase {self.id}: scenario#{self.scenario_id} step#{self.step}>"
