"""
QA Scenario Hub
Test run models — named execution snapshots of a project's scenarios.

Models:
    - TestRun: one pass over the project at a given app version / environment
    - TestRunResult: per-scenario outcome inside a run
"""

from datetime import datetime, timezone

from app.models import db


RUN_ENVIRONMENTS = ("STAGING", "PRODUCTION")


class TestRun(db.Model):
    """
    Named execution snapshot.

    On creation one TestRunResult is materialised for every scenario the
    project has at that moment, each starting NOT_RUN.
    """

    __test__ = False  # not a pytest class
    __tablename__ = "test_runs"

    id = db.Column(db.Integer, primary_key=True)
    project_id = db.Column(
        db.Integer, db.ForeignKey("projects.id", ondelete="CASCADE"),
        nullable=False, index=True,
    )
    name = db.Column(db.String(200), nullable=False)
    app_version = db.Column(db.String(50), nullable=False)
    environment = db.Column(db.String(20), default="STAGING", comment="STAGING | PRODUCTION")

    started_at = db.Column(
        db.DateTime(timezone=True), default=lambda: datetime.now(timezone.utc),
    )
    completed_at = db.Column(db.DateTime(timezone=True), nullable=True)

    project = db.relationship("Project", back_populates="test_runs")
    results = db.relationship(
        "TestRunResult", back_populates="test_run",
        cascade="all, delete-orphan", order_by="TestRunResult.id",
    )

    def stats(self):
        return summarize_statuses(r.status for r in self.results)

    def to_dict(self, include_results=False):
        d = {
            "id": self.id,
            "project_id": self.project_id,
            "name": self.name,
            "app_version": self.app_version,
            "environment": self.environment,
            "started_at": self.started_at.isoformat() if self.started_at else None,
            "completed_at": self.completed_at.isoformat() if self.completed_at else None,
            "stats": self.stats(),
        }
        if include_results:
            d["results"] = [r.to_dict() for r in self.results]
        return d

    def __repr__(self):
        return f"<TestRun {self.id}: {self.name} ({self.app_version})>"


class TestRunResult(db.Model):
    """Outcome of one scenario within one test run."""

    __test__ = False
    __tablename__ = "test_run_results"

    id = db.Column(db.Integer, primary_key=True)
    test_run_id = db.Column(
        db.Integer, db.ForeignKey("test_runs.id", ondelete="CASCADE"),
        nullable=False, index=True,
    )
    scenario_id = db.Column(
        db.Integer, db.ForeignKey("scenarios.id", ondelete="CASCADE"),
        nullable=False, index=True,
    )
    status = db.Column(
        db.String(20), default="NOT_RUN",
        comment="NOT_RUN | PASS | FAIL | BLOCKED | SKIPPED",
    )
    note = db.Column(db.Text, nullable=True)
    executed_at = db.Column(db.DateTime(timezone=True), nullable=True)

    __table_args__ = (
        db.UniqueConstraint("test_run_id", "scenario_id", name="uq_run_scenario"),
    )

    test_run = db.relationship("TestRun", back_populates="results")
    scenario = db.relationship("Scenario", back_populates="run_results")

    def to_dict(self):
        sc = self.scenario
        return {
            "id": self.id,
            "test_run_id": self.test_run_id,
            "scenario_id": self.scenario_id,
            "status": self.status,
            "note": self.note,
            "executed_at": self.executed_at.isoformat() if self.executed_at else None,
            "scenario": {
                "id": sc.id,
                "title": sc.title,
                "category": sc.category,
                "priority": sc.priority,
                "device_type": sc.device_type,
            } if sc else None,
        }

    def __repr__(self):
        return f"<TestRunResult run#{self.test_run_id} scenario#{self.scenario_id} → {self.status}>"


def summarize_statuses(statuses):
    """Count execution statuses into the stats block used across the API."""
    stats = {"total": 0, "pass": 0, "fail": 0, "blocked": 0, "skipped": 0, "not_run": 0}
    for status in statuses:
        stats["total"] += 1
        key = (status or "NOT_RUN").lower()
        if key in stats:
            stats[key] += 1
    return stats
