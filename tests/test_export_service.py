"""
QA Scenario Hub
Tests — Markdown export rendering and filename.
"""

from datetime import date, datetime, timezone

from app.models import db as _db
from app.models.project import Project
from app.models.scenario import Scenario, TestCase
from app.services.export_service import export_filename, render_project_markdown
from tests.conftest import PRD_TEXT

GENERATED_AT = datetime(2026, 10, 19, 9, 30, tzinfo=timezone.utc)


def _project_with_scenarios(owner):
    project = Project(user_id=owner.id, title="Pickup v2", prd_content=PRD_TEXT,
                      platform="BOTH", app_version="2.3.0", description="Evening release")
    project.scenarios = [
        Scenario(title="Buyer reserves a meal", category="POSITIVE", priority="CRITICAL",
                 device_type="BOTH", status="PASS", sort_order=0,
                 test_cases=[TestCase(step=1, action="Taps reserve", expected="Order | confirmed")]),
        Scenario(title="Card is declined", category="PAYMENT", priority="HIGH",
                 device_type="IOS", status="FAIL", sort_order=1,
                 description="Declined card during checkout",
                 failure_note="No error toast", bug_ticket_url="https://linear.app/qa/issue/QA-7"),
        Scenario(title="Reserve with empty cart", category="POSITIVE", priority="LOW",
                 device_type="BOTH", status="NOT_RUN", sort_order=2),
    ]
    _db.session.add(project)
    _db.session.commit()
    return project


class TestRenderMarkdown:
    def test_header_and_summary(self, owner):
        md = render_project_markdown(_project_with_scenarios(owner), generated_at=GENERATED_AT)
        assert md.startswith("# Pickup v2\n\nEvening release")
        assert "- **Platform**: Consumer + seller apps" in md
        assert "- **App version**: 2.3.0" in md
        assert "- **Total scenarios**: 3" in md
        assert "| ✅ Pass | 1 |" in md
        assert "| ❌ Fail | 1 |" in md
        assert "| ⬜ Not run | 1 |" in md
        assert "**Progress**: 2/3 (67%)" in md
        assert "**Pass rate**: 50%" in md
        assert md.endswith("*Generated by QA Scenario Hub - 2026-10-19 09:30 UTC*")

    def test_categories_in_first_seen_order(self, owner):
        md = render_project_markdown(_project_with_scenarios(owner), generated_at=GENERATED_AT)
        assert md.index("### Happy path") < md.index("### Payment / refund")
        assert md.count("### Happy path") == 1
        assert "#### 2. Reserve with empty cart" in md

    def test_scenario_details(self, owner):
        md = render_project_markdown(_project_with_scenarios(owner), generated_at=GENERATED_AT)
        assert "- **Device**: IOS" in md
        assert "- **Device**: BOTH" not in md
        assert "> Declined card during checkout" in md
        assert "| 1 | Taps reserve | Order \\| confirmed |" in md
        assert "**Failure reason**: No error toast" in md
        assert "**Bug ticket**: [link](https://linear.app/qa/issue/QA-7)" in md

    def test_empty_project_has_zero_progress(self, owner):
        project = Project(user_id=owner.id, title="Empty", prd_content=PRD_TEXT, platform="SELLER_APP")
        _db.session.add(project)
        _db.session.commit()

        md = render_project_markdown(project, generated_at=GENERATED_AT)
        assert "**Progress**: 0/0 (0%)" in md
        assert "**Pass rate**: 0%" in md
        assert "- **App version**" not in md


class TestExportFilename:
    def test_punctuation_stripped_and_spaces_dashed(self):
        assert export_filename("Lunch Deals 2.0!", today=date(2026, 10, 19)) == "Lunch-Deals-20-2026-10-19.md"

    def test_hangul_kept(self):
        assert export_filename("픽업 기능 (v2)", today=date(2026, 1, 5)) == "픽업-기능-v2-2026-01-05.md"
