"""
QA Scenario Hub
Scenario service — manual scenarios, execution status, step editing.

Scenario status is tracked on the scenario itself and is never synchronised
with TestRunResult rows; test runs keep their own per-scenario status.
"""

import logging
from datetime import datetime, timezone

from app.core.exceptions import NotFoundError
from app.models import db
from app.models.auth import User
from app.models.project import Project
from app.models.scenario import (
    DEFAULT_CATEGORY,
    DEFAULT_DEVICE_TYPE,
    DEFAULT_PRIORITY,
    DEVICE_TYPES,
    EXECUTION_STATUSES,
    PRIORITIES,
    SCENARIO_CATEGORIES,
    Scenario,
    TestCase,
)
from app.models.testing import summarize_statuses
from app.services.project_service import ACCESS_VIEW, get_project_for
from app.utils.helpers import FieldErrors, int_field, is_valid_url, string_field

logger = logging.getLogger(__name__)


def _get_scenario_for(scenario_id: int, user_id: int) -> Scenario:
    scenario = db.session.get(Scenario, scenario_id)
    if not scenario:
        raise NotFoundError(resource="Scenario", resource_id=scenario_id)
    # Hides scenarios of projects the caller cannot see
    get_project_for(scenario.project_id, user_id, ACCESS_VIEW)
    return scenario


def _enum_value(data, key, allowed, default, errors):
    value = data.get(key)
    if value is None:
        return default
    if not isinstance(value, str) or value not in allowed:
        errors.add(key, f"{key} must be one of {list(allowed)}")
        return default
    return value


def build_scenario(item: dict, order: int) -> Scenario:
    """Scenario (with its test cases) from one normalised generator item."""
    return Scenario(
        title=item["title"],
        description=item.get("description"),
        category=item.get("category") or DEFAULT_CATEGORY,
        priority=item.get("priority") or DEFAULT_PRIORITY,
        device_type=item.get("deviceType") or DEFAULT_DEVICE_TYPE,
        sort_order=order,
        test_cases=[
            TestCase(step=tc["step"], action=tc["action"], expected=tc["expected"])
            for tc in item.get("testCases", [])
        ],
    )


def replace_project_scenarios(project: Project, items: list[dict]) -> list[Scenario]:
    """
    Swap the project's scenario set for a freshly generated one.

    Old scenarios (with their test cases and test-run results) are deleted and
    the new ones inserted in the same commit.
    """
    old_count = len(project.scenarios)
    new_scenarios = [build_scenario(item, idx) for idx, item in enumerate(items)]
    project.scenarios = new_scenarios
    db.session.commit()
    logger.info(
        "Project %s scenarios replaced: %d removed, %d created",
        project.id, old_count, len(new_scenarios),
    )
    return new_scenarios


def create_scenario(project_id: int, user_id: int, data: dict) -> Scenario:
    """Add a manually written scenario at the end of the project's list."""
    project = get_project_for(project_id, user_id, ACCESS_VIEW)

    errors = FieldErrors()
    title = string_field(data, "title")
    if not title:
        errors.add("title", "title is required")
    category = _enum_value(data, "category", SCENARIO_CATEGORIES, DEFAULT_CATEGORY, errors)
    priority = _enum_value(data, "priority", PRIORITIES, DEFAULT_PRIORITY, errors)
    device_type = _enum_value(data, "device_type", DEVICE_TYPES, DEFAULT_DEVICE_TYPE, errors)

    raw_cases = data.get("test_cases") or []
    if not isinstance(raw_cases, list):
        errors.add("test_cases", "test_cases must be a list")
        raw_cases = []
    errors.raise_if_any()

    last = max((s.sort_order or 0 for s in project.scenarios), default=-1)
    scenario = Scenario(
        project_id=project.id,
        title=title,
        description=string_field(data, "description") or None,
        category=category,
        priority=priority,
        device_type=device_type,
        sort_order=last + 1,
        test_cases=[
            TestCase(
                step=idx + 1,
                action=str((tc or {}).get("action") or ""),
                expected=str((tc or {}).get("expected") or ""),
            )
            for idx, tc in enumerate(raw_cases)
            if isinstance(tc, dict)
        ],
    )
    db.session.add(scenario)
    db.session.commit()
    return scenario


def update_status(scenario_id: int, user_id: int, data: dict) -> Scenario:
    """
    Record an execution outcome on the scenario.

    ``executed_at`` / ``executed_by_id`` are stamped for any status other than
    NOT_RUN and cleared when the scenario goes back to NOT_RUN.
    """
    scenario = _get_scenario_for(scenario_id, user_id)

    errors = FieldErrors()
    status = data.get("status")
    if not isinstance(status, str) or status not in EXECUTION_STATUSES:
        errors.add("status", f"status must be one of {list(EXECUTION_STATUSES)}")

    bug_url = None
    if "bug_ticket_url" in data:
        bug_url = string_field(data, "bug_ticket_url")
        if bug_url and not is_valid_url(bug_url):
            errors.add("bug_ticket_url", "bug_ticket_url must be a valid URL")

    assignee_id = None
    if data.get("assignee_id") is not None:
        assignee_id = int_field(data["assignee_id"], "assignee_id")
        if not db.session.get(User, assignee_id):
            errors.add("assignee_id", "assignee does not exist")
    errors.raise_if_any()

    scenario.status = status
    if "failure_note" in data:
        scenario.failure_note = string_field(data, "failure_note") or None
    if "bug_ticket_url" in data:
        scenario.bug_ticket_url = bug_url or None
    if "assignee_id" in data:
        scenario.assignee_id = assignee_id

    if status == "NOT_RUN":
        scenario.executed_at = None
        scenario.executed_by_id = None
    else:
        scenario.executed_at = datetime.now(timezone.utc)
        scenario.executed_by_id = user_id

    db.session.commit()
    logger.info("Scenario %s status → %s by user %s", scenario.id, status, user_id)
    return scenario


# ═════════════════════════════════════════════════════════════════════════════
# Test cases (steps)
# ═════════════════════════════════════════════════════════════════════════════

def add_test_case(scenario_id: int, user_id: int, data: dict) -> TestCase:
    """Append a step numbered one past the current highest step."""
    scenario = _get_scenario_for(scenario_id, user_id)

    errors = FieldErrors()
    action = string_field(data, "action")
    expected = string_field(data, "expected")
    if not action:
        errors.add("action", "action is required")
    if not expected:
        errors.add("expected", "expected is required")
    errors.raise_if_any()

    next_step = max((tc.step for tc in scenario.test_cases), default=0) + 1
    test_case = TestCase(scenario_id=scenario.id, step=next_step, action=action, expected=expected)
    db.session.add(test_case)
    db.session.commit()
    return test_case


def delete_test_case(scenario_id: int, user_id: int, test_case_id: int) -> list[TestCase]:
    """Delete one step and renumber the remaining steps 1..N in their current order."""
    scenario = _get_scenario_for(scenario_id, user_id)
    test_case = TestCase.query.filter_by(id=test_case_id, scenario_id=scenario.id).first()
    if not test_case:
        raise NotFoundError(resource="TestCase", resource_id=test_case_id)

    db.session.delete(test_case)
    db.session.flush()

    remaining = (
        TestCase.query.filter_by(scenario_id=scenario.id)
        .order_by(TestCase.step, TestCase.id)
        .all()
    )
    for idx, tc in enumerate(remaining, start=1):
        tc.step = idx
    db.session.commit()
    return remaining


# ═════════════════════════════════════════════════════════════════════════════
# My scenarios
# ═════════════════════════════════════════════════════════════════════════════

def my_scenarios(user_id: int) -> dict:
    """Scenarios assigned to the user, grouped by project, with status stats."""
    scenarios = (
        Scenario.query
        .filter(Scenario.assignee_id == user_id)
        .join(Project, Project.id == Scenario.project_id)
        .order_by(Project.title, Scenario.sort_order, Scenario.id)
        .all()
    )

    groups: dict[int, dict] = {}
    for sc in scenarios:
        group = groups.get(sc.project_id)
        if group is None:
            group = groups[sc.project_id] = {
                "project": {"id": sc.project.id, "title": sc.project.title},
                "scenarios": [],
            }
        group["scenarios"].append(sc.to_dict(include_test_cases=True))

    return {
        "projects": list(groups.values()),
        "stats": summarize_statuses(sc.status for sc in scenarios),
    }
