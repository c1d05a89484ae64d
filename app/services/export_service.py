"""Markdown report export for a project's scenarios and their execution status."""

import logging
import re
from datetime import date, datetime, timezone

from app.models.testing import summarize_statuses

logger = logging.getLogger(__name__)

CATEGORY_LABELS = {
    "POSITIVE": "Happy path",
    "NEGATIVE": "Error cases",
    "EDGE_CASE": "Edge cases",
    "PAYMENT": "Payment / refund",
    "PICKUP": "Pickup flow",
    "LOCATION": "Location / map",
    "TIME_SENSITIVE": "Time sensitive",
    "INVENTORY": "Inventory sync",
    "NOTIFICATION": "Notifications",
    "NETWORK": "Network",
    "AUTH": "Auth / sign-up",
}

PRIORITY_LABELS = {
    "CRITICAL": "🔴 Critical",
    "HIGH": "🟠 High",
    "MEDIUM": "🟡 Medium",
    "LOW": "🟢 Low",
}

STATUS_LABELS = {
    "NOT_RUN": "⬜ Not run",
    "PASS": "✅ Pass",
    "FAIL": "❌ Fail",
    "BLOCKED": "🟣 Blocked",
    "SKIPPED": "⏭️ Skipped",
}

PLATFORM_LABELS = {
    "CONSUMER_APP": "Consumer app",
    "SELLER_APP": "Seller app",
    "BOTH": "Consumer + seller apps",
}

_FILENAME_STRIP_RE = re.compile(r"[^a-zA-Z0-9가-힣\s]")
_WHITESPACE_RE = re.compile(r"\s+")


def _percent(part, whole):
    return round(part / whole * 100) if whole else 0


def _cell(text):
    # Pipes and newlines would break the table row
    return (text or "").replace("|", "\\|").replace("\n", " ")


def render_project_markdown(project, generated_at: datetime | None = None) -> str:
    """Render the project header, status summary and scenarios grouped by category."""
    generated_at = generated_at or datetime.now(timezone.utc)
    scenarios = list(project.scenarios)
    lines = [f"# {project.title}", ""]

    if project.description:
        lines += [project.description, ""]

    lines += [
        "## Project info",
        "",
        f"- **Platform**: {PLATFORM_LABELS.get(project.platform, project.platform)}",
    ]
    if project.app_version:
        lines.append(f"- **App version**: {project.app_version}")
    lines += [f"- **Total scenarios**: {len(scenarios)}", ""]

    stats = summarize_statuses(s.status for s in scenarios)
    lines += [
        "## Test status",
        "",
        "| Status | Count |",
        "|------|------|",
        f"| {STATUS_LABELS['PASS']} | {stats['pass']} |",
        f"| {STATUS_LABELS['FAIL']} | {stats['fail']} |",
        f"| {STATUS_LABELS['BLOCKED']} | {stats['blocked']} |",
        f"| {STATUS_LABELS['SKIPPED']} | {stats['skipped']} |",
        f"| {STATUS_LABELS['NOT_RUN']} | {stats['not_run']} |",
        "",
    ]

    executed = stats["pass"] + stats["fail"] + stats["blocked"] + stats["skipped"]
    lines += [
        f"**Progress**: {executed}/{len(scenarios)} ({_percent(executed, len(scenarios))}%)",
        "",
        f"**Pass rate**: {_percent(stats['pass'], executed)}%",
        "",
        "---",
        "",
        "## Test scenarios",
        "",
    ]

    # Categories appear in the order of their first scenario
    grouped: dict[str, list] = {}
    for scenario in scenarios:
        grouped.setdefault(scenario.category, []).append(scenario)

    for category, items in grouped.items():
        lines += [f"### {CATEGORY_LABELS.get(category, category)}", ""]
        for index, scenario in enumerate(items, start=1):
            lines += [
                f"#### {index}. {scenario.title}",
                "",
                f"- **Status**: {STATUS_LABELS.get(scenario.status, scenario.status)}",
                f"- **Priority**: {PRIORITY_LABELS.get(scenario.priority, scenario.priority)}",
            ]
            if scenario.device_type != "BOTH":
                lines.append(f"- **Device**: {scenario.device_type}")
            lines.append("")

            if scenario.description:
                lines += [f"> {scenario.description}", ""]

            if scenario.test_cases:
                lines += [
                    "**Steps:**",
                    "",
                    "| # | Action | Expected result |",
                    "|---|------|----------|",
                ]
                lines += [
                    f"| {tc.step} | {_cell(tc.action)} | {_cell(tc.expected)} |"
                    for tc in scenario.test_cases
                ]
                lines.append("")

            if scenario.status == "FAIL":
                if scenario.failure_note:
                    lines += [f"**Failure reason**: {scenario.failure_note}", ""]
                if scenario.bug_ticket_url:
                    lines += [f"**Bug ticket**: [link]({scenario.bug_ticket_url})", ""]

    lines += ["---", "", f"*Generated by QA Scenario Hub - {generated_at.strftime('%Y-%m-%d %H:%M UTC')}*"]
    logger.debug("Rendered markdown export for project %s (%d scenarios)", project.id, len(scenarios))
    return "\n".join(lines)


def export_filename(title: str, today: date | None = None) -> str:
    """``<title-with-dashes>-YYYY-MM-DD.md``; keeps ASCII letters, digits and Hangul."""
    today = today or datetime.now(timezone.utc).date()
    cleaned = _WHITESPACE_RE.sub("-", _FILENAME_STRIP_RE.sub("", title or ""))
    return f"{cleaned}-{today.isoformat()}.md"
