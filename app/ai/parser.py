"""
QA Scenario Hub
LLM response parser for scenario generation.

Contract:
    parse_scenario_response() either returns a fully normalised scenario list
    or raises ScenarioParseError. There is no partially valid output.

    - Broken JSON, a missing ``scenarios`` array, or any scenario without a
      title aborts the whole batch.
    - Unknown category / priority / deviceType values fall back to
      POSITIVE / MEDIUM / BOTH with a warning.
    - Malformed test-case entries are coerced, never rejected.
"""

import json
import logging
import math
import re

from app.models.scenario import (
    DEFAULT_CATEGORY,
    DEFAULT_DEVICE_TYPE,
    DEFAULT_PRIORITY,
    DEVICE_TYPES,
    PRIORITIES,
    SCENARIO_CATEGORIES,
)

logger = logging.getLogger(__name__)

_FENCED_JSON_RE = re.compile(r"```json\s*([\s\S]*?)\s*```")
# Steps are stored in a 32-bit INTEGER column
_MAX_STEP = 2**31 - 1


class ScenarioParseError(Exception):
    """The model output could not be turned into a valid scenario batch."""


def extract_json_text(response: str) -> str:
    """Inner text of the first ```json fence, else the whole trimmed response."""
    match = _FENCED_JSON_RE.search(response or "")
    if match:
        return match.group(1)
    return (response or "").strip()


def _normalize_enum(value, allowed, default, field):
    candidate = value.upper() if isinstance(value, str) else None
    if candidate in allowed:
        return candidate
    logger.warning("Invalid %s %r, defaulting to %s", field, value, default)
    return default


def _step_number(value, fallback: int) -> int:
    """Whole-number step from the model, else the 1-based position."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return fallback
    if isinstance(value, float) and not (math.isfinite(value) and value.is_integer()):
        return fallback
    step = int(value)
    return step if abs(step) <= _MAX_STEP else fallback


def _normalize_test_cases(raw) -> list[dict]:
    if not isinstance(raw, list):
        return []
    cases = []
    for idx, tc in enumerate(raw):
        if not isinstance(tc, dict):
            tc = {}
        cases.append({
            "step": _step_number(tc.get("step"), idx + 1),
            "action": str(tc.get("action") or ""),
            "expected": str(tc.get("expected") or ""),
        })
    return cases


def _normalize_scenario(raw, index: int) -> dict:
    if not isinstance(raw, dict):
        raise ScenarioParseError(f"Scenario {index + 1}: title is required")
    title = raw.get("title")
    if not title or not isinstance(title, str):
        raise ScenarioParseError(f"Scenario {index + 1}: title is required")

    description = raw.get("description")
    return {
        "title": title,
        "description": str(description) if description else None,
        "category": _normalize_enum(raw.get("category"), SCENARIO_CATEGORIES, DEFAULT_CATEGORY, "category"),
        "priority": _normalize_enum(raw.get("priority"), PRIORITIES, DEFAULT_PRIORITY, "priority"),
        "deviceType": _normalize_enum(raw.get("deviceType"), DEVICE_TYPES, DEFAULT_DEVICE_TYPE, "deviceType"),
        "testCases": _normalize_test_cases(raw.get("testCases")),
    }


def parse_scenario_response(response: str) -> list[dict]:
    """Parse raw model output into normalised scenario dicts.

    Each returned dict has keys: title, description, category, priority,
    deviceType, testCases (list of {step, action, expected}).

    Raises:
        ScenarioParseError: on invalid JSON, a missing/non-list ``scenarios``
            field, or any scenario without a non-empty string title.
    """
    json_text = extract_json_text(response)

    try:
        parsed = json.loads(json_text)
    except (json.JSONDecodeError, TypeError) as exc:
        logger.error("Scenario response is not valid JSON: %s", exc)
        raise ScenarioParseError(f"Failed to parse LLM response: {exc}") from exc

    scenarios = parsed.get("scenarios") if isinstance(parsed, dict) else None
    if not isinstance(scenarios, list):
        raise ScenarioParseError("Invalid response structure: scenarios array not found")

    return [_normalize_scenario(raw, idx) for idx, raw in enumerate(scenarios)]
