"""
QA Scenario Hub
AI Assistants package.

Assistants:
    - scenario_generator: PRD → test scenarios with step-by-step test cases
"""

from app.ai.assistants.scenario_generator import ScenarioGenerator

__all__ = [
    "ScenarioGenerator",
]
