"""
QA Scenario Hub
Scenario Generator Assistant.

Generation pipeline:
    1. Load the project and check the caller may manage it
    2. Build system + user prompts from the PRD and platform
    3. Call the LLM gateway once
    4. Parse and normalise the JSON response
    5. Replace the project's scenarios with the new set in one commit

The response is parsed before anything is deleted, so a failed generation
leaves the existing scenarios untouched.
"""

import logging

from flask import current_app

from app.ai.gateway import CompletionError, LLMGateway
from app.ai.parser import ScenarioParseError, parse_scenario_response
from app.ai.prompts import build_system_prompt, build_user_prompt
from app.core.exceptions import ConfigurationError, GenerationError
from app.services.project_service import ACCESS_MANAGE, get_project_for
from app.services.scenario_service import replace_project_scenarios

logger = logging.getLogger(__name__)


class ScenarioGenerator:
    """AI-powered test scenario generator for a project's PRD."""

    def __init__(self, gateway=None):
        self.gateway = gateway

    def _resolve_gateway(self):
        if self.gateway is not None:
            return self.gateway
        cfg = current_app.config
        if (cfg.get("LLM_PROVIDER") or "anthropic").lower() != "local" and not cfg.get("ANTHROPIC_API_KEY"):
            raise ConfigurationError("ANTHROPIC_API_KEY is not configured")
        return LLMGateway.from_config(cfg)

    def generate(self, project_id: int, user_id: int) -> list:
        """
        Generate scenarios for a project and replace its current set.

        Returns:
            list[Scenario]: the newly created scenarios in order.

        Raises:
            NotFoundError / ForbiddenError: project missing or not manageable.
            ConfigurationError: no API key for the configured provider.
            GenerationError: provider failure or unparseable response.
        """
        project = get_project_for(project_id, user_id, ACCESS_MANAGE)
        gateway = self._resolve_gateway()

        system_prompt = build_system_prompt()
        user_prompt = build_user_prompt(project.prd_content, project.platform)

        try:
            response = gateway.complete(system_prompt, user_prompt)
            items = parse_scenario_response(response)
        except (CompletionError, ScenarioParseError) as exc:
            logger.error("Scenario generation failed for project %s: %s", project.id, exc)
            raise GenerationError(f"Scenario generation failed: {exc}") from exc
        except Exception as exc:
            logger.exception("LLM call failed for project %s", project.id)
            raise GenerationError(f"Scenario generation failed: {exc}") from exc

        scenarios = replace_project_scenarios(project, items)
        logger.info("Generated %d scenarios for project %s", len(scenarios), project.id)
        return scenarios
