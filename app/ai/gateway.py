"""
QA Scenario Hub
LLM Gateway — single completion call for scenario generation.

Provider-agnostic wrapper with:
    - Anthropic Claude provider (Messages API)
    - Local stub provider for development and tests (no API key needed)
    - Token / latency logging

There is deliberately one request per call: no retry, no timeout wrapper.
A failed provider call fails the enclosing HTTP request.

Usage:
    from app.ai.gateway import LLMGateway
    gw = LLMGateway.from_config(current_app.config)
    text = gw.complete(system_prompt, user_prompt)
"""

import json
import logging
import time
from abc import ABC, abstractmethod

logger = logging.getLogger(__name__)


class CompletionError(Exception):
    """The provider answered without usable text content."""


# ── Provider Abstract Base ────────────────────────────────────────────────────

class LLMProvider(ABC):
    """Abstract interface for LLM providers."""

    name = "abstract"

    @abstractmethod
    def complete(self, system_prompt: str, user_prompt: str, model: str, max_tokens: int) -> dict:
        """
        Send one completion request.

        Returns:
            dict with keys: content (str | None), prompt_tokens, completion_tokens, model
        """
        ...


# ── Anthropic Provider ────────────────────────────────────────────────────────

class AnthropicProvider(LLMProvider):
    """Claude API (Anthropic) provider."""

    name = "anthropic"

    def __init__(self, api_key: str, client=None):
        self.api_key = api_key
        self._client = client

    def _get_client(self):
        if self._client is None:
            import anthropic
            self._client = anthropic.Anthropic(api_key=self.api_key)
        return self._client

    def complete(self, system_prompt: str, user_prompt: str, model: str, max_tokens: int) -> dict:
        client = self._get_client()
        response = client.messages.create(
            model=model,
            max_tokens=max_tokens,
            system=system_prompt,
            messages=[{"role": "user", "content": user_prompt}],
        )

        # First text block; tool-use or empty responses carry none
        content = None
        for block in response.content or []:
            if getattr(block, "type", None) == "text":
                content = block.text
                break

        usage = getattr(response, "usage", None)
        return {
            "content": content,
            "prompt_tokens": getattr(usage, "input_tokens", 0) if usage else 0,
            "completion_tokens": getattr(usage, "output_tokens", 0) if usage else 0,
            "model": model,
        }


# ── Local Stub Provider ───────────────────────────────────────────────────────

class LocalStubProvider(LLMProvider):
    """
    Local stub that returns a deterministic fenced-JSON scenario batch.
    No API key required.
    """

    name = "local"

    def complete(self, system_prompt: str, user_prompt: str, model: str = "local-stub", max_tokens: int = 0) -> dict:
        content = self._generate_stub_response(user_prompt)
        return {
            "content": content,
            "prompt_tokens": len(user_prompt.split()) * 2,  # rough estimate
            "completion_tokens": len(content.split()) * 2,
            "model": "local-stub",
        }

    @staticmethod
    def _generate_stub_response(user_prompt: str) -> str:
        seller = "### Seller app" in user_prompt and "### Consumer app" not in user_prompt
        actor = "seller" if seller else "buyer"
        payload = {
            "scenarios": [
                {
                    "title": f"When a first-time {actor} completes the main flow",
                    "description": "Happy path through the core journey.",
                    "category": "POSITIVE",
                    "priority": "CRITICAL",
                    "deviceType": "BOTH",
                    "testCases": [
                        {"step": 1, "action": "Opens the app", "expected": "Home screen is shown"},
                        {"step": 2, "action": "Completes the main action", "expected": "Confirmation is shown"},
                        {"step": 3, "action": "Returns to the home screen", "expected": "New state is reflected"},
                    ],
                },
                {
                    "title": f"When the network drops while a {actor} submits",
                    "description": "Submission under an unstable connection.",
                    "category": "NETWORK",
                    "priority": "HIGH",
                    "deviceType": "ANDROID",
                    "testCases": [
                        {"step": 1, "action": "Turns on airplane mode", "expected": "Offline banner appears"},
                        {"step": 2, "action": "Taps submit", "expected": "A retry message is shown"},
                    ],
                },
                {
                    "title": f"A {actor} who taps submit twice",
                    "category": "EDGE_CASE",
                    "priority": "MEDIUM",
                    "deviceType": "IOS",
                    "testCases": [
                        {"step": 1, "action": "Double-taps submit", "expected": "Only one request is created"},
                    ],
                },
            ]
        }
        return "```json\n" + json.dumps(payload, indent=2) + "\n```"


# ── LLM Gateway (Main Interface) ─────────────────────────────────────────────

class LLMGateway:
    """
    Central gateway for completion calls.

    Usage:
        gw = LLMGateway(provider=AnthropicProvider(api_key), model="claude-sonnet-4-20250514")
        text = gw.complete(system_prompt, user_prompt)
    """

    DEFAULT_MODEL = "claude-sonnet-4-20250514"
    DEFAULT_MAX_TOKENS = 8192

    def __init__(self, provider: LLMProvider, model: str | None = None, max_tokens: int | None = None):
        self.provider = provider
        self.model = model or self.DEFAULT_MODEL
        self.max_tokens = max_tokens or self.DEFAULT_MAX_TOKENS

    @classmethod
    def from_config(cls, config) -> "LLMGateway":
        """Build a gateway from Flask config (LLM_PROVIDER, ANTHROPIC_API_KEY, LLM_MODEL, LLM_MAX_TOKENS)."""
        provider_name = (config.get("LLM_PROVIDER") or "anthropic").lower()
        if provider_name == "local":
            provider = LocalStubProvider()
        else:
            provider = AnthropicProvider(api_key=config.get("ANTHROPIC_API_KEY", ""))
        return cls(
            provider=provider,
            model=config.get("LLM_MODEL"),
            max_tokens=config.get("LLM_MAX_TOKENS"),
        )

    def complete(self, system_prompt: str, user_prompt: str) -> str:
        """
        Send the prompt pair and return the first text block of the answer.

        Raises:
            CompletionError: if the provider returned no text content.
            Any provider/SDK exception propagates unchanged.
        """
        start_time = time.time()
        result = self.provider.complete(system_prompt, user_prompt, self.model, self.max_tokens)
        latency_ms = int((time.time() - start_time) * 1000)

        logger.info(
            "LLM completion provider=%s model=%s prompt_tokens=%s completion_tokens=%s latency_ms=%d",
            self.provider.name, result.get("model"),
            result.get("prompt_tokens"), result.get("completion_tokens"), latency_ms,
        )

        content = result.get("content")
        if not content:
            raise CompletionError("No text content in response")
        return content
