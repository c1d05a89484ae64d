"""
QA Scenario Hub
Tests — LLM gateway and providers.

The Anthropic SDK is never called; a MagicMock stands in for the client.
"""

from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest

from app.ai.gateway import (
    AnthropicProvider,
    CompletionError,
    LLMGateway,
    LocalStubProvider,
)
from app.ai.parser import parse_scenario_response


def _anthropic_response(*blocks, input_tokens=10, output_tokens=20):
    return SimpleNamespace(
        content=list(blocks),
        usage=SimpleNamespace(input_tokens=input_tokens, output_tokens=output_tokens),
    )


class TestAnthropicProvider:
    def test_sends_system_and_user_prompt(self):
        client = MagicMock()
        client.messages.create.return_value = _anthropic_response(SimpleNamespace(type="text", text="hello"))
        gw = LLMGateway(provider=AnthropicProvider(api_key="k", client=client))

        assert gw.complete("sys", "usr") == "hello"
        kwargs = client.messages.create.call_args.kwargs
        assert kwargs["model"] == "claude-sonnet-4-20250514"
        assert kwargs["max_tokens"] == 8192
        assert kwargs["system"] == "sys"
        assert kwargs["messages"] == [{"role": "user", "content": "usr"}]

    def test_returns_first_text_block(self):
        client = MagicMock()
        client.messages.create.return_value = _anthropic_response(
            SimpleNamespace(type="tool_use", id="x"),
            SimpleNamespace(type="text", text="first"),
            SimpleNamespace(type="text", text="second"),
        )
        gw = LLMGateway(provider=AnthropicProvider(api_key="k", client=client))
        assert gw.complete("s", "u") == "first"

    def test_no_text_block_raises(self):
        client = MagicMock()
        client.messages.create.return_value = _anthropic_response(SimpleNamespace(type="tool_use", id="x"))
        gw = LLMGateway(provider=AnthropicProvider(api_key="k", client=client))
        with pytest.raises(CompletionError):
            gw.complete("s", "u")

    def test_provider_errors_propagate_without_retry(self):
        client = MagicMock()
        client.messages.create.side_effect = RuntimeError("overloaded")
        gw = LLMGateway(provider=AnthropicProvider(api_key="k", client=client))
        with pytest.raises(RuntimeError, match="overloaded"):
            gw.complete("s", "u")
        assert client.messages.create.call_count == 1


class TestGatewayConfig:
    def test_local_provider_from_config(self):
        gw = LLMGateway.from_config({"LLM_PROVIDER": "local"})
        assert isinstance(gw.provider, LocalStubProvider)

    def test_anthropic_provider_from_config(self):
        gw = LLMGateway.from_config({
            "LLM_PROVIDER": "anthropic",
            "ANTHROPIC_API_KEY": "sk-test",
            "LLM_MODEL": "claude-test",
            "LLM_MAX_TOKENS": 1024,
        })
        assert isinstance(gw.provider, AnthropicProvider)
        assert gw.provider.api_key == "sk-test"
        assert gw.model == "claude-test"
        assert gw.max_tokens == 1024


class TestLocalStub:
    def test_stub_output_is_parseable(self):
        text = LLMGateway(provider=LocalStubProvider()).complete("sys", "### Consumer app\nPRD")
        scenarios = parse_scenario_response(text)
        assert len(scenarios) == 3
        assert all(sc["testCases"] for sc in scenarios)
