"""Tests for cryptonews.annotation.llm_provider."""

from unittest.mock import MagicMock

import httpx
import openai
import pytest

from cryptonews.annotation.llm_provider import (
    GEMINI_BASE_URL,
    MockLLMProvider,
    OpenAIProvider,
    build_llm_provider,
)
from cryptonews.errors import ConfigurationError, ModelCallError


def _completion(content, total_tokens=12) -> MagicMock:
    response = MagicMock()
    response.choices = [MagicMock(message=MagicMock(content=content))]
    response.usage = MagicMock(total_tokens=total_tokens)
    return response


class TestBuildLLMProvider:
    def test_mock_provider(self) -> None:
        assert isinstance(build_llm_provider({"provider": "mock"}), MockLLMProvider)

    def test_missing_api_key(self) -> None:
        with pytest.raises(ConfigurationError, match="GEMINI_API_KEY"):
            build_llm_provider({"provider": "gemini", "api_key_env": "GEMINI_API_KEY"})

    def test_unknown_provider(self) -> None:
        with pytest.raises(ConfigurationError):
            build_llm_provider({"provider": "carrier-pigeon", "api_key": "k"})

    def test_gemini_uses_compatibility_endpoint(self) -> None:
        provider = build_llm_provider({"provider": "gemini", "api_key": "test-key", "model": "gemini-2.0-flash"})
        assert isinstance(provider, OpenAIProvider)
        assert str(provider.client.base_url) == GEMINI_BASE_URL
        assert provider.model == "gemini-2.0-flash"


class TestOpenAIProvider:
    def _provider(self) -> OpenAIProvider:
        provider = OpenAIProvider(api_key="test-key")
        provider.client = MagicMock()
        return provider

    def test_returns_text_and_tracks_usage(self) -> None:
        provider = self._provider()
        provider.client.chat.completions.create.return_value = _completion('{"summary": "ok"}')

        assert provider.generate("prompt") == '{"summary": "ok"}'
        stats = provider.get_usage_stats()
        assert stats["total_tokens"] == 12
        assert stats["api_calls"] == 1

    def test_connection_error_becomes_model_call_error(self) -> None:
        provider = self._provider()
        provider.client.chat.completions.create.side_effect = openai.APIConnectionError(
            request=httpx.Request("POST", "https://example.com/chat/completions")
        )
        with pytest.raises(ModelCallError):
            provider.generate("prompt")

    def test_empty_response_is_an_error(self) -> None:
        provider = self._provider()
        provider.client.chat.completions.create.return_value = _completion("")
        with pytest.raises(ModelCallError, match="No response"):
            provider.generate("prompt")


class TestMockLLMProvider:
    def test_replays_responses_then_default(self) -> None:
        provider = MockLLMProvider(["first", ModelCallError("boom")])
        assert provider.generate("a") == "first"
        with pytest.raises(ModelCallError):
            provider.generate("b")
        assert provider.generate("c") == MockLLMProvider.DEFAULT_RESPONSE
        assert provider.prompts == ["a", "b", "c"]
