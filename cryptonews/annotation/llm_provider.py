"""LLM provider interface and implementations."""

from abc import ABC, abstractmethod
from collections import deque
from typing import Any, Deque, Dict, Iterable, List, Optional, Union

import openai
from openai import OpenAI

from ..errors import ConfigurationError, ModelCallError

GEMINI_BASE_URL = "https://generativelanguage.googleapis.com/v1beta/openai/"


class LLMProvider(ABC):
    """Abstract base class for LLM providers."""

    @abstractmethod
    def generate(self, prompt: str) -> str:
        """
        Send a single prompt and return the model's text.

        Args:
            prompt: Fully rendered prompt

        Returns:
            Raw response text

        Raises:
            ModelCallError: If the endpoint fails or returns no text
        """

    @abstractmethod
    def get_usage_stats(self) -> Dict:
        """Get usage statistics."""


class OpenAIProvider(LLMProvider):
    """Chat-completions provider for any OpenAI-compatible endpoint."""

    def __init__(
        self,
        api_key: str,
        model: str = "gemini-2.0-flash",
        base_url: Optional[str] = GEMINI_BASE_URL,
        temperature: float = 0.3,
        timeout: Optional[float] = None,
    ) -> None:
        """
        Initialize provider.

        Args:
            api_key: API key for the endpoint
            model: Model name to use
            base_url: API base URL (Gemini's OpenAI-compatible endpoint by default)
            temperature: Sampling temperature
            timeout: Request timeout; the client default applies when None
        """
        client_kwargs: Dict[str, Any] = {"api_key": api_key, "base_url": base_url}
        if timeout is not None:
            client_kwargs["timeout"] = timeout
        self.client = OpenAI(**client_kwargs)
        self.model = model
        self.temperature = temperature
        self.total_tokens = 0
        self.api_calls = 0

    def generate(self, prompt: str) -> str:
        """Call the chat completions endpoint with one user message."""
        self.api_calls += 1
        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=[{"role": "user", "content": prompt}],
                temperature=self.temperature,
            )
        except openai.APIStatusError as e:
            raise ModelCallError(f"Model API error: {e.status_code}") from e
        except openai.OpenAIError as e:
            raise ModelCallError(f"Model API error: {e}") from e

        if response.usage:
            self.total_tokens += response.usage.total_tokens

        text = response.choices[0].message.content if response.choices else None
        if not text:
            raise ModelCallError("No response from model API")
        return text

    def get_usage_stats(self) -> Dict:
        """Get usage statistics."""
        return {
            "total_tokens": self.total_tokens,
            "api_calls": self.api_calls,
            "model": self.model,
        }


MockResponse = Union[str, Exception]


class MockLLMProvider(LLMProvider):
    """Mock LLM provider for tests and dry runs.

    Replays ``responses`` in order; an exception in the list is raised
    instead of returned. Once exhausted, ``default_response`` is returned.
    """

    DEFAULT_RESPONSE = (
        '{"summary": "Mock summary", "sentiment": "Neutral", "trending_score": 50, '
        '"key_points": ["Mock key point"], "related_cryptos": [], "market_impact_score": 50}'
    )

    def __init__(
        self,
        responses: Optional[Iterable[MockResponse]] = None,
        default_response: Optional[str] = None,
    ) -> None:
        """Initialize mock provider."""
        self.responses: Deque[MockResponse] = deque(responses or [])
        self.default_response = default_response or self.DEFAULT_RESPONSE
        self.prompts: List[str] = []

    def generate(self, prompt: str) -> str:
        """Return the next scripted response."""
        self.prompts.append(prompt)
        response = self.responses.popleft() if self.responses else self.default_response
        if isinstance(response, Exception):
            raise response
        return response

    def get_usage_stats(self) -> Dict:
        """Get mock usage statistics."""
        return {
            "total_tokens": 0,
            "api_calls": len(self.prompts),
            "model": "mock",
        }


def build_llm_provider(llm_config: Dict[str, Any]) -> LLMProvider:
    """
    Create the configured provider.

    Raises:
        ConfigurationError: If the provider is unknown or its API key is missing
    """
    provider = (llm_config.get("provider") or "").lower()

    if provider == "mock":
        return MockLLMProvider()

    if provider not in ("gemini", "openai"):
        raise ConfigurationError(f"Unknown LLM provider: {llm_config.get('provider')}")

    api_key = llm_config.get("api_key")
    if not api_key:
        env_name = llm_config.get("api_key_env") or "the api_key setting"
        raise ConfigurationError(f"AI service not configured: set {env_name}")

    base_url = llm_config.get("base_url")
    if not base_url and provider == "gemini":
        base_url = GEMINI_BASE_URL

    return OpenAIProvider(
        api_key=api_key,
        model=llm_config.get("model") or "gemini-2.0-flash",
        base_url=base_url,
        temperature=llm_config.get("temperature", 0.3),
        timeout=llm_config.get("timeout"),
    )
