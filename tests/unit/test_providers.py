"""Tests for providers/."""

from __future__ import annotations

import json

import httpx
import pytest

from agent_studio.core.errors import ConfigurationError, MissingCredentialError
from agent_studio.models.provider import GenerationParams
from agent_studio.providers import gemini as gemini_module
from agent_studio.providers.base import get_ai_provider
from agent_studio.providers.gemini import GeminiProvider

PARAMS = GenerationParams(temperature=0, top_p=0.8, max_tokens=200)
FAKE_KEY = "AIzaSyA1234567890abcdefghijklmnop"


@pytest.fixture
def mock_transport(monkeypatch):
    """Route httpx.AsyncClient in the Gemini module through a handler."""
    real_client = httpx.AsyncClient

    def install(handler):
        transport = httpx.MockTransport(handler)
        monkeypatch.setattr(
            gemini_module.httpx,
            "AsyncClient",
            lambda **kwargs: real_client(transport=transport, **kwargs),
        )

    return install


class TestGetAIProvider:
    def test_gemini_is_default(self, monkeypatch):
        monkeypatch.setenv("GEMINI_API_KEY", "test")
        provider = get_ai_provider({"ai": {}})
        assert provider.name == "gemini"
        assert provider.model == "gemini-1.5-flash"

    def test_openai_provider(self):
        config = {"ai": {"provider": "openai", "openai": {"api_key": "test"}}}
        assert get_ai_provider(config).name == "openai"

    def test_anthropic_provider(self):
        config = {"ai": {"provider": "anthropic", "anthropic": {"api_key": "test"}}}
        assert get_ai_provider(config).name == "anthropic"

    def test_ollama_needs_no_key(self, monkeypatch):
        monkeypatch.delenv("GEMINI_API_KEY", raising=False)
        provider = get_ai_provider({"ai": {"provider": "ollama"}})
        assert provider.name == "ollama"
        assert provider.api_key is None

    def test_invalid_provider_raises(self):
        with pytest.raises(ConfigurationError, match="Unknown"):
            get_ai_provider({"ai": {"provider": "invalid"}})

    def test_provider_and_model_override(self):
        config = {"ai": {"provider": "gemini", "openai": {"api_key": "test"}}}
        provider = get_ai_provider(config, provider_override="openai", model_override="gpt-4o")
        assert provider.name == "openai"
        assert provider.model == "gpt-4o"

    def test_missing_credential(self, monkeypatch):
        monkeypatch.delenv("GEMINI_API_KEY", raising=False)
        with pytest.raises(MissingCredentialError) as exc_info:
            get_ai_provider({"ai": {"provider": "gemini"}})
        assert exc_info.value.env_var == "GEMINI_API_KEY"

    def test_custom_key_env(self, monkeypatch):
        monkeypatch.setenv("STUDIO_KEY", "test")
        config = {"ai": {"gemini": {"api_key_env": "STUDIO_KEY"}}}
        assert get_ai_provider(config).api_key == "test"

    def test_timeout_from_common_config(self):
        config = {"ai": {"timeout_seconds": 5, "openai": {"api_key": "test"}}}
        assert get_ai_provider(config, provider_override="openai").timeout == 5.0


class TestGeminiProvider:
    def _provider(self, **config) -> GeminiProvider:
        return GeminiProvider({"api_key": FAKE_KEY, **config}, {"timeout_seconds": 5})

    def test_request_body(self):
        body = self._provider().build_body("system", "user", PARAMS)
        assert body["systemInstruction"] == {"parts": [{"text": "system"}]}
        assert body["contents"][0]["parts"][0]["text"] == "user"
        assert body["generationConfig"] == {
            "temperature": 0,
            "topP": 0.8,
            "maxOutputTokens": 200,
        }

    def test_extract_text_joins_parts(self):
        data = {"candidates": [{"content": {"parts": [{"text": "a"}, {"text": "b"}]}}]}
        assert GeminiProvider.extract_text(data) == "ab"

    def test_extract_text_without_candidates(self):
        assert GeminiProvider.extract_text({}) == ""
        assert GeminiProvider.extract_text({"candidates": [{"finishReason": "SAFETY"}]}) == ""

    @pytest.mark.asyncio
    async def test_successful_call(self, mock_transport):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            seen["key"] = request.headers.get("x-goog-api-key")
            seen["body"] = json.loads(request.content)
            return httpx.Response(
                200,
                json={
                    "candidates": [{"content": {"parts": [{"text": "Idea!"}]}}],
                    "usageMetadata": {"promptTokenCount": 12, "candidatesTokenCount": 3},
                },
            )

        mock_transport(handler)
        result = await self._provider().complete("system", "user", PARAMS)

        assert result.success
        assert result.content == "Idea!"
        assert result.tokens_used == {"input": 12, "output": 3}
        assert seen["url"].endswith("/models/gemini-1.5-flash:generateContent")
        assert seen["key"] == FAKE_KEY
        assert seen["body"]["generationConfig"]["maxOutputTokens"] == 200

    @pytest.mark.asyncio
    async def test_http_error_is_reported_and_sanitized(self, mock_transport):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(429, text=f"quota exceeded for key {FAKE_KEY}")

        mock_transport(handler)
        result = await self._provider().complete("system", "user", PARAMS)

        assert not result.success
        assert result.error.startswith("429 | quota exceeded")
        assert FAKE_KEY not in result.error
        assert "[REDACTED_KEY]" in result.error

    @pytest.mark.asyncio
    async def test_transport_error_is_reported(self, mock_transport):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        mock_transport(handler)
        result = await self._provider().complete("system", "user", PARAMS)

        assert not result.success
        assert "connection refused" in result.error

    @pytest.mark.asyncio
    async def test_custom_endpoint(self, mock_transport):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["host"] = request.url.host
            return httpx.Response(200, json={"candidates": []})

        mock_transport(handler)
        provider = self._provider(endpoint="https://proxy.example.com/v1beta/")
        result = await provider.complete("system", "user", PARAMS)

        assert result.success
        assert result.content == ""
        assert seen["host"] == "proxy.example.com"
