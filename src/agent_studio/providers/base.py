"""AI provider abstraction.

Providers make a single attempt per call and report service failures as an
unsuccessful ``CompletionResult`` instead of raising.
"""

from __future__ import annotations

import os
from typing import Optional, Protocol, runtime_checkable

from ..core.errors import ConfigurationError, MissingCredentialError
from ..models.provider import CompletionResult, GenerationParams

PROVIDER_NAMES = ("gemini", "openai", "anthropic", "ollama")


@runtime_checkable
class AIProvider(Protocol):
    """Protocol that all AI providers must implement."""

    name: str

    async def complete(
        self,
        system_prompt: str,
        user_prompt: str,
        params: GenerationParams,
    ) -> CompletionResult: ...


class BaseProvider:
    """Base class with shared credential and config handling.

    Providers that need a key resolve it on construction, so a missing
    credential stops the program before any run starts.
    """

    name: str = "base"
    default_model: str = ""
    default_key_env: Optional[str] = None

    def __init__(self, provider_config: dict, common_config: dict):
        self.config = provider_config
        self.common = common_config
        self.api_key: Optional[str] = None
        if self.default_key_env:
            self.api_key = self._get_api_key()
            if not self.api_key:
                raise MissingCredentialError(self.key_env)

    @property
    def key_env(self) -> str:
        return self.config.get("api_key_env") or self.default_key_env or ""

    @property
    def model(self) -> str:
        return self.config.get("model") or self.default_model

    @property
    def timeout(self) -> float:
        return float(self.common.get("timeout_seconds", 60))

    def _get_api_key(self) -> Optional[str]:
        return self.config.get("api_key") or os.environ.get(self.key_env)

    async def complete(
        self,
        system_prompt: str,
        user_prompt: str,
        params: GenerationParams,
    ) -> CompletionResult:
        raise NotImplementedError


def get_ai_provider(
    config: dict,
    provider_override: Optional[str] = None,
    model_override: Optional[str] = None,
    endpoint_override: Optional[str] = None,
) -> BaseProvider:
    """Factory function to create the configured AI provider."""
    ai_config = config.get("ai", {})
    provider_name = provider_override or ai_config.get("provider", "gemini")

    provider_config = dict(ai_config.get(provider_name) or {})

    if model_override:
        provider_config["model"] = model_override
    if endpoint_override:
        provider_config["endpoint"] = endpoint_override

    # ai section minus provider sub-configs
    common_config = {k: v for k, v in ai_config.items() if k not in PROVIDER_NAMES}

    if provider_name == "gemini":
        from .gemini import GeminiProvider
        return GeminiProvider(provider_config, common_config)
    elif provider_name == "openai":
        from .openai_provider import OpenAIProvider
        return OpenAIProvider(provider_config, common_config)
    elif provider_name == "anthropic":
        from .anthropic import AnthropicProvider
        return AnthropicProvider(provider_config, common_config)
    elif provider_name == "ollama":
        from .ollama import OllamaProvider
        return OllamaProvider(provider_config, common_config)
    else:
        raise ConfigurationError(f"Unknown AI provider: {provider_name}")
