"""Anthropic Messages API provider."""

from __future__ import annotations

import httpx

from ..models.provider import CompletionResult, GenerationParams
from ..utils.sanitize import sanitize_error
from .base import BaseProvider


class AnthropicProvider(BaseProvider):
    name = "anthropic"
    default_model = "claude-haiku-4-5-20251001"
    default_key_env = "ANTHROPIC_API_KEY"
    API_URL = "https://api.anthropic.com/v1/messages"

    async def complete(
        self,
        system_prompt: str,
        user_prompt: str,
        params: GenerationParams,
    ) -> CompletionResult:
        body = {
            "model": self.model,
            "max_tokens": params.max_tokens,
            # Current models reject temperature and top_p in the same request
            "temperature": params.temperature,
            "system": system_prompt,
            "messages": [{"role": "user", "content": user_prompt}],
        }

        headers = {
            "x-api-key": self.api_key or "",
            "anthropic-version": "2023-06-01",
            "content-type": "application/json",
        }

        try:
            url = self.config.get("endpoint") or self.API_URL
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(url, json=body, headers=headers)
                response.raise_for_status()
                data = response.json()

            content = None
            for block in data.get("content", []):
                if block.get("type") == "text":
                    content = block.get("text")
                    break

            usage = data.get("usage", {})
            tokens = {
                "input": usage.get("input_tokens", 0),
                "output": usage.get("output_tokens", 0),
            }

            return CompletionResult(success=True, content=content, tokens_used=tokens)
        except httpx.HTTPStatusError as e:
            return CompletionResult(
                success=False,
                error=sanitize_error(f"{e.response.status_code} | {e.response.text}"),
            )
        except Exception as e:
            return CompletionResult(success=False, error=sanitize_error(str(e)))
