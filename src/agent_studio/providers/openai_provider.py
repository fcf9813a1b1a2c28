"""OpenAI chat completions provider."""

from __future__ import annotations

import httpx

from ..models.provider import CompletionResult, GenerationParams
from ..utils.sanitize import sanitize_error
from .base import BaseProvider


class OpenAIProvider(BaseProvider):
    name = "openai"
    default_model = "gpt-4o-mini"
    default_key_env = "OPENAI_API_KEY"
    API_URL = "https://api.openai.com/v1/chat/completions"

    async def complete(
        self,
        system_prompt: str,
        user_prompt: str,
        params: GenerationParams,
    ) -> CompletionResult:
        body = {
            "model": self.model,
            "max_tokens": params.max_tokens,
            "temperature": params.temperature,
            "top_p": params.top_p,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
        }

        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

        try:
            url = self.config.get("endpoint") or self.API_URL
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(url, json=body, headers=headers)
                response.raise_for_status()
                data = response.json()

            choices = data.get("choices") or [{}]
            content = (choices[0].get("message") or {}).get("content")
            usage = data.get("usage", {})
            tokens = {
                "input": usage.get("prompt_tokens", 0),
                "output": usage.get("completion_tokens", 0),
            }

            return CompletionResult(success=True, content=content, tokens_used=tokens)
        except httpx.HTTPStatusError as e:
            return CompletionResult(
                success=False,
                error=sanitize_error(f"{e.response.status_code} | {e.response.text}"),
            )
        except Exception as e:
            return CompletionResult(success=False, error=sanitize_error(str(e)))
