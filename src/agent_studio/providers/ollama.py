"""Ollama local inference provider. Needs no credential."""

from __future__ import annotations

import httpx

from ..models.provider import CompletionResult, GenerationParams
from ..utils.sanitize import sanitize_error
from .base import BaseProvider


class OllamaProvider(BaseProvider):
    name = "ollama"
    default_model = "llama3.1:8b"

    async def complete(
        self,
        system_prompt: str,
        user_prompt: str,
        params: GenerationParams,
    ) -> CompletionResult:
        endpoint = self.config.get("endpoint") or "http://localhost:11434"

        body = {
            "model": self.model,
            "system": system_prompt,
            "prompt": user_prompt,
            "stream": False,
            "options": {
                "temperature": params.temperature,
                "top_p": params.top_p,
                "num_predict": params.max_tokens,
            },
        }

        try:
            url = f"{endpoint.rstrip('/')}/api/generate"
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(url, json=body)
                response.raise_for_status()
                data = response.json()

            tokens = None
            if "eval_count" in data:
                tokens = {
                    "input": data.get("prompt_eval_count", 0),
                    "output": data.get("eval_count", 0),
                }
            return CompletionResult(
                success=True, content=data.get("response", ""), tokens_used=tokens
            )
        except Exception as e:
            return CompletionResult(success=False, error=sanitize_error(str(e)))
