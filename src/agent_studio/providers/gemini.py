"""Google Gemini provider (Generative Language REST API)."""

from __future__ import annotations

import httpx

from ..models.provider import CompletionResult, GenerationParams
from ..utils.sanitize import sanitize_error
from .base import BaseProvider


class GeminiProvider(BaseProvider):
    name = "gemini"
    default_model = "gemini-1.5-flash"
    default_key_env = "GEMINI_API_KEY"
    API_BASE = "https://generativelanguage.googleapis.com/v1beta"

    def _url(self) -> str:
        base = (self.config.get("endpoint") or self.API_BASE).rstrip("/")
        return f"{base}/models/{self.model}:generateContent"

    def build_body(
        self, system_prompt: str, user_prompt: str, params: GenerationParams
    ) -> dict:
        return {
            "systemInstruction": {"parts": [{"text": system_prompt}]},
            "contents": [{"role": "user", "parts": [{"text": user_prompt}]}],
            "generationConfig": {
                "temperature": params.temperature,
                "topP": params.top_p,
                "maxOutputTokens": params.max_tokens,
            },
        }

    @staticmethod
    def extract_text(data: dict) -> str:
        """Join the text parts of the first candidate."""
        candidates = data.get("candidates") or []
        if not candidates:
            return ""
        parts = (candidates[0].get("content") or {}).get("parts") or []
        return "".join(p.get("text", "") for p in parts if isinstance(p, dict))

    async def complete(
        self,
        system_prompt: str,
        user_prompt: str,
        params: GenerationParams,
    ) -> CompletionResult:
        body = self.build_body(system_prompt, user_prompt, params)
        headers = {
            "x-goog-api-key": self.api_key or "",
            "Content-Type": "application/json",
        }

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(self._url(), json=body, headers=headers)
                response.raise_for_status()
                data = response.json()

            usage = data.get("usageMetadata", {})
            tokens = {
                "input": usage.get("promptTokenCount", 0),
                "output": usage.get("candidatesTokenCount", 0),
            }
            return CompletionResult(
                success=True, content=self.extract_text(data), tokens_used=tokens
            )
        except httpx.HTTPStatusError as e:
            return CompletionResult(
                success=False,
                error=sanitize_error(f"{e.response.status_code} | {e.response.text}"),
            )
        except Exception as e:
            return CompletionResult(success=False, error=sanitize_error(str(e)))
