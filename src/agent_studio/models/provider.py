"""AI provider data models."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict


class GenerationParams(BaseModel):
    """Sampling parameters sent with every completion request."""

    model_config = ConfigDict(frozen=True)

    temperature: float = 0.0
    top_p: float = 0.8
    max_tokens: int = 200


class CompletionResult(BaseModel):
    success: bool
    content: Optional[str] = None
    tokens_used: Optional[dict] = None
    error: Optional[str] = None
