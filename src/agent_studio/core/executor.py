"""Agent step executor: one role, one call to the generation service."""

from __future__ import annotations

import asyncio
from typing import Optional

from ..models.agent import AgentRole
from ..models.provider import GenerationParams
from ..providers.base import AIProvider
from ..utils.sanitize import sanitize_error
from .agents import MOCK_OUTPUTS, ROLE_INSTRUCTIONS
from .errors import AgentStepError, ConfigurationError

NO_OUTPUT = "No output generated."
DEFAULT_DOMAIN_LABEL = "General"

GENERATION_PARAMS = GenerationParams(temperature=0.0, top_p=0.8, max_tokens=200)


def build_user_content(prompt: str, context: str = "", domain: str = "") -> str:
    """Build the user message for a step.

    The accumulated context is only included when non-empty.
    """
    content = f"Domain: {domain or DEFAULT_DOMAIN_LABEL}\n\nUser Goal: {prompt}\n\n"
    if context:
        content += f"Previous Process Context:\n{context}\n\n"
    content += "Task: Execute your specific role for this context."
    return content


class AgentStepExecutor:
    """Runs a single agent role against the injected provider.

    One attempt per call, no retry. ``step_timeout`` bounds the whole call;
    exceeding it is a step failure like any other.
    """

    def __init__(
        self,
        provider: Optional[AIProvider] = None,
        step_timeout: Optional[float] = None,
        dry_run: bool = False,
    ):
        if provider is None and not dry_run:
            raise ConfigurationError("An AI provider is required unless running dry")
        self.provider = provider
        self.step_timeout = step_timeout
        self.dry_run = dry_run

    async def execute(
        self,
        role: AgentRole,
        prompt: str,
        context: str = "",
        domain: str = "",
    ) -> str:
        if self.dry_run:
            return MOCK_OUTPUTS[role]

        instruction = ROLE_INSTRUCTIONS[role]
        user_content = build_user_content(prompt, context, domain)

        try:
            result = await asyncio.wait_for(
                self.provider.complete(
                    instruction.system_prompt, user_content, GENERATION_PARAMS
                ),
                timeout=self.step_timeout,
            )
        except asyncio.TimeoutError as e:
            raise AgentStepError(
                role, f"timed out after {self.step_timeout}s"
            ) from e
        except Exception as e:
            raise AgentStepError(role, sanitize_error(str(e)) or type(e).__name__) from e

        if not result.success:
            raise AgentStepError(role, result.error or "unknown provider error")

        return result.content or NO_OUTPUT
