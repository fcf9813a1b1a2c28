"""Exception hierarchy for Agent Studio."""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from ..models.agent import AgentRole

if TYPE_CHECKING:
    from ..models.session import StepStatus, StudioSession


class StudioError(Exception):
    """Base class for all Agent Studio errors."""


class ConfigurationError(StudioError):
    """Invalid or incomplete configuration. Fatal at startup."""


class MissingCredentialError(ConfigurationError):
    def __init__(self, env_var: str):
        self.env_var = env_var
        super().__init__(f"API key not found in environment variable: {env_var}")


class InvalidPromptError(StudioError, ValueError):
    """The goal prompt is empty or whitespace only."""


class RunInProgressError(StudioError):
    """A run was requested while another run is still in progress."""


class InvalidTransitionError(StudioError):
    def __init__(self, index: int, current: "StepStatus", requested: "StepStatus"):
        self.index = index
        self.current = current
        self.requested = requested
        super().__init__(
            f"Step {index} cannot move from {current.value} to {requested.value}"
        )


class AgentStepError(StudioError):
    """A single call to the generation service failed."""

    def __init__(self, role: AgentRole, message: str):
        self.role = role
        self.message = message
        super().__init__(f"{role.value} agent failed: {message}")


class PipelineError(StudioError):
    """A run stopped at a failed stage.

    ``session`` is the terminal snapshot: the failed step is marked ``error``
    and steps completed before the failure keep their output.
    """

    def __init__(
        self,
        role: AgentRole,
        message: str,
        session: Optional["StudioSession"] = None,
    ):
        self.role = role
        self.session = session
        super().__init__(message)


class ExportError(StudioError):
    """The session cannot be exported (final presentation missing)."""
