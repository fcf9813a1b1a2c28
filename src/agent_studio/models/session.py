"""Session data models.

Serialized with the camelCase keys (``agentId``, ``isProcessing``) used by the
history file, while Python code uses snake_case attribute names.
"""

from __future__ import annotations

import time
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from .agent import AgentRole


def now_ms() -> int:
    return int(time.time() * 1000)


class StepStatus(str, Enum):
    PENDING = "pending"
    ACTIVE = "active"
    COMPLETED = "completed"
    ERROR = "error"


class TraceLevel(str, Enum):
    INFO = "info"
    AGENT = "agent"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ProcessStep(_CamelModel):
    agent_id: str
    role: AgentRole
    status: StepStatus = StepStatus.PENDING
    output: str = ""
    timestamp: int = Field(default_factory=now_ms)


class StudioSession(_CamelModel):
    id: str
    prompt: str
    domain: str
    steps: list[ProcessStep]
    is_processing: bool = True

    @property
    def is_complete(self) -> bool:
        """True when every step finished successfully."""
        return bool(self.steps) and all(
            s.status == StepStatus.COMPLETED for s in self.steps
        )

    @property
    def is_failed(self) -> bool:
        return any(s.status == StepStatus.ERROR for s in self.steps)

    @property
    def is_terminal(self) -> bool:
        return not self.is_processing

    def step_for(self, role: AgentRole) -> Optional[ProcessStep]:
        for step in self.steps:
            if step.role == role:
                return step
        return None

    @property
    def final_output(self) -> str:
        """PRESENTER output, or empty until that step completes."""
        step = self.step_for(AgentRole.PRESENTER)
        if step is None or step.status != StepStatus.COMPLETED:
            return ""
        return step.output


class StepUpdate(BaseModel):
    """A single state transition for the step at ``index``."""

    model_config = ConfigDict(frozen=True)

    index: int
    status: StepStatus
    output: Optional[str] = None


class TraceEntry(BaseModel):
    message: str
    level: TraceLevel = TraceLevel.INFO
    timestamp: int = Field(default_factory=now_ms)
