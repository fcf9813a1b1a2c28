"""Session state transitions.

Every change to a running session is expressed as a ``StepUpdate`` and applied
by ``apply_update``. A ``SessionReducer`` owns one session and applies updates
serially, so each step has a single writer even while two agents run at once.
"""

from __future__ import annotations

import secrets
import string
from typing import Callable, Optional

from ..models.session import (
    ProcessStep,
    StepStatus,
    StepUpdate,
    StudioSession,
    now_ms,
)
from .agents import AGENTS
from .errors import InvalidTransitionError

ALLOWED_TRANSITIONS: dict[StepStatus, frozenset[StepStatus]] = {
    StepStatus.PENDING: frozenset({StepStatus.ACTIVE}),
    StepStatus.ACTIVE: frozenset({StepStatus.COMPLETED, StepStatus.ERROR}),
    StepStatus.COMPLETED: frozenset(),
    StepStatus.ERROR: frozenset(),
}

_ID_ALPHABET = string.ascii_lowercase + string.digits


def new_session_id() -> str:
    return "".join(secrets.choice(_ID_ALPHABET) for _ in range(9))


def new_session(prompt: str, domain: str, session_id: Optional[str] = None) -> StudioSession:
    """Create a session with one pending step per agent."""
    ts = now_ms()
    return StudioSession(
        id=session_id or new_session_id(),
        prompt=prompt,
        domain=domain,
        is_processing=True,
        steps=[
            ProcessStep(agent_id=agent.id, role=agent.role, timestamp=ts)
            for agent in AGENTS
        ],
    )


def apply_update(session: StudioSession, update: StepUpdate) -> StudioSession:
    """Return a new session with ``update`` applied.

    An ``error`` step, or the last step completing, ends processing.
    """
    if not 0 <= update.index < len(session.steps):
        raise IndexError(f"No step at index {update.index}")

    step = session.steps[update.index]
    if update.status not in ALLOWED_TRANSITIONS[step.status]:
        raise InvalidTransitionError(update.index, step.status, update.status)

    changes: dict = {"status": update.status, "timestamp": now_ms()}
    if update.status == StepStatus.COMPLETED:
        changes["output"] = update.output or ""

    steps = list(session.steps)
    steps[update.index] = step.model_copy(update=changes)

    is_processing = session.is_processing
    if update.status == StepStatus.ERROR:
        is_processing = False
    elif all(s.status == StepStatus.COMPLETED for s in steps):
        is_processing = False

    return session.model_copy(update={"steps": steps, "is_processing": is_processing})


class SessionReducer:
    """Single writer for one session.

    Updates arriving after the session became terminal are dropped and
    reported by a ``False`` return value.
    """

    def __init__(
        self,
        session: StudioSession,
        listener: Optional[Callable[[StudioSession], None]] = None,
    ):
        self.session = session
        self._listener = listener

    @property
    def is_terminal(self) -> bool:
        return self.session.is_terminal

    def dispatch(self, update: StepUpdate) -> bool:
        if self.session.is_terminal:
            return False
        self.session = apply_update(self.session, update)
        if self._listener is not None:
            self._listener(self.session)
        return True
