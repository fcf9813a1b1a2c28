"""Pipeline orchestrator.

Runs the four agents for one session:

    Stage A  IDEA + CRITIC concurrently, no context
    Stage B  REFINER with both outputs as context
    Stage C  PRESENTER with IDEA, CRITIC and REFINER outputs as context

The first failing step ends the run. There is no retry and no resume.
"""

from __future__ import annotations

import asyncio
from typing import Callable, Optional

from ..models.agent import AgentRole
from ..models.session import (
    StepStatus,
    StepUpdate,
    StudioSession,
    TraceEntry,
    TraceLevel,
)
from ..utils.sanitize import sanitize_error
from .agents import AGENTS, CRITIC_INDEX, IDEA_INDEX, PRESENTER_INDEX, REFINER_INDEX
from .errors import AgentStepError, InvalidPromptError, PipelineError, RunInProgressError
from .executor import AgentStepExecutor
from .history import SessionStore
from .reducer import SessionReducer, new_session

UpdateCallback = Callable[[StudioSession], None]
TraceCallback = Callable[[TraceEntry], None]


def context_section(role: AgentRole, output: str) -> str:
    return f"--- Output from {role.value} ---\n{output}"


def append_context(context: str, role: AgentRole, output: str) -> str:
    """Append a labeled section to the context blob."""
    section = context_section(role, output)
    return f"{context}\n\n{section}" if context else section


class PipelineOrchestrator:
    """Drives one run at a time over an ``AgentStepExecutor``.

    ``on_update`` receives every new session snapshot, ``on_trace`` every trace
    entry. A successful session is recorded in ``store``.
    """

    def __init__(
        self,
        executor: AgentStepExecutor,
        store: Optional[SessionStore] = None,
        on_update: Optional[UpdateCallback] = None,
        on_trace: Optional[TraceCallback] = None,
    ):
        self.executor = executor
        self.store = store if store is not None else SessionStore()
        self.on_update = on_update
        self.on_trace = on_trace
        self.trace: list[TraceEntry] = []
        self._running = False
        self._reducer: Optional[SessionReducer] = None
        # Stage-A siblings still in flight after their run failed
        self._detached: set[asyncio.Task] = set()

    @property
    def is_running(self) -> bool:
        return self._running

    async def run(self, prompt: str, domain: str) -> StudioSession:
        """Run the pipeline. Returns the completed session.

        Raises ``InvalidPromptError`` before creating a session, and
        ``PipelineError`` (carrying the terminal session) when a step fails.
        """
        prompt = (prompt or "").strip()
        if not prompt:
            raise InvalidPromptError("Prompt must not be empty")
        if self._running:
            raise RunInProgressError("A run is already in progress")

        self._running = True
        try:
            self.trace = []
            reducer = SessionReducer(new_session(prompt, domain), self._publish)
            self._reducer = reducer
            self._publish(reducer.session)
            self._log(f'Initializing multi-agent workflow for: "{domain}"')
            self._log(f"Goal: {prompt[:50]}{'...' if len(prompt) > 50 else ''}")

            try:
                await self._run_stages(reducer, prompt, domain)
            except AgentStepError as e:
                self._log(f"Process failed: {e}", TraceLevel.ERROR)
                raise PipelineError(e.role, str(e), reducer.session) from e

            session = reducer.session
            try:
                self.store.record_if_complete(session)
            except OSError as e:
                self._log(
                    f"Session could not be saved to history: {sanitize_error(str(e))}",
                    TraceLevel.WARNING,
                )
            self._log("Pipeline complete. Final presentation ready.", TraceLevel.SUCCESS)
            return session
        finally:
            self._running = False

    async def _run_stages(self, reducer: SessionReducer, prompt: str, domain: str) -> None:
        # Stage A
        idea_task = asyncio.create_task(
            self._run_step(reducer, IDEA_INDEX, prompt, "", domain)
        )
        critic_task = asyncio.create_task(
            self._run_step(reducer, CRITIC_INDEX, prompt, "", domain)
        )
        done, pending = await asyncio.wait(
            {idea_task, critic_task}, return_when=asyncio.FIRST_EXCEPTION
        )
        for task in pending:
            self._detach(task)
        # Read every finished task's exception, then raise the first in stage order
        failures = {task: task.exception() for task in done}
        for task in (idea_task, critic_task):
            if failures.get(task) is not None:
                raise failures[task]

        context = append_context("", AgentRole.IDEA, idea_task.result())
        context = append_context(context, AgentRole.CRITIC, critic_task.result())

        # Stage B
        refined = await self._run_step(reducer, REFINER_INDEX, prompt, context, domain)
        context = append_context(context, AgentRole.REFINER, refined)

        # Stage C
        await self._run_step(reducer, PRESENTER_INDEX, prompt, context, domain)

    async def _run_step(
        self,
        reducer: SessionReducer,
        index: int,
        prompt: str,
        context: str,
        domain: str,
    ) -> str:
        agent = AGENTS[index]
        reducer.dispatch(StepUpdate(index=index, status=StepStatus.ACTIVE))
        self._log(f"Agent [{agent.name}] activated. Thinking...", TraceLevel.AGENT)

        try:
            output = await self.executor.execute(agent.role, prompt, context, domain)
        except AgentStepError:
            if reducer.dispatch(StepUpdate(index=index, status=StepStatus.ERROR)):
                self._log(
                    f"Agent [{agent.name}] encountered an error. Stopping pipeline.",
                    TraceLevel.ERROR,
                )
            raise

        if reducer.dispatch(
            StepUpdate(index=index, status=StepStatus.COMPLETED, output=output)
        ):
            self._log(
                f"Agent [{agent.name}] completed task. Output synthesized.",
                TraceLevel.SUCCESS,
            )
        elif reducer is self._reducer:
            self._log(
                f"Agent [{agent.name}] finished after the run stopped; output discarded.",
                TraceLevel.WARNING,
            )
        return output

    def _detach(self, task: asyncio.Task) -> None:
        """Let a losing Stage-A call finish on its own; its result is ignored."""
        self._detached.add(task)
        task.add_done_callback(self._reap)

    def _reap(self, task: asyncio.Task) -> None:
        self._detached.discard(task)
        if not task.cancelled():
            # Marks the exception as retrieved; the step outcome was already traced
            task.exception()

    def _publish(self, session: StudioSession) -> None:
        self.store.current = session
        if self.on_update is not None:
            self.on_update(session)

    def _log(self, message: str, level: TraceLevel = TraceLevel.INFO) -> None:
        entry = TraceEntry(message=message, level=level)
        self.trace.append(entry)
        if self.on_trace is not None:
            self.on_trace(entry)
