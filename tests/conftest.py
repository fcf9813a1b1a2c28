"""Shared fixtures for Agent Studio tests."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Optional

import pytest

from agent_studio.core.agents import AGENTS, ROLE_INSTRUCTIONS
from agent_studio.models.agent import AgentRole
from agent_studio.models.provider import CompletionResult, GenerationParams
from agent_studio.models.session import ProcessStep, StepStatus, StudioSession

CANNED_OUTPUTS = {
    AgentRole.IDEA: "Solar microgrid kits leased to clinics with pay-per-use billing.",
    AgentRole.CRITIC: "- Battery theft\n- Maintenance gaps\n- Financing risk",
    AgentRole.REFINER: "Community-owned kits with remote monitoring and local technicians.",
    AgentRole.PRESENTER: "Overview: ...\nStrategy: ...\nImpact: ...\nNext Steps: ...",
}

ROLE_BY_SYSTEM_PROMPT = {
    instruction.system_prompt: role for role, instruction in ROLE_INSTRUCTIONS.items()
}


class FakeProvider:
    """In-memory stand-in for the generation service.

    Records every call; can delay, raise, or report failure per role.
    """

    name = "fake"
    model = "fake-model"

    def __init__(
        self,
        outputs: Optional[dict] = None,
        raise_for: tuple = (),
        fail_for: tuple = (),
        delays: Optional[dict] = None,
    ):
        self.outputs = dict(CANNED_OUTPUTS if outputs is None else outputs)
        self.raise_for = set(raise_for)
        self.fail_for = set(fail_for)
        self.delays = delays or {}
        self.calls: list[dict] = []

    async def complete(
        self, system_prompt: str, user_prompt: str, params: GenerationParams
    ) -> CompletionResult:
        role = ROLE_BY_SYSTEM_PROMPT[system_prompt]
        self.calls.append(
            {"role": role, "system": system_prompt, "user": user_prompt, "params": params}
        )
        if role in self.delays:
            await asyncio.sleep(self.delays[role])
        if role in self.raise_for:
            raise RuntimeError(f"{role.value} service unavailable")
        if role in self.fail_for:
            return CompletionResult(success=False, error="429 | quota exceeded")
        return CompletionResult(success=True, content=self.outputs.get(role, ""))

    def roles_called(self) -> list[AgentRole]:
        return [c["role"] for c in self.calls]

    def user_prompt_for(self, role: AgentRole) -> str:
        for call in self.calls:
            if call["role"] == role:
                return call["user"]
        raise AssertionError(f"{role.value} was never called")


@pytest.fixture
def fake_provider() -> FakeProvider:
    return FakeProvider()


@pytest.fixture
def provider_factory():
    """Return the FakeProvider class for tests that need custom behavior."""
    return FakeProvider


def build_session(
    session_id: str = "abc123xyz",
    statuses: Optional[list[StepStatus]] = None,
    prompt: str = "Design a solar microgrid for rural clinics",
    domain: str = "tech",
) -> StudioSession:
    statuses = statuses or [StepStatus.COMPLETED] * 4
    steps = []
    for agent, status in zip(AGENTS, statuses):
        output = CANNED_OUTPUTS[agent.role] if status == StepStatus.COMPLETED else ""
        steps.append(
            ProcessStep(
                agent_id=agent.id,
                role=agent.role,
                status=status,
                output=output,
                timestamp=1_700_000_000_000,
            )
        )
    return StudioSession(
        id=session_id,
        prompt=prompt,
        domain=domain,
        steps=steps,
        is_processing=False,
    )


@pytest.fixture
def session_factory():
    return build_session


@pytest.fixture
def completed_session() -> StudioSession:
    return build_session()


@pytest.fixture
def failed_session() -> StudioSession:
    return build_session(
        session_id="failed001",
        statuses=[
            StepStatus.COMPLETED,
            StepStatus.ERROR,
            StepStatus.PENDING,
            StepStatus.PENDING,
        ],
    )


@pytest.fixture
def config_file(tmp_path: Path) -> Path:
    """Config file pointing the data directory into tmp_path."""
    data_dir = tmp_path / "data"
    config = tmp_path / "config.yaml"
    config.write_text(
        "studio:\n"
        f'  data_dir: "{data_dir.as_posix()}"\n'
        "  default_domain: tech\n"
        "\n"
        "output:\n"
        f'  export_dir: "{(tmp_path / "exports").as_posix()}"\n'
        "\n"
        "ai:\n"
        "  provider: gemini\n",
        encoding="utf-8",
    )
    return config
