"""Agent data models."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict


class AgentRole(str, Enum):
    IDEA = "IDEA"
    CRITIC = "CRITIC"
    REFINER = "REFINER"
    PRESENTER = "PRESENTER"


class AgentDefinition(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    role: AgentRole
    name: str
    description: str
    color: str = "white"
    icon: str = ""


class RoleInstruction(BaseModel):
    """Fixed system instruction for one role."""

    model_config = ConfigDict(frozen=True)

    role: AgentRole
    system_prompt: str
    word_limit: int = 0


class Domain(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    label: str
    icon: str = ""
