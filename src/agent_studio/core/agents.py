"""Agent definitions, role instructions, domains, and mock outputs.

Defines the 4 studio agents and their properties. The order of ``AGENTS`` is
the order of the steps in every session.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Mapping, Optional

from ..models.agent import AgentDefinition, AgentRole, Domain, RoleInstruction

AGENTS: tuple[AgentDefinition, ...] = (
    AgentDefinition(
        id="agent-idea",
        role=AgentRole.IDEA,
        name="Spark",
        description="Generates creative, high-signal initial concepts.",
        color="blue",
        icon="💡",
    ),
    AgentDefinition(
        id="agent-critic",
        role=AgentRole.CRITIC,
        name="Sentinel",
        description="Analyzes feasibility, risks, and missing metrics.",
        color="red",
        icon="🔍",
    ),
    AgentDefinition(
        id="agent-refiner",
        role=AgentRole.REFINER,
        name="Alchemist",
        description="Synthesizes feedback to improve the original vision.",
        color="green",
        icon="⚡",
    ),
    AgentDefinition(
        id="agent-presenter",
        role=AgentRole.PRESENTER,
        name="Oracle",
        description="Polishes the final output into a professional brief.",
        color="magenta",
        icon="📄",
    ),
)

IDEA_INDEX, CRITIC_INDEX, REFINER_INDEX, PRESENTER_INDEX = range(len(AGENTS))

AGENTS_BY_ROLE: Mapping[AgentRole, AgentDefinition] = MappingProxyType(
    {agent.role: agent for agent in AGENTS}
)

ROLE_INSTRUCTIONS: Mapping[AgentRole, RoleInstruction] = MappingProxyType(
    {
        AgentRole.IDEA: RoleInstruction(
            role=AgentRole.IDEA,
            system_prompt="Generate 1 innovative concept. 50 words max.",
            word_limit=50,
        ),
        AgentRole.CRITIC: RoleInstruction(
            role=AgentRole.CRITIC,
            system_prompt="List 3 key risks/issues in bullet points.",
        ),
        AgentRole.REFINER: RoleInstruction(
            role=AgentRole.REFINER,
            system_prompt="Improve concept with feedback. 75 words max.",
            word_limit=75,
        ),
        AgentRole.PRESENTER: RoleInstruction(
            role=AgentRole.PRESENTER,
            system_prompt=(
                "Write executive summary: Overview, Strategy, Impact, Next Steps. "
                "100 words max."
            ),
            word_limit=100,
        ),
    }
)

DOMAINS: tuple[Domain, ...] = (
    Domain(id="esg", label="ESG Sustainability", icon="🌱"),
    Domain(id="agri", label="Regenerative Agriculture", icon="🚜"),
    Domain(id="startup", label="Startup Ideation", icon="🚀"),
    Domain(id="creative", label="Creative Content", icon="🎨"),
    Domain(id="tech", label="Technology Innovation", icon="💻"),
    Domain(id="health", label="Healthcare Solutions", icon="🏥"),
    Domain(id="finance", label="Financial Services", icon="💰"),
    Domain(id="education", label="Education Reform", icon="📚"),
)

DOMAIN_IDS = [d.id for d in DOMAINS]
DEFAULT_DOMAIN = DOMAINS[0].id


def get_domain(domain_id: str) -> Optional[Domain]:
    for domain in DOMAINS:
        if domain.id == domain_id:
            return domain
    return None


# ---------------------------------------------------------------------------
# Mock outputs for DryRun mode
# ---------------------------------------------------------------------------

MOCK_OUTPUTS: Mapping[AgentRole, str] = MappingProxyType(
    {
        AgentRole.IDEA: (
            "Modular community hub: a shared, solar-powered space that bundles "
            "services people already travel for, run by a local cooperative and "
            "financed through pay-as-you-go memberships."
        ),
        AgentRole.CRITIC: (
            "- Upfront capital cost may exceed what a cooperative can raise.\n"
            "- Maintenance skills are scarce outside urban centres.\n"
            "- No baseline metrics to prove impact to funders."
        ),
        AgentRole.REFINER: (
            "Phased community hub: start with one leased container unit, train "
            "two local technicians per site, and track usage and uptime from day "
            "one so the cooperative can unlock blended-finance grants for "
            "expansion once impact is demonstrated."
        ),
        AgentRole.PRESENTER: (
            "Overview: A phased, cooperative-run community hub.\n"
            "Strategy: Pilot one unit, train local technicians, measure from day one.\n"
            "Impact: Reliable local services with evidence for funders.\n"
            "Next Steps: Select pilot site, secure seed grant, recruit trainees."
        ),
    }
)
