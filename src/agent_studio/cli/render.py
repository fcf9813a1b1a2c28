"""Terminal rendering for sessions, traces and history."""

from __future__ import annotations

from datetime import datetime

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from ..core.agents import AGENTS, DOMAINS, get_domain
from ..models.session import StepStatus, StudioSession, TraceEntry, TraceLevel

console = Console()

TRACE_STYLES = {
    TraceLevel.INFO: ("cyan", "INFO"),
    TraceLevel.AGENT: ("blue", "AGENT"),
    TraceLevel.SUCCESS: ("green", "OK"),
    TraceLevel.WARNING: ("yellow", "WARN"),
    TraceLevel.ERROR: ("red", "FAILED"),
}

STATUS_STYLES = {
    StepStatus.PENDING: "dim",
    StepStatus.ACTIVE: "cyan",
    StepStatus.COMPLETED: "green",
    StepStatus.ERROR: "red",
}


def render_trace(entry: TraceEntry) -> None:
    color, label = TRACE_STYLES.get(entry.level, ("white", "INFO"))
    console.print(f"  [{color}]{label}[/{color}] {escape(entry.message)}")


def render_session(session: StudioSession) -> None:
    """Print one card per agent, then the final presentation."""
    console.print()
    domain = get_domain(session.domain)
    label = f"{domain.icon} {domain.label}" if domain else session.domain
    console.print(f"  [bold]Project Brief[/bold] [dim]({escape(label)})[/dim]")
    console.print(f'  [italic]"{escape(session.prompt)}"[/italic]')
    console.print()

    for agent, step in zip(AGENTS, session.steps):
        status_style = STATUS_STYLES.get(step.status, "white")
        title = (
            f"{agent.icon} [{agent.color}]{agent.name}[/{agent.color}] "
            f"[dim]{agent.role.value}[/dim] "
            f"[{status_style}]{step.status.value}[/{status_style}]"
        )
        body = escape(step.output) if step.output else f"[dim]{agent.description}[/dim]"
        console.print(Panel(body, title=title, title_align="left", border_style=agent.color))

    if session.final_output:
        console.print(
            Panel(escape(session.final_output), title="Final Presentation", border_style="white")
        )
    console.print()


def render_history(history: list[StudioSession]) -> None:
    if not history:
        console.print("  [dim]No saved sessions[/dim]")
        return

    table = Table(title="Saved Sessions")
    table.add_column("#", justify="right")
    table.add_column("Id")
    table.add_column("Domain")
    table.add_column("Prompt")
    table.add_column("Completed")
    for idx, session in enumerate(history):
        last = max(step.timestamp for step in session.steps)
        completed = datetime.fromtimestamp(last / 1000).strftime("%Y-%m-%d %H:%M")
        prompt = session.prompt if len(session.prompt) <= 60 else session.prompt[:57] + "..."
        table.add_row(
            str(idx), escape(session.id), escape(session.domain), escape(prompt), completed
        )
    console.print(table)


def render_agents() -> None:
    table = Table(title="Agent Team")
    table.add_column("Agent")
    table.add_column("Role")
    table.add_column("Description")
    for agent in AGENTS:
        table.add_row(
            f"{agent.icon} [{agent.color}]{agent.name}[/{agent.color}]",
            agent.role.value,
            agent.description,
        )
    console.print(table)


def render_domains() -> None:
    table = Table(title="Domains")
    table.add_column("Id")
    table.add_column("Label")
    for domain in DOMAINS:
        table.add_row(domain.id, f"{domain.icon} {domain.label}")
    console.print(table)
