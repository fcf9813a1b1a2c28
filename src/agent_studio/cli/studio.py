"""Agent Studio (studio) - four-agent creative team in the terminal.

Spark drafts an idea while Sentinel lists risks, Alchemist refines the concept
and Oracle writes the executive summary.
"""

from __future__ import annotations

import asyncio
from pathlib import Path

import click

from ..core.agents import DOMAIN_IDS
from ..formatters.export import EXPORT_FORMATS
from ..providers.base import PROVIDER_NAMES


def _load(ctx: click.Context, cli_overrides: dict | None = None) -> dict:
    from ..core.config import get_effective_config

    return get_effective_config(ctx.obj.get("config_path"), cli_overrides)


def _open_store(config: dict):
    from ..core.config import get_history_path
    from ..core.history import SessionStore

    store = SessionStore(get_history_path(config))
    store.load_history()
    return store


@click.group()
@click.option("--config", "config_path", type=click.Path(dir_okay=False), help="Config file path")
@click.pass_context
def studio_cli(ctx: click.Context, config_path: str | None) -> None:
    """Agent Studio - simulate a small team of AI agents working on a brief."""
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = Path(config_path) if config_path else None


@studio_cli.command()
@click.argument("prompt")
@click.option("--domain", "-d", type=click.Choice(DOMAIN_IDS), help="Domain tag")
@click.option("--provider", "ai_provider", type=click.Choice(list(PROVIDER_NAMES)))
@click.option("--model", "ai_model", type=str, help="Model override")
@click.option("--endpoint", "ai_endpoint", type=str, help="Endpoint override")
@click.option("--dry-run", is_flag=True, help="Use canned agent outputs (no API calls)")
@click.option("--export", "-e", "exports", multiple=True, type=click.Choice(list(EXPORT_FORMATS)))
@click.option("--output-dir", "-o", type=click.Path(file_okay=False), help="Export directory")
@click.pass_context
def run(
    ctx: click.Context,
    prompt: str,
    domain: str | None,
    ai_provider: str | None,
    ai_model: str | None,
    ai_endpoint: str | None,
    dry_run: bool,
    exports: tuple[str, ...],
    output_dir: str | None,
) -> None:
    """Run the four-agent pipeline on PROMPT."""
    from rich.markup import escape

    from ..core.agents import DEFAULT_DOMAIN, get_domain
    from ..core.config import get_step_timeout
    from ..core.errors import ConfigurationError, PipelineError, StudioError
    from ..core.executor import AgentStepExecutor
    from ..core.orchestrator import PipelineOrchestrator
    from ..formatters.export import write_export
    from ..providers.base import get_ai_provider
    from .render import console, render_session, render_trace

    if not prompt.strip():
        console.print("  [red]ERROR[/red] Goal prompt must not be empty")
        ctx.exit(11)
        return

    config = _load(ctx)
    domain = domain or config.get("studio", {}).get("default_domain") or DEFAULT_DOMAIN
    if get_domain(domain) is None:
        console.print(
            f"  [red]ERROR[/red] Unknown default_domain in config: {escape(str(domain))}"
            f" (choose from {', '.join(DOMAIN_IDS)})"
        )
        ctx.exit(13)
        return

    provider = None
    if not dry_run:
        try:
            provider = get_ai_provider(
                config,
                provider_override=ai_provider,
                model_override=ai_model,
                endpoint_override=ai_endpoint,
            )
        except ConfigurationError as e:
            console.print(f"  [red]ERROR[/red] Failed to initialize AI provider: {e}")
            ctx.exit(13)
            return
        console.print(f"  [green]OK[/green] Provider: {provider.name} ({provider.model})")
    else:
        console.print("  Mode: [yellow]DRY RUN[/yellow]")

    store = _open_store(config)
    executor = AgentStepExecutor(provider, step_timeout=get_step_timeout(config), dry_run=dry_run)
    orchestrator = PipelineOrchestrator(executor, store=store, on_trace=render_trace)

    try:
        session = asyncio.run(orchestrator.run(prompt, domain))
    except PipelineError as e:
        if e.session is not None:
            render_session(e.session)
        ctx.exit(1)
        return

    render_session(session)
    console.print(f"  Saved as session [bold]{session.id}[/bold]")

    export_dir = Path(output_dir or config.get("output", {}).get("export_dir") or ".")
    for fmt in exports:
        try:
            path = write_export(session, fmt, export_dir)
        except StudioError as e:
            console.print(f"  [red]ERROR[/red] Export {fmt} failed: {e}")
            continue
        console.print(f"  [green]OK[/green] Exported {path}")


@studio_cli.command()
@click.pass_context
def history(ctx: click.Context) -> None:
    """List saved sessions, most recent first."""
    from .render import render_history

    store = _open_store(_load(ctx))
    render_history(store.history)


@studio_cli.command("load-latest")
@click.pass_context
def load_latest(ctx: click.Context) -> None:
    """Show the most recent saved session."""
    from .render import console, render_session

    store = _open_store(_load(ctx))
    session = store.latest()
    if session is None:
        console.print("  [dim]No saved sessions[/dim]")
        return
    render_session(session)


@studio_cli.command()
@click.argument("session_id", required=False)
@click.option("--format", "-f", "fmt", type=click.Choice(list(EXPORT_FORMATS)), default="md")
@click.option("--output-dir", "-o", type=click.Path(file_okay=False), help="Export directory")
@click.pass_context
def export(ctx: click.Context, session_id: str | None, fmt: str, output_dir: str | None) -> None:
    """Export a saved session (default: the latest)."""
    from ..core.errors import ExportError
    from ..formatters.export import write_export
    from .render import console

    config = _load(ctx)
    store = _open_store(config)
    session = store.get(session_id) if session_id else store.latest()
    if session is None:
        console.print(f"  [red]ERROR[/red] Session not found: {session_id or 'latest'}")
        ctx.exit(12)
        return

    export_dir = Path(output_dir or config.get("output", {}).get("export_dir") or ".")
    try:
        path = write_export(session, fmt, export_dir)
    except ExportError as e:
        console.print(f"  [red]ERROR[/red] {e}")
        ctx.exit(12)
        return
    console.print(f"  [green]OK[/green] Exported {path}")


@studio_cli.command()
def agents() -> None:
    """List the agent team."""
    from .render import render_agents

    render_agents()


@studio_cli.command()
def domains() -> None:
    """List the available domain tags."""
    from .render import render_domains

    render_domains()


@studio_cli.command()
@click.pass_context
def init(ctx: click.Context) -> None:
    """Write a starter config file."""
    from ..core.config import initialize_config
    from .render import console

    path, created = initialize_config(ctx.obj.get("config_path"))
    if created:
        console.print(f"  [green]Initialized[/green] {path}")
    else:
        console.print(f"  [dim]Config already exists:[/dim] {path}")


def main() -> None:
    studio_cli(obj={})


if __name__ == "__main__":
    main()
