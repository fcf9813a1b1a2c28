"""Session exports: plain text, JSON, and Markdown.

Only sessions with a completed PRESENTER step can be exported.
"""

from __future__ import annotations

import json
import re
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from ..core.agents import AGENTS_BY_ROLE
from ..core.errors import ExportError
from ..models.session import StudioSession

EXPORT_FORMATS = ("txt", "json", "md")

# No path separators or dot segments in file names
_SAFE_NAME_PART = re.compile(r"[A-Za-z0-9_-]+")


def _require_final(session: StudioSession) -> str:
    final = session.final_output
    if not final:
        raise ExportError(
            f"Session {session.id} has no final presentation to export"
        )
    return final


def export_text(session: StudioSession) -> str:
    return _require_final(session)


def build_export_data(
    session: StudioSession, completed_at: Optional[datetime] = None
) -> dict:
    """Build the JSON export structure."""
    final = _require_final(session)
    completed_at = completed_at or datetime.now(timezone.utc)
    return {
        "session": {
            "id": session.id,
            "prompt": session.prompt,
            "domain": session.domain,
            "completedAt": completed_at.isoformat().replace("+00:00", "Z"),
        },
        "agents": [
            {
                "agent": AGENTS_BY_ROLE[step.role].name,
                "role": step.role.value,
                "output": step.output,
            }
            for step in session.steps
        ],
        "finalOutput": final,
    }


def export_json(session: StudioSession, completed_at: Optional[datetime] = None) -> str:
    return json.dumps(
        build_export_data(session, completed_at), indent=2, ensure_ascii=False
    )


def export_markdown(session: StudioSession) -> str:
    final = _require_final(session)

    lines: list[str] = []
    lines.append("# Multi-Agent Creative Studio Output")
    lines.append("")
    lines.append(f"**Domain:** {session.domain}")
    lines.append(f"**Prompt:** {session.prompt}")
    lines.append("")
    lines.append("## Final Presentation")
    lines.append("")
    lines.append(final)
    lines.append("")
    lines.append("## Agent Contributions")
    lines.append("")
    for step in session.steps:
        agent = AGENTS_BY_ROLE[step.role]
        lines.append(f"### {agent.name} ({step.role.value})")
        lines.append("")
        lines.append(step.output)
        lines.append("")

    return "\n".join(lines)


def export_filename(session: StudioSession, fmt: str) -> str:
    """File name for ``session`` in ``fmt``; raises ExportError for unsafe parts."""
    if fmt == "json":
        part, name = session.id, f"agent-studio-session-{session.id}.json"
    else:
        part, name = session.domain, f"agent-studio-output-{session.domain}.{fmt}"
    if not _SAFE_NAME_PART.fullmatch(part):
        raise ExportError(f"Cannot build a file name from {part!r}")
    return name


def write_export(session: StudioSession, fmt: str, output_dir: Path) -> Path:
    """Render ``session`` in ``fmt`` and write it under ``output_dir``."""
    renderers = {
        "txt": export_text,
        "json": export_json,
        "md": export_markdown,
    }
    if fmt not in renderers:
        raise ExportError(f"Unknown export format: {fmt}")

    content = renderers[fmt](session)
    filename = export_filename(session, fmt)
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    output_path = output_dir / filename
    output_path.write_text(content, encoding="utf-8")
    return output_path
