"""Session store: the live session plus a bounded history of completed runs.

History file: <data_dir>/multi-agent-studio-sessions.json
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

from pydantic import TypeAdapter

from ..models.session import StudioSession
from .agents import AGENTS

STORAGE_KEY = "multi-agent-studio-sessions"
HISTORY_LIMIT = 10

_HISTORY_ADAPTER = TypeAdapter(list[StudioSession])


def history_path_for(data_dir: Path) -> Path:
    return Path(data_dir) / f"{STORAGE_KEY}.json"


def is_admissible(session: StudioSession) -> bool:
    """True for a finished session with one completed step per agent, in order."""
    if len(session.steps) != len(AGENTS) or not session.is_complete:
        return False
    return all(
        step.role == agent.role and step.agent_id == agent.id
        for agent, step in zip(AGENTS, session.steps)
    )


def _normalize(sessions: list[StudioSession], limit: int) -> list[StudioSession]:
    """Keep admissible sessions only, first occurrence of each id, capped."""
    seen: set[str] = set()
    result: list[StudioSession] = []
    for session in sessions:
        if not is_admissible(session) or session.id in seen:
            continue
        seen.add(session.id)
        result.append(session)
    return result[:limit]


class SessionStore:
    """Holds ``current`` and the most-recent-first history.

    Without a ``path`` the history lives in memory only. With one, the file
    is read on first use, so recording never drops sessions saved earlier.
    """

    def __init__(self, path: Optional[Path] = None, limit: int = HISTORY_LIMIT):
        self.path = Path(path) if path else None
        self.limit = limit
        self.current: Optional[StudioSession] = None
        self.history: list[StudioSession] = []
        self._loaded = self.path is None

    def load_history(self) -> list[StudioSession]:
        """Read persisted history. Missing or unreadable data yields []."""
        self.history = []
        self._loaded = True
        if self.path is None or not self.path.exists():
            return []
        try:
            content = self.path.read_text(encoding="utf-8-sig")
            sessions = _HISTORY_ADAPTER.validate_json(content)
        except (OSError, ValueError):
            return []
        self.history = _normalize(sessions, self.limit)
        return list(self.history)

    def _ensure_loaded(self) -> None:
        if not self._loaded:
            self.load_history()

    def persist(self, history: list[StudioSession]) -> Optional[Path]:
        """Replace stored history with ``history``.

        Raises OSError when the file cannot be written; ``self.history`` is
        only replaced after a successful write.
        """
        history = list(history)
        if self.path is None:
            self.history = history
            return None

        self.path.parent.mkdir(parents=True, exist_ok=True)
        payload = _HISTORY_ADAPTER.dump_json(history, by_alias=True, indent=2)
        tmp_path = self.path.with_name(self.path.name + ".tmp")
        try:
            tmp_path.write_bytes(payload)
            os.replace(tmp_path, self.path)
        except OSError:
            tmp_path.unlink(missing_ok=True)
            raise
        self.history = history
        self._loaded = True
        return self.path

    def record_if_complete(self, session: StudioSession) -> bool:
        """Admit a fully completed session at the most-recent slot.

        Returns False (and changes nothing) unless every agent's step is
        completed, in agent order.
        """
        if not is_admissible(session):
            return False
        self._ensure_loaded()
        updated = [session] + [s for s in self.history if s.id != session.id]
        self.persist(updated[: self.limit])
        return True

    def latest(self) -> Optional[StudioSession]:
        self._ensure_loaded()
        return self.history[0] if self.history else None

    def get(self, session_id: str) -> Optional[StudioSession]:
        self._ensure_loaded()
        for session in self.history:
            if session.id == session_id:
                return session
        return None
