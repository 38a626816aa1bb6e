"""Persistence abstractions for game state and command logs.

The orchestration layer only talks to these protocols; the API layer picks a
concrete adapter (in-memory or database-backed) at startup.
"""

from __future__ import annotations

from typing import Protocol

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict

from tycoon_backend.game_logic.state import GameState  # noqa: TC001
from tycoon_backend.shared import PhaseLog  # noqa: TC001


class GameStateSnapshot(BaseModel):
    """Immutable snapshot representing the state of a running game session."""

    model_config = ConfigDict(frozen=True)

    version: int = Field(default=0, ge=0)
    state: GameState


class GameStateStore(Protocol):
    """Protocol describing how game state snapshots are persisted."""

    def save_snapshot(self, session_id: str, snapshot: GameStateSnapshot) -> None:
        """Persist *snapshot* for *session_id*, replacing any previous value."""

    def load_snapshot(self, session_id: str) -> GameStateSnapshot | None:
        """Return the latest stored snapshot for *session_id* or ``None``."""


class GameLogStore(Protocol):
    """Protocol describing how per-command logs are persisted."""

    def append_log(self, session_id: str, log: PhaseLog) -> None:
        """Persist *log* alongside existing logs for *session_id*."""

    def fetch_logs(self, session_id: str) -> tuple[PhaseLog, ...]:
        """Return all stored logs for *session_id* ordered by execution."""


class InMemoryGameStateStore:
    """Trivial in-memory implementation of :class:`GameStateStore`."""

    def __init__(self) -> None:
        self._snapshots: dict[str, GameStateSnapshot] = {}

    def save_snapshot(self, session_id: str, snapshot: GameStateSnapshot) -> None:
        """Store *snapshot* keyed by *session_id*."""
        self._snapshots[session_id] = snapshot

    def load_snapshot(self, session_id: str) -> GameStateSnapshot | None:
        """Return the stored snapshot for *session_id* if available."""
        return self._snapshots.get(session_id)


class InMemoryGameLogStore:
    """Trivial in-memory implementation of :class:`GameLogStore`."""

    def __init__(self) -> None:
        self._logs: dict[str, list[PhaseLog]] = {}

    def append_log(self, session_id: str, log: PhaseLog) -> None:
        self._logs.setdefault(session_id, []).append(log)

    def fetch_logs(self, session_id: str) -> tuple[PhaseLog, ...]:
        return tuple(self._logs.get(session_id, ()))


__all__ = [
    "GameLogStore",
    "GameStateSnapshot",
    "GameStateStore",
    "InMemoryGameLogStore",
    "InMemoryGameStateStore",
]
