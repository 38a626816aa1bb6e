"""Database-backed implementation of the game state store protocol."""

from __future__ import annotations

from tycoon_backend.database.repositories import GameSnapshotRepository
from tycoon_backend.database.service import DatabaseService  # noqa: TC001
from tycoon_backend.game_logic.persistence import GameStateSnapshot


class DatabaseGameStateStore:
    """Persist :class:`GameStateSnapshot` objects as JSON rows.

    Each call runs in its own transaction; the orchestrator serialises
    load-apply-save sequences on top of that.
    """

    def __init__(self, database: DatabaseService) -> None:
        self._database = database

    def save_snapshot(self, session_id: str, snapshot: GameStateSnapshot) -> None:
        state = snapshot.state
        with self._database.session() as session:
            GameSnapshotRepository(session).upsert(
                session_id,
                version=snapshot.version,
                phase=state.phase.value,
                current_round=state.current_round,
                state=state.model_dump(mode="json"),
            )

    def load_snapshot(self, session_id: str) -> GameStateSnapshot | None:
        with self._database.session() as session:
            row = GameSnapshotRepository(session).get(session_id)
            if row is None:
                return None
            return GameStateSnapshot.model_validate(
                {"version": row.version, "state": row.state}
            )


__all__ = ["DatabaseGameStateStore"]
