"""Repository helpers for working with stored game snapshots."""

from __future__ import annotations

from typing import Any

from sqlalchemy import select
from sqlalchemy.orm import Session  # noqa: TC002

from tycoon_backend.database.schemas import GameSnapshotSchema


class GameSnapshotRepository:
    """Encapsulates persistence operations for :class:`GameSnapshotSchema`."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def get(self, session_id: str) -> GameSnapshotSchema | None:
        """Return the stored snapshot row for *session_id*."""
        return self._session.get(GameSnapshotSchema, session_id)

    def list_session_ids(self) -> tuple[str, ...]:
        stmt = select(GameSnapshotSchema.session_id).order_by(
            GameSnapshotSchema.created_at
        )
        return tuple(self._session.scalars(stmt))

    def upsert(
        self,
        session_id: str,
        *,
        version: int,
        phase: str,
        current_round: int,
        state: dict[str, Any],
    ) -> GameSnapshotSchema:
        """Insert a new row or overwrite the existing one for *session_id*."""
        row = self.get(session_id)
        if row is None:
            row = GameSnapshotSchema(session_id=session_id)
            self._session.add(row)
        row.version = version
        row.phase = phase
        row.current_round = current_round
        row.state = state
        self._session.flush()
        return row


__all__ = ["GameSnapshotRepository"]
