"""Game session service exposed to the API layer."""

from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import uuid4

from tycoon_backend.database import DatabaseGameStateStore
from tycoon_backend.database.dependencies import build_database_service
from tycoon_backend.game_logic import (
    GameStateService,
    GameStateSnapshot,
    InMemoryGameLogStore,
    InMemoryGameStateStore,
    SessionOrchestrator,
)

if TYPE_CHECKING:
    from tycoon_backend.game_logic import CommandOutcome, LobbyOverrides
    from tycoon_backend.game_logic.commands import GameCommand
    from tycoon_backend.game_logic.persistence import GameStateStore
    from tycoon_backend.settings import BackendSettings
    from tycoon_backend.shared import PhaseLog


class GameSessionService:
    """Create sessions, run commands and answer queries for the routers."""

    def __init__(self, *, orchestrator: SessionOrchestrator) -> None:
        self._orchestrator = orchestrator

    @classmethod
    def create_default(cls, settings: BackendSettings) -> GameSessionService:
        """Return a service backed by the store selected in *settings*."""
        state_store: GameStateStore
        if settings.session_store == "database":
            state_store = DatabaseGameStateStore(
                build_database_service(settings.database_url)
            )
        else:
            state_store = InMemoryGameStateStore()
        orchestrator = SessionOrchestrator(state_store, InMemoryGameLogStore())
        return cls(orchestrator=orchestrator)

    def create_session(
        self,
        player_count: int,
        *,
        session_id: str | None = None,
        overrides: LobbyOverrides | None = None,
        seed: int | None = None,
    ) -> tuple[str, GameStateSnapshot]:
        session_id = session_id or uuid4().hex
        snapshot = self._orchestrator.create_session(
            session_id, player_count, overrides=overrides, seed=seed
        )
        return session_id, snapshot

    def get_snapshot(self, session_id: str) -> GameStateSnapshot:
        return self._orchestrator.load_session(session_id)

    def execute(self, session_id: str, command: GameCommand) -> CommandOutcome:
        return self._orchestrator.execute(session_id, command)

    def get_logs(self, session_id: str) -> tuple[PhaseLog, ...]:
        return self._orchestrator.fetch_logs(session_id)

    def queries(self, session_id: str) -> GameStateService:
        """Return a service over the stored state for read-only queries."""
        return self._orchestrator.service_for(session_id)


__all__ = ["GameSessionService"]
