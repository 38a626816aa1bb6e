"""High-level orchestration helpers connecting the rules engine to callers.

This module exposes a thin façade that the API layer uses to manage game
sessions. It loads the stored snapshot, runs one command through a
:class:`GameStateService`, persists the result and records the journal
entries the command produced as :class:`PhaseLog` items.
"""

from __future__ import annotations

from itertools import groupby
from threading import Lock

from tycoon_backend.game_logic.commands import GameCommand  # noqa: TC001
from tycoon_backend.game_logic.configuration import (
    LobbyOverrides,
    build_lobby_configuration,
)
from tycoon_backend.game_logic.persistence import (
    GameLogStore,
    GameStateSnapshot,
    GameStateStore,
)
from tycoon_backend.game_logic.service import CommandOutcome, GameStateService
from tycoon_backend.shared.events import LoggedEvent, PhaseLog


class SessionNotInitializedError(RuntimeError):
    """Raised when orchestration is requested for an unknown session."""


class SessionAlreadyExistsError(RuntimeError):
    """Raised when a session id is reused."""


class SessionOrchestrator:
    """Coordinate game sessions for the API layer.

    Every command runs as load, apply, save under a single lock, so two
    callers racing for the same slot or card can never both succeed. Rejected
    commands are reported back but neither bump the snapshot version nor write
    a log entry.
    """

    def __init__(self, state_store: GameStateStore, log_store: GameLogStore) -> None:
        self._state_store = state_store
        self._log_store = log_store
        self._lock = Lock()

    def create_session(
        self,
        session_id: str,
        player_count: int,
        *,
        overrides: LobbyOverrides | None = None,
        seed: int | None = None,
    ) -> GameStateSnapshot:
        """Initialise a new game for *session_id* and persist it."""
        with self._lock:
            if self._state_store.load_snapshot(session_id) is not None:
                msg = f"Session '{session_id}' already exists."
                raise SessionAlreadyExistsError(msg)
            configuration = build_lobby_configuration(overrides)
            service = GameStateService.new_game(
                player_count, configuration=configuration, seed=seed
            )
            snapshot = GameStateSnapshot(state=service.state)
            self._state_store.save_snapshot(session_id, snapshot)
            self._append_logs(session_id, "create-session", service.state.journal)
            return snapshot

    def load_session(self, session_id: str) -> GameStateSnapshot:
        return self._require_snapshot(session_id)

    def service_for(self, session_id: str) -> GameStateService:
        """Return a read-only-by-convention service over the stored state."""
        return GameStateService(self._require_snapshot(session_id).state)

    def execute(self, session_id: str, command: GameCommand) -> CommandOutcome:
        """Apply *command* to *session_id* and persist the outcome if accepted."""
        with self._lock:
            snapshot = self._require_snapshot(session_id)
            service = GameStateService(snapshot.state)
            outcome = service.execute(command)
            if not outcome.accepted:
                return outcome
            self._state_store.save_snapshot(
                session_id,
                GameStateSnapshot(version=snapshot.version + 1, state=outcome.state),
            )
            self._append_logs(session_id, command.kind, outcome.events)
            return outcome

    def fetch_logs(self, session_id: str) -> tuple[PhaseLog, ...]:
        self._require_snapshot(session_id)
        return self._log_store.fetch_logs(session_id)

    def _append_logs(
        self, session_id: str, command: str, events: tuple[LoggedEvent, ...]
    ) -> None:
        # One command may cross a round or phase boundary (end-round, lock-plan).
        for (round_index, phase), group in groupby(
            events, key=lambda event: (event.round_index, event.phase)
        ):
            log = PhaseLog(
                phase=phase,
                round_index=round_index,
                command=command,
                events=tuple(group),
            )
            self._log_store.append_log(session_id, log)

    def _require_snapshot(self, session_id: str) -> GameStateSnapshot:
        snapshot = self._state_store.load_snapshot(session_id)
        if snapshot is None:
            msg = f"Session '{session_id}' has not been initialized."
            raise SessionNotInitializedError(msg)
        return snapshot


__all__ = [
    "SessionAlreadyExistsError",
    "SessionNotInitializedError",
    "SessionOrchestrator",
]
