"""Tests for the session orchestrator."""

from __future__ import annotations

import pytest

from tycoon_backend.game_logic.commands import SelectLeader, SetPlayerName
from tycoon_backend.game_logic.configuration import LobbyOverrides
from tycoon_backend.game_logic.orchestration import (
    SessionAlreadyExistsError,
    SessionNotInitializedError,
    SessionOrchestrator,
)
from tycoon_backend.game_logic.persistence import (
    InMemoryGameLogStore,
    InMemoryGameStateStore,
)
from tycoon_backend.game_logic.phases import GamePhase


@pytest.fixture
def orchestrator() -> SessionOrchestrator:
    return SessionOrchestrator(InMemoryGameStateStore(), InMemoryGameLogStore())


def test_create_session_persists_initial_snapshot(orchestrator) -> None:
    snapshot = orchestrator.create_session(
        "alpha", 3, overrides=LobbyOverrides(total_quarters=4), seed=8
    )

    assert snapshot.version == 0
    assert snapshot.state.configuration.total_quarters == 4
    assert len(snapshot.state.players) == 3
    assert orchestrator.load_session("alpha") == snapshot

    logs = orchestrator.fetch_logs("alpha")
    assert [log.command for log in logs] == ["create-session"]
    assert logs[0].events[0].event_type == "game-created"


def test_duplicate_session_is_rejected(orchestrator) -> None:
    orchestrator.create_session("alpha", 2, seed=1)

    with pytest.raises(SessionAlreadyExistsError):
        orchestrator.create_session("alpha", 2, seed=1)


def test_unknown_session_raises(orchestrator) -> None:
    with pytest.raises(SessionNotInitializedError):
        orchestrator.load_session("missing")
    with pytest.raises(SessionNotInitializedError):
        orchestrator.execute("missing", SetPlayerName(player_id="player-1", name="A"))
    with pytest.raises(SessionNotInitializedError):
        orchestrator.fetch_logs("missing")


def test_accepted_command_bumps_version_and_logs(orchestrator) -> None:
    orchestrator.create_session("alpha", 2, seed=1)

    outcome = orchestrator.execute(
        "alpha", SetPlayerName(player_id="player-1", name="Ada")
    )

    assert outcome.accepted
    snapshot = orchestrator.load_session("alpha")
    assert snapshot.version == 1
    assert snapshot.state.player("player-1").name == "Ada"
    last = orchestrator.fetch_logs("alpha")[-1]
    assert last.command == "set-player-name"
    assert last.phase == GamePhase.LEADER_DRAFT.value
    assert [event.event_type for event in last.events] == ["player-renamed"]


def test_rejected_command_is_not_saved(orchestrator) -> None:
    orchestrator.create_session("alpha", 2, seed=1)

    outcome = orchestrator.execute(
        "alpha", SetPlayerName(player_id="player-1", name="Player 1")
    )

    assert not outcome.accepted
    assert orchestrator.load_session("alpha").version == 0
    assert len(orchestrator.fetch_logs("alpha")) == 1


def test_last_leader_choice_opens_funding(orchestrator) -> None:
    state = orchestrator.create_session("alpha", 2, seed=1).state
    first, second = (
        (player_id, hand[0]) for player_id, hand in state.dealt_leader_cards.items()
    )
    orchestrator.execute("alpha", SelectLeader(player_id=first[0], persona_id=first[1]))

    orchestrator.execute(
        "alpha", SelectLeader(player_id=second[0], persona_id=second[1])
    )

    assert orchestrator.load_session("alpha").state.phase is GamePhase.FUNDING_SELECTION
    assert orchestrator.fetch_logs("alpha")[-1].command == "select-leader"


def test_service_for_reads_stored_state(orchestrator) -> None:
    orchestrator.create_session("alpha", 2, seed=1)

    service = orchestrator.service_for("alpha")

    assert service.state == orchestrator.load_session("alpha").state
