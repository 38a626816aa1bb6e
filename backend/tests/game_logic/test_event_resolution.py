"""Tests for market events and their mitigation."""

from __future__ import annotations

from tycoon_backend.game_logic.catalog.events import get_event
from tycoon_backend.game_logic.event_resolution import apply_event, apply_event_to_player
from tycoon_backend.game_logic.phases import GamePhase
from tycoon_backend.game_logic.state import RoundState
from tycoon_backend.shared.enums import EngineerTrait


def test_ddos_hits_under_provisioned_player(make_player) -> None:
    player, mitigated = apply_event_to_player(get_event("ddos-1"), make_player(mau=2000))

    assert not mitigated
    assert player.metrics.mau == 1500
    assert player.metrics.rating == 4
    assert len(player.tech_debt_buffer.tokens) == 1


def test_server_capacity_mitigates_ddos(make_player) -> None:
    player = make_player(mau=2000).adjust_resources(server_capacity=15)

    updated, mitigated = apply_event_to_player(get_event("ddos-1"), player)

    assert mitigated
    assert updated.metrics.mau == 1900
    assert updated.metrics.rating == 5


def test_startup_veteran_always_mitigates(make_player, make_engineer) -> None:
    veteran = make_engineer(trait=EngineerTrait.STARTUP_VETERAN)
    player = make_player(mau=2000, engineers=(veteran,))

    _, mitigated = apply_event_to_player(get_event("ddos-1"), player)

    assert mitigated


def test_viral_moment_crashes_without_headroom(make_player) -> None:
    player, mitigated = apply_event_to_player(get_event("viral-1"), make_player(mau=1000))

    assert not mitigated
    assert player.metrics.mau == 2000
    assert player.metrics.rating == 3


def test_apply_event_moves_to_round_end(make_player, make_state) -> None:
    state = make_state(
        make_player("player-1", 0, mau=2000),
        make_player("player-2", 1, mau=2000),
        phase=GamePhase.EVENT,
        round_state=RoundState(round_number=1, current_event_id="ddos-1"),
    )

    state = apply_event(state)

    assert state.phase is GamePhase.ROUND_END
    assert all(player.metrics.mau == 1500 for player in state.players)
    assert [e.player_id for e in state.journal] == ["player-1", "player-2"]
    assert apply_event(state) is state


def test_no_event_still_ends_round(make_player, make_state) -> None:
    state = make_state(make_player(), phase=GamePhase.EVENT)

    assert apply_event(state).phase is GamePhase.ROUND_END
