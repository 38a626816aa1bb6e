"""Tests for action seat occupancy."""

from __future__ import annotations

from tycoon_backend.game_logic.slots import claim_seat, occupancy, release_seat
from tycoon_backend.game_logic.state import RoundState
from tycoon_backend.shared.enums import ActionType


def test_claim_respects_seat_limit(make_player, make_state) -> None:
    first = make_player("player-1", 0)
    second = make_player("player-2", 1)
    state = make_state(first, second, round_state=RoundState(round_number=1))

    state = state.model_copy(
        update={"round_state": claim_seat(state, first, ActionType.MARKETING)}
    )
    blocked = claim_seat(state, second, ActionType.MARKETING)

    assert blocked is state.round_state
    assert occupancy(state, ActionType.MARKETING).players == ("player-1",)


def test_repeated_claim_changes_nothing(make_player, make_state) -> None:
    player = make_player()
    state = make_state(player, round_state=RoundState(round_number=1))
    state = state.model_copy(
        update={"round_state": claim_seat(state, player, ActionType.MARKETING)}
    )

    assert claim_seat(state, player, ActionType.MARKETING) is state.round_state


def test_unlimited_action_seats_everyone(make_player, make_state) -> None:
    players = tuple(make_player(f"player-{seat + 1}", seat) for seat in range(3))
    state = make_state(*players, round_state=RoundState(round_number=1))

    for player in players:
        state = state.model_copy(
            update={"round_state": claim_seat(state, player, ActionType.OPTIMIZE_CODE)}
        )

    assert occupancy(state, ActionType.OPTIMIZE_CODE).current == 3
    assert occupancy(state, ActionType.OPTIMIZE_CODE).maximum is None


def test_release_frees_the_seat(make_player, make_state) -> None:
    player = make_player()
    state = make_state(player, round_state=RoundState(round_number=1))
    round_state = claim_seat(state, player, ActionType.MARKETING)

    released = release_seat(round_state, player, ActionType.MARKETING, "eng-1")

    assert released.occupants(ActionType.MARKETING) == ()
