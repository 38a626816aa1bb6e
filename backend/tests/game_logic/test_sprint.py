"""Tests for the push-your-luck optimize sprint."""

from __future__ import annotations

import pytest

from tycoon_backend.game_logic.phases import GamePhase
from tycoon_backend.game_logic.sprint import (
    BAG_COMPOSITION,
    create_sprint_bag,
    draw_sprint_token,
    end_sprint,
    max_draws,
    stop_sprint,
)
from tycoon_backend.game_logic.state import (
    BACKEND_REVERT_POWER,
    RoundState,
    SprintPlayerState,
    SprintState,
    SprintToken,
    SprintTokenKind,
)
from tycoon_backend.shared.rng import DeterministicRandomService

CLEAN = SprintToken(id="clean", kind=SprintTokenKind.CLEAN_CODE, value=1)
GREAT = SprintToken(id="great", kind=SprintTokenKind.GREAT_CODE, value=2)
BUG = SprintToken(id="bug", kind=SprintTokenKind.BUG)
CRITICAL = SprintToken(id="critical", kind=SprintTokenKind.CRITICAL_BUG)


@pytest.fixture
def sprint_state(make_player, make_state):
    """A sprint whose bag is drawn from the end."""

    def factory(bag, *, first_draws=5, second_draws=1, revert=False, tech_debt=4):
        players = (
            make_player("player-1", 0, tech_debt=tech_debt),
            make_player("player-2", 1, tech_debt=tech_debt),
        )
        sprint = SprintState(
            bag=tuple(bag),
            players=(
                SprintPlayerState(
                    player_id="player-1",
                    max_draws=first_draws,
                    revert_available=revert,
                    is_participant=True,
                ),
                SprintPlayerState(player_id="player-2", max_draws=second_draws),
            ),
        )
        return make_state(
            *players,
            phase=GamePhase.SPRINT,
            round_state=RoundState(round_number=1, sprint=sprint),
        )

    return factory


@pytest.mark.parametrize(
    ("engineers", "draws"), [(0, 1), (1, 5), (2, 7), (3, 9), (5, 9)]
)
def test_max_draws_scale_with_engineers(engineers: int, draws: int) -> None:
    assert max_draws(engineers) == draws


def test_bag_has_fixed_composition() -> None:
    bag = create_sprint_bag(DeterministicRandomService(4))

    assert len(bag) == sum(count for _, count, _ in BAG_COMPOSITION)
    assert sum(1 for token in bag if token.kind is SprintTokenKind.CLEAN_CODE) == 8
    assert sum(1 for token in bag if token.kind is SprintTokenKind.CRITICAL_BUG) == 1


def test_draw_stop_and_end_pays_down_debt(sprint_state) -> None:
    state = sprint_state([CLEAN, BUG, GREAT])

    state = draw_sprint_token(state, "player-1")
    assert state.round_state.sprint.players[0].clean_code_total == 2
    assert draw_sprint_token(state, "player-2") is state

    state = stop_sprint(state, "player-1")
    assert state.round_state.sprint.current_player_id() == "player-2"

    state = draw_sprint_token(state, "player-2")
    assert state.round_state.sprint.complete

    state = end_sprint(state)
    assert state.phase is GamePhase.RESOLUTION
    winner = state.player("player-1")
    assert winner.resources.tech_debt == 2
    assert winner.metrics.rating == 6
    assert state.player("player-2").resources.tech_debt == 4


def test_three_bug_weight_crashes(sprint_state) -> None:
    state = sprint_state([CLEAN, BUG, CRITICAL, GREAT])

    state = draw_sprint_token(state, "player-1")
    state = draw_sprint_token(state, "player-1")
    state = draw_sprint_token(state, "player-1")

    entry = state.round_state.sprint.players[0]
    assert entry.crashed
    assert entry.effective_total == 0
    assert state.round_state.sprint.current_player_id() == "player-2"


def test_backend_revert_ignores_first_bug(sprint_state) -> None:
    state = sprint_state([CLEAN, BUG], revert=True)

    state = draw_sprint_token(state, "player-1")

    entry = state.round_state.sprint.players[0]
    assert entry.bug_count == 0
    assert not entry.revert_available
    assert state.player("player-1").powers.has_used(BACKEND_REVERT_POWER)
    assert state.journal[-1].payload["reverted"] is True


def test_drawing_outside_sprint_is_rejected(sprint_state) -> None:
    state = sprint_state([CLEAN]).model_copy(update={"phase": GamePhase.RESOLUTION})

    assert draw_sprint_token(state, "player-1") is state
    assert end_sprint(state) is state
