"""Tests for the code grid, the app market and code commits."""

from __future__ import annotations

import pytest

from tycoon_backend.game_logic.catalog.apps import get_app_card
from tycoon_backend.game_logic.errors import ProgrammerError
from tycoon_backend.game_logic.grid import CodeGrid, are_connected
from tycoon_backend.game_logic.grid_actions import claim_app_card, commit_code, publish_app
from tycoon_backend.game_logic.phases import GamePhase
from tycoon_backend.game_logic.state import RoundState
from tycoon_backend.shared.enums import CorporationStyle, TokenColor

G = TokenColor.GREEN
O = TokenColor.ORANGE  # noqa: E741
B = TokenColor.BLUE
P = TokenColor.PURPLE


def _grid(*placements: tuple[int, int, TokenColor]) -> CodeGrid:
    grid = CodeGrid.empty()
    for row, col, color in placements:
        grid = grid.place(row, col, color)
    return grid


WEATHER_GRID = ((1, 1, G), (1, 2, G), (2, 1, O), (2, 2, P))


def test_grid_place_rejects_occupied_and_outside_cells() -> None:
    grid = _grid((0, 0, G))

    assert grid.place(0, 0, B) is None
    assert grid.place(4, 0, B) is None
    assert grid.token_count() == 1


def test_grid_expand_keeps_tokens() -> None:
    grid = _grid((3, 3, P)).expand()

    assert (grid.rows, grid.cols) == (4, 5)
    assert grid.cell(3, 3) is P
    assert grid.expand().expand() is None


def test_swap_requires_adjacent_cells() -> None:
    grid = _grid((0, 0, G), (0, 1, B))

    swapped = grid.swap((0, 0), (0, 1))

    assert (swapped.cell(0, 0), swapped.cell(0, 1)) == (B, G)
    assert grid.swap((0, 0), (1, 1)) is None


def test_place_many_requires_connected_cells() -> None:
    assert are_connected([(0, 0), (0, 1), (1, 1)])
    assert CodeGrid.empty().place_many([(0, 0, G), (2, 2, G)]) is None


def test_best_match_finds_the_pattern() -> None:
    pattern = get_app_card("weather-now").pattern

    assert _grid(*WEATHER_GRID).best_match(pattern) == (1, 1, 4)


def test_vp_for_is_never_zero() -> None:
    card = get_app_card("weather-now")

    assert card.star_rating(4) == 5
    assert card.vp_for(5) == card.max_vp
    assert card.vp_for(1) == 1


@pytest.fixture
def market_state(make_player, make_state):
    def factory(**player_fields):
        return make_state(
            make_player(**player_fields),
            app_deck=("travel-buddy",),
            round_state=RoundState(
                round_number=1, app_market=("weather-now", "fittrack-health")
            ),
        )

    return factory


def test_claim_refills_market_from_deck(market_state) -> None:
    state = claim_app_card(market_state(), "player-1", "weather-now")

    assert state.player("player-1").held_app_cards == ("weather-now",)
    assert state.round_state.app_market == ("fittrack-health", "travel-buddy")
    assert state.app_deck == ()


def test_claim_respects_hand_limit(market_state) -> None:
    state = market_state(held_app_cards=("a", "b", "c"))

    assert claim_app_card(state, "player-1", "weather-now") is state


def test_claim_unknown_card_raises(market_state) -> None:
    with pytest.raises(ProgrammerError):
        claim_app_card(market_state(), "player-1", "no-such-app")


def test_full_match_publishes_five_stars(market_state) -> None:
    state = market_state(
        held_app_cards=("weather-now",), code_grid=_grid(*WEATHER_GRID)
    )

    state = publish_app(state, "player-1", "weather-now", 1, 1)

    player = state.player("player-1")
    app = player.published_apps[0]
    assert (app.stars, app.vp_earned, app.money_earned) == (5, 2, 1)
    assert player.code_grid.token_count() == 0
    assert player.held_app_cards == ()
    assert player.resources.money == 101


def test_partial_match_clears_only_matching_tokens(market_state) -> None:
    grid = _grid((1, 1, G), (1, 2, B), (2, 1, O))
    state = market_state(held_app_cards=("weather-now",), code_grid=grid)

    state = publish_app(state, "player-1", "weather-now", 1, 1)

    player = state.player("player-1")
    assert player.published_apps[0].stars == 2
    assert player.code_grid.cell(1, 2) is B
    assert player.code_grid.token_count() == 1


def test_agency_spends_marketing_star(market_state) -> None:
    state = market_state(
        held_app_cards=("weather-now",),
        code_grid=_grid((1, 1, G), (1, 2, G)),
        style=CorporationStyle.AGENCY,
        marketing_star_bonus=1,
    )

    state = publish_app(state, "player-1", "weather-now", 1, 1)

    player = state.player("player-1")
    assert player.published_apps[0].stars == 3
    assert player.marketing_star_bonus == 0


def test_publish_without_match_is_rejected(market_state) -> None:
    state = market_state(held_app_cards=("weather-now",))

    assert publish_app(state, "player-1", "weather-now", 0, 0) is state


def test_product_commits_same_colour_run_once_per_round(market_state) -> None:
    state = market_state(code_grid=_grid((0, 0, B), (0, 1, B), (0, 2, B), (1, 0, B)))

    committed = commit_code(state, "player-1", 0, 0, "row", 3)

    player = committed.player("player-1")
    assert player.committed_code_count == 1
    assert player.resources.money == 101
    assert player.production.mau_production == 1
    assert player.code_grid.token_count() == 1
    assert commit_code(committed, "player-1", 0, 0, "col", 3) is committed


def test_product_mixed_run_needs_four_colours(market_state) -> None:
    state = market_state(code_grid=_grid((0, 0, G), (1, 0, O), (2, 0, B), (3, 0, G)))

    assert commit_code(state, "player-1", 0, 0, "col", 4) is state


def test_agency_commits_a_single_token(market_state) -> None:
    state = market_state(code_grid=_grid((2, 2, P)), style=CorporationStyle.AGENCY)

    state = commit_code(state, "player-1", 2, 2)

    assert state.player("player-1").code_grid.token_count() == 0
    assert state.player("player-1").committed_code_count == 0


def test_grid_actions_close_at_game_end(market_state) -> None:
    state = market_state().model_copy(update={"phase": GamePhase.GAME_END})

    assert claim_app_card(state, "player-1", "weather-now") is state
