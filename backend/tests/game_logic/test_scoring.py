"""Tests for final scoring and winner selection."""

from __future__ import annotations

from tycoon_backend.game_logic.phases import GamePhase
from tycoon_backend.game_logic.scoring import calculate_winner, score_player, winners
from tycoon_backend.game_logic.state import Milestone, PublishedApp
from tycoon_backend.shared.enums import CorporationStyle


def test_product_score_breakdown(make_player, make_state) -> None:
    player = make_player(
        money=125,
        mau_thresholds_reached=(1000, 2500),
        committed_code_count=5,
        ipo_bonus_score=25,
    )
    state = make_state(
        player,
        milestones=(
            Milestone(
                id="first-5k-mau",
                name="First to 5K Users",
                bonus=10,
                claimed_by="player-1",
                claimed_round=2,
            ),
        ),
    )

    breakdown = score_player(state, player)

    assert breakdown.style_points == 5
    assert breakdown.money_points == 12
    assert breakdown.milestone_points == 10
    assert breakdown.bonus_points == 25
    assert breakdown.total == 52


def test_agency_scores_published_apps(make_player, make_state) -> None:
    player = make_player(
        money=0,
        style=CorporationStyle.AGENCY,
        mau_thresholds_reached=(1000,),
        published_apps=(
            PublishedApp(
                card_id="weather-now", stars=5, vp_earned=2, money_earned=0, round_published=1
            ),
            PublishedApp(
                card_id="other", stars=3, vp_earned=4, money_earned=0, round_published=2
            ),
        ),
    )

    assert score_player(make_state(player), player).style_points == 6


def test_identical_players_share_the_win(make_player, make_state) -> None:
    state = make_state(make_player("player-1", 0), make_player("player-2", 1))

    state = calculate_winner(state)

    assert state.phase is GamePhase.GAME_END
    assert state.final_scores["player-1"] == state.final_scores["player-2"]
    assert state.winner_ids == ("player-1", "player-2")
    assert state.journal[-1].event_type == "game-ended"


def test_money_breaks_score_ties(make_player, make_state) -> None:
    state = make_state(
        make_player("player-1", 0, money=100),
        make_player("player-2", 1, money=105),
    )

    assert winners(state, {"player-1": 10, "player-2": 10}) == ("player-2",)


def test_mau_breaks_money_ties(make_player, make_state) -> None:
    state = make_state(
        make_player("player-1", 0, mau=900),
        make_player("player-2", 1, mau=800),
    )

    assert winners(state, {"player-1": 10, "player-2": 10}) == ("player-1",)
