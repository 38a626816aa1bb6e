"""Tests for the resolution pass, upkeep, milestones and round transitions."""

from __future__ import annotations

from tycoon_backend.game_logic.catalog.milestones import create_milestones
from tycoon_backend.game_logic.configuration import RulesConfiguration
from tycoon_backend.game_logic.phases import GamePhase
from tycoon_backend.game_logic.resolution import (
    apply_upkeep,
    check_milestones,
    median_mau,
    resolve_actions,
)
from tycoon_backend.game_logic.rounds import end_round
from tycoon_backend.game_logic.state import PlannedAction, RoundState
from tycoon_backend.shared.enums import ActionType
from tycoon_backend.shared.value_objects import ProductionTracks


def test_median_is_the_upper_median(make_player) -> None:
    players = tuple(
        make_player(f"player-{index}", index, mau=mau)
        for index, mau in enumerate((400, 100, 300, 200))
    )

    assert median_mau(players) == 300
    assert median_mau(()) == 0


def test_underdog_gets_stipend(make_player, make_state) -> None:
    state = make_state(
        make_player("player-1", 0, mau=1000),
        make_player("player-2", 1, mau=3000),
    )

    state = apply_upkeep(state, {})

    assert state.player("player-1").resources.money == 120
    assert state.player("player-2").resources.money == 130
    incomes = [e.payload["amount"] for e in state.journal if e.event_type == "income"]
    assert incomes == [20, 30]


def test_income_is_capped_by_round(make_player, make_state) -> None:
    state = make_state(make_player(mau=90000), current_round=1)

    state = apply_upkeep(state, {})

    assert state.player("player-1").resources.money == 140


def test_high_debt_costs_rating_in_upkeep(make_player, make_state) -> None:
    state = make_state(make_player(tech_debt=7, rating=5))

    state = apply_upkeep(state, {})

    assert state.player("player-1").metrics.rating == 4


def test_milestones_go_to_first_qualifier(make_player, make_state) -> None:
    state = make_state(
        make_player("player-1", 0, mau=6000),
        make_player("player-2", 1, mau=7000),
        milestones=create_milestones(),
    )

    state = check_milestones(state)

    claimed = {m.id: m.claimed_by for m in state.milestones}
    assert claimed["first-5k-mau"] == "player-1"
    assert claimed["first-10k-mau"] is None

    later = check_milestones(
        state.replace_player(state.player("player-2").adjust_metrics(mau=1000))
    )
    assert {m.id: m.claimed_by for m in later.milestones}["first-5k-mau"] == "player-1"


def test_resolve_actions_runs_plans_and_draws_event(
    make_player, make_engineer, make_state
) -> None:
    engineer = make_engineer(assigned_action=ActionType.MONETIZATION)
    player = make_player(
        engineers=(engineer,),
        planned_actions=(
            PlannedAction(engineer_id=engineer.id, action_type=ActionType.MONETIZATION),
        ),
    )
    state = make_state(
        player,
        phase=GamePhase.RESOLUTION,
        event_deck=("viral-1", "ddos-1"),
        round_state=RoundState(round_number=1),
    )

    state = resolve_actions(state)

    resolved = state.player("player-1")
    assert state.phase is GamePhase.EVENT
    assert resolved.metrics.revenue == 600
    assert resolved.planned_actions == ()
    assert resolved.engineers[0].assigned_action is None
    assert resolved.engineers[0].rounds_retained == 1
    assert resolved.mau_thresholds_reached == (1000,)
    assert state.round_state.current_event_id == "ddos-1"
    assert state.round_state.upcoming_event_id == "viral-1"
    assert state.used_events == ("ddos-1",)
    assert resolve_actions(state) is state


def test_end_round_pays_production_and_opens_next_round(
    make_player, make_state
) -> None:
    player = make_player(
        mau=1000,
        production=ProductionTracks(mau_production=2, revenue_production=1),
        recurring_revenue=3,
    )
    state = make_state(player, phase=GamePhase.ROUND_END)

    state = end_round(state)

    paid = state.player("player-1")
    assert state.phase is GamePhase.ENGINEER_DRAFT
    assert state.current_round == 2
    assert paid.metrics.mau == 1200
    assert paid.resources.money == 108
    assert len(state.round_state.engineer_pool) == 4


def test_end_round_after_last_quarter_scores_game(make_player, make_state) -> None:
    state = make_state(
        make_player(),
        phase=GamePhase.ROUND_END,
        current_round=4,
        configuration=RulesConfiguration(total_quarters=4),
    )

    state = end_round(state)

    assert state.phase is GamePhase.GAME_END
    assert state.winner_ids == ("player-1",)
