"""Tests for the hybrid draft, sealed bids, persona auctions and the intern net."""

from __future__ import annotations

import pytest

from tycoon_backend.game_logic.configuration import RulesConfiguration
from tycoon_backend.game_logic.draft import (
    build_snake_order,
    current_drafter,
    finish_generic_draft,
    hire_cost,
    minimum_bid,
    pass_auction,
    pass_draft_pick,
    pick_engineer,
    place_auction_bid,
    resolve_bids,
    submit_bid,
)
from tycoon_backend.game_logic.errors import ProgrammerError
from tycoon_backend.game_logic.phases import DraftMode, DraftPhase, GamePhase, PlanningMode
from tycoon_backend.game_logic.state import Engineer, RoundState, Strategy
from tycoon_backend.shared.enums import (
    EngineerLevel,
    FundingType,
    ProductType,
    TechApproach,
)


def _engineer(engineer_id: str, salary: int = 15) -> Engineer:
    return Engineer(
        id=engineer_id, name=engineer_id, level=EngineerLevel.JUNIOR, base_salary=salary
    )


@pytest.fixture
def draft_state(make_player, make_state):
    """Two players in a hybrid draft over a fixed two-engineer pool."""

    def factory(*, persona_pool=(), configuration=None, money=100):
        players = (
            make_player("player-1", 0, mau=500, money=money),
            make_player("player-2", 1, mau=1000, money=money),
        )
        return make_state(
            *players,
            phase=GamePhase.ENGINEER_DRAFT,
            configuration=configuration,
            round_state=RoundState(
                round_number=1,
                engineer_pool=(_engineer("eng-a"), _engineer("eng-b", 20)),
                persona_pool=persona_pool,
                draft_order=("player-1", "player-2"),
            ),
        )

    return factory


def test_snake_order_alternates_laps(make_player) -> None:
    players = (
        make_player("player-1", mau=300),
        make_player("player-2", mau=100),
        make_player("player-3", mau=200),
    )

    order = build_snake_order(players, lambda p: p.metrics.mau, 5)

    assert order == (
        "player-2",
        "player-3",
        "player-1",
        "player-1",
        "player-3",
        "player-2",
        "player-2",
        "player-3",
        "player-1",
    )


def test_hybrid_picks_follow_draft_order(draft_state) -> None:
    state = draft_state()

    assert current_drafter(state) == "player-1"
    assert pick_engineer(state, "player-2", "eng-a") is state

    state = pick_engineer(state, "player-1", "eng-a")
    assert state.player("player-1").resources.money == 85
    assert state.player("player-1").engineers[0].rounds_retained == 1
    assert current_drafter(state) == "player-2"

    state = pick_engineer(state, "player-2", "eng-b")
    assert state.phase is GamePhase.PLANNING
    assert state.round_state.draft_phase is DraftPhase.COMPLETE
    assert state.journal[-1].event_type == "draft-complete"


def test_unknown_pool_engineer_raises(draft_state) -> None:
    with pytest.raises(ProgrammerError):
        pick_engineer(draft_state(), "player-1", "eng-missing")


def test_unaffordable_pick_is_rejected(draft_state) -> None:
    state = draft_state(money=10)

    assert pick_engineer(state, "player-1", "eng-a") is state


def test_bootstrapped_hires_are_discounted(draft_state) -> None:
    state = draft_state()
    player = state.player("player-1").model_copy(
        update={
            "strategy": Strategy(
                funding=FundingType.BOOTSTRAPPED,
                tech=TechApproach.MOVE_FAST,
                product=ProductType.PLATFORM,
            )
        }
    )

    assert hire_cost(state, player, _engineer("eng-a")) == 12


def test_passing_players_get_an_intern(draft_state) -> None:
    state = draft_state()
    state = pick_engineer(state, "player-1", "eng-a")
    state = pass_draft_pick(state, "player-2")

    intern = state.player("player-2").engineers[0]
    assert intern.level is EngineerLevel.INTERN
    assert intern.hire_cost == 5
    assert state.player("player-2").resources.money == 95


def test_broke_player_intern_costs_what_they_hold(draft_state) -> None:
    state = draft_state(money=2)
    state = pass_draft_pick(state, "player-1")
    state = pass_draft_pick(state, "player-2")

    for player in state.players:
        assert player.engineers[0].level is EngineerLevel.INTERN
        assert player.resources.money == 0


def test_persona_auction_awards_highest_bidder(draft_state) -> None:
    state = draft_state(persona_pool=("elom-tusk",))
    state = pick_engineer(state, "player-1", "eng-a")
    state = pick_engineer(state, "player-2", "eng-b")

    assert state.round_state.draft_phase is DraftPhase.PERSONA_AUCTION
    assert current_drafter(state) == "player-1"
    assert minimum_bid(state) == 15
    assert place_auction_bid(state, "player-1", 12) is state

    state = place_auction_bid(state, "player-1", 15)
    assert current_drafter(state) == "player-2"
    assert minimum_bid(state) == 20
    state = pass_auction(state, "player-2")

    winner = state.player("player-1")
    persona = winner.engineers[-1]
    assert persona.persona_id == "elom-tusk"
    assert persona.level is EngineerLevel.SENIOR
    assert winner.resources.money == 70
    assert state.phase is GamePhase.PLANNING


def test_auction_without_bids_discards_persona(draft_state) -> None:
    state = draft_state(persona_pool=("elom-tusk",))
    state = pick_engineer(state, "player-1", "eng-a")
    state = pick_engineer(state, "player-2", "eng-b")

    state = pass_auction(state, "player-1")

    assert state.round_state.auction is None
    assert state.journal[-2].event_type == "auction-discarded"
    assert all(len(player.engineers) == 1 for player in state.players)


def test_sealed_bids_award_one_engineer_per_player(draft_state) -> None:
    state = draft_state(configuration=RulesConfiguration(draft_mode=DraftMode.SEALED_BID))
    state = submit_bid(state, "player-1", "eng-a", 20)
    state = submit_bid(state, "player-2", "eng-a", 25)
    state = submit_bid(state, "player-2", "eng-b", 10)
    state = submit_bid(state, "player-1", "eng-b", 5)

    state = resolve_bids(state)

    assert state.player("player-2").engineers[0].id == "eng-a"
    assert state.player("player-2").resources.money == 75
    assert state.player("player-1").engineers[0].id == "eng-b"
    assert state.player("player-1").resources.money == 95
    assert state.round_state.engineer_pool == ()


def test_sealed_bid_over_budget_is_rejected(draft_state) -> None:
    state = draft_state(configuration=RulesConfiguration(draft_mode=DraftMode.SEALED_BID))

    assert submit_bid(state, "player-1", "eng-a", 500) is state


def test_action_draft_mode_opens_action_draft(draft_state) -> None:
    config = RulesConfiguration(planning_mode=PlanningMode.ACTION_DRAFT)
    state = draft_state(configuration=config)
    state = state.with_round_state(engineer_pool=())

    state = finish_generic_draft(state)

    assert state.phase is GamePhase.ACTION_DRAFT
    assert state.round_state.turn is not None


def test_equal_sealed_bids_go_to_earliest_submission(draft_state) -> None:
    state = draft_state(configuration=RulesConfiguration(draft_mode=DraftMode.SEALED_BID))
    state = submit_bid(state, "player-2", "eng-a", 20)
    state = submit_bid(state, "player-1", "eng-a", 20)

    state = resolve_bids(state)

    winner = state.player("player-2")
    assert [engineer.id for engineer in winner.engineers] == ["eng-a"]
    assert winner.resources.money == 80
    assert "eng-a" not in [e.id for e in state.player("player-1").engineers]
