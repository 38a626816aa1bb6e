"""Tests for game creation, the leader draft and corporation founding."""

from __future__ import annotations

import pytest

from tycoon_backend.game_logic.catalog.corporations import (
    default_corporation_style,
    starting_metrics,
    starting_production,
    starting_resources,
)
from tycoon_backend.game_logic.catalog.personas import PERSONA_CARDS
from tycoon_backend.game_logic.errors import ProgrammerError
from tycoon_backend.game_logic.phases import DraftPhase, GamePhase
from tycoon_backend.game_logic.rounds import pool_size
from tycoon_backend.game_logic.setup import (
    init_game,
    select_funding,
    select_leader,
    select_strategy,
    set_player_name,
    use_pivot_power,
)
from tycoon_backend.shared.enums import (
    CorporationStyle,
    FundingType,
    ProductType,
    TechApproach,
)


def test_init_game_deals_leaders_and_market(rules) -> None:
    state = init_game(rules, 2, seed=5)

    assert state.phase is GamePhase.LEADER_DRAFT
    assert [player.id for player in state.players] == ["player-1", "player-2"]
    assert all(len(hand) == 3 for hand in state.dealt_leader_cards.values())
    assert len(state.round_state.code_pool) == 10
    assert len(state.round_state.app_market) == 3
    assert len(state.themes) == 4
    assert state.journal[-1].event_type == "game-created"


def test_init_game_is_deterministic(rules) -> None:
    first = init_game(rules, 3, seed=99)
    second = init_game(rules, 3, seed=99)

    assert first.dealt_leader_cards == second.dealt_leader_cards
    assert first.round_state.code_pool == second.round_state.code_pool
    assert first.event_deck == second.event_deck


def test_init_game_rejects_bad_player_count(rules) -> None:
    with pytest.raises(ProgrammerError):
        init_game(rules, 1, seed=1)


def test_selecting_undealt_leader_is_rejected(rules) -> None:
    state = init_game(rules, 2, seed=5)
    foreign = state.dealt_leader_cards["player-2"][0]

    assert select_leader(state, "player-1", foreign) is state


def test_leftover_leaders_return_to_persona_deck(rules) -> None:
    state = init_game(rules, 2, seed=5)
    dealt = dict(state.dealt_leader_cards)
    for player in state.players:
        state = select_leader(state, player.id, dealt[player.id][0])

    assert state.phase is GamePhase.FUNDING_SELECTION
    assert state.dealt_leader_cards == {}
    assert len(state.persona_deck) == len(PERSONA_CARDS) - 2
    assert set(state.persona_deck[:4]) == {
        card for hand in dealt.values() for card in hand[1:]
    }


def test_funding_opens_round_one(founded_game) -> None:
    state = founded_game(2)

    assert state.phase is GamePhase.ENGINEER_DRAFT
    assert state.current_round == 1
    assert state.round_state.draft_phase is DraftPhase.GENERIC_DRAFT
    assert state.round_state.draft_order == ("player-1", "player-2")
    assert len(state.round_state.persona_pool) == 2
    assert len(state.round_state.engineer_pool) == pool_size(
        state, state.round_state.theme_id
    )
    assert all(p.corporation_style is CorporationStyle.PRODUCT for p in state.players)
    assert len(state.round_state.code_pool) == 2 * state.configuration.tokens_per_player
    assert len(state.round_state.app_market) == 3


def test_select_strategy_applies_explicit_choices(rules) -> None:
    state = init_game(rules, 2, seed=8)
    for player in state.players:
        state = select_leader(state, player.id, state.dealt_leader_cards[player.id][0])

    state = select_strategy(
        state,
        "player-1",
        FundingType.VC_HEAVY,
        TechApproach.QUALITY_FOCUSED,
        ProductType.CONSUMER,
        CorporationStyle.PRODUCT,
    )

    player = state.player("player-1")
    assert player.strategy.tech is TechApproach.QUALITY_FOCUSED
    assert player.strategy.product is ProductType.CONSUMER
    assert player.corporation_style is CorporationStyle.PRODUCT
    assert player.resources.money >= 100
    assert state.phase is GamePhase.FUNDING_SELECTION
    assert select_funding(state, "player-1", FundingType.ANGEL_BACKED) is state


def test_starting_values_by_choice() -> None:
    assert starting_resources(FundingType.VC_HEAVY, TechApproach.MOVE_FAST).money == 100
    assert starting_resources(FundingType.BOOTSTRAPPED, TechApproach.MOVE_FAST).money == 40
    quality = starting_resources(FundingType.ANGEL_BACKED, TechApproach.QUALITY_FOCUSED)
    assert (quality.money, quality.ai_capacity, quality.tech_debt) == (70, 1, 0)
    assert quality.server_capacity == 10
    assert starting_metrics(ProductType.CONSUMER).mau == 2000
    consumer = starting_production(ProductType.CONSUMER)
    assert (consumer.mau_production, consumer.revenue_production) == (3, 0)
    assert default_corporation_style(FundingType.BOOTSTRAPPED) is CorporationStyle.PRODUCT
    assert default_corporation_style(FundingType.VC_HEAVY) is CorporationStyle.AGENCY


def test_rename_ignores_blank_names(rules) -> None:
    state = init_game(rules, 2, seed=5)

    assert set_player_name(state, "player-1", "   ") is state
    renamed = set_player_name(state, "player-1", " Ada ")
    assert renamed.player("player-1").name == "Ada"


def test_pivot_is_once_per_game_for_vc(founded_game) -> None:
    state = founded_game(2, funding=FundingType.VC_HEAVY)
    current = state.player("player-1").strategy.product
    target = next(product for product in ProductType if product is not current)
    other = next(
        product for product in ProductType if product not in {current, target}
    )

    pivoted = use_pivot_power(state, "player-1", target)

    assert pivoted.player("player-1").strategy.product is target
    assert use_pivot_power(pivoted, "player-1", other) is pivoted


def test_pivot_requires_vc_funding(founded_game) -> None:
    state = founded_game(2)
    current = state.player("player-1").strategy.product
    target = next(product for product in ProductType if product is not current)

    assert use_pivot_power(state, "player-1", target) is state
