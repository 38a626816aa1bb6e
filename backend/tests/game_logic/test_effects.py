"""Tests for action effect handlers and assignment resolution."""

from __future__ import annotations

import pytest

from tycoon_backend.game_logic.configuration import RulesConfiguration
from tycoon_backend.game_logic.effects import PassContext, resolve_assignment
from tycoon_backend.game_logic.state import PlannedAction
from tycoon_backend.shared.enums import (
    ActionType,
    CorporationStyle,
    EngineerLevel,
    Specialty,
    TokenColor,
)
from tycoon_backend.shared.rng import DeterministicRandomService


@pytest.fixture
def context() -> PassContext:
    return PassContext(
        configuration=RulesConfiguration(),
        round_number=1,
        rng=DeterministicRandomService(3),
    )


def _resolve(
    player,
    action,
    context,
    *,
    engineer_id="eng-1",
    use_ai=False,
    paid=frozenset(),
    cost=0,
):
    planned = PlannedAction(
        engineer_id=engineer_id, action_type=action, use_ai_augmentation=use_ai
    )
    return resolve_assignment(
        player,
        planned,
        context,
        costs_paid=paid,
        is_last_action=False,
        action_cost=cost,
    )


def test_three_ai_juniors_on_develop_flush_the_buffer(
    make_player, make_engineer, context
) -> None:
    engineers = tuple(make_engineer(f"eng-{index}") for index in range(1, 4))
    player = make_player(mau=0, engineers=engineers)
    player = player.model_copy(
        update={
            "planned_actions": tuple(
                PlannedAction(
                    engineer_id=engineer.id,
                    action_type=ActionType.DEVELOP_FEATURES,
                    use_ai_augmentation=True,
                )
                for engineer in engineers
            )
        }
    )

    paid: frozenset[str] = frozenset()
    powers = []
    for engineer in engineers:
        result = _resolve(
            player,
            ActionType.DEVELOP_FEATURES,
            context,
            engineer_id=engineer.id,
            use_ai=True,
            paid=paid,
        )
        player, paid = result.player, result.costs_paid
        powers.append(result.power)

    assert powers == [4, 4, 3]
    assert player.resources.tech_debt == 8
    assert len(player.tech_debt_buffer.tokens) == 1
    assert player.metrics.mau == 1100
    assert player.production.mau_production == 1


def test_upgrade_servers_charges_cost_once_per_pass(
    make_player, make_engineer, context
) -> None:
    player = make_player(
        money=30,
        engineers=(make_engineer("eng-1"), make_engineer("eng-2")),
    )

    first = _resolve(player, ActionType.UPGRADE_SERVERS, context, cost=10)
    second = _resolve(
        first.player,
        ActionType.UPGRADE_SERVERS,
        context,
        engineer_id="eng-2",
        paid=first.costs_paid,
        cost=10,
    )

    assert second.player.resources.money == 20
    assert second.player.resources.server_capacity == 20
    assert second.player.code_grid.expansion_level == 2


def test_unaffordable_marketing_is_skipped(make_player, make_engineer, context) -> None:
    player = make_player(money=5, engineers=(make_engineer(),))

    result = _resolve(player, ActionType.MARKETING, context, cost=20)

    assert not result.applied
    assert result.player.resources.money == 5
    assert result.player.metrics.mau == player.metrics.mau


def test_marketing_scales_with_rating(make_player, make_engineer, context) -> None:
    engineer = make_engineer(specialty=Specialty.FRONTEND)
    player = make_player(money=50, mau=0, rating=10, engineers=(engineer,))

    result = _resolve(player, ActionType.MARKETING, context, cost=20)

    assert result.player.metrics.mau == 1200
    assert result.player.metrics.rating == 10
    assert result.player.resources.money == 30


def test_agency_marketing_banks_a_star(make_player, make_engineer, context) -> None:
    player = make_player(
        money=50, style=CorporationStyle.AGENCY, engineers=(make_engineer(),)
    )

    result = _resolve(player, ActionType.MARKETING, context, cost=20)

    assert result.player.marketing_star_bonus == 1
    assert result.player.production.mau_production == 0


def test_monetization_costs_rating_and_grows_revenue(
    make_player, make_engineer, context
) -> None:
    player = make_player(mau=2000, rating=5, engineers=(make_engineer(),))

    result = _resolve(player, ActionType.MONETIZATION, context)

    assert result.player.metrics.revenue == 1200
    assert result.player.metrics.rating == 4
    assert result.player.production.revenue_production == 1
    assert result.player.recurring_revenue == 1


def test_pay_down_debt_consumes_buffer_first(make_player, make_engineer, context) -> None:
    player = make_player(tech_debt=5, engineers=(make_engineer(),))
    player = player.add_debt_tokens([TokenColor.GREEN])

    result = _resolve(player, ActionType.PAY_DOWN_DEBT, context)

    assert result.player.tech_debt_buffer.tokens == ()
    assert result.player.resources.tech_debt == 4


def test_go_viral_is_locked_before_round_three(make_player, make_engineer, context) -> None:
    player = make_player(money=50, engineers=(make_engineer(),))

    result = _resolve(player, ActionType.GO_VIRAL, context, cost=15)

    assert not result.applied
    assert result.player.resources.money == 50


def test_senior_research_ai_raises_level(make_player, make_engineer, context) -> None:
    engineer = make_engineer(level=EngineerLevel.SENIOR)
    player = make_player(money=20, ai_capacity=0, engineers=(engineer,))

    result = _resolve(player, ActionType.RESEARCH_AI, context, cost=15)

    assert result.player.resources.ai_capacity == 2
    assert result.player.ai_research_level == 1
    assert result.player.resources.money == 5


def test_ipo_prep_bonus_does_not_stack(make_player, make_engineer, context) -> None:
    late_context = context.model_copy(update={"round_number": 4})
    player = make_player(engineers=(make_engineer(),), ipo_bonus_score=25)

    outcome = _resolve(player, ActionType.IPO_PREP, late_context, cost=50)

    assert outcome.player.ipo_bonus_score == 25
    assert outcome.player.resources.money == 50
