"""Tests for the engineer power pipeline and AI debt generation."""

from __future__ import annotations

import pytest

from tycoon_backend.game_logic.catalog.debt import debt_tier
from tycoon_backend.game_logic.catalog.personas import PersonaTrait
from tycoon_backend.game_logic.power import ai_debt_tokens, compute_power
from tycoon_backend.shared.enums import (
    ActionType,
    EngineerLevel,
    EngineerTrait,
    Specialty,
    TechApproach,
)


def test_senior_backend_with_ai_on_optimize(make_player, make_engineer) -> None:
    player = make_player()
    engineer = make_engineer(level=EngineerLevel.SENIOR, specialty=Specialty.BACKEND)

    power = compute_power(player, engineer, ActionType.OPTIMIZE_CODE, use_ai=True)

    assert (power.base, power.ai, power.specialty) == (4, 2, 1)
    assert power.total == 7


def test_specialty_bonus_only_for_matching_actions(make_player, make_engineer) -> None:
    player = make_player()
    engineer = make_engineer(specialty=Specialty.FRONTEND)

    marketing = compute_power(player, engineer, ActionType.MARKETING, use_ai=False)
    servers = compute_power(player, engineer, ActionType.UPGRADE_SERVERS, use_ai=False)

    assert marketing.total == 3
    assert servers.total == 2


def test_ai_skeptic_ignores_augmentation(make_player, make_engineer) -> None:
    player = make_player()
    engineer = make_engineer(trait=EngineerTrait.AI_SKEPTIC)

    power = compute_power(player, engineer, ActionType.DEVELOP_FEATURES, use_ai=True)

    assert power.ai == 0
    assert power.total == 2


@pytest.mark.parametrize(
    ("tech_debt", "penalty"),
    [(0, 0), (3, 0), (4, 1), (6, 1), (7, 2), (10, 3), (13, 4), (40, 4)],
)
def test_debt_tiers_scale_power_penalty(tech_debt: int, penalty: int) -> None:
    assert debt_tier(tech_debt).power_penalty == penalty


def test_debt_penalty_never_drops_power_below_zero(make_player, make_engineer) -> None:
    player = make_player(tech_debt=14)
    engineer = make_engineer(level=EngineerLevel.INTERN)

    power = compute_power(player, engineer, ActionType.MARKETING, use_ai=False)

    assert power.debt_penalty == 4
    assert power.total == 0


def test_pay_down_debt_is_exempt_from_penalty(make_player, make_engineer) -> None:
    player = make_player(tech_debt=8)
    engineer = make_engineer()

    power = compute_power(player, engineer, ActionType.PAY_DOWN_DEBT, use_ai=False)

    assert power.debt_penalty == 0
    assert power.total == 2


def test_night_owl_bonus_applies_to_last_action(make_player, make_engineer) -> None:
    player = make_player()
    engineer = make_engineer(trait=EngineerTrait.NIGHT_OWL)

    early = compute_power(player, engineer, ActionType.MARKETING, use_ai=False)
    late = compute_power(
        player, engineer, ActionType.MARKETING, use_ai=False, is_last_action=True
    )

    assert late.total == early.total + 1


def test_equity_hungry_needs_two_rounds_retained(make_player, make_engineer) -> None:
    player = make_player()
    fresh = make_engineer(trait=EngineerTrait.EQUITY_HUNGRY, rounds_retained=1)
    loyal = make_engineer(trait=EngineerTrait.EQUITY_HUNGRY, rounds_retained=2)

    assert compute_power(player, fresh, ActionType.MARKETING, use_ai=False).traits == 0
    assert compute_power(player, loyal, ActionType.MARKETING, use_ai=False).traits == 1


def test_flat_hierarchy_only_when_working_alone(make_player, make_engineer) -> None:
    player = make_player()
    engineer = make_engineer(persona_trait=PersonaTrait.FLAT_HIERARCHY)

    alone = compute_power(player, engineer, ActionType.MARKETING, use_ai=False)
    crowded = compute_power(
        player, engineer, ActionType.MARKETING, use_ai=False, engineers_on_action=2
    )

    assert alone.abilities == 2
    assert crowded.abilities == 0


@pytest.mark.parametrize(
    ("level", "tokens"),
    [(EngineerLevel.INTERN, 4), (EngineerLevel.JUNIOR, 3), (EngineerLevel.SENIOR, 1)],
)
def test_ai_debt_tokens_by_level(make_player, make_engineer, level, tokens) -> None:
    assert ai_debt_tokens(make_player(), make_engineer(level=level)) == tokens


def test_ai_first_halves_debt_rounding_up(make_player, make_engineer) -> None:
    player = make_player(tech=TechApproach.AI_FIRST)

    assert ai_debt_tokens(player, make_engineer(level=EngineerLevel.JUNIOR)) == 2
    assert ai_debt_tokens(player, make_engineer(level=EngineerLevel.SENIOR)) == 1


def test_admirals_discipline_generates_no_debt(make_player, make_engineer) -> None:
    engineer = make_engineer(persona_trait=PersonaTrait.ADMIRALS_DISCIPLINE)

    assert ai_debt_tokens(make_player(), engineer) == 0
