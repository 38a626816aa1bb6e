"""Integer power pipeline for an engineer working on an action."""

from __future__ import annotations

from math import ceil
from typing import TYPE_CHECKING

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict

from tycoon_backend.game_logic.catalog.debt import debt_tier
from tycoon_backend.game_logic.catalog.engineers import (
    AI_DEBT_TOKENS,
    AI_POWER_BONUS,
    specialty_bonus,
)
from tycoon_backend.game_logic.catalog.personas import LeaderPassive, PersonaTrait
from tycoon_backend.shared.enums import ActionType, EngineerTrait, TechApproach

if TYPE_CHECKING:
    from tycoon_backend.game_logic.catalog.themes import QuarterlyTheme
    from tycoon_backend.game_logic.state import HiredEngineer, Player

ALIGNMENT_AI_CAPACITY_LIMIT = 6


class PowerBreakdown(BaseModel):
    """Each additive step of a power computation and the clamped total."""

    model_config = ConfigDict(frozen=True)

    base: int
    ai: int = 0
    specialty: int = 0
    traits: int = 0
    abilities: int = 0
    debt_penalty: int = Field(default=0, ge=0)
    total: int = Field(..., ge=0)


def ai_allowed(engineer: HiredEngineer, requested: bool) -> bool:
    """AI skeptics never use augmentation regardless of the request."""
    return requested and engineer.trait is not EngineerTrait.AI_SKEPTIC


def _specialty_component(engineer: HiredEngineer, action: ActionType) -> int:
    bonus = specialty_bonus(engineer.specialty, action)
    if engineer.has_persona_trait(PersonaTrait.RESEARCHER):
        return bonus * 2 if action is ActionType.RESEARCH_AI else 0
    return bonus


def _trait_component(engineer: HiredEngineer, *, is_last_action: bool) -> int:
    bonus = 0
    if engineer.trait is EngineerTrait.EQUITY_HUNGRY and engineer.rounds_retained >= 2:
        bonus += 1
    if engineer.trait is EngineerTrait.NIGHT_OWL and is_last_action:
        bonus += 1
    return bonus


def _ability_component(
    player: Player,
    engineer: HiredEngineer,
    action: ActionType,
    engineers_on_action: int,
) -> int:
    bonus = 0
    if player.has_passive(LeaderPassive.ENTERPRISE_CULTURE) and (
        action is ActionType.DEVELOP_FEATURES
    ):
        bonus += 1
    if engineer.has_persona_trait(PersonaTrait.FLAT_HIERARCHY) and engineers_on_action == 1:
        bonus += 2
    if action is ActionType.RESEARCH_AI and (
        engineer.has_persona_trait(PersonaTrait.VOLATILE)
        or engineer.has_persona_trait(PersonaTrait.ALIGNMENT_RESEARCHER)
    ):
        bonus += 2
    if (
        engineer.has_persona_trait(PersonaTrait.ALIGNMENT_RESEARCHER)
        and player.resources.ai_capacity > ALIGNMENT_AI_CAPACITY_LIMIT
    ):
        bonus -= 1
    if engineer.has_persona_trait(PersonaTrait.PROTOCOL_PURIST) and (
        action is ActionType.PAY_DOWN_DEBT
    ):
        bonus += 1
    if engineer.has_persona_trait(PersonaTrait.RESILIENCE_ARCHITECT) and (
        action is ActionType.UPGRADE_SERVERS
    ):
        bonus += 1
    return bonus


def compute_power(
    player: Player,
    engineer: HiredEngineer,
    action: ActionType,
    *,
    use_ai: bool,
    is_last_action: bool = False,
    engineers_on_action: int = 1,
    theme: QuarterlyTheme | None = None,
) -> PowerBreakdown:
    """Return the power *engineer* contributes to *action* for *player*.

    Steps are applied in a fixed order: base, AI, specialty, traits, leader and
    persona abilities, then the tech debt penalty (skipped for paying down
    debt). The total never drops below zero.
    """
    base = engineer.base_power
    ai = AI_POWER_BONUS if ai_allowed(engineer, use_ai) else 0
    specialty = _specialty_component(engineer, action)
    traits = _trait_component(engineer, is_last_action=is_last_action)
    abilities = _ability_component(player, engineer, action, engineers_on_action)
    penalty = 0
    if action is not ActionType.PAY_DOWN_DEBT:
        penalty = debt_tier(player.resources.tech_debt).power_penalty
        if theme is not None:
            penalty = theme.scale_debt_penalty(penalty)
    total = max(0, base + ai + specialty + traits + abilities - penalty)
    return PowerBreakdown(
        base=base,
        ai=ai,
        specialty=specialty,
        traits=traits,
        abilities=abilities,
        debt_penalty=penalty,
        total=total,
    )


def ai_debt_tokens(player: Player, engineer: HiredEngineer) -> int:
    """Return how many debt tokens one AI-augmented use generates."""
    if engineer.has_persona_trait(PersonaTrait.ADMIRALS_DISCIPLINE):
        return 0
    if player.has_passive(LeaderPassive.ALIGNMENT_TAX):
        return 0
    tokens = AI_DEBT_TOKENS[engineer.level]
    if player.strategy is not None and player.strategy.tech is TechApproach.AI_FIRST:
        tokens = ceil(tokens / 2)
    if player.has_passive(LeaderPassive.EFFICIENT_AI):
        tokens = ceil(tokens / 2)
    if engineer.has_persona_trait(PersonaTrait.DECENTRALIST):
        tokens = ceil(tokens / 2)
    if engineer.has_persona_trait(PersonaTrait.VOLATILE):
        tokens += 1
    return tokens


__all__ = [
    "PowerBreakdown",
    "ai_allowed",
    "ai_debt_tokens",
    "compute_power",
]
