"""Action effect handlers, one pure function per action type.

Each handler receives the player, the engineer doing the work and an
:class:`EffectContext` carrying the computed power and the per-pass record of
costs already paid. It returns an :class:`EffectOutcome` with the updated
player; nothing outside the player is mutated.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict

from tycoon_backend.game_logic.catalog.engineers import debt_token_color
from tycoon_backend.game_logic.catalog.personas import LeaderPassive, PersonaTrait
from tycoon_backend.game_logic.catalog.themes import QuarterlyTheme  # noqa: TC001
from tycoon_backend.game_logic.configuration import RulesConfiguration  # noqa: TC001
from tycoon_backend.game_logic.power import ai_allowed, ai_debt_tokens, compute_power
from tycoon_backend.game_logic.state import HiredEngineer, Player  # noqa: TC001
from tycoon_backend.shared.enums import ActionType, CorporationStyle, FundingType
from tycoon_backend.shared.rng import DeterministicRandomService  # noqa: TC001
from tycoon_backend.shared.value_objects import round_half_up

if TYPE_CHECKING:
    from tycoon_backend.game_logic.state import PlannedAction

DEVELOP_MAU_PER_POWER = 100
MARKETING_MAU_PER_POWER = 200
VC_MARKETING_POWER_BONUS = 2
MONETIZATION_REVENUE_PER_POWER = 300
SERVER_UPGRADE_CAPACITY = 5
RESEARCH_AI_CAPACITY = 2
MAX_AI_RESEARCH_LEVEL = 2
PAY_DOWN_UNITS = 2
VIRAL_SUCCESS_MAU = 3000
VIRAL_SUCCESS_PRODUCTION = 2
VIRAL_FAILURE_MAU = 1000
IPO_BONUS_SCORE = 25
ACQUISITION_SCORE_RATE = 0.002
HYPE_MAU = 500
HYPE_VARIANCE = 200
PERFECTIONIST_MAU_COST = 200
ENTERPRISE_SALES_BONUS = 5


class EffectContext(BaseModel):
    """Inputs shared by an action handler beyond the player and engineer."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    configuration: RulesConfiguration
    round_number: int = Field(..., ge=0)
    power: int = Field(..., ge=0)
    cost: int = Field(default=0, ge=0)
    theme: QuarterlyTheme | None = None
    rng: DeterministicRandomService
    costs_paid: frozenset[str] = Field(default_factory=frozenset)

    def scale(self, action: ActionType, amount: int) -> int:
        if self.theme is None:
            return amount
        return self.theme.scale_output(action, amount)


class EffectOutcome(BaseModel):
    """Result of one handler call."""

    model_config = ConfigDict(frozen=True)

    player: Player
    costs_paid: frozenset[str] = Field(default_factory=frozenset)
    applied: bool = True
    notes: tuple[str, ...] = Field(default_factory=tuple)


EffectHandler = Callable[[Player, HiredEngineer, EffectContext], EffectOutcome]


def _skip(player: Player, context: EffectContext, note: str) -> EffectOutcome:
    return EffectOutcome(
        player=player, costs_paid=context.costs_paid, applied=False, notes=(note,)
    )


def _pay_once(
    player: Player, context: EffectContext, key: str
) -> tuple[Player, frozenset[str]] | None:
    """Charge the action cost the first time *key* appears in this pass."""
    if key in context.costs_paid:
        return player, context.costs_paid
    if not player.resources.can_afford(context.cost):
        return None
    return player.adjust_resources(money=-context.cost), context.costs_paid | {key}


def _once_per_pass(context: EffectContext, key: str) -> bool:
    return key not in context.costs_paid


def develop_features(
    player: Player, engineer: HiredEngineer, context: EffectContext
) -> EffectOutcome:
    """Gain MAU per power and advance MAU production once per pass."""
    gain = context.scale(
        ActionType.DEVELOP_FEATURES, DEVELOP_MAU_PER_POWER * context.power
    )
    player = player.adjust_metrics(mau=gain)
    paid = context.costs_paid
    key = "develop-features-production"
    if _once_per_pass(context, key):
        player = player.advance_production(context.configuration, mau=1)
        paid = paid | {key}
    if engineer.has_persona_trait(PersonaTrait.PROCESS_OPTIMIZER):
        player = player.advance_production(context.configuration, revenue=1)
    if engineer.has_persona_trait(PersonaTrait.PERFECTIONIST):
        player = player.adjust_metrics(rating=1, mau=-PERFECTIONIST_MAU_COST)
    return EffectOutcome(player=player, costs_paid=paid, notes=(f"+{gain} MAU",))


def optimize_code(
    player: Player, engineer: HiredEngineer, context: EffectContext
) -> EffectOutcome:
    """Trim one unit of debt and raise the rating."""
    del engineer
    reduction = context.scale(ActionType.OPTIMIZE_CODE, 1)
    rating = 2 if player.has_passive(LeaderPassive.DOUBLE_OPTIMIZE) else 1
    player = player.adjust_resources(tech_debt=-reduction).adjust_metrics(rating=rating)
    return EffectOutcome(
        player=player,
        costs_paid=context.costs_paid,
        notes=(f"-{reduction} tech debt", f"+{rating} rating"),
    )


def pay_down_debt(
    player: Player, engineer: HiredEngineer, context: EffectContext
) -> EffectOutcome:
    """Remove debt, consuming buffered tokens before the counter."""
    units = PAY_DOWN_UNITS
    if engineer.has_persona_trait(PersonaTrait.OPTIMIZER):
        units += 1
    return EffectOutcome(
        player=player.pay_down_debt(units),
        costs_paid=context.costs_paid,
        notes=(f"-{units} debt",),
    )


def upgrade_servers(
    player: Player, engineer: HiredEngineer, context: EffectContext
) -> EffectOutcome:
    """Buy server capacity and grow the code grid one level."""
    del engineer
    paid = _pay_once(player, context, ActionType.UPGRADE_SERVERS.value)
    if paid is None:
        return _skip(player, context, "cannot afford server upgrade")
    player, costs_paid = paid
    player = player.adjust_resources(server_capacity=SERVER_UPGRADE_CAPACITY)
    expanded = player.code_grid.expand()
    if expanded is not None:
        player = player.model_copy(update={"code_grid": expanded})
    return EffectOutcome(
        player=player,
        costs_paid=costs_paid,
        notes=(f"+{SERVER_UPGRADE_CAPACITY} server capacity",),
    )


def research_ai(
    player: Player, engineer: HiredEngineer, context: EffectContext
) -> EffectOutcome:
    """Buy AI capacity and advance the research level."""
    paid = _pay_once(player, context, ActionType.RESEARCH_AI.value)
    if paid is None:
        return _skip(player, context, "cannot afford AI research")
    player, costs_paid = paid
    capacity = context.scale(ActionType.RESEARCH_AI, RESEARCH_AI_CAPACITY)
    if player.has_passive(LeaderPassive.GPU_ROYALTIES):
        capacity += 1
    servers = 1 if engineer.has_persona_trait(PersonaTrait.PARALLEL_PROCESSOR) else 0
    player = player.adjust_resources(ai_capacity=capacity, server_capacity=servers)
    player = player.model_copy(
        update={
            "ai_research_level": min(MAX_AI_RESEARCH_LEVEL, player.ai_research_level + 1)
        }
    )
    return EffectOutcome(
        player=player, costs_paid=costs_paid, notes=(f"+{capacity} AI capacity",)
    )


def marketing(
    player: Player, engineer: HiredEngineer, context: EffectContext
) -> EffectOutcome:
    """Gain rating-scaled MAU; agencies bank a star, products grow production."""
    paid = _pay_once(player, context, ActionType.MARKETING.value)
    if paid is None:
        return _skip(player, context, "cannot afford marketing")
    player, costs_paid = paid
    reach = MARKETING_MAU_PER_POWER * context.power
    if player.strategy is not None and player.strategy.funding is FundingType.VC_HEAVY:
        reach += MARKETING_MAU_PER_POWER * VC_MARKETING_POWER_BONUS
    gain = context.scale(
        ActionType.MARKETING, round_half_up(reach * player.metrics.rating / 5)
    )
    rating = 2 if player.has_passive(LeaderPassive.TRUST_SAFETY) else 1
    player = player.adjust_metrics(mau=gain, rating=rating)
    if engineer.has_persona_trait(PersonaTrait.GROWTH_HACKER) or (
        engineer.has_persona_trait(PersonaTrait.CONTENT_ALGORITHM)
    ):
        player = player.advance_production(context.configuration, mau=1)
    if player.corporation_style is CorporationStyle.AGENCY:
        player = player.model_copy(update={"marketing_star_bonus": 1})
    else:
        key = "marketing-production"
        if key not in costs_paid:
            player = player.advance_production(context.configuration, mau=1)
            costs_paid = costs_paid | {key}
    return EffectOutcome(player=player, costs_paid=costs_paid, notes=(f"+{gain} MAU",))


def monetization(
    player: Player, engineer: HiredEngineer, context: EffectContext
) -> EffectOutcome:
    """Convert MAU into revenue at the cost of one rating point."""
    revenue = round_half_up(
        MONETIZATION_REVENUE_PER_POWER * context.power * player.metrics.mau / 1000
    )
    revenue = context.scale(ActionType.MONETIZATION, revenue)
    if engineer.has_persona_trait(PersonaTrait.ENTERPRISE_SALES):
        revenue += ENTERPRISE_SALES_BONUS
    player = player.adjust_metrics(revenue=revenue, rating=-1)
    costs_paid = context.costs_paid
    key = "monetization-production"
    if key not in costs_paid:
        player = player.advance_production(context.configuration, revenue=1)
        costs_paid = costs_paid | {key}
    if player.has_passive(LeaderPassive.SAAS_COMPOUNDING):
        player = player.advance_production(context.configuration, revenue=1)
    if engineer.has_persona_trait(PersonaTrait.MONETIZER):
        player = player.advance_production(context.configuration, revenue=1)
    if player.corporation_style is CorporationStyle.AGENCY:
        player = player.adjust_resources(money=player.published_stars())
    else:
        player = player.model_copy(
            update={"recurring_revenue": player.recurring_revenue + 1}
        )
    return EffectOutcome(
        player=player, costs_paid=costs_paid, notes=(f"+{revenue} revenue",)
    )


def hire_recruiter(
    player: Player, engineer: HiredEngineer, context: EffectContext
) -> EffectOutcome:
    del engineer
    key = ActionType.HIRE_RECRUITER.value
    if key in context.costs_paid:
        return _skip(player, context, "recruiter already hired")
    paid = _pay_once(player, context, key)
    if paid is None:
        return _skip(player, context, "cannot afford recruiter")
    player, costs_paid = paid
    player = player.model_copy(update={"has_recruiter_bonus": True})
    return EffectOutcome(player=player, costs_paid=costs_paid, notes=("recruiter hired",))


def go_viral(
    player: Player, engineer: HiredEngineer, context: EffectContext
) -> EffectOutcome:
    """Coin flip between a surge of users and a backlash."""
    del engineer
    key = ActionType.GO_VIRAL.value
    if key in context.costs_paid or context.round_number < 3:
        return _skip(player, context, "go viral unavailable")
    paid = _pay_once(player, context, key)
    if paid is None:
        return _skip(player, context, "cannot afford viral campaign")
    player, costs_paid = paid
    if context.rng.chance(0.5):
        player = player.adjust_metrics(mau=VIRAL_SUCCESS_MAU).advance_production(
            context.configuration, mau=VIRAL_SUCCESS_PRODUCTION
        )
        note = f"went viral: +{VIRAL_SUCCESS_MAU} MAU"
    else:
        player = player.adjust_metrics(mau=-VIRAL_FAILURE_MAU)
        note = f"backlash: -{VIRAL_FAILURE_MAU} MAU"
    return EffectOutcome(player=player, costs_paid=costs_paid, notes=(note,))


def ipo_prep(
    player: Player, engineer: HiredEngineer, context: EffectContext
) -> EffectOutcome:
    del engineer
    key = ActionType.IPO_PREP.value
    if key in context.costs_paid or context.round_number < 4:
        return _skip(player, context, "IPO prep unavailable")
    paid = _pay_once(player, context, key)
    if paid is None:
        return _skip(player, context, "cannot afford IPO prep")
    player, costs_paid = paid
    player = player.model_copy(
        update={"ipo_bonus_score": IPO_BONUS_SCORE}
    )
    return EffectOutcome(
        player=player, costs_paid=costs_paid, notes=(f"+{IPO_BONUS_SCORE} score",)
    )


def acquisition_target(
    player: Player, engineer: HiredEngineer, context: EffectContext
) -> EffectOutcome:
    """Sell half of the user base for bonus score."""
    del engineer
    key = ActionType.ACQUISITION_TARGET.value
    if key in context.costs_paid or context.round_number < 4:
        return _skip(player, context, "acquisition unavailable")
    score = round_half_up(player.metrics.mau * ACQUISITION_SCORE_RATE)
    remaining = round_half_up(player.metrics.mau * 0.5)
    player = player.adjust_metrics(mau=remaining - player.metrics.mau)
    player = player.model_copy(
        update={"ipo_bonus_score": player.ipo_bonus_score + score}
    )
    return EffectOutcome(
        player=player,
        costs_paid=context.costs_paid | {key},
        notes=(f"+{score} score",),
    )


EFFECT_HANDLERS: dict[ActionType, EffectHandler] = {
    ActionType.DEVELOP_FEATURES: develop_features,
    ActionType.OPTIMIZE_CODE: optimize_code,
    ActionType.PAY_DOWN_DEBT: pay_down_debt,
    ActionType.UPGRADE_SERVERS: upgrade_servers,
    ActionType.RESEARCH_AI: research_ai,
    ActionType.MARKETING: marketing,
    ActionType.MONETIZATION: monetization,
    ActionType.HIRE_RECRUITER: hire_recruiter,
    ActionType.GO_VIRAL: go_viral,
    ActionType.IPO_PREP: ipo_prep,
    ActionType.ACQUISITION_TARGET: acquisition_target,
}


class PassContext(BaseModel):
    """Values constant across one resolution pass."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    configuration: RulesConfiguration
    round_number: int = Field(..., ge=0)
    theme: QuarterlyTheme | None = None
    rng: DeterministicRandomService


class AssignmentResult(BaseModel):
    """Outcome of resolving one planned assignment end to end."""

    model_config = ConfigDict(frozen=True)

    player: Player
    costs_paid: frozenset[str]
    power: int = Field(..., ge=0)
    used_ai: bool
    applied: bool
    notes: tuple[str, ...] = Field(default_factory=tuple)


def _debt_total(player: Player) -> tuple[int, int]:
    return player.resources.tech_debt, len(player.tech_debt_buffer.tokens)


def resolve_assignment(
    player: Player,
    planned: PlannedAction,
    context: PassContext,
    *,
    costs_paid: frozenset[str],
    is_last_action: bool,
    action_cost: int,
) -> AssignmentResult:
    """Compute power, charge AI debt and apply the action effect once."""
    engineer = player.engineer(planned.engineer_id)
    action = planned.action_type
    use_ai = ai_allowed(engineer, planned.use_ai_augmentation)
    breakdown = compute_power(
        player,
        engineer,
        action,
        use_ai=use_ai,
        is_last_action=is_last_action,
        engineers_on_action=player.engineers_on(action),
        theme=context.theme,
    )

    if use_ai:
        tokens = ai_debt_tokens(player, engineer)
        player = player.add_debt_tokens(
            [debt_token_color(engineer.specialty)] * tokens
        )
        if player.has_passive(LeaderPassive.ALIGNMENT_TAX):
            player = player.adjust_metrics(rating=-1)

    rating_before = player.metrics.rating
    debt_before = player.resources.tech_debt
    buffer_before = player.tech_debt_buffer

    outcome = EFFECT_HANDLERS[action](
        player,
        engineer,
        EffectContext(
            configuration=context.configuration,
            round_number=context.round_number,
            power=breakdown.total,
            cost=action_cost,
            theme=context.theme,
            rng=context.rng,
            costs_paid=costs_paid,
        ),
    )
    player = outcome.player

    if engineer.has_persona_trait(PersonaTrait.COMMUNITY_MANAGER) and (
        player.metrics.rating < rating_before
    ):
        player = player.with_rating(rating_before)
    if engineer.has_persona_trait(PersonaTrait.ADMIRALS_DISCIPLINE) and (
        _debt_total(player) > (debt_before, len(buffer_before.tokens))
    ):
        player = player.model_copy(
            update={
                "resources": player.resources.model_copy(
                    update={"tech_debt": debt_before}
                ),
                "tech_debt_buffer": buffer_before,
            }
        )
    if player.has_passive(LeaderPassive.HYPE_MACHINE):
        player = player.adjust_metrics(
            mau=HYPE_MAU + context.rng.randint(-HYPE_VARIANCE, HYPE_VARIANCE)
        )
    if context.theme is not None and context.theme.mau_bonus_per_action:
        player = player.adjust_metrics(mau=context.theme.mau_bonus_per_action)

    return AssignmentResult(
        player=player,
        costs_paid=outcome.costs_paid,
        power=breakdown.total,
        used_ai=use_ai,
        applied=outcome.applied,
        notes=outcome.notes,
    )


__all__ = [
    "EFFECT_HANDLERS",
    "AssignmentResult",
    "EffectContext",
    "EffectHandler",
    "EffectOutcome",
    "PassContext",
    "resolve_assignment",
]
