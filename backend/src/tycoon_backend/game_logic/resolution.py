"""Resolution pass: apply planned actions, whole-player upkeep and income.

Resolution runs in two phases. First every player's planned actions resolve
in seat order; then upkeep runs for every player against the post-action
board, so the underdog median sees everyone's new MAU. Cross-player passives
read the plans as they stood before anything resolved.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from tycoon_backend.game_logic.catalog.debt import debt_tier
from tycoon_backend.game_logic.catalog.milestones import (
    mau_thresholds_for,
    milestone_reached,
)
from tycoon_backend.game_logic.catalog.personas import LeaderPassive, PersonaTrait
from tycoon_backend.game_logic.effects import (
    AssignmentResult,
    PassContext,
    resolve_assignment,
)
from tycoon_backend.game_logic.phases import GamePhase
from tycoon_backend.game_logic.puzzle import apply_puzzle_reward
from tycoon_backend.shared.enums import ActionType, TechApproach
from tycoon_backend.shared.value_objects import round_half_up

if TYPE_CHECKING:
    from tycoon_backend.game_logic.state import GameState, PlannedAction, Player

PlanSnapshot = dict[str, frozenset[ActionType]]

NETWORK_EFFECTS_MAU = 500
MARKETPLACE_TAX = 3
CRISIS_RESILIENCE_MAU = 200
AD_NETWORK_MONEY = 5
INFRASTRUCTURE_SERVERS = 2
PHILANTHROPIST_MONEY = 5
TRUST_SAFETY_FLOOR = 4
SUBSCRIBER_LOYALTY_RATING = 6


def plan_snapshot(state: GameState) -> PlanSnapshot:
    """Capture which actions each player planned before resolution."""
    return {
        player.id: frozenset(planned.action_type for planned in player.planned_actions)
        for player in state.players
    }


def _pass_context(state: GameState) -> tuple[PassContext, GameState]:
    rng, state = state.draw_rng()
    context = PassContext(
        configuration=state.configuration,
        round_number=state.current_round,
        theme=state.active_theme(),
        rng=rng,
    )
    return context, state


def _record_result(
    state: GameState, player_id: str, planned: PlannedAction, result: AssignmentResult
) -> GameState:
    return state.record(
        "action-resolved" if result.applied else "action-skipped",
        "; ".join(result.notes) or None,
        player_id=player_id,
        engineer_id=planned.engineer_id,
        action=planned.action_type.value,
        power=result.power,
        used_ai=result.used_ai,
    )


def _resolve_one(
    state: GameState,
    context: PassContext,
    player_id: str,
    planned: PlannedAction,
    *,
    is_last_action: bool,
) -> tuple[GameState, AssignmentResult]:
    player = state.player(player_id)
    costs = state.round_state.costs_paid.get(player_id, frozenset())
    result = resolve_assignment(
        player,
        planned,
        context,
        costs_paid=costs,
        is_last_action=is_last_action,
        action_cost=state.action_cost(planned.action_type),
    )
    state = state.replace_player(result.player)
    costs_paid = {**state.round_state.costs_paid, player_id: result.costs_paid}
    state = state.with_round_state(costs_paid=costs_paid)
    return _record_result(state, player_id, planned, result), result


def resolve_inline(
    state: GameState, player_id: str, planned: PlannedAction
) -> tuple[GameState, AssignmentResult]:
    """Resolve one freshly placed engineer during the action draft."""
    context, state = _pass_context(state)
    is_last = not state.player(player_id).unplaced_engineers()
    return _resolve_one(state, context, player_id, planned, is_last_action=is_last)


def median_mau(players: tuple[Player, ...]) -> int:
    """Return the upper median MAU across *players*."""
    values = sorted(player.metrics.mau for player in players)
    if not values:
        return 0
    return values[len(values) // 2]


def _opponents_planned(snapshot: PlanSnapshot, player_id: str) -> list[frozenset[ActionType]]:
    return [actions for pid, actions in snapshot.items() if pid != player_id]


def upkeep(
    state: GameState, player: Player, snapshot: PlanSnapshot, median: int
) -> tuple[Player, int]:
    """Apply whole-player adjustments after a pass; return the player and income."""
    config = state.configuration
    theme = state.active_theme()
    tier = debt_tier(player.resources.tech_debt)
    player = player.adjust_metrics(rating=-tier.rating_penalty)
    if player.strategy is not None and player.strategy.tech is TechApproach.QUALITY_FOCUSED:
        player = player.adjust_metrics(rating=1)
    if player.has_passive(LeaderPassive.PERFECTIONIST) and state.current_round % 2 == 0:
        player = player.adjust_metrics(rating=1)
    if player.has_passive(LeaderPassive.AD_NETWORK):
        player = player.adjust_resources(money=AD_NETWORK_MONEY)
    if player.has_passive(LeaderPassive.INFRASTRUCTURE_EMPIRE):
        player = player.adjust_resources(server_capacity=INFRASTRUCTURE_SERVERS)
    if (
        player.has_passive(LeaderPassive.SUBSCRIBER_LOYALTY)
        and player.metrics.rating >= SUBSCRIBER_LOYALTY_RATING
    ):
        player = player.advance_production(config, revenue=1)
    philanthropists = sum(
        1 for e in player.engineers if e.has_persona_trait(PersonaTrait.PHILANTHROPIST)
    )
    if philanthropists:
        player = player.adjust_resources(money=PHILANTHROPIST_MONEY * philanthropists)

    opponents = _opponents_planned(snapshot, player.id)
    if player.has_passive(LeaderPassive.NETWORK_EFFECTS) and any(
        ActionType.MARKETING in actions for actions in snapshot.values()
    ):
        player = player.adjust_metrics(mau=NETWORK_EFFECTS_MAU)
    if player.has_passive(LeaderPassive.MARKETPLACE_TAX):
        developers = sum(1 for a in opponents if ActionType.DEVELOP_FEATURES in a)
        player = player.adjust_resources(money=MARKETPLACE_TAX * developers)
    if player.has_passive(LeaderPassive.CRISIS_RESILIENCE) and any(
        ActionType.MARKETING in a or ActionType.GO_VIRAL in a for a in opponents
    ):
        player = player.adjust_metrics(mau=CRISIS_RESILIENCE_MAU)
    if (
        player.has_passive(LeaderPassive.TRUST_SAFETY)
        and player.metrics.rating < TRUST_SAFETY_FLOOR
    ):
        player = player.with_rating(TRUST_SAFETY_FLOOR)

    player = player.advance_production(config)
    income = min(
        round_half_up(player.metrics.mau / 100), config.income_cap(state.current_round)
    )
    if theme is not None:
        income += theme.income_bonus
    if player.metrics.mau < median:
        income += config.underdog_stipend
    return player.adjust_resources(money=income), income


def apply_upkeep(state: GameState, snapshot: PlanSnapshot) -> GameState:
    """Run :func:`upkeep` for every player against the post-action median."""
    median = median_mau(state.players)
    for player in sorted(state.players, key=lambda p: p.seat):
        updated, income = upkeep(state, player, snapshot, median)
        state = state.replace_player(updated)
        state = state.record("income", player_id=player.id, amount=income)
    return state


def check_milestones(state: GameState) -> GameState:
    """Award each unclaimed milestone to the first qualifying player in seat order."""
    seated = sorted(state.players, key=lambda p: p.seat)
    milestones = []
    for milestone in state.milestones:
        if milestone.claimed_by is None:
            for player in seated:
                if milestone_reached(milestone.id, player, state.current_round):
                    milestone = milestone.model_copy(
                        update={
                            "claimed_by": player.id,
                            "claimed_round": state.current_round,
                        }
                    )
                    state = state.record(
                        "milestone-claimed",
                        milestone.name,
                        player_id=player.id,
                        milestone_id=milestone.id,
                        bonus=milestone.bonus,
                    )
                    break
        milestones.append(milestone)
    return state.model_copy(update={"milestones": tuple(milestones)})


def _reset_after_pass(player: Player) -> Player:
    engineers = tuple(
        engineer.model_copy(
            update={
                "assigned_action": None,
                "has_ai_augmentation": False,
                "rounds_retained": engineer.rounds_retained + 1,
            }
        )
        for engineer in player.engineers
    )
    reached = tuple(
        sorted(set(player.mau_thresholds_reached) | set(mau_thresholds_for(player.metrics.mau)))
    )
    return player.model_copy(
        update={
            "engineers": engineers,
            "planned_actions": (),
            "is_ready": False,
            "mau_thresholds_reached": reached,
        }
    )


def draw_event(state: GameState) -> GameState:
    """Turn the top of the event deck into the current event."""
    if not state.event_deck:
        return state.with_round_state(current_event_id=None, upcoming_event_id=None)
    event_id = state.event_deck[-1]
    deck = state.event_deck[:-1]
    state = state.model_copy(
        update={"event_deck": deck, "used_events": (*state.used_events, event_id)}
    )
    state = state.with_round_state(
        current_event_id=event_id, upcoming_event_id=deck[-1] if deck else None
    )
    return state.record("event-drawn", event_id=event_id)


def close_resolution(state: GameState) -> GameState:
    """Clear plans, age engineers, check milestones and reveal the event."""
    players = tuple(_reset_after_pass(player) for player in state.players)
    state = state.model_copy(update={"players": players})
    state = check_milestones(state)
    state = state.with_round_state(
        occupied_actions={}, costs_paid={}, sequential=None, turn=None
    )
    state = draw_event(state)
    return state.model_copy(update={"phase": GamePhase.EVENT})


def resolve_actions(state: GameState) -> GameState:
    """Resolve every planned action once, then run upkeep and move to the event."""
    if state.phase is not GamePhase.RESOLUTION:
        return state
    state = apply_puzzle_reward(state)
    snapshot = plan_snapshot(state)
    context, state = _pass_context(state)
    for player in sorted(state.players, key=lambda p: p.seat):
        planned_actions = player.planned_actions
        for index, planned in enumerate(planned_actions):
            state, _ = _resolve_one(
                state,
                context,
                player.id,
                planned,
                is_last_action=index == len(planned_actions) - 1,
            )
    state = apply_upkeep(state, snapshot)
    return close_resolution(state)


def finish_action_draft(state: GameState) -> GameState:
    """Close an action draft whose engineers have all resolved inline."""
    if state.phase is not GamePhase.ACTION_DRAFT:
        return state
    state = state.model_copy(update={"phase": GamePhase.RESOLUTION})
    state = apply_upkeep(state, plan_snapshot(state))
    return close_resolution(state)


__all__ = [
    "PlanSnapshot",
    "apply_upkeep",
    "check_milestones",
    "close_resolution",
    "draw_event",
    "finish_action_draft",
    "median_mau",
    "plan_snapshot",
    "resolve_actions",
    "resolve_inline",
    "upkeep",
]
