"""Action slot registry: per-round seat occupancy of the shared action spaces."""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict

from tycoon_backend.game_logic.catalog.actions import (
    DEBT_BLOCKED_ACTIONS,
    get_action_space,
)
from tycoon_backend.game_logic.catalog.debt import debt_tier
from tycoon_backend.game_logic.catalog.personas import LeaderPassive

if TYPE_CHECKING:
    from tycoon_backend.game_logic.state import GameState, Player, RoundState
    from tycoon_backend.shared.enums import ActionType


class ActionOccupancy(BaseModel):
    """Read model describing who sits on an action this round."""

    model_config = ConfigDict(frozen=True)

    action_type: str
    current: int = Field(..., ge=0)
    maximum: int | None = None
    players: tuple[str, ...] = Field(default_factory=tuple)


def seat_limit(state: GameState, player: Player, action: ActionType) -> int | None:
    """Return the number of distinct players *player* may share *action* with.

    Dual focus leaders get one extra seat on every exclusive action.
    """
    capacity = get_action_space(action).effective_capacity(len(state.players))
    if capacity is not None and player.has_passive(LeaderPassive.DUAL_FOCUS):
        capacity += 1
    return capacity


def is_blocked_by_debt(player: Player, action: ActionType) -> bool:
    return action in DEBT_BLOCKED_ACTIONS and debt_tier(
        player.resources.tech_debt
    ).blocks_development


def is_unlocked(state: GameState, action: ActionType) -> bool:
    """Return whether *action* is open this round (unlock round, theme bans)."""
    if state.current_round < get_action_space(action).unlock_round:
        return False
    theme = state.active_theme()
    return theme is None or action not in theme.restricted_actions


def has_open_seat(state: GameState, player: Player, action: ActionType) -> bool:
    occupants = state.round_state.occupants(action)
    if player.id in occupants:
        return True
    limit = seat_limit(state, player, action)
    return limit is None or len(occupants) < limit


def is_action_available(state: GameState, player: Player, action: ActionType) -> bool:
    """Return whether *player* may place another engineer on *action*."""
    return (
        is_unlocked(state, action)
        and not is_blocked_by_debt(player, action)
        and has_open_seat(state, player, action)
    )


def can_afford_action(state: GameState, player: Player, action: ActionType) -> bool:
    return player.resources.can_afford(state.action_cost(action))


def claim_seat(state: GameState, player: Player, action: ActionType) -> RoundState:
    """Seat *player* on *action*.

    A repeated claim or a claim on a full action returns the round state
    unchanged.
    """
    round_state = state.round_state
    occupants = round_state.occupants(action)
    if player.id in occupants or not has_open_seat(state, player, action):
        return round_state
    occupied = dict(round_state.occupied_actions)
    occupied[action] = (*occupants, player.id)
    return round_state.model_copy(update={"occupied_actions": occupied})


def release_seat(
    round_state: RoundState, player: Player, action: ActionType, engineer_id: str
) -> RoundState:
    """Free the seat once *player*'s last engineer leaves *action*."""
    still_there = any(
        planned.action_type is action and planned.engineer_id != engineer_id
        for planned in player.planned_actions
    )
    occupants = round_state.occupants(action)
    if still_there or player.id not in occupants:
        return round_state
    occupied = dict(round_state.occupied_actions)
    remaining = tuple(pid for pid in occupants if pid != player.id)
    if remaining:
        occupied[action] = remaining
    else:
        occupied.pop(action, None)
    return round_state.model_copy(update={"occupied_actions": occupied})


def occupancy(state: GameState, action: ActionType) -> ActionOccupancy:
    occupants = state.round_state.occupants(action)
    return ActionOccupancy(
        action_type=action.value,
        current=len(occupants),
        maximum=get_action_space(action).effective_capacity(len(state.players)),
        players=occupants,
    )


__all__ = [
    "ActionOccupancy",
    "can_afford_action",
    "claim_seat",
    "has_open_seat",
    "is_action_available",
    "is_blocked_by_debt",
    "is_unlocked",
    "occupancy",
    "release_seat",
    "seat_limit",
]
