"""Engineer placement for the three planning modes.

``simultaneous`` planning lets every player assign freely and lock in;
``sequential`` planning hands out placements along a MAU snake; the
``action-draft`` resolves each placement the moment it is made, pausing for
token placement after feature work and for cell swaps after optimisation.
"""

from __future__ import annotations

from tycoon_backend.game_logic.catalog.actions import INTERACTIVE_ACTIONS
from tycoon_backend.game_logic.phases import (
    GamePhase,
    OptimizeMinigame,
    PlanningMode,
    TurnStep,
)
from tycoon_backend.game_logic.power import ai_allowed
from tycoon_backend.game_logic.puzzle import start_puzzle
from tycoon_backend.game_logic.resolution import finish_action_draft, resolve_inline
from tycoon_backend.game_logic.slots import (
    can_afford_action,
    claim_seat,
    is_action_available,
    release_seat,
)
from tycoon_backend.game_logic.sprint import should_start_sprint, start_sprint
from tycoon_backend.game_logic.state import (
    GameState,
    HiredEngineer,
    PlannedAction,
    Player,
    TurnState,
)
from tycoon_backend.shared.enums import ActionType


def _unassign(state: GameState, player: Player, engineer: HiredEngineer) -> GameState:
    action = engineer.assigned_action
    if action is None:
        return state
    round_state = release_seat(state.round_state, player, action, engineer.id)
    player = player.replace_engineer(
        engineer.model_copy(
            update={"assigned_action": None, "has_ai_augmentation": False}
        )
    )
    planned = tuple(p for p in player.planned_actions if p.engineer_id != engineer.id)
    player = player.model_copy(update={"planned_actions": planned})
    return state.replace_player(player).model_copy(update={"round_state": round_state})


def _can_place(
    state: GameState, player: Player, engineer: HiredEngineer, action: ActionType
) -> bool:
    if not is_action_available(state, player, action):
        return False
    if player.has_planned(action):
        return True
    return can_afford_action(state, player, action)


def _place(
    state: GameState,
    player: Player,
    engineer: HiredEngineer,
    action: ActionType,
    *,
    use_ai: bool,
) -> tuple[GameState, PlannedAction]:
    augmented = ai_allowed(engineer, use_ai) and player.resources.ai_capacity > 0
    planned = PlannedAction(
        engineer_id=engineer.id, action_type=action, use_ai_augmentation=augmented
    )
    player = player.replace_engineer(
        engineer.model_copy(
            update={"assigned_action": action, "has_ai_augmentation": augmented}
        )
    )
    player = player.model_copy(
        update={"planned_actions": (*player.planned_actions, planned)}
    )
    state = state.replace_player(player)
    state = state.model_copy(
        update={"round_state": claim_seat(state, player, action)}
    )
    state = state.record(
        "engineer-assigned",
        player_id=player.id,
        engineer_id=engineer.id,
        action=action.value,
        use_ai=augmented,
    )
    return state, planned


def _placement_allowed(state: GameState, player: Player, mode: PlanningMode) -> bool:
    return (
        state.phase is GamePhase.PLANNING
        and state.configuration.planning_mode is mode
        and not player.is_ready
    )


def assign_engineer(
    state: GameState,
    player_id: str,
    engineer_id: str,
    action: ActionType,
    *,
    use_ai: bool = False,
) -> GameState:
    """Place or move an engineer during simultaneous planning."""
    player = state.player(player_id)
    engineer = player.engineer(engineer_id)
    if not _placement_allowed(state, player, PlanningMode.SIMULTANEOUS):
        return state
    candidate = _unassign(state, player, engineer)
    player = candidate.player(player_id)
    engineer = player.engineer(engineer_id)
    if not _can_place(candidate, player, engineer, action):
        return state
    candidate, _ = _place(candidate, player, engineer, action, use_ai=use_ai)
    return candidate


def unassign_engineer(state: GameState, player_id: str, engineer_id: str) -> GameState:
    """Take an engineer back off its action during simultaneous planning."""
    player = state.player(player_id)
    engineer = player.engineer(engineer_id)
    if not _placement_allowed(state, player, PlanningMode.SIMULTANEOUS):
        return state
    if engineer.assigned_action is None:
        return state
    state = _unassign(state, player, engineer)
    return state.record("engineer-unassigned", player_id=player_id, engineer_id=engineer_id)


def lock_plan(state: GameState, player_id: str) -> GameState:
    """Mark a plan final; once every player has locked, plans are revealed."""
    player = state.player(player_id)
    if not _placement_allowed(state, player, PlanningMode.SIMULTANEOUS):
        return state
    state = state.replace_player(player.model_copy(update={"is_ready": True}))
    state = state.record("plan-locked", player_id=player_id)
    if all(p.is_ready for p in state.players):
        state = state.model_copy(update={"phase": GamePhase.REVEAL})
    return state


def current_placer(state: GameState) -> str | None:
    """Return who places next in sequential planning or the action draft."""
    if state.phase is GamePhase.PLANNING and state.round_state.sequential is not None:
        return state.round_state.sequential.current()
    if state.phase is GamePhase.ACTION_DRAFT and state.round_state.turn is not None:
        return state.round_state.turn.current()
    return None


def _has_work(state: GameState, player_id: str, forfeited: tuple[str, ...] = ()) -> bool:
    return player_id not in forfeited and bool(state.player(player_id).unplaced_engineers())


def _next_index(
    state: GameState, order: tuple[str, ...], start: int, forfeited: tuple[str, ...] = ()
) -> int:
    """Return the next snake position with work left, wrapping around the order.

    Returns ``len(order)`` once nobody has an engineer left to place.
    """
    for offset in range(len(order)):
        index = (start + offset) % len(order)
        if _has_work(state, order[index], forfeited):
            return index
    return len(order)


def claim_action_slot(
    state: GameState,
    player_id: str,
    engineer_id: str,
    action: ActionType,
    *,
    use_ai: bool = False,
) -> GameState:
    """Place one engineer on the current picker's turn of sequential planning."""
    player = state.player(player_id)
    engineer = player.engineer(engineer_id)
    cursor = state.round_state.sequential
    if not _placement_allowed(state, player, PlanningMode.SEQUENTIAL) or cursor is None:
        return state
    if cursor.current() != player_id or engineer.assigned_action is not None:
        return state
    if not _can_place(state, player, engineer, action):
        return state
    state, _ = _place(state, player, engineer, action, use_ai=use_ai)
    index = _next_index(state, cursor.order, cursor.index + 1)
    state = state.with_round_state(sequential=cursor.model_copy(update={"index": index}))
    if index >= len(cursor.order):
        state = state.model_copy(update={"phase": GamePhase.REVEAL})
    return state


def reveal(state: GameState) -> GameState:
    """Reveal plans and start the optimize mini-game if anyone optimised."""
    if state.phase is not GamePhase.REVEAL:
        return state
    state = state.record(
        "plans-revealed",
        plans={
            p.id: [planned.action_type.value for planned in p.planned_actions]
            for p in state.players
        },
    )
    if should_start_sprint(state):
        if state.configuration.optimize_minigame is OptimizeMinigame.PUZZLE:
            return start_puzzle(state)
        return start_sprint(state)
    return state.model_copy(update={"phase": GamePhase.RESOLUTION})


def _turn_for(state: GameState, player_id: str, step: TurnStep) -> TurnState | None:
    turn = state.round_state.turn
    if state.phase is not GamePhase.ACTION_DRAFT or turn is None:
        return None
    if turn.current() != player_id or turn.step is not step:
        return None
    return turn


def advance_turn(state: GameState) -> GameState:
    """Hand the action draft to the next player with engineers left to place."""
    turn = state.round_state.turn
    if turn is None:
        return state
    index = _next_index(state, turn.order, turn.index + 1, turn.forfeited)
    turn = turn.model_copy(
        update={
            "index": index,
            "step": TurnStep.PLACE_ENGINEER,
            "engineer_id": None,
            "tokens_remaining": 0,
            "swaps_remaining": 0,
        }
    )
    state = state.with_round_state(turn=turn)
    if index >= len(turn.order):
        return finish_action_draft(state)
    return state


def claim_action_draft(
    state: GameState,
    player_id: str,
    engineer_id: str,
    action: ActionType,
    *,
    use_ai: bool = False,
) -> GameState:
    """Place and immediately resolve an engineer in the action draft."""
    player = state.player(player_id)
    engineer = player.engineer(engineer_id)
    turn = _turn_for(state, player_id, TurnStep.PLACE_ENGINEER)
    if turn is None or engineer.assigned_action is not None:
        return state
    if not _can_place(state, player, engineer, action):
        return state
    state, planned = _place(state, player, engineer, action, use_ai=use_ai)
    state, result = resolve_inline(state, player_id, planned)
    if action not in INTERACTIVE_ACTIONS or not result.applied:
        return advance_turn(state)
    if action is ActionType.DEVELOP_FEATURES:
        tokens = min(result.power, len(state.round_state.code_pool))
        if tokens == 0:
            return advance_turn(state)
        turn = turn.model_copy(
            update={
                "step": TurnStep.PLACE_TOKENS,
                "engineer_id": engineer_id,
                "tokens_remaining": tokens,
            }
        )
    else:
        if result.power == 0:
            return advance_turn(state)
        turn = turn.model_copy(
            update={
                "step": TurnStep.SWAP_CELLS,
                "engineer_id": engineer_id,
                "swaps_remaining": result.power,
            }
        )
    return state.with_round_state(turn=turn)


def place_token_on_grid(
    state: GameState, player_id: str, pool_index: int, row: int, col: int
) -> GameState:
    """Move a token from the shared code pool onto the player's grid."""
    turn = _turn_for(state, player_id, TurnStep.PLACE_TOKENS)
    if turn is None:
        return state
    pool = state.round_state.code_pool
    if not 0 <= pool_index < len(pool):
        return state
    player = state.player(player_id)
    grid = player.code_grid.place(row, col, pool[pool_index])
    if grid is None:
        return state
    state = state.replace_player(player.model_copy(update={"code_grid": grid}))
    state = state.with_round_state(code_pool=pool[:pool_index] + pool[pool_index + 1 :])
    state = state.record(
        "token-placed", player_id=player_id, color=pool[pool_index].value, row=row, col=col
    )
    remaining = turn.tokens_remaining - 1
    if remaining <= 0 or not state.round_state.code_pool:
        return advance_turn(state)
    return state.with_round_state(
        turn=turn.model_copy(update={"tokens_remaining": remaining})
    )


def swap_grid_cells(
    state: GameState,
    player_id: str,
    first: tuple[int, int],
    second: tuple[int, int],
) -> GameState:
    """Swap two adjacent grid cells while optimisation swaps remain."""
    turn = _turn_for(state, player_id, TurnStep.SWAP_CELLS)
    if turn is None or turn.swaps_remaining <= 0:
        return state
    player = state.player(player_id)
    grid = player.code_grid.swap(first, second)
    if grid is None:
        return state
    state = state.replace_player(player.model_copy(update={"code_grid": grid}))
    state = state.record(
        "cells-swapped", player_id=player_id, first=list(first), second=list(second)
    )
    remaining = turn.swaps_remaining - 1
    if remaining <= 0:
        return advance_turn(state)
    return state.with_round_state(
        turn=turn.model_copy(update={"swaps_remaining": remaining})
    )


def end_turn(state: GameState, player_id: str) -> GameState:
    """Finish the pending sub-step, or give up the rest of this round's placements."""
    turn = state.round_state.turn
    if state.phase is not GamePhase.ACTION_DRAFT or turn is None:
        return state
    if turn.current() != player_id:
        return state
    if turn.step is TurnStep.PLACE_ENGINEER:
        turn = turn.model_copy(update={"forfeited": (*turn.forfeited, player_id)})
        state = state.with_round_state(turn=turn)
        state = state.record("placements-forfeited", player_id=player_id)
    else:
        state = state.record("turn-ended", player_id=player_id, step=turn.step.value)
    return advance_turn(state)


__all__ = [
    "advance_turn",
    "assign_engineer",
    "claim_action_draft",
    "claim_action_slot",
    "current_placer",
    "end_turn",
    "lock_plan",
    "place_token_on_grid",
    "reveal",
    "swap_grid_cells",
    "unassign_engineer",
]
