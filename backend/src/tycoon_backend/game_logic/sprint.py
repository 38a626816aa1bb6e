"""Push-your-luck sprint played when engineers are sent to optimize code."""

from __future__ import annotations

from tycoon_backend.game_logic.phases import GamePhase
from tycoon_backend.game_logic.state import (
    BACKEND_REVERT_POWER,
    GameState,
    Player,
    SprintPlayerState,
    SprintState,
    SprintToken,
    SprintTokenKind,
)
from tycoon_backend.shared.enums import ActionType, Specialty
from tycoon_backend.shared.rng import DeterministicRandomService  # noqa: TC001

BAG_COMPOSITION: tuple[tuple[SprintTokenKind, int, int], ...] = (
    (SprintTokenKind.CLEAN_CODE, 8, 1),
    (SprintTokenKind.GREAT_CODE, 3, 2),
    (SprintTokenKind.BUG, 3, 0),
    (SprintTokenKind.CRITICAL_BUG, 1, 0),
)
CRASH_THRESHOLD = 3
SPRINT_RATING_BONUS = 1


def create_sprint_bag(rng: DeterministicRandomService) -> tuple[SprintToken, ...]:
    """Return the shuffled bag; tokens are drawn from the end."""
    tokens = [
        SprintToken(id=f"{kind.value}-{index + 1}", kind=kind, value=value)
        for kind, count, value in BAG_COMPOSITION
        for index in range(count)
    ]
    return rng.shuffle(tokens)


def max_draws(optimize_engineers: int) -> int:
    """Non-participants get a single free draw."""
    if optimize_engineers <= 0:
        return 1
    if optimize_engineers == 1:
        return 5
    if optimize_engineers == 2:
        return 7
    return 9


def _can_revert(player: Player) -> bool:
    return not player.powers.has_used(BACKEND_REVERT_POWER) and any(
        engineer.specialty is Specialty.BACKEND for engineer in player.engineers
    )


def should_start_sprint(state: GameState) -> bool:
    return any(p.has_planned(ActionType.OPTIMIZE_CODE) for p in state.players)


def start_sprint(state: GameState) -> GameState:
    """Fill the bag and seat every player in turn order."""
    rng, state = state.draw_rng()
    players = tuple(
        SprintPlayerState(
            player_id=player.id,
            max_draws=max_draws(player.engineers_on(ActionType.OPTIMIZE_CODE)),
            revert_available=_can_revert(player),
            is_participant=player.has_planned(ActionType.OPTIMIZE_CODE),
        )
        for player in sorted(state.players, key=lambda p: p.seat)
    )
    sprint = SprintState(bag=create_sprint_bag(rng), players=players)
    state = state.with_round_state(sprint=sprint)
    state = state.model_copy(update={"phase": GamePhase.SPRINT})
    return state.record("sprint-started", bag_size=len(sprint.bag))


def _replace_entry(sprint: SprintState, entry: SprintPlayerState) -> SprintState:
    players = tuple(
        entry if current.player_id == entry.player_id else current
        for current in sprint.players
    )
    return sprint.model_copy(update={"players": players})


def _advance(sprint: SprintState) -> SprintState:
    """Move the cursor to the next player still drawing, or finish."""
    if not sprint.players[sprint.current_index].is_done and sprint.bag:
        return sprint
    size = len(sprint.players)
    if sprint.bag:
        for step in range(1, size + 1):
            index = (sprint.current_index + step) % size
            if not sprint.players[index].is_done:
                return sprint.model_copy(update={"current_index": index})
    return sprint.model_copy(update={"complete": True})


def _active_sprint(state: GameState, player_id: str) -> SprintState | None:
    sprint = state.round_state.sprint
    if state.phase is not GamePhase.SPRINT or sprint is None:
        return None
    if sprint.current_player_id() != player_id:
        return None
    return sprint


def draw_sprint_token(state: GameState, player_id: str) -> GameState:
    """Draw the next token for the current sprinter."""
    sprint = _active_sprint(state, player_id)
    if sprint is None or not sprint.bag:
        return state
    entry = sprint.players[sprint.current_index]
    if entry.is_done:
        return state
    token = sprint.bag[-1]
    sprint = sprint.model_copy(update={"bag": sprint.bag[:-1]})
    update: dict[str, object] = {"drawn": (*entry.drawn, token)}
    reverted = False
    if token.is_bug and entry.revert_available:
        reverted = True
        update["revert_available"] = False
        player = state.player(player_id)
        state = state.replace_player(
            player.model_copy(update={"powers": player.powers.mark(BACKEND_REVERT_POWER)})
        )
    elif token.is_bug:
        bugs = entry.bug_count + token.bug_weight
        update["bug_count"] = bugs
        update["crashed"] = bugs >= CRASH_THRESHOLD
    else:
        update["clean_code_total"] = entry.clean_code_total + token.value
    entry = entry.model_copy(update=update)
    sprint = _advance(_replace_entry(sprint, entry))
    state = state.with_round_state(sprint=sprint)
    return state.record(
        "sprint-draw",
        player_id=player_id,
        token=token.kind.value,
        reverted=reverted,
        crashed=entry.crashed,
    )


def stop_sprint(state: GameState, player_id: str) -> GameState:
    """Bank the current total and hand the bag to the next player."""
    sprint = _active_sprint(state, player_id)
    if sprint is None:
        return state
    entry = sprint.players[sprint.current_index].model_copy(update={"stopped": True})
    sprint = _advance(_replace_entry(sprint, entry))
    state = state.with_round_state(sprint=sprint)
    return state.record("sprint-stopped", player_id=player_id, total=entry.clean_code_total)


def end_sprint(state: GameState) -> GameState:
    """Convert sprint totals into debt reduction and the best-total rating bonus."""
    sprint = state.round_state.sprint
    if state.phase is not GamePhase.SPRINT or sprint is None:
        return state
    best = max((entry.effective_total for entry in sprint.players), default=0)
    for entry in sprint.players:
        player = state.player(entry.player_id)
        total = entry.effective_total
        if total > 0:
            player = player.pay_down_debt(total)
        if total > 0 and total == best:
            player = player.adjust_metrics(rating=SPRINT_RATING_BONUS)
        state = state.replace_player(player)
    sprint = sprint.model_copy(update={"complete": True})
    state = state.with_round_state(sprint=sprint)
    state = state.model_copy(update={"phase": GamePhase.RESOLUTION})
    return state.record(
        "sprint-ended",
        totals={entry.player_id: entry.effective_total for entry in sprint.players},
    )


__all__ = [
    "BAG_COMPOSITION",
    "CRASH_THRESHOLD",
    "create_sprint_bag",
    "draw_sprint_token",
    "end_sprint",
    "max_draws",
    "should_start_sprint",
    "start_sprint",
    "stop_sprint",
]
