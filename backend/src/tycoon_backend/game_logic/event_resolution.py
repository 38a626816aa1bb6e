"""Apply the drawn market event to every player."""

from __future__ import annotations

from typing import TYPE_CHECKING

from tycoon_backend.game_logic.catalog.events import (
    SERVER_USERS_PER_CAPACITY,
    EventType,
    get_event,
)
from tycoon_backend.game_logic.catalog.personas import LeaderPassive, PersonaTrait
from tycoon_backend.game_logic.phases import GamePhase
from tycoon_backend.shared.enums import EngineerTrait, TokenColor
from tycoon_backend.shared.value_objects import round_half_up

if TYPE_CHECKING:
    from tycoon_backend.game_logic.catalog.events import EventEffect, GameEvent
    from tycoon_backend.game_logic.state import GameState, Player

EVENT_DEBT_COLOR = TokenColor.ORANGE
EVENT_RATING_FLOOR = 4
VIRAL_CRASH_RATING = 2


def is_mitigated(event: GameEvent, player: Player) -> bool:
    """Return whether *player* suffers the reduced effect of *event*."""
    if event.is_mitigated_by(player.resources, player.metrics):
        return True
    if any(e.trait is EngineerTrait.STARTUP_VETERAN for e in player.engineers):
        return True
    return event.type is EventType.SECURITY_BREACH and player.has_passive(
        LeaderPassive.IMMUTABLE_LEDGER
    )


def _apply_effect(player: Player, effect: EventEffect) -> Player:
    player = player.adjust_resources(
        money=effect.money,
        server_capacity=effect.server_capacity,
        ai_capacity=effect.ai_capacity,
    )
    player = player.adjust_metrics(mau=effect.mau, revenue=effect.revenue)
    if effect.rating:
        rating = player.metrics.rating + effect.rating
        if effect.rating < 0 and player.has_passive(LeaderPassive.TRUST_SAFETY):
            rating = max(rating, min(player.metrics.rating, EVENT_RATING_FLOOR))
        player = player.adjust_metrics(rating=rating - player.metrics.rating)
    if effect.tech_debt > 0:
        if not player.has_persona_trait(PersonaTrait.PROTOCOL_PURIST):
            player = player.add_debt_tokens([EVENT_DEBT_COLOR] * effect.tech_debt)
    elif effect.tech_debt < 0:
        player = player.pay_down_debt(-effect.tech_debt)
    return player


def _viral_crash(player: Player) -> Player:
    capacity = player.resources.server_capacity * SERVER_USERS_PER_CAPACITY
    overflow = player.metrics.mau - capacity
    if overflow <= 0:
        return player
    return player.adjust_metrics(
        mau=-round_half_up(overflow / 2), rating=-VIRAL_CRASH_RATING
    )


def apply_event_to_player(event: GameEvent, player: Player) -> tuple[Player, bool]:
    """Return the player after *event* and whether it was mitigated."""
    mitigated = is_mitigated(event, player)
    player = _apply_effect(player, event.reduced_effect if mitigated else event.effect)
    if not mitigated:
        if event.type is EventType.VIRAL_MOMENT:
            player = _viral_crash(player)
        if player.has_persona_trait(PersonaTrait.RESILIENCE_ARCHITECT):
            player = player.adjust_resources(server_capacity=1)
    return player, mitigated


def apply_event(state: GameState) -> GameState:
    """Resolve the current event for all players and move to round end."""
    if state.phase is not GamePhase.EVENT:
        return state
    event_id = state.round_state.current_event_id
    if event_id is not None:
        event = get_event(event_id)
        for player in sorted(state.players, key=lambda p: p.seat):
            updated, mitigated = apply_event_to_player(event, player)
            state = state.replace_player(updated)
            state = state.record(
                "event-applied",
                event.name,
                player_id=player.id,
                event_id=event.id,
                mitigated=mitigated,
            )
    return state.model_copy(update={"phase": GamePhase.ROUND_END})


__all__ = [
    "apply_event",
    "apply_event_to_player",
    "is_mitigated",
]
