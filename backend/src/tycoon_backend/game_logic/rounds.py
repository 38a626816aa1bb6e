"""Quarter lifecycle: opening a round's draft and closing it out."""

from __future__ import annotations

from typing import TYPE_CHECKING

from tycoon_backend.game_logic.catalog.apps import generate_code_pool
from tycoon_backend.game_logic.catalog.corporations import INSIDER_INFO_EXTRA_ENGINEERS
from tycoon_backend.game_logic.catalog.debt import debt_tier
from tycoon_backend.game_logic.catalog.engineers import generate_engineer_pool
from tycoon_backend.game_logic.catalog.personas import persona_draw_count
from tycoon_backend.game_logic.catalog.themes import get_theme, theme_for_round
from tycoon_backend.game_logic.draft import order_by_mau
from tycoon_backend.game_logic.phases import DraftPhase, GamePhase
from tycoon_backend.game_logic.scoring import calculate_winner
from tycoon_backend.game_logic.state import PowerUseTracker, RoundState
from tycoon_backend.shared.enums import FundingType

if TYPE_CHECKING:
    from tycoon_backend.game_logic.state import GameState, Player

RECRUITER_EXTRA_ENGINEERS = 2


def pool_size(state: GameState, theme_id: str | None) -> int:
    """Return how many engineers enter this round's pool."""
    size = len(state.players) + 1
    size += RECRUITER_EXTRA_ENGINEERS * sum(
        1 for player in state.players if player.has_recruiter_bonus
    )
    size += INSIDER_INFO_EXTRA_ENGINEERS * sum(
        1
        for player in state.players
        if player.strategy is not None
        and player.strategy.funding is FundingType.ANGEL_BACKED
    )
    if theme_id is not None:
        size += get_theme(theme_id).extra_engineers
    return size


def begin_round(
    state: GameState, round_number: int, draft_order: tuple[str, ...]
) -> GameState:
    """Deal pool, personas, theme and code pool, then open the engineer draft."""
    rng, state = state.draw_rng()
    theme_id = theme_for_round(state.themes, round_number)
    pool = generate_engineer_pool(round_number, pool_size(state, theme_id), rng)
    draw = min(persona_draw_count(round_number), len(state.persona_deck))
    personas = tuple(reversed(state.persona_deck[len(state.persona_deck) - draw :]))
    persona_deck = state.persona_deck[: len(state.persona_deck) - draw]
    code_pool = generate_code_pool(
        len(state.players), rng, state.configuration.tokens_per_player
    )
    round_state = RoundState(
        round_number=round_number,
        engineer_pool=pool,
        persona_pool=personas,
        draft_phase=DraftPhase.GENERIC_DRAFT,
        draft_order=draft_order,
        upcoming_event_id=state.event_deck[-1] if state.event_deck else None,
        theme_id=theme_id,
        code_pool=code_pool,
        app_market=state.round_state.app_market,
    )
    players = tuple(
        player.model_copy(update={"has_recruiter_bonus": False, "is_ready": False})
        for player in state.players
    )
    state = state.model_copy(
        update={
            "current_round": round_number,
            "round_state": round_state,
            "persona_deck": persona_deck,
            "players": players,
            "phase": GamePhase.ENGINEER_DRAFT,
        }
    )
    return state.record(
        "round-started",
        f"Quarter {round_number}",
        theme_id=theme_id,
        pool_size=len(pool),
        personas=list(personas),
    )


def _production_payout(state: GameState, player: Player) -> Player:
    config = state.configuration
    tier = debt_tier(player.resources.tech_debt)
    mau_steps = max(0, player.production.mau_production - tier.mau_production_penalty)
    revenue_steps = max(
        0, player.production.revenue_production - tier.revenue_production_penalty
    )
    player = player.adjust_metrics(mau=mau_steps * config.mau_per_production)
    player = player.adjust_resources(
        money=revenue_steps * config.money_per_production + player.recurring_revenue
    )
    return player.model_copy(update={"round_powers": PowerUseTracker()})


def end_round(state: GameState) -> GameState:
    """Pay production and open the next quarter, or score the finished game."""
    if state.phase is not GamePhase.ROUND_END:
        return state
    next_round = state.current_round + 1
    if next_round > state.configuration.total_quarters:
        return calculate_winner(state)
    for player in state.players:
        state = state.replace_player(_production_payout(state, player))
    state = state.record("production-paid")
    return begin_round(state, next_round, order_by_mau(state.players))


__all__ = [
    "begin_round",
    "end_round",
    "pool_size",
]
