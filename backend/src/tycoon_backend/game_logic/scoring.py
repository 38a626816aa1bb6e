"""Final scoring and winner selection."""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict

from tycoon_backend.game_logic.catalog.milestones import mau_threshold_vp
from tycoon_backend.game_logic.phases import GamePhase
from tycoon_backend.shared.enums import CorporationStyle

if TYPE_CHECKING:
    from tycoon_backend.game_logic.state import GameState, Player

MONEY_PER_POINT = 10


class ScoreBreakdown(BaseModel):
    """Per-source contributions to one player's final score."""

    model_config = ConfigDict(frozen=True)

    player_id: str
    style_points: int = Field(..., ge=0)
    money_points: int = Field(..., ge=0)
    milestone_points: int = Field(..., ge=0)
    bonus_points: int = Field(..., ge=0)

    @property
    def total(self) -> int:
        return (
            self.style_points
            + self.money_points
            + self.milestone_points
            + self.bonus_points
        )


def _style_points(player: Player) -> int:
    if player.corporation_style is CorporationStyle.AGENCY:
        return sum(app.vp_earned for app in player.published_apps)
    return mau_threshold_vp(player.mau_thresholds_reached) + player.committed_code_count // 2


def score_player(state: GameState, player: Player) -> ScoreBreakdown:
    """Return the final score breakdown for *player*."""
    milestone_points = sum(
        milestone.bonus
        for milestone in state.milestones
        if milestone.claimed_by == player.id
    )
    return ScoreBreakdown(
        player_id=player.id,
        style_points=_style_points(player),
        money_points=player.resources.money // MONEY_PER_POINT,
        milestone_points=milestone_points,
        bonus_points=player.ipo_bonus_score,
    )


def score_breakdowns(state: GameState) -> tuple[ScoreBreakdown, ...]:
    return tuple(score_player(state, player) for player in state.players)


def winners(state: GameState, scores: dict[str, int]) -> tuple[str, ...]:
    """Highest score wins; money then MAU break ties, remaining ties share the win."""
    if not state.players:
        return ()

    def rank(player: Player) -> tuple[int, int, int]:
        return scores[player.id], player.resources.money, player.metrics.mau

    best = max(rank(player) for player in state.players)
    return tuple(player.id for player in state.players if rank(player) == best)


def calculate_winner(state: GameState) -> GameState:
    """Store final scores and winners on the state."""
    scores = {b.player_id: b.total for b in score_breakdowns(state)}
    winner_ids = winners(state, scores)
    state = state.model_copy(
        update={
            "final_scores": scores,
            "winner_ids": winner_ids,
            "phase": GamePhase.GAME_END,
        }
    )
    return state.record("game-ended", scores=scores, winners=list(winner_ids))


__all__ = [
    "ScoreBreakdown",
    "calculate_winner",
    "score_breakdowns",
    "score_player",
    "winners",
]
