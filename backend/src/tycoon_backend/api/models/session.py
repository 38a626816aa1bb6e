"""Pydantic models for the game session HTTP contract."""

# ruff: noqa: TC001

from __future__ import annotations

from pydantic import BaseModel, Field

from tycoon_backend.game_logic.catalog.events import GameEvent
from tycoon_backend.game_logic.commands import GameCommand
from tycoon_backend.game_logic.configuration import LobbyOverrides
from tycoon_backend.game_logic.phases import GamePhase
from tycoon_backend.game_logic.scoring import ScoreBreakdown
from tycoon_backend.game_logic.slots import ActionOccupancy
from tycoon_backend.game_logic.state import GameState, Milestone
from tycoon_backend.shared import ActionType, LoggedEvent, PhaseLog


class CreateSessionRequest(BaseModel):
    """Client request to start a new game."""

    player_count: int = Field(..., ge=1, le=8)
    session_id: str | None = Field(default=None, min_length=1, max_length=64)
    seed: int | None = None
    overrides: LobbyOverrides | None = None


class SessionStateResponse(BaseModel):
    """Full state of a session at its latest version."""

    session_id: str
    version: int
    state: GameState


class CommandRequest(BaseModel):
    """Envelope carrying one game command."""

    command: GameCommand


class CommandResponse(BaseModel):
    """Outcome of one command; rejected moves come back with ``accepted`` false."""

    accepted: bool
    phase: GamePhase
    current_round: int
    events: tuple[LoggedEvent, ...] = Field(default_factory=tuple)


class SessionLogsResponse(BaseModel):
    session_id: str
    logs: tuple[PhaseLog, ...]


class PlayerScoreResponse(BaseModel):
    player_id: str
    style_points: int
    money_points: int
    milestone_points: int
    bonus_points: int
    total: int

    @classmethod
    def from_breakdown(cls, breakdown: ScoreBreakdown) -> PlayerScoreResponse:
        return cls(**breakdown.model_dump(), total=breakdown.total)


class ScoresResponse(BaseModel):
    """Live score breakdowns; ``winner_ids`` is filled once the game ended."""

    final: bool
    scores: tuple[PlayerScoreResponse, ...]
    winner_ids: tuple[str, ...] = Field(default_factory=tuple)


class CurrentPlayerResponse(BaseModel):
    phase: GamePhase
    player_id: str | None = None


class OccupancyResponse(BaseModel):
    occupancy: ActionOccupancy


class ActionCheckResponse(BaseModel):
    """Answer to an availability or affordability check."""

    player_id: str
    action: ActionType
    allowed: bool


class MilestonesResponse(BaseModel):
    milestones: tuple[Milestone, ...]


class DraftOrderResponse(BaseModel):
    round_number: int
    draft_order: tuple[str, ...]


class AvailableActionsResponse(BaseModel):
    round_number: int
    actions: tuple[ActionType, ...]


class UpcomingEventResponse(BaseModel):
    event: GameEvent | None = None


__all__ = [
    "ActionCheckResponse",
    "AvailableActionsResponse",
    "CommandRequest",
    "CommandResponse",
    "CreateSessionRequest",
    "CurrentPlayerResponse",
    "DraftOrderResponse",
    "MilestonesResponse",
    "OccupancyResponse",
    "PlayerScoreResponse",
    "ScoresResponse",
    "SessionLogsResponse",
    "SessionStateResponse",
    "UpcomingEventResponse",
]
