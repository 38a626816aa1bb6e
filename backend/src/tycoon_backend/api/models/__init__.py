"""Models used for API request and response payloads."""

from tycoon_backend.api.models.session import (
    ActionCheckResponse,
    AvailableActionsResponse,
    CommandRequest,
    CommandResponse,
    CreateSessionRequest,
    CurrentPlayerResponse,
    DraftOrderResponse,
    MilestonesResponse,
    OccupancyResponse,
    PlayerScoreResponse,
    ScoresResponse,
    SessionLogsResponse,
    SessionStateResponse,
    UpcomingEventResponse,
)

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
