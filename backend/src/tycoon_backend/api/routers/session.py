"""HTTP endpoints for creating and playing game sessions."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager

from fastapi import APIRouter, Depends, HTTPException, status

from tycoon_backend.api.dependencies import get_game_session_service
from tycoon_backend.api.models import (
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
from tycoon_backend.api.services import GameSessionService  # noqa: TC001
from tycoon_backend.game_logic import (
    GamePhase,
    ProgrammerError,
    SessionAlreadyExistsError,
    SessionNotInitializedError,
)
from tycoon_backend.shared import ActionType  # noqa: TC001

router = APIRouter(prefix="/sessions", tags=["session"])


@contextmanager
def _session_errors() -> Iterator[None]:
    """Translate orchestration and rules errors into HTTP responses."""
    try:
        yield
    except SessionNotInitializedError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)
        ) from exc
    except SessionAlreadyExistsError as exc:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT, detail=str(exc)
        ) from exc
    except ProgrammerError as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)
        ) from exc


@router.post(
    "",
    response_model=SessionStateResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_session(
    payload: CreateSessionRequest,
    service: GameSessionService = Depends(get_game_session_service),
) -> SessionStateResponse:
    """Start a new game in the leader draft."""
    with _session_errors():
        session_id, snapshot = service.create_session(
            payload.player_count,
            session_id=payload.session_id,
            overrides=payload.overrides,
            seed=payload.seed,
        )
    return SessionStateResponse(
        session_id=session_id, version=snapshot.version, state=snapshot.state
    )


@router.get("/{session_id}", response_model=SessionStateResponse)
def get_session(
    session_id: str,
    service: GameSessionService = Depends(get_game_session_service),
) -> SessionStateResponse:
    with _session_errors():
        snapshot = service.get_snapshot(session_id)
    return SessionStateResponse(
        session_id=session_id, version=snapshot.version, state=snapshot.state
    )


@router.post("/{session_id}/commands", response_model=CommandResponse)
def execute_command(
    session_id: str,
    payload: CommandRequest,
    service: GameSessionService = Depends(get_game_session_service),
) -> CommandResponse:
    """Apply one command; illegal moves are reported, not raised."""
    with _session_errors():
        outcome = service.execute(session_id, payload.command)
    return CommandResponse(
        accepted=outcome.accepted,
        phase=outcome.state.phase,
        current_round=outcome.state.current_round,
        events=outcome.events,
    )


@router.get("/{session_id}/logs", response_model=SessionLogsResponse)
def get_logs(
    session_id: str,
    service: GameSessionService = Depends(get_game_session_service),
) -> SessionLogsResponse:
    with _session_errors():
        logs = service.get_logs(session_id)
    return SessionLogsResponse(session_id=session_id, logs=logs)


@router.get("/{session_id}/scores", response_model=ScoresResponse)
def get_scores(
    session_id: str,
    service: GameSessionService = Depends(get_game_session_service),
) -> ScoresResponse:
    with _session_errors():
        queries = service.queries(session_id)
    state = queries.state
    return ScoresResponse(
        final=state.phase is GamePhase.GAME_END,
        scores=tuple(
            PlayerScoreResponse.from_breakdown(breakdown)
            for breakdown in queries.scores()
        ),
        winner_ids=state.winner_ids,
    )


@router.get("/{session_id}/current-player", response_model=CurrentPlayerResponse)
def get_current_player(
    session_id: str,
    service: GameSessionService = Depends(get_game_session_service),
) -> CurrentPlayerResponse:
    with _session_errors():
        queries = service.queries(session_id)
    return CurrentPlayerResponse(
        phase=queries.state.phase, player_id=queries.current_player()
    )


@router.get(
    "/{session_id}/actions/{action}/occupancy", response_model=OccupancyResponse
)
def get_occupancy(
    session_id: str,
    action: ActionType,
    service: GameSessionService = Depends(get_game_session_service),
) -> OccupancyResponse:
    with _session_errors():
        queries = service.queries(session_id)
    return OccupancyResponse(occupancy=queries.occupancy(action))


@router.get(
    "/{session_id}/actions/{action}/availability", response_model=ActionCheckResponse
)
def get_availability(
    session_id: str,
    action: ActionType,
    player_id: str,
    service: GameSessionService = Depends(get_game_session_service),
) -> ActionCheckResponse:
    with _session_errors():
        allowed = service.queries(session_id).is_available(player_id, action)
    return ActionCheckResponse(player_id=player_id, action=action, allowed=allowed)


@router.get(
    "/{session_id}/actions/{action}/affordability", response_model=ActionCheckResponse
)
def get_affordability(
    session_id: str,
    action: ActionType,
    player_id: str,
    service: GameSessionService = Depends(get_game_session_service),
) -> ActionCheckResponse:
    with _session_errors():
        allowed = service.queries(session_id).can_afford(player_id, action)
    return ActionCheckResponse(player_id=player_id, action=action, allowed=allowed)


@router.get("/{session_id}/available-actions", response_model=AvailableActionsResponse)
def get_available_actions(
    session_id: str,
    service: GameSessionService = Depends(get_game_session_service),
) -> AvailableActionsResponse:
    with _session_errors():
        queries = service.queries(session_id)
    return AvailableActionsResponse(
        round_number=queries.state.current_round, actions=queries.available_actions()
    )


@router.get("/{session_id}/milestones", response_model=MilestonesResponse)
def get_milestones(
    session_id: str,
    service: GameSessionService = Depends(get_game_session_service),
) -> MilestonesResponse:
    with _session_errors():
        queries = service.queries(session_id)
    return MilestonesResponse(milestones=queries.milestones())


@router.get("/{session_id}/draft-order", response_model=DraftOrderResponse)
def get_draft_order(
    session_id: str,
    service: GameSessionService = Depends(get_game_session_service),
) -> DraftOrderResponse:
    with _session_errors():
        queries = service.queries(session_id)
    return DraftOrderResponse(
        round_number=queries.state.current_round, draft_order=queries.draft_order()
    )


@router.get("/{session_id}/upcoming-event", response_model=UpcomingEventResponse)
def get_upcoming_event(
    session_id: str,
    service: GameSessionService = Depends(get_game_session_service),
) -> UpcomingEventResponse:
    with _session_errors():
        queries = service.queries(session_id)
    return UpcomingEventResponse(event=queries.upcoming_event())


__all__ = ["router"]
