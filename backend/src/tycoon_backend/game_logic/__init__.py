"""Core rules and mechanics that drive Startup Tycoon gameplay."""

from tycoon_backend.game_logic.configuration import (
    LobbyOverrides,
    RulesConfiguration,
    RulesDefaults,
    build_lobby_configuration,
    get_default_rules_configuration,
)
from tycoon_backend.game_logic.errors import ProgrammerError
from tycoon_backend.game_logic.orchestration import (
    SessionAlreadyExistsError,
    SessionNotInitializedError,
    SessionOrchestrator,
)
from tycoon_backend.game_logic.persistence import (
    GameLogStore,
    GameStateSnapshot,
    GameStateStore,
    InMemoryGameLogStore,
    InMemoryGameStateStore,
)
from tycoon_backend.game_logic.phases import (
    DraftMode,
    DraftPhase,
    GamePhase,
    OptimizeMinigame,
    PlanningMode,
    TurnStep,
)
from tycoon_backend.game_logic.service import CommandOutcome, GameStateService
from tycoon_backend.game_logic.state import GameState, Player, RoundState

__all__ = [
    "CommandOutcome",
    "DraftMode",
    "DraftPhase",
    "GameLogStore",
    "GamePhase",
    "GameState",
    "GameStateService",
    "GameStateSnapshot",
    "GameStateStore",
    "InMemoryGameLogStore",
    "InMemoryGameStateStore",
    "LobbyOverrides",
    "OptimizeMinigame",
    "PlanningMode",
    "Player",
    "ProgrammerError",
    "RoundState",
    "RulesConfiguration",
    "RulesDefaults",
    "SessionAlreadyExistsError",
    "SessionNotInitializedError",
    "SessionOrchestrator",
    "TurnStep",
    "build_lobby_configuration",
    "get_default_rules_configuration",
]
