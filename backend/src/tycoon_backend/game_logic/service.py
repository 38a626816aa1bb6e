"""State-owning service wrapping the pure rules transitions.

The service keeps the current immutable :class:`GameState`, applies commands
as single atomic transitions and keeps an undo/redo history. All query
methods are pure projections of the current state.
"""

from __future__ import annotations

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict

from tycoon_backend.game_logic.catalog.actions import available_actions
from tycoon_backend.game_logic.catalog.events import GameEvent, get_event
from tycoon_backend.game_logic.commands import GameCommand  # noqa: TC001
from tycoon_backend.game_logic.configuration import (
    RulesConfiguration,
    get_default_rules_configuration,
)
from tycoon_backend.game_logic.draft import current_drafter
from tycoon_backend.game_logic.phases import GamePhase
from tycoon_backend.game_logic.planning import current_placer
from tycoon_backend.game_logic.scoring import ScoreBreakdown, score_breakdowns
from tycoon_backend.game_logic.setup import init_game
from tycoon_backend.game_logic.slots import (
    ActionOccupancy,
    can_afford_action,
    is_action_available,
    occupancy,
)
from tycoon_backend.game_logic.state import GameState, Milestone
from tycoon_backend.shared.enums import ActionType  # noqa: TC001
from tycoon_backend.shared.events import LoggedEvent  # noqa: TC001
from tycoon_backend.shared.rng import DeterministicRandomService


class CommandOutcome(BaseModel):
    """Result of executing one command against the service."""

    model_config = ConfigDict(frozen=True)

    accepted: bool
    state: GameState
    events: tuple[LoggedEvent, ...] = Field(default_factory=tuple)


class GameStateService:
    """Own a game's state and expose its commands and queries.

    Rejected commands leave both the state and the history untouched, so a
    rejected command repeated any number of times is indistinguishable from
    never having sent it.
    """

    def __init__(self, state: GameState) -> None:
        self._state = state
        self._undo: list[GameState] = []
        self._redo: list[GameState] = []

    @classmethod
    def new_game(
        cls,
        player_count: int,
        *,
        configuration: RulesConfiguration | None = None,
        seed: int | None = None,
    ) -> GameStateService:
        """Start a game; the seed falls back to the configuration or a random one."""
        configuration = configuration or get_default_rules_configuration()
        if seed is None:
            seed = configuration.seed
        if seed is None:
            seed = DeterministicRandomService().randint(0, 2**31 - 1)
        return cls(init_game(configuration, player_count, seed))

    @property
    def state(self) -> GameState:
        return self._state

    @property
    def can_undo(self) -> bool:
        return bool(self._undo)

    @property
    def can_redo(self) -> bool:
        return bool(self._redo)

    def execute(self, command: GameCommand) -> CommandOutcome:
        """Apply *command*; ``accepted`` is false when the move was illegal."""
        previous = self._state
        updated = command.apply(previous)
        if updated is previous:
            return CommandOutcome(accepted=False, state=previous)
        self._undo.append(previous)
        self._redo.clear()
        self._state = updated
        return CommandOutcome(
            accepted=True,
            state=updated,
            events=updated.journal[len(previous.journal) :],
        )

    def undo(self) -> bool:
        if not self._undo:
            return False
        self._redo.append(self._state)
        self._state = self._undo.pop()
        return True

    def redo(self) -> bool:
        if not self._redo:
            return False
        self._undo.append(self._state)
        self._state = self._redo.pop()
        return True

    def current_player(self) -> str | None:
        """Return the id of the player expected to move, when turns apply."""
        state = self._state
        if state.phase is GamePhase.ENGINEER_DRAFT:
            return current_drafter(state)
        if state.phase is GamePhase.SPRINT and state.round_state.sprint is not None:
            return state.round_state.sprint.current_player_id()
        return current_placer(state)

    def occupancy(self, action: ActionType) -> ActionOccupancy:
        return occupancy(self._state, action)

    def can_afford(self, player_id: str, action: ActionType) -> bool:
        state = self._state
        return can_afford_action(state, state.player(player_id), action)

    def is_available(self, player_id: str, action: ActionType) -> bool:
        state = self._state
        return is_action_available(state, state.player(player_id), action)

    def milestones(self) -> tuple[Milestone, ...]:
        return self._state.milestones

    def draft_order(self) -> tuple[str, ...]:
        return self._state.round_state.draft_order

    def available_actions(self) -> tuple[ActionType, ...]:
        """Return actions unlocked this round and not banned by the theme."""
        state = self._state
        theme = state.active_theme()
        restricted = theme.restricted_actions if theme is not None else ()
        return tuple(
            action
            for action in available_actions(state.current_round)
            if action not in restricted
        )

    def upcoming_event(self) -> GameEvent | None:
        event_id = self._state.round_state.upcoming_event_id
        return get_event(event_id) if event_id is not None else None

    def scores(self) -> tuple[ScoreBreakdown, ...]:
        return score_breakdowns(self._state)


__all__ = ["CommandOutcome", "GameStateService"]
