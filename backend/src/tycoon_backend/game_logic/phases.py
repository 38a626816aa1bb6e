"""Phase identifiers and mode switches for the round state machine."""

from __future__ import annotations

from enum import StrEnum


class GamePhase(StrEnum):
    """Ordered phases a game moves through each quarter."""

    SETUP = "setup"
    LEADER_DRAFT = "leader-draft"
    FUNDING_SELECTION = "funding-selection"
    ENGINEER_DRAFT = "engineer-draft"
    PLANNING = "planning"
    ACTION_DRAFT = "action-draft"
    REVEAL = "reveal"
    SPRINT = "sprint"
    PUZZLE = "puzzle"
    RESOLUTION = "resolution"
    EVENT = "event"
    ROUND_END = "round-end"
    GAME_END = "game-end"


class PlanningMode(StrEnum):
    """How engineers are placed onto action spaces."""

    SIMULTANEOUS = "simultaneous"
    SEQUENTIAL = "sequential"
    ACTION_DRAFT = "action-draft"


class DraftMode(StrEnum):
    """How generic engineers are distributed in the engineer draft."""

    HYBRID = "hybrid"
    SEALED_BID = "sealed-bid"


class DraftPhase(StrEnum):
    """Sub-phases of the engineer draft."""

    GENERIC_DRAFT = "generic-draft"
    PERSONA_AUCTION = "persona-auction"
    COMPLETE = "complete"


class OptimizeMinigame(StrEnum):
    """Mini-game triggered by the optimize-code action."""

    SPRINT = "sprint"
    PUZZLE = "puzzle"


class TurnStep(StrEnum):
    """Sub-steps of a single turn in the action draft."""

    PLACE_ENGINEER = "place-engineer"
    PLACE_TOKENS = "place-tokens"
    SWAP_CELLS = "swap-cells"


__all__ = [
    "DraftMode",
    "DraftPhase",
    "GamePhase",
    "OptimizeMinigame",
    "PlanningMode",
    "TurnStep",
]
