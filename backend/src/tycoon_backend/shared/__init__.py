"""Shared utilities, shared models and cross-cutting helpers for the backend."""

from tycoon_backend.shared.enums import (
    ActionType,
    CorporationStyle,
    EngineerLevel,
    EngineerTrait,
    FundingType,
    ProductType,
    Specialty,
    TechApproach,
    TokenColor,
)
from tycoon_backend.shared.events import LoggedEvent, PhaseLog, RoundLog
from tycoon_backend.shared.rng import DeterministicRandomService
from tycoon_backend.shared.value_objects import (
    PlayerMetrics,
    PlayerResources,
    ProductionTracks,
    TechDebtBuffer,
    clamp,
    round_half_up,
)

__all__ = [
    "ActionType",
    "CorporationStyle",
    "DeterministicRandomService",
    "EngineerLevel",
    "EngineerTrait",
    "FundingType",
    "LoggedEvent",
    "PhaseLog",
    "PlayerMetrics",
    "PlayerResources",
    "ProductType",
    "ProductionTracks",
    "RoundLog",
    "Specialty",
    "TechApproach",
    "TechDebtBuffer",
    "TokenColor",
    "clamp",
    "round_half_up",
]
