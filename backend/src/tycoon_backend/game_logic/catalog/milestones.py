"""First-claim milestones and the MAU thresholds scored by product companies."""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict

from tycoon_backend.game_logic.errors import ProgrammerError
from tycoon_backend.game_logic.state import Milestone

if TYPE_CHECKING:
    from tycoon_backend.game_logic.state import Player


class MilestoneDefinition(BaseModel):
    """Static milestone data; the claim condition lives in ``_CONDITIONS``."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    description: str
    bonus: int = Field(..., ge=0)


MILESTONE_DEFINITIONS: tuple[MilestoneDefinition, ...] = (
    MilestoneDefinition(
        id="first-5k-mau",
        name="First to 5K Users",
        description="First player to reach 5,000 MAU.",
        bonus=10,
    ),
    MilestoneDefinition(
        id="first-9-rating",
        name="Five Star Startup",
        description="First player to reach a rating of 9.",
        bonus=15,
    ),
    MilestoneDefinition(
        id="first-debt-free",
        name="Clean Code Club",
        description="First player with zero tech debt after the first quarter.",
        bonus=10,
    ),
    MilestoneDefinition(
        id="first-10k-mau",
        name="Growth Hacker",
        description="First player to reach 10,000 MAU.",
        bonus=15,
    ),
    MilestoneDefinition(
        id="revenue-leader",
        name="Revenue King",
        description="First player to reach $1,000 revenue.",
        bonus=12,
    ),
)

_CONDITIONS: dict[str, Callable[[Player, int], bool]] = {
    "first-5k-mau": lambda player, _: player.metrics.mau >= 5000,
    "first-9-rating": lambda player, _: player.metrics.rating >= 9,
    "first-debt-free": lambda player, round_number: (
        player.resources.tech_debt == 0 and round_number > 1
    ),
    "first-10k-mau": lambda player, _: player.metrics.mau >= 10000,
    "revenue-leader": lambda player, _: player.metrics.revenue >= 1000,
}

MAU_VP_THRESHOLDS: tuple[tuple[int, int], ...] = (
    (1000, 1),
    (2500, 2),
    (5000, 3),
    (10000, 4),
)


def create_milestones() -> tuple[Milestone, ...]:
    """Return the unclaimed milestone track for a new game."""
    return tuple(
        Milestone(id=definition.id, name=definition.name, bonus=definition.bonus)
        for definition in MILESTONE_DEFINITIONS
    )


def milestone_reached(milestone_id: str, player: Player, round_number: int) -> bool:
    """Return whether *player* currently satisfies milestone *milestone_id*."""
    condition = _CONDITIONS.get(milestone_id)
    if condition is None:
        msg = f"Unknown milestone '{milestone_id}'."
        raise ProgrammerError(msg)
    return condition(player, round_number)


def mau_thresholds_for(mau: int) -> tuple[int, ...]:
    """Return every MAU threshold reached by *mau*."""
    return tuple(threshold for threshold, _ in MAU_VP_THRESHOLDS if mau >= threshold)


def mau_threshold_vp(thresholds: tuple[int, ...]) -> int:
    """Sum the VP of the given reached thresholds."""
    reached = set(thresholds)
    return sum(vp for threshold, vp in MAU_VP_THRESHOLDS if threshold in reached)


__all__ = [
    "MAU_VP_THRESHOLDS",
    "MILESTONE_DEFINITIONS",
    "MilestoneDefinition",
    "create_milestones",
    "mau_threshold_vp",
    "mau_thresholds_for",
    "milestone_reached",
]
