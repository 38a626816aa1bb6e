"""Action space definitions: seat limits, costs and unlock rounds."""

from __future__ import annotations

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict

from tycoon_backend.game_logic.errors import ProgrammerError
from tycoon_backend.shared.enums import ActionType


class ActionSpace(BaseModel):
    """Static description of an action engineers can be placed on."""

    model_config = ConfigDict(frozen=True)

    action_type: ActionType
    name: str
    description: str
    max_seats: int | None = Field(default=None, ge=1)
    cost: int = Field(default=0, ge=0)
    unlock_round: int = Field(default=1, ge=1)

    def effective_capacity(self, player_count: int) -> int | None:
        """Return the seat limit for a game with *player_count* players."""
        if self.max_seats is None:
            return None
        return min(self.max_seats, player_count)


ACTION_SPACES: tuple[ActionSpace, ...] = (
    ActionSpace(
        action_type=ActionType.DEVELOP_FEATURES,
        name="Develop Features",
        description="Build new features to attract users.",
        max_seats=3,
    ),
    ActionSpace(
        action_type=ActionType.OPTIMIZE_CODE,
        name="Optimize Code",
        description="Refactor the codebase; triggers the optimize mini-game.",
    ),
    ActionSpace(
        action_type=ActionType.PAY_DOWN_DEBT,
        name="Pay Down Debt",
        description="Guaranteed tech debt reduction.",
    ),
    ActionSpace(
        action_type=ActionType.UPGRADE_SERVERS,
        name="Upgrade Servers",
        description="Increase server capacity and grow the code grid.",
        max_seats=2,
        cost=10,
    ),
    ActionSpace(
        action_type=ActionType.RESEARCH_AI,
        name="Research AI",
        description="Invest in AI capacity and research level.",
        max_seats=2,
        cost=15,
    ),
    ActionSpace(
        action_type=ActionType.MARKETING,
        name="Marketing",
        description="Acquire users; effectiveness scales with rating.",
        max_seats=1,
        cost=20,
    ),
    ActionSpace(
        action_type=ActionType.MONETIZATION,
        name="Monetization",
        description="Turn users into revenue at the cost of rating.",
        max_seats=2,
    ),
    ActionSpace(
        action_type=ActionType.HIRE_RECRUITER,
        name="Hire Recruiter",
        description="Two extra engineers appear in the next draft.",
        max_seats=1,
        cost=25,
    ),
    ActionSpace(
        action_type=ActionType.GO_VIRAL,
        name="Go Viral",
        description="Coin flip between a user surge and a backlash.",
        max_seats=1,
        cost=15,
        unlock_round=3,
    ),
    ActionSpace(
        action_type=ActionType.IPO_PREP,
        name="IPO Prep",
        description="Convert cash into final score.",
        max_seats=1,
        cost=50,
        unlock_round=4,
    ),
    ActionSpace(
        action_type=ActionType.ACQUISITION_TARGET,
        name="Acquisition Target",
        description="Trade half of the user base for instant score.",
        max_seats=1,
        unlock_round=4,
    ),
)

_SPACES_BY_TYPE = {space.action_type: space for space in ACTION_SPACES}

INTERACTIVE_ACTIONS: frozenset[ActionType] = frozenset(
    {ActionType.DEVELOP_FEATURES, ActionType.OPTIMIZE_CODE}
)
DEBT_BLOCKED_ACTIONS: frozenset[ActionType] = INTERACTIVE_ACTIONS


def get_action_space(action: ActionType) -> ActionSpace:
    """Return the definition of *action*."""
    space = _SPACES_BY_TYPE.get(action)
    if space is None:
        msg = f"Unknown action type '{action}'."
        raise ProgrammerError(msg)
    return space


def available_actions(round_number: int) -> tuple[ActionType, ...]:
    """Return the actions unlocked by *round_number*."""
    return tuple(
        space.action_type
        for space in ACTION_SPACES
        if round_number >= space.unlock_round
    )


__all__ = [
    "ACTION_SPACES",
    "DEBT_BLOCKED_ACTIONS",
    "INTERACTIVE_ACTIONS",
    "ActionSpace",
    "available_actions",
    "get_action_space",
]
