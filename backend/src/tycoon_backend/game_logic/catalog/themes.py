"""Quarterly themes that bend costs, outputs and income for one round."""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict

from tycoon_backend.game_logic.errors import ProgrammerError
from tycoon_backend.shared.enums import ActionType
from tycoon_backend.shared.value_objects import round_half_up

if TYPE_CHECKING:
    from tycoon_backend.shared.rng import DeterministicRandomService

THEMES_PER_GAME = 4


class QuarterlyTheme(BaseModel):
    """Modifiers active for the quarter a theme is dealt to."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    description: str
    cost_multipliers: dict[ActionType, float] = Field(default_factory=dict)
    output_multipliers: dict[ActionType, float] = Field(default_factory=dict)
    restricted_actions: frozenset[ActionType] = Field(default_factory=frozenset)
    salary_change: int = 0
    extra_engineers: int = Field(default=0, ge=0)
    income_bonus: int = Field(default=0, ge=0)
    debt_penalty_multiplier: float = Field(default=1.0, ge=0)
    mau_bonus_per_action: int = Field(default=0, ge=0)

    def cost_of(self, action: ActionType, base_cost: int) -> int:
        """Return *base_cost* adjusted by this theme's cost multiplier."""
        return round_half_up(base_cost * self.cost_multipliers.get(action, 1.0))

    def scale_output(self, action: ActionType, amount: int) -> int:
        """Return *amount* adjusted by this theme's output multiplier."""
        multiplier = self.output_multipliers.get(action)
        if multiplier is None:
            return amount
        return round_half_up(amount * multiplier)

    def scale_debt_penalty(self, penalty: int) -> int:
        return round_half_up(penalty * self.debt_penalty_multiplier)


QUARTERLY_THEMES: tuple[QuarterlyTheme, ...] = (
    QuarterlyTheme(
        id="startup-boom",
        name="The Startup Boom",
        description="Feature work is turbocharged; monetization is off the table.",
        output_multipliers={ActionType.DEVELOP_FEATURES: 1.5},
        restricted_actions=frozenset({ActionType.MONETIZATION}),
        salary_change=-5,
    ),
    QuarterlyTheme(
        id="market-expansion",
        name="Market Expansion",
        description="Marketing is cheap and every action brings extra users.",
        cost_multipliers={ActionType.MARKETING: 0.5},
        mau_bonus_per_action=200,
    ),
    QuarterlyTheme(
        id="the-reckoning",
        name="The Reckoning",
        description="Infrastructure costs spiral, revenue pays a premium.",
        cost_multipliers={ActionType.UPGRADE_SERVERS: 2.0},
        output_multipliers={ActionType.MONETIZATION: 1.5},
        debt_penalty_multiplier=2.0,
    ),
    QuarterlyTheme(
        id="ipo-window",
        name="IPO Window",
        description="Public markets are hot and steady income flows in.",
        income_bonus=10,
    ),
    QuarterlyTheme(
        id="ai-gold-rush",
        name="AI Gold Rush",
        description="Research is cheap and boosted; debt hurts more.",
        cost_multipliers={ActionType.RESEARCH_AI: 0.5},
        output_multipliers={ActionType.RESEARCH_AI: 1.5},
        debt_penalty_multiplier=1.5,
    ),
    QuarterlyTheme(
        id="talent-war",
        name="Talent War",
        description="Salaries are up but more engineers are on the market.",
        salary_change=5,
        extra_engineers=2,
    ),
    QuarterlyTheme(
        id="regulatory-crackdown",
        name="Regulatory Crackdown",
        description="Clean code is rewarded and debt punished harshly.",
        output_multipliers={ActionType.OPTIMIZE_CODE: 2.0},
        debt_penalty_multiplier=2.0,
    ),
    QuarterlyTheme(
        id="bubble-market",
        name="Bubble Market",
        description="Marketing reach doubles and income keeps flowing.",
        output_multipliers={ActionType.MARKETING: 2.0},
        income_bonus=10,
    ),
)

_THEMES_BY_ID = {theme.id: theme for theme in QUARTERLY_THEMES}


def get_theme(theme_id: str) -> QuarterlyTheme:
    """Return the theme *theme_id*."""
    theme = _THEMES_BY_ID.get(theme_id)
    if theme is None:
        msg = f"Unknown quarterly theme '{theme_id}'."
        raise ProgrammerError(msg)
    return theme


def deal_themes(
    rng: DeterministicRandomService, count: int = THEMES_PER_GAME
) -> tuple[str, ...]:
    """Shuffle the theme deck and deal *count* theme ids, one per quarter."""
    return rng.shuffle(theme.id for theme in QUARTERLY_THEMES)[:count]


def theme_for_round(themes: tuple[str, ...], round_number: int) -> str | None:
    """Return the theme id dealt to *round_number* (1-indexed)."""
    if 1 <= round_number <= len(themes):
        return themes[round_number - 1]
    return None


__all__ = [
    "QUARTERLY_THEMES",
    "THEMES_PER_GAME",
    "QuarterlyTheme",
    "deal_themes",
    "get_theme",
    "theme_for_round",
]
