"""Rule configuration objects for game sessions and lobbies."""

from __future__ import annotations

from functools import cache

from pydantic import BaseModel, Field, model_validator
from pydantic.config import ConfigDict
from pydantic_settings import BaseSettings, SettingsConfigDict

from tycoon_backend.game_logic.phases import (
    DraftMode,
    OptimizeMinigame,
    PlanningMode,
)


class RulesDefaults(BaseSettings):
    """Load default rule constants from the environment."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="TYCOON_RULES_",
        extra="ignore",
    )

    total_quarters: int = Field(default=4, ge=1)
    min_players: int = Field(default=2, ge=1)
    max_players: int = Field(default=4, ge=1)
    tokens_per_player: int = Field(default=5, ge=0)
    tech_debt_buffer_size: int = Field(default=4, ge=1)
    app_market_size: int = Field(default=3, ge=0)
    app_hand_limit: int = Field(default=3, ge=1)
    leader_cards_per_player: int = Field(default=3, ge=1)
    intern_cost_cap: int = Field(default=5, ge=0)
    auction_starting_bid: int = Field(default=10, ge=0)
    auction_minimum_bid: int = Field(default=15, ge=0)
    auction_increment: int = Field(default=5, ge=1)
    income_base_cap: int = Field(default=30, ge=0)
    income_cap_per_round: int = Field(default=10, ge=0)
    underdog_stipend: int = Field(default=10, ge=0)
    max_mau_production: int = Field(default=20, ge=0)
    max_revenue_production: int = Field(default=10, ge=0)
    mau_per_production: int = Field(default=100, ge=0)
    money_per_production: int = Field(default=5, ge=0)
    planning_mode: PlanningMode = PlanningMode.SIMULTANEOUS
    draft_mode: DraftMode = DraftMode.HYBRID
    optimize_minigame: OptimizeMinigame = OptimizeMinigame.SPRINT
    seed: int | None = Field(default=None)

    def to_config(self) -> RulesConfiguration:
        """Convert defaults into an immutable configuration object."""
        return RulesConfiguration.model_validate(self.model_dump())


class RulesConfiguration(BaseModel):
    """Immutable representation of the rule constants for a session."""

    model_config = ConfigDict(frozen=True)

    total_quarters: int = Field(default=4, ge=1)
    min_players: int = Field(default=2, ge=1)
    max_players: int = Field(default=4, ge=1)
    tokens_per_player: int = Field(default=5, ge=0)
    tech_debt_buffer_size: int = Field(default=4, ge=1)
    app_market_size: int = Field(default=3, ge=0)
    app_hand_limit: int = Field(default=3, ge=1)
    leader_cards_per_player: int = Field(default=3, ge=1)
    intern_cost_cap: int = Field(default=5, ge=0)
    auction_starting_bid: int = Field(default=10, ge=0)
    auction_minimum_bid: int = Field(default=15, ge=0)
    auction_increment: int = Field(default=5, ge=1)
    income_base_cap: int = Field(default=30, ge=0)
    income_cap_per_round: int = Field(default=10, ge=0)
    underdog_stipend: int = Field(default=10, ge=0)
    max_mau_production: int = Field(default=20, ge=0)
    max_revenue_production: int = Field(default=10, ge=0)
    mau_per_production: int = Field(default=100, ge=0)
    money_per_production: int = Field(default=5, ge=0)
    planning_mode: PlanningMode = PlanningMode.SIMULTANEOUS
    draft_mode: DraftMode = DraftMode.HYBRID
    optimize_minigame: OptimizeMinigame = OptimizeMinigame.SPRINT
    seed: int | None = None

    @model_validator(mode="after")
    def _validate_player_bounds(self) -> RulesConfiguration:
        """Ensure the player count bounds are ordered."""
        if self.min_players > self.max_players:
            msg = "min_players must not exceed max_players."
            raise ValueError(msg)
        return self

    def income_cap(self, round_number: int) -> int:
        """Return the income cap applied in *round_number*."""
        return self.income_base_cap + self.income_cap_per_round * round_number


class LobbyOverrides(BaseModel):
    """Optional lobby-specific overrides for rule settings."""

    model_config = ConfigDict(frozen=True)

    total_quarters: int | None = Field(default=None, ge=1)
    tech_debt_buffer_size: int | None = Field(default=None, ge=1)
    app_market_size: int | None = Field(default=None, ge=0)
    planning_mode: PlanningMode | None = None
    draft_mode: DraftMode | None = None
    optimize_minigame: OptimizeMinigame | None = None
    seed: int | None = None

    def apply(self, config: RulesConfiguration) -> RulesConfiguration:
        """Return a copy of *config* with overrides applied."""
        updates = self.model_dump(exclude_none=True)
        if not updates:
            return config
        return RulesConfiguration.model_validate({**config.model_dump(), **updates})


@cache
def get_default_rules_configuration() -> RulesConfiguration:
    """Return the cached default rule configuration."""
    return RulesDefaults().to_config()


def build_lobby_configuration(
    overrides: LobbyOverrides | None = None,
) -> RulesConfiguration:
    """Construct a configuration for a lobby, applying optional overrides."""
    defaults = get_default_rules_configuration()
    if overrides is None:
        return defaults
    return overrides.apply(defaults)


__all__ = [
    "LobbyOverrides",
    "RulesConfiguration",
    "RulesDefaults",
    "build_lobby_configuration",
    "get_default_rules_configuration",
]
