"""Tech debt tiers and the penalties each tier applies."""

from __future__ import annotations

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict


class TechDebtTier(BaseModel):
    """Penalties applied while a player's tech debt sits inside a band."""

    model_config = ConfigDict(frozen=True)

    minimum: int = Field(..., ge=0)
    maximum: int | None = None
    power_penalty: int = Field(default=0, ge=0)
    rating_penalty: int = Field(default=0, ge=0)
    mau_production_penalty: int = Field(default=0, ge=0)
    revenue_production_penalty: int = Field(default=0, ge=0)
    blocks_development: bool = False

    def contains(self, tech_debt: int) -> bool:
        if tech_debt < self.minimum:
            return False
        return self.maximum is None or tech_debt <= self.maximum


TECH_DEBT_TIERS: tuple[TechDebtTier, ...] = (
    TechDebtTier(minimum=0, maximum=3),
    TechDebtTier(minimum=4, maximum=6, power_penalty=1),
    TechDebtTier(
        minimum=7,
        maximum=9,
        power_penalty=2,
        rating_penalty=1,
        mau_production_penalty=1,
    ),
    TechDebtTier(
        minimum=10,
        maximum=12,
        power_penalty=3,
        rating_penalty=1,
        mau_production_penalty=1,
        revenue_production_penalty=1,
        blocks_development=True,
    ),
    TechDebtTier(
        minimum=13,
        power_penalty=4,
        rating_penalty=2,
        mau_production_penalty=2,
        revenue_production_penalty=1,
        blocks_development=True,
    ),
)


def debt_tier(tech_debt: int) -> TechDebtTier:
    """Return the tier containing *tech_debt*."""
    for tier in TECH_DEBT_TIERS:
        if tier.contains(tech_debt):
            return tier
    return TECH_DEBT_TIERS[0]


__all__ = ["TECH_DEBT_TIERS", "TechDebtTier", "debt_tier"]
