"""Immutable value objects shared across the domain layer."""

from __future__ import annotations

from collections.abc import Iterable  # noqa: TC003
from decimal import ROUND_HALF_UP, Decimal

from pydantic import BaseModel, Field, model_validator
from pydantic.config import ConfigDict

from tycoon_backend.shared.enums import TokenColor  # noqa: TC001

MIN_RATING = 1
MAX_RATING = 10


def round_half_up(value: float | Decimal) -> int:
    """Round *value* to the nearest integer, halves away from zero."""
    decimal_value = value if isinstance(value, Decimal) else Decimal(str(value))
    return int(decimal_value.quantize(Decimal(1), rounding=ROUND_HALF_UP))


def clamp(value: int, lower: int, upper: int) -> int:
    """Clamp *value* into the inclusive range [*lower*, *upper*]."""
    return max(lower, min(upper, value))


class PlayerResources(BaseModel):
    """Spendable and capacity resources owned by a player."""

    model_config = ConfigDict(frozen=True)

    money: int = Field(default=0, ge=0)
    server_capacity: int = Field(default=0, ge=0)
    ai_capacity: int = Field(default=0, ge=0)
    tech_debt: int = Field(default=0, ge=0)

    def adjust(
        self,
        *,
        money: int = 0,
        server_capacity: int = 0,
        ai_capacity: int = 0,
        tech_debt: int = 0,
    ) -> PlayerResources:
        """Return resources shifted by the given deltas, floored at zero."""
        return PlayerResources(
            money=max(0, self.money + money),
            server_capacity=max(0, self.server_capacity + server_capacity),
            ai_capacity=max(0, self.ai_capacity + ai_capacity),
            tech_debt=max(0, self.tech_debt + tech_debt),
        )

    def can_afford(self, cost: int) -> bool:
        """Return whether *cost* can be paid from current money."""
        return self.money >= cost


class PlayerMetrics(BaseModel):
    """Growth metrics tracked per player."""

    model_config = ConfigDict(frozen=True)

    mau: int = Field(default=0, ge=0)
    revenue: int = Field(default=0, ge=0)
    rating: int = Field(default=5, ge=MIN_RATING, le=MAX_RATING)

    def adjust(self, *, mau: int = 0, revenue: int = 0, rating: int = 0) -> PlayerMetrics:
        """Return metrics shifted by the deltas, clamped to their valid ranges."""
        return PlayerMetrics(
            mau=max(0, self.mau + mau),
            revenue=max(0, self.revenue + revenue),
            rating=clamp(self.rating + rating, MIN_RATING, MAX_RATING),
        )


class ProductionTracks(BaseModel):
    """Recurring production markers paid out at the start of each quarter."""

    model_config = ConfigDict(frozen=True)

    mau_production: int = Field(default=0, ge=0)
    revenue_production: int = Field(default=0, ge=0)

    def advance(
        self,
        *,
        mau: int = 0,
        revenue: int = 0,
        max_mau: int,
        max_revenue: int,
    ) -> ProductionTracks:
        """Move the markers by the given steps, keeping them within bounds."""
        return ProductionTracks(
            mau_production=clamp(self.mau_production + mau, 0, max_mau),
            revenue_production=clamp(self.revenue_production + revenue, 0, max_revenue),
        )


class TechDebtBuffer(BaseModel):
    """Fixed-capacity queue of debt tokens that cascades into integer debt."""

    model_config = ConfigDict(frozen=True)

    tokens: tuple[TokenColor, ...] = Field(default_factory=tuple)
    max_size: int = Field(default=4, ge=1)

    @model_validator(mode="after")
    def _validate_capacity(self) -> TechDebtBuffer:
        """Ensure a stored buffer never sits at or above capacity."""
        if len(self.tokens) >= self.max_size:
            msg = "Tech debt buffer must be flushed before reaching capacity."
            raise ValueError(msg)
        return self

    def push(self, colors: Iterable[TokenColor]) -> tuple[TechDebtBuffer, int]:
        """Append *colors*, flushing on every fill.

        Returns the new buffer and the amount of integer debt produced by the
        flushes. Several flushes may happen within a single call.
        """
        pending = list(self.tokens)
        cascaded = 0
        for color in colors:
            pending.append(color)
            if len(pending) >= self.max_size:
                pending.clear()
                cascaded += self.max_size
        return TechDebtBuffer(tokens=tuple(pending), max_size=self.max_size), cascaded

    def remove(self, count: int) -> tuple[TechDebtBuffer, int]:
        """Remove up to *count* tokens from the front; return buffer and removed."""
        removed = min(max(count, 0), len(self.tokens))
        return (
            TechDebtBuffer(tokens=self.tokens[removed:], max_size=self.max_size),
            removed,
        )


__all__ = [
    "MAX_RATING",
    "MIN_RATING",
    "PlayerMetrics",
    "PlayerResources",
    "ProductionTracks",
    "TechDebtBuffer",
    "clamp",
    "round_half_up",
]
