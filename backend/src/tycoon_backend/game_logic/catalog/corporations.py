"""Funding, tech and product options used to found a corporation."""

from __future__ import annotations

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict

from tycoon_backend.shared.enums import (
    CorporationStyle,
    FundingType,
    ProductType,
    TechApproach,
)
from tycoon_backend.shared.value_objects import (
    MAX_RATING,
    MIN_RATING,
    PlayerMetrics,
    PlayerResources,
    ProductionTracks,
    clamp,
    round_half_up,
)

STARTING_SERVER_CAPACITY = 10
BASE_STARTING_MAU = 1000
BASE_STARTING_REVENUE = 500
BASE_STARTING_RATING = 3

PIVOT_POWER_ID = "pivot"
LEAN_TEAM_POWER_ID = "lean-team"
INSIDER_INFO_POWER_ID = "insider-info"

LEAN_TEAM_DISCOUNT = 0.8
INSIDER_INFO_EXTRA_ENGINEERS = 2
AI_FIRST_LEADER_THRESHOLD = 3


class FundingOption(BaseModel):
    """Starting cash and corporation power granted by a funding choice."""

    model_config = ConfigDict(frozen=True)

    funding: FundingType
    name: str
    starting_money: int = Field(..., ge=0)
    power_id: str


class TechOption(BaseModel):
    """Starting AI capacity and debt granted by a tech approach."""

    model_config = ConfigDict(frozen=True)

    tech: TechApproach
    name: str
    starting_ai_capacity: int = Field(..., ge=0)
    starting_tech_debt: int = Field(..., ge=0)


class ProductOption(BaseModel):
    """Metric multipliers and production tracks of a product market."""

    model_config = ConfigDict(frozen=True)

    product: ProductType
    name: str
    mau_multiplier: float = Field(..., gt=0)
    revenue_multiplier: float = Field(..., gt=0)
    rating_multiplier: float = Field(..., gt=0)
    mau_production: int = Field(..., ge=0)
    revenue_production: int = Field(..., ge=0)


FUNDING_OPTIONS: dict[FundingType, FundingOption] = {
    FundingType.VC_HEAVY: FundingOption(
        funding=FundingType.VC_HEAVY,
        name="VC-Heavy",
        starting_money=100,
        power_id=PIVOT_POWER_ID,
    ),
    FundingType.BOOTSTRAPPED: FundingOption(
        funding=FundingType.BOOTSTRAPPED,
        name="Bootstrapped",
        starting_money=40,
        power_id=LEAN_TEAM_POWER_ID,
    ),
    FundingType.ANGEL_BACKED: FundingOption(
        funding=FundingType.ANGEL_BACKED,
        name="Angel-Backed",
        starting_money=70,
        power_id=INSIDER_INFO_POWER_ID,
    ),
}

TECH_OPTIONS: dict[TechApproach, TechOption] = {
    TechApproach.AI_FIRST: TechOption(
        tech=TechApproach.AI_FIRST,
        name="AI-First",
        starting_ai_capacity=4,
        starting_tech_debt=2,
    ),
    TechApproach.QUALITY_FOCUSED: TechOption(
        tech=TechApproach.QUALITY_FOCUSED,
        name="Quality-Focused",
        starting_ai_capacity=1,
        starting_tech_debt=0,
    ),
    TechApproach.MOVE_FAST: TechOption(
        tech=TechApproach.MOVE_FAST,
        name="Move Fast",
        starting_ai_capacity=2,
        starting_tech_debt=3,
    ),
}

PRODUCT_OPTIONS: dict[ProductType, ProductOption] = {
    ProductType.B2B: ProductOption(
        product=ProductType.B2B,
        name="B2B SaaS",
        mau_multiplier=0.5,
        revenue_multiplier=2.0,
        rating_multiplier=0.8,
        mau_production=1,
        revenue_production=2,
    ),
    ProductType.CONSUMER: ProductOption(
        product=ProductType.CONSUMER,
        name="Consumer App",
        mau_multiplier=2.0,
        revenue_multiplier=0.5,
        rating_multiplier=1.2,
        mau_production=3,
        revenue_production=0,
    ),
    ProductType.PLATFORM: ProductOption(
        product=ProductType.PLATFORM,
        name="Platform Play",
        mau_multiplier=1.0,
        revenue_multiplier=1.0,
        rating_multiplier=1.0,
        mau_production=2,
        revenue_production=1,
    ),
}


def starting_resources(funding: FundingType, tech: TechApproach) -> PlayerResources:
    """Return the opening resources for a funding/tech pair."""
    tech_option = TECH_OPTIONS[tech]
    return PlayerResources(
        money=FUNDING_OPTIONS[funding].starting_money,
        server_capacity=STARTING_SERVER_CAPACITY,
        ai_capacity=tech_option.starting_ai_capacity,
        tech_debt=tech_option.starting_tech_debt,
    )


def starting_metrics(product: ProductType) -> PlayerMetrics:
    """Return opening MAU, revenue and rating for a product market."""
    option = PRODUCT_OPTIONS[product]
    return PlayerMetrics(
        mau=round_half_up(BASE_STARTING_MAU * option.mau_multiplier),
        revenue=round_half_up(BASE_STARTING_REVENUE * option.revenue_multiplier),
        rating=clamp(
            round_half_up(BASE_STARTING_RATING * option.rating_multiplier),
            MIN_RATING,
            MAX_RATING,
        ),
    )


def starting_production(product: ProductType) -> ProductionTracks:
    option = PRODUCT_OPTIONS[product]
    return ProductionTracks(
        mau_production=option.mau_production,
        revenue_production=option.revenue_production,
    )


def default_corporation_style(funding: FundingType) -> CorporationStyle:
    """Bootstrapped companies build products; funded ones run agencies."""
    if funding is FundingType.BOOTSTRAPPED:
        return CorporationStyle.PRODUCT
    return CorporationStyle.AGENCY


def default_tech_for_leader(ai_capacity_bonus: int) -> TechApproach:
    if ai_capacity_bonus >= AI_FIRST_LEADER_THRESHOLD:
        return TechApproach.AI_FIRST
    return TechApproach.QUALITY_FOCUSED


__all__ = [
    "FUNDING_OPTIONS",
    "INSIDER_INFO_EXTRA_ENGINEERS",
    "INSIDER_INFO_POWER_ID",
    "LEAN_TEAM_DISCOUNT",
    "LEAN_TEAM_POWER_ID",
    "PIVOT_POWER_ID",
    "PRODUCT_OPTIONS",
    "STARTING_SERVER_CAPACITY",
    "TECH_OPTIONS",
    "FundingOption",
    "ProductOption",
    "TechOption",
    "default_corporation_style",
    "default_tech_for_leader",
    "starting_metrics",
    "starting_production",
    "starting_resources",
]
