"""App cards published from the code grid and the shared code token pool."""

from __future__ import annotations

from enum import StrEnum
from typing import TYPE_CHECKING

from pydantic import BaseModel, Field, model_validator
from pydantic.config import ConfigDict

from tycoon_backend.game_logic.errors import ProgrammerError
from tycoon_backend.game_logic.grid import Pattern  # noqa: TC001
from tycoon_backend.shared.enums import TokenColor

if TYPE_CHECKING:
    from tycoon_backend.shared.rng import DeterministicRandomService

MAX_STARS = 5

CODE_POOL_WEIGHTS: dict[TokenColor, int] = {
    TokenColor.GREEN: 30,
    TokenColor.ORANGE: 25,
    TokenColor.PURPLE: 25,
    TokenColor.BLUE: 20,
}


class AppTier(StrEnum):
    """Size classes of app cards."""

    SMALL = "small"
    MEDIUM = "medium"
    LARGE = "large"


class AppCard(BaseModel):
    """A client app whose colour pattern is matched against a code grid."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    client: str
    tier: AppTier
    pattern: Pattern
    token_count: int = Field(..., ge=1)
    max_vp: int = Field(..., ge=1)
    max_money: int = Field(..., ge=0)
    star_thresholds: tuple[int, int, int, int, int]

    @model_validator(mode="after")
    def _validate_pattern(self) -> AppCard:
        """Ensure the token count agrees with the pattern and thresholds ascend."""
        filled = sum(1 for row in self.pattern for cell in row if cell is not None)
        if filled != self.token_count:
            msg = f"App card '{self.id}' declares {self.token_count} tokens, has {filled}."
            raise ValueError(msg)
        if list(self.star_thresholds) != sorted(self.star_thresholds):
            msg = f"App card '{self.id}' star thresholds must not decrease."
            raise ValueError(msg)
        return self

    def star_rating(self, matched: int) -> int:
        """Return the highest star count whose threshold *matched* reaches."""
        for stars in range(MAX_STARS, 0, -1):
            if matched >= self.star_thresholds[stars - 1]:
                return stars
        return 0

    def vp_for(self, stars: int) -> int:
        return max(1, self.max_vp * stars // MAX_STARS)

    def money_for(self, stars: int) -> int:
        return self.max_money * stars // MAX_STARS


G = TokenColor.GREEN
O = TokenColor.ORANGE  # noqa: E741
B = TokenColor.BLUE
P = TokenColor.PURPLE
_ = None

APP_CARDS: tuple[AppCard, ...] = (
    AppCard(
        id="weather-now",
        name="WeatherNow",
        client="Weather App",
        tier=AppTier.SMALL,
        pattern=((G, G), (O, P)),
        token_count=4,
        max_vp=2,
        max_money=1,
        star_thresholds=(1, 2, 3, 3, 4),
    ),
    AppCard(
        id="fittrack-health",
        name="FitTrack Health",
        client="Fitness Tracking App",
        tier=AppTier.SMALL,
        pattern=((G, _, G), (O, B, P)),
        token_count=5,
        max_vp=2,
        max_money=1,
        star_thresholds=(1, 2, 3, 4, 5),
    ),
    AppCard(
        id="travel-buddy",
        name="TravelBuddy",
        client="Travel Booking App",
        tier=AppTier.SMALL,
        pattern=((G, G, G), (O, B, P)),
        token_count=6,
        max_vp=3,
        max_money=2,
        star_thresholds=(2, 3, 4, 5, 6),
    ),
    AppCard(
        id="mcburger-mobile",
        name="McBurger Mobile",
        client="Fast Food Ordering App",
        tier=AppTier.MEDIUM,
        pattern=((G, _, _, G), (G, G, G, G), (_, O, _, P)),
        token_count=8,
        max_vp=5,
        max_money=4,
        star_thresholds=(2, 4, 6, 7, 8),
    ),
    AppCard(
        id="snapshare-social",
        name="SnapShare Social",
        client="Social Media App",
        tier=AppTier.MEDIUM,
        pattern=((G, G, G), (O, B, O), (G, G, P)),
        token_count=9,
        max_vp=5,
        max_money=4,
        star_thresholds=(3, 5, 7, 8, 9),
    ),
    AppCard(
        id="edulearn-platform",
        name="EduLearn Platform",
        client="Educational App",
        tier=AppTier.MEDIUM,
        pattern=((G, O, G), (B, _, B), (G, O, P)),
        token_count=8,
        max_vp=4,
        max_money=3,
        star_thresholds=(2, 4, 6, 7, 8),
    ),
    AppCard(
        id="delivernow-logistics",
        name="DeliverNow Logistics",
        client="Delivery App",
        tier=AppTier.MEDIUM,
        pattern=((P, O, P), (B, G, B), (P, O, G)),
        token_count=9,
        max_vp=5,
        max_money=4,
        star_thresholds=(3, 5, 7, 8, 9),
    ),
    AppCard(
        id="securevault-banking",
        name="SecureVault Banking",
        client="Banking App",
        tier=AppTier.LARGE,
        pattern=((_, O, O, _), (P, B, B, P), (O, G, G, O), (_, P, O, _)),
        token_count=12,
        max_vp=8,
        max_money=7,
        star_thresholds=(4, 7, 9, 11, 12),
    ),
    AppCard(
        id="gameforge-arena",
        name="GameForge Arena",
        client="Mobile Game",
        tier=AppTier.LARGE,
        pattern=((_, G, O, G), (B, B, B, O), (B, G, B, O), (P, P, G, _)),
        token_count=14,
        max_vp=9,
        max_money=7,
        star_thresholds=(5, 8, 11, 13, 14),
    ),
    AppCard(
        id="cloudsync-enterprise",
        name="CloudSync Enterprise",
        client="Enterprise SaaS",
        tier=AppTier.LARGE,
        pattern=(
            (_, O, B, O, _),
            (P, B, O, B, P),
            (P, O, B, O, P),
            (_, G, P, G, _),
        ),
        token_count=16,
        max_vp=9,
        max_money=8,
        star_thresholds=(5, 9, 12, 14, 16),
    ),
)

_CARDS_BY_ID = {card.id: card for card in APP_CARDS}


def get_app_card(card_id: str) -> AppCard:
    """Return the app card *card_id*."""
    card = _CARDS_BY_ID.get(card_id)
    if card is None:
        msg = f"Unknown app card '{card_id}'."
        raise ProgrammerError(msg)
    return card


def create_app_deck(rng: DeterministicRandomService) -> tuple[str, ...]:
    return rng.shuffle(card.id for card in APP_CARDS)


def generate_code_pool(
    player_count: int, rng: DeterministicRandomService, tokens_per_player: int
) -> tuple[TokenColor, ...]:
    """Roll ``player_count * tokens_per_player`` weighted tokens and shuffle them."""
    tokens = [
        rng.weighted_choice(CODE_POOL_WEIGHTS)
        for _ in range(player_count * tokens_per_player)
    ]
    return rng.shuffle(tokens)


__all__ = [
    "APP_CARDS",
    "CODE_POOL_WEIGHTS",
    "MAX_STARS",
    "AppCard",
    "AppTier",
    "create_app_deck",
    "generate_code_pool",
    "get_app_card",
]
