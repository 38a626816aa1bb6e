"""Market event deck with structured mitigation conditions."""

from __future__ import annotations

from enum import StrEnum
from typing import TYPE_CHECKING

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict

from tycoon_backend.game_logic.errors import ProgrammerError

if TYPE_CHECKING:
    from tycoon_backend.shared.rng import DeterministicRandomService
    from tycoon_backend.shared.value_objects import PlayerMetrics, PlayerResources

SERVER_USERS_PER_CAPACITY = 100


class EventType(StrEnum):
    """Families of market events."""

    DDOS_ATTACK = "ddos-attack"
    SUPPLY_CHAIN_ISSUES = "supply-chain-issues"
    VIRAL_MOMENT = "viral-moment"
    SECURITY_BREACH = "security-breach"
    COMPETITOR_LAUNCH = "competitor-launch"


class ConditionKind(StrEnum):
    """Comparison used by a mitigation condition."""

    GREATER_THAN = "greater_than"
    LESS_THAN = "less_than"


class ConditionField(StrEnum):
    """Player values a mitigation condition can inspect."""

    SERVER_CAPACITY = "server_capacity"
    TECH_DEBT = "tech_debt"
    RATING = "rating"
    MAU = "mau"
    SERVER_HEADROOM = "server_headroom"


class MitigationCondition(BaseModel):
    """Threshold comparison that decides whether an event is softened."""

    model_config = ConfigDict(frozen=True)

    kind: ConditionKind
    field: ConditionField
    threshold: int

    def observed(self, resources: PlayerResources, metrics: PlayerMetrics) -> int:
        """Return the player value the condition compares."""
        match self.field:
            case ConditionField.SERVER_CAPACITY:
                return resources.server_capacity
            case ConditionField.TECH_DEBT:
                return resources.tech_debt
            case ConditionField.RATING:
                return metrics.rating
            case ConditionField.MAU:
                return metrics.mau
            case ConditionField.SERVER_HEADROOM:
                return resources.server_capacity * SERVER_USERS_PER_CAPACITY - metrics.mau

    def is_met(self, resources: PlayerResources, metrics: PlayerMetrics) -> bool:
        value = self.observed(resources, metrics)
        if self.kind is ConditionKind.GREATER_THAN:
            return value > self.threshold
        return value < self.threshold


class EventEffect(BaseModel):
    """Deltas an event applies to a player."""

    model_config = ConfigDict(frozen=True)

    mau: int = 0
    revenue: int = 0
    rating: int = 0
    money: int = 0
    server_capacity: int = 0
    ai_capacity: int = 0
    tech_debt: int = 0


class GameEvent(BaseModel):
    """A market event card."""

    model_config = ConfigDict(frozen=True)

    id: str
    type: EventType
    name: str
    description: str
    effect: EventEffect
    reduced_effect: EventEffect
    condition: MitigationCondition

    def is_mitigated_by(self, resources: PlayerResources, metrics: PlayerMetrics) -> bool:
        return self.condition.is_met(resources, metrics)


def _above(field: ConditionField, threshold: int) -> MitigationCondition:
    return MitigationCondition(
        kind=ConditionKind.GREATER_THAN, field=field, threshold=threshold
    )


def _below(field: ConditionField, threshold: int) -> MitigationCondition:
    return MitigationCondition(
        kind=ConditionKind.LESS_THAN, field=field, threshold=threshold
    )


_SURGE_HEADROOM = 2000

EVENTS: tuple[GameEvent, ...] = (
    GameEvent(
        id="ddos-1",
        type=EventType.DDOS_ATTACK,
        name="DDoS Attack",
        description="Hackers flood your servers with traffic.",
        effect=EventEffect(mau=-500, rating=-1, tech_debt=1),
        reduced_effect=EventEffect(mau=-100),
        condition=_above(ConditionField.SERVER_CAPACITY, 20),
    ),
    GameEvent(
        id="supply-chain-1",
        type=EventType.SUPPLY_CHAIN_ISSUES,
        name="Cloud Provider Outage",
        description="Emergency workarounds add technical debt.",
        effect=EventEffect(tech_debt=2),
        reduced_effect=EventEffect(tech_debt=1),
        condition=_above(ConditionField.SERVER_CAPACITY, 15),
    ),
    GameEvent(
        id="viral-1",
        type=EventType.VIRAL_MOMENT,
        name="Viral Moment",
        description="An influencer posts about your app.",
        effect=EventEffect(mau=2000),
        reduced_effect=EventEffect(mau=2000),
        condition=_above(ConditionField.SERVER_HEADROOM, _SURGE_HEADROOM),
    ),
    GameEvent(
        id="security-1",
        type=EventType.SECURITY_BREACH,
        name="Data Breach",
        description="A vulnerability exposed user data.",
        effect=EventEffect(rating=-1, revenue=-200, tech_debt=2),
        reduced_effect=EventEffect(revenue=-50),
        condition=_below(ConditionField.TECH_DEBT, 4),
    ),
    GameEvent(
        id="competitor-1",
        type=EventType.COMPETITOR_LAUNCH,
        name="Competitor Launch",
        description="A well-funded competitor enters your market.",
        effect=EventEffect(mau=-300, tech_debt=1),
        reduced_effect=EventEffect(mau=-50),
        condition=_above(ConditionField.RATING, 4),
    ),
    GameEvent(
        id="ddos-2",
        type=EventType.DDOS_ATTACK,
        name="Botnet Swarm",
        description="A botnet targets your API endpoints.",
        effect=EventEffect(mau=-400, money=-10, tech_debt=1),
        reduced_effect=EventEffect(mau=-50),
        condition=_above(ConditionField.SERVER_CAPACITY, 25),
    ),
    GameEvent(
        id="viral-2",
        type=EventType.VIRAL_MOMENT,
        name="Product Hunt Launch",
        description="Your app hits number one on Product Hunt.",
        effect=EventEffect(mau=1500, revenue=100),
        reduced_effect=EventEffect(mau=1500, revenue=200, rating=1),
        condition=_above(ConditionField.SERVER_HEADROOM, _SURGE_HEADROOM),
    ),
    GameEvent(
        id="security-2",
        type=EventType.SECURITY_BREACH,
        name="Dependency Vulnerability",
        description="A critical CVE lands in a core dependency.",
        effect=EventEffect(rating=-1, tech_debt=3),
        reduced_effect=EventEffect(tech_debt=1),
        condition=_below(ConditionField.TECH_DEBT, 3),
    ),
)

_EVENTS_BY_ID = {event.id: event for event in EVENTS}


def get_event(event_id: str) -> GameEvent:
    """Return the event card *event_id*."""
    event = _EVENTS_BY_ID.get(event_id)
    if event is None:
        msg = f"Unknown event '{event_id}'."
        raise ProgrammerError(msg)
    return event


def create_event_deck(rng: DeterministicRandomService) -> tuple[str, ...]:
    """Return the shuffled event deck; events are drawn from the end."""
    return rng.shuffle(event.id for event in EVENTS)


__all__ = [
    "EVENTS",
    "SERVER_USERS_PER_CAPACITY",
    "ConditionField",
    "ConditionKind",
    "EventEffect",
    "EventType",
    "GameEvent",
    "MitigationCondition",
    "create_event_deck",
    "get_event",
]
