"""Player-centric and round-level state containers used by the rules engine.

Every container is an immutable pydantic model. Transitions build new
instances with ``model_copy(update=...)`` so that a :class:`GameState` can be
serialised to plain JSON at any point and restored without loss.
"""

from __future__ import annotations

from enum import StrEnum
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, Field, model_validator
from pydantic.config import ConfigDict

from tycoon_backend.game_logic.catalog.actions import get_action_space
from tycoon_backend.game_logic.catalog.personas import (
    LeaderPassive,
    PersonaTrait,
    get_persona,
)
from tycoon_backend.game_logic.catalog.puzzles import CodeBlock, Puzzle  # noqa: TC001
from tycoon_backend.game_logic.catalog.themes import QuarterlyTheme, get_theme
from tycoon_backend.game_logic.configuration import RulesConfiguration  # noqa: TC001
from tycoon_backend.game_logic.errors import ProgrammerError
from tycoon_backend.game_logic.grid import CodeGrid
from tycoon_backend.game_logic.phases import (
    DraftPhase,
    GamePhase,
    TurnStep,
)
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
from tycoon_backend.shared.events import LoggedEvent
from tycoon_backend.shared.rng import DeterministicRandomService
from tycoon_backend.shared.value_objects import (
    PlayerMetrics,
    PlayerResources,
    ProductionTracks,
    TechDebtBuffer,
)

if TYPE_CHECKING:
    from collections.abc import Iterable

BASE_POWER: dict[EngineerLevel, int] = {
    EngineerLevel.INTERN: 1,
    EngineerLevel.JUNIOR: 2,
    EngineerLevel.SENIOR: 4,
}

BACKEND_REVERT_POWER = "backend-revert"
COMMIT_CODE_POWER = "commit-code"


class Engineer(BaseModel):
    """An engineer offered in a draft pool."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1)
    name: str
    level: EngineerLevel
    specialty: Specialty | None = None
    base_salary: int = Field(..., ge=0)
    trait: EngineerTrait | None = None
    persona_id: str | None = None
    persona_trait: PersonaTrait | None = None

    @property
    def base_power(self) -> int:
        return BASE_POWER[self.level]


class HiredEngineer(Engineer):
    """An engineer owned by a player together with per-round placement data."""

    hire_cost: int = Field(default=0, ge=0)
    assigned_action: ActionType | None = None
    has_ai_augmentation: bool = False
    rounds_retained: int = Field(default=0, ge=0)

    @classmethod
    def hire(cls, engineer: Engineer, cost: int) -> HiredEngineer:
        """Create the owned copy of *engineer* bought for *cost*."""
        return cls(**engineer.model_dump(), hire_cost=max(0, cost))

    def has_persona_trait(self, trait: PersonaTrait) -> bool:
        return self.persona_trait is trait


class PlannedAction(BaseModel):
    """One engineer-to-action assignment awaiting resolution."""

    model_config = ConfigDict(frozen=True)

    engineer_id: str
    action_type: ActionType
    use_ai_augmentation: bool = False


class Strategy(BaseModel):
    """The funding, tech and product triple chosen at setup."""

    model_config = ConfigDict(frozen=True)

    funding: FundingType
    tech: TechApproach
    product: ProductType


class PublishedApp(BaseModel):
    """An app card a player has shipped from their grid."""

    model_config = ConfigDict(frozen=True)

    card_id: str
    stars: int = Field(..., ge=0, le=5)
    vp_earned: int = Field(..., ge=0)
    money_earned: int = Field(..., ge=0)
    round_published: int = Field(..., ge=0)


class PowerUseTracker(BaseModel):
    """Set of one-time powers that have already been spent."""

    model_config = ConfigDict(frozen=True)

    used: frozenset[str] = Field(default_factory=frozenset)

    def has_used(self, power_id: str) -> bool:
        return power_id in self.used

    def mark(self, power_id: str) -> PowerUseTracker:
        """Return a tracker with *power_id* recorded as used."""
        return PowerUseTracker(used=self.used | {power_id})


class Player(BaseModel):
    """Full state of one player's corporation."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1)
    name: str
    color: str
    seat: int = Field(..., ge=0)
    is_ready: bool = False
    resources: PlayerResources = Field(default_factory=PlayerResources)
    metrics: PlayerMetrics = Field(default_factory=PlayerMetrics)
    production: ProductionTracks = Field(default_factory=ProductionTracks)
    engineers: tuple[HiredEngineer, ...] = Field(default_factory=tuple)
    planned_actions: tuple[PlannedAction, ...] = Field(default_factory=tuple)
    tech_debt_buffer: TechDebtBuffer = Field(default_factory=TechDebtBuffer)
    code_grid: CodeGrid = Field(default_factory=CodeGrid.empty)
    held_app_cards: tuple[str, ...] = Field(default_factory=tuple)
    published_apps: tuple[PublishedApp, ...] = Field(default_factory=tuple)
    leader_id: str | None = None
    strategy: Strategy | None = None
    corporation_style: CorporationStyle | None = None
    powers: PowerUseTracker = Field(default_factory=PowerUseTracker)
    round_powers: PowerUseTracker = Field(default_factory=PowerUseTracker)
    has_recruiter_bonus: bool = False
    ipo_bonus_score: int = Field(default=0, ge=0)
    ai_research_level: int = Field(default=0, ge=0, le=2)
    marketing_star_bonus: int = Field(default=0, ge=0)
    recurring_revenue: int = Field(default=0, ge=0)
    committed_code_count: int = Field(default=0, ge=0)
    mau_thresholds_reached: tuple[int, ...] = Field(default_factory=tuple)

    @property
    def leader_passive(self) -> LeaderPassive | None:
        if self.leader_id is None:
            return None
        return get_persona(self.leader_id).passive

    def has_passive(self, passive: LeaderPassive) -> bool:
        return self.leader_passive is passive

    def has_persona_trait(self, trait: PersonaTrait) -> bool:
        return any(engineer.persona_trait is trait for engineer in self.engineers)

    def find_engineer(self, engineer_id: str) -> HiredEngineer | None:
        for engineer in self.engineers:
            if engineer.id == engineer_id:
                return engineer
        return None

    def engineer(self, engineer_id: str) -> HiredEngineer:
        """Return the owned engineer *engineer_id* or raise for unknown ids."""
        engineer = self.find_engineer(engineer_id)
        if engineer is None:
            msg = f"Player '{self.id}' has no engineer '{engineer_id}'."
            raise ProgrammerError(msg)
        return engineer

    def replace_engineer(self, engineer: HiredEngineer) -> Player:
        engineers = tuple(
            engineer if current.id == engineer.id else current
            for current in self.engineers
        )
        return self.model_copy(update={"engineers": engineers})

    def unplaced_engineers(self) -> tuple[HiredEngineer, ...]:
        return tuple(e for e in self.engineers if e.assigned_action is None)

    def engineers_on(self, action: ActionType) -> int:
        """Return how many of this player's planned actions target *action*."""
        return sum(1 for planned in self.planned_actions if planned.action_type is action)

    def has_planned(self, action: ActionType) -> bool:
        return self.engineers_on(action) > 0

    def adjust_resources(self, **deltas: int) -> Player:
        return self.model_copy(update={"resources": self.resources.adjust(**deltas)})

    def adjust_metrics(self, **deltas: int) -> Player:
        return self.model_copy(update={"metrics": self.metrics.adjust(**deltas)})

    def with_rating(self, rating: int) -> Player:
        return self.adjust_metrics(rating=rating - self.metrics.rating)

    def advance_production(
        self, config: RulesConfiguration, *, mau: int = 0, revenue: int = 0
    ) -> Player:
        production = self.production.advance(
            mau=mau,
            revenue=revenue,
            max_mau=config.max_mau_production,
            max_revenue=config.max_revenue_production,
        )
        return self.model_copy(update={"production": production})

    def add_debt_tokens(self, colors: Iterable[TokenColor]) -> Player:
        """Push debt tokens into the buffer, cascading flushes into tech debt."""
        buffer, cascaded = self.tech_debt_buffer.push(colors)
        player = self.model_copy(update={"tech_debt_buffer": buffer})
        if cascaded:
            player = player.adjust_resources(tech_debt=cascaded)
        return player

    def pay_down_debt(self, units: int) -> Player:
        """Remove *units* of debt, consuming buffer tokens before the counter."""
        buffer, removed = self.tech_debt_buffer.remove(units)
        player = self.model_copy(update={"tech_debt_buffer": buffer})
        remaining = units - removed
        if remaining > 0:
            player = player.adjust_resources(tech_debt=-remaining)
        return player

    def published_stars(self) -> int:
        return sum(app.stars for app in self.published_apps)

    def victory_points(self) -> int:
        """Return the running VP used to order the action draft."""
        return (
            sum(app.vp_earned for app in self.published_apps)
            + self.ipo_bonus_score
            + self.production.mau_production
            + self.production.revenue_production * 2
        )


class Bid(BaseModel):
    """A sealed bid for a pool engineer."""

    model_config = ConfigDict(frozen=True)

    player_id: str
    engineer_id: str
    amount: int = Field(..., ge=0)
    sequence: int = Field(..., ge=0)


class BidResult(BaseModel):
    """Outcome of one engineer in sealed-bid resolution."""

    model_config = ConfigDict(frozen=True)

    engineer_id: str
    winner_id: str | None = None
    amount: int = Field(default=0, ge=0)


class AuctionState(BaseModel):
    """Ascending auction for a single persona card."""

    model_config = ConfigDict(frozen=True)

    persona_id: str
    bidding_order: tuple[str, ...]
    current_index: int = Field(default=0, ge=0)
    current_bid: int = Field(..., ge=0)
    current_bidder: str | None = None
    passed: tuple[str, ...] = Field(default_factory=tuple)

    def active_bidders(self) -> tuple[str, ...]:
        return tuple(pid for pid in self.bidding_order if pid not in self.passed)

    def whose_turn(self) -> str | None:
        active = self.active_bidders()
        if not active:
            return None
        return self.bidding_order[self.current_index % len(self.bidding_order)]


class PickOrderState(BaseModel):
    """Snake pick order cursor used by sequential placement and the action draft."""

    model_config = ConfigDict(frozen=True)

    order: tuple[str, ...]
    index: int = Field(default=0, ge=0)

    def current(self) -> str | None:
        if self.index >= len(self.order):
            return None
        return self.order[self.index]


class TurnState(PickOrderState):
    """Action-draft turn cursor with the pending interactive sub-step."""

    step: TurnStep = TurnStep.PLACE_ENGINEER
    engineer_id: str | None = None
    tokens_remaining: int = Field(default=0, ge=0)
    swaps_remaining: int = Field(default=0, ge=0)
    forfeited: tuple[str, ...] = Field(default_factory=tuple)


class SprintTokenKind(StrEnum):
    """Token types found in the sprint bag."""

    CLEAN_CODE = "clean-code-1"
    GREAT_CODE = "clean-code-2"
    BUG = "bug"
    CRITICAL_BUG = "critical-bug"


class SprintToken(BaseModel):
    """A token drawn during the sprint."""

    model_config = ConfigDict(frozen=True)

    id: str
    kind: SprintTokenKind
    value: int = Field(default=0, ge=0)

    @property
    def is_bug(self) -> bool:
        return self.kind in {SprintTokenKind.BUG, SprintTokenKind.CRITICAL_BUG}

    @property
    def bug_weight(self) -> int:
        if self.kind is SprintTokenKind.CRITICAL_BUG:
            return 2
        return 1 if self.kind is SprintTokenKind.BUG else 0


class SprintPlayerState(BaseModel):
    """One player's progress through the sprint."""

    model_config = ConfigDict(frozen=True)

    player_id: str
    drawn: tuple[SprintToken, ...] = Field(default_factory=tuple)
    clean_code_total: int = Field(default=0, ge=0)
    bug_count: int = Field(default=0, ge=0)
    max_draws: int = Field(..., ge=1)
    crashed: bool = False
    stopped: bool = False
    revert_available: bool = False
    is_participant: bool = False

    @property
    def is_done(self) -> bool:
        return self.crashed or self.stopped or len(self.drawn) >= self.max_draws

    @property
    def effective_total(self) -> int:
        return 0 if self.crashed else self.clean_code_total


class SprintState(BaseModel):
    """Shared push-your-luck sprint bag and per-player progress."""

    model_config = ConfigDict(frozen=True)

    bag: tuple[SprintToken, ...]
    players: tuple[SprintPlayerState, ...]
    current_index: int = Field(default=0, ge=0)
    complete: bool = False

    def current_player_id(self) -> str | None:
        if self.complete or not self.players:
            return None
        return self.players[self.current_index].player_id


class PuzzleSubmission(BaseModel):
    """A block program submitted for the round puzzle."""

    model_config = ConfigDict(frozen=True)

    player_id: str
    blocks: tuple[CodeBlock, ...]
    block_count: int = Field(..., ge=0)
    solve_time_ms: int = Field(..., ge=0)
    is_correct: bool
    coins_collected: int = Field(default=0, ge=0)


class PuzzleReward(BaseModel):
    """Reward applied to the puzzle winner at resolution."""

    model_config = ConfigDict(frozen=True)

    winner_id: str
    tech_debt_reduction: int = Field(default=0, ge=0)
    money: int = Field(default=0, ge=0)


class PuzzleState(BaseModel):
    """Round puzzle and the submissions received so far."""

    model_config = ConfigDict(frozen=True)

    puzzle: Puzzle
    submissions: tuple[PuzzleSubmission, ...] = Field(default_factory=tuple)
    reward: PuzzleReward | None = None


class RoundState(BaseModel):
    """Scratch state rebuilt at the start of every quarter."""

    model_config = ConfigDict(frozen=True)

    round_number: int = Field(default=0, ge=0)
    engineer_pool: tuple[Engineer, ...] = Field(default_factory=tuple)
    persona_pool: tuple[str, ...] = Field(default_factory=tuple)
    draft_phase: DraftPhase = DraftPhase.GENERIC_DRAFT
    draft_order: tuple[str, ...] = Field(default_factory=tuple)
    draft_pick_index: int = Field(default=0, ge=0)
    draft_passed: tuple[str, ...] = Field(default_factory=tuple)
    bids: tuple[Bid, ...] = Field(default_factory=tuple)
    bid_results: tuple[BidResult, ...] = Field(default_factory=tuple)
    next_bid_sequence: int = Field(default=0, ge=0)
    auction: AuctionState | None = None
    occupied_actions: dict[ActionType, tuple[str, ...]] = Field(default_factory=dict)
    costs_paid: dict[str, frozenset[str]] = Field(default_factory=dict)
    current_event_id: str | None = None
    upcoming_event_id: str | None = None
    theme_id: str | None = None
    sequential: PickOrderState | None = None
    turn: TurnState | None = None
    sprint: SprintState | None = None
    puzzle: PuzzleState | None = None
    code_pool: tuple[TokenColor, ...] = Field(default_factory=tuple)
    app_market: tuple[str, ...] = Field(default_factory=tuple)

    def occupants(self, action: ActionType) -> tuple[str, ...]:
        return self.occupied_actions.get(action, ())


class Milestone(BaseModel):
    """A first-claim-wins achievement."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    bonus: int = Field(..., ge=0)
    claimed_by: str | None = None
    claimed_round: int | None = None

    @model_validator(mode="after")
    def _validate_claim(self) -> Milestone:
        """Ensure claim metadata is either fully present or fully absent."""
        if (self.claimed_by is None) != (self.claimed_round is None):
            msg = "Milestone claim requires both claimant and round."
            raise ValueError(msg)
        return self


class GameState(BaseModel):
    """Complete, serialisable state of one game."""

    model_config = ConfigDict(frozen=True)

    configuration: RulesConfiguration
    seed: int
    random_step: int = Field(default=0, ge=0)
    phase: GamePhase = GamePhase.SETUP
    current_round: int = Field(default=0, ge=0)
    players: tuple[Player, ...] = Field(default_factory=tuple)
    round_state: RoundState = Field(default_factory=RoundState)
    milestones: tuple[Milestone, ...] = Field(default_factory=tuple)
    event_deck: tuple[str, ...] = Field(default_factory=tuple)
    used_events: tuple[str, ...] = Field(default_factory=tuple)
    persona_deck: tuple[str, ...] = Field(default_factory=tuple)
    dealt_leader_cards: dict[str, tuple[str, ...]] = Field(default_factory=dict)
    app_deck: tuple[str, ...] = Field(default_factory=tuple)
    themes: tuple[str, ...] = Field(default_factory=tuple)
    final_scores: dict[str, int] = Field(default_factory=dict)
    winner_ids: tuple[str, ...] = Field(default_factory=tuple)
    journal: tuple[LoggedEvent, ...] = Field(default_factory=tuple)

    def find_player(self, player_id: str) -> Player | None:
        for player in self.players:
            if player.id == player_id:
                return player
        return None

    def player(self, player_id: str) -> Player:
        """Return the player *player_id* or raise for unknown ids."""
        player = self.find_player(player_id)
        if player is None:
            msg = f"Unknown player '{player_id}'."
            raise ProgrammerError(msg)
        return player

    def replace_player(self, player: Player) -> GameState:
        players = tuple(player if p.id == player.id else p for p in self.players)
        return self.model_copy(update={"players": players})

    def active_theme(self) -> QuarterlyTheme | None:
        """Return the quarterly theme in effect this round, if any."""
        if self.round_state.theme_id is None:
            return None
        return get_theme(self.round_state.theme_id)

    def action_cost(self, action: ActionType) -> int:
        """Return the money cost of *action* after theme modifiers."""
        base_cost = get_action_space(action).cost
        theme = self.active_theme()
        if theme is None:
            return base_cost
        return theme.cost_of(action, base_cost)

    def with_round_state(self, **updates: Any) -> GameState:
        return self.model_copy(
            update={"round_state": self.round_state.model_copy(update=updates)}
        )

    def draw_rng(self) -> tuple[DeterministicRandomService, GameState]:
        """Return a generator for the next randomised step and the advanced state."""
        rng = DeterministicRandomService.for_step(self.seed, self.random_step)
        return rng, self.model_copy(update={"random_step": self.random_step + 1})

    def record(
        self,
        event_type: str,
        message: str | None = None,
        *,
        player_id: str | None = None,
        **payload: Any,
    ) -> GameState:
        """Append a journal entry for the current round and phase."""
        event = LoggedEvent(
            round_index=self.current_round,
            phase=self.phase.value,
            event_type=event_type,
            message=message,
            player_id=player_id,
            payload=payload,
        )
        return self.model_copy(update={"journal": (*self.journal, event)})


__all__ = [
    "BACKEND_REVERT_POWER",
    "BASE_POWER",
    "COMMIT_CODE_POWER",
    "AuctionState",
    "Bid",
    "BidResult",
    "Engineer",
    "GameState",
    "HiredEngineer",
    "Milestone",
    "PickOrderState",
    "PlannedAction",
    "Player",
    "PowerUseTracker",
    "PublishedApp",
    "PuzzleReward",
    "PuzzleState",
    "PuzzleSubmission",
    "RoundState",
    "SprintPlayerState",
    "SprintState",
    "SprintToken",
    "SprintTokenKind",
    "Strategy",
    "TurnState",
]
