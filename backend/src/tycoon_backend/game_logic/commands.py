"""Command payloads accepted by the game state service.

Commands form a discriminated union on ``kind`` so that HTTP bodies and
stored command logs validate straight into the right model. Each command
knows which rules transition it maps to through :meth:`apply`.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import Annotated, Literal

from pydantic import BaseModel, Field, TypeAdapter
from pydantic.config import ConfigDict

from tycoon_backend.game_logic import (
    draft,
    event_resolution,
    grid_actions,
    planning,
    puzzle,
    resolution,
    rounds,
    scoring,
    setup,
    sprint,
)
from tycoon_backend.game_logic.catalog.puzzles import CodeBlock  # noqa: TC001
from tycoon_backend.game_logic.phases import GamePhase
from tycoon_backend.game_logic.state import GameState  # noqa: TC001
from tycoon_backend.shared.enums import (
    ActionType,
    CorporationStyle,
    FundingType,
    ProductType,
    TechApproach,
)


class CommandBase(BaseModel):
    """Common configuration shared by all commands."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    @abstractmethod
    def apply(self, state: GameState) -> GameState:
        """Return the state after this command, or *state* itself if illegal."""


class PlayerCommand(CommandBase):
    player_id: str = Field(..., min_length=1)


class SetPlayerName(PlayerCommand):
    kind: Literal["set-player-name"] = "set-player-name"
    name: str = Field(..., min_length=1, max_length=40)

    def apply(self, state: GameState) -> GameState:
        return setup.set_player_name(state, self.player_id, self.name)


class SelectLeader(PlayerCommand):
    kind: Literal["select-leader"] = "select-leader"
    persona_id: str

    def apply(self, state: GameState) -> GameState:
        return setup.select_leader(state, self.player_id, self.persona_id)


class SelectFunding(PlayerCommand):
    kind: Literal["select-funding"] = "select-funding"
    funding: FundingType

    def apply(self, state: GameState) -> GameState:
        return setup.select_funding(state, self.player_id, self.funding)


class SelectStrategy(PlayerCommand):
    kind: Literal["select-strategy"] = "select-strategy"
    funding: FundingType
    tech: TechApproach | None = None
    product: ProductType | None = None
    corporation_style: CorporationStyle | None = None

    def apply(self, state: GameState) -> GameState:
        return setup.select_strategy(
            state,
            self.player_id,
            self.funding,
            self.tech,
            self.product,
            self.corporation_style,
        )


class UsePivotPower(PlayerCommand):
    kind: Literal["use-pivot-power"] = "use-pivot-power"
    product: ProductType

    def apply(self, state: GameState) -> GameState:
        return setup.use_pivot_power(state, self.player_id, self.product)


class PickEngineer(PlayerCommand):
    kind: Literal["pick-engineer"] = "pick-engineer"
    engineer_id: str

    def apply(self, state: GameState) -> GameState:
        return draft.pick_engineer(state, self.player_id, self.engineer_id)


class PassDraftPick(PlayerCommand):
    kind: Literal["pass-draft-pick"] = "pass-draft-pick"

    def apply(self, state: GameState) -> GameState:
        return draft.pass_draft_pick(state, self.player_id)


class SubmitBid(PlayerCommand):
    kind: Literal["submit-bid"] = "submit-bid"
    engineer_id: str
    amount: int = Field(..., ge=0)

    def apply(self, state: GameState) -> GameState:
        return draft.submit_bid(state, self.player_id, self.engineer_id, self.amount)


class ResolveBids(CommandBase):
    kind: Literal["resolve-bids"] = "resolve-bids"

    def apply(self, state: GameState) -> GameState:
        return draft.resolve_bids(state)


class PlaceAuctionBid(PlayerCommand):
    kind: Literal["place-auction-bid"] = "place-auction-bid"
    amount: int = Field(..., ge=0)

    def apply(self, state: GameState) -> GameState:
        return draft.place_auction_bid(state, self.player_id, self.amount)


class PassAuction(PlayerCommand):
    kind: Literal["pass-auction"] = "pass-auction"

    def apply(self, state: GameState) -> GameState:
        return draft.pass_auction(state, self.player_id)


class AssignEngineer(PlayerCommand):
    kind: Literal["assign-engineer"] = "assign-engineer"
    engineer_id: str
    action: ActionType
    use_ai: bool = False

    def apply(self, state: GameState) -> GameState:
        return planning.assign_engineer(
            state, self.player_id, self.engineer_id, self.action, use_ai=self.use_ai
        )


class UnassignEngineer(PlayerCommand):
    kind: Literal["unassign-engineer"] = "unassign-engineer"
    engineer_id: str

    def apply(self, state: GameState) -> GameState:
        return planning.unassign_engineer(state, self.player_id, self.engineer_id)


class LockPlan(PlayerCommand):
    kind: Literal["lock-plan"] = "lock-plan"

    def apply(self, state: GameState) -> GameState:
        return planning.lock_plan(state, self.player_id)


class ClaimActionSlot(PlayerCommand):
    """Place an engineer on your turn of sequential planning or the action draft."""

    kind: Literal["claim-action-slot"] = "claim-action-slot"
    engineer_id: str
    action: ActionType
    use_ai: bool = False

    def apply(self, state: GameState) -> GameState:
        if state.phase is GamePhase.ACTION_DRAFT:
            return planning.claim_action_draft(
                state, self.player_id, self.engineer_id, self.action, use_ai=self.use_ai
            )
        return planning.claim_action_slot(
            state, self.player_id, self.engineer_id, self.action, use_ai=self.use_ai
        )


class PlaceTokenOnGrid(PlayerCommand):
    kind: Literal["place-token-on-grid"] = "place-token-on-grid"
    pool_index: int = Field(..., ge=0)
    row: int = Field(..., ge=0)
    col: int = Field(..., ge=0)

    def apply(self, state: GameState) -> GameState:
        return planning.place_token_on_grid(
            state, self.player_id, self.pool_index, self.row, self.col
        )


class SwapGridCells(PlayerCommand):
    kind: Literal["swap-grid-cells"] = "swap-grid-cells"
    first: tuple[int, int]
    second: tuple[int, int]

    def apply(self, state: GameState) -> GameState:
        return planning.swap_grid_cells(state, self.player_id, self.first, self.second)


class EndTurn(PlayerCommand):
    kind: Literal["end-turn"] = "end-turn"

    def apply(self, state: GameState) -> GameState:
        return planning.end_turn(state, self.player_id)


class Reveal(CommandBase):
    kind: Literal["reveal"] = "reveal"

    def apply(self, state: GameState) -> GameState:
        return planning.reveal(state)


class DrawSprintToken(PlayerCommand):
    kind: Literal["draw-sprint-token"] = "draw-sprint-token"

    def apply(self, state: GameState) -> GameState:
        return sprint.draw_sprint_token(state, self.player_id)


class StopSprint(PlayerCommand):
    kind: Literal["stop-sprint"] = "stop-sprint"

    def apply(self, state: GameState) -> GameState:
        return sprint.stop_sprint(state, self.player_id)


class EndSprint(CommandBase):
    kind: Literal["end-sprint"] = "end-sprint"

    def apply(self, state: GameState) -> GameState:
        return sprint.end_sprint(state)


class SubmitPuzzleSolution(PlayerCommand):
    kind: Literal["submit-puzzle-solution"] = "submit-puzzle-solution"
    blocks: tuple[CodeBlock, ...]
    solve_time_ms: int = Field(..., ge=0)

    def apply(self, state: GameState) -> GameState:
        return puzzle.submit_puzzle_solution(
            state, self.player_id, self.blocks, self.solve_time_ms
        )


class EndPuzzle(CommandBase):
    kind: Literal["end-puzzle"] = "end-puzzle"

    def apply(self, state: GameState) -> GameState:
        return puzzle.end_puzzle(state)


class ResolveActions(CommandBase):
    kind: Literal["resolve-actions"] = "resolve-actions"

    def apply(self, state: GameState) -> GameState:
        return resolution.resolve_actions(state)


class ApplyEvent(CommandBase):
    kind: Literal["apply-event"] = "apply-event"

    def apply(self, state: GameState) -> GameState:
        return event_resolution.apply_event(state)


class EndRound(CommandBase):
    kind: Literal["end-round"] = "end-round"

    def apply(self, state: GameState) -> GameState:
        return rounds.end_round(state)


class CalculateWinner(CommandBase):
    kind: Literal["calculate-winner"] = "calculate-winner"

    def apply(self, state: GameState) -> GameState:
        final_round = state.current_round >= state.configuration.total_quarters
        if state.phase is GamePhase.GAME_END and not state.final_scores:
            return scoring.calculate_winner(state)
        if state.phase is GamePhase.ROUND_END and final_round:
            return scoring.calculate_winner(state)
        return state


class ClaimAppCard(PlayerCommand):
    kind: Literal["claim-app-card"] = "claim-app-card"
    card_id: str

    def apply(self, state: GameState) -> GameState:
        return grid_actions.claim_app_card(state, self.player_id, self.card_id)


class PublishApp(PlayerCommand):
    kind: Literal["publish-app"] = "publish-app"
    card_id: str
    row: int = Field(..., ge=0)
    col: int = Field(..., ge=0)

    def apply(self, state: GameState) -> GameState:
        return grid_actions.publish_app(
            state, self.player_id, self.card_id, self.row, self.col
        )


class CommitCode(PlayerCommand):
    kind: Literal["commit-code"] = "commit-code"
    row: int = Field(..., ge=0)
    col: int = Field(..., ge=0)
    direction: Literal["row", "col"] = "row"
    length: int = Field(default=3, ge=3, le=4)

    def apply(self, state: GameState) -> GameState:
        return grid_actions.commit_code(
            state, self.player_id, self.row, self.col, self.direction, self.length
        )


GameCommand = Annotated[
    SetPlayerName
    | SelectLeader
    | SelectFunding
    | SelectStrategy
    | UsePivotPower
    | PickEngineer
    | PassDraftPick
    | SubmitBid
    | ResolveBids
    | PlaceAuctionBid
    | PassAuction
    | AssignEngineer
    | UnassignEngineer
    | LockPlan
    | ClaimActionSlot
    | PlaceTokenOnGrid
    | SwapGridCells
    | EndTurn
    | Reveal
    | DrawSprintToken
    | StopSprint
    | EndSprint
    | SubmitPuzzleSolution
    | EndPuzzle
    | ResolveActions
    | ApplyEvent
    | EndRound
    | CalculateWinner
    | ClaimAppCard
    | PublishApp
    | CommitCode,
    Field(discriminator="kind"),
]

GAME_COMMAND_ADAPTER: TypeAdapter[GameCommand] = TypeAdapter(GameCommand)


def parse_command(payload: object) -> GameCommand:
    """Validate a raw mapping into the matching command model."""
    return GAME_COMMAND_ADAPTER.validate_python(payload)


__all__ = [
    "GAME_COMMAND_ADAPTER",
    "ApplyEvent",
    "AssignEngineer",
    "CalculateWinner",
    "ClaimActionSlot",
    "ClaimAppCard",
    "CommandBase",
    "CommitCode",
    "DrawSprintToken",
    "EndPuzzle",
    "EndRound",
    "EndSprint",
    "EndTurn",
    "GameCommand",
    "LockPlan",
    "PassAuction",
    "PassDraftPick",
    "PickEngineer",
    "PlaceAuctionBid",
    "PlaceTokenOnGrid",
    "PublishApp",
    "ResolveActions",
    "ResolveBids",
    "Reveal",
    "SelectFunding",
    "SelectLeader",
    "SelectStrategy",
    "SetPlayerName",
    "StopSprint",
    "SubmitBid",
    "SubmitPuzzleSolution",
    "SwapGridCells",
    "UnassignEngineer",
    "UsePivotPower",
    "parse_command",
]
