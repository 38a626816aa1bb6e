"""Block-program puzzle played instead of the sprint when configured.

The interpreter walks a cursor over a :class:`PuzzleGrid`; a program succeeds
when every coin has been collected. Moving into a wall or off the board halts
execution, as does exceeding the step budget.
"""

from __future__ import annotations

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict

from tycoon_backend.game_logic.catalog.puzzles import (
    BlockType,
    CodeBlock,
    Condition,
    Direction,
    Puzzle,
    count_blocks,
    generate_puzzle,
)
from tycoon_backend.game_logic.phases import GamePhase
from tycoon_backend.game_logic.state import (
    GameState,
    PuzzleReward,
    PuzzleState,
    PuzzleSubmission,
)
from tycoon_backend.shared.enums import ActionType

MAX_STEPS = 1000
MAX_WHILE_ITERATIONS = 100
MAX_DEBT_REDUCTION = 3
FULL_TEAM_BONUS = 10

_DELTAS: dict[Direction, tuple[int, int]] = {
    Direction.UP: (0, -1),
    Direction.DOWN: (0, 1),
    Direction.LEFT: (-1, 0),
    Direction.RIGHT: (1, 0),
}
_LEFT_OF: dict[Direction, Direction] = {
    Direction.UP: Direction.LEFT,
    Direction.LEFT: Direction.DOWN,
    Direction.DOWN: Direction.RIGHT,
    Direction.RIGHT: Direction.UP,
}
_RIGHT_OF: dict[Direction, Direction] = {value: key for key, value in _LEFT_OF.items()}


class ExecutionResult(BaseModel):
    """Outcome of running a block program against a puzzle."""

    model_config = ConfigDict(frozen=True)

    success: bool
    coins_collected: int = Field(..., ge=0)
    steps: int = Field(..., ge=0)
    halted: bool = False


class _Machine:
    def __init__(self, puzzle: Puzzle) -> None:
        grid = puzzle.grid
        self.width = grid.width
        self.height = grid.height
        self.walls = set(grid.walls)
        self.coins = set(grid.coins)
        self.position = grid.start
        self.direction = grid.start_direction
        self.collected = 0
        self.steps = 0
        self.halted = False

    def _ahead(self) -> tuple[int, int]:
        dx, dy = _DELTAS[self.direction]
        return self.position[0] + dx, self.position[1] + dy

    def _on_board(self, cell: tuple[int, int]) -> bool:
        return 0 <= cell[0] < self.width and 0 <= cell[1] < self.height

    def check(self, condition: Condition | None) -> bool:
        ahead = self._ahead()
        match condition:
            case Condition.HAS_COIN:
                return self.position in self.coins
            case Condition.PATH_CLEAR:
                return self._on_board(ahead) and ahead not in self.walls
            case Condition.AT_EDGE:
                return not self._on_board(ahead)
        return False

    def run(self, blocks: tuple[CodeBlock, ...]) -> None:
        for block in blocks:
            if self.halted:
                return
            self.steps += 1
            if self.steps > MAX_STEPS:
                self.halted = True
                return
            self._execute(block)

    def _execute(self, block: CodeBlock) -> None:
        match block.type:
            case BlockType.MOVE:
                ahead = self._ahead()
                if not self._on_board(ahead) or ahead in self.walls:
                    self.halted = True
                    return
                self.position = ahead
            case BlockType.TURN_LEFT:
                self.direction = _LEFT_OF[self.direction]
            case BlockType.TURN_RIGHT:
                self.direction = _RIGHT_OF[self.direction]
            case BlockType.COLLECT:
                if self.position in self.coins:
                    self.coins.remove(self.position)
                    self.collected += 1
            case BlockType.LOOP:
                for _ in range(block.value or 0):
                    if self.halted:
                        return
                    self.run(block.children)
            case BlockType.IF:
                if self.check(block.condition):
                    self.run(block.children)
            case BlockType.WHILE:
                iterations = 0
                while (
                    not self.halted
                    and iterations < MAX_WHILE_ITERATIONS
                    and self.check(block.condition)
                ):
                    self.run(block.children)
                    iterations += 1
            case BlockType.FUNCTION:
                self.run(block.children)


def run_program(puzzle: Puzzle, blocks: tuple[CodeBlock, ...]) -> ExecutionResult:
    """Execute *blocks* against *puzzle* and report the coins collected."""
    machine = _Machine(puzzle)
    machine.run(blocks)
    return ExecutionResult(
        success=not machine.coins,
        coins_collected=machine.collected,
        steps=min(machine.steps, MAX_STEPS),
        halted=machine.halted,
    )


def start_puzzle(state: GameState) -> GameState:
    """Generate this round's puzzle, difficulty following the round number."""
    rng, state = state.draw_rng()
    puzzle = generate_puzzle(state.current_round, rng, round_number=state.current_round)
    state = state.with_round_state(puzzle=PuzzleState(puzzle=puzzle))
    state = state.model_copy(update={"phase": GamePhase.PUZZLE})
    return state.record("puzzle-started", puzzle_id=puzzle.id, difficulty=puzzle.difficulty)


def submit_puzzle_solution(
    state: GameState,
    player_id: str,
    blocks: tuple[CodeBlock, ...],
    solve_time_ms: int,
) -> GameState:
    """Record a player's program; each player submits at most once."""
    puzzle_state = state.round_state.puzzle
    if state.phase is not GamePhase.PUZZLE or puzzle_state is None:
        return state
    state.player(player_id)
    if any(s.player_id == player_id for s in puzzle_state.submissions):
        return state
    result = run_program(puzzle_state.puzzle, blocks)
    submission = PuzzleSubmission(
        player_id=player_id,
        blocks=blocks,
        block_count=count_blocks(blocks),
        solve_time_ms=max(0, solve_time_ms),
        is_correct=result.success,
        coins_collected=result.coins_collected,
    )
    puzzle_state = puzzle_state.model_copy(
        update={"submissions": (*puzzle_state.submissions, submission)}
    )
    state = state.with_round_state(puzzle=puzzle_state)
    return state.record(
        "puzzle-submitted",
        player_id=player_id,
        correct=result.success,
        blocks=submission.block_count,
    )


def puzzle_winner(puzzle_state: PuzzleState) -> PuzzleSubmission | None:
    """Fewest blocks wins, then the fastest time."""
    correct = [s for s in puzzle_state.submissions if s.is_correct]
    if not correct:
        return None
    return min(correct, key=lambda s: (s.block_count, s.solve_time_ms))


def end_puzzle(state: GameState) -> GameState:
    """Decide the winner and stash the reward for the resolution step."""
    puzzle_state = state.round_state.puzzle
    if state.phase is not GamePhase.PUZZLE or puzzle_state is None:
        return state
    winner = puzzle_winner(puzzle_state)
    reward = None
    if winner is not None:
        engineers = state.player(winner.player_id).engineers_on(ActionType.OPTIMIZE_CODE)
        reward = PuzzleReward(
            winner_id=winner.player_id,
            tech_debt_reduction=min(engineers, MAX_DEBT_REDUCTION),
            money=FULL_TEAM_BONUS if engineers >= MAX_DEBT_REDUCTION else 0,
        )
    state = state.with_round_state(
        puzzle=puzzle_state.model_copy(update={"reward": reward})
    )
    state = state.model_copy(update={"phase": GamePhase.RESOLUTION})
    return state.record(
        "puzzle-ended", winner_id=None if winner is None else winner.player_id
    )


def apply_puzzle_reward(state: GameState) -> GameState:
    """Pay out a pending puzzle reward once."""
    puzzle_state = state.round_state.puzzle
    if puzzle_state is None or puzzle_state.reward is None:
        return state
    reward = puzzle_state.reward
    player = state.player(reward.winner_id)
    player = player.adjust_resources(
        tech_debt=-reward.tech_debt_reduction, money=reward.money
    )
    state = state.replace_player(player)
    state = state.with_round_state(puzzle=puzzle_state.model_copy(update={"reward": None}))
    return state.record(
        "puzzle-reward",
        player_id=reward.winner_id,
        tech_debt_reduction=reward.tech_debt_reduction,
        money=reward.money,
    )


__all__ = [
    "MAX_STEPS",
    "MAX_WHILE_ITERATIONS",
    "ExecutionResult",
    "apply_puzzle_reward",
    "end_puzzle",
    "puzzle_winner",
    "run_program",
    "start_puzzle",
    "submit_puzzle_solution",
]
