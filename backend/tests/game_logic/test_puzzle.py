"""Tests for the block-program puzzle mini-game."""

from __future__ import annotations

import pytest

from tycoon_backend.game_logic.catalog.puzzles import (
    BlockType,
    CodeBlock,
    Condition,
    Direction,
    Puzzle,
    PuzzleGrid,
    count_blocks,
    generate_puzzle,
)
from tycoon_backend.game_logic.phases import GamePhase
from tycoon_backend.game_logic.puzzle import (
    FULL_TEAM_BONUS,
    apply_puzzle_reward,
    end_puzzle,
    run_program,
    submit_puzzle_solution,
)
from tycoon_backend.game_logic.state import PlannedAction, PuzzleState, RoundState
from tycoon_backend.shared.enums import ActionType
from tycoon_backend.shared.rng import DeterministicRandomService

MOVE = CodeBlock(type=BlockType.MOVE)
COLLECT = CodeBlock(type=BlockType.COLLECT)

PUZZLE = Puzzle(
    id="puzzle-test",
    difficulty=1,
    grid=PuzzleGrid(
        width=4,
        height=1,
        start=(0, 0),
        start_direction=Direction.RIGHT,
        coins=((2, 0), (3, 0)),
    ),
    optimal_blocks=4,
    available_blocks=(BlockType.MOVE, BlockType.LOOP, BlockType.COLLECT),
    time_limit_seconds=30,
)

LOOPED = (
    CodeBlock(type=BlockType.LOOP, value=2, children=(MOVE,)),
    COLLECT,
    MOVE,
    COLLECT,
)
STRAIGHT = (MOVE, MOVE, COLLECT, MOVE, COLLECT)


@pytest.fixture
def puzzle_state(make_player, make_engineer, make_state):
    def factory(optimizers: int = 1):
        engineers = tuple(make_engineer(f"eng-{index}") for index in range(optimizers))
        planned = tuple(
            PlannedAction(engineer_id=e.id, action_type=ActionType.OPTIMIZE_CODE)
            for e in engineers
        )
        players = (
            make_player(
                "player-1", 0, tech_debt=5, engineers=engineers, planned_actions=planned
            ),
            make_player("player-2", 1, tech_debt=5),
        )
        return make_state(
            *players,
            phase=GamePhase.PUZZLE,
            round_state=RoundState(round_number=1, puzzle=PuzzleState(puzzle=PUZZLE)),
        )

    return factory


def test_program_collects_every_coin() -> None:
    result = run_program(PUZZLE, LOOPED)

    assert result.success
    assert result.coins_collected == 2
    assert not result.halted


def test_walking_off_the_board_halts() -> None:
    result = run_program(PUZZLE, (*STRAIGHT, MOVE, COLLECT))

    assert result.halted
    assert result.success


def test_while_loop_walks_to_the_edge() -> None:
    program = (
        CodeBlock(
            type=BlockType.WHILE,
            condition=Condition.PATH_CLEAR,
            children=(MOVE, COLLECT),
        ),
    )

    result = run_program(PUZZLE, program)

    assert result.success
    assert not result.halted


def test_count_blocks_includes_nested() -> None:
    assert count_blocks(LOOPED) == 5


def test_generated_puzzle_difficulty_is_clamped() -> None:
    puzzle = generate_puzzle(9, DeterministicRandomService(1), round_number=9)

    assert puzzle.difficulty == 4
    assert BlockType.WHILE in puzzle.available_blocks


def test_fewest_blocks_then_fastest_wins(puzzle_state) -> None:
    state = puzzle_state()
    state = submit_puzzle_solution(state, "player-2", STRAIGHT, 1000)
    state = submit_puzzle_solution(state, "player-1", LOOPED, 5000)
    assert submit_puzzle_solution(state, "player-1", LOOPED, 10) is state

    state = end_puzzle(state)

    reward = state.round_state.puzzle.reward
    assert state.phase is GamePhase.RESOLUTION
    assert reward.winner_id == "player-2"
    assert reward.tech_debt_reduction == 0


def test_reward_scales_with_optimizers_and_pays_once(puzzle_state) -> None:
    state = puzzle_state(optimizers=3)
    state = submit_puzzle_solution(state, "player-1", STRAIGHT, 2000)
    state = end_puzzle(state)

    state = apply_puzzle_reward(state)
    winner = state.player("player-1")
    assert winner.resources.tech_debt == 2
    assert winner.resources.money == 100 + FULL_TEAM_BONUS
    assert apply_puzzle_reward(state) is state


def test_no_correct_submission_means_no_reward(puzzle_state) -> None:
    state = puzzle_state()
    state = submit_puzzle_solution(state, "player-1", (MOVE,), 100)

    state = end_puzzle(state)

    assert state.round_state.puzzle.reward is None
