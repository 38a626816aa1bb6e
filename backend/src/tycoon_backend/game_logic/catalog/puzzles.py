"""Puzzle templates and block-program models for the puzzle mini-game."""

from __future__ import annotations

from enum import StrEnum
from typing import TYPE_CHECKING

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict

if TYPE_CHECKING:
    from tycoon_backend.shared.rng import DeterministicRandomService


class Direction(StrEnum):
    """Headings of the puzzle cursor."""

    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"


class BlockType(StrEnum):
    """Instructions available to block programs."""

    MOVE = "move"
    LOOP = "loop"
    IF = "if"
    WHILE = "while"
    FUNCTION = "function"
    COLLECT = "collect"
    TURN_LEFT = "turn-left"
    TURN_RIGHT = "turn-right"


class Condition(StrEnum):
    """Predicates usable by ``if`` and ``while`` blocks."""

    HAS_COIN = "has-coin"
    PATH_CLEAR = "path-clear"
    AT_EDGE = "at-edge"


class CodeBlock(BaseModel):
    """A single instruction, possibly containing nested instructions."""

    model_config = ConfigDict(frozen=True)

    type: BlockType
    value: int | None = Field(default=None, ge=0)
    condition: Condition | None = None
    children: tuple[CodeBlock, ...] = Field(default_factory=tuple)


CodeBlock.model_rebuild()


class PuzzleGrid(BaseModel):
    """Board layout of a puzzle; coordinates are ``(x, y)`` pairs."""

    model_config = ConfigDict(frozen=True)

    width: int = Field(..., ge=1)
    height: int = Field(..., ge=1)
    start: tuple[int, int]
    start_direction: Direction
    coins: tuple[tuple[int, int], ...]
    walls: tuple[tuple[int, int], ...] = Field(default_factory=tuple)


class Puzzle(BaseModel):
    """A generated puzzle instance for one round."""

    model_config = ConfigDict(frozen=True)

    id: str
    difficulty: int = Field(..., ge=1, le=4)
    grid: PuzzleGrid
    optimal_blocks: int = Field(..., ge=1)
    available_blocks: tuple[BlockType, ...]
    time_limit_seconds: int = Field(..., ge=1)


TIME_LIMITS = {1: 30, 2: 45, 3: 60, 4: 90}
OPTIMAL_BLOCK_BASE = {1: 3, 2: 5, 3: 7, 4: 9}

_BASIC_BLOCKS = (BlockType.MOVE, BlockType.LOOP, BlockType.COLLECT)
_TURN_BLOCKS = (*_BASIC_BLOCKS, BlockType.TURN_LEFT, BlockType.TURN_RIGHT)
AVAILABLE_BLOCKS = {
    1: _BASIC_BLOCKS,
    2: _TURN_BLOCKS,
    3: (*_TURN_BLOCKS, BlockType.IF),
    4: (*_TURN_BLOCKS, BlockType.IF, BlockType.WHILE, BlockType.FUNCTION),
}


def _line_grid(rng: DeterministicRandomService) -> PuzzleGrid:
    coin_count = rng.randint(3, 5)
    return PuzzleGrid(
        width=coin_count + 2,
        height=5,
        start=(0, 2),
        start_direction=Direction.RIGHT,
        coins=tuple((x, 2) for x in range(1, coin_count + 1)),
    )


def _medium_grid(rng: DeterministicRandomService) -> PuzzleGrid:
    if rng.randint(0, 1) == 0:
        return PuzzleGrid(
            width=6,
            height=6,
            start=(0, 0),
            start_direction=Direction.RIGHT,
            coins=((1, 0), (2, 0), (3, 0), (3, 1), (3, 2), (3, 3)),
        )
    return PuzzleGrid(
        width=6,
        height=4,
        start=(0, 1),
        start_direction=Direction.RIGHT,
        coins=((1, 1), (2, 1), (2, 2), (3, 2), (4, 2)),
    )


def _coin_field_grid(_: DeterministicRandomService) -> PuzzleGrid:
    size = 3
    return PuzzleGrid(
        width=size + 2,
        height=size + 2,
        start=(1, 0),
        start_direction=Direction.DOWN,
        coins=tuple((x, y) for y in range(1, size + 1) for x in range(1, size + 1)),
    )


def _expert_grid(rng: DeterministicRandomService) -> PuzzleGrid:
    if rng.randint(0, 1) == 0:
        return PuzzleGrid(
            width=7,
            height=5,
            start=(0, 2),
            start_direction=Direction.RIGHT,
            coins=((1, 2), (2, 1), (3, 2), (4, 3), (5, 2), (6, 2)),
            walls=((2, 2), (4, 2)),
        )
    return PuzzleGrid(
        width=5,
        height=5,
        start=(0, 0),
        start_direction=Direction.RIGHT,
        coins=(
            (1, 0),
            (2, 0),
            (3, 0),
            (4, 0),
            (4, 1),
            (4, 2),
            (4, 3),
            (4, 4),
            (3, 4),
            (2, 4),
        ),
    )


_TEMPLATES = {
    1: _line_grid,
    2: _medium_grid,
    3: _coin_field_grid,
    4: _expert_grid,
}


def generate_puzzle(
    difficulty: int, rng: DeterministicRandomService, *, round_number: int
) -> Puzzle:
    """Return a puzzle for *difficulty* (clamped into 1..4)."""
    level = max(1, min(4, difficulty))
    return Puzzle(
        id=f"puzzle-r{round_number}-d{level}",
        difficulty=level,
        grid=_TEMPLATES[level](rng),
        optimal_blocks=OPTIMAL_BLOCK_BASE[level] + rng.randint(0, 1),
        available_blocks=AVAILABLE_BLOCKS[level],
        time_limit_seconds=TIME_LIMITS[level],
    )


def count_blocks(blocks: tuple[CodeBlock, ...]) -> int:
    """Return the number of blocks in a program, nested ones included."""
    return sum(1 + count_blocks(block.children) for block in blocks)


__all__ = [
    "AVAILABLE_BLOCKS",
    "BlockType",
    "CodeBlock",
    "Condition",
    "Direction",
    "Puzzle",
    "PuzzleGrid",
    "count_blocks",
    "generate_puzzle",
]
