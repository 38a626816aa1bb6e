"""Per-player code grid and the pattern matching helpers that operate on it."""

from __future__ import annotations

from collections import deque
from typing import TYPE_CHECKING, Literal

from pydantic import BaseModel, Field, model_validator
from pydantic.config import ConfigDict

from tycoon_backend.shared.enums import TokenColor  # noqa: TC001

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

GridCell = TokenColor | None
Pattern = tuple[tuple[GridCell, ...], ...]
Position = tuple[int, int]
LineDirection = Literal["row", "col"]

GRID_SIZES: tuple[tuple[int, int], ...] = ((4, 4), (4, 5), (5, 5))
MAX_EXPANSION_LEVEL = len(GRID_SIZES) - 1


def _blank(rows: int, cols: int) -> tuple[tuple[GridCell, ...], ...]:
    return tuple(tuple(None for _ in range(cols)) for _ in range(rows))


def are_connected(positions: Sequence[Position]) -> bool:
    """Return whether *positions* form one orthogonally connected group."""
    if len(positions) <= 1:
        return True
    remaining = set(positions)
    start = positions[0]
    visited = {start}
    queue = deque([start])
    while queue:
        row, col = queue.popleft()
        for neighbour in ((row - 1, col), (row + 1, col), (row, col - 1), (row, col + 1)):
            if neighbour in remaining and neighbour not in visited:
                visited.add(neighbour)
                queue.append(neighbour)
    return len(visited) == len(remaining)


def are_adjacent(first: Position, second: Position) -> bool:
    """Return whether two cells share an edge."""
    return abs(first[0] - second[0]) + abs(first[1] - second[1]) == 1


class CodeGrid(BaseModel):
    """Immutable grid of code tokens that grows with server upgrades."""

    model_config = ConfigDict(frozen=True)

    cells: tuple[tuple[GridCell, ...], ...] = Field(default_factory=lambda: _blank(4, 4))
    expansion_level: int = Field(default=0, ge=0, le=MAX_EXPANSION_LEVEL)

    @model_validator(mode="after")
    def _validate_shape(self) -> CodeGrid:
        """Ensure the cell matrix matches the size of the expansion level."""
        rows, cols = GRID_SIZES[self.expansion_level]
        if len(self.cells) != rows or any(len(row) != cols for row in self.cells):
            msg = (
                f"Grid at expansion level {self.expansion_level} must be "
                f"{rows}x{cols}."
            )
            raise ValueError(msg)
        return self

    @classmethod
    def empty(cls, expansion_level: int = 0) -> CodeGrid:
        """Return an empty grid at *expansion_level*."""
        rows, cols = GRID_SIZES[expansion_level]
        return cls(cells=_blank(rows, cols), expansion_level=expansion_level)

    @property
    def rows(self) -> int:
        return len(self.cells)

    @property
    def cols(self) -> int:
        return len(self.cells[0])

    def in_bounds(self, row: int, col: int) -> bool:
        """Return whether (*row*, *col*) lies on the grid."""
        return 0 <= row < self.rows and 0 <= col < self.cols

    def cell(self, row: int, col: int) -> GridCell:
        """Return the token at (*row*, *col*) or ``None`` when empty/outside."""
        if not self.in_bounds(row, col):
            return None
        return self.cells[row][col]

    def _with_cells(self, updates: dict[Position, GridCell]) -> CodeGrid:
        cells = [list(row) for row in self.cells]
        for (row, col), value in updates.items():
            cells[row][col] = value
        return CodeGrid(
            cells=tuple(tuple(row) for row in cells),
            expansion_level=self.expansion_level,
        )

    def place(self, row: int, col: int, color: TokenColor) -> CodeGrid | None:
        """Place *color* on an empty cell; ``None`` when the move is illegal."""
        if not self.in_bounds(row, col) or self.cells[row][col] is not None:
            return None
        return self._with_cells({(row, col): color})

    def place_many(
        self, placements: Sequence[tuple[int, int, TokenColor]]
    ) -> CodeGrid | None:
        """Place several tokens at once; two or more must be connected."""
        if not placements:
            return self
        positions = [(row, col) for row, col, _ in placements]
        if len(set(positions)) != len(positions) or not are_connected(positions):
            return None
        grid: CodeGrid | None = self
        for row, col, color in placements:
            if grid is None:
                return None
            grid = grid.place(row, col, color)
        return grid

    def remove(self, row: int, col: int) -> tuple[CodeGrid, GridCell]:
        """Remove the token at (*row*, *col*) returning the grid and the colour."""
        color = self.cell(row, col)
        if color is None:
            return self, None
        return self._with_cells({(row, col): None}), color

    def clear(self, positions: Iterable[Position]) -> CodeGrid:
        """Return a grid with every position in *positions* emptied."""
        updates = {pos: None for pos in positions if self.in_bounds(*pos)}
        if not updates:
            return self
        return self._with_cells(updates)

    def swap(self, first: Position, second: Position) -> CodeGrid | None:
        """Swap two orthogonally adjacent cells; ``None`` when illegal."""
        if not (self.in_bounds(*first) and self.in_bounds(*second)):
            return None
        if not are_adjacent(first, second):
            return None
        return self._with_cells(
            {first: self.cell(*second), second: self.cell(*first)}
        )

    def expand(self) -> CodeGrid | None:
        """Grow the grid by one level keeping tokens in place."""
        if self.expansion_level >= MAX_EXPANSION_LEVEL:
            return None
        level = self.expansion_level + 1
        rows, cols = GRID_SIZES[level]
        cells = tuple(
            tuple(self.cell(row, col) for col in range(cols)) for row in range(rows)
        )
        return CodeGrid(cells=cells, expansion_level=level)

    def token_count(self) -> int:
        """Return how many tokens sit on the grid."""
        return sum(1 for row in self.cells for cell in row if cell is not None)

    def can_fit(self, pattern: Pattern) -> bool:
        """Return whether a pattern's footprint fits on the grid at all."""
        return len(pattern) <= self.rows and len(pattern[0]) <= self.cols

    def _pattern_hits(self, pattern: Pattern, row: int, col: int) -> list[Position]:
        hits: list[Position] = []
        for dr, pattern_row in enumerate(pattern):
            for dc, expected in enumerate(pattern_row):
                if expected is None:
                    continue
                if self.cell(row + dr, col + dc) == expected:
                    hits.append((row + dr, col + dc))
        return hits

    def match_pattern(self, pattern: Pattern, row: int, col: int) -> int:
        """Count tokens that match *pattern* anchored at (*row*, *col*)."""
        return len(self._pattern_hits(pattern, row, col))

    def best_match(self, pattern: Pattern) -> tuple[int, int, int] | None:
        """Return ``(row, col, matched)`` for the best anchor of *pattern*."""
        if not self.can_fit(pattern):
            return None
        best: tuple[int, int, int] | None = None
        for row in range(self.rows - len(pattern) + 1):
            for col in range(self.cols - len(pattern[0]) + 1):
                matched = self.match_pattern(pattern, row, col)
                if best is None or matched > best[2]:
                    best = (row, col, matched)
        return best

    def clear_pattern(self, pattern: Pattern, row: int, col: int) -> CodeGrid:
        """Remove only the tokens that match *pattern* at (*row*, *col*)."""
        return self.clear(self._pattern_hits(pattern, row, col))

    def line(
        self, row: int, col: int, direction: LineDirection, count: int
    ) -> tuple[Position, ...] | None:
        """Return *count* positions starting at (*row*, *col*) along *direction*."""
        d_row, d_col = (0, 1) if direction == "row" else (1, 0)
        positions = tuple((row + d_row * step, col + d_col * step) for step in range(count))
        if not all(self.in_bounds(*pos) for pos in positions):
            return None
        return positions


__all__ = [
    "GRID_SIZES",
    "MAX_EXPANSION_LEVEL",
    "CodeGrid",
    "GridCell",
    "LineDirection",
    "Pattern",
    "Position",
    "are_adjacent",
    "are_connected",
]
