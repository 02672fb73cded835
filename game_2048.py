"""
2048 Game Engine
Grid mutation rules, random tile spawning and win/stalemate detection.
"""

import logging
import random
from enum import Enum
from typing import List, Optional, Tuple


logger = logging.getLogger(__name__)

DEFAULT_SIZE = 4
CELL_WIDTH = 4


class Direction(Enum):
    UP = 'U'
    DOWN = 'D'
    LEFT = 'L'
    RIGHT = 'R'

    @classmethod
    def from_key(cls, key: str) -> "Direction":
        """Parse a case-insensitive direction key (U, D, L or R)."""
        try:
            return cls(key.strip().upper())
        except ValueError:
            raise ValueError(f"Invalid direction: {key!r}. Must be one of U, D, L, R") from None


class Difficulty(Enum):
    # key, win target, a spawned tile is 4 when the 1..10 draw exceeds this
    EASY = ('E', 256, 5)
    MEDIUM = ('M', 512, 7)
    HARD = ('H', 1024, 9)

    def __init__(self, key: str, target: int, four_threshold: int):
        self.key = key
        self.target = target
        self.four_threshold = four_threshold

    @classmethod
    def from_key(cls, key: str) -> "Difficulty":
        """Parse a case-insensitive difficulty key (E, M or H)."""
        wanted = key.strip().upper()
        for mode in cls:
            if mode.key == wanted:
                return mode
        raise ValueError(f"Invalid mode: {key!r}. Must be one of E, M, H")


class Outcome(Enum):
    IN_PROGRESS = 'in_progress'
    WON = 'won'
    LOST = 'lost'


def _is_tile_value(value: int) -> bool:
    return value == 0 or (value >= 2 and value & (value - 1) == 0)


def _sweep_line(grid: List[List[int]], cells: List[Tuple[int, int]]) -> bool:
    """
    Slide and merge one line of the grid in place.

    Args:
        grid: Grid to modify
        cells: Coordinates of the line, ordered from the edge the tiles
            travel toward to the opposite edge

    Returns:
        True if any cell in the line changed
    """
    changed = False
    merged = [False] * len(cells)

    for i in range(1, len(cells)):
        row, col = cells[i]
        value = grid[row][col]
        if value == 0:
            continue

        # Walk toward the destination edge over empty cells
        dest = i
        while dest > 0 and grid[cells[dest - 1][0]][cells[dest - 1][1]] == 0:
            dest -= 1

        if dest > 0:
            next_row, next_col = cells[dest - 1]
            if grid[next_row][next_col] == value and not merged[dest - 1]:
                grid[next_row][next_col] = value * 2
                grid[row][col] = 0
                merged[dest - 1] = True
                changed = True
                continue

        if dest != i:
            dest_row, dest_col = cells[dest]
            grid[dest_row][dest_col] = value
            grid[row][col] = 0
            changed = True

    return changed


class GridEngine:
    """
    Owns the game grid and applies moves, spawns and terminal-state checks.

    The grid is mutated in place; callers that need to keep a copy should
    use snapshot().
    """

    def __init__(
        self,
        difficulty: Difficulty,
        size: int = DEFAULT_SIZE,
        rng: Optional[random.Random] = None,
        grid: Optional[List[List[int]]] = None,
    ):
        if size < 2:
            raise ValueError(f"Grid size must be at least 2, got {size}")

        self.difficulty = difficulty
        self.size = size
        self.rng = rng if rng is not None else random.Random()

        if grid is None:
            self.grid = [[0] * size for _ in range(size)]
        else:
            self.grid = self._validated(grid)

    @property
    def target(self) -> int:
        return self.difficulty.target

    def _validated(self, grid: List[List[int]]) -> List[List[int]]:
        if len(grid) != self.size or any(len(row) != self.size for row in grid):
            raise ValueError(f"Grid must be {self.size}x{self.size}")
        for row in grid:
            for value in row:
                if isinstance(value, bool) or not isinstance(value, int) or not _is_tile_value(value):
                    raise ValueError(f"Invalid tile value: {value!r}")
                if value > self.target:
                    raise ValueError(f"Tile value {value} exceeds the target {self.target}")
        return [list(row) for row in grid]

    def start(self) -> None:
        """Place the two opening tiles."""
        self.spawn_random_tile()
        self.spawn_random_tile()

    def _line_cells(self, direction: Direction, index: int) -> List[Tuple[int, int]]:
        # Cells of one row/column, nearest to the destination edge first
        span = range(self.size)
        if direction == Direction.LEFT:
            return [(index, col) for col in span]
        if direction == Direction.RIGHT:
            return [(index, col) for col in reversed(span)]
        if direction == Direction.UP:
            return [(row, index) for row in span]
        return [(row, index) for row in reversed(span)]

    def slide(self, direction: Direction) -> bool:
        """
        Slide every tile toward one edge, merging equal neighbours.

        A tile merges at most once per slide, and the pair closest to the
        destination edge merges first: [2, 2, 2, 0] slid left becomes
        [4, 2, 0, 0]. No tile is spawned here.

        Args:
            direction: Edge the tiles travel toward

        Returns:
            True if at least one cell changed
        """
        changed = False
        for index in range(self.size):
            if _sweep_line(self.grid, self._line_cells(direction, index)):
                changed = True

        logger.debug("slide %s changed=%s", direction.name, changed)
        return changed

    def empty_cells(self) -> List[Tuple[int, int]]:
        return [
            (i, j) for i in range(self.size) for j in range(self.size) if self.grid[i][j] == 0
        ]

    def spawn_random_tile(self) -> Optional[Tuple[int, int]]:
        """
        Put a 2 or a 4 on a uniformly chosen empty cell.

        The tile is a 4 when a draw from 1..10 exceeds the difficulty
        threshold, so EASY spawns 4s half the time and HARD one time in ten.

        Returns:
            The (row, col) that was filled, or None if the grid is full
        """
        empty_positions = self.empty_cells()
        if not empty_positions:
            return None

        row, col = empty_positions[self.rng.randint(1, len(empty_positions)) - 1]
        draw = self.rng.randint(1, 10)
        self.grid[row][col] = 4 if draw > self.difficulty.four_threshold else 2

        logger.debug("spawned %d at (%d, %d)", self.grid[row][col], row, col)
        return row, col

    def has_any_move_available(self) -> bool:
        """True if a cell is empty or two adjacent cells hold equal values."""
        if self.empty_cells():
            return True
        for i in range(self.size):
            for j in range(self.size - 1):
                if self.grid[i][j] == self.grid[i][j + 1]:
                    return True
                if self.grid[j][i] == self.grid[j + 1][i]:
                    return True
        return False

    def has_reached_target(self) -> bool:
        return any(value == self.target for row in self.grid for value in row)

    def outcome(self) -> Outcome:
        if self.has_reached_target():
            return Outcome.WON
        if not self.has_any_move_available():
            return Outcome.LOST
        return Outcome.IN_PROGRESS

    def snapshot(self) -> List[List[int]]:
        return [row[:] for row in self.grid]


def display(state: List[List[int]]) -> str:
    """
    Render a grid as a bordered fixed-width text table.

    Args:
        state: Grid to display

    Returns:
        Multi-line string; empty cells are left blank
    """
    divider = '-' * ((CELL_WIDTH + 1) * len(state) + 1)
    lines = [divider]
    for row in state:
        cells = "".join(f"{val if val else '':>{CELL_WIDTH}}|" for val in row)
        lines.append("|" + cells)
        lines.append(divider)
    return "\n".join(lines)
