from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import FrozenSet, Iterable, List, Tuple

import numpy as np

from .errors import IllegalPlacementError
from .pieces import GamePiece


logger = logging.getLogger(__name__)

Coordinate = Tuple[int, int]

OUT_OF_RANGE = -1
MAX_CELL_VALUE = 15


@dataclass(frozen=True)
class LineClear:
    """Full lines found on the board.

    ``lines`` counts full rows and full columns separately, while ``cells``
    holds each covered coordinate once, so a cell where a full row crosses a
    full column is counted in both lines but cleared once.
    """

    lines: int = 0
    cells: FrozenSet[Coordinate] = field(default_factory=frozenset)

    @property
    def blocks(self) -> int:
        return len(self.cells)

    def __bool__(self) -> bool:
        return self.lines > 0


class GameGrid:
    """Discrete 2D grid for block placement.

    The grid uses 0 for empty cells and 1..15 for filled cells, the value
    being the colour index of the piece that filled it. Cells are stored as
    ``grid[y, x]``; the public API takes ``(x, y)``.
    """

    def __init__(self, cols: int, rows: int) -> None:
        self.cols = int(cols)
        self.rows = int(rows)
        self.grid = np.zeros((self.rows, self.cols), dtype=np.int8)

    def reset(self) -> None:
        self.grid.fill(0)

    def is_inside(self, x: int, y: int) -> bool:
        return 0 <= x < self.cols and 0 <= y < self.rows

    def get(self, x: int, y: int) -> int:
        if not self.is_inside(x, y):
            return OUT_OF_RANGE
        return int(self.grid[y, x])

    def set(self, x: int, y: int, value: int) -> None:
        if not 0 <= value <= MAX_CELL_VALUE:
            raise ValueError(f"cell value {value} out of range")
        self.grid[y, x] = value

    def can_place(self, piece: GamePiece, x: int, y: int) -> bool:
        """Check if ``piece`` can be placed with its centre at (x, y)."""
        for dx, dy, _ in piece.offsets():
            if self.get(x + dx, y + dy) != 0:
                logger.debug("%s blocked at (%d, %d)", piece, x + dx, y + dy)
                return False
        return True

    def place(self, piece: GamePiece, x: int, y: int) -> List[Coordinate]:
        """Add the piece's block values onto the grid and return the cells filled.

        Raises ``IllegalPlacementError`` without touching the grid unless
        ``can_place`` holds for the same arguments.
        """
        if not self.can_place(piece, x, y):
            raise IllegalPlacementError(x, y)
        filled: List[Coordinate] = []
        for dx, dy, value in piece.offsets():
            cx, cy = x + dx, y + dy
            self.grid[cy, cx] += value
            filled.append((cx, cy))
        logger.debug("Placed %s centred at (%d, %d)", piece, x, y)
        return filled

    def detect_full_lines(self) -> LineClear:
        occupied = self.grid != 0
        full_cols = np.flatnonzero(np.all(occupied, axis=0))
        full_rows = np.flatnonzero(np.all(occupied, axis=1))
        cells = set()
        for x in full_cols:
            cells.update((int(x), y) for y in range(self.rows))
        for y in full_rows:
            cells.update((x, int(y)) for x in range(self.cols))
        return LineClear(lines=int(full_cols.size + full_rows.size), cells=frozenset(cells))

    def clear(self, coordinates: Iterable[Coordinate]) -> None:
        for x, y in coordinates:
            self.grid[y, x] = 0

    def values(self) -> List[int]:
        """Flat column-major linearisation: every row of column 0, then column 1, ..."""
        return [int(v) for v in self.grid.T.reshape(-1)]

    def get_filled_ratio(self) -> float:
        return float(np.count_nonzero(self.grid)) / float(self.cols * self.rows)

    def clone_state(self) -> np.ndarray:
        return self.grid.copy()

    def copy(self) -> "GameGrid":
        new_grid = GameGrid(self.cols, self.rows)
        new_grid.grid = self.grid.copy()
        return new_grid

    def __str__(self) -> str:
        return "\n".join(
            "".join(format(int(v), "x") if v else "·" for v in row) for row in self.grid
        )
