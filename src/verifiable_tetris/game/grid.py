from __future__ import annotations

from typing import List

import numpy as np

from .pieces import Shape


class GameGrid:
    """Fixed-size board of locked cells.

    The grid uses 0 for empty cells and positive integers for filled cells.
    A filled value is the colour token of the tetromino that locked there
    (see `TetrominoType`). Row 0 is the top of the board.
    """

    def __init__(self, width: int, height: int) -> None:
        self.width = int(width)
        self.height = int(height)
        self.grid = np.zeros((self.height, self.width), dtype=np.int8)

    def reset(self) -> None:
        self.grid.fill(0)

    def is_inside(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def is_valid_position(self, shape: Shape, origin_x: int, origin_y: int) -> bool:
        """True iff every filled cell of `shape` at the given origin fits.

        Cells above the board (negative y) only need to be within the side
        walls; they are never checked against occupied cells.
        """
        h, w = shape.shape
        for dy in range(h):
            for dx in range(w):
                if not shape[dy, dx]:
                    continue
                x = origin_x + dx
                y = origin_y + dy
                if x < 0 or x >= self.width or y >= self.height:
                    return False
                if y >= 0 and self.grid[y, x] != 0:
                    return False
        return True

    def commit(self, shape: Shape, origin_x: int, origin_y: int, color: int) -> int:
        """Write `color` under every filled cell of `shape`; returns cells written."""
        written = 0
        h, w = shape.shape
        for dy in range(h):
            for dx in range(w):
                if not shape[dy, dx]:
                    continue
                x = origin_x + dx
                y = origin_y + dy
                # Above the visible board: dropped
                if y < 0:
                    continue
                self.grid[y, x] = color
                written += 1
        return written

    def clear_full_rows(self) -> int:
        cleared = 0
        row = self.height - 1
        while row >= 0:
            if np.all(self.grid[row] != 0):
                # Shift everything above down by one and open an empty top row
                self.grid[1 : row + 1] = self.grid[0:row].copy()
                self.grid[0].fill(0)
                cleared += 1
            else:
                row -= 1
        return cleared

    def filled_cells(self) -> int:
        return int(np.count_nonzero(self.grid))

    def to_rows(self) -> List[List[int]]:
        return self.grid.tolist()

    def clone_state(self) -> np.ndarray:
        return self.grid.copy()
