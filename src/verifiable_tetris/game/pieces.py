from __future__ import annotations

import random
from dataclasses import dataclass
from enum import IntEnum
from typing import Dict, List, Tuple

import numpy as np


class TetrominoType(IntEnum):
    I = 1
    O = 2
    T = 3
    S = 4
    Z = 5
    J = 6
    L = 7


Shape = np.ndarray


def _rot90(shape: Shape, k: int) -> Shape:
    k = k % 4
    if k == 0:
        return shape.copy()
    return np.rot90(shape, k, axes=(1, 0)).copy()  # rotate clockwise when k>0


BASE_SHAPES: Dict[TetrominoType, Shape] = {
    TetrominoType.I: np.array([[1, 1, 1, 1]], dtype=np.int8),
    TetrominoType.O: np.array([[1, 1], [1, 1]], dtype=np.int8),
    TetrominoType.T: np.array([[0, 1, 0], [1, 1, 1]], dtype=np.int8),
    TetrominoType.S: np.array([[0, 1, 1], [1, 1, 0]], dtype=np.int8),
    TetrominoType.Z: np.array([[1, 1, 0], [0, 1, 1]], dtype=np.int8),
    TetrominoType.J: np.array([[1, 0, 0], [1, 1, 1]], dtype=np.int8),
    TetrominoType.L: np.array([[0, 0, 1], [1, 1, 1]], dtype=np.int8),
}

COLORS: Dict[TetrominoType, str] = {
    TetrominoType.I: "#00ffff",
    TetrominoType.O: "#ffff00",
    TetrominoType.T: "#800080",
    TetrominoType.S: "#00ff00",
    TetrominoType.Z: "#ff0000",
    TetrominoType.J: "#0000ff",
    TetrominoType.L: "#ffa500",
}


def rotate(shape: Shape) -> Shape:
    """Return `shape` turned 90 degrees clockwise. The input is left untouched."""
    return _rot90(np.asarray(shape, dtype=np.int8), 1)


@dataclass
class Piece:
    """A falling tetromino: shape matrix plus the board position of its top-left cell."""

    kind: TetrominoType
    shape: Shape
    x: int = 0
    y: int = 0

    @classmethod
    def from_kind(cls, kind: TetrominoType, board_width: int, spawn_y: int = 0) -> "Piece":
        shape = BASE_SHAPES[kind].copy()
        w = shape.shape[1]
        return cls(kind=kind, shape=shape, x=board_width // 2 - w // 2, y=spawn_y)

    @property
    def color(self) -> str:
        return COLORS[self.kind]

    @property
    def color_token(self) -> int:
        return int(self.kind)

    def rotated(self) -> Shape:
        return rotate(self.shape)

    def cells_at(self, origin_x: int, origin_y: int) -> List[Tuple[int, int]]:
        h, w = self.shape.shape
        cells: List[Tuple[int, int]] = []
        for dy in range(h):
            for dx in range(w):
                if self.shape[dy, dx]:
                    cells.append((origin_x + dx, origin_y + dy))
        return cells

    def copy(self) -> "Piece":
        return Piece(self.kind, self.shape.copy(), self.x, self.y)


def spawn(rng: random.Random, board_width: int, spawn_y: int = 0) -> Piece:
    kind = rng.choice(list(TetrominoType))
    return Piece.from_kind(kind, board_width, spawn_y)
