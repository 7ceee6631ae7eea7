"""Immutable value snapshots of a game session.

Snapshots are what the engine hands to the ledger and to drivers. They hold
plain tuples and ints only, so they can be compared, hashed and serialized
without touching the live session.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

from .pieces import Piece

Rows = Tuple[Tuple[int, ...], ...]


@dataclass(frozen=True)
class PieceSnapshot:
    kind: str
    shape: Rows
    color: str
    x: int
    y: int

    @classmethod
    def of(cls, piece: Piece) -> "PieceSnapshot":
        return cls(
            kind=piece.kind.name,
            shape=tuple(tuple(int(v) for v in row) for row in piece.shape),
            color=piece.color,
            x=int(piece.x),
            y=int(piece.y),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind,
            "shape": [list(row) for row in self.shape],
            "color": self.color,
            "x": self.x,
            "y": self.y,
        }


@dataclass(frozen=True)
class GameSnapshot:
    board: Rows
    current_piece: Optional[PieceSnapshot]
    next_piece: Optional[PieceSnapshot]
    score: int
    level: int
    lines: int
    game_over: bool

    def to_dict(self) -> Dict[str, Any]:
        return {
            "board": [list(row) for row in self.board],
            "current_piece": self.current_piece.to_dict() if self.current_piece else None,
            "next_piece": self.next_piece.to_dict() if self.next_piece else None,
            "score": self.score,
            "level": self.level,
            "lines": self.lines,
            "game_over": self.game_over,
        }

    def filled_cells(self) -> int:
        return sum(1 for row in self.board for cell in row if cell)
