"""Game module for Verifiable Tetris.

Exports the core game engine and supporting classes:
- GameGrid: Board representation, placement and line clearing
- Piece: Falling tetromino with its shape and position
- TetrominoType: Enum of available piece types
- ScoringRules: Scoring, level and gravity configuration
- GameSnapshot: Immutable view of a session
- VerifiableTetrisGame: Move state machine and session state
"""

from .grid import GameGrid
from .pieces import BASE_SHAPES, COLORS, Piece, TetrominoType, rotate, spawn
from .rules import ScoringRules
from .snapshot import GameSnapshot, PieceSnapshot
from .core import GameConfig, MoveResult, MoveType, VerifiableTetrisGame

__all__ = [
    "GameGrid",
    "Piece",
    "TetrominoType",
    "BASE_SHAPES",
    "COLORS",
    "rotate",
    "spawn",
    "ScoringRules",
    "GameSnapshot",
    "PieceSnapshot",
    "GameConfig",
    "MoveResult",
    "MoveType",
    "VerifiableTetrisGame",
]
