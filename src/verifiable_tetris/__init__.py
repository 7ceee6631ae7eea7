"""Verifiable Tetris: a falling-block game whose moves form a hash-chained audit log."""

from verifiable_tetris.game import GameConfig, MoveResult, MoveType, ScoringRules, VerifiableTetrisGame
from verifiable_tetris.ledger import MoveLedger, MoveRecord, VerificationResult

__all__ = [
    "GameConfig",
    "MoveResult",
    "MoveType",
    "ScoringRules",
    "VerifiableTetrisGame",
    "MoveLedger",
    "MoveRecord",
    "VerificationResult",
]
