"""Test helpers for driving the engine into specific board situations."""

from typing import Iterable, Optional

import numpy as np

from verifiable_tetris.game import Piece, TetrominoType, VerifiableTetrisGame


class FakeClock:
    """Millisecond clock that only moves when a test says so."""

    def __init__(self, start: int = 1_000_000) -> None:
        self.now = start

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += ms


def play(game: VerifiableTetrisGame, clock: FakeClock, move, elapsed_ms: int = 0):
    """Issue a player move far enough after the previous one to pass the rate limit."""
    clock.advance(game.config.move_delay_ms)
    return game.attempt_move(move, elapsed_ms)


def set_current_piece(game: VerifiableTetrisGame, kind: TetrominoType, x: Optional[int] = None, y: int = 0) -> Piece:
    piece = Piece.from_kind(kind, game.grid.width)
    if x is not None:
        piece.x = x
    piece.y = y
    game.current_piece = piece
    return piece


def fill_row_except(game: VerifiableTetrisGame, row: int, gaps: Iterable[int], value: int = 1) -> None:
    game.grid.grid[row, :] = value
    for x in gaps:
        game.grid.grid[row, x] = 0


def filled(game: VerifiableTetrisGame) -> int:
    return int(np.count_nonzero(game.grid.grid))
