from __future__ import annotations

import logging
import random
import time
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Optional

import numpy as np

from verifiable_tetris.ledger import MoveLedger, MoveRecord

from .grid import GameGrid
from .pieces import Piece, spawn
from .rules import ScoringRules
from .snapshot import GameSnapshot, PieceSnapshot

logger = logging.getLogger(__name__)


class MoveType(str, Enum):
    MOVE_LEFT = "move_left"
    MOVE_RIGHT = "move_right"
    ROTATE = "rotate"
    SOFT_DROP = "soft_drop"
    HARD_DROP = "hard_drop"
    AUTO_DROP = "auto_drop"


PLAYER_MOVES = frozenset(m for m in MoveType if m is not MoveType.AUTO_DROP)


@dataclass
class GameConfig:
    width: int = 10
    height: int = 20
    random_seed: Optional[int] = None
    spawn_y: int = 0
    move_delay_ms: int = 100


@dataclass(frozen=True)
class MoveResult:
    accepted: bool
    record: Optional[MoveRecord] = None


def wall_clock_ms() -> int:
    return int(time.time() * 1000)


class VerifiableTetrisGame:
    """One game session whose every recorded move lands in a hash-chained ledger.

    The engine is driven through `attempt_move` only. Player moves are rate
    limited against `clock`; gravity advances by the `elapsed_ms` the driver
    passes with `auto_drop`.
    """

    def __init__(
        self,
        ledger: Optional[MoveLedger] = None,
        config: Optional[GameConfig] = None,
        rules: Optional[ScoringRules] = None,
        clock: Optional[Callable[[], int]] = None,
    ) -> None:
        self.config = config or GameConfig()
        self.rules = rules or ScoringRules()
        # An empty ledger is falsy, so compare against None
        self.ledger = ledger if ledger is not None else MoveLedger()
        self.clock = clock or wall_clock_ms
        self.rng = random.Random(self.config.random_seed)
        self.grid = GameGrid(self.config.width, self.config.height)
        self.current_piece: Optional[Piece] = None
        self.next_piece: Optional[Piece] = None
        self._start_session()

    def _start_session(self) -> None:
        self.grid.reset()
        self.score = 0
        self.level = 1
        self.lines = 0
        self.pieces_locked = 0
        self.game_over = False
        self.gravity_accumulator = 0
        self.gravity_interval = self.rules.gravity_interval(self.level)
        self.last_move_time: Optional[int] = None
        self.current_piece = self._new_piece()
        self.next_piece = self._new_piece()

    def restart(self) -> None:
        self._start_session()
        # A new session starts a new, disjoint chain
        self.ledger.clear()
        logger.info("Game restarted")

    def _new_piece(self) -> Piece:
        return spawn(self.rng, self.grid.width, self.config.spawn_y)

    def attempt_move(self, move_type: Any, elapsed_ms: int = 0) -> MoveResult:
        try:
            move = MoveType(move_type)
        except ValueError:
            logger.warning(f"Rejected unknown move type {move_type!r}")
            return MoveResult(accepted=False)

        if self.game_over or self.current_piece is None:
            return MoveResult(accepted=False)

        now = self.clock()
        is_player_move = move in PLAYER_MOVES
        if is_player_move and self.last_move_time is not None:
            if now - self.last_move_time < self.config.move_delay_ms:
                logger.debug(f"Rate limited {move.value}")
                return MoveResult(accepted=False)

        before = self.get_snapshot()
        accepted = self._dispatch(move, elapsed_ms)

        if is_player_move:
            if not accepted:
                return MoveResult(accepted=False)
            self.last_move_time = now

        # auto_drop is recorded even when the gravity clock did not fire
        record = self.ledger.append(move, before, self.get_snapshot(), now)
        return MoveResult(accepted=accepted, record=record)

    def _dispatch(self, move: MoveType, elapsed_ms: int) -> bool:
        if move is MoveType.MOVE_LEFT:
            return self._move(-1, 0)
        if move is MoveType.MOVE_RIGHT:
            return self._move(1, 0)
        if move is MoveType.ROTATE:
            return self._rotate()
        if move is MoveType.SOFT_DROP:
            # Never locks; only gravity and hard drop do
            return self._move(0, 1)
        if move is MoveType.HARD_DROP:
            return self.hard_drop()
        return self._apply_gravity(elapsed_ms)

    def _move(self, dx: int, dy: int) -> bool:
        piece = self.current_piece
        if piece is None:
            return False
        new_x = piece.x + dx
        new_y = piece.y + dy
        if self.grid.is_valid_position(piece.shape, new_x, new_y):
            piece.x = new_x
            piece.y = new_y
            return True
        return False

    def _rotate(self) -> bool:
        piece = self.current_piece
        if piece is None:
            return False
        rotated = piece.rotated()
        if self.grid.is_valid_position(rotated, piece.x, piece.y):
            piece.shape = rotated
            return True
        return False

    def hard_drop(self) -> bool:
        if self.current_piece is None:
            return False
        # Drop until collision
        while self._move(0, 1):
            self.score += self.rules.hard_drop_bonus
        self._lock_piece()
        return True

    def _apply_gravity(self, elapsed_ms: int) -> bool:
        self.gravity_accumulator += elapsed_ms
        if self.gravity_accumulator < self.gravity_interval:
            return False
        self.gravity_accumulator = 0
        if not self._move(0, 1):
            self._lock_piece()
        return True

    def _lock_piece(self) -> int:
        piece = self.current_piece
        assert piece is not None
        self.grid.commit(piece.shape, piece.x, piece.y, piece.color_token)
        self.pieces_locked += 1

        cleared = self.grid.clear_full_rows()
        self.score += self.rules.score_for_lines(cleared, self.level)
        self.lines += cleared
        self.level = self.rules.level_for_lines(self.lines)
        self.gravity_interval = self.rules.gravity_interval(self.level)
        if cleared:
            logger.info(f"Cleared {cleared} line(s): score={self.score} level={self.level} lines={self.lines}")

        self.current_piece = self.next_piece
        self.next_piece = self._new_piece()
        current = self.current_piece
        if current is not None and not self.grid.is_valid_position(current.shape, current.x, current.y):
            self.game_over = True
            logger.info(f"Game over: score={self.score} lines={self.lines}")
        return cleared

    def get_snapshot(self) -> GameSnapshot:
        return GameSnapshot(
            board=tuple(tuple(row) for row in self.grid.to_rows()),
            current_piece=PieceSnapshot.of(self.current_piece) if self.current_piece else None,
            next_piece=PieceSnapshot.of(self.next_piece) if self.next_piece else None,
            score=self.score,
            level=self.level,
            lines=self.lines,
            game_over=self.game_over,
        )

    def get_state(self) -> np.ndarray:
        # Overlay current piece on a copy of the grid for observation
        state = self.grid.clone_state()
        if self.current_piece is not None and not self.game_over:
            for x, y in self.current_piece.cells_at(self.current_piece.x, self.current_piece.y):
                if self.grid.is_inside(x, y):
                    # Use negative to indicate falling piece overlay
                    state[y, x] = -self.current_piece.color_token
        return state

    def get_game_stats(self) -> Dict[str, Any]:
        return {
            "score": self.score,
            "level": self.level,
            "lines": self.lines,
            "pieces_locked": self.pieces_locked,
            "moves_recorded": len(self.ledger),
            "game_over": self.game_over,
        }
