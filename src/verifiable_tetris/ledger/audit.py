"""Transition checks across consecutive records.

`verify_records` only proves the stored ledger was not edited after the
fact. An engine could still have produced a self-consistent chain of
impossible states. `audit_transitions` catches the cheap-to-detect forms of
that: states that do not follow on from the previous record, counters that
go backwards, a level that disagrees with the line count, and moves recorded
after the game ended. It does not re-simulate piece physics.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Mapping, Optional, Sequence

from .ledger import VerificationResult
from .records import MoveRecord

logger = logging.getLogger(__name__)

INDEX_MISMATCH = "index mismatch"
STATE_DISCONTINUITY = "state discontinuity"
SCORE_DECREASED = "score decreased"
LINES_DECREASED = "lines decreased"
LEVEL_MISMATCH = "level mismatch"
MOVE_AFTER_GAME_OVER = "move after game over"
MALFORMED_STATE = "malformed state"


def _check_state(state: Dict[str, Any], lines_per_level: int) -> Optional[str]:
    if state.get("level") != state.get("lines", 0) // lines_per_level + 1:
        return LEVEL_MISMATCH
    return None


def audit_transitions(records: Sequence[MoveRecord], lines_per_level: int = 10) -> VerificationResult:
    for i, record in enumerate(records):
        before, after = record.before, record.after
        reason: Optional[str] = None
        if record.move_index != i:
            reason = INDEX_MISMATCH
        elif not isinstance(before, Mapping) or not isinstance(after, Mapping):
            reason = MALFORMED_STATE
        elif i > 0 and before != records[i - 1].after:
            reason = STATE_DISCONTINUITY
        elif before.get("game_over"):
            reason = MOVE_AFTER_GAME_OVER
        elif after.get("score", 0) < before.get("score", 0):
            reason = SCORE_DECREASED
        elif after.get("lines", 0) < before.get("lines", 0):
            reason = LINES_DECREASED
        else:
            reason = _check_state(before, lines_per_level) or _check_state(after, lines_per_level)
        if reason is not None:
            logger.warning(f"Move {i} failed transition audit: {reason}")
            return VerificationResult(valid=False, invalid_index=i, reason=reason)
    return VerificationResult(valid=True)
