"""Append-only, hash-chained move ledger.

Every accepted move becomes a `MoveRecord` whose `hash` covers its own
content and whose `previous_move_hash` is the hash of the record before it.
Editing, dropping or reordering stored records is detected by `verify_all`.

The ledger is written by a single caller; appends complete synchronously, so
each record sees its predecessor already stored.
"""

from __future__ import annotations

import copy
import json
import logging
from dataclasses import dataclass, replace
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional, Sequence, Tuple

from . import hashing
from .errors import LedgerFormatError
from .records import MoveRecord

logger = logging.getLogger(__name__)

HASH_MISMATCH = "hash mismatch"
CHAIN_BROKEN = "chain broken"


@dataclass(frozen=True)
class VerificationResult:
    valid: bool
    invalid_index: Optional[int] = None
    reason: Optional[str] = None

    def __bool__(self) -> bool:
        return self.valid


def _state_dict(state: Any) -> Dict[str, Any]:
    if hasattr(state, "to_dict"):
        return state.to_dict()
    if isinstance(state, Mapping):
        return copy.deepcopy(dict(state))
    raise TypeError(f"Cannot record state of type {type(state).__name__}")


def verify_record(record: MoveRecord) -> bool:
    """Recompute the record's content hash with its own algorithm and compare."""
    try:
        expected = hashing.digest(record.content(), record.hash_algorithm)
    except (ValueError, TypeError) as e:
        logger.warning(f"Cannot recompute hash for move {record.move_index}: {e}")
        return False
    return expected == record.hash


def verify_records(records: Sequence[MoveRecord]) -> VerificationResult:
    """Check every record's hash and the chain links between neighbours.

    Stops at the first failure. An empty sequence is valid.

    The first record is not checked against anything, so a chain with its
    head cut off still verifies; `audit_transitions` reports that case as an
    index mismatch.
    """
    for i, record in enumerate(records):
        if not verify_record(record):
            logger.warning(f"Move {i} failed hash verification")
            return VerificationResult(valid=False, invalid_index=i, reason=HASH_MISMATCH)
        if i > 0 and record.previous_move_hash != records[i - 1].hash:
            logger.warning(f"Move {i} does not chain to move {i - 1}")
            return VerificationResult(valid=False, invalid_index=i, reason=CHAIN_BROKEN)
    return VerificationResult(valid=True)


class MoveLedger:
    def __init__(self, algorithm: str = hashing.SHA256) -> None:
        self.algorithm = algorithm
        self._records: List[MoveRecord] = []

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[MoveRecord]:
        return iter(self._records)

    @property
    def records(self) -> Tuple[MoveRecord, ...]:
        return tuple(self._records)

    @property
    def last_hash(self) -> Optional[str]:
        return self._records[-1].hash if self._records else None

    def append(self, move_type: Any, before: Any, after: Any, timestamp: int) -> MoveRecord:
        algorithm = hashing.resolve_algorithm(self.algorithm)
        unsigned = MoveRecord(
            move_type=str(getattr(move_type, "value", move_type)),
            timestamp=int(timestamp),
            before=_state_dict(before),
            after=_state_dict(after),
            move_index=len(self._records),
            hash_algorithm=algorithm,
            previous_move_hash=self.last_hash,
        )
        try:
            record = replace(unsigned, hash=hashing.digest(unsigned.content(), algorithm))
        except (ValueError, TypeError) as e:
            logger.warning(f"Hashing move {unsigned.move_index} with {algorithm} failed ({e}); using {hashing.CRC32}")
            unsigned = replace(unsigned, hash_algorithm=hashing.CRC32)
            record = replace(unsigned, hash=hashing.digest(unsigned.content(), hashing.CRC32))
        self._records.append(record)
        logger.debug(f"Recorded move {record.move_index} ({record.move_type}) {record.hash[:12]}")
        return record

    def verify_one(self, record: MoveRecord) -> bool:
        return verify_record(record)

    def verify_all(self) -> VerificationResult:
        return verify_records(self._records)

    def export_snapshot(self, indent: Optional[int] = 2) -> str:
        return json.dumps([record.to_dict() for record in self._records], indent=indent)

    @classmethod
    def from_export(cls, text: str, algorithm: str = hashing.SHA256) -> "MoveLedger":
        """Reload an exported ledger as-is. Call `verify_all` to audit it."""
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise LedgerFormatError(f"not valid JSON: {e}") from e
        if not isinstance(data, list):
            raise LedgerFormatError(f"expected a list of records, got {type(data).__name__}")
        ledger = cls(algorithm)
        ledger._records = [MoveRecord.from_dict(item, index=i) for i, item in enumerate(data)]
        return ledger

    @classmethod
    def from_records(cls, records: Iterable[MoveRecord], algorithm: str = hashing.SHA256) -> "MoveLedger":
        ledger = cls(algorithm)
        ledger._records = list(records)
        return ledger

    def clear(self) -> None:
        if self._records:
            logger.info(f"Clearing ledger of {len(self._records)} moves")
        self._records = []
