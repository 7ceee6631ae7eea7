from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional

from .errors import LedgerFormatError

_REQUIRED_FIELDS = ("move_type", "timestamp", "before", "after", "move_index", "hash_algorithm", "hash")


@dataclass(frozen=True)
class MoveRecord:
    """One ledger entry: a state transition bound to its predecessor by hash."""

    move_type: str
    timestamp: int
    before: Dict[str, Any]
    after: Dict[str, Any]
    move_index: int
    hash_algorithm: str
    previous_move_hash: Optional[str] = None
    hash: str = ""

    def content(self) -> Dict[str, Any]:
        """Every hashed field, i.e. all fields except `hash` itself."""
        data: Dict[str, Any] = {
            "move_type": self.move_type,
            "timestamp": self.timestamp,
            "before": self.before,
            "after": self.after,
            "move_index": self.move_index,
            "hash_algorithm": self.hash_algorithm,
        }
        # The first record of a chain has no predecessor field at all
        if self.previous_move_hash is not None:
            data["previous_move_hash"] = self.previous_move_hash
        return data

    def to_dict(self) -> Dict[str, Any]:
        data = self.content()
        data["hash"] = self.hash
        return data

    @classmethod
    def from_dict(cls, data: Any, index: Optional[int] = None) -> "MoveRecord":
        if not isinstance(data, dict):
            raise LedgerFormatError(f"expected an object, got {type(data).__name__}", index)
        missing = [name for name in _REQUIRED_FIELDS if name not in data]
        if missing:
            raise LedgerFormatError(f"missing fields {missing}", index)
        unknown = set(data) - set(_REQUIRED_FIELDS) - {"previous_move_hash"}
        if unknown:
            raise LedgerFormatError(f"unknown fields {sorted(unknown)}", index)
        for name in ("before", "after"):
            if not isinstance(data[name], dict):
                raise LedgerFormatError(f"{name} must be an object, got {type(data[name]).__name__}", index)
        for name in ("timestamp", "move_index"):
            # bool is an int subclass but never a valid counter
            if isinstance(data[name], bool) or not isinstance(data[name], int):
                raise LedgerFormatError(f"{name} must be an integer, got {type(data[name]).__name__}", index)
        for name in ("move_type", "hash_algorithm", "hash"):
            if not isinstance(data[name], str):
                raise LedgerFormatError(f"{name} must be a string, got {type(data[name]).__name__}", index)
        previous = data.get("previous_move_hash")
        if previous is not None and not isinstance(previous, str):
            raise LedgerFormatError(f"previous_move_hash must be a string, got {type(previous).__name__}", index)
        return cls(
            move_type=data["move_type"],
            timestamp=data["timestamp"],
            before=data["before"],
            after=data["after"],
            move_index=data["move_index"],
            hash_algorithm=data["hash_algorithm"],
            previous_move_hash=previous,
            hash=data["hash"],
        )
