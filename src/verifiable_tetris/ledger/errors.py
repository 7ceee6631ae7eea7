"""
Ledger error hierarchy.

Verification never raises; these exceptions only surface when loading a
ledger export that is not structurally a list of move records.

Usage:
    from verifiable_tetris.ledger.errors import LedgerFormatError

    try:
        ledger = MoveLedger.from_export(text)
    except LedgerFormatError as e:
        logger.warning(f"Unreadable ledger export: {e}")
"""

from __future__ import annotations

from typing import Optional

__all__ = [
    "LedgerError",
    "LedgerFormatError",
]


class LedgerError(Exception):
    """Base exception for all ledger errors."""


class LedgerFormatError(LedgerError):
    """An exported ledger or record could not be parsed."""

    def __init__(self, message: str, index: Optional[int] = None) -> None:
        if index is not None:
            message = f"record {index}: {message}"
        super().__init__(message)
        self.index = index
