"""Integrity ledger for Verifiable Tetris.

Exports:
- MoveLedger: append-only hash-chained store of move records
- MoveRecord: one hashed state transition
- VerificationResult: outcome of a chain verification
- verify_record / verify_records: auditor entry points that need no ledger
- audit_transitions: optional continuity check across records
"""

from .audit import audit_transitions
from .errors import LedgerError, LedgerFormatError
from .hashing import CRC32, SHA256
from .ledger import MoveLedger, VerificationResult, verify_record, verify_records
from .records import MoveRecord

__all__ = [
    "MoveLedger",
    "MoveRecord",
    "VerificationResult",
    "verify_record",
    "verify_records",
    "audit_transitions",
    "LedgerError",
    "LedgerFormatError",
    "SHA256",
    "CRC32",
]
