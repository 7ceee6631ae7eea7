"""Content hashing for move records.

Records are hashed over a canonical JSON encoding (sorted keys, no
whitespace) so that the same field set always produces the same bytes,
regardless of dict insertion order.

SHA-256 is the default family. When the interpreter cannot provide it (for
example a restricted OpenSSL build) the ledger falls back to CRC-32. The
family used is stored on every record, and a record is only ever checked
against its own family.
"""

from __future__ import annotations

import hashlib
import json
import logging
import zlib
from typing import Any

logger = logging.getLogger(__name__)

SHA256 = "sha256"
CRC32 = "crc32"

FALLBACK_ALGORITHM = CRC32


def canonical_json(data: Any) -> bytes:
    return json.dumps(data, sort_keys=True, separators=(",", ":"), ensure_ascii=True).encode("utf-8")


def is_available(algorithm: str) -> bool:
    if algorithm == CRC32:
        return True
    try:
        hashlib.new(algorithm).hexdigest()
    except (ValueError, TypeError):
        # TypeError: variable-length digests (shake_*) need a length
        return False
    return True


def resolve_algorithm(preferred: str) -> str:
    """Return `preferred` if usable here, otherwise the fallback checksum."""
    if is_available(preferred):
        return preferred
    logger.warning(f"Hash algorithm {preferred!r} unavailable; falling back to {FALLBACK_ALGORITHM} checksum")
    return FALLBACK_ALGORITHM


def digest(data: Any, algorithm: str) -> str:
    """Hex digest of `data` under `algorithm`.

    Raises ValueError if `algorithm` is not available and TypeError if `data`
    is not JSON serializable.
    """
    payload = canonical_json(data)
    if algorithm == CRC32:
        return format(zlib.crc32(payload) & 0xFFFFFFFF, "08x")
    return hashlib.new(algorithm, payload).hexdigest()
