# ==================================================
# visitedlink/fingerprint.py
# ==================================================
from __future__ import annotations

import hashlib
import struct

from .const import SALT_SIZE

_U64 = struct.Struct("<Q")


def fingerprint(salt: bytes, key: str | bytes) -> int:
    """
    64-bit fingerprint of ``key``: the low 8 bytes of md5(salt || key).

    str keys are hashed as UTF-8; surrogate escapes (how argv and the
    filesystem hand over undecodable bytes) map back to the raw bytes.
    """
    if len(salt) != SALT_SIZE:
        raise ValueError(f"salt must be {SALT_SIZE} bytes, got {len(salt)}")
    if isinstance(key, str):
        key = key.encode("utf-8", "surrogateescape")
    h = hashlib.md5()
    h.update(salt)
    h.update(key)
    return _U64.unpack_from(h.digest())[0]


def slot_index(fp: int, length: int) -> int:
    if length <= 0:
        raise ValueError("table length must be positive")
    return fp % length
