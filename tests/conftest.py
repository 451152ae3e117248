from __future__ import annotations

import io
import struct

import pytest

from visitedlink.const import HEADER_FMT, SIGNATURE, VERSION

ZERO_SALT = b"\0" * 8


def table_bytes(length: int = 4, salt: bytes = ZERO_SALT, slots=None, *,
                signature: int = SIGNATURE, version: int = VERSION,
                used: int | None = None, extra: bytes = b"") -> bytes:
    slots = list(slots) if slots is not None else [0] * length
    slots += [0] * (length - len(slots))
    if used is None:
        used = sum(1 for s in slots if s)
    head = struct.pack(HEADER_FMT, signature, version, length, used, salt)
    return head + struct.pack(f"<{len(slots)}Q", *slots) + extra


@pytest.fixture
def write_table(tmp_path):
    def _write(name: str = "Visited Links", **kw):
        path = tmp_path / name
        path.write_bytes(table_bytes(**kw))
        return path
    return _write


@pytest.fixture
def mem_table():
    def _mem(**kw):
        return io.BytesIO(table_bytes(**kw))
    return _mem
