# ==================================================
# visitedlink/compression.py
# ==================================================
"""
Fingerprint snapshots: the sorted occupied fingerprints of a table, stored
as gaps between neighbours (LEB128 varints) inside one zstd frame.

    offset 0 : 4 bytes   magic "VLS1"
    offset 4 : uint32    fingerprint count
    offset 8 : zstd frame of the varint gaps
"""
from __future__ import annotations

import struct
from pathlib import Path
from typing import Iterable, List

import zstandard as zstd

SNAPSHOT_MAGIC = b"VLS1"
SNAPSHOT_HDR = struct.Struct("<4sI")
ZSTD_LEVEL = 3


def _varint(n: int, out: bytearray):
    while n > 0x7F:
        out.append((n & 0x7F) | 0x80)
        n >>= 7
    out.append(n)


def delta_encode(sorted_ints: Iterable[int]) -> bytes:
    out = bytearray()
    prev = 0
    for n in map(int, sorted_ints):
        if n < prev:
            raise ValueError("delta_encode needs ascending input")
        _varint(n - prev, out)
        prev = n
    return bytes(out)


def delta_decode(data: bytes) -> List[int]:
    out = []
    prev = 0
    gap = shift = 0
    for byte in data:
        gap |= (byte & 0x7F) << shift
        if byte & 0x80:
            shift += 7
            continue
        prev += gap
        out.append(prev)
        gap = shift = 0
    if shift:
        raise ValueError("truncated varint at end of data")
    return out


# ------------------------------------------------------------------
def write_snapshot(path, fingerprints: Iterable[int]) -> int:
    """Store a sorted fingerprint set; returns the number of bytes written."""
    fps = sorted(int(fp) for fp in fingerprints)
    frame = zstd.ZstdCompressor(level=ZSTD_LEVEL).compress(delta_encode(fps))
    blob = SNAPSHOT_HDR.pack(SNAPSHOT_MAGIC, len(fps)) + frame
    Path(path).write_bytes(blob)
    return len(blob)


def read_snapshot(path) -> List[int]:
    blob = Path(path).read_bytes()
    if len(blob) < SNAPSHOT_HDR.size:
        raise ValueError("snapshot too short")
    magic, count = SNAPSHOT_HDR.unpack_from(blob)
    if magic != SNAPSHOT_MAGIC:
        raise ValueError("Invalid snapshot file")
    try:
        gaps = zstd.ZstdDecompressor().decompress(blob[SNAPSHOT_HDR.size:])
    except zstd.ZstdError as e:
        raise ValueError(f"corrupt snapshot: {e}") from e
    fps = delta_decode(gaps)
    if len(fps) != count:
        raise ValueError(f"snapshot holds {len(fps)} fingerprints, header says {count}")
    return fps
