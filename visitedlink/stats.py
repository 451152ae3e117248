# ==================================================
# visitedlink/stats.py
# ==================================================
from __future__ import annotations

from typing import NamedTuple

import numpy as np

from .const import SLOT_SIZE
from .errors import TableIOError
from .slots import slot_offset


class TableStats(NamedTuple):
    length: int
    used: int              # as recorded in the header
    occupied: int          # non-zero slots actually present
    load_factor: float
    longest_run: int       # longest stretch of consecutive occupied slots
    tail_run: int          # occupied stretch ending at the last slot

    @property
    def used_consistent(self) -> bool:
        return self.used == self.occupied


def read_slots(table) -> np.ndarray:
    """The whole slot region of ``table`` as a little-endian uint64 array."""
    f = table.file
    want = table.length * SLOT_SIZE
    try:
        f.seek(slot_offset(0))
        raw = f.read(want)
    except OSError as e:
        raise TableIOError(f"unable to read slot table: {e}") from e
    if len(raw) != want:
        raise TableIOError(f"slot table truncated: {len(raw)} of {want} bytes")
    return np.frombuffer(raw, dtype="<u8")


def _runs(occupied: np.ndarray) -> np.ndarray:
    edges = np.diff(np.concatenate(([0], occupied.astype(np.int8), [0])))
    return np.flatnonzero(edges == -1) - np.flatnonzero(edges == 1)


def table_stats(table) -> TableStats:
    occupied = read_slots(table) != 0
    runs = _runs(occupied)
    n = int(np.count_nonzero(occupied))
    tail = int(runs[-1]) if n and occupied[-1] else 0
    return TableStats(
        length=table.length,
        used=table.used,
        occupied=n,
        load_factor=n / table.length,
        longest_run=int(runs.max()) if runs.size else 0,
        tail_run=tail,
    )


def fingerprints(table) -> np.ndarray:
    """Sorted fingerprints of every occupied slot."""
    slots = read_slots(table)
    return np.sort(slots[slots != 0]).astype(np.uint64)
