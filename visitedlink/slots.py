# ==================================================
# visitedlink/slots.py
# ==================================================
"""
Linear-probe access to the slot region of an open table file.

Slot ``i`` lives at ``HEADER_SIZE + i * SLOT_SIZE``. A decoded slot is
``None`` when empty and the stored fingerprint otherwise; on disk an empty
slot is the literal 0, so a real fingerprint of 0 cannot be stored.

Probing never wraps past the last slot: a chain that runs off the end of
the table ends in end-of-file, which lookups read as "not visited" and
updates report as :class:`TableIOError`.
"""
from __future__ import annotations

import logging
import os
import struct
from typing import BinaryIO, Iterator, Optional, Tuple

from .const import EMPTY, HEADER_SIZE, SLOT_FMT, SLOT_SIZE
from .errors import TableIOError

logger = logging.getLogger(__name__)

_SLOT = struct.Struct(SLOT_FMT)


def slot_offset(index: int) -> int:
    return HEADER_SIZE + index * SLOT_SIZE


def read_slot(f: BinaryIO) -> Optional[int]:
    """Read the slot at the current position. EOFError on a short read."""
    raw = f.read(SLOT_SIZE)
    if len(raw) != SLOT_SIZE:
        raise EOFError("ran past the end of the slot table")
    value = _SLOT.unpack(raw)[0]
    return None if value == EMPTY else value


def write_slot(f: BinaryIO, index: int, value: int):
    f.seek(slot_offset(index))
    written = f.write(_SLOT.pack(value))
    if written != SLOT_SIZE:
        raise OSError(f"short write at slot {index}: {written} of {SLOT_SIZE} bytes")
    f.flush()
    try:
        fd = f.fileno()
    except (AttributeError, OSError, ValueError):
        return                      # in-memory buffer, nothing to sync
    os.fsync(fd)


def _scan(f: BinaryIO, start: int) -> Iterator[Tuple[int, Optional[int]]]:
    f.seek(slot_offset(start))
    index = start
    while True:
        yield index, read_slot(f)
        index += 1


# ------------------------------------------------------------------
def probe(f: BinaryIO, fp: int, start: int) -> bool:
    try:
        for _, slot in _scan(f, start):
            if slot is None:
                return False
            if slot == fp:
                return True
    except (OSError, EOFError, ValueError) as e:
        logger.debug("probe from slot %d gave up: %s", start, e)
    return False


def _update(f: BinaryIO, fp: int, start: int, *, on_empty: bool, on_match: bool) -> Optional[bool]:
    """
    Walk the chain from ``start`` to its terminal slot and maybe write it.

    Returns True if ``fp`` was written into an empty slot, False if the
    matching slot was cleared and None if the terminal slot was left alone.
    Nothing is written before the terminal slot is reached.
    """
    try:
        for index, slot in _scan(f, start):
            if slot is None:
                if not on_empty:
                    return None
                write_slot(f, index, fp)
                logger.debug("slot %d <- %#018x", index, fp)
                return True
            if slot == fp:
                if not on_match:
                    return None
                write_slot(f, index, EMPTY)
                logger.debug("slot %d cleared", index)
                return False
    except (OSError, EOFError, ValueError) as e:
        raise TableIOError(f"update from slot {start} failed: {e}") from e


def toggle(f: BinaryIO, fp: int, start: int) -> bool:
    """Flip ``fp`` between present and absent; returns the new presence."""
    return _update(f, fp, start, on_empty=True, on_match=True)


def insert(f: BinaryIO, fp: int, start: int) -> bool:
    """Add ``fp`` unless already present; True if a slot was written."""
    return _update(f, fp, start, on_empty=True, on_match=False) is True


def remove(f: BinaryIO, fp: int, start: int) -> bool:
    """Clear ``fp`` if present; True if a slot was written."""
    return _update(f, fp, start, on_empty=False, on_match=True) is False
