# ==================================================
# visitedlink/store.py
# ==================================================
from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Iterable, Iterator, Optional, Tuple

from . import slots
from .const import DEFAULT_LENGTH, SALT_SIZE, SLOT_SIZE
from .errors import OpenError
from .fingerprint import fingerprint, slot_index
from .header import Header, read_header

logger = logging.getLogger(__name__)

# writes go straight to stable storage where the platform allows it
_UPDATE_FLAGS = os.O_RDWR | getattr(os, "O_SYNC", 0) | getattr(os, "O_BINARY", 0)


class VisitedLinkTable:
    """A visited-links file, opened read-only or for in-place update."""

    def __init__(self, path: str | os.PathLike, update: bool = False):
        self.path = Path(path)
        self.writable = update
        self.file = self._open()
        try:
            self.header = read_header(self.file)
        except Exception:
            self.file.close()
            raise
        logger.debug("opened %s (%s): %d slots, %d used", self.path,
                     "rw" if update else "ro", self.length, self.header.used)

    # ------------------------------------------------------------------
    def _open(self):
        try:
            if self.writable:
                return os.fdopen(os.open(self.path, _UPDATE_FLAGS), "r+b", buffering=0)
            return open(self.path, "rb", buffering=0)
        except OSError as e:
            raise OpenError(f"Unable to open {str(self.path)!r}: {e}") from e

    @classmethod
    def create(cls, path: str | os.PathLike, length: int = DEFAULT_LENGTH,
               salt: Optional[bytes] = None, overwrite: bool = False) -> "VisitedLinkTable":
        """Write an empty table and return it opened for update."""
        if length <= 0:
            raise ValueError("table length must be positive")
        salt = os.urandom(SALT_SIZE) if salt is None else bytes(salt)
        if len(salt) != SALT_SIZE:
            raise ValueError(f"salt must be {SALT_SIZE} bytes")
        header = Header.new(length, salt)
        try:
            with open(path, "wb" if overwrite else "xb") as f:
                f.write(header.pack())
                f.write(b"\0" * (SLOT_SIZE * length))
                f.flush()
                os.fsync(f.fileno())
        except OSError as e:
            raise OpenError(f"Unable to create {str(path)!r}: {e}") from e
        logger.debug("created %s with %d slots", path, length)
        return cls(path, update=True)

    # ------------------------------------------------------------------
    @property
    def length(self) -> int:
        return self.header.length

    @property
    def salt(self) -> bytes:
        return self.header.salt

    @property
    def used(self) -> int:
        return self.header.used

    def locate(self, url: str | bytes) -> Tuple[int, int]:
        """Fingerprint of ``url`` and the slot its probe chain starts at."""
        fp = fingerprint(self.salt, url)
        return fp, slot_index(fp, self.length)

    # ------------------------------------------------------------------
    def is_visited(self, url: str | bytes) -> bool:
        return slots.probe(self.file, *self.locate(url))

    __contains__ = is_visited

    def toggle(self, url: str | bytes) -> bool:
        """Flip the visited state of ``url`` and return the state read back."""
        self._require_writable()
        fp, start = self.locate(url)
        slots.toggle(self.file, fp, start)
        return slots.probe(self.file, fp, start)

    def add(self, url: str | bytes) -> bool:
        """Mark ``url`` visited; False if it already was."""
        self._require_writable()
        return slots.insert(self.file, *self.locate(url))

    def discard(self, url: str | bytes) -> bool:
        """Mark ``url`` unvisited; False if it was not visited."""
        self._require_writable()
        return slots.remove(self.file, *self.locate(url))

    def check(self, urls: Iterable[str], update: bool = False) -> Iterator[Tuple[str, bool]]:
        for url in urls:
            yield url, self.toggle(url) if update else self.is_visited(url)

    def _require_writable(self):
        if not self.writable:
            raise PermissionError(f"{self.path} was opened read-only")

    # ------------------------------------------------------------------
    def close(self):
        if not self.file.closed:
            self.file.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()
