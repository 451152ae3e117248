# ==================================================
# visitedlink/header.py
# ==================================================
from __future__ import annotations

import logging
import os
import struct
from typing import BinaryIO, NamedTuple

from .const import HEADER_FMT, HEADER_SIZE, SIGNATURE, SLOT_SIZE, VERSION
from .errors import (BadFileSize, BadSignature, BadUsedCount, BadVersion,
                     ShortHeader)

logger = logging.getLogger(__name__)


class Header(NamedTuple):
    signature: int
    version: int
    length: int
    used: int
    salt: bytes

    @classmethod
    def new(cls, length: int, salt: bytes, used: int = 0) -> "Header":
        return cls(SIGNATURE, VERSION, length, used, bytes(salt))

    @classmethod
    def unpack(cls, data: bytes) -> "Header":
        if len(data) < HEADER_SIZE:
            raise ShortHeader(f"need {HEADER_SIZE} header bytes, got {len(data)}")
        return cls(*struct.unpack_from(HEADER_FMT, data, 0))

    def pack(self) -> bytes:
        return struct.pack(HEADER_FMT, self.signature, self.version,
                           self.length, self.used, self.salt)

    @property
    def expected_size(self) -> int:
        return HEADER_SIZE + self.length * SLOT_SIZE


# ------------------------------------------------------------------
def validate(header: Header, file_size: int) -> Header:
    """Check ``header`` against the format rules; first failure wins."""
    if header.signature != SIGNATURE:
        raise BadSignature(f"bad signature: {header.signature:#x}, want: {SIGNATURE:#x}")
    if header.version != VERSION:
        raise BadVersion(f"bad version: {header.version}, want: {VERSION}")
    if not 0 <= header.used <= header.length:
        raise BadUsedCount(f"bad used count: {header.used} of {header.length} slots")
    if header.length <= 0:
        raise BadFileSize(f"bad slot count: {header.length}")
    if file_size != header.expected_size:
        raise BadFileSize(f"bad file size: {file_size}, want: {header.expected_size}")
    return header


def file_size(f: BinaryIO) -> int:
    try:
        return os.fstat(f.fileno()).st_size
    except (AttributeError, OSError, ValueError):
        # in-memory buffers have no descriptor; measure by seeking
        pos = f.tell()
        end = f.seek(0, os.SEEK_END)
        f.seek(pos)
        return end


def read_header(f: BinaryIO) -> Header:
    f.seek(0)
    header = Header.unpack(f.read(HEADER_SIZE))
    validate(header, file_size(f))
    logger.debug("header ok: length=%d used=%d", header.length, header.used)
    return header
