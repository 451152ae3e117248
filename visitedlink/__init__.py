from .errors import (BadFileSize, BadSignature, BadUsedCount, BadVersion,
                     FormatError, OpenError, ShortHeader, TableIOError,
                     VisitedLinkError)
from .fingerprint import fingerprint, slot_index
from .header import Header
from .store import VisitedLinkTable

__all__ = [
    "VisitedLinkTable", "Header", "fingerprint", "slot_index",
    "VisitedLinkError", "OpenError", "FormatError", "ShortHeader",
    "BadSignature", "BadVersion", "BadUsedCount", "BadFileSize",
    "TableIOError",
]
