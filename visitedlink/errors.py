# ==================================================
# visitedlink/errors.py
# ==================================================


class VisitedLinkError(Exception):
    """Base class for everything this package raises on purpose."""


class OpenError(VisitedLinkError):
    """The table file could not be opened."""


class FormatError(VisitedLinkError):
    """The header does not describe a usable table."""


class ShortHeader(FormatError):
    pass


class BadSignature(FormatError):
    pass


class BadVersion(FormatError):
    pass


class BadUsedCount(FormatError):
    pass


class BadFileSize(FormatError):
    pass


class TableIOError(VisitedLinkError):
    """Seek/read/write failed while updating the slot table."""
