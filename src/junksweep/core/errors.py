"""Exceptions raised by the scanning engine."""

from __future__ import annotations

from pathlib import Path


class JunkSweepError(Exception):
    """Base class for junksweep errors."""


class ScanInProgressError(JunkSweepError):
    """Raised when an operation conflicts with a running scan."""


class PathError(JunkSweepError):
    """An operation on a single path failed."""

    def __init__(self, path: Path | str, reason: str) -> None:
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"{path}: {reason}")


class EnumerationError(PathError):
    """A directory could not be listed."""


class AttributeReadError(PathError):
    """Size or type metadata of an entry could not be read."""


class DeletionError(PathError):
    """A junk entry could not be removed."""
