"""Scan result dataclasses."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path


class ScanPolicy(Enum):
    """How far below the root a scan descends."""

    SHALLOW = "shallow"
    DEEP = "deep"

    @classmethod
    def from_flag(cls, deep: bool) -> ScanPolicy:
        return cls.DEEP if deep else cls.SHALLOW


class ScanState(Enum):
    """Lifecycle of a scanner instance."""

    IDLE = "idle"
    SCANNING = "scanning"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


@dataclass(frozen=True, slots=True)
class JunkEntry:
    """Single junk file or directory found during a scan.

    ``is_dir`` entries are removed as whole trees. ``id`` is minted at
    discovery, so rescanning the same path yields a distinct entry.
    """

    path: Path
    size_bytes: int
    rule: str
    is_dir: bool = False
    id: uuid.UUID = field(default_factory=uuid.uuid4)

    @property
    def name(self) -> str:
        return self.path.name


@dataclass(slots=True)
class ScanResult:
    """Result of scanning a directory tree for junk."""

    root: Path
    policy: ScanPolicy
    entries: list[JunkEntry] = field(default_factory=list)
    summary: str = ""
    cancelled: bool = False
    errors: list[str] = field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.entries)

    @property
    def total_bytes(self) -> int:
        return sum(e.size_bytes for e in self.entries)
