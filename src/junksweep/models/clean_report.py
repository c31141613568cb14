"""Cleaning report dataclass."""

from __future__ import annotations

from dataclasses import dataclass, field

from junksweep.models.scan_result import JunkEntry


@dataclass(slots=True)
class CleanReport:
    """Result of a cleaning operation."""

    files_deleted: int = 0
    bytes_freed: int = 0
    errors: list[str] = field(default_factory=list)
    failed: list[JunkEntry] = field(default_factory=list)
    summary: str = ""
