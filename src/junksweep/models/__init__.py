"""junksweep data models."""

from junksweep.models.scan_result import JunkEntry, ScanPolicy, ScanResult, ScanState
from junksweep.models.clean_report import CleanReport

__all__ = [
    "CleanReport",
    "JunkEntry",
    "ScanPolicy",
    "ScanResult",
    "ScanState",
]
