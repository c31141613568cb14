"""Tracks deleted junk and freed space across sessions."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any

from junksweep.models.clean_report import CleanReport
from junksweep.storage import default_history_file, load_history, save_history

log = logging.getLogger(__name__)


class Tracker:
    """Tracks and persists cleaning statistics.

    Owns the lifetime totals: callers ``record()`` each clean report, then
    ``save_session()`` once the batch is done. Nothing is written until then.
    """

    def __init__(self, history_file: Path | None = None) -> None:
        self.history_file = history_file or default_history_file()
        self._session_details: list[dict[str, Any]] = []

    @property
    def lifetime_bytes_freed(self) -> int:
        """Bytes freed across all saved sessions."""
        return sum(_session_bytes(s) for s in self._load_sessions())

    @property
    def lifetime_files_deleted(self) -> int:
        """Files deleted across all saved sessions."""
        return sum(_session_files(s) for s in self._load_sessions())

    def record(self, report: CleanReport, root: Path | str | None = None) -> None:
        """Record a clean report for the current session."""
        if report.files_deleted == 0 and report.bytes_freed == 0:
            return
        self._session_details.append(
            {
                "root": str(root) if root is not None else "",
                "files_deleted": report.files_deleted,
                "bytes_freed": report.bytes_freed,
            }
        )

    def get_last_clean_time(self) -> str | None:
        """Return ISO timestamp of the most recent cleaning session, or None."""
        sessions = self._load_sessions()
        return sessions[-1]["timestamp"] if sessions else None

    def save_session(self) -> None:
        """Persist the current session to history."""
        if not self._session_details:
            return

        history = load_history(self.history_file)
        session_entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "details": list(self._session_details),
        }
        history["sessions"].append(session_entry)
        save_history(self.history_file, history)

        log.info(
            "Saved session: %d files, %d bytes freed",
            _session_files(session_entry),
            _session_bytes(session_entry),
        )
        self._session_details.clear()

    def get_stats(self, period: str = "all") -> dict[str, Any]:
        """Get aggregated statistics for a time period.

        Args:
            period: One of 'today', 'week', 'month', 'all'.
        """
        all_sessions = self._load_sessions()

        match period:
            case "today":
                cutoff = _start_of_today()
            case "week":
                cutoff = _start_of_today() - timedelta(days=7)
            case "month":
                cutoff = _start_of_today() - timedelta(days=30)
            case _:
                cutoff = None

        if cutoff is not None:
            sessions = [
                s for s in all_sessions
                if datetime.fromisoformat(s["timestamp"]) >= cutoff
            ]
        else:
            sessions = all_sessions

        return {
            "period": period,
            "bytes_freed": sum(_session_bytes(s) for s in sessions),
            "files_deleted": sum(_session_files(s) for s in sessions),
            "session_count": len(sessions),
            "lifetime_bytes_freed": sum(_session_bytes(s) for s in all_sessions),
            "lifetime_files_deleted": sum(_session_files(s) for s in all_sessions),
            "per_root": self._aggregate_root_stats(sessions),
        }

    def _load_sessions(self) -> list[dict[str, Any]]:
        return load_history(self.history_file).get("sessions", [])

    @staticmethod
    def _aggregate_root_stats(sessions: list[dict[str, Any]]) -> dict[str, dict[str, int]]:
        """Aggregate statistics per scanned root across sessions."""
        totals: dict[str, dict[str, int]] = {}
        for session in sessions:
            for detail in session.get("details", []):
                root = detail.get("root", "")
                if root not in totals:
                    totals[root] = {"bytes_freed": 0, "files_deleted": 0}
                totals[root]["bytes_freed"] += detail.get("bytes_freed", 0)
                totals[root]["files_deleted"] += detail.get("files_deleted", 0)
        return totals


def _session_bytes(session: dict[str, Any]) -> int:
    """Derive total bytes freed from a session's details."""
    return sum(d.get("bytes_freed", 0) for d in session.get("details", []))


def _session_files(session: dict[str, Any]) -> int:
    """Derive total files deleted from a session's details."""
    return sum(d.get("files_deleted", 0) for d in session.get("details", []))


def _start_of_today() -> datetime:
    """Return the start of the current UTC day."""
    now = datetime.now(timezone.utc)
    return now.replace(hour=0, minute=0, second=0, microsecond=0)
