"""Junk scanning and cleaning engine."""

from __future__ import annotations

import logging
import os
import threading
import time
import uuid
from concurrent.futures import Future, ThreadPoolExecutor
from pathlib import Path
from typing import Callable, Iterable

from junksweep.core.classifier import JUNK_RULES, JunkRule, classify
from junksweep.core.errors import (
    AttributeReadError,
    DeletionError,
    EnumerationError,
    ScanInProgressError,
)
from junksweep.models.clean_report import CleanReport
from junksweep.models.scan_result import JunkEntry, ScanPolicy, ScanResult, ScanState
from junksweep.utils import format_elapsed, remove_path

log = logging.getLogger(__name__)

DEFAULT_MAX_DEPTH = 64

ProgressCallback = Callable[[Path, int], None]  # (directory, entries_found_so_far)


class JunkScanner:
    """Walks a directory tree for junk files and removes selected matches.

    All caller-visible state (``state``, ``results``, ``status_message``) is
    guarded by one lock. A scan builds its entry list privately on the
    worker thread and publishes it in a single step when the walk ends.
    """

    def __init__(
        self,
        *,
        max_depth: int = DEFAULT_MAX_DEPTH,
        rules: tuple[JunkRule, ...] = JUNK_RULES,
        executor: ThreadPoolExecutor | None = None,
    ) -> None:
        self.max_depth = max_depth
        self.rules = rules
        self._owns_executor = executor is None
        self._executor = executor or ThreadPoolExecutor(max_workers=1, thread_name_prefix="junksweep-scan")
        self._lock = threading.Lock()
        self._cancel = threading.Event()
        self._state = ScanState.IDLE
        self._results: list[JunkEntry] = []
        self._status = "Ready to scan"
        self._last_scan: ScanResult | None = None
        self._cleaning = False

    # ── observable state ─────────────────────────────────────────────────

    @property
    def state(self) -> ScanState:
        with self._lock:
            return self._state

    @property
    def results(self) -> list[JunkEntry]:
        """Snapshot of the current result set."""
        with self._lock:
            return list(self._results)

    @property
    def status_message(self) -> str:
        with self._lock:
            return self._status

    @property
    def last_scan(self) -> ScanResult | None:
        """The most recently published scan, including cancelled ones."""
        with self._lock:
            return self._last_scan

    @property
    def is_scanning(self) -> bool:
        return self.state is ScanState.SCANNING

    # ── scanning ─────────────────────────────────────────────────────────

    def scan(
        self,
        root: Path | str,
        policy: ScanPolicy = ScanPolicy.SHALLOW,
        on_progress: ProgressCallback | None = None,
    ) -> Future[ScanResult]:
        """Start scanning ``root`` on the worker thread.

        The previous result set is cleared before this returns. The
        returned future resolves to the finished ScanResult; the same
        result is published to ``results`` and ``status_message``.

        Raises:
            ScanInProgressError: a scan or clean is already running on this
                instance.
        """
        root = Path(root).expanduser().absolute()

        with self._lock:
            if self._state is ScanState.SCANNING:
                raise ScanInProgressError("A scan is already in progress")
            if self._cleaning:
                raise ScanInProgressError("Cannot scan while a clean is in progress")
            self._state = ScanState.SCANNING
            self._results = []
            self._status = f"Scanning {root.name or root}..."
            self._cancel = threading.Event()
            cancel = self._cancel

        log.info("Scanning %s (%s)", root, policy.value)
        try:
            return self._executor.submit(self._run, root, policy, cancel, on_progress)
        except RuntimeError:
            with self._lock:
                self._state = ScanState.IDLE
                self._status = "Ready to scan"
            raise

    def cancel(self) -> bool:
        """Request cancellation of the running scan.

        The walk stops before listing its next directory. Returns False
        when no scan is running.
        """
        with self._lock:
            if self._state is not ScanState.SCANNING:
                return False
            self._cancel.set()
        log.info("Scan cancellation requested")
        return True

    def _run(
        self,
        root: Path,
        policy: ScanPolicy,
        cancel: threading.Event,
        on_progress: ProgressCallback | None,
    ) -> ScanResult:
        start = time.monotonic()
        result = ScanResult(root=root, policy=policy)

        try:
            self._walk(result, cancel, on_progress)
        except Exception:
            log.exception("Scan of %s failed", root)
            result.errors.append(f"{root}: scan aborted by unexpected error")

        if result.cancelled:
            result.summary = "Scan cancelled."
        else:
            result.summary = f"Found {result.count} files."

        with self._lock:
            if result.cancelled:
                self._state = ScanState.CANCELLED
                self._results = []
            else:
                self._state = ScanState.COMPLETED
                self._results = list(result.entries)
            self._status = result.summary
            self._last_scan = result

        log.info(
            "%s (%s, %d errors, %s)",
            result.summary,
            root,
            len(result.errors),
            format_elapsed(time.monotonic() - start),
        )
        return result

    def _walk(
        self,
        result: ScanResult,
        cancel: threading.Event,
        on_progress: ProgressCallback | None,
    ) -> None:
        """Walk the tree depth-first, appending matches to ``result``.

        Symlinks are never followed and directories on another device are
        not entered. Each directory's children are classified before any of
        its subdirectories are listed.
        """
        deep = result.policy is ScanPolicy.DEEP
        visited: set[tuple[int, int]] = set()
        root_dev: int | None = None
        stack: list[tuple[Path, int]] = [(result.root, 0)]

        while stack:
            if cancel.is_set():
                result.cancelled = True
                return

            directory, depth = stack.pop()
            try:
                st = _dir_stat(directory)
                if root_dev is None:
                    root_dev = st.st_dev
                elif st.st_dev != root_dev:
                    log.debug("Not crossing into another filesystem: %s", directory)
                    continue
                key = (st.st_dev, st.st_ino)
                if key in visited:
                    log.debug("Already visited: %s", directory)
                    continue
                visited.add(key)
                children = _list_dir(directory)
            except EnumerationError as e:
                log.debug("Cannot list directory: %s", e)
                result.errors.append(str(e))
                continue

            subdirs: list[Path] = []
            for child in children:
                is_dir = _is_real_dir(child)
                rule = classify(child.name, self.rules)
                if rule is not None and (rule.folder_allowed or not is_dir):
                    result.entries.append(self._make_entry(child, rule, is_dir, result))
                elif is_dir and deep:
                    subdirs.append(Path(child.path))

            if on_progress:
                on_progress(directory, len(result.entries))

            if subdirs and depth + 1 > self.max_depth:
                log.warning("Depth limit %d reached, not descending below %s", self.max_depth, directory)
                result.errors.append(f"{directory}: depth limit {self.max_depth} reached")
                continue
            # Reversed so the first subdirectory is popped first.
            stack.extend((d, depth + 1) for d in reversed(subdirs))

    def _make_entry(
        self,
        child: os.DirEntry,
        rule: JunkRule,
        is_dir: bool,
        result: ScanResult,
    ) -> JunkEntry:
        size = 0
        if not is_dir:
            try:
                size = _read_size(child)
            except AttributeReadError as e:
                log.debug("Size unavailable, recording 0: %s", e)
                result.errors.append(str(e))
        return JunkEntry(path=Path(child.path), size_bytes=size, rule=rule.id, is_dir=is_dir)

    # ── cleaning ─────────────────────────────────────────────────────────

    def clean(self, selection: Iterable[JunkEntry]) -> CleanReport:
        """Delete the selected entries, continuing past failures.

        Directories are removed with all their contents. Only entries that
        were actually deleted leave the result set; failed ones stay
        visible so they can be retried.

        Raises:
            ScanInProgressError: a scan or another clean is running on this
                instance.
        """
        with self._lock:
            if self._state is ScanState.SCANNING:
                raise ScanInProgressError("Cannot clean while a scan is in progress")
            if self._cleaning:
                raise ScanInProgressError("A clean is already in progress")
            self._cleaning = True

        report = CleanReport()
        deleted: set[uuid.UUID] = set()

        try:
            for entry in selection:
                try:
                    _remove_entry(entry)
                except DeletionError as e:
                    log.warning("Failed to delete %s", e)
                    report.errors.append(str(e))
                    report.failed.append(entry)
                    continue
                log.debug("Deleted %s", entry.path)
                deleted.add(entry.id)
                report.files_deleted += 1
                report.bytes_freed += entry.size_bytes
        finally:
            report.summary = f"Cleaned {report.files_deleted} files."
            with self._lock:
                self._results = [e for e in self._results if e.id not in deleted]
                self._status = report.summary
                self._cleaning = False

        log.info("%s (%d bytes freed, %d failed)", report.summary, report.bytes_freed, len(report.failed))
        return report

    # ── lifecycle ────────────────────────────────────────────────────────

    def shutdown(self, wait: bool = True) -> None:
        """Cancel any running scan and stop the worker thread."""
        self.cancel()
        if self._owns_executor:
            self._executor.shutdown(wait=wait)

    def __enter__(self) -> JunkScanner:
        return self

    def __exit__(self, *exc_info) -> None:
        self.shutdown()


def _dir_stat(directory: Path) -> os.stat_result:
    try:
        return os.stat(directory)
    except OSError as e:
        raise EnumerationError(directory, e.strerror or str(e)) from e


def _list_dir(directory: Path) -> list[os.DirEntry]:
    try:
        with os.scandir(directory) as it:
            return sorted(it, key=lambda entry: entry.name)
    except OSError as e:
        raise EnumerationError(directory, e.strerror or str(e)) from e


def _is_real_dir(entry: os.DirEntry) -> bool:
    try:
        return entry.is_dir(follow_symlinks=False)
    except OSError:
        return False


def _read_size(entry: os.DirEntry) -> int:
    try:
        return entry.stat(follow_symlinks=False).st_size
    except OSError as e:
        raise AttributeReadError(entry.path, e.strerror or str(e)) from e


def _remove_entry(entry: JunkEntry) -> None:
    try:
        remove_path(entry.path, is_dir=entry.is_dir)
    except OSError as e:
        raise DeletionError(entry.path, e.strerror or str(e)) from e
