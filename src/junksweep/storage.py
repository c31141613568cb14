"""JSON file storage for cleaning history."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from junksweep.utils import xdg_data_home

log = logging.getLogger(__name__)

_APP_DIR = "junksweep"
_HISTORY_FILE = "history.json"


def default_history_file() -> Path:
    """Return the default history location under XDG_DATA_HOME."""
    return xdg_data_home() / _APP_DIR / _HISTORY_FILE


def load_history(path: Path) -> dict[str, Any]:
    """Load the history file, returning empty structure if missing."""
    if not path.exists():
        return {"sessions": []}
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except (json.JSONDecodeError, OSError):
        log.exception("Failed to load history file: %s", path)
        return {"sessions": []}
    if not isinstance(data, dict) or not isinstance(data.get("sessions"), list):
        log.warning("Ignoring malformed history file: %s", path)
        return {"sessions": []}
    return data


def save_history(path: Path, data: dict[str, Any]) -> None:
    """Write the history data to disk."""
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)
    except OSError:
        log.exception("Failed to save history file: %s", path)
