"""Tests for history storage and settings."""

from __future__ import annotations

import json

from junksweep.settings import Settings
from junksweep.storage import default_history_file, load_history, save_history


class TestHistoryStorage:
    def test_missing_file(self, tmp_path):
        assert load_history(tmp_path / "none.json") == {"sessions": []}

    def test_round_trip_creates_parent(self, tmp_path):
        path = tmp_path / "deep" / "history.json"
        save_history(path, {"sessions": [{"timestamp": "t", "details": []}]})
        assert load_history(path)["sessions"][0]["timestamp"] == "t"

    def test_corrupt_file(self, tmp_path):
        path = tmp_path / "history.json"
        path.write_text("{not json")
        assert load_history(path) == {"sessions": []}

    def test_malformed_structure(self, tmp_path):
        path = tmp_path / "history.json"
        path.write_text(json.dumps({"sessions": "nope"}))
        assert load_history(path) == {"sessions": []}

    def test_default_location_follows_xdg(self, isolate_storage):
        assert default_history_file() == isolate_storage


class TestSettings:
    def test_defaults(self, tmp_path):
        settings = Settings(tmp_path / "settings.json")
        assert settings.get("scan.deep") is False
        assert settings.get("scan.max_depth") == 64
        assert settings.get("missing.key", "fallback") == "fallback"

    def test_set_persists(self, tmp_path):
        path = tmp_path / "cfg" / "settings.json"
        Settings(path).set("scan.deep", True)

        reloaded = Settings(path)
        assert reloaded.get("scan.deep") is True
        assert reloaded.get("scan.max_depth") == 64
        assert json.loads(path.read_text()) == {"scan": {"deep": True}}

    def test_as_dict_merges_defaults(self, tmp_path):
        settings = Settings(tmp_path / "settings.json")
        settings.set("scan.max_depth", 8)
        assert settings.as_dict() == {"scan": {"deep": False, "max_depth": 8}}

    def test_corrupt_settings_ignored(self, tmp_path):
        path = tmp_path / "settings.json"
        path.write_text("[1, 2")
        assert Settings(path).get("scan.deep") is False

    def test_default_path_follows_xdg(self, isolate_storage, tmp_path):
        assert Settings().path == tmp_path / "config" / "junksweep" / "settings.json"
