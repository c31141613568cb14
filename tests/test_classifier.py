"""Tests for junk name classification."""

from __future__ import annotations

import os

import pytest

from junksweep.core.classifier import JUNK_RULES, JunkRule, classify, get_rule, is_junk


class TestIsJunk:
    @pytest.mark.parametrize(
        "name",
        [
            ".DS_Store",
            "._a.txt",
            "._.DS_Store",
            "._x",
            "Thumbs.db",
            "thumbs.db",
            "THUMBS.DB",
            "Desktop.ini",
            "desktop.INI",
            "$RECYCLE.BIN",
            "$Recycle.Bin",
            "System Volume Information",
            "system volume information",
        ],
    )
    def test_junk_names(self, name):
        assert is_junk(name)

    @pytest.mark.parametrize(
        "name",
        [
            ".gitignore",
            ".git",
            ".vscode",
            "readme.txt",
            ".ds_store",
            ".DS_STORE",
            "DS_Store",
            "._",
            "_._foo",
            ".hidden",
            "Thumbs.db.bak",
            "my Thumbs.db",
            "System Volume",
            "",
        ],
    )
    def test_other_names(self, name):
        assert not is_junk(name)

    def test_only_final_component_is_inspected(self):
        assert is_junk("/Volumes/USB/.DS_Store")
        assert not is_junk("/Volumes/._backup/photo.jpg")

    @pytest.mark.skipif(os.sep == "\\", reason="backslash is a separator on Windows")
    @pytest.mark.parametrize(
        "name",
        [r"backup\.DS_Store", r"holiday\Thumbs.db", r"E:\photos\Thumbs.db", r"dir\._a.txt"],
    )
    def test_backslash_is_part_of_the_name_on_posix(self, name):
        assert not is_junk(name)
        assert classify(name) is None


class TestClassify:
    def test_reports_matching_rule(self):
        assert classify(".DS_Store").id == "ds_store"
        assert classify("._song.mp3").id == "resource_fork"
        assert classify("desktop.ini").id == "windows_system"

    def test_no_match_returns_none(self):
        assert classify("photo.jpg") is None

    def test_any_rule_firing_is_a_match(self):
        rules = (
            JunkRule(id="first", description="", kind="exact", patterns=("x",)),
            JunkRule(id="second", description="", kind="prefix", patterns=("._",)),
        )
        assert classify("._y", rules).id == "second"
        assert classify("x", rules).id == "first"

    def test_overlapping_rules_first_wins(self):
        rules = (
            JunkRule(id="a", description="", kind="prefix", patterns=("._",)),
            JunkRule(id="b", description="", kind="exact", patterns=("._x",)),
        )
        assert classify("._x", rules).id == "a"

    def test_unknown_kind_raises(self):
        rule = JunkRule(id="bad", description="", kind="glob", patterns=("*",))
        with pytest.raises(ValueError):
            rule.matches("anything")


class TestRules:
    def test_rule_order_is_fixed(self):
        assert [r.id for r in JUNK_RULES] == ["ds_store", "resource_fork", "windows_system"]

    def test_only_windows_rule_allows_folders(self):
        assert get_rule("windows_system").folder_allowed
        assert not get_rule("ds_store").folder_allowed
        assert not get_rule("resource_fork").folder_allowed

    def test_get_unknown_rule(self):
        assert get_rule("nope") is None
