"""Shared test fixtures."""

from __future__ import annotations

import pytest

from junksweep.core.engine import JunkScanner


@pytest.fixture
def isolate_storage(tmp_path, monkeypatch):
    """Redirect history and settings to a temp directory."""
    data_home = tmp_path / "data"
    config_home = tmp_path / "config"
    monkeypatch.setenv("XDG_DATA_HOME", str(data_home))
    monkeypatch.setenv("XDG_CONFIG_HOME", str(config_home))
    return data_home / "junksweep" / "history.json"


@pytest.fixture
def junk_tree(tmp_path):
    """A small volume with junk at depth 1 and depth 2.

    volume/
        a.txt, .DS_Store, ._a.txt, notes.md
        sub/Thumbs.db
    """
    root = tmp_path / "volume"
    root.mkdir()
    (root / "a.txt").write_bytes(b"a" * 10)
    (root / ".DS_Store").write_bytes(b"d" * 6148)
    (root / "._a.txt").write_bytes(b"r" * 4096)
    (root / "notes.md").write_bytes(b"n" * 20)
    (root / "sub").mkdir()
    (root / "sub" / "Thumbs.db").write_bytes(b"t" * 512)
    return root


@pytest.fixture
def scanner():
    s = JunkScanner()
    yield s
    s.shutdown()
