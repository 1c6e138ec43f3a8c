"""Shared test fixtures."""

from __future__ import annotations

import sys

import pytest

# test_deep_tree_does_not_recurse builds a ~1200-level tree; pytest's tmp_path
# cleanup uses shutil.rmtree, which recurses per level on Python < 3.12.
sys.setrecursionlimit(max(sys.getrecursionlimit(), 10000))


@pytest.fixture
def isolate_settings(tmp_path, monkeypatch):
    """Redirect the settings file to a temp directory."""
    config_home = tmp_path / "config"
    config_home.mkdir()
    monkeypatch.setenv("XDG_CONFIG_HOME", str(config_home))
    return config_home / "dirsize" / "settings.json"


@pytest.fixture
def sample_tree(tmp_path):
    """Root with a file, two sized directories and an empty one.

    Sizes of the immediate children:
        big/    -> 900  (nested: big/inner/a.bin 500 + big/inner/b.bin 400)
        mid.bin -> 300
        small/  -> 100
        empty/  -> 0
    """
    root = tmp_path / "root"
    root.mkdir()

    inner = root / "big" / "inner"
    inner.mkdir(parents=True)
    (inner / "a.bin").write_bytes(b"a" * 500)
    (inner / "b.bin").write_bytes(b"b" * 400)

    (root / "mid.bin").write_bytes(b"m" * 300)

    (root / "small").mkdir()
    (root / "small" / "s.bin").write_bytes(b"s" * 100)

    (root / "empty").mkdir()
    return root
