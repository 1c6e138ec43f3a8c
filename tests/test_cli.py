"""Tests for the command line interface."""

from __future__ import annotations

import json

import pytest
from click.testing import CliRunner

from dirsize.cli import main
from dirsize.settings import Settings
from dirsize.utils import normalize_path

pytestmark = pytest.mark.usefixtures("isolate_settings")


@pytest.fixture
def runner():
    return CliRunner()


class TestScanCommand:
    def test_json_output(self, runner, sample_tree):
        result = runner.invoke(main, ["scan", str(sample_tree), "--json"])
        assert result.exit_code == 0, result.output

        data = json.loads(result.output)
        assert data["root"] == normalize_path(sample_tree)
        assert data["total_bytes"] == 1300
        assert [e["size_bytes"] for e in data["entries"]] == [900, 300, 100, 0]
        assert data["entries"][0]["size"] == "900.00 B"

    def test_top_limits_entries(self, runner, sample_tree):
        result = runner.invoke(main, ["scan", str(sample_tree), "--json", "--top", "2"])
        data = json.loads(result.output)
        assert [e["size_bytes"] for e in data["entries"]] == [900, 300]
        assert data["total_bytes"] == 1300

    def test_text_output(self, runner, sample_tree):
        result = runner.invoke(main, ["scan", str(sample_tree), "--workers", "2"])
        assert result.exit_code == 0, result.output
        assert "900.00 B" in result.output
        assert normalize_path(sample_tree / "big") in result.output
        assert "Total:" in result.output
        assert "1.27 KB" in result.output

    def test_remembers_last_root(self, runner, sample_tree):
        runner.invoke(main, ["scan", str(sample_tree), "--json"])
        assert Settings().get("paths.last_root") == normalize_path(sample_tree)

        result = runner.invoke(main, ["scan", "--json"])
        assert json.loads(result.output)["root"] == normalize_path(sample_tree)

    def test_missing_root_is_empty(self, runner, tmp_path):
        result = runner.invoke(main, ["scan", str(tmp_path / "missing")])
        assert result.exit_code == 0, result.output
        assert "Nothing found." in result.output

    def test_file_root_is_empty(self, runner, tmp_path):
        f = tmp_path / "notes.txt"
        f.write_text("hello")
        result = runner.invoke(main, ["scan", str(f)])
        assert result.exit_code == 0, result.output
        assert "Nothing found." in result.output

    def test_invalid_worker_setting_is_ignored(self, runner, sample_tree):
        runner.invoke(main, ["config", "scan.max_workers", "-1"])
        result = runner.invoke(main, ["scan", str(sample_tree), "--json"])
        assert result.exit_code == 0, result.output
        assert [e["size_bytes"] for e in json.loads(result.output)["entries"]] == [900, 300, 100, 0]


class TestTrashCommand:
    def test_trash_with_yes(self, runner, monkeypatch):
        moved: list[str] = []
        monkeypatch.setattr("dirsize.core.deletion.send2trash", moved.append)

        result = runner.invoke(main, ["trash", "-y", "/data/a", "/data/b"])
        assert result.exit_code == 0, result.output
        assert moved == ["/data/a", "/data/b"]
        assert "✓ /data/a" in result.output

    def test_trash_aborted(self, runner, monkeypatch):
        moved: list[str] = []
        monkeypatch.setattr("dirsize.core.deletion.send2trash", moved.append)

        result = runner.invoke(main, ["trash", "/data/a"], input="n\n")
        assert "Aborted." in result.output
        assert moved == []

    def test_trash_failure_exits_nonzero(self, runner, tmp_path):
        result = runner.invoke(main, ["trash", "-y", str(tmp_path / "vanished")])
        assert result.exit_code == 1
        assert "could not move to trash" in result.output


class TestConfigCommand:
    def test_show_all(self, runner):
        result = runner.invoke(main, ["config"])
        assert result.exit_code == 0
        assert json.loads(result.output)["scan"]["grace_delay"] == 0.5

    def test_set_and_get(self, runner):
        result = runner.invoke(main, ["config", "scan.max_workers", "3"])
        assert result.exit_code == 0
        assert "scan.max_workers = 3" in result.output

        result = runner.invoke(main, ["config", "scan.max_workers"])
        assert result.output.strip() == "3"

    def test_plain_string_value(self, runner):
        runner.invoke(main, ["config", "paths.last_root", "/srv/media"])
        assert Settings().get("paths.last_root") == "/srv/media"
