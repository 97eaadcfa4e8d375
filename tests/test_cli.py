"""Tests for the latitude-mcp CLI."""

from __future__ import annotations

import json
from unittest.mock import patch

import pytest
from click.testing import CliRunner
from structlog.testing import capture_logs

from latitude_mcp.cli.main import cli


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture(autouse=True)
def wired(ops):
    with patch("latitude_mcp.cli.main.get_sync_operations", return_value=ops), patch(
        "latitude_mcp.cli.main.setup_logging"
    ), capture_logs():
        yield ops


@pytest.fixture
def local_dir(tmp_path):
    d = tmp_path / "local"
    d.mkdir()
    (d / "a.promptl").write_text("A local")
    (d / "c.promptl").write_text("C local")
    return d


class TestReadCommands:
    def test_list(self, runner):
        result = runner.invoke(cli, ["list"])
        assert result.exit_code == 0
        assert "NAME" in result.output
        assert "b" in result.output

    def test_list_json(self, runner):
        result = runner.invoke(cli, ["--format", "json", "list"])
        assert result.exit_code == 0
        assert json.loads(result.output) == [{"name": "a"}, {"name": "b"}]

    def test_get(self, runner):
        result = runner.invoke(cli, ["get", "a"])
        assert result.exit_code == 0
        assert "A v1" in result.output

    def test_get_missing(self, runner):
        result = runner.invoke(cli, ["get", "zzz"])
        assert result.exit_code == 1
        assert "404" in result.output


class TestSyncCommands:
    def test_pull(self, runner, tmp_path):
        out = tmp_path / "out"
        result = runner.invoke(cli, ["pull", "--output-dir", str(out)])
        assert result.exit_code == 0
        assert "Wrote 2 file(s)" in result.output
        assert (out / "a.promptl").read_text() == "A v1"

    def test_push_requires_confirmation(self, runner, local_dir, fake_client):
        result = runner.invoke(cli, ["push", str(local_dir)], input="n\n")
        assert result.exit_code == 1
        assert fake_client.deployments == []

    def test_push(self, runner, local_dir, fake_client):
        result = runner.invoke(cli, ["push", str(local_dir), "--yes"])
        assert result.exit_code == 0
        assert "Deleted: 1  Added: 2" in result.output
        assert fake_client.documents == {"a": "A local", "c": "C local"}

    def test_push_empty_directory(self, runner, tmp_path, fake_client):
        result = runner.invoke(cli, ["push", str(tmp_path), "--yes"])
        assert result.exit_code == 1
        assert "No *.promptl files" in result.output
        assert fake_client.calls == []

    def test_append(self, runner, local_dir, fake_client):
        result = runner.invoke(cli, ["append", str(local_dir)])
        assert result.exit_code == 0
        assert "Added: 1  Updated: 0  Skipped: 1" in result.output
        assert fake_client.documents["a"] == "A v1"

    def test_append_overwrite_json(self, runner, local_dir):
        result = runner.invoke(cli, ["--format", "json", "append", str(local_dir), "--overwrite"])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["updated"] == ["a"]
        assert data["added"] == ["c"]

    def test_replace_from_stdin(self, runner, fake_client):
        result = runner.invoke(cli, ["replace", "new"], input="hello")
        assert result.exit_code == 0
        assert "Created 'new'" in result.output
        assert fake_client.documents["new"] == "hello"

    def test_replace_from_file(self, runner, local_dir, fake_client):
        result = runner.invoke(cli, ["replace", "b", "-f", str(local_dir / "c.promptl")])
        assert result.exit_code == 0
        assert "Replaced 'b'" in result.output
        assert fake_client.documents["b"] == "C local"


class TestLifecycle:
    def test_help_without_credentials(self, runner):
        missing = RuntimeError("LATITUDE_API_KEY and LATITUDE_PROJECT_ID must be set")
        with patch("latitude_mcp.cli.main.get_sync_operations", side_effect=missing):
            result = runner.invoke(cli, ["push", "--help"])
        assert result.exit_code == 0
        assert "Replace ALL LIVE prompts" in result.output

    def test_command_without_credentials(self, runner):
        missing = RuntimeError("LATITUDE_API_KEY and LATITUDE_PROJECT_ID must be set")
        with patch("latitude_mcp.cli.main.get_sync_operations", side_effect=missing):
            result = runner.invoke(cli, ["list"])
        assert result.exit_code == 1
        assert "LATITUDE_API_KEY" in result.output

    def test_client_closed_after_command(self, runner, fake_client):
        result = runner.invoke(cli, ["list"])
        assert result.exit_code == 0
        assert fake_client.closed == 1

    def test_client_closed_after_failure(self, runner, fake_client):
        result = runner.invoke(cli, ["get", "zzz"])
        assert result.exit_code == 1
        assert fake_client.closed == 1
