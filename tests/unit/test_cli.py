# tests/unit/test_cli.py
"""Unit tests for the command-line interface."""

import pytest
from click.testing import CliRunner

from inboxsage.__version__ import __version__
from inboxsage.cli.main import cli


@pytest.fixture
def cli_env(tmp_path, monkeypatch):
    """Run commands against a temporary database without credentials."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("DB_PATH", str(tmp_path / "data" / "cli.db"))
    monkeypatch.setenv("LOG_LEVEL", "WARNING")
    monkeypatch.setenv("LOG_FORMAT", "console")
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    monkeypatch.delenv("RESEND_API_KEY", raising=False)
    monkeypatch.delenv("ENABLE_CRON_JOBS", raising=False)
    return tmp_path


@pytest.mark.unit
class TestCli:
    """Tests for CLI commands."""

    def test_version(self):
        """Should print the package version."""
        result = CliRunner().invoke(cli, ["--version"])

        assert result.exit_code == 0
        assert __version__ in result.output

    def test_init_db(self, cli_env):
        """Should create the database file."""
        result = CliRunner().invoke(cli, ["init-db"])

        assert result.exit_code == 0
        assert "Database ready" in result.output
        assert (cli_env / "data" / "cli.db").exists()

    def test_status(self, cli_env):
        """Should show jobs, integrations and user count."""
        result = CliRunner().invoke(cli, ["status"])

        assert result.exit_code == 0
        assert "Recurring jobs: disabled" in result.output
        assert "content-fetch" in result.output
        assert "OpenAI:  missing" in result.output
        assert "Users:   0" in result.output

    def test_trigger_content_fetch(self, cli_env):
        """Should run a job once and print its stats."""
        result = CliRunner().invoke(cli, ["trigger", "content-fetch"])

        assert result.exit_code == 0
        assert "content-fetch completed" in result.output

    def test_trigger_ai_without_key(self, cli_env):
        """Should abort AI processing without an OpenAI key."""
        result = CliRunner().invoke(cli, ["trigger", "ai-processing"])

        assert result.exit_code != 0
        assert "OPENAI_API_KEY is not configured" in result.output

    def test_trigger_unknown_job(self, cli_env):
        """Should reject unknown job names."""
        result = CliRunner().invoke(cli, ["trigger", "reindex"])

        assert result.exit_code == 2
