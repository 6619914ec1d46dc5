"""CLI — tests for `shoplist setup` against a temporary SQLite file.

Tests cover:
    - setup creates the admin and reports it
    - a second setup fails with a non-zero exit code
    - invalid emails are rejected before touching the database
"""

import pytest
from click.testing import CliRunner

from shoplist.cli import cli
from shoplist.config import get_settings


@pytest.fixture
def cli_env(tmp_path, monkeypatch):
    monkeypatch.setenv("DATABASE_URL", f"sqlite+aiosqlite:///{tmp_path / 'cli.db'}")
    monkeypatch.setattr("shoplist.cli.setup_logging", lambda level, fmt: None)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def test_setup_creates_admin(cli_env):
    result = CliRunner().invoke(cli, ["setup", "--email", "root@example.com"])

    assert result.exit_code == 0, result.output
    assert "root@example.com" in result.output


def test_setup_prompts_for_email(cli_env):
    result = CliRunner().invoke(cli, ["setup"], input="root@example.com\n")

    assert result.exit_code == 0, result.output
    assert "Admin email address" in result.output


def test_setup_twice_fails(cli_env):
    runner = CliRunner()
    runner.invoke(cli, ["setup", "--email", "root@example.com"])

    result = runner.invoke(cli, ["setup", "--email", "other@example.com"])

    assert result.exit_code != 0
    assert "already setup" in result.output


def test_setup_rejects_invalid_email(cli_env):
    result = CliRunner().invoke(cli, ["setup", "--email", "not-an-email"])

    assert result.exit_code != 0
    assert "invalid email address" in result.output
