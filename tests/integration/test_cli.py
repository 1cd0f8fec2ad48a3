"""Integration tests for CLI commands."""

import os
from pathlib import Path
from unittest.mock import patch

import pytest
from typer.testing import CliRunner

from article_api import __version__
from article_api.cli import app
from article_api.database.engine import DB_PATH_ENV
from article_api.migrations.manager import MigrationManager, MigrationState


@pytest.fixture
def runner() -> CliRunner:
    """Create a CLI test runner."""
    return CliRunner()


@pytest.fixture(autouse=True)
def clean_env():
    """Keep the database path environment variable out of the tests."""
    with patch.dict(os.environ, {}, clear=False):
        os.environ.pop(DB_PATH_ENV, None)
        yield


@pytest.fixture
def db_path(tmp_path: Path) -> Path:
    return tmp_path / "app.db"


@pytest.fixture
def migrated_db(db_path: Path) -> Path:
    """Create a fully migrated database."""
    with MigrationManager(db_path) as manager:
        manager.up()
    return db_path


def applied_versions(db_path: Path) -> list[int]:
    with MigrationManager(db_path) as manager:
        return [s.version for s in manager.status() if s.state is MigrationState.APPLIED]


class TestVersion:
    """Tests for --version."""

    def test_version(self, runner: CliRunner):
        result = runner.invoke(app, ["--version"])

        assert result.exit_code == 0
        assert __version__ in result.output


class TestMigrateCommand:
    """Tests for the migrate command."""

    def test_up(self, runner: CliRunner, db_path: Path):
        result = runner.invoke(app, ["migrate", "up", "--db", str(db_path)])

        assert result.exit_code == 0, result.output
        assert "Migration command completed: up" in result.output
        assert applied_versions(db_path) == [1]

    def test_up_twice(self, runner: CliRunner, migrated_db: Path):
        result = runner.invoke(app, ["migrate", "up", "--db", str(migrated_db)])

        assert result.exit_code == 0
        assert "No pending migrations" in result.output

    def test_status_pending(self, runner: CliRunner, db_path: Path):
        result = runner.invoke(app, ["migrate", "status", "--db", str(db_path)])

        assert result.exit_code == 0
        assert "pending" in result.output
        assert "Create articles table" in result.output

    def test_status_applied(self, runner: CliRunner, migrated_db: Path):
        result = runner.invoke(app, ["migrate", "status", "--db", str(migrated_db)])

        assert result.exit_code == 0
        assert "applied" in result.output

    def test_down(self, runner: CliRunner, migrated_db: Path):
        result = runner.invoke(app, ["migrate", "down", "--db", str(migrated_db)])

        assert result.exit_code == 0
        assert "Rolled back migration 1" in result.output
        assert applied_versions(migrated_db) == []

    def test_down_with_nothing_applied_fails(self, runner: CliRunner, db_path: Path):
        result = runner.invoke(app, ["migrate", "down", "--db", str(db_path)])

        assert result.exit_code == 1
        assert "No applied migrations" in result.output

    def test_reset(self, runner: CliRunner, migrated_db: Path):
        result = runner.invoke(app, ["migrate", "reset", "--db", str(migrated_db)])

        assert result.exit_code == 0
        assert "Migration command completed: reset" in result.output
        assert applied_versions(migrated_db) == [1]

    def test_unknown_command_rejected(self, runner: CliRunner, db_path: Path):
        result = runner.invoke(app, ["migrate", "sideways", "--db", str(db_path)])

        assert result.exit_code != 0
        assert not db_path.exists()

    def test_db_path_from_environment(self, runner: CliRunner, db_path: Path):
        with patch.dict(os.environ, {DB_PATH_ENV: str(db_path)}):
            result = runner.invoke(app, ["migrate", "up"])

        assert result.exit_code == 0
        assert db_path.exists()

    def test_missing_config_file_fails(self, runner: CliRunner, tmp_path: Path):
        result = runner.invoke(
            app, ["migrate", "up", "--config", str(tmp_path / "missing.yaml")]
        )

        assert result.exit_code == 1
        assert "Config file not found" in result.output


class TestApiCommand:
    """Tests for the api command."""

    def test_missing_database_fails(self, runner: CliRunner, db_path: Path):
        with patch("article_api.cli.uvicorn.run") as mock_run:
            result = runner.invoke(app, ["api", "--db", str(db_path)])

        assert result.exit_code == 1
        assert "Database file does not exist" in result.output
        assert "article-api migrate up" in result.output
        mock_run.assert_not_called()

    def test_starts_server(self, runner: CliRunner, migrated_db: Path):
        with patch("article_api.cli.uvicorn.run") as mock_run:
            result = runner.invoke(app, ["api", "--db", str(migrated_db), "--port", "3000"])

        assert result.exit_code == 0, result.output
        mock_run.assert_called_once()
        assert mock_run.call_args.kwargs["port"] == 3000
        assert mock_run.call_args.kwargs["host"] == "0.0.0.0"

    def test_settings_from_config_file(self, runner: CliRunner, migrated_db: Path, tmp_path: Path):
        config_path = tmp_path / "settings.yaml"
        config_path.write_text(f"port: 4000\nhost: 127.0.0.1\ndb_path: {migrated_db}\n")

        with patch("article_api.cli.uvicorn.run") as mock_run:
            result = runner.invoke(app, ["api", "--config", str(config_path), "--port", "5000"])

        assert result.exit_code == 0, result.output
        assert mock_run.call_args.kwargs["port"] == 5000
        assert mock_run.call_args.kwargs["host"] == "127.0.0.1"

    def test_invalid_port_fails(self, runner: CliRunner, migrated_db: Path):
        with patch("article_api.cli.uvicorn.run") as mock_run:
            result = runner.invoke(app, ["api", "--db", str(migrated_db), "--port", "0"])

        assert result.exit_code == 1
        assert "Invalid configuration" in result.output
        mock_run.assert_not_called()
