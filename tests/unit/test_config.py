"""Unit tests for the YAML settings loader."""

import os
from pathlib import Path
from typing import Any
from unittest.mock import patch

import pytest
import yaml
from pydantic import ValidationError

from article_api.config import PORT_ENV, load_settings, merge_settings
from article_api.database.engine import DB_PATH_ENV
from article_api.models.pydantic_models import Settings


@pytest.fixture
def sample_config_dict() -> dict[str, Any]:
    """Return a sample configuration dictionary."""
    return {
        "host": "127.0.0.1",
        "port": 3000,
        "db_path": "data/articles.db",
        "log_level": "debug",
    }


@pytest.fixture
def temp_config_file(tmp_path: Path, sample_config_dict: dict[str, Any]) -> Path:
    """Create a temporary config file."""
    config_path = tmp_path / "settings.yaml"
    with open(config_path, "w") as f:
        yaml.dump(sample_config_dict, f)
    return config_path


@pytest.fixture(autouse=True)
def clean_env():
    """Run every test without the settings environment variables."""
    with patch.dict(os.environ, {}, clear=False):
        os.environ.pop(DB_PATH_ENV, None)
        os.environ.pop(PORT_ENV, None)
        yield


class TestLoadSettings:
    """Tests for load_settings()."""

    def test_defaults_without_file(self):
        assert load_settings() == Settings()

    def test_loads_values_from_file(self, temp_config_file: Path):
        settings = load_settings(temp_config_file)
        assert settings.host == "127.0.0.1"
        assert settings.port == 3000
        assert settings.db_path == Path("data/articles.db")
        assert settings.log_level == "DEBUG"

    def test_missing_file_raises(self, tmp_path: Path):
        with pytest.raises(FileNotFoundError, match="Config file not found"):
            load_settings(tmp_path / "nonexistent.yaml")

    def test_empty_file_gives_defaults(self, tmp_path: Path):
        config_path = tmp_path / "empty.yaml"
        config_path.write_text("")
        assert load_settings(config_path) == Settings()

    def test_unknown_keys_ignored(self, tmp_path: Path):
        config_path = tmp_path / "extra.yaml"
        config_path.write_text("port: 9000\nunused: true\n")
        assert load_settings(config_path).port == 9000

    def test_invalid_value_raises(self, tmp_path: Path):
        config_path = tmp_path / "bad.yaml"
        config_path.write_text("port: not-a-port\n")
        with pytest.raises(ValidationError):
            load_settings(config_path)

    def test_environment_overrides_file(self, temp_config_file: Path):
        with patch.dict(os.environ, {DB_PATH_ENV: "/tmp/env.db", PORT_ENV: "4000"}):
            settings = load_settings(temp_config_file)
        assert settings.db_path == Path("/tmp/env.db")
        assert settings.port == 4000
        assert settings.host == "127.0.0.1"


class TestMergeSettings:
    """Tests for merge_settings()."""

    def test_overrides_take_precedence(self):
        merged = merge_settings(Settings(port=3000), {"port": 5000, "db_path": Path("x.db")})
        assert merged.port == 5000
        assert merged.db_path == Path("x.db")

    def test_none_overrides_ignored(self):
        base = Settings(port=3000, host="127.0.0.1")
        merged = merge_settings(base, {"port": None, "host": None})
        assert merged == base

    def test_overrides_are_validated(self):
        with pytest.raises(ValidationError):
            merge_settings(Settings(), {"port": 70000})
