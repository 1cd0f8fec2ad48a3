"""YAML configuration loader for runtime settings."""

import os
from pathlib import Path
from typing import Any

import yaml

from article_api.database.engine import DB_PATH_ENV
from article_api.models.pydantic_models import Settings

PORT_ENV = "ARTICLE_API_PORT"


def _load_raw_config(path: Path) -> dict[str, Any]:
    """Load raw YAML config from path.

    Args:
        path: Path to YAML config file.

    Returns:
        Raw config dictionary.

    Raises:
        FileNotFoundError: If config file doesn't exist.
        yaml.YAMLError: If YAML parsing fails.
    """
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path, "r") as f:
        raw_config: dict[str, Any] | None = yaml.safe_load(f)

    # Handle empty config file
    return raw_config if raw_config is not None else {}


def _env_overrides() -> dict[str, Any]:
    """Collect settings given through environment variables."""
    overrides: dict[str, Any] = {}
    if db_path := os.environ.get(DB_PATH_ENV):
        overrides["db_path"] = db_path
    if port := os.environ.get(PORT_ENV):
        overrides["port"] = port
    return overrides


def load_settings(path: Path | None = None) -> Settings:
    """Load settings from an optional YAML file and the environment.

    Environment variables take precedence over the file, the file over the
    defaults.

    Args:
        path: Path to YAML config file. If None, only defaults and the
            environment are used.

    Returns:
        Validated Settings instance.

    Raises:
        FileNotFoundError: If the config file doesn't exist.
        yaml.YAMLError: If YAML parsing fails.
        ValidationError: If a value doesn't match the expected schema.
    """
    raw_config = _load_raw_config(path) if path is not None else {}
    known = {key: value for key, value in raw_config.items() if key in Settings.model_fields}
    return Settings(**{**known, **_env_overrides()})


def merge_settings(settings: Settings, overrides: dict[str, Any]) -> Settings:
    """Merge CLI overrides with loaded settings.

    Overrides that are None are ignored; all others take precedence.

    Args:
        settings: Base settings from file and environment.
        overrides: Dict with override values keyed by Settings field name.

    Returns:
        New Settings with merged values.
    """
    explicit = {key: value for key, value in overrides.items() if value is not None}
    return Settings(**{**settings.model_dump(), **explicit})
