"""Settings persistence backed by a YAML file."""

from __future__ import annotations

import logging
import os
from pathlib import Path

import yaml
from pydantic import ValidationError

from kafkalens.models.state.app_settings import (
    AppSettings,
    ConfigError,
    ConfigLoadError,
    ConfigSaveError,
)

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "KAFKALENS_CONFIG"


class ConfigManager:
    """Load and save ``AppSettings``.

    The settings file lives at ``$KAFKALENS_CONFIG`` when set, otherwise at
    ``~/.config/kafkalens/settings.yaml``. A missing file yields defaults.
    """

    @staticmethod
    def default_path() -> Path:
        override = os.environ.get(CONFIG_ENV_VAR)
        if override:
            return Path(override).expanduser()
        return Path.home() / ".config" / "kafkalens" / "settings.yaml"

    @classmethod
    def load(cls, path: Path | None = None) -> AppSettings:
        """Load settings from disk.

        Raises:
            ConfigLoadError: The file exists but cannot be read or validated.
        """
        config_path = path or cls.default_path()
        if not config_path.exists():
            logger.debug("No settings file at %s, using defaults", config_path)
            return AppSettings()

        try:
            with config_path.open(encoding="utf-8") as handle:
                raw = yaml.safe_load(handle) or {}
        except (OSError, yaml.YAMLError) as exc:
            raise ConfigLoadError(f"Cannot read settings from {config_path}: {exc}") from exc

        if not isinstance(raw, dict):
            raise ConfigLoadError(f"Settings file {config_path} must contain a mapping")

        try:
            settings = AppSettings.model_validate(raw)
        except ValidationError as exc:
            raise ConfigLoadError(f"Invalid settings in {config_path}: {exc}") from exc

        logger.info("Settings loaded from %s", config_path)
        return settings

    @classmethod
    def save(cls, settings: AppSettings, path: Path | None = None) -> Path:
        """Write settings to disk and return the path written."""
        config_path = path or cls.default_path()
        try:
            config_path.parent.mkdir(parents=True, exist_ok=True)
            with config_path.open("w", encoding="utf-8") as handle:
                yaml.safe_dump(
                    settings.model_dump(mode="json"),
                    handle,
                    default_flow_style=False,
                    sort_keys=False,
                )
        except OSError as exc:
            raise ConfigSaveError(f"Cannot write settings to {config_path}: {exc}") from exc
        return config_path


__all__ = [
    "AppSettings",
    "ConfigError",
    "ConfigLoadError",
    "ConfigManager",
    "ConfigSaveError",
]
