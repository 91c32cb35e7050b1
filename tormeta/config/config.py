"""Configuration management for tormeta.

Configuration is loaded hierarchically: defaults → TOML config file →
environment variables. Command-line options are applied on top by the CLI.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

import toml
from pydantic import ValidationError as PydanticValidationError

from tormeta.models import Config, ObservabilityConfig
from tormeta.utils.exceptions import ConfigurationError
from tormeta.utils.logging_config import setup_logging

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "tormeta.toml"

# Mapping of environment variables to config paths
ENV_MAPPINGS: dict[str, str] = {
    "TORMETA_MAX_DEPTH": "codec.max_depth",
    "TORMETA_STRICT_DECODE": "codec.strict",
    "TORMETA_LOG_LEVEL": "observability.log_level",
    "TORMETA_LOG_FILE": "observability.log_file",
    "TORMETA_STRUCTURED_LOGGING": "observability.structured_logging",
}

# Global configuration instance
_config_manager: ConfigManager | None = None


def _parse_env_value(raw: str) -> bool | int | str:
    low = raw.lower()
    if low in {"true", "yes", "on"}:
        return True
    if low in {"false", "no", "off"}:
        return False
    try:
        return int(raw)
    except ValueError:
        return raw


def _set_nested(d: dict[str, Any], path: str, value: Any) -> None:
    parts = path.split(".")
    cur = d
    for p in parts[:-1]:
        cur = cur.setdefault(p, {})
    cur[parts[-1]] = value


class ConfigManager:
    """Loads and validates configuration."""

    def __init__(self, config_file: str | Path | None = None, setup_logs: bool = True):
        """Initialize configuration manager.

        Args:
            config_file: Path to TOML config file. If None, searches for
                tormeta.toml in the standard locations.
            setup_logs: Apply the observability section to logging.

        Raises:
            ConfigurationError: If the file cannot be parsed or a value is invalid.

        """
        self.config_file = self._find_config_file(config_file)
        self.config = self._load_config()
        if setup_logs:
            self._setup_logging()

    def _find_config_file(self, config_file: str | Path | None) -> Path | None:
        """Find configuration file in standard locations."""
        if config_file:
            path = Path(config_file)
            if not path.exists():
                msg = f"Config file not found: {path}"
                raise ConfigurationError(msg)
            return path

        search_paths = [
            Path.cwd() / CONFIG_FILENAME,
            Path.home() / ".config" / "tormeta" / CONFIG_FILENAME,
            Path.home() / f".{CONFIG_FILENAME}",
        ]
        for path in search_paths:
            if path.exists():
                return path
        return None

    def _load_config(self) -> Config:
        """Load configuration from file and environment."""
        config_data: dict[str, Any] = {}

        if self.config_file is not None:
            try:
                with open(self.config_file, encoding="utf-8") as f:
                    config_data.update(toml.load(f))
            except (OSError, toml.TomlDecodeError) as e:
                msg = f"Failed to load config file {self.config_file}: {e}"
                raise ConfigurationError(msg) from e
            logger.debug("Loaded config file %s", self.config_file)

        config_data = self._merge_config(config_data, self._get_env_config())

        try:
            return Config.model_validate(config_data)
        except PydanticValidationError as e:
            msg = f"Invalid configuration: {e}"
            raise ConfigurationError(msg) from e

    def _get_env_config(self) -> dict[str, Any]:
        """Get configuration from environment variables."""
        env_config: dict[str, Any] = {}
        for env_name, cfg_path in ENV_MAPPINGS.items():
            raw = os.getenv(env_name)
            if raw is None:
                continue
            _set_nested(env_config, cfg_path, _parse_env_value(raw))
        return env_config

    def _merge_config(
        self,
        base: dict[str, Any],
        override: dict[str, Any],
    ) -> dict[str, Any]:
        """Merge configuration dictionaries recursively."""
        result = base.copy()
        for key, value in override.items():
            if (
                key in result
                and isinstance(result[key], dict)
                and isinstance(value, dict)
            ):
                result[key] = self._merge_config(result[key], value)
            else:
                result[key] = value
        return result

    def _setup_logging(self) -> None:
        setup_logging(self.config.observability)

    def export(self) -> str:
        """Export current configuration as TOML."""
        data = self.config.model_dump(mode="json", exclude_none=True)
        return toml.dumps(data)


def get_config() -> Config:
    """Get the global configuration instance."""
    global _config_manager
    if _config_manager is None:
        _config_manager = ConfigManager()
    return _config_manager.config


def init_config(config_file: str | Path | None = None) -> ConfigManager:
    """Initialize the global configuration manager."""
    global _config_manager
    _config_manager = ConfigManager(config_file)
    return _config_manager


def set_config(new_config: Config) -> None:
    """Replace the global configuration at runtime and reconfigure logging."""
    global _config_manager
    if _config_manager is None:
        _config_manager = ConfigManager(setup_logs=False)
    _config_manager.config = new_config
    _config_manager._setup_logging()  # noqa: SLF001


def reset_config() -> None:
    """Forget the global configuration; the next access reloads it."""
    global _config_manager
    _config_manager = None


def get_observability_config() -> ObservabilityConfig:
    """Get observability configuration."""
    return get_config().observability
