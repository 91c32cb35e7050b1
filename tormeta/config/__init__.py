"""Configuration management."""

from __future__ import annotations

from tormeta.config.config import (
    ConfigManager,
    get_config,
    get_observability_config,
    init_config,
    reset_config,
    set_config,
)

__all__ = [
    "ConfigManager",
    "get_config",
    "get_observability_config",
    "init_config",
    "reset_config",
    "set_config",
]
