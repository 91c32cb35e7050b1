"""Tests for configuration loading."""

from __future__ import annotations

import logging

import pytest

from tormeta.config import (
    ConfigManager,
    get_config,
    get_observability_config,
    set_config,
)
from tormeta.core.bencode import DEFAULT_MAX_DEPTH
from tormeta.models import CodecConfig, Config, LogLevel
from tormeta.utils.exceptions import ConfigurationError

pytestmark = [pytest.mark.unit, pytest.mark.config]


def test_defaults():
    manager = ConfigManager(setup_logs=False)

    assert manager.config_file is None
    assert manager.config.codec.max_depth == 64
    assert manager.config.codec.strict is False
    assert manager.config.observability.log_level == LogLevel.WARNING
    assert manager.config.observability.log_file is None


def test_default_depth_matches_codec():
    assert CodecConfig().max_depth == DEFAULT_MAX_DEPTH


def test_explicit_toml_file(tmp_path):
    path = tmp_path / "custom.toml"
    path.write_text(
        '[codec]\nmax_depth = 12\nstrict = true\n\n[observability]\nlog_level = "info"\n',
        encoding="utf-8",
    )

    manager = ConfigManager(path, setup_logs=False)

    assert manager.config_file == path
    assert manager.config.codec.max_depth == 12
    assert manager.config.codec.strict is True
    assert manager.config.observability.log_level == LogLevel.INFO


def test_config_found_in_cwd(tmp_path):
    (tmp_path / "tormeta.toml").write_text("[codec]\nmax_depth = 20\n", encoding="utf-8")

    manager = ConfigManager(setup_logs=False)

    assert manager.config.codec.max_depth == 20


def test_config_found_in_home(tmp_path):
    config_dir = tmp_path / "home" / ".config" / "tormeta"
    config_dir.mkdir(parents=True)
    (config_dir / "tormeta.toml").write_text("[codec]\nstrict = true\n", encoding="utf-8")

    manager = ConfigManager(setup_logs=False)

    assert manager.config.codec.strict is True


def test_env_overrides_file(tmp_path, monkeypatch):
    (tmp_path / "tormeta.toml").write_text(
        "[codec]\nmax_depth = 20\nstrict = false\n", encoding="utf-8"
    )
    monkeypatch.setenv("TORMETA_MAX_DEPTH", "30")
    monkeypatch.setenv("TORMETA_STRICT_DECODE", "yes")
    monkeypatch.setenv("TORMETA_LOG_LEVEL", "debug")

    manager = ConfigManager(setup_logs=False)

    assert manager.config.codec.max_depth == 30
    assert manager.config.codec.strict is True
    assert manager.config.observability.log_level == LogLevel.DEBUG


def test_invalid_value(monkeypatch):
    monkeypatch.setenv("TORMETA_MAX_DEPTH", "100000")
    with pytest.raises(ConfigurationError, match="Invalid configuration"):
        ConfigManager(setup_logs=False)


def test_malformed_toml(tmp_path):
    path = tmp_path / "broken.toml"
    path.write_text("[codec\nmax_depth = ", encoding="utf-8")
    with pytest.raises(ConfigurationError, match="Failed to load config file"):
        ConfigManager(path, setup_logs=False)


def test_missing_explicit_file(tmp_path):
    with pytest.raises(ConfigurationError, match="Config file not found"):
        ConfigManager(tmp_path / "absent.toml", setup_logs=False)


def test_export_round_trip(tmp_path, monkeypatch):
    monkeypatch.setenv("TORMETA_MAX_DEPTH", "7")
    exported = ConfigManager(setup_logs=False).export()
    monkeypatch.delenv("TORMETA_MAX_DEPTH")

    path = tmp_path / "exported.toml"
    path.write_text(exported, encoding="utf-8")

    assert ConfigManager(path, setup_logs=False).config.codec.max_depth == 7


def test_global_helpers():
    assert get_config().codec.max_depth == 64

    set_config(Config(codec=CodecConfig(max_depth=10)))

    assert get_config().codec.max_depth == 10
    assert get_observability_config().log_level == LogLevel.WARNING


def test_logging_level_applied(monkeypatch):
    monkeypatch.setenv("TORMETA_LOG_LEVEL", "DEBUG")
    ConfigManager()
    assert logging.getLogger("tormeta").level == logging.DEBUG
