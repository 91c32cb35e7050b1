"""Pytest configuration and shared fixtures for tormeta tests."""

from __future__ import annotations

import logging

import pytest
from hypothesis import HealthCheck, settings

from tormeta.config.config import reset_config
from tormeta.core.bencode import encode, from_native

# Autouse fixtures below only reset global state between tests
settings.register_profile(
    "tormeta",
    suppress_health_check=[HealthCheck.function_scoped_fixture],
    deadline=None,
)
settings.load_profile("tormeta")


def pytest_configure(config):
    """Register all project markers to avoid warnings when ini isn't loaded."""
    markers = [
        ("unit", "marks tests as unit tests"),
        ("core", "marks tests as core functionality tests"),
        ("cli", "marks tests as CLI tests"),
        ("config", "marks tests as configuration tests"),
        ("storage", "marks tests as storage tests"),
        ("property", "marks tests as property-based tests"),
    ]
    for name, desc in markers:
        config.addinivalue_line("markers", f"{name}: {desc}")


@pytest.fixture(autouse=True)
def _isolate_config_env(monkeypatch, tmp_path):
    """Keep user config files and TORMETA_* variables out of tests."""
    for name in (
        "TORMETA_MAX_DEPTH",
        "TORMETA_STRICT_DECODE",
        "TORMETA_LOG_LEVEL",
        "TORMETA_LOG_FILE",
        "TORMETA_STRUCTURED_LOGGING",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    monkeypatch.chdir(tmp_path)
    reset_config()
    yield
    reset_config()


@pytest.fixture(autouse=True)
def cleanup_logging():
    """Clean up logging handlers after each test to prevent closed file errors."""
    yield
    logger = logging.getLogger("tormeta")
    for handler in logger.handlers[:]:
        handler.close()
        logger.removeHandler(handler)


@pytest.fixture
def single_file_torrent() -> dict:
    """Native structure of a single-file torrent."""
    return {
        b"announce": [
            b"http://tracker.example.com:6969/announce",
            b"udp://tracker.example.org:1337",
        ],
        b"comment": b"Test torrent",
        b"info": {
            b"name": b"test_file.txt",
            b"length": 12345,
            b"piece length": 16384,
            b"pieces": b"x" * 20,
        },
    }


@pytest.fixture
def multi_file_torrent() -> dict:
    """Native structure of a multi-file torrent."""
    return {
        b"announce": [b"http://tracker.example.com:6969/announce"],
        b"info": {
            b"name": b"TestDirectory",
            b"piece length": 32768,
            b"pieces": b"x" * 60,
            b"files": [
                {b"length": 1000, b"path": [b"file1.txt"]},
                {b"length": 2000, b"path": [b"subdir", b"file2.txt"]},
                {b"length": 0, b"path": [b"a", b"b", b"empty.bin"]},
            ],
        },
    }


@pytest.fixture
def torrent_file(tmp_path, single_file_torrent):
    """A single-file torrent written to disk."""
    path = tmp_path / "single.torrent"
    path.write_bytes(encode(from_native(single_file_torrent)))
    return path


@pytest.fixture
def multi_torrent_file(tmp_path, multi_file_torrent):
    """A multi-file torrent written to disk."""
    path = tmp_path / "multi.torrent"
    path.write_bytes(encode(from_native(multi_file_torrent)))
    return path
