"""Shared utilities and infrastructure."""

from __future__ import annotations

from tormeta.utils.exceptions import (
    BencodeError,
    ConfigurationError,
    DecodeError,
    DiskError,
    SchemaError,
    TorrentError,
    TormetaError,
    ValidationError,
)
from tormeta.utils.logging_config import get_logger, setup_logging

__all__ = [
    # Exceptions
    "BencodeError",
    "ConfigurationError",
    "DecodeError",
    "DiskError",
    "SchemaError",
    "TorrentError",
    "TormetaError",
    "ValidationError",
    # Logging
    "get_logger",
    "setup_logging",
]
