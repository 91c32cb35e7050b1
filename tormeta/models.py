"""Pydantic models for tormeta.

Provides validated data models for the file listing and configuration.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_MAX_DEPTH = 64


class LogLevel(str, Enum):
    """Logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class FileEntry(BaseModel):
    """A file described by a torrent: relative path and size in bytes."""

    model_config = ConfigDict(frozen=True)

    path: str = Field(..., description="Relative file path, segments joined by '/'")
    size: int = Field(..., ge=0, description="File length in bytes")


class CodecConfig(BaseModel):
    """Bencode decoding configuration."""

    max_depth: int = Field(
        default=DEFAULT_MAX_DEPTH,
        ge=1,
        le=256,
        description="Maximum container nesting accepted when decoding",
    )
    strict: bool = Field(
        default=False,
        description="Reject trailing bytes after the top-level value",
    )


class ObservabilityConfig(BaseModel):
    """Observability configuration."""

    log_level: LogLevel = Field(default=LogLevel.WARNING, description="Log level")
    log_file: str | None = Field(None, description="Log file path")
    structured_logging: bool = Field(
        default=False,
        description="Write JSON log records to the log file",
    )
    log_format: str = Field(
        default="%(asctime)s %(levelname)s %(name)s: %(message)s",
        description="Log format string for plain file output",
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def _normalise_level(cls, value: object) -> object:
        if isinstance(value, str):
            return value.upper()
        return value


class Config(BaseModel):
    """Root configuration."""

    codec: CodecConfig = Field(default_factory=CodecConfig)
    observability: ObservabilityConfig = Field(default_factory=ObservabilityConfig)
