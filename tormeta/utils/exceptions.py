"""Exception hierarchy for tormeta.

Provides a single rooted hierarchy so callers can catch everything the
package raises with ``TormetaError`` or narrow down to decode and schema
failures.
"""

from __future__ import annotations

from typing import Any


class TormetaError(Exception):
    """Base exception for all tormeta errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        """Initialize tormeta error."""
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        """Return string representation of the error."""
        if self.details:
            return f"{self.message} (Details: {self.details})"
        return self.message


class ValidationError(TormetaError):
    """Data validation errors."""


class ConfigurationError(ValidationError):
    """Configuration validation errors."""


class BencodeError(ValidationError):
    """Bencode encoding/decoding errors."""


class BencodeEncodeError(BencodeError):
    """Object cannot be represented as a bencode value."""


class DecodeError(BencodeError):
    """Malformed bencode input.

    ``offset`` is the byte position at which the violation was detected.
    """

    def __init__(
        self,
        message: str,
        offset: int,
        details: dict[str, Any] | None = None,
    ):
        """Initialize decode error at ``offset``."""
        merged = {"offset": offset}
        if details:
            merged.update(details)
        super().__init__(message, merged)
        self.offset = offset


class UnexpectedTokenError(DecodeError):
    """A byte that cannot start or continue the current value."""


class TruncatedInputError(DecodeError):
    """Input ended in the middle of a value."""


class TruncatedStringError(DecodeError):
    """Byte string declares more bytes than remain."""


class UnterminatedListError(DecodeError):
    """List is missing its closing ``e``."""


class UnterminatedDictionaryError(DecodeError):
    """Dictionary is missing its closing ``e``."""


class NonStringKeyError(DecodeError):
    """Dictionary key is not a byte string."""


class TooDeeplyNestedError(DecodeError):
    """Container nesting exceeds the configured maximum depth."""


class TrailingDataError(DecodeError):
    """Bytes follow a complete value in strict mode."""


class TorrentError(ValidationError):
    """Torrent descriptor errors."""


class SchemaError(TorrentError):
    """A descriptor field is absent or has the wrong type.

    ``field`` is the dotted path of the offending field, e.g. ``info.files``.
    """

    def __init__(self, message: str, field: str):
        """Initialize schema error for ``field``."""
        super().__init__(message, {"field": field})
        self.field = field


class MissingFieldError(SchemaError):
    """Required descriptor field is absent."""


class WrongTypeError(SchemaError):
    """Descriptor field holds a value of the wrong type."""


class DiskError(TormetaError):
    """Disk I/O related errors."""


class FileSystemError(DiskError):
    """File system operation errors."""
