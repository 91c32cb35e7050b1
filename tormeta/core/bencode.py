"""Bencode encoding and decoding.

Values are represented by four tagged dataclasses mirroring the wire format:
``BencodeInt``, ``BencodeString``, ``BencodeList`` and ``BencodeDict``.
Encoding always produces the canonical form (dictionary keys sorted by raw
bytes). Decoding is a single recursive-descent pass over an immutable byte
sequence with an explicit cursor.

Decoding choices worth knowing about:

- Duplicate dictionary keys: the last occurrence wins.
- Integers with leading zeros (``i03e``) and string lengths with leading
  zeros (``03:abc``) are accepted; ``encode`` never produces them.
- Negative zero (``i-0e``) is rejected.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Union

from tormeta.models import DEFAULT_MAX_DEPTH
from tormeta.utils.exceptions import (
    BencodeEncodeError,
    NonStringKeyError,
    TooDeeplyNestedError,
    TrailingDataError,
    TruncatedInputError,
    TruncatedStringError,
    UnexpectedTokenError,
    UnterminatedDictionaryError,
    UnterminatedListError,
)

logger = logging.getLogger(__name__)

_INT = ord("i")
_LIST = ord("l")
_DICT = ord("d")
_END = ord("e")
_COLON = ord(":")
_MINUS = ord("-")
_ZERO = ord("0")
_NINE = ord("9")


def _is_digit(byte: int) -> bool:
    return _ZERO <= byte <= _NINE


@dataclass(frozen=True)
class BencodeInt:
    """Bencoded integer."""

    value: int

    def __post_init__(self) -> None:
        """Reject non-integers, including ``bool``."""
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            msg = f"BencodeInt requires an int, got {type(self.value).__name__}"
            raise TypeError(msg)


@dataclass(frozen=True)
class BencodeString:
    """Bencoded byte string. Not required to be valid text."""

    value: bytes

    def __post_init__(self) -> None:
        """Normalise bytes-like input to ``bytes``."""
        if isinstance(self.value, (bytearray, memoryview)):
            object.__setattr__(self, "value", bytes(self.value))
        elif not isinstance(self.value, bytes):
            msg = f"BencodeString requires bytes, got {type(self.value).__name__}"
            raise TypeError(msg)


@dataclass
class BencodeList:
    """Bencoded list. Item order is significant."""

    items: list[BencodeValue] = field(default_factory=list)


@dataclass
class BencodeDict:
    """Bencoded dictionary keyed by raw bytes.

    Insertion order carries no meaning; encoding sorts the keys.
    """

    items: dict[bytes, BencodeValue] = field(default_factory=dict)

    def get(self, key: bytes, default: Any = None) -> Any:
        """Return the value stored under ``key`` or ``default``."""
        return self.items.get(key, default)

    def __contains__(self, key: object) -> bool:
        return key in self.items


BencodeValue = Union[BencodeInt, BencodeString, BencodeList, BencodeDict]


class BencodeEncoder:
    """Encodes value trees into canonical bencode bytes."""

    def encode(self, value: BencodeValue) -> bytes:
        """Encode ``value`` and return the bytes."""
        chunks: list[bytes] = []
        self._encode_value(value, chunks)
        return b"".join(chunks)

    def _encode_value(self, value: Any, out: list[bytes]) -> None:
        if isinstance(value, BencodeString):
            self._encode_bytes(value.value, out)
        elif isinstance(value, BencodeInt):
            out.append(b"i%de" % value.value)
        elif isinstance(value, BencodeList):
            out.append(b"l")
            for item in value.items:
                self._encode_value(item, out)
            out.append(b"e")
        elif isinstance(value, BencodeDict):
            for key in value.items:
                if not isinstance(key, bytes):
                    msg = f"Dictionary keys must be bytes, got {type(key).__name__}"
                    raise BencodeEncodeError(msg)
            out.append(b"d")
            for key in sorted(value.items):
                self._encode_bytes(key, out)
                self._encode_value(value.items[key], out)
            out.append(b"e")
        else:
            msg = f"Cannot bencode object of type {type(value).__name__}"
            raise BencodeEncodeError(msg)

    @staticmethod
    def _encode_bytes(data: bytes, out: list[bytes]) -> None:
        out.append(b"%d:" % len(data))
        out.append(data)


class BencodeDecoder:
    """Recursive-descent decoder over an in-memory byte sequence.

    ``pos`` is the cursor; after ``decode()`` it points just past the value
    that was read, so the decoder can be reused to walk concatenated values.
    """

    def __init__(
        self,
        data: bytes,
        pos: int = 0,
        max_depth: int = DEFAULT_MAX_DEPTH,
    ) -> None:
        """Initialize the decoder over ``data`` starting at ``pos``."""
        self.data = bytes(data)
        self.pos = pos
        self.max_depth = max_depth

    def decode(self) -> BencodeValue:
        """Decode one value starting at the cursor."""
        return self._decode_value(0)

    def _peek(self) -> int:
        if self.pos >= len(self.data):
            msg = "Unexpected end of input"
            raise TruncatedInputError(msg, self.pos)
        return self.data[self.pos]

    def _decode_value(self, depth: int) -> BencodeValue:
        token = self._peek()
        if token == _INT:
            return self._decode_int()
        if _is_digit(token):
            return self._decode_string()
        if token == _LIST:
            return self._decode_list(depth + 1)
        if token == _DICT:
            return self._decode_dict(depth + 1)
        msg = f"Invalid token {bytes([token])!r}"
        raise UnexpectedTokenError(msg, self.pos)

    def _decode_int(self) -> BencodeInt:
        self.pos += 1  # 'i'
        negative = False
        sign_pos = self.pos
        if self._peek() == _MINUS:
            negative = True
            self.pos += 1

        start = self.pos
        while _is_digit(self._peek()):
            self.pos += 1
        if self.pos == start:
            msg = f"Expected digit in integer, got {bytes([self.data[self.pos]])!r}"
            raise UnexpectedTokenError(msg, self.pos)
        if self._peek() != _END:
            msg = f"Expected 'e' to terminate integer, got {bytes([self.data[self.pos]])!r}"
            raise UnexpectedTokenError(msg, self.pos)

        try:
            value = int(self.data[start : self.pos].lstrip(b"0") or b"0")
        except ValueError as e:
            msg = f"Integer has too many digits ({self.pos - start})"
            raise UnexpectedTokenError(msg, start) from e
        if negative and value == 0:
            msg = "Negative zero is not a valid integer"
            raise UnexpectedTokenError(msg, sign_pos)
        self.pos += 1  # 'e'
        return BencodeInt(-value if negative else value)

    def _decode_string(self) -> BencodeString:
        start = self.pos
        while _is_digit(self._peek()):
            self.pos += 1
        if self.data[self.pos] != _COLON:
            msg = f"Expected ':' after string length, got {bytes([self.data[self.pos]])!r}"
            raise UnexpectedTokenError(msg, self.pos)
        digits = self.data[start : self.pos].lstrip(b"0")
        # A length wider than the input size can never be satisfied
        if len(digits) > len(str(len(self.data))):
            msg = f"String length has {len(digits)} digits but input is {len(self.data)} bytes"
            raise TruncatedStringError(msg, start)
        length = int(digits or b"0")
        self.pos += 1  # ':'

        end = self.pos + length
        if end > len(self.data):
            msg = (
                f"String declares {length} bytes but only "
                f"{len(self.data) - self.pos} remain"
            )
            raise TruncatedStringError(msg, start)
        value = self.data[self.pos : end]
        self.pos = end
        return BencodeString(value)

    def _check_depth(self, depth: int) -> None:
        if depth > self.max_depth:
            msg = f"Nesting exceeds maximum depth of {self.max_depth}"
            raise TooDeeplyNestedError(msg, self.pos)

    def _decode_list(self, depth: int) -> BencodeList:
        self._check_depth(depth)
        start = self.pos
        self.pos += 1  # 'l'
        items: list[BencodeValue] = []
        while True:
            if self.pos >= len(self.data):
                msg = "List is not terminated"
                raise UnterminatedListError(msg, start)
            if self.data[self.pos] == _END:
                break
            items.append(self._decode_value(depth))
        self.pos += 1  # 'e'
        return BencodeList(items)

    def _decode_dict(self, depth: int) -> BencodeDict:
        self._check_depth(depth)
        start = self.pos
        self.pos += 1  # 'd'
        items: dict[bytes, BencodeValue] = {}
        while True:
            if self.pos >= len(self.data):
                msg = "Dictionary is not terminated"
                raise UnterminatedDictionaryError(msg, start)
            token = self.data[self.pos]
            if token == _END:
                break
            if not _is_digit(token):
                if token in (_INT, _LIST, _DICT):
                    msg = "Dictionary keys must be byte strings"
                    raise NonStringKeyError(msg, self.pos)
                msg = f"Invalid token {bytes([token])!r} in dictionary key"
                raise UnexpectedTokenError(msg, self.pos)

            key = self._decode_string().value
            if key in items:
                logger.debug("Duplicate dictionary key %r, keeping last value", key)
            items[key] = self._decode_value(depth)
        self.pos += 1  # 'e'
        return BencodeDict(items)


def encode(value: BencodeValue) -> bytes:
    """Encode a value tree into canonical bencode bytes."""
    return BencodeEncoder().encode(value)


def decode(
    data: bytes,
    *,
    strict: bool = False,
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> tuple[BencodeValue, int]:
    """Decode one value from the start of ``data``.

    Returns the value and the number of bytes consumed. With ``strict`` set,
    any bytes after the value raise ``TrailingDataError``; otherwise the
    caller can compare the consumed count with ``len(data)``.
    """
    decoder = BencodeDecoder(data, max_depth=max_depth)
    value = decoder.decode()
    if decoder.pos != len(decoder.data):
        if strict:
            msg = f"{len(decoder.data) - decoder.pos} trailing bytes after value"
            raise TrailingDataError(msg, decoder.pos)
        logger.debug(
            "Ignoring %d trailing bytes after value", len(decoder.data) - decoder.pos
        )
    return value, decoder.pos


def from_native(obj: Any) -> BencodeValue:
    """Build a value tree from plain Python data.

    ``str`` is stored as UTF-8. Dictionary keys may be ``bytes`` or ``str``.
    Values that are already tagged are passed through.
    """
    if isinstance(obj, (BencodeInt, BencodeString, BencodeList, BencodeDict)):
        return obj
    if isinstance(obj, bool):
        msg = "Cannot bencode bool; use int explicitly"
        raise BencodeEncodeError(msg)
    if isinstance(obj, int):
        return BencodeInt(obj)
    if isinstance(obj, (bytes, bytearray, memoryview)):
        return BencodeString(bytes(obj))
    if isinstance(obj, str):
        return BencodeString(obj.encode("utf-8"))
    if isinstance(obj, (list, tuple)):
        return BencodeList([from_native(item) for item in obj])
    if isinstance(obj, dict):
        items: dict[bytes, BencodeValue] = {}
        for key, value in obj.items():
            if isinstance(key, str):
                key = key.encode("utf-8")
            elif not isinstance(key, bytes):
                msg = f"Dictionary keys must be bytes or str, got {type(key).__name__}"
                raise BencodeEncodeError(msg)
            items[key] = from_native(value)
        return BencodeDict(items)
    msg = f"Cannot bencode object of type {type(obj).__name__}"
    raise BencodeEncodeError(msg)


def to_native(value: BencodeValue) -> Any:
    """Convert a value tree into plain ``int``/``bytes``/``list``/``dict``."""
    if isinstance(value, BencodeInt):
        return value.value
    if isinstance(value, BencodeString):
        return value.value
    if isinstance(value, BencodeList):
        return [to_native(item) for item in value.items]
    if isinstance(value, BencodeDict):
        return {key: to_native(item) for key, item in value.items.items()}
    msg = f"Not a bencode value: {type(value).__name__}"
    raise BencodeEncodeError(msg)
