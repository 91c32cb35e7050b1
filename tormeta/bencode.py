"""Bencoding module.

This module provides a convenient interface to the core bencode functionality
together with the decode error types callers usually want to catch.
"""

from __future__ import annotations

from tormeta.core.bencode import (
    BencodeDecoder,
    BencodeDict,
    BencodeEncoder,
    BencodeInt,
    BencodeList,
    BencodeString,
    decode,
    encode,
    from_native,
    to_native,
)
from tormeta.utils.exceptions import BencodeEncodeError, DecodeError

__all__ = [
    "BencodeDecoder",
    "BencodeDict",
    "BencodeEncodeError",
    "BencodeEncoder",
    "BencodeInt",
    "BencodeList",
    "BencodeString",
    "DecodeError",
    "decode",
    "encode",
    "from_native",
    "to_native",
]
