"""Core torrent metadata components.

This module contains:
- Bencoding (encoding/decoding)
- The torrent descriptor view
"""

from __future__ import annotations

from tormeta.core.bencode import (
    DEFAULT_MAX_DEPTH,
    BencodeDecoder,
    BencodeDict,
    BencodeEncoder,
    BencodeInt,
    BencodeList,
    BencodeString,
    BencodeValue,
    decode,
    encode,
    from_native,
    to_native,
)
from tormeta.core.descriptor import TorrentDescriptor

__all__ = [
    # Bencoding
    "DEFAULT_MAX_DEPTH",
    "BencodeDecoder",
    "BencodeDict",
    "BencodeEncoder",
    "BencodeInt",
    "BencodeList",
    "BencodeString",
    "BencodeValue",
    # Descriptor
    "TorrentDescriptor",
    "decode",
    "encode",
    "from_native",
    "to_native",
]
