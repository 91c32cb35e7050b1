"""tormeta - bencode codec and torrent metainfo editing."""

from __future__ import annotations

__version__ = "0.1.0"

from tormeta.core.bencode import decode, encode
from tormeta.core.descriptor import TorrentDescriptor
from tormeta.models import FileEntry

__all__ = [
    "FileEntry",
    "TorrentDescriptor",
    "__version__",
    "decode",
    "encode",
]
