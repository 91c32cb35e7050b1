"""Torrent descriptor view over a decoded bencode tree.

The descriptor owns the decoded root dictionary and the bytes it came from.
Reads go straight to the tree; mutators edit it in place and mark the
descriptor dirty. ``to_bytes()`` hands back the original bytes untouched
until something has been changed, so an unmodified file is never rewritten
into a different (if equivalent) encoding.

Schema checks happen in the accessors, not at construction: a descriptor
with a broken ``info`` dictionary still answers ``get_announce_list()``.
"""

from __future__ import annotations

import codecs
import hashlib
import logging
from typing import TYPE_CHECKING, TypeVar

from pydantic import ValidationError as PydanticValidationError

from tormeta.core.bencode import (
    DEFAULT_MAX_DEPTH,
    BencodeDict,
    BencodeInt,
    BencodeList,
    BencodeString,
    BencodeValue,
    decode,
    encode,
)
from tormeta.models import FileEntry
from tormeta.utils.exceptions import MissingFieldError, WrongTypeError

if TYPE_CHECKING:
    from collections.abc import Iterable

logger = logging.getLogger(__name__)

PATH_SEPARATOR = "/"

_V = TypeVar("_V", BencodeInt, BencodeString, BencodeList, BencodeDict)


def _as_url_bytes(url: bytes | str) -> bytes:
    if isinstance(url, str):
        return url.encode("utf-8")
    return bytes(url)


class TorrentDescriptor:
    """Accessors and mutators for a torrent metainfo dictionary."""

    def __init__(self, root: BencodeValue, raw: bytes | None = None) -> None:
        """Wrap a decoded root value.

        Args:
            root: Decoded root value; must be a dictionary.
            raw: The bytes ``root`` was decoded from. When omitted the
                descriptor starts dirty and ``to_bytes()`` encodes the tree.

        Raises:
            MissingFieldError: If ``root`` is not a dictionary.

        """
        if not isinstance(root, BencodeDict):
            msg = "Torrent root must be a dictionary"
            raise MissingFieldError(msg, "<root>")
        self._root = root
        self._raw = raw
        self._dirty = raw is None

    @classmethod
    def from_bytes(
        cls,
        data: bytes,
        *,
        strict: bool = False,
        max_depth: int = DEFAULT_MAX_DEPTH,
    ) -> TorrentDescriptor:
        """Decode ``data`` and wrap the result.

        In non-strict mode trailing bytes after the root value are ignored
        and are not part of what ``to_bytes()`` returns.
        """
        root, consumed = decode(data, strict=strict, max_depth=max_depth)
        return cls(root, bytes(data[:consumed]))

    @property
    def root(self) -> BencodeDict:
        """The owned root dictionary."""
        return self._root

    @property
    def is_dirty(self) -> bool:
        """Whether the tree changed since it was last decoded or encoded."""
        return self._dirty

    # ------------------------------------------------------------------
    # Field helpers
    # ------------------------------------------------------------------

    def _require(self, container: BencodeDict, key: bytes, path: str) -> BencodeValue:
        value = container.get(key)
        if value is None:
            msg = f"Missing required field: {path}"
            raise MissingFieldError(msg, path)
        return value

    def _expect(self, value: BencodeValue, kind: type[_V], path: str) -> _V:
        if not isinstance(value, kind):
            msg = (
                f"Field {path} must be {kind.__name__}, "
                f"got {type(value).__name__}"
            )
            raise WrongTypeError(msg, path)
        return value

    def _info(self) -> BencodeDict:
        return self._expect(self._require(self._root, b"info", "info"), BencodeDict, "info")

    def _text_encoding(self) -> str:
        declared = self._root.get(b"encoding")
        if isinstance(declared, BencodeString):
            name = declared.value.decode("ascii", errors="ignore")
            try:
                return codecs.lookup(name).name
            except LookupError:
                logger.debug("Unknown torrent encoding %r, using utf-8", name)
        return "utf-8"

    def _text(self, value: bytes) -> str:
        return value.decode(self._text_encoding(), errors="replace")

    # ------------------------------------------------------------------
    # Announce URLs
    # ------------------------------------------------------------------

    def _announce(self) -> BencodeList:
        announce = self._expect(
            self._require(self._root, b"announce", "announce"), BencodeList, "announce"
        )
        for index, item in enumerate(announce.items):
            self._expect(item, BencodeString, f"announce[{index}]")
        return announce

    def get_announce_list(self) -> list[bytes]:
        """Return the announce URLs in stored order.

        Raises:
            MissingFieldError: If there is no ``announce`` field.
            WrongTypeError: If it is not a list of byte strings.

        """
        return [item.value for item in self._announce().items]

    def append_announce_urls(self, urls: Iterable[bytes | str]) -> int:
        """Append URLs that are not already present.

        Existing entries keep their order; new ones are appended in input
        order. Comparison is byte-exact. Creates the ``announce`` list when
        the field is absent.

        Returns:
            Number of URLs appended.

        """
        # The tree is only touched once every URL has converted
        candidates = [_as_url_bytes(url) for url in urls]
        announce = self._announce() if b"announce" in self._root else BencodeList()
        present = {item.value for item in announce.items}
        appended = 0
        for candidate in candidates:
            if candidate in present:
                continue
            announce.items.append(BencodeString(candidate))
            present.add(candidate)
            appended += 1

        if appended:
            self._root.items[b"announce"] = announce
            self._dirty = True
            logger.debug("Appended %d announce URL(s)", appended)
        return appended

    def set_announce_list(self, urls: Iterable[bytes | str]) -> None:
        """Replace the announce list with ``urls`` exactly as given."""
        self._root.items[b"announce"] = BencodeList(
            [BencodeString(_as_url_bytes(url)) for url in urls]
        )
        self._dirty = True
        logger.debug("Announce list replaced")

    # ------------------------------------------------------------------
    # Info dictionary
    # ------------------------------------------------------------------

    @property
    def name(self) -> str:
        """Suggested name of the file or top-level directory."""
        name = self._expect(
            self._require(self._info(), b"name", "info.name"), BencodeString, "info.name"
        )
        return self._text(name.value)

    def get_files(self) -> list[FileEntry]:
        """Return the files described by the torrent.

        A single-file torrent yields one entry named after ``info.name``. A
        multi-file torrent yields one entry per ``info.files`` element, path
        segments joined with ``/``.

        Raises:
            MissingFieldError: If ``info`` has neither ``length`` nor
                ``files`` or an entry lacks a field.
            WrongTypeError: If a field has the wrong type.

        """
        info = self._info()
        if b"length" in info:
            length = self._expect(info.get(b"length"), BencodeInt, "info.length")
            return [self._file_entry(self.name, length.value, "info.length")]

        if b"files" not in info:
            msg = "Torrent info has neither 'length' nor 'files'"
            raise MissingFieldError(msg, "info.files")

        files = self._expect(info.get(b"files"), BencodeList, "info.files")
        entries = []
        for index, item in enumerate(files.items):
            base = f"info.files[{index}]"
            record = self._expect(item, BencodeDict, base)
            length = self._expect(
                self._require(record, b"length", f"{base}.length"),
                BencodeInt,
                f"{base}.length",
            )
            segments = self._expect(
                self._require(record, b"path", f"{base}.path"),
                BencodeList,
                f"{base}.path",
            )
            parts = []
            for seg_index, segment in enumerate(segments.items):
                segment = self._expect(segment, BencodeString, f"{base}.path[{seg_index}]")
                parts.append(self._text(segment.value))
            entries.append(
                self._file_entry(PATH_SEPARATOR.join(parts), length.value, f"{base}.length")
            )
        return entries

    @staticmethod
    def _file_entry(path: str, size: int, field: str) -> FileEntry:
        try:
            return FileEntry(path=path, size=size)
        except PydanticValidationError as e:
            msg = f"Invalid file length {size} in {field}"
            raise WrongTypeError(msg, field) from e

    def total_size(self) -> int:
        """Sum of all file sizes."""
        return sum(entry.size for entry in self.get_files())

    def info_hash(self) -> bytes:
        """SHA-1 digest of the canonical encoding of the ``info`` dictionary."""
        return hashlib.sha1(encode(self._info())).digest()  # nosec B324 - SHA-1 required by BitTorrent protocol (BEP 3)

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------

    def to_bytes(self) -> bytes:
        """Return the encoded descriptor.

        Unmodified descriptors return the bytes they were decoded from.
        Otherwise the tree is re-encoded and the result becomes the new
        baseline.
        """
        if self._dirty or self._raw is None:
            self._raw = encode(self._root)
            self._dirty = False
            logger.debug("Re-encoded descriptor (%d bytes)", len(self._raw))
        return self._raw

    def __repr__(self) -> str:
        return f"TorrentDescriptor(dirty={self._dirty}, keys={sorted(self._root.items)!r})"
