"""Reading and writing torrent files on disk."""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path

from tormeta.core.bencode import DEFAULT_MAX_DEPTH
from tormeta.core.descriptor import TorrentDescriptor
from tormeta.utils.exceptions import FileSystemError

logger = logging.getLogger(__name__)


def read_torrent_bytes(path: str | Path) -> bytes:
    """Read the full contents of a torrent file."""
    path = Path(path)
    if not path.exists():
        msg = f"Torrent file not found: {path}"
        raise FileSystemError(msg, {"path": str(path)})
    try:
        with open(path, "rb") as f:
            return f.read()
    except OSError as e:
        msg = f"Failed to read torrent file {path}: {e}"
        raise FileSystemError(msg, {"path": str(path)}) from e


def write_torrent_bytes(path: str | Path, data: bytes) -> None:
    """Write ``data`` to ``path``, replacing it atomically."""
    path = Path(path)
    tmp_name: str | None = None
    try:
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{path.name}.", suffix=".tmp", dir=path.parent
        )
        with os.fdopen(fd, "wb") as f:
            f.write(data)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_name, path)
    except OSError as e:
        if tmp_name is not None:
            Path(tmp_name).unlink(missing_ok=True)
        msg = f"Failed to write torrent file {path}: {e}"
        raise FileSystemError(msg, {"path": str(path)}) from e
    logger.debug("Wrote %d bytes to %s", len(data), path)


def load_descriptor(
    path: str | Path,
    *,
    strict: bool = False,
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> TorrentDescriptor:
    """Read and decode a torrent file."""
    return TorrentDescriptor.from_bytes(
        read_torrent_bytes(path), strict=strict, max_depth=max_depth
    )


def save_descriptor(descriptor: TorrentDescriptor, path: str | Path) -> None:
    """Write a descriptor's bytes to ``path``."""
    write_torrent_bytes(path, descriptor.to_bytes())
