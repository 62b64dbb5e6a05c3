"""Source file access for line annotation.

Source files are read as raw bytes because coverage offsets are byte
offsets. Loaded files are cached by path + modification time so a report
touching many functions of one file reads it once.
"""

from __future__ import annotations

import bisect
import logging
from dataclasses import dataclass, field
from pathlib import Path

logger = logging.getLogger(__name__)


class SourceReadError(OSError):
    """Raised when a function's source file cannot be statted or read."""


@dataclass(slots=True)
class SourceFile:
    """Contents of a source file plus its line-offset table."""

    path: str
    content: bytes
    line_starts: list[int] = field(default_factory=list)

    def __post_init__(self) -> None:
        if not self.line_starts:
            self.line_starts = line_offsets(self.content)

    def line_of(self, offset: int) -> int:
        """Return the 1-based line number containing byte *offset*."""
        return bisect.bisect_right(self.line_starts, offset)


def line_offsets(content: bytes) -> list[int]:
    """Return the byte offset at which each line of *content* starts."""
    starts = [0]
    pos = content.find(b"\n")
    while pos != -1:
        starts.append(pos + 1)
        pos = content.find(b"\n", pos + 1)
    return starts


class SourceCache:
    """LRU cache of :class:`SourceFile` keyed by path + modification time.

    A cached entry is dropped as soon as the file's mtime changes, so a
    file edited between two reports is re-read.

    Args:
        max_size: Maximum number of files kept before LRU eviction.
    """

    def __init__(self, max_size: int = 256) -> None:
        self._max_size = max_size
        self._store: dict[str, tuple[float, SourceFile]] = {}

    def load(self, file_path: str | Path) -> SourceFile:
        """Return the source file at *file_path*, reading it if needed.

        Raises:
            SourceReadError: If the file cannot be statted or read.
        """
        key = str(file_path)
        path = Path(key)
        try:
            mtime = path.stat().st_mtime
        except OSError as e:
            self._store.pop(key, None)
            raise SourceReadError(f"stat source file {key}: {e}") from e

        entry = self._store.pop(key, None)
        if entry is not None and entry[0] == mtime:
            # Re-insert to mark as most recently used
            self._store[key] = entry
            return entry[1]

        try:
            content = path.read_bytes()
        except OSError as e:
            raise SourceReadError(f"read source file {key}: {e}") from e

        source = SourceFile(path=key, content=content)
        if len(self._store) >= self._max_size:
            oldest = next(iter(self._store))
            del self._store[oldest]
        self._store[key] = (mtime, source)
        logger.debug("Loaded source %s (%d lines)", key, len(source.line_starts))
        return source

    def invalidate(self, file_path: str | Path) -> None:
        """Remove a specific file."""
        self._store.pop(str(file_path), None)

    def clear(self) -> None:
        """Remove all entries."""
        self._store.clear()

    @property
    def size(self) -> int:
        """Number of files currently held."""
        return len(self._store)
