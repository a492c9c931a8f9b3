"""Per-file tailing state: cursors, cached metadata, session and channel flags.

Nothing here is persisted. A restarted process starts with an empty table and
re-reads every journal from its start the first time the file is seen; rotated
journals keep that cost bounded. Plug a different ``CursorStore`` into
``FileTable`` to change that.
"""

import logging
import os
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol

logger = logging.getLogger(__name__)


def normalize(path: str | os.PathLike) -> Path:
    """Key used for every per-file lookup."""
    return Path(os.path.abspath(path))


class CursorStore(Protocol):
    """Byte offsets through which each file has already been emitted."""

    def get(self, path: Path) -> int: ...

    def set(self, path: Path, offset: int) -> None: ...

    def discard(self, path: Path) -> None: ...


class MemoryCursorStore:
    """Process-lifetime cursor store backed by a dict."""

    def __init__(self) -> None:
        self._offsets: dict[Path, int] = {}

    def get(self, path: Path) -> int:
        return self._offsets.get(path, 0)

    def set(self, path: Path, offset: int) -> None:
        self._offsets[path] = offset

    def discard(self, path: Path) -> None:
        self._offsets.pop(path, None)


@dataclass
class TrackedFile:
    """Everything remembered about one journal file."""

    path: Path
    stat: os.stat_result | None = None
    session: str | None = None
    excluded: bool = False
    lock: threading.Lock = field(default_factory=threading.Lock, repr=False, compare=False)

    @property
    def created(self) -> float:
        stat = self.stat or self.refresh()
        if stat is None:
            return 0.0
        # st_birthtime only exists on macOS/BSD and Windows; elsewhere this is
        # st_ctime, the last inode change time, not the creation time
        return getattr(stat, "st_birthtime", stat.st_ctime)

    @property
    def modified(self) -> float:
        stat = self.stat or self.refresh()
        return stat.st_mtime if stat is not None else 0.0

    def refresh(self) -> os.stat_result | None:
        """Reload cached metadata through a fresh shared-read handle.

        Opening the file, rather than calling ``os.stat`` on the path, makes
        Windows flush the size and write time a running writer has not yet
        published to the directory entry.
        """
        try:
            with self.lock:
                with open(self.path, "rb") as handle:
                    self.stat = os.fstat(handle.fileno())
        except FileNotFoundError:
            return None
        return self.stat


class FileTable:
    """Thread-safe table of tracked files keyed by absolute path."""

    def __init__(self, cursors: CursorStore | None = None):
        self.cursors: CursorStore = cursors if cursors is not None else MemoryCursorStore()
        self._entries: dict[Path, TrackedFile] = {}
        self._lock = threading.Lock()

    def get(self, path: str | os.PathLike) -> TrackedFile:
        """Return the entry for ``path``, creating it on first sight."""
        key = normalize(path)
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                entry = TrackedFile(path=key)
                self._entries[key] = entry
            return entry

    def __contains__(self, path: object) -> bool:
        if not isinstance(path, (str, os.PathLike)):
            return False
        with self._lock:
            return normalize(path) in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def evict_missing(self) -> list[Path]:
        """Forget files that no longer exist on disk, cursors included."""
        with self._lock:
            gone = [key for key in self._entries if not key.exists()]
            for key in gone:
                entry = self._entries.pop(key)
                with entry.lock:
                    self.cursors.discard(key)
        if gone:
            logger.debug("Evicted %d vanished journal(s): %s", len(gone), [p.name for p in gone])
        return gone
