"""Incremental, lock-free reading of journals that are still being written."""

import logging
import os
from typing import Iterator

from journaltail.config import DEFAULT_SESSION
from journaltail.models import ReadResult
from journaltail.tail import channel, session
from journaltail.tail.lines import decode
from journaltail.tail.state import CursorStore, FileTable, TrackedFile, normalize

logger = logging.getLogger(__name__)


class LineStream:
    """Lines appended to one journal since the previous read.

    Nothing is read until iteration starts. The first iteration claims the
    bytes between the stored cursor and the file length at open time; lines
    written after that are left for the next read. If iteration stops early
    the cursor is wound back to the end of the last line handed out, unless a
    newer read already claimed the bytes after it. A stream is single-use:
    iterating it again yields nothing.
    """

    def __init__(self, entry: TrackedFile, cursors: CursorStore):
        self._entry = entry
        self._cursors = cursors
        self._used = False

    def __iter__(self) -> Iterator[str]:
        if self._used:
            return iter(())
        self._used = True
        return self._read()

    def _read(self) -> Iterator[str]:
        entry = self._entry
        path = entry.path
        try:
            # Plain open() never takes an exclusive lock, so the game keeps writing
            handle = open(path, "rb")
        except FileNotFoundError:
            return

        with handle:
            with entry.lock:
                start = self._cursors.get(path)
                end = os.fstat(handle.fileno()).st_size
                if end <= start:
                    return
                self._cursors.set(path, end)

            handle.seek(start)
            offset = start
            try:
                while offset < end:
                    raw = handle.readline(end - offset)
                    if not raw:
                        break
                    line = decode(raw, first=offset == 0)
                    offset += len(raw)
                    if entry.session is None:
                        with entry.lock:
                            session.observe(entry, line)
                    yield line
            finally:
                if offset < end:
                    with entry.lock:
                        if self._cursors.get(path) == end:
                            self._cursors.set(path, offset)
                            logger.debug(
                                "%s: stream closed early, cursor wound back to %d",
                                path.name,
                                offset,
                            )


class IncrementalReader:
    """Reads new journal content and attributes it to a session."""

    def __init__(self, table: FileTable | None = None):
        self.table = table if table is not None else FileTable()

    def read(self, path: str | os.PathLike) -> ReadResult:
        """Return the session of ``path`` and a lazy stream of its new lines.

        Missing and beta journals yield no lines under DEFAULT_SESSION. Other
        I/O failures propagate.
        """
        key = normalize(path)
        if not key.is_file():
            return ReadResult(DEFAULT_SESSION, ())

        entry = self.table.get(key)
        try:
            with entry.lock:
                if channel.is_excluded(entry):
                    return ReadResult(DEFAULT_SESSION, ())
                resolved = session.resolve_session(entry)
        except FileNotFoundError:
            # Rotated away between the existence check and the scan
            return ReadResult(DEFAULT_SESSION, ())

        return ReadResult(resolved or DEFAULT_SESSION, LineStream(entry, self.table.cursors))
