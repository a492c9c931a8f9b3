"""LogWatcher - the public entry point tying readers, triggers and overrides together."""

import logging
import os
import threading
from datetime import datetime
from pathlib import Path
from typing import Callable, Iterable

from journaltail.config import (
    DEFAULT_REFRESH_INTERVAL,
    DEFAULT_SESSION,
    OVERRIDES_DIR,
    WatcherSettings,
    is_log_file,
)
from journaltail.models import ReadResult
from journaltail.overrides import naming
from journaltail.overrides.merger import OverrideMerger
from journaltail.tail.reader import IncrementalReader
from journaltail.tail.state import CursorStore, FileTable, TrackedFile, normalize
from journaltail.watch.notifier import ChangeNotifier
from journaltail.watch.refresher import FreshnessRefresher

logger = logging.getLogger(__name__)


class LogWatcher:
    """Tails a journal directory and groups its content by session.

    All methods are safe to call from any thread. Per-file state is kept in
    memory only, so a new LogWatcher re-reads every journal from the start.
    """

    def __init__(
        self,
        log_dir: str | os.PathLike | None,
        overrides_dir: str | os.PathLike | None = None,
        refresh_interval: float = DEFAULT_REFRESH_INTERVAL,
        cursors: CursorStore | None = None,
        sanitize: Callable[[str], str] = naming.sanitize,
        desanitize: Callable[[str], str] = naming.desanitize,
    ):
        self.log_dir = Path(log_dir) if log_dir is not None else None
        self.refresh_interval = refresh_interval
        self.table = FileTable(cursors)
        self.reader = IncrementalReader(self.table)
        self.overrides = OverrideMerger(
            Path(overrides_dir) if overrides_dir is not None else OVERRIDES_DIR,
            sanitize=sanitize,
            desanitize=desanitize,
        )
        self._lock = threading.Lock()
        self._most_recent: TrackedFile | None = None
        self._notifier: ChangeNotifier | None = None
        self._refresher: FreshnessRefresher | None = None

    @classmethod
    def from_settings(cls, settings: WatcherSettings) -> "LogWatcher":
        return cls(
            settings.log_dir,
            overrides_dir=settings.overrides_dir,
            refresh_interval=settings.refresh_interval,
        )

    # ── Directory scanning ───────────────────────────────────────

    def list_log_files(self) -> list[Path]:
        """Journal files currently in the log directory, sorted by name."""
        if self.log_dir is None or not self.log_dir.is_dir():
            return []
        return sorted(
            normalize(p) for p in self.log_dir.iterdir() if is_log_file(p.name) and p.is_file()
        )

    def most_recent_log_file(self) -> TrackedFile | None:
        with self._lock:
            return self._most_recent

    def _rescan_most_recent(self, paths: Iterable[Path] | None = None) -> None:
        entries = [self.table.get(p) for p in (paths if paths is not None else self.list_log_files())]
        newest = max(entries, key=lambda e: e.created, default=None)
        with self._lock:
            self._most_recent = newest

    # ── Watching ─────────────────────────────────────────────────

    @property
    def watching(self) -> bool:
        return self._notifier is not None and self._notifier.running

    def initiate_watch(self, callback: Callable[[str, Iterable[str]], None]) -> None:
        """Call ``callback(session, lines)`` whenever a journal changes.

        Any previous watch is stopped first. Does nothing when the log
        directory does not exist.
        """
        self.stop()
        if self.log_dir is None:
            return

        notifier = ChangeNotifier(self.log_dir, self.read_lines_without_lock, callback)
        if not notifier.start():
            return
        self._notifier = notifier

        self._rescan_most_recent()
        self._refresher = FreshnessRefresher(self.most_recent_log_file, self.refresh_interval)
        self._refresher.start()

    def stop(self) -> None:
        """Stop the refresh timer, then the directory watch. Safe to call repeatedly."""
        if self._refresher is not None:
            self._refresher.stop()
            self._refresher = None
        if self._notifier is not None:
            self._notifier.stop()
            self._notifier = None

    close = stop

    def __enter__(self) -> "LogWatcher":
        return self

    def __exit__(self, *exc) -> None:
        self.stop()

    # ── Reading ──────────────────────────────────────────────────

    def read_lines_without_lock(self, path: str | os.PathLike) -> ReadResult:
        """Read what was appended to ``path`` since the last read of it."""
        result = self.reader.read(path)

        key = normalize(path)
        if key.is_file():
            with self._lock:
                switch = self._most_recent is None or self._most_recent.path != key
            if switch:
                entry = self.table.get(key)
                with self._lock:
                    self._most_recent = entry

        return result

    def retrieve_all_logs(self) -> dict[str, list[str]]:
        """Everything not yet read from every journal, merged with manual changes.

        Journals that do not name a session yet contribute nothing and keep
        their cursor, so they are read in full once their LoadGame record
        shows up. A legacy shared manual change file is migrated as a side
        effect.
        """
        paths = self.list_log_files()
        if not paths and (self.log_dir is None or not self.log_dir.is_dir()):
            return {}

        self.table.evict_missing()
        content: dict[str, list[str]] = {}
        for path in paths:
            session, lines = self.reader.read(path)
            if session == DEFAULT_SESSION:
                continue
            content.setdefault(session, []).extend(lines)

        self._rescan_most_recent(paths)
        return self.overrides.merge(content)

    def get_files_content_from(self, since: datetime | None) -> dict[str, list[str]]:
        """Content of the journals written after ``since``, grouped by session.

        The most recently written journal is always included so that callers
        get the live session even when nothing changed since ``since``.
        """
        if since is None:
            return {}
        paths = self.list_log_files()
        if not paths:
            return {}

        self.table.evict_missing()
        entries = [self.table.get(p) for p in paths]
        for entry in entries:
            entry.refresh()
        entries.sort(key=lambda e: e.modified, reverse=True)

        threshold = since.timestamp()
        selected = [e for i, e in enumerate(entries) if i == 0 or e.modified > threshold]

        content: dict[str, list[str]] = {}
        # Oldest first so each session's lines stay chronological
        for entry in reversed(selected):
            session, lines = self.reader.read(entry.path)
            lines = list(lines)
            if lines or session != DEFAULT_SESSION:
                content.setdefault(session, []).extend(lines)

        self._rescan_most_recent(paths)
        return content
