"""Directory change notification for journal files, built on watchdog."""

import logging
from pathlib import Path
from typing import Callable, Iterable

from watchdog.events import FileSystemEvent, PatternMatchingEventHandler
from watchdog.observers import Observer
from watchdog.observers.api import BaseObserver

from journaltail.config import LOG_FILE_PATTERN
from journaltail.models import ReadResult

logger = logging.getLogger(__name__)

ReadFn = Callable[[str], ReadResult]
Callback = Callable[[str, Iterable[str]], None]


class JournalEventHandler(PatternMatchingEventHandler):
    """Reads a journal whenever it is created or modified."""

    def __init__(self, read: ReadFn, callback: Callback, pattern: str = LOG_FILE_PATTERN):
        super().__init__(patterns=[pattern], ignore_directories=True, case_sensitive=False)
        self.read = read
        self.callback = callback

    def _dispatch_read(self, path: str) -> None:
        try:
            session, lines = self.read(path)
            self.callback(session, lines)
        except Exception:
            # Keep the observer thread alive; one bad read must not end the watch
            logger.exception("Handling change to %s failed", path)

    def on_created(self, event: FileSystemEvent) -> None:
        self._dispatch_read(str(event.src_path))

    def on_modified(self, event: FileSystemEvent) -> None:
        self._dispatch_read(str(event.src_path))


class ChangeNotifier:
    """Non-recursive watch of one journal directory."""

    def __init__(self, directory: Path, read: ReadFn, callback: Callback, pattern: str = LOG_FILE_PATTERN):
        self.directory = directory
        self.handler = JournalEventHandler(read, callback, pattern)
        self._observer: BaseObserver | None = None

    @property
    def running(self) -> bool:
        return self._observer is not None and self._observer.is_alive()

    def start(self) -> bool:
        """Start watching; returns False when the directory does not exist."""
        if self._observer is not None:
            return True
        if not self.directory.is_dir():
            logger.warning("Journal directory %s does not exist, not watching", self.directory)
            return False

        observer = Observer()
        observer.schedule(self.handler, str(self.directory), recursive=False)
        observer.start()
        self._observer = observer
        logger.info("Watching %s", self.directory)
        return True

    def stop(self) -> None:
        if self._observer is None:
            return
        self._observer.stop()
        self._observer.join(timeout=5)
        self._observer = None
        logger.info("Stopped watching %s", self.directory)
