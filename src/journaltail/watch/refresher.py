"""Periodic metadata refresh of the journal currently being written.

Some platforms (Windows/NTFS most notably) do not publish a growing file's new
size or write time until something opens it. Without a nudge the directory
watch can sit silent while the game keeps appending. This task reopens the
newest journal on a fixed period so the change notifications keep flowing.
"""

import logging
import threading
from typing import Callable

from journaltail.config import DEFAULT_REFRESH_INTERVAL
from journaltail.tail.state import TrackedFile

logger = logging.getLogger(__name__)


class FreshnessRefresher:
    """Refresh ``target()``'s cached metadata every ``interval`` seconds."""

    def __init__(
        self,
        target: Callable[[], TrackedFile | None],
        interval: float = DEFAULT_REFRESH_INTERVAL,
    ):
        self.target = target
        self.interval = interval
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        if self.running:
            return
        self._stop.clear()
        self._thread = threading.Thread(target=self._run, name="journaltail-refresh", daemon=True)
        self._thread.start()

    def stop(self) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout=self.interval + 1)
            self._thread = None

    def tick(self) -> None:
        """Run one refresh now."""
        entry = self.target()
        if entry is not None:
            entry.refresh()

    def _run(self) -> None:
        while not self._stop.wait(self.interval):
            try:
                self.tick()
            except OSError:
                logger.exception("Refreshing the newest journal failed")
