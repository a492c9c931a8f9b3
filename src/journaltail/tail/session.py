"""Attribution of a journal to the session named by its LoadGame record."""

import logging
import re

from pydantic import ValidationError

from journaltail.config import DEFAULT_SESSION
from journaltail.models import LoadGameRecord
from journaltail.tail.lines import iter_lines
from journaltail.tail.state import TrackedFile

logger = logging.getLogger(__name__)

MARKER_TAG = re.compile(r'"event"\s*:\s*"LoadGame"')


def is_marker(line: str) -> bool:
    return MARKER_TAG.search(line) is not None


def parse_session(line: str) -> str:
    """Extract the session name from a marker line, or DEFAULT_SESSION."""
    try:
        return LoadGameRecord.model_validate_json(line).commander
    except ValidationError as e:
        logger.debug("Unreadable LoadGame record, using %s: %s", DEFAULT_SESSION, e)
        return DEFAULT_SESSION


def observe(entry: TrackedFile, line: str) -> bool:
    """Resolve the session from ``line`` if it is a marker. Caller holds the lock."""
    if entry.session is not None or not is_marker(line):
        return False
    entry.session = parse_session(line)
    return True


def resolve_session(entry: TrackedFile) -> str | None:
    """Scan ``entry`` for its marker unless a session is already cached.

    Returns the cached or newly resolved session, or None when the marker has
    not been written yet. The caller must hold ``entry.lock``.
    """
    if entry.session is not None:
        return entry.session

    for line in iter_lines(entry.path):
        if observe(entry, line):
            logger.debug("%s belongs to session %r", entry.path.name, entry.session)
            break

    return entry.session
