"""Detection of journals written by the excluded pre-release (beta) channel."""

import logging
import re

from journaltail.tail.lines import iter_lines
from journaltail.tail.state import TrackedFile

logger = logging.getLogger(__name__)

HEADER_TAG = re.compile(r'"event"\s*:\s*"fileheader"')
EXCLUDED_CHANNEL = "beta"


def is_excluded_line(line: str) -> bool:
    """True for a file-header record that names the excluded channel."""
    lowered = line.lower()
    return EXCLUDED_CHANNEL in lowered and HEADER_TAG.search(lowered) is not None


def is_excluded(entry: TrackedFile) -> bool:
    """Classify ``entry``; the caller must hold ``entry.lock``.

    A positive answer is remembered forever and wipes any session the file
    was attributed to. A negative answer is not cached, so the file is
    scanned again on the next call.
    """
    if entry.excluded:
        return True

    for line in iter_lines(entry.path):
        if is_excluded_line(line):
            entry.excluded = True
            entry.session = None
            logger.info("Ignoring beta journal %s", entry.path.name)
            return True

    return False
