"""Merge manual change files into per-session journal content."""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable

from journaltail.config import (
    DEFAULT_SESSION,
    LEGACY_OVERRIDE_FILE,
    OVERRIDE_FILE_PREFIX,
    OVERRIDE_FILE_SUFFIX,
)
from journaltail.overrides import naming

logger = logging.getLogger(__name__)


@dataclass
class OverrideFile:
    """One manual change file; ``token`` is None for the legacy shared file."""

    path: Path
    token: str | None = None

    @property
    def is_legacy(self) -> bool:
        return self.token is None


def list_override_files(directory: Path) -> list[OverrideFile]:
    """List override files in ``directory``, sorted by name."""
    files = []
    for path in sorted(directory.iterdir()):
        name = path.name
        if not path.is_file() or not name.startswith(OVERRIDE_FILE_PREFIX):
            continue
        if name == LEGACY_OVERRIDE_FILE:
            files.append(OverrideFile(path))
        elif name.endswith(OVERRIDE_FILE_SUFFIX):
            token = name[len(OVERRIDE_FILE_PREFIX) : -len(OVERRIDE_FILE_SUFFIX)]
            if token:
                files.append(OverrideFile(path, token))
    return files


class OverrideMerger:
    """Adds manual change files to the sessions found in the journals."""

    def __init__(
        self,
        directory: Path,
        sanitize: Callable[[str], str] = naming.sanitize,
        desanitize: Callable[[str], str] = naming.desanitize,
    ):
        self.directory = directory
        self.sanitize = sanitize
        self.desanitize = desanitize

    def session_path(self, session: str) -> Path:
        return self.directory / f"{OVERRIDE_FILE_PREFIX}{self.sanitize(session)}{OVERRIDE_FILE_SUFFIX}"

    def merge(self, content: dict[str, list[str]]) -> dict[str, list[str]]:
        """Append override lines to ``content`` in place and return it.

        The legacy shared file goes to the first session seen in the journals
        and is then migrated to that session's own file. When the journals
        named any session, override files for other sessions are ignored:
        they belong to another installation or account.
        """
        if not self.directory.is_dir():
            return content

        observed = [s for s in content if s != DEFAULT_SESSION]

        for override in list_override_files(self.directory):
            if override.is_legacy:
                session = observed[0] if observed else DEFAULT_SESSION
            else:
                session = self.desanitize(override.token)

            if observed and session not in observed:
                logger.debug("Skipping %s: session %r not in journals", override.path.name, session)
                continue

            try:
                text = override.path.read_text(encoding="utf-8")
            except FileNotFoundError:
                continue

            content.setdefault(session, []).extend(text.splitlines())

            if override.is_legacy:
                self.migrate(override.path, session, text)

        return content

    def migrate(self, legacy: Path, session: str, text: str) -> Path:
        """Move the legacy shared file's ``text`` to ``session``'s own file.

        An existing session file keeps its content and gets ``text`` appended.
        """
        destination = self.session_path(session)
        if destination.exists():
            existing = destination.read_text(encoding="utf-8")
            if existing and not existing.endswith("\n"):
                existing += "\n"
            text = existing + text
        destination.write_text(text, encoding="utf-8")
        legacy.unlink()
        logger.info("Migrated %s to %s", legacy.name, destination.name)
        return destination
