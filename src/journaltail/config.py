"""Configuration and directory management for journaltail."""

from pathlib import Path

from pydantic import BaseModel, Field

JOURNALTAIL_DIR = Path.home() / ".journaltail"
OVERRIDES_DIR = JOURNALTAIL_DIR / "manual-changes"

# Where the game writes its journal on Windows; other platforms pass --log-dir
JOURNAL_DIR = (
    Path.home() / "Saved Games" / "Frontier Developments" / "Elite Dangerous"
)

# Journal file naming
LOG_FILE_PREFIX = "Journal."
LOG_FILE_SUFFIX = ".log"
LOG_FILE_PATTERN = f"{LOG_FILE_PREFIX}*{LOG_FILE_SUFFIX}"

# Override file naming: manualChanges.json (legacy) or manualChanges.<token>.json
OVERRIDE_FILE_PREFIX = "manualChanges."
OVERRIDE_FILE_SUFFIX = ".json"
LEGACY_OVERRIDE_FILE = f"{OVERRIDE_FILE_PREFIX}json"

DEFAULT_SESSION = "Default"
DEFAULT_REFRESH_INTERVAL = 2.0


class WatcherSettings(BaseModel):
    """Runtime knobs for a LogWatcher."""

    log_dir: Path = Field(default=JOURNAL_DIR, description="Directory holding Journal.*.log files")
    overrides_dir: Path = Field(default=OVERRIDES_DIR, description="Directory holding manualChanges files")
    refresh_interval: float = Field(
        default=DEFAULT_REFRESH_INTERVAL,
        gt=0,
        description="Seconds between forced metadata refreshes of the newest journal",
    )


def is_log_file(name: str) -> bool:
    """Check a bare file name against the journal naming convention."""
    return name.startswith(LOG_FILE_PREFIX) and name.endswith(LOG_FILE_SUFFIX)
