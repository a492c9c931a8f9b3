"""journaltail - incremental, session-aware tailing of journal log directories."""

__version__ = "0.1.0"
