"""Shared fixtures: a journal directory and helpers that write game-style records."""

import json

import pytest


def record(**fields) -> str:
    """Serialize a journal record the way the game does (no spaces)."""
    return json.dumps(fields, separators=(",", ":"))


def header(beta: bool = False) -> str:
    version = "3.3.0 Beta" if beta else "4.0.0.1700"
    return record(timestamp="2024-01-01T00:00:00Z", event="Fileheader", part=1, gameversion=version)


def load_game(commander: str) -> str:
    return record(timestamp="2024-01-01T00:00:05Z", event="LoadGame", Commander=commander, Ship="SideWinder")


def event(name: str, **fields) -> str:
    return record(timestamp="2024-01-01T00:01:00Z", event=name, **fields)


@pytest.fixture
def journal_dir(tmp_path):
    d = tmp_path / "journals"
    d.mkdir()
    return d


@pytest.fixture
def overrides_dir(tmp_path):
    d = tmp_path / "manual-changes"
    d.mkdir()
    return d


@pytest.fixture
def write_journal(journal_dir):
    """Create or append to a journal file; returns its path."""

    def _write(name: str, *lines: str, append: bool = False):
        path = journal_dir / name
        with open(path, "a" if append else "w", encoding="utf-8") as f:
            for line in lines:
                f.write(line + "\n")
        return path

    return _write
