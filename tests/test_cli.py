"""Tests for the journaltail command line."""

from typer.testing import CliRunner

from conftest import event, header, load_game
from journaltail import __version__
from journaltail.cli import app

runner = CliRunner()


class TestCLI:
    def test_version(self):
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_catchup_counts(self, journal_dir, overrides_dir, write_journal):
        write_journal("Journal.1.log", header(), load_game("Alice"), event("Location"))
        (overrides_dir / "manualChanges.Alice.json").write_text("change\n")

        result = runner.invoke(
            app, ["catchup", "--log-dir", str(journal_dir), "--overrides-dir", str(overrides_dir)]
        )

        assert result.exit_code == 0
        assert "Alice" in result.output
        assert "4" in result.output

    def test_catchup_show(self, journal_dir, overrides_dir, write_journal):
        write_journal("Journal.1.log", header(), load_game("Alice"), event("Docked"))

        result = runner.invoke(
            app,
            ["catchup", "-l", str(journal_dir), "-o", str(overrides_dir), "--show"],
        )

        assert result.exit_code == 0
        assert '"event":"Docked"' in result.output

    def test_catchup_empty(self, tmp_path, overrides_dir):
        result = runner.invoke(
            app, ["catchup", "-l", str(tmp_path / "nope"), "-o", str(overrides_dir)]
        )
        assert result.exit_code == 0
        assert "No journal content" in result.output

    def test_since(self, journal_dir, write_journal):
        write_journal("Journal.1.log", header(), load_game("Alice"), event("Undocked"))

        result = runner.invoke(app, ["since", "60", "-l", str(journal_dir), "--show"])

        assert result.exit_code == 0
        assert '"event":"Undocked"' in result.output

    def test_read(self, write_journal):
        path = write_journal("Journal.1.log", header(), load_game("Alice"))

        result = runner.invoke(app, ["read", str(path)])

        assert result.exit_code == 0
        assert "Alice" in result.output
        assert '"event":"LoadGame"' in result.output

    def test_read_missing(self, tmp_path):
        result = runner.invoke(app, ["read", str(tmp_path / "Journal.x.log")])
        assert result.exit_code == 1
        assert "not a file" in result.output

    def test_watch_missing_directory(self, tmp_path):
        result = runner.invoke(app, ["watch", "-l", str(tmp_path / "nope")])
        assert result.exit_code == 1
        assert "cannot watch" in result.output

    def test_watch_rejects_bad_interval(self, journal_dir):
        result = runner.invoke(app, ["watch", "-l", str(journal_dir), "--refresh", "0"])
        assert result.exit_code == 1
        assert "Invalid settings" in result.output
