"""journaltail CLI - inspect and follow game journals per session."""

import logging
import time
from datetime import datetime, timedelta
from pathlib import Path
from typing import Annotated, Optional

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from journaltail import __version__
from journaltail.config import JOURNAL_DIR, OVERRIDES_DIR, WatcherSettings

app = typer.Typer(
    name="journaltail",
    help="Tail game journals and group their content by session.",
    no_args_is_help=True,
)

console = Console()

LogDirOption = Annotated[
    Path, typer.Option("--log-dir", "-l", help="Directory holding Journal.*.log files")
]
OverridesDirOption = Annotated[
    Path, typer.Option("--overrides-dir", "-o", help="Directory holding manualChanges files")
]


def version_callback(value: bool) -> None:
    if value:
        console.print(f"journaltail {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        Optional[bool],
        typer.Option("--version", "-v", callback=version_callback, is_eager=True),
    ] = None,
    verbose: Annotated[bool, typer.Option("--verbose", help="Log debug output")] = False,
) -> None:
    """journaltail - session-aware tailing of game journals."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _make_watcher(log_dir: Path, overrides_dir: Path, refresh_interval: float = 2.0):
    from journaltail.watcher import LogWatcher

    try:
        settings = WatcherSettings(
            log_dir=log_dir, overrides_dir=overrides_dir, refresh_interval=refresh_interval
        )
    except ValidationError as e:
        console.print(f"[red]Invalid settings:[/red] {escape(str(e))}")
        raise typer.Exit(1)
    return LogWatcher.from_settings(settings)


def _print_content(content: dict[str, list[str]], show: bool) -> None:
    if not content:
        console.print("[dim]No journal content found.[/dim]")
        return

    if show:
        for session, lines in content.items():
            console.print(f"[bold cyan]{escape(session)}[/bold cyan]")
            for line in lines:
                console.print(line, markup=False, highlight=False, soft_wrap=True)
        return

    table = Table(title="Journal content")
    table.add_column("Session", style="cyan")
    table.add_column("Lines", justify="right", style="green")
    for session, lines in sorted(content.items()):
        table.add_row(escape(session), str(len(lines)))
    console.print(table)


@app.command("read")
def read(
    path: Annotated[Path, typer.Argument(help="Journal file to read")],
) -> None:
    """Print a journal file's lines and the session it belongs to."""
    from journaltail.watcher import LogWatcher

    if not path.is_file():
        console.print(f"[red]Error:[/red] {path} is not a file")
        raise typer.Exit(1)

    watcher = LogWatcher(path.parent)
    session, lines = watcher.read_lines_without_lock(path)
    console.print(f"[bold cyan]{escape(session)}[/bold cyan]")
    for line in lines:
        console.print(line, markup=False, highlight=False, soft_wrap=True)


@app.command("catchup")
def catchup(
    log_dir: LogDirOption = JOURNAL_DIR,
    overrides_dir: OverridesDirOption = OVERRIDES_DIR,
    show: Annotated[bool, typer.Option("--show", help="Print the lines, not just counts")] = False,
) -> None:
    """Read every journal and merge manual changes, per session."""
    watcher = _make_watcher(log_dir, overrides_dir)
    _print_content(watcher.retrieve_all_logs(), show)


@app.command("since")
def since(
    minutes: Annotated[float, typer.Argument(help="Look back this many minutes")],
    log_dir: LogDirOption = JOURNAL_DIR,
    show: Annotated[bool, typer.Option("--show", help="Print the lines, not just counts")] = False,
) -> None:
    """Read the journals written in the last MINUTES minutes."""
    watcher = _make_watcher(log_dir, OVERRIDES_DIR)
    threshold = datetime.now() - timedelta(minutes=minutes)
    _print_content(watcher.get_files_content_from(threshold), show)


@app.command("watch")
def watch(
    log_dir: LogDirOption = JOURNAL_DIR,
    refresh_interval: Annotated[
        float, typer.Option("--refresh", help="Seconds between forced refreshes")
    ] = 2.0,
) -> None:
    """Follow the journal directory and print new lines as they arrive."""
    watcher = _make_watcher(log_dir, OVERRIDES_DIR, refresh_interval)

    def on_change(session: str, lines) -> None:
        for line in lines:
            console.print(f"[cyan]{escape(session)}[/cyan] {escape(line)}", highlight=False, soft_wrap=True)

    with watcher:
        watcher.initiate_watch(on_change)
        if not watcher.watching:
            console.print(f"[red]Error:[/red] cannot watch {log_dir}")
            raise typer.Exit(1)

        console.print(f"Watching [green]{log_dir}[/green] (Ctrl-C to stop)")
        try:
            while True:
                time.sleep(0.5)
        except KeyboardInterrupt:
            console.print("[dim]Stopped.[/dim]")
