"""Command-line interface for thyme."""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import NoReturn, Optional

import typer

from .config import ReportSettings
from .paths import get_stream_path
from .storage import (
    StreamFormatError,
    append_snapshot,
    load_stream,
    parse_snapshot,
    snapshot_to_payload,
)
from .timeline import StreamOrderError

logger = logging.getLogger(__name__)

app = typer.Typer(help="Reconstruct application usage from sampled window snapshots.")


@app.callback(no_args_is_help=True)
def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logs.")) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )


@app.command()
def record(
    out: Optional[Path] = typer.Option(
        None,
        "--out",
        "-o",
        path_type=Path,
        help="Stream file to append to. Use '-' to print the snapshot instead.",
    ),
) -> None:
    """Append one snapshot, read as JSON from stdin, to the stream file."""
    try:
        snapshot = parse_snapshot(sys.stdin.read())
    except StreamFormatError as exc:
        _fail(str(exc))

    if out is not None and str(out) == "-":
        typer.echo(json.dumps(snapshot_to_payload(snapshot), indent=2))
        return

    try:
        append_snapshot(out or get_stream_path(), snapshot)
    except StreamFormatError as exc:
        _fail(str(exc))


@app.command()
def show(
    stream_path: Optional[Path] = typer.Option(
        None,
        "--in",
        "-i",
        path_type=Path,
        help="Stream file written by `thyme record`.",
    ),
    what: str = typer.Option(
        "list",
        "--what",
        "-w",
        help="What to show: list or stats.",
    ),
    by: str = typer.Option(
        "app",
        "--by",
        help="Label granularity for stats: app or window.",
    ),
    max_bars: int = typer.Option(
        30,
        "--max-bars",
        min=1,
        help="Number of entries per chart.",
    ),
    sample_seconds: float = typer.Option(
        30.0,
        "--interval",
        min=1.0,
        help="Seconds between recorded snapshots.",
    ),
) -> None:
    """Summarize a recorded stream in the console."""
    from .reporting import SummaryPrinter

    if what not in ("list", "stats"):
        raise typer.BadParameter("expected list or stats", param_hint="--what")
    try:
        settings = ReportSettings.from_options(
            max_bars=max_bars, label_mode=by, sample_seconds=sample_seconds
        )
    except ValueError as exc:
        raise typer.BadParameter(str(exc), param_hint="--by") from exc

    path = stream_path or get_stream_path()
    if not path.exists():
        _fail(f"Stream file not found: {path}")
    try:
        printer = SummaryPrinter(load_stream(path), settings)
        if what == "stats":
            printer.print_stats()
        else:
            printer.print_window_list()
    except (StreamFormatError, StreamOrderError) as exc:
        _fail(str(exc))


@app.command()
def web(
    stream_path: Optional[Path] = typer.Option(
        None, "--in", "-i", path_type=Path, help="Stream file written by `thyme record`."
    ),
    host: str = typer.Option("127.0.0.1", "--host", help="Interface to bind the dashboard."),
    port: int = typer.Option(
        6090, "--port", min=1, max=65535, help="TCP port for the dashboard."
    ),
    by: str = typer.Option("app", "--by", help="Default label granularity: app or window."),
    open_browser: bool = typer.Option(
        True,
        "--open-browser/--no-open-browser",
        help="Automatically launch the dashboard in your default browser.",
    ),
) -> None:
    """Serve timelines and sample counts over HTTP."""
    from .server_runner import run_dashboard

    try:
        settings = ReportSettings.from_options(label_mode=by)
    except ValueError as exc:
        raise typer.BadParameter(str(exc), param_hint="--by") from exc
    run_dashboard(
        host=host,
        port=port,
        stream_path=stream_path or get_stream_path(),
        settings=settings,
        open_browser=open_browser,
    )


def _fail(message: str) -> NoReturn:
    logger.debug("Command failed: %s", message)
    typer.echo(message, err=True)
    raise typer.Exit(code=1)
