"""CLI entry point for sensor-sheet."""

from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path
from typing import NoReturn

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table as RichTable

from sensor_sheet import __version__
from sensor_sheet.errors import ExtractionError
from sensor_sheet.export import (
    build_manifest,
    utcnow_iso,
    write_dataset_json,
    write_manifest,
    write_series_csv,
)
from sensor_sheet.extract import extract
from sensor_sheet.io import load_grid
from sensor_sheet.models import Entry, SensorDataset

app = typer.Typer(
    name="sensorsheet",
    help="sensor-sheet — Extract sensor time series from fixed-layout spreadsheets.",
    add_completion=False,
    no_args_is_help=True,
)
console = Console()

DEFAULT_INPUT = Path("data.xlsx")


def _noop(*_args: object, **_kwargs: object) -> None:
    return None


def _printer(quiet: bool) -> Callable[..., None]:
    return _noop if quiet else console.print


def _err(msg: str) -> None:
    console.print(f"[red]x[/red] {msg}")


# ── Helpers ──────────────────────────────────────────────────────


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"sensor-sheet v{__version__}")
        raise typer.Exit()


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def _load_dataset(input_file: Path, sheet: int) -> SensorDataset:
    return extract(load_grid(input_file, sheet_index=sheet))


def _fail(exc: ExtractionError) -> NoReturn:
    _err(f"{exc.kind}: {escape(str(exc))}")
    raise typer.Exit(code=2)


def _unexpected_message(exc: Exception) -> str:
    return f"Unexpected internal error: {exc}"


def _fail_unexpected(message: str) -> NoReturn:
    _err(escape(message))
    raise typer.Exit(code=1)


def _series_table(header: str, entries: list[Entry] | tuple[Entry, ...]) -> RichTable:
    tbl = RichTable(title=f"Header: {escape(header)}", show_lines=False)
    tbl.add_column("Timestamp", style="bold")
    tbl.add_column("Value")
    for timestamp, value in entries:
        tbl.add_row(timestamp, escape(value))
    return tbl


def _write_run_manifest(
    out_dir: Path,
    input_file: Path,
    sheet: int,
    created_at: str,
    dataset: SensorDataset | None = None,
    *,
    error: ExtractionError | None = None,
    error_message: str = "",
) -> Path:
    manifest = build_manifest(
        input_file, sheet, created_at, dataset, error=error, error_message=error_message
    )
    return write_manifest(out_dir, manifest)


# ── Callbacks ────────────────────────────────────────────────────


@app.callback()
def main(
    version: bool | None = typer.Option(
        None, "--version", "-V",
        help="Show version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v",
        help="Log workbook loading details.",
    ),
) -> None:
    """sensor-sheet CLI."""
    _configure_logging(verbose)


# ── extract command ──────────────────────────────────────────────


@app.command("extract")
def extract_cmd(
    input_file: Path = typer.Option(
        DEFAULT_INPUT, "--input", "-i",
        help="Path to the XLSX workbook.",
    ),
    sheet: int = typer.Option(
        0, "--sheet", "-s", min=0,
        help="Zero-based worksheet position.",
    ),
    out_dir: Path | None = typer.Option(
        None, "--out-dir", "-o",
        help="Write dataset.json, series.csv and run_manifest.json here.",
    ),
    quiet: bool = typer.Option(
        False, "--quiet", "-q",
        help="Suppress the printed series; still writes artifacts.",
    ),
) -> None:
    """Extract every header's time series and print it."""
    echo = _printer(quiet)
    created_at = utcnow_iso()

    try:
        dataset = _load_dataset(input_file, sheet)
    except ExtractionError as exc:
        if out_dir is not None:
            manifest_path = _write_run_manifest(
                out_dir, input_file, sheet, created_at, error=exc
            )
            console.print(f"  Manifest -> {manifest_path}")
        _fail(exc)
    except Exception as exc:
        message = _unexpected_message(exc)
        if out_dir is not None:
            _write_run_manifest(
                out_dir, input_file, sheet, created_at, error_message=message
            )
        _fail_unexpected(message)

    echo(f"Sensor ID: {dataset.sensor_id}")
    for header, entries in dataset.series.items():
        echo(_series_table(header, entries))

    if out_dir is not None:
        dataset_path = write_dataset_json(out_dir, dataset)
        csv_path = write_series_csv(out_dir, dataset)
        manifest_path = _write_run_manifest(out_dir, input_file, sheet, created_at, dataset)
        echo(f"  Dataset  -> {dataset_path}")
        echo(f"  Series   -> {csv_path}")
        echo(f"  Manifest -> {manifest_path}")

    if not quiet:
        console.print(Panel(
            f"[green]Done[/green] — sensor {dataset.sensor_id}: "
            f"{len(dataset.series)} headers, {dataset.entry_count} readings",
            title="Extraction Complete", border_style="green",
        ))


# ── headers command ──────────────────────────────────────────────


@app.command()
def headers(
    input_file: Path = typer.Option(
        DEFAULT_INPUT, "--input", "-i",
        help="Path to the XLSX workbook.",
    ),
    sheet: int = typer.Option(
        0, "--sheet", "-s", min=0,
        help="Zero-based worksheet position.",
    ),
) -> None:
    """List the data headers, one per line."""
    try:
        dataset = _load_dataset(input_file, sheet)
    except ExtractionError as exc:
        _fail(exc)
    except Exception as exc:
        _fail_unexpected(_unexpected_message(exc))
    for header in dataset.list_headers():
        typer.echo(header)


# ── show command ─────────────────────────────────────────────────


@app.command()
def show(
    header: list[str] = typer.Option(
        ..., "--header", "-H",
        help="Header to show; repeat for several.",
    ),
    input_file: Path = typer.Option(
        DEFAULT_INPUT, "--input", "-i",
        help="Path to the XLSX workbook.",
    ),
    sheet: int = typer.Option(
        0, "--sheet", "-s", min=0,
        help="Zero-based worksheet position.",
    ),
) -> None:
    """Show the readings of selected headers."""
    try:
        dataset = _load_dataset(input_file, sheet)
    except ExtractionError as exc:
        _fail(exc)
    except Exception as exc:
        _fail_unexpected(_unexpected_message(exc))

    try:
        selected = dataset.get_series(header)
    except KeyError as exc:
        _err(escape(str(exc.args[0])))
        console.print(f"  Available: {escape(', '.join(dataset.list_headers()))}")
        raise typer.Exit(code=2)

    for name, entries in selected.items():
        console.print(_series_table(name, entries))
