# src/tgbs_demux/cli.py
from __future__ import annotations
import logging
from pathlib import Path
from typing import Optional
import typer
from pydantic import ValidationError
from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn, TimeElapsedColumn
from rich.table import Table

from . import __version__
from .barcodes import BarcodeIndex
from .config import RunConfig
from .demux_core import run_demux
from .errors import ConfigurationError
from .stats import RunStatistics, format_number, length_breakdown_lines
from .utils.fs import prepare_output_dir
from .utils.logging import add_log_file, setup_logging

log = logging.getLogger("tgbs_demux")

app = typer.Typer(add_completion=False, help="tGBS barcode demultiplexing: split a FASTQ into per-sample files")
console = Console()


@app.callback()
def _main(ctx: typer.Context, verbose: int = typer.Option(0, "-v", count=True, help="-v/-vv for more logs")):
    ctx.obj = {"verbose": verbose}
    setup_logging(verbose)


def _load_index(barcodes: Path) -> BarcodeIndex:
    try:
        return BarcodeIndex.from_file(barcodes)
    except (ConfigurationError, OSError) as e:
        log.error(f"ERROR: {e}")
        raise typer.Exit(1)


def _breakdown_table(index: BarcodeIndex, title: str) -> Table:
    table = Table(title=title)
    table.add_column("Length (bp)", justify="right")
    table.add_column("Indexes", justify="right")
    table.add_column("Share", justify="right")
    for s in index.length_breakdown():
        table.add_row(str(s.length), f"{format_number(s.count)} / {format_number(s.total)}", f"{s.percent:.1f}%")
    return table


# ------------------------------------------------------------------------------------
# Demultiplex
# ------------------------------------------------------------------------------------
@app.command()
def run(
    ctx: typer.Context,
    barcodes: Optional[Path] = typer.Option(None, "--barcodes", "-b", help="Sample<TAB>Barcode file"),
    fastq: Optional[Path] = typer.Option(None, "--fastq", "-f", help="FASTQ file with sequence data"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Directory for demultiplexed reads"),
    config: Optional[Path] = typer.Option(None, "--config", exists=True, dir_okay=False, help="YAML run config"),
    marker: Optional[str] = typer.Option(None, help="Sequence expected right after the barcode (default CATG)"),
    buffer_size: Optional[int] = typer.Option(None, help="Reads kept in memory before writing output"),
    force: bool = typer.Option(False, "--force", help="Delete an existing output directory without asking"),
):
    """Demultiplex a FASTQ file by inline barcodes followed by the restriction-site marker."""
    verbose = (ctx.obj or {}).get("verbose", 0)
    setup_logging(max(verbose, 1))
    try:
        cfg = RunConfig.from_options(
            config, barcodes=barcodes, fastq=fastq, output=output,
            marker=marker, buffer_size=buffer_size, force=force or None,
        )
    except ValidationError as e:
        raise typer.BadParameter(str(e))

    # mapping problems must stop the run before anything is written
    index = _load_index(cfg.barcodes)

    if cfg.output.exists() and not cfg.force:
        typer.confirm(
            f"WARNING: output directory '{cfg.output}' already exists.\n"
            "Would you like to delete the contents of that directory and continue executing?",
            abort=True,
        )
    try:
        prepare_output_dir(cfg.output, overwrite=True)
    except OSError as e:
        log.error(f"ERROR: Unable to create output directory: {e}")
        raise typer.Exit(1)
    add_log_file(cfg.log_path)

    log.info(f"tgbs-demux {__version__}")
    log.info(f"Barcodes: {cfg.barcodes}")
    log.info(f"Fastq: {cfg.fastq}")
    log.info(f"Output Dir: {cfg.output}")
    log.info(f"Read {format_number(len(index))} indexes")
    for line in length_breakdown_lines(index):
        log.info(f"  {line}")

    with Progress(
        SpinnerColumn(), TextColumn("{task.description}"), TimeElapsedColumn(),
        console=console, transient=True,
    ) as progress:
        task = progress.add_task("Searching indexes ... Please Wait", total=None)

        def _tick(stats: RunStatistics) -> None:
            progress.update(task, description=f"{format_number(stats.records_seen)} reads processed so far")

        try:
            result = run_demux(cfg, index=index, on_progress=_tick)
        except (OSError, ValueError) as e:
            log.error(f"ERROR: {e}")
            raise typer.Exit(1)

    stats = result.stats
    table = Table(title="tgbs-demux summary")
    table.add_column("Metric")
    table.add_column("Value", justify="right")
    table.add_row("Reads", format_number(stats.records_seen))
    table.add_row("Demultiplexed", format_number(stats.records_classified))
    table.add_row("Demultiplexed (%)", f"{stats.percent_classified:.1f}")
    table.add_row("No barcode", format_number(stats.no_barcode))
    table.add_row("Marker mismatch", format_number(stats.marker_mismatch))
    table.add_row("Samples with reads", format_number(len(stats.per_partition)))
    table.add_row("Run-time", result.elapsed_hms)
    console.print(table)


# ------------------------------------------------------------------------------------
# Barcode file check
# ------------------------------------------------------------------------------------
@app.command("barcodes")
def check_barcodes(
    barcodes: Path = typer.Option(..., "--barcodes", "-b", help="Sample<TAB>Barcode file"),
):
    """Validate a barcode file and show how barcode lengths are distributed."""
    index = _load_index(barcodes)
    console.print(_breakdown_table(index, f"{barcodes.name}: {format_number(len(index))} indexes"))
