# src/tgbs_demux/demux_core.py
from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterable, Optional
import logging
import time

from .barcodes import BarcodeIndex
from .classify import RE_FEATURE, classify
from .config import RunConfig
from .fastq import Record, open_records
from .partitions import BUFFER, PartitionBuffer
from .qc.collectors import write_demux_summary_tsv, write_partition_counts_tsv
from .stats import RunStatistics, format_elapsed, length_breakdown_lines

log = logging.getLogger(__name__)

ProgressCallback = Callable[[RunStatistics], None]

SUMMARY_TSV = "demux_summary.tsv"
PARTITIONS_TSV = "demux_partitions.tsv"


@dataclass
class DemuxResult:
    stats: RunStatistics
    index: BarcodeIndex
    output_dir: Path
    flushes: int
    elapsed: float

    @property
    def elapsed_hms(self) -> str:
        return format_elapsed(self.elapsed)


# ----------------------------
# Streaming demux
# ----------------------------

def demultiplex(
    records: Iterable[Record],
    index: BarcodeIndex,
    buffer: PartitionBuffer,
    marker: str = RE_FEATURE,
    on_progress: Optional[ProgressCallback] = None,
    progress_every: int = 1000,
) -> RunStatistics:
    """
    Classify each record and route matches into `buffer`.

    - reads whose barcode is unknown or not followed by `marker` are dropped
    - the buffer writes out whenever its global threshold is reached
    - the remaining buffered reads are always written once `records` is exhausted
    Returns the run counters.
    """
    stats = RunStatistics()
    for rec in records:
        result = classify(rec, index, marker=marker)
        stats.record(result)
        if result.matched:
            buffer.accept(result.partition_id, result.record)
            buffer.maybe_flush()
        if on_progress is not None and stats.records_seen % progress_every == 0:
            on_progress(stats)

    # the very last batch
    buffer.flush()
    return stats


def run_demux(
    config: RunConfig,
    index: Optional[BarcodeIndex] = None,
    on_progress: Optional[ProgressCallback] = None,
) -> DemuxResult:
    """
    Convenience one-shot: load barcodes → stream FASTQ → write partitions + QC tables.

    The output directory must already be prepared (see utils.fs.prepare_output_dir);
    it is only created here if missing.
    """
    start = time.monotonic()
    if index is None:
        index = BarcodeIndex.from_file(config.barcodes)
        log.info(f"Read {len(index):,} indexes from {config.barcodes}")
        for line in length_breakdown_lines(index):
            log.info(f"  {line}")

    config.output.mkdir(parents=True, exist_ok=True)
    buffer = PartitionBuffer(config.output, threshold=config.buffer_size)

    log.info(f"Searching indexes in {config.fastq} (marker={config.marker}, buffer={config.buffer_size:,})")
    with open_records(config.fastq) as records:
        stats = demultiplex(
            records, index, buffer,
            marker=config.marker,
            on_progress=on_progress,
            progress_every=config.progress_every,
        )

    write_demux_summary_tsv(config.output / SUMMARY_TSV, stats)
    write_partition_counts_tsv(config.output / PARTITIONS_TSV, index.entries(), stats)

    result = DemuxResult(stats, index, config.output, buffer.flushes, time.monotonic() - start)
    log.info(f"DONE [ {stats.summary()} ]")
    log.info(f"Total run-time: {result.elapsed_hms}")
    return result


def demux_barcodes(
    barcodes_file: Path | str,
    fastq: Path | str,
    output_dir: Path | str,
    marker: str = RE_FEATURE,
    buffer_size: int = BUFFER,
) -> DemuxResult:
    return run_demux(RunConfig(
        barcodes=barcodes_file, fastq=fastq, output=output_dir,
        marker=marker, buffer_size=buffer_size,
    ))
