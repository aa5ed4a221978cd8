from __future__ import annotations
from pathlib import Path
from typing import Iterable

from ..barcodes import BarcodeEntry
from ..stats import RunStatistics


def write_demux_summary_tsv(out: Path, stats: RunStatistics) -> None:
    """
    Write run-level demultiplexing counts to a TSV file.

    Output format:
        reads      demultiplexed    no_barcode    marker_mismatch    percent_demultiplexed
        1000000    850000           100000        50000              85.000000
    """
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_text(
        "reads\tdemultiplexed\tno_barcode\tmarker_mismatch\tpercent_demultiplexed\n"
        f"{stats.records_seen}\t{stats.records_classified}\t{stats.no_barcode}\t"
        f"{stats.marker_mismatch}\t{stats.percent_classified:.6f}\n"
    )


def write_partition_counts_tsv(out: Path, entries: Iterable[BarcodeEntry], stats: RunStatistics) -> None:
    """
    Write per-partition read counts, one row per configured barcode.

    Barcodes that received no reads are listed with a count of 0.

    Output format:
        partition       sample     barcode    reads
        SampleA.ACGT    SampleA    ACGT       420000
    """
    out.parent.mkdir(parents=True, exist_ok=True)
    header = "partition\tsample\tbarcode\treads\n"
    lines = [header] + [
        f"{e.partition_id}\t{e.sample}\t{e.barcode}\t{stats.per_partition.get(e.partition_id, 0)}\n"
        for e in entries
    ]
    out.write_text("".join(lines))
