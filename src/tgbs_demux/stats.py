# src/tgbs_demux/stats.py
from __future__ import annotations
from collections import Counter
from dataclasses import dataclass, field
from typing import List

from .barcodes import BarcodeIndex
from .classify import Classification, Outcome


def format_number(n: int) -> str:
    return f"{n:,}"


def format_elapsed(seconds: float) -> str:
    """Format a run-time in seconds as hh:mm:ss."""
    total = int(seconds)
    return f"{total // 3600:02d}:{total % 3600 // 60:02d}:{total % 60:02d}"


def percent(part: int, whole: int) -> float:
    return (part / whole) * 100 if whole else 0.0


@dataclass
class RunStatistics:
    records_seen: int = 0
    records_classified: int = 0
    no_barcode: int = 0
    marker_mismatch: int = 0
    per_partition: Counter = field(default_factory=Counter)

    def record(self, result: Classification) -> None:
        self.records_seen += 1
        if result.outcome is Outcome.MATCHED:
            self.records_classified += 1
            self.per_partition[result.partition_id] += 1
        elif result.outcome is Outcome.MARKER_MISMATCH:
            self.marker_mismatch += 1
        else:
            self.no_barcode += 1

    @property
    def unmatched(self) -> int:
        return self.records_seen - self.records_classified

    @property
    def percent_classified(self) -> float:
        return percent(self.records_classified, self.records_seen)

    def summary(self) -> str:
        return (
            f"{format_number(self.records_classified)} / {format_number(self.records_seen)}"
            f" = {self.percent_classified:.1f}% demultiplexed"
        )


def length_breakdown_lines(index: BarcodeIndex) -> List[str]:
    """One 'Length N bp indexes = count / total = pct%' line per barcode length."""
    shares = index.length_breakdown()
    width = max(len(str(s.length)) for s in shares)
    return [
        f"Length {s.length:>{width}} bp indexes = {format_number(s.count)} / "
        f"{format_number(s.total)} = {s.percent:.1f}%"
        for s in shares
    ]
