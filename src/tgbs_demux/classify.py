# src/tgbs_demux/classify.py
from __future__ import annotations
from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional

from .barcodes import BarcodeEntry, BarcodeIndex
from .fastq import Record

RE_FEATURE = "CATG"


class Outcome(str, Enum):
    MATCHED = "matched"
    NO_BARCODE = "no_barcode"
    MARKER_MISMATCH = "marker_mismatch"


@dataclass(frozen=True)
class Classification:
    outcome: Outcome
    entry: Optional[BarcodeEntry] = None
    record: Optional[Record] = None

    @property
    def matched(self) -> bool:
        return self.outcome is Outcome.MATCHED

    @property
    def partition_id(self) -> Optional[str]:
        return self.entry.partition_id if self.matched else None


NO_BARCODE = Classification(Outcome.NO_BARCODE)


def classify(record: Record, index: BarcodeIndex, marker: str = RE_FEATURE) -> Classification:
    """
    Find the barcode at the start of the read and check the marker after it.

    Lengths are tried longest first and the first barcode hit is final: if the
    marker does not follow it, shorter barcodes are not retried.
    On a match the returned record has the barcode removed from sequence and
    quality; the marker bases stay in place.
    """
    seq = record.sequence.upper()
    for length in index.candidate_lengths():
        if len(seq) < length:
            continue
        entry = index.lookup(seq[:length], length)
        if entry is None:
            continue
        if seq[length:length + len(marker)] != marker:
            return Classification(Outcome.MARKER_MISMATCH, entry)
        trimmed = replace(record, sequence=seq).trimmed(length)
        return Classification(Outcome.MATCHED, entry, trimmed)
    return NO_BARCODE
