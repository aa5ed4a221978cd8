# src/tgbs_demux/barcodes.py
from __future__ import annotations
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Tuple
import re

from .errors import (
    DuplicateBarcodeError,
    EmptyIndexError,
    InvalidBarcodeError,
    MalformedMappingError,
)

_BARCODE_RE = re.compile(r"^[ACGT]+$")

# ----------------------------
# Loading the mapping file
# ----------------------------

def load_barcode_file(file_path: Path | str) -> List[Tuple[str, str]]:
    """
    Parse a 'Sample<TAB>Barcode' text file into [(sample, barcode), ...].

    No header row. Blank lines and '#' comments are skipped; fields are
    returned as written (normalisation happens in BarcodeIndex.build).
    """
    pairs: List[Tuple[str, str]] = []
    with open(file_path, "r") as f:
        for line_no, raw in enumerate(f, start=1):
            line = raw.rstrip("\r\n")
            if not line.strip() or line.lstrip().startswith("#"):
                continue
            if "\t" not in line:
                raise MalformedMappingError(file_path, line_no, line)
            sample, barcode = line.split("\t", 2)[:2]
            pairs.append((sample, barcode))
    return pairs


# ----------------------------
# Length-partitioned index
# ----------------------------

@dataclass(frozen=True)
class BarcodeEntry:
    sample: str
    barcode: str

    @property
    def partition_id(self) -> str:
        return f"{self.sample}.{self.barcode}"


@dataclass(frozen=True)
class LengthShare:
    length: int
    count: int
    total: int

    @property
    def percent(self) -> float:
        return (self.count / self.total) * 100 if self.total else 0.0


@dataclass
class BarcodeIndex:
    """length -> {barcode -> entry}, queried longest length first."""

    by_length: Dict[int, Dict[str, BarcodeEntry]]
    _lengths: Tuple[int, ...] = field(init=False, repr=False)

    def __post_init__(self):
        self._lengths = tuple(sorted(self.by_length, reverse=True))

    @classmethod
    def build(cls, entries: Iterable[Tuple[str, str]], source: str | Path | None = None) -> "BarcodeIndex":
        by_length: Dict[int, Dict[str, BarcodeEntry]] = {}
        for raw_sample, raw_barcode in entries:
            sample = (raw_sample or "").strip()
            barcode = (raw_barcode or "").strip().upper()
            if not _BARCODE_RE.match(barcode):
                raise InvalidBarcodeError(barcode, sample)
            table = by_length.setdefault(len(barcode), {})
            if barcode in table:
                raise DuplicateBarcodeError(barcode, sample, table[barcode].sample)
            table[barcode] = BarcodeEntry(sample=sample, barcode=barcode)
        if not by_length:
            raise EmptyIndexError(source)
        return cls(by_length)

    @classmethod
    def from_file(cls, file_path: Path | str) -> "BarcodeIndex":
        return cls.build(load_barcode_file(file_path), source=file_path)

    def candidate_lengths(self) -> Tuple[int, ...]:
        return self._lengths

    def lookup(self, prefix: str, length: int) -> Optional[BarcodeEntry]:
        return self.by_length.get(length, {}).get(prefix)

    def entries(self) -> List[BarcodeEntry]:
        return [e for n in self._lengths for e in self.by_length[n].values()]

    def __len__(self) -> int:
        return sum(len(t) for t in self.by_length.values())

    def length_breakdown(self) -> List[LengthShare]:
        total = len(self)
        return [LengthShare(n, len(self.by_length[n]), total) for n in self._lengths]
