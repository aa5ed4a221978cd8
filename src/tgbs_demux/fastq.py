# src/tgbs_demux/fastq.py
from __future__ import annotations
from contextlib import contextmanager
from dataclasses import dataclass, replace
from pathlib import Path
from typing import IO, Iterator

from .errors import TruncatedRecordError


@dataclass(frozen=True)
class Record:
    header: str
    sequence: str
    plus: str
    quality: str

    def trimmed(self, n: int) -> "Record":
        """Drop the first `n` bases from sequence and quality."""
        return replace(self, sequence=self.sequence[n:], quality=self.quality[n:])

    def to_fastq(self) -> str:
        return f"{self.header}\n{self.sequence}\n{self.plus}\n{self.quality}\n"


def read_records(handle: IO[str], source: str = "<stream>") -> Iterator[Record]:
    """
    Lazily yield 4-line records from an open text handle.

    Stops at EOF; a trailing partial record raises TruncatedRecordError.
    """
    n = 0
    while True:
        header = handle.readline()
        if not header:
            break
        seq = handle.readline(); plus = handle.readline(); qual = handle.readline()
        n += 1
        if not qual:
            raise TruncatedRecordError(n, source)
        yield Record(header.rstrip("\r\n"), seq.rstrip("\r\n"), plus.rstrip("\r\n"), qual.rstrip("\r\n"))


@contextmanager
def open_records(path: Path | str) -> Iterator[Iterator[Record]]:
    with open(path, "r") as fq:
        yield read_records(fq, source=str(path))
