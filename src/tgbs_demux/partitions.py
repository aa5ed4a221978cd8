# src/tgbs_demux/partitions.py
from __future__ import annotations
from collections import Counter
from pathlib import Path
from typing import Dict, List
import logging

from .errors import PartitionWriteError
from .fastq import Record

log = logging.getLogger(__name__)

BUFFER = 1_000_000  # debarcoded reads kept in memory before writing output


class PartitionBuffer:
    """
    Per-partition in-memory record lists, appended to
    `<output_dir>/<partition_id>.fastq` in batches.

    The threshold is global: once `threshold` records are buffered across all
    partitions, every non-empty partition is written out. Files are only ever
    opened in append mode, so repeated flushes within a run accumulate.
    """

    def __init__(self, output_dir: Path | str, threshold: int = BUFFER):
        if threshold < 1:
            raise ValueError(f"threshold must be >= 1, got {threshold}")
        self.output_dir = Path(output_dir)
        self.threshold = threshold
        self.pending = 0
        self.flushes = 0
        self.written: Counter[str] = Counter()
        self._pool: Dict[str, List[Record]] = {}

    def path_for(self, partition_id: str) -> Path:
        return self.output_dir / f"{partition_id}.fastq"

    def accept(self, partition_id: str, record: Record) -> None:
        self._pool.setdefault(partition_id, []).append(record)
        self.pending += 1

    def maybe_flush(self) -> bool:
        if self.pending < self.threshold:
            return False
        self.flush()
        return True

    def flush(self) -> int:
        """Append every buffered partition to disk; returns records written."""
        total = 0
        for pid in list(self._pool):
            records = self._pool.pop(pid)
            if not records:
                continue
            self._append(pid, records)
            self.written[pid] += len(records)
            total += len(records)
        self.pending = 0
        if total:
            self.flushes += 1
            log.debug(f"flush #{self.flushes}: {total} reads")
        return total

    def _append(self, partition_id: str, records: List[Record]) -> None:
        out = self.path_for(partition_id)
        try:
            with open(out, "a") as fh:
                fh.writelines(r.to_fastq() for r in records)
        except OSError as e:
            raise PartitionWriteError(out, e) from e

    def __len__(self) -> int:
        return self.pending
