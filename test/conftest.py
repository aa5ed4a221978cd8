from __future__ import annotations
from pathlib import Path
import pytest


def fastq_text(*reads: tuple[str, str]) -> str:
    return "".join(f"@{name}\n{seq}\n+\n{'I' * len(seq)}\n" for name, seq in reads)


@pytest.fixture
def barcodes_file(tmp_path: Path) -> Path:
    p = tmp_path / "barcodes.txt"
    p.write_text("SampleA\tACGT\nSampleB\tGGTT\nSampleC\tTTAACC\n")
    return p


@pytest.fixture
def fastq_file(tmp_path: Path) -> Path:
    p = tmp_path / "reads.fastq"
    p.write_text(fastq_text(
        ("r1", "ACGTCATGAAAA"),    # SampleA
        ("r2", "ACGTTTTTAAAA"),    # barcode, no marker
        ("r3", "GGTTCATGCCCC"),    # SampleB
        ("r4", "TTAACCCATGGG"),    # SampleC (6 bp)
        ("r5", "CCCCCATGAAAA"),    # no barcode
        ("r6", "acgtcatggggg"),    # SampleA, lower case
    ))
    return p
