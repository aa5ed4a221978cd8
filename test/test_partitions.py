from pathlib import Path
import pytest
from tgbs_demux.errors import PartitionWriteError
from tgbs_demux.fastq import Record, read_records
from tgbs_demux.partitions import PartitionBuffer

def rec(i: int) -> Record:
    return Record(f"@read{i}", "CATGAAAA", "+", "########")

def n_records(p: Path) -> int:
    with open(p) as fh:
        return len(list(read_records(fh)))

def test_threshold_flush_then_final_append(tmp_path: Path):
    buf = PartitionBuffer(tmp_path, threshold=2)
    out = tmp_path / "SampleA.ACGT.fastq"

    buf.accept("SampleA.ACGT", rec(1))
    assert not buf.maybe_flush()
    assert not out.exists()

    buf.accept("SampleA.ACGT", rec(2))
    assert buf.maybe_flush()
    assert n_records(out) == 2
    assert len(buf) == 0

    buf.accept("SampleA.ACGT", rec(3))
    assert not buf.maybe_flush()
    buf.flush()
    assert n_records(out) == 3
    assert out.read_text().splitlines()[::4] == ["@read1", "@read2", "@read3"]
    assert buf.written["SampleA.ACGT"] == 3
    assert buf.flushes == 2

def test_threshold_counts_all_partitions(tmp_path: Path):
    buf = PartitionBuffer(tmp_path, threshold=3)
    buf.accept("A.ACGT", rec(1))
    buf.accept("B.GGTT", rec(2))
    buf.accept("A.ACGT", rec(3))
    assert buf.maybe_flush()
    assert n_records(tmp_path / "A.ACGT.fastq") == 2
    assert n_records(tmp_path / "B.GGTT.fastq") == 1

def test_flush_is_idempotent(tmp_path: Path):
    buf = PartitionBuffer(tmp_path, threshold=10)
    buf.accept("A.ACGT", rec(1))
    assert buf.flush() == 1
    before = (tmp_path / "A.ACGT.fastq").read_text()
    assert buf.flush() == 0
    assert (tmp_path / "A.ACGT.fastq").read_text() == before
    assert buf.flushes == 1

def test_empty_flush_creates_nothing(tmp_path: Path):
    buf = PartitionBuffer(tmp_path)
    buf.flush()
    assert list(tmp_path.iterdir()) == []

def test_appends_to_existing_file(tmp_path: Path):
    out = tmp_path / "A.ACGT.fastq"
    out.write_text(rec(0).to_fastq())
    buf = PartitionBuffer(tmp_path)
    buf.accept("A.ACGT", rec(1))
    buf.flush()
    assert n_records(out) == 2

def test_unwritable_output(tmp_path: Path):
    buf = PartitionBuffer(tmp_path / "missing_dir")
    buf.accept("A.ACGT", rec(1))
    with pytest.raises(PartitionWriteError) as ei:
        buf.flush()
    assert isinstance(ei.value, OSError)
    assert ei.value.path == tmp_path / "missing_dir" / "A.ACGT.fastq"

def test_threshold_must_be_positive(tmp_path: Path):
    with pytest.raises(ValueError):
        PartitionBuffer(tmp_path, threshold=0)
