from pathlib import Path
import pytest
from conftest import fastq_text
from tgbs_demux.barcodes import BarcodeIndex
from tgbs_demux.config import RunConfig
from tgbs_demux.demux_core import PARTITIONS_TSV, SUMMARY_TSV, demultiplex, demux_barcodes, run_demux
from tgbs_demux.errors import DuplicateBarcodeError, TruncatedRecordError
from tgbs_demux.fastq import Record, open_records
from tgbs_demux.partitions import PartitionBuffer

def test_demux_barcodes(barcodes_file: Path, fastq_file: Path, tmp_path: Path):
    out = tmp_path / "out"
    res = demux_barcodes(barcodes_file, fastq_file, out)
    s = res.stats
    assert (s.records_seen, s.records_classified, s.marker_mismatch, s.no_barcode) == (6, 4, 1, 1)

    a = (out / "SampleA.ACGT.fastq").read_text().splitlines()
    assert a == ["@r1", "CATGAAAA", "+", "IIIIIIII", "@r6", "CATGGGGG", "+", "IIIIIIII"]
    assert (out / "SampleC.TTAACC.fastq").read_text().splitlines()[1] == "CATGGG"
    assert sorted(p.name for p in out.glob("*.fastq")) == [
        "SampleA.ACGT.fastq", "SampleB.GGTT.fastq", "SampleC.TTAACC.fastq",
    ]

    summary = (out / SUMMARY_TSV).read_text().splitlines()
    assert summary[1].split("\t")[:4] == ["6", "4", "1", "1"]
    parts = (out / PARTITIONS_TSV).read_text().splitlines()
    assert "SampleA.ACGT\tSampleA\tACGT\t2" in parts
    assert "SampleB.GGTT\tSampleB\tGGTT\t1" in parts

def test_small_buffer_same_output(barcodes_file: Path, fastq_file: Path, tmp_path: Path):
    big = demux_barcodes(barcodes_file, fastq_file, tmp_path / "big")
    small = demux_barcodes(barcodes_file, fastq_file, tmp_path / "small", buffer_size=1)
    assert small.flushes == 4 and big.flushes == 1
    for p in (tmp_path / "big").glob("*.fastq"):
        assert (tmp_path / "small" / p.name).read_text() == p.read_text()

def test_threshold_scenario(tmp_path: Path):
    idx = BarcodeIndex.build([("SampleA", "ACGT")])
    buf = PartitionBuffer(tmp_path, threshold=2)
    seen = []

    def records():
        for i in range(3):
            yield Record(f"@r{i}", "ACGTCATGAAAA", "+", "############")
            seen.append((tmp_path / "SampleA.ACGT.fastq").exists())

    stats = demultiplex(records(), idx, buf)
    assert seen == [False, True, True]
    assert len((tmp_path / "SampleA.ACGT.fastq").read_text().splitlines()) == 12
    assert stats.records_classified == 3

def test_final_flush_always_runs(tmp_path: Path):
    idx = BarcodeIndex.build([("SampleA", "ACGT")])
    buf = PartitionBuffer(tmp_path, threshold=1000)
    demultiplex([Record("@r", "ACGTCATG", "+", "IIIIIIII")], idx, buf)
    assert (tmp_path / "SampleA.ACGT.fastq").exists()
    assert len(buf) == 0

def test_progress_callback(barcodes_file: Path, fastq_file: Path, tmp_path: Path):
    idx = BarcodeIndex.from_file(barcodes_file)
    ticks = []
    with open_records(fastq_file) as recs:
        demultiplex(recs, idx, PartitionBuffer(tmp_path), on_progress=lambda s: ticks.append(s.records_seen), progress_every=2)
    assert ticks == [2, 4, 6]

def test_duplicate_barcode_stops_before_output(tmp_path: Path, fastq_file: Path):
    bc = tmp_path / "dup.txt"
    bc.write_text("SampleA\tACGT\nSampleC\tACGT\n")
    out = tmp_path / "out"
    with pytest.raises(DuplicateBarcodeError):
        run_demux(RunConfig(barcodes=bc, fastq=fastq_file, output=out))
    assert not out.exists()

def test_truncated_input_keeps_flushed_batches(barcodes_file: Path, tmp_path: Path):
    fq = tmp_path / "bad.fastq"
    fq.write_text(fastq_text(("r1", "ACGTCATGAA"), ("r2", "ACGTCATGTT")) + "@r3\nACGT\n")
    out = tmp_path / "out"
    with pytest.raises(TruncatedRecordError):
        run_demux(RunConfig(barcodes=barcodes_file, fastq=fq, output=out, buffer_size=1))
    assert len((out / "SampleA.ACGT.fastq").read_text().splitlines()) == 8
