# src/tgbs_demux/errors.py
from __future__ import annotations
from pathlib import Path


class ConfigurationError(ValueError):
    """Barcode mapping problems detected before any read is processed."""


class DuplicateBarcodeError(ConfigurationError):
    def __init__(self, barcode: str, sample: str = "", existing: str = ""):
        self.barcode = barcode
        self.sample = sample
        self.existing = existing
        msg = f"Duplicate barcode '{barcode}' was found"
        if sample and existing:
            msg += f" (sample '{sample}' collides with '{existing}')"
        super().__init__(msg)


class EmptyIndexError(ConfigurationError):
    def __init__(self, source: str | Path | None = None):
        self.source = source
        where = f" in '{source}'" if source else ""
        super().__init__(f"No barcodes were found{where}; cannot continue")


class InvalidBarcodeError(ConfigurationError):
    def __init__(self, barcode: str, sample: str = ""):
        self.barcode = barcode
        self.sample = sample
        super().__init__(f"Invalid barcode '{barcode}' for sample '{sample}' (expected A/C/G/T only)")


class MalformedMappingError(ConfigurationError):
    def __init__(self, path: str | Path, line_no: int, line: str):
        self.path = path
        self.line_no = line_no
        super().__init__(f"{path}:{line_no}: expected 'sample<TAB>barcode', got {line!r}")


class TruncatedRecordError(ValueError):
    def __init__(self, record_no: int, source: str = "<stream>"):
        self.record_no = record_no
        super().__init__(f"Truncated FASTQ record #{record_no} in {source}")


class PartitionWriteError(OSError):
    """Raised when a partition file cannot be opened or appended to."""

    def __init__(self, path: Path, cause: OSError):
        self.path = path
        super().__init__(cause.errno, f"Cannot append to output file: {cause.strerror or cause}", str(path))
