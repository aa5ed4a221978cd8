# src/tgbs_demux/config.py
from __future__ import annotations
from pydantic import BaseModel, Field, field_validator
from pathlib import Path
from typing import Any, Dict, Optional
import yaml

from .classify import RE_FEATURE
from .partitions import BUFFER


class RunConfig(BaseModel):
    barcodes: Path = Field(..., description="Tab-separated sample/barcode file")
    fastq: Path = Field(..., description="Plain FASTQ file with reads to demultiplex")
    output: Path = Field(..., description="Directory for per-sample FASTQ files")
    marker: str = Field(RE_FEATURE, description="Restriction-site remnant expected after the barcode")
    buffer_size: int = Field(BUFFER, ge=1, description="Reads kept in memory before writing output")
    progress_every: int = Field(1000, ge=1, description="Progress update interval, in reads")
    force: bool = Field(False, description="Delete an existing output directory without asking")

    @field_validator("marker")
    @classmethod
    def _check_marker(cls, v: str) -> str:
        v = v.strip().upper()
        if not v or set(v) - set("ACGT"):
            raise ValueError(f"marker must be a non-empty A/C/G/T sequence, got {v!r}")
        return v

    @property
    def log_path(self) -> Path:
        return Path(f"{self.output}.log")

    @classmethod
    def from_yaml(cls, path: Path, **overrides: Any) -> "RunConfig":
        with open(path, "r") as fh:
            data: Dict[str, Any] = yaml.safe_load(fh) or {}
        data.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**data)

    @classmethod
    def from_options(cls, config: Optional[Path] = None, **options: Any) -> "RunConfig":
        """Build from an optional YAML file; non-None CLI options win."""
        if config is not None:
            return cls.from_yaml(config, **options)
        return cls(**{k: v for k, v in options.items() if v is not None})
