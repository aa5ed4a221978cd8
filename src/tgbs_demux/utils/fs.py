from __future__ import annotations
from pathlib import Path
import shutil


def ensure_dir(p: Path) -> Path:
    p.mkdir(parents=True, exist_ok=True)
    return p


def remove_path(p: Path) -> None:
    if p.is_dir() and not p.is_symlink():
        shutil.rmtree(p)
    else:
        p.unlink()


def prepare_output_dir(out: Path, overwrite: bool = False) -> Path:
    """
    Create a fresh output directory.

    An existing directory (or file) at `out` is removed when `overwrite` is set,
    otherwise FileExistsError is raised so the caller can ask first.
    """
    if out.exists() or out.is_symlink():
        if not overwrite:
            raise FileExistsError(f"Output path '{out}' already exists")
        remove_path(out)
    return ensure_dir(out)
