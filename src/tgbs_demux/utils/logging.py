from __future__ import annotations
import logging
from pathlib import Path
from typing import Optional
from rich.logging import RichHandler

_DEF_LEVEL = logging.WARNING
_FILE_FMT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"


def setup_logging(verbosity: int = 0, log_file: Optional[Path] = None) -> None:
    level = _DEF_LEVEL
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG
    root = logging.getLogger()
    root.setLevel(level)
    # clear existing
    for h in list(root.handlers):
        root.removeHandler(h)
        h.close()
    handler = RichHandler(rich_tracebacks=True, show_time=False)
    root.addHandler(handler)
    if log_file is not None:
        add_log_file(log_file)


def add_log_file(log_file: Path) -> logging.FileHandler:
    """Mirror every record reaching the root logger into `log_file` (truncated)."""
    log_file.parent.mkdir(parents=True, exist_ok=True)
    fh = logging.FileHandler(log_file, mode="w")
    fh.setFormatter(logging.Formatter(_FILE_FMT))
    logging.getLogger().addHandler(fh)
    return fh
