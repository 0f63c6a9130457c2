"""Logging utilities.

We use Python's standard `logging` module with a plain structured format:

- Logs go to: `<log_dir>/<run_id>.log` (default log_dir: `<out_dir>/logs`)
- Also prints to stderr.
"""

from __future__ import annotations
import logging
import os
from typing import Optional

FORMAT = "%(asctime)s %(levelname)s %(name)s | %(message)s"
DATEFMT = "%Y-%m-%dT%H:%M:%S"


def setup_logging(out_dir: str, run_id: str, log_dir: Optional[str] = None, level: str = "INFO") -> str:
    """Attach file + console handlers to the root logger and return the log file path."""
    if log_dir is None:
        log_dir = os.path.join(out_dir, "logs")
    os.makedirs(log_dir, exist_ok=True)
    log_path = os.path.join(log_dir, f"{run_id}.log")

    root = logging.getLogger()
    root.setLevel(getattr(logging, str(level).upper(), logging.INFO))

    fmt = logging.Formatter(fmt=FORMAT, datefmt=DATEFMT)

    fh = logging.FileHandler(log_path, encoding="utf-8")
    fh.setFormatter(fmt)
    root.addHandler(fh)

    ch = logging.StreamHandler()
    ch.setFormatter(fmt)
    root.addHandler(ch)
    return log_path
