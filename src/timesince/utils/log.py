"""Logging utilities."""

from __future__ import annotations

import logging
import time
from pathlib import Path


def configure_logging(log_path: Path, *, level: str = "INFO", name: str = "timesince") -> logging.Logger:
    """Send records of the *name* logger tree to *log_path* only."""
    logger = logging.getLogger(name)
    logger.setLevel(level)
    for handler in logger.handlers:
        handler.close()
    logger.handlers = []
    log_path.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(log_path, encoding="utf-8")
    formatter = logging.Formatter("%(asctime)sZ %(levelname)s %(name)s %(message)s")
    formatter.converter = time.gmtime
    handler.setFormatter(formatter)
    logger.addHandler(handler)
    logger.propagate = False
    return logger
