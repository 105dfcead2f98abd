"""
Intcode VM: Logging Setup

Library modules only create loggers (``logging.getLogger(__name__)``);
handlers are attached here, once, by the CLI.

Console output goes through rich's RichHandler. An optional file
handler captures everything at DEBUG.
"""

from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

from .config import LOG_DATE_FORMAT, LOG_FILE_FORMAT, LOG_NAME


def setup_logging(
    name: str = LOG_NAME,
    console_level: int = logging.WARNING,
    log_file: Optional[Path] = None,
    log_dir: Optional[Path] = None,
) -> logging.Logger:
    """
    Configure and return the package logger.

    ``log_file`` writes to that exact path; ``log_dir`` writes a
    timestamped ``<name>_YYYYMMDD_HHMMSS.log`` inside it. With neither,
    only the console handler is attached.
    """
    logger = logging.getLogger(name)
    if logger.handlers:
        return logger
    logger.setLevel(logging.DEBUG)
    logger.propagate = False

    # ── Console handler: stderr, so program output on stdout stays clean ──
    ch = RichHandler(
        console=Console(stderr=True),
        level=console_level,
        show_time=True,
        show_path=False,
        rich_tracebacks=True,
    )
    ch.setLevel(console_level)
    logger.addHandler(ch)

    # ── File handler: captures everything (DEBUG+) ──
    if log_file is None and log_dir is not None:
        ts = datetime.now().strftime("%Y%m%d_%H%M%S")
        log_file = Path(log_dir) / f"{name}_{ts}.log"
    if log_file is not None:
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        fh = logging.FileHandler(str(log_file), encoding="utf-8")
        fh.setLevel(logging.DEBUG)
        fh.setFormatter(logging.Formatter(LOG_FILE_FORMAT, datefmt=LOG_DATE_FORMAT))
        logger.addHandler(fh)
        logger.info("Log file: %s", log_file)

    return logger


def verbosity_to_level(verbose: int, quiet: bool = False) -> int:
    """Map -v count / -q to a console level."""
    if quiet:
        return logging.ERROR
    if verbose <= 0:
        return logging.WARNING
    if verbose == 1:
        return logging.INFO
    return logging.DEBUG
