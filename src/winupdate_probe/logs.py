"""Logging setup: size-capped local log file plus Rich output on stderr.

stdout is reserved for the single plugin output line the scheduler reads.
"""

from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler

LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


def configure_logging(
    log_file: str | Path | None,
    max_bytes: int = 1024 * 1024,
    backup_count: int = 3,
    verbose: bool = False,
) -> logging.Logger:
    """Configure the ``winupdate_probe`` logger for one run.

    Args:
        log_file: Rotating log file path, or None to skip file logging.
        max_bytes: Size at which the log file is rotated.
        backup_count: Number of rotated files to keep.
        verbose: Log DEBUG to the file and INFO to stderr. Otherwise the
            file gets INFO and stderr only shows errors.

    Returns:
        The configured package logger.
    """
    root = logging.getLogger("winupdate_probe")
    root.setLevel(logging.DEBUG if verbose else logging.INFO)
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()
    root.propagate = False

    console_handler = RichHandler(
        console=Console(stderr=True),
        show_path=False,
        markup=False,
    )
    console_handler.setLevel(logging.INFO if verbose else logging.ERROR)
    root.addHandler(console_handler)

    if log_file is not None:
        path = Path(log_file)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            file_handler = RotatingFileHandler(
                path,
                maxBytes=max_bytes,
                backupCount=backup_count,
                encoding="utf-8",
            )
        except OSError as exc:
            print(f"Warning: cannot open log file {path}: {exc}", file=sys.stderr)
        else:
            file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
            file_handler.setLevel(logging.DEBUG)
            root.addHandler(file_handler)

    return root
