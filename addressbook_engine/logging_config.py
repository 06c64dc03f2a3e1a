"""
Logging setup for the address book processes.

``setup_logging`` attaches a console handler (and optionally a file handler)
to the root logger exactly once. Engine modules only ever call
``logging.getLogger(__name__)``; the CLI and GUI entry points decide where the
records go.
"""

from __future__ import annotations

import logging
from pathlib import Path

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(level: str = "INFO", logfile: Path | None = None) -> None:
    """
    Configure the root logger.

    Parameters
    ----------
    level:
        Level name, case-insensitive. Unknown names fall back to INFO.
    logfile:
        Optional file to log to in addition to the console. Parent folders
        are created.

    Notes
    -----
    If the root logger already has handlers (tests, repeated entry point
    calls), this function does nothing.
    """
    root = logging.getLogger()
    if root.handlers:
        return

    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    console = logging.StreamHandler()
    console.setFormatter(formatter)
    root.addHandler(console)

    if logfile is not None:
        logfile.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(logfile, encoding="utf-8")
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)
