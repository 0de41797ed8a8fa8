"""Logging setup for bundlebench.

Progress and diagnostics go to stderr so that stdout carries only the
benchmark report (or the ``--json`` document).  An optional log file
records every trial at DEBUG so a failed session can be inspected
afterwards.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import click

_LOGGER_NAME = "bundlebench"
_FILE_FORMAT = "%(asctime)s %(levelname)-8s %(message)s"

_LEVEL_COLORS = {
    logging.DEBUG: "bright_black",
    logging.WARNING: "yellow",
    logging.ERROR: "red",
    logging.CRITICAL: "red",
}


class _ConsoleFormatter(logging.Formatter):
    """``LEVEL message``, with the level tinted when *color* is set."""

    def __init__(self, color: bool) -> None:
        super().__init__("%(message)s")
        self.color = color

    def format(self, record: logging.LogRecord) -> str:
        level = f"{record.levelname:<8s}"
        fg = _LEVEL_COLORS.get(record.levelno)
        if self.color and fg:
            level = click.style(level, fg=fg, bold=record.levelno >= logging.ERROR)
        return f"{level} {super().format(record)}"


def setup_logging(
    *,
    verbose: bool = False,
    quiet: bool = False,
    log_file: Path | None = None,
) -> logging.Logger:
    """Configure and return the bundlebench logger.

    Args:
        verbose: Show per-trial timings (DEBUG) on the console.
        quiet: Only warnings and errors on the console. Ignored if *verbose* is True.
        log_file: Also log everything at DEBUG to this file.  Missing parent
            directories are created.

    Returns:
        The configured ``bundlebench`` logger.
    """
    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(logging.DEBUG)
    logger.handlers.clear()
    logger.propagate = False

    console = logging.StreamHandler(sys.stderr)
    if verbose:
        console.setLevel(logging.DEBUG)
    elif quiet:
        console.setLevel(logging.WARNING)
    else:
        console.setLevel(logging.INFO)
    isatty = getattr(sys.stderr, "isatty", None)
    console.setFormatter(_ConsoleFormatter(color=bool(isatty and isatty())))
    logger.addHandler(console)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        fh = logging.FileHandler(log_file, encoding="utf-8")
        fh.setLevel(logging.DEBUG)
        fh.setFormatter(logging.Formatter(_FILE_FORMAT))
        logger.addHandler(fh)

    return logger
