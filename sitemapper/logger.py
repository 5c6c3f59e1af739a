# === FILE: sitemapper/logger.py ===
"""Project-wide logging configuration for **SiteMapper**.

Highlights
----------
* Unified format for console and optional file output (with rotation).
* Single, importable instance :data:`logger` – simply::

      from sitemapper.logger import logger
      logger.info("Crawl started")
* Re‑configurable at runtime via :func:`configure`.

Console output goes to *stderr*: stdout belongs to the CLI's JSON output.
"""
from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Final, Union

# --------------------------------------------------------------------------- #
# Constants & basic types                                                     #
# --------------------------------------------------------------------------- #

DEFAULT_FORMAT: Final[str] = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOGGER_NAME: Final[str] = "SiteMapper"

_LevelT = Union[int, str]


# --------------------------------------------------------------------------- #
# Helper builders                                                             #
# --------------------------------------------------------------------------- #


def _console_handler(fmt: str) -> logging.StreamHandler:
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(fmt))
    return handler


def _file_handler(file: Path | str, fmt: str) -> RotatingFileHandler:
    handler = RotatingFileHandler(
        filename=str(file),
        maxBytes=5 * 1024 * 1024,
        backupCount=3,
        encoding="utf-8",
    )
    handler.setFormatter(logging.Formatter(fmt))
    return handler


# --------------------------------------------------------------------------- #
# Public API                                                                  #
# --------------------------------------------------------------------------- #


def configure(
    *,
    level: _LevelT = "INFO",
    log_file: str | Path | None = None,
    log_format: str = DEFAULT_FORMAT,
    replace_handlers: bool = True,
) -> logging.Logger:
    """(Re)configure the project logger.

    Parameters
    ----------
    level
        Numeric or textual logging level (e.g. ``"DEBUG"``).
    log_file
        Path to a logfile. *None* → console‑only output.
    log_format
        Format string for :class:`logging.Formatter`.
    replace_handlers
        *True* – remove existing handlers; *False* – just append new one(s).
    """
    lg = logging.getLogger(LOGGER_NAME)
    lg.setLevel(level)

    if replace_handlers:
        lg.handlers.clear()

    lg.addHandler(_console_handler(log_format))

    if log_file is not None:
        lg.addHandler(_file_handler(log_file, log_format))

    lg.propagate = False
    return lg


def init_logging(
    level: _LevelT = "INFO",
    log_file: str | Path | None = None,
    log_format: str = DEFAULT_FORMAT,
) -> logging.Logger:
    """Shortcut used by the CLI: replace handlers, console + optional file."""
    return configure(level=level, log_file=log_file, log_format=log_format, replace_handlers=True)


# --------------------------------------------------------------------------- #
# Ready‑to‑use instance                                                       #
# --------------------------------------------------------------------------- #

logger: logging.Logger = configure(level="WARNING")

__all__ = ["logger", "configure", "init_logging", "LOGGER_NAME", "DEFAULT_FORMAT"]
