#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/pdxdoc/logging_utils.py
"""Logging setup for the pdxdoc command line.

Log records always go to stderr so that exports written to stdout stay
clean. Trace mode adds timestamps, logger names and the thread name, since
image preloading decodes resources on worker threads.

"""

from __future__ import annotations

import logging
import sys
from typing import Optional

CONSOLE_FORMAT = "%(levelname)s: %(message)s"
TRACE_FORMAT = "[%(asctime)s] [%(levelname)s] [%(threadName)s] [%(name)s] %(message)s"
TRACE_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Libraries that log per glyph or per chunk at DEBUG
THIRD_PARTY_LOGGERS = ("PIL", "reportlab", "arabic_reshaper")


def resolve_level(log_level: int | str) -> int:
    """Turn a level name or number into a logging level, defaulting to INFO."""
    if isinstance(log_level, int):
        return log_level
    name = str(log_level).strip().upper()
    if name == "WARN":
        name = "WARNING"
    level = logging.getLevelName(name)
    return level if isinstance(level, int) else logging.INFO


def build_formatter(trace_mode: bool = False) -> logging.Formatter:
    if trace_mode:
        return logging.Formatter(TRACE_FORMAT, datefmt=TRACE_DATE_FORMAT)
    return logging.Formatter(CONSOLE_FORMAT)


def configure_logging(
    log_level: int | str,
    log_file: Optional[str] = None,
    trace_mode: bool = False,
) -> logging.Logger:
    """Replace the root handlers with a stderr handler and an optional file.

    Parameters
    ----------
    log_level : int | str
        Numeric level or level name such as "DEBUG" or "warn"
    log_file : str, optional
        Path of a file that receives the same records (appended, UTF-8)
    trace_mode : bool, default False
        Use the verbose trace format

    Returns
    -------
    logging.Logger
        The root logger

    """
    level = resolve_level(log_level)
    formatter = build_formatter(trace_mode)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    file_error: Optional[OSError] = None
    if log_file:
        try:
            handlers.append(logging.FileHandler(log_file, mode="a", encoding="utf-8"))
        except OSError as e:
            file_error = e

    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        root_logger.addHandler(handler)

    if file_error is not None:
        root_logger.warning("Could not create log file %s: %s", log_file, file_error)
    elif log_file:
        root_logger.info("Logging to file: %s", log_file)

    for name in THIRD_PARTY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.INFO))

    return root_logger
