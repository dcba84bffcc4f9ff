"""Centralized logging setup shared by the CLI entrypoints."""

from __future__ import annotations

import logging
import os
from typing import Any, Dict, Optional

from constants import Constants


def configure_logging(quiet: bool = False, log_file: Optional[str] = None) -> None:
    """Configure the root logger once for the process.

    The level is taken from the MAKEDOCS_LOG_LEVEL environment variable
    (set from --loglevel by the CLI) and defaults to INFO.

    Args:
        quiet: Suppress console output entirely.
        log_file: Optional path for an additional file handler.
    """
    level_name = os.environ.get(Constants.ENV_LOG_LEVEL, "INFO").upper()
    level_value = getattr(logging, level_name, logging.INFO)

    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)

    if quiet:
        root.addHandler(logging.NullHandler())
    else:
        console = logging.StreamHandler()
        console.setFormatter(logging.Formatter(Constants.LOG_FORMAT))
        root.addHandler(console)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(logging.Formatter(Constants.LOG_FILE_FORMAT))
        root.addHandler(file_handler)

    root.setLevel(level_value)


def is_debug_enabled(logger: logging.Logger) -> bool:
    """Return True when DEBUG records would be emitted by this logger."""
    return logger.isEnabledFor(logging.DEBUG)


def extra_context(**fields: Any) -> Dict[str, Any]:
    """Build the `extra` mapping for structured debug records.

    Keys are namespaced under `context` so they never collide with
    LogRecord attributes.
    """
    return {"context": {k: v for k, v in fields.items() if v is not None}}
