"""
Logging configuration for pathmark.

Quiet by default: only warnings reach the terminal.
"""

import logging
import sys
import warnings
from logging.handlers import RotatingFileHandler
from pathlib import Path

_CONSOLE_HANDLER_NAME = "pathmark-console"


def _console_handler() -> logging.Handler | None:
    logger = logging.getLogger("pathmark")
    for h in logger.handlers:
        if h.get_name() == _CONSOLE_HANDLER_NAME:
            return h
    return None


def configure_quiet_mode(quiet: bool = True):
    """
    Show only pathmark warnings on stderr, as ``Warning: <message>``.

    Args:
        quiet: If True, suppress Python warnings as well.
    """
    if quiet:
        warnings.filterwarnings("ignore")

    pathmark_logger = logging.getLogger("pathmark")
    handler = _console_handler()
    if handler is None:
        handler = logging.StreamHandler(sys.stderr)
        handler.set_name(_CONSOLE_HANDLER_NAME)
        pathmark_logger.addHandler(handler)
    handler.setLevel(logging.WARNING)
    handler.setFormatter(logging.Formatter("Warning: %(message)s"))
    if pathmark_logger.level == logging.NOTSET:
        pathmark_logger.setLevel(logging.WARNING)


def enable_debug_mode():
    """Enable debug-level logging to stderr."""
    warnings.filterwarnings("default")

    pathmark_logger = logging.getLogger("pathmark")
    pathmark_logger.setLevel(logging.DEBUG)

    handler = _console_handler()
    if handler is None:
        handler = logging.StreamHandler(sys.stderr)
        handler.set_name(_CONSOLE_HANDLER_NAME)
        pathmark_logger.addHandler(handler)
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(logging.Formatter(
        "%(asctime)s %(levelname)s %(name)s: %(message)s",
        datefmt="%H:%M:%S"
    ))


def configure_ops_log(home: Path) -> RotatingFileHandler | None:
    """Configure a persistent operations log in the pathmark home directory.

    Writes to {home}/pathmark-ops.log using a rotating file handler
    (1MB max, 3 backups). Only active once the home directory exists.
    Returns the handler so it can be removed, or None.
    """
    home = Path(home)
    if not home.is_dir():
        return None

    log_path = home / "pathmark-ops.log"
    pathmark_logger = logging.getLogger("pathmark")
    for h in pathmark_logger.handlers:
        if isinstance(h, RotatingFileHandler) and Path(h.baseFilename) == log_path.resolve():
            return h

    handler = RotatingFileHandler(
        str(log_path),
        maxBytes=1_000_000,
        backupCount=3,
    )
    handler.setLevel(logging.INFO)
    handler.setFormatter(logging.Formatter(
        "%(asctime)s %(levelname)s %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    ))
    pathmark_logger.addHandler(handler)
    # Let INFO through to the file even in quiet mode; the console
    # handler keeps its own WARNING threshold
    if pathmark_logger.level == logging.NOTSET or pathmark_logger.level > logging.INFO:
        pathmark_logger.setLevel(logging.INFO)
    return handler
