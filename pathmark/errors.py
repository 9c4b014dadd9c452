"""
Error types and error logging for pathmark.

Logs full stack traces for debugging while showing clean messages to users.
"""

import os
import sys
import traceback
from datetime import datetime, timezone
from pathlib import Path


class PathmarkError(Exception):
    """Base class for pathmark errors."""


class NotFoundError(PathmarkError):
    """Selector did not resolve, or the bookmarked directory no longer exists."""


class InvalidSelector(NotFoundError):
    """Selector is neither an index nor a usable name.

    Reported exactly like NotFoundError.
    """


class StorageUnreadable(PathmarkError):
    """Store file exists but cannot be parsed.

    Recovered inside PathStore.load(); never raised to callers.
    """


class StorageWriteError(PathmarkError):
    """Store file could not be written. The previous content is left intact."""


ERROR_LOG_FILENAME = "pathmark-errors.log"


def _format_entry(exc: BaseException, context: str) -> str:
    """One log entry: header line, command line, then the traceback."""
    stamp = datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")
    header = f"--- {stamp} {type(exc).__name__}"
    if context:
        header += f" ({context})"
    lines = [
        header,
        "argv: " + " ".join(sys.argv),
        *traceback.format_exception(exc),
    ]
    return "\n".join(line.rstrip("\n") for line in lines) + "\n\n"


def log_exception(exc: BaseException, context: str = "") -> Path:
    """
    Append an exception and its traceback to the error log in the home directory.

    Users see a one-line message; the log keeps the details. Failing to
    write the log is ignored.

    Returns:
        Path to the error log file
    """
    from .config import get_home_dir

    log_path = get_home_dir() / ERROR_LOG_FILENAME
    entry = _format_entry(exc, context)
    try:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        fd = os.open(log_path, os.O_WRONLY | os.O_CREAT | os.O_APPEND, 0o600)
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(entry)
    except OSError:
        pass
    return log_path
