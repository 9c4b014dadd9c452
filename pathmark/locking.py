"""
Advisory file lock serializing read-modify-write cycles on a store file.

Cooperating pathmark processes take an exclusive flock on a sibling
``.lock`` file before loading and hold it until the rewrite is done.
Writers that do not take the lock are not prevented from racing.
"""

import fcntl
import logging
import os
import threading
from pathlib import Path

logger = logging.getLogger(__name__)


class StoreLock:
    """Exclusive, re-entrant-per-instance file lock."""

    def __init__(self, lock_path: Path):
        self._lock_path = Path(lock_path)
        self._fd: int | None = None
        self._depth = 0
        self._thread_lock = threading.RLock()

    @property
    def path(self) -> Path:
        return self._lock_path

    def acquire(self, blocking: bool = True) -> bool:
        """
        Take the lock.

        Args:
            blocking: Wait for the lock if another process holds it

        Returns:
            True if the lock was acquired, False if non-blocking and busy
        """
        if not self._thread_lock.acquire(blocking=blocking):
            return False
        if self._depth:
            self._depth += 1
            return True

        self._lock_path.parent.mkdir(parents=True, exist_ok=True)
        fd = os.open(self._lock_path, os.O_RDWR | os.O_CREAT, 0o600)
        flags = fcntl.LOCK_EX if blocking else fcntl.LOCK_EX | fcntl.LOCK_NB
        try:
            fcntl.flock(fd, flags)
        except BlockingIOError:
            os.close(fd)
            self._thread_lock.release()
            return False
        except BaseException:
            os.close(fd)
            self._thread_lock.release()
            raise
        self._fd = fd
        self._depth = 1
        logger.debug("Acquired %s", self._lock_path)
        return True

    def release(self) -> None:
        if not self._depth:
            return
        self._depth -= 1
        if self._depth == 0 and self._fd is not None:
            fcntl.flock(self._fd, fcntl.LOCK_UN)
            os.close(self._fd)
            self._fd = None
            logger.debug("Released %s", self._lock_path)
        self._thread_lock.release()

    def is_locked(self) -> bool:
        """Probe whether some process currently holds the lock."""
        if self._depth:
            return True
        if not self._lock_path.exists():
            return False
        fd = os.open(self._lock_path, os.O_RDWR)
        try:
            fcntl.flock(fd, fcntl.LOCK_EX | fcntl.LOCK_NB)
        except BlockingIOError:
            return True
        else:
            fcntl.flock(fd, fcntl.LOCK_UN)
            return False
        finally:
            os.close(fd)

    def __enter__(self) -> "StoreLock":
        self.acquire()
        return self

    def __exit__(self, *exc) -> None:
        self.release()
