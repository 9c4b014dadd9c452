"""
Shared pytest fixtures for pathmark tests.

Every test gets its own PATHMARK_HOME so nothing touches ~/.pathmark.
"""

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

import pytest

from pathmark.store import PathStore


@pytest.fixture(autouse=True)
def isolated_home(tmp_path: Path, monkeypatch) -> Path:
    """Point PATHMARK_HOME at a temporary directory."""
    home = tmp_path / "home"
    monkeypatch.setenv("PATHMARK_HOME", str(home))
    monkeypatch.delenv("PATHMARK_STORE", raising=False)
    monkeypatch.delenv("PATHMARK_VERBOSE", raising=False)
    return home


@pytest.fixture
def store_path(tmp_path: Path) -> Path:
    """Location of the store file (not created)."""
    return tmp_path / "data" / "paths.json"


@pytest.fixture
def store(store_path: Path) -> PathStore:
    """A fresh, empty PathStore."""
    return PathStore(store_path)


@pytest.fixture
def dirs(tmp_path: Path) -> dict[str, Path]:
    """A few real directories to bookmark."""
    result = {}
    for name in ("alpha", "beta", "gamma"):
        d = tmp_path / "dirs" / name
        d.mkdir(parents=True)
        result[name] = d.resolve()
    return result


@pytest.fixture(autouse=True)
def drop_ops_log_handlers():
    """Remove operations-log handlers a test attached to the pathmark logger."""
    yield
    logger = logging.getLogger("pathmark")
    for h in list(logger.handlers):
        if isinstance(h, RotatingFileHandler):
            logger.removeHandler(h)
            h.close()
