"""
User-facing operations on a bookmark store.

Each function takes the store explicitly and translates intent into
PathStore calls. Navigation changes this process's working directory;
not-found conditions raise NotFoundError and leave state untouched.
"""

import logging
import os
from pathlib import Path
from typing import Iterator, Optional

from .errors import NotFoundError, StorageWriteError
from .store import PathStore, SelectorInput
from .types import Bookmark, ByIndex, describe, parse_selector

logger = logging.getLogger(__name__)


def record(store: PathStore, name: Optional[str] = None, cwd: Optional[Path] = None) -> Bookmark:
    """Bookmark the current working directory (or ``cwd``) under an optional name."""
    directory = Path(cwd).expanduser() if cwd is not None else Path(os.getcwd())
    if name and name.strip() and isinstance(parse_selector(name), ByIndex):
        # Numeric selectors always resolve as positions
        logger.warning("Name '%s' is numeric; select this bookmark by its number instead", name)
    return store.append(str(directory.absolute()), name or "")


def list_bookmarks(store: PathStore) -> Iterator[Bookmark]:
    """Yield bookmarks in stored order, read fresh from the store on each call."""
    yield from store.load()


def resolve(store: PathStore, selector: SelectorInput) -> Bookmark:
    """
    Resolve a selector to a bookmark.

    Raises:
        NotFoundError: If nothing matches (InvalidSelector for empty input)
    """
    sel = parse_selector(selector)
    bookmark = store.find(sel)
    if bookmark is None:
        raise NotFoundError(f"No bookmark {describe(sel)}")
    return bookmark


def _navigate(bookmark: Bookmark) -> None:
    if not os.path.isdir(bookmark.path):
        raise NotFoundError(
            f"Bookmark #{bookmark.sequence_number} points to a missing directory: {bookmark.path}"
        )
    os.chdir(bookmark.path)
    logger.debug("Changed directory to %s", bookmark.path)


def select(store: PathStore, selector: SelectorInput) -> Bookmark:
    """
    Change the working directory to the selected bookmark.

    The bookmark is remembered as the last one visited. That bookkeeping
    is best-effort: if the store can't be written, a warning is logged
    and the navigation still counts as done.

    Raises:
        NotFoundError: If the selector doesn't resolve or the directory is gone
    """
    bookmark = resolve(store, selector)
    _navigate(bookmark)
    try:
        return store.mark_last(bookmark.sequence_number) or bookmark
    except StorageWriteError as e:
        logger.warning("Could not remember last bookmark: %s", e)
        return bookmark


def remove(store: PathStore, selector: SelectorInput) -> Bookmark:
    """Delete the selected bookmark. Raises NotFoundError if nothing matches."""
    sel = parse_selector(selector)
    bookmark = store.remove(sel)
    if bookmark is None:
        raise NotFoundError(f"No bookmark {describe(sel)}")
    return bookmark


def set_quick(store: PathStore, selector: SelectorInput) -> Bookmark:
    """Flag the selected bookmark as the quick path."""
    sel = parse_selector(selector)
    bookmark = store.set_quick(sel)
    if bookmark is None:
        raise NotFoundError(f"No bookmark {describe(sel)}")
    return bookmark


def get_quick(store: PathStore) -> Bookmark:
    """
    Change the working directory to the quick path.

    Raises:
        NotFoundError: If no quick path is set or its directory is gone
    """
    bookmark = store.get_quick()
    if bookmark is None:
        raise NotFoundError("No quick path set")
    _navigate(bookmark)
    return bookmark


def last(store: PathStore) -> Bookmark:
    """Change the working directory to the most recently selected bookmark."""
    bookmark = store.get_last()
    if bookmark is None:
        raise NotFoundError("No bookmark has been selected yet")
    _navigate(bookmark)
    return bookmark


def clear_all(store: PathStore) -> int:
    """Remove every bookmark. Returns how many were removed."""
    return store.clear()
