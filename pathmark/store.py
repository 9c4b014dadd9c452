"""
Persistent store of directory bookmarks.

The store is a single JSON file holding an ordered array of entries.
It is the only source of truth: every operation loads it, computes a new
list with the pure helpers below, and rewrites the whole file. Nothing is
cached between calls.

Sequence numbers are dense and 1-based after every mutation.
"""

import json
import logging
import os
import tempfile
from contextlib import nullcontext
from dataclasses import replace
from pathlib import Path
from typing import Callable, Optional, Union

from .errors import StorageUnreadable, StorageWriteError
from .locking import StoreLock
from .types import Bookmark, ByIndex, ByName, Selector, parse_selector

logger = logging.getLogger(__name__)

STORE_FILENAME = "paths.json"

SelectorInput = Union[str, int, Selector]


# -----------------------------------------------------------------------------
# Pure list transformations (no I/O)
# -----------------------------------------------------------------------------

def reindexed(bookmarks: list[Bookmark]) -> list[Bookmark]:
    """Renumber entries 1..N in stored order."""
    return [
        b if b.sequence_number == i else b.renumbered(i)
        for i, b in enumerate(bookmarks, start=1)
    ]


def appended(
    bookmarks: list[Bookmark], path: str, name: str = "",
) -> tuple[list[Bookmark], Bookmark]:
    """Return a new list with one entry added at the end, and that entry."""
    current = reindexed(bookmarks)
    new = Bookmark(sequence_number=len(current) + 1, path=path, name=name or "")
    return current + [new], new


def resolve(bookmarks: list[Bookmark], selector: Selector) -> Optional[int]:
    """Position of the entry a selector refers to, or None."""
    match selector:
        case ByIndex(number=number):
            for pos, b in enumerate(bookmarks):
                if b.sequence_number == number:
                    return pos
        case ByName(name=name):
            for pos, b in enumerate(bookmarks):
                if b.name == name:
                    return pos
    return None


def removed(
    bookmarks: list[Bookmark], selector: Selector,
) -> tuple[list[Bookmark], Optional[Bookmark]]:
    """Return the list without the selected entry (reindexed), and that entry."""
    pos = resolve(bookmarks, selector)
    if pos is None:
        return bookmarks, None
    target = bookmarks[pos]
    return reindexed(bookmarks[:pos] + bookmarks[pos + 1:]), target


def with_quick(
    bookmarks: list[Bookmark], selector: Selector, exclusive: bool = False,
) -> tuple[list[Bookmark], Optional[Bookmark]]:
    """Flag the selected entry as quick.

    Other entries keep their flag unless ``exclusive`` is set.
    """
    pos = resolve(bookmarks, selector)
    if pos is None:
        return bookmarks, None
    result = []
    for i, b in enumerate(bookmarks):
        if i == pos:
            result.append(replace(b, is_quick=True))
        elif exclusive and b.is_quick:
            result.append(replace(b, is_quick=False))
        else:
            result.append(b)
    return result, result[pos]


def with_last(
    bookmarks: list[Bookmark], selector: Selector,
) -> tuple[list[Bookmark], Optional[Bookmark]]:
    """Flag the selected entry as last visited, clearing the flag elsewhere."""
    pos = resolve(bookmarks, selector)
    if pos is None:
        return bookmarks, None
    result = [
        replace(b, is_last=i == pos)
        if b.is_last != (i == pos) else b
        for i, b in enumerate(bookmarks)
    ]
    return result, result[pos]


# -----------------------------------------------------------------------------
# Serialization
# -----------------------------------------------------------------------------

def dumps(bookmarks: list[Bookmark]) -> str:
    """Serialize to the persisted JSON layout."""
    return json.dumps(
        [b.to_dict() for b in bookmarks], indent=2, ensure_ascii=False,
    ) + "\n"


def loads(text: str) -> list[Bookmark]:
    """
    Parse the persisted JSON layout.

    A single top-level object is accepted as a one-entry array.

    Raises:
        StorageUnreadable: If the content is not a valid store
    """
    if not text.strip():
        return []
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise StorageUnreadable(f"invalid JSON: {e}") from e
    if isinstance(data, dict):
        data = [data]
    if not isinstance(data, list):
        raise StorageUnreadable(f"expected an array, got {type(data).__name__}")
    try:
        return [Bookmark.from_dict(d, i) for i, d in enumerate(data, start=1)]
    except ValueError as e:
        raise StorageUnreadable(str(e)) from e


# -----------------------------------------------------------------------------
# PathStore
# -----------------------------------------------------------------------------

class PathStore:
    """
    File-backed bookmark store.

    Args:
        path: Location of the JSON store file
        exclusive_quick: Clear the quick flag on other entries in set_quick()
        lock: Serialize read-modify-write cycles with a file lock
    """

    def __init__(
        self,
        path: Path,
        *,
        exclusive_quick: bool = False,
        lock: bool = True,
    ):
        self._path = Path(path).expanduser()
        self._exclusive_quick = exclusive_quick
        self._lock = StoreLock(self._path.with_name(self._path.name + ".lock")) if lock else None

    @property
    def path(self) -> Path:
        return self._path

    def __repr__(self) -> str:
        return f"PathStore({str(self._path)!r})"

    # -- I/O ------------------------------------------------------------------

    def load(self) -> list[Bookmark]:
        """
        Read all bookmarks in stored order.

        Never raises: a missing file is empty, and an unreadable one is
        logged as a warning and treated as empty.
        """
        try:
            text = self._path.read_text(encoding="utf-8-sig")
        except FileNotFoundError:
            return []
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("Cannot read %s (%s); treating as empty", self._path, e)
            return []
        try:
            return loads(text)
        except StorageUnreadable as e:
            logger.warning("Cannot parse %s (%s); treating as empty", self._path, e)
            return []

    def save(self, bookmarks: list[Bookmark]) -> None:
        """
        Replace the store file with the given bookmarks.

        Writes to a temporary file in the same directory and renames it
        over the store, so readers see either the old or the new content.

        Raises:
            StorageWriteError: If the file cannot be written
        """
        content = dumps(bookmarks)
        tmp_name = None
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self._path.parent, prefix=f".{self._path.name}.", suffix=".tmp",
            )
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(content)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_name, self._path)
            tmp_name = None
        except OSError as e:
            raise StorageWriteError(f"Cannot write {self._path}: {e}") from e
        finally:
            if tmp_name is not None:
                try:
                    os.unlink(tmp_name)
                except OSError:
                    pass
        logger.debug("Saved %d bookmark(s) to %s", len(bookmarks), self._path)

    def _locked(self):
        return self._lock if self._lock is not None else nullcontext()

    def _update(
        self, change: Callable[[list[Bookmark]], tuple[list[Bookmark], Optional[Bookmark]]],
    ) -> Optional[Bookmark]:
        """Load, apply a pure change, and save if it produced a result."""
        with self._locked():
            before = self.load()
            after, result = change(before)
            if result is not None:
                self.save(after)
            return result

    # -- Operations -----------------------------------------------------------

    def append(self, path: str, name: str = "") -> Bookmark:
        """Add a bookmark at the end of the store and return it."""
        bookmark = self._update(lambda items: appended(items, path, name))
        logger.info("Recorded #%d %s %s", bookmark.sequence_number, name or "-", path)
        return bookmark

    def find(self, selector: SelectorInput) -> Optional[Bookmark]:
        """Resolve a selector (index or exact name) to a bookmark, or None."""
        sel = parse_selector(selector)
        items = self.load()
        pos = resolve(items, sel)
        return items[pos] if pos is not None else None

    def remove(self, selector: SelectorInput) -> Optional[Bookmark]:
        """Delete the selected bookmark and renumber the rest. Returns it, or None."""
        sel = parse_selector(selector)
        bookmark = self._update(lambda items: removed(items, sel))
        if bookmark is not None:
            logger.info("Removed #%d %s", bookmark.sequence_number, bookmark.path)
        return bookmark

    def set_quick(self, selector: SelectorInput) -> Optional[Bookmark]:
        """Flag the selected bookmark as the quick path. Returns it, or None."""
        sel = parse_selector(selector)
        bookmark = self._update(
            lambda items: with_quick(items, sel, exclusive=self._exclusive_quick)
        )
        if bookmark is not None:
            logger.info("Quick path set to #%d %s", bookmark.sequence_number, bookmark.path)
        return bookmark

    def get_quick(self) -> Optional[Bookmark]:
        """First bookmark flagged quick, in stored order."""
        return next((b for b in self.load() if b.is_quick), None)

    def mark_last(self, selector: SelectorInput) -> Optional[Bookmark]:
        """Remember the selected bookmark as the last one navigated to."""
        sel = parse_selector(selector)
        return self._update(lambda items: with_last(items, sel))

    def get_last(self) -> Optional[Bookmark]:
        """Bookmark most recently navigated to, if any."""
        return next((b for b in self.load() if b.is_last), None)

    def clear(self) -> int:
        """Remove every bookmark. Returns how many there were.

        A store that was never written stays absent.
        """
        if not self._path.exists():
            return 0
        with self._locked():
            count = len(self.load())
            self.save([])
        logger.info("Cleared %d bookmark(s)", count)
        return count
