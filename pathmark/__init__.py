"""
pathmark: bookmark directories and jump back to them.

Quick Start:
    from pathmark import PathStore, commands

    store = PathStore("~/.pathmark/paths.json")
    commands.record(store, name="proj")
    commands.select(store, "proj")      # os.chdir() to the bookmark
    for b in commands.list_bookmarks(store):
        print(b.sequence_number, b.name, b.path)

CLI Usage:
    pathmark record --name proj
    pathmark list
    cd "$(pathmark select proj)"

Environment Variables:
    PATHMARK_HOME     - Directory for config and logs (default ~/.pathmark)
    PATHMARK_STORE    - Override the bookmark file location
    PATHMARK_VERBOSE  - Set to 1 for debug logging
"""

from .errors import (
    InvalidSelector,
    NotFoundError,
    PathmarkError,
    StorageUnreadable,
    StorageWriteError,
)
from .store import PathStore
from .types import Bookmark, ByIndex, ByName, Selector, parse_selector

__version__ = "0.1.0"
__all__ = [
    "PathStore",
    "Bookmark",
    "ByIndex",
    "ByName",
    "Selector",
    "parse_selector",
    "PathmarkError",
    "NotFoundError",
    "InvalidSelector",
    "StorageUnreadable",
    "StorageWriteError",
]
