"""
Data types for directory bookmarks.
"""

import re
from dataclasses import dataclass, replace
from typing import Any, Optional, Union

from .errors import InvalidSelector


# Selectors made only of digits (with optional sign) are indexes, never names
_INDEX_PATTERN = re.compile(r'^[+-]?\d+$')


@dataclass(frozen=True)
class Bookmark:
    """
    One recorded directory.

    Attributes:
        sequence_number: 1-based position in the store (serialized as ``No``)
        name: Optional label, empty string when unnamed
        path: Absolute directory path
        is_quick: Flagged for one-step navigation
        is_last: Most recently selected entry
    """
    sequence_number: int
    path: str
    name: str = ""
    is_quick: bool = False
    is_last: bool = False

    def renumbered(self, sequence_number: int) -> "Bookmark":
        return replace(self, sequence_number=sequence_number)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the persisted layout.

        Optional flags are written only when set.
        """
        d: dict[str, Any] = {
            "No": self.sequence_number,
            "Name": self.name,
            "Path": self.path,
        }
        if self.is_quick:
            d["IsQuick"] = True
        if self.is_last:
            d["Last"] = True
        return d

    @classmethod
    def from_dict(cls, d: dict, position: int) -> "Bookmark":
        """Deserialize one persisted entry.

        ``position`` (1-based) is used when ``No`` is missing.

        Raises:
            ValueError: If a field is missing or has the wrong JSON type
        """
        if not isinstance(d, dict):
            raise ValueError(f"entry {position} is not an object")
        path = d.get("Path")
        if not isinstance(path, str) or not path:
            raise ValueError(f"entry {position} has no Path")
        number = d.get("No", position)
        if isinstance(number, bool) or not isinstance(number, int):
            raise ValueError(f"entry {position} has a non-integer No: {number!r}")
        name = d.get("Name")
        if name is not None and not isinstance(name, str):
            raise ValueError(f"entry {position} has a non-string Name: {name!r}")
        flags = {}
        for key in ("IsQuick", "Last"):
            value = d.get(key)
            if value is None:
                value = False
            if not isinstance(value, bool):
                raise ValueError(f"entry {position} has a non-boolean {key}: {value!r}")
            flags[key] = value
        return cls(
            sequence_number=number,
            path=path,
            name=name or "",
            is_quick=flags["IsQuick"],
            is_last=flags["Last"],
        )


@dataclass(frozen=True)
class ByIndex:
    """Selector resolved by 1-based sequence number."""
    number: int

    def __str__(self) -> str:
        return str(self.number)


@dataclass(frozen=True)
class ByName:
    """Selector resolved by exact, case-sensitive name."""
    name: str

    def __str__(self) -> str:
        return self.name


Selector = Union[ByIndex, ByName]


def parse_selector(raw: Union[str, int, Selector]) -> Selector:
    """
    Parse user input into a Selector.

    Integers and digit strings become ByIndex, anything else ByName.
    Names are matched verbatim, so surrounding whitespace is kept;
    only the emptiness check ignores it.

    Raises:
        InvalidSelector: If the input is empty or whitespace-only
    """
    if isinstance(raw, (ByIndex, ByName)):
        return raw
    if isinstance(raw, bool):
        raise InvalidSelector(f"Invalid selector: {raw!r}")
    if isinstance(raw, int):
        return ByIndex(raw)
    if raw is None or not raw.strip():
        raise InvalidSelector("Selector must not be empty")
    if _INDEX_PATTERN.match(raw.strip()):
        return ByIndex(int(raw.strip()))
    return ByName(raw)


def describe(selector: Optional[Selector]) -> str:
    """Human-readable form of a selector for messages."""
    match selector:
        case ByIndex(number=number):
            return f"#{number}"
        case ByName(name=name):
            return f"'{name}'"
        case _:
            return "(none)"
