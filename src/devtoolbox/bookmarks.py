"""
Bookmarked tools.

A bookmark set is an ordered list of tool ids kept on the client side
under a single key.  There is one writer at a time, so there is no
merging or locking.
"""

import json
import logging
from collections.abc import Iterable, Iterator
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

BOOKMARKS_KEY = "devtoolbox-bookmarks"


def _valid_ids(values: Iterable[Any]) -> list[int]:
    ids: list[int] = []
    for value in values:
        if isinstance(value, int) and not isinstance(value, bool) and value not in ids:
            ids.append(value)
    return ids


class BookmarkSet:
    """Ordered, duplicate-free set of bookmarked tool ids."""

    def __init__(self, ids: Iterable[Any] = ()):
        self._ids = _valid_ids(ids)

    def toggle(self, tool_id: int) -> bool:
        """
        Add the id if absent, remove it if present.

        Returns True when the tool is bookmarked afterwards.  Other ids
        keep their relative order either way.
        """
        if tool_id in self._ids:
            self._ids.remove(tool_id)
            return False
        self._ids.append(tool_id)
        return True

    def clear(self) -> None:
        self._ids = []

    def ids(self) -> list[int]:
        return list(self._ids)

    def __contains__(self, tool_id: object) -> bool:
        return tool_id in self._ids

    def __iter__(self) -> Iterator[int]:
        return iter(list(self._ids))

    def __len__(self) -> int:
        return len(self._ids)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, BookmarkSet):
            return NotImplemented
        return self._ids == other._ids

    def __repr__(self) -> str:
        return f"BookmarkSet({self._ids!r})"

    def to_json(self) -> str:
        return json.dumps(self._ids)

    @classmethod
    def from_json(cls, text: str | None) -> "BookmarkSet":
        """Decode a stored id array; anything unreadable gives an empty set."""
        if not text:
            return cls()
        try:
            data = json.loads(text)
        except ValueError:
            logger.warning("Ignoring malformed bookmark data")
            return cls()
        if not isinstance(data, list):
            return cls()
        return cls(data)


class BookmarkStore:
    """
    File-backed bookmark storage for the command line.

    The file is a JSON object holding the encoded id array under
    ``BOOKMARKS_KEY``; it is read on load and rewritten on every save.
    """

    def __init__(self, path: Path):
        self.path = Path(path)

    def load(self) -> BookmarkSet:
        if not self.path.exists():
            return BookmarkSet()
        try:
            with open(self.path, encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning(f"Could not read bookmarks from {self.path}: {e}")
            return BookmarkSet()
        if not isinstance(data, dict):
            return BookmarkSet()
        return BookmarkSet.from_json(data.get(BOOKMARKS_KEY))

    def save(self, bookmarks: BookmarkSet) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump({BOOKMARKS_KEY: bookmarks.to_json()}, f)

    def toggle(self, tool_id: int) -> bool:
        bookmarks = self.load()
        bookmarked = bookmarks.toggle(tool_id)
        self.save(bookmarks)
        return bookmarked

    def clear(self) -> None:
        self.save(BookmarkSet())
