"""
Data models for the tool directory.
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any

BOOKMARKS_FILTER = "bookmarks"
ALL_CATEGORIES = "all"


class PriceTier(str, Enum):
    """Pricing tier of a catalog tool."""

    FREE = "free"
    OPEN_SOURCE = "open-source"
    PAID = "paid"
    FREEMIUM = "freemium"


FREE_TIERS = (PriceTier.FREE.value, PriceTier.OPEN_SOURCE.value)


def _as_str(value: Any) -> str:
    return value if isinstance(value, str) else ""


@dataclass(frozen=True)
class ToolEntry:
    """A single record of the directory catalog."""

    id: int
    name: str
    description: str = ""
    category: str = ""
    price: str = ""
    badges: list[str] = field(default_factory=list)
    logo: str = ""
    url: str = ""

    @classmethod
    def from_dict(cls, data: Any) -> "ToolEntry | None":
        """
        Build an entry from a decoded catalog record.

        Returns None for records without an integer id or a non-empty
        name; every other field falls back to an empty value.
        """
        if not isinstance(data, dict):
            return None

        tool_id = data.get("id")
        if not isinstance(tool_id, int) or isinstance(tool_id, bool):
            return None

        name = _as_str(data.get("name")).strip()
        if not name:
            return None

        badges = data.get("badges")
        if not isinstance(badges, list):
            badges = []

        return cls(
            id=tool_id,
            name=name,
            description=_as_str(data.get("description")),
            category=_as_str(data.get("category")),
            price=_as_str(data.get("price")),
            badges=[b for b in badges if isinstance(b, str)],
            logo=_as_str(data.get("logo")),
            url=_as_str(data.get("url")),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "category": self.category,
            "price": self.price,
            "badges": list(self.badges),
            "logo": self.logo,
            "url": self.url,
        }

    @property
    def is_free(self) -> bool:
        return self.price in FREE_TIERS


@dataclass
class RecommendationItem:
    """A reconciled recommendation, ready for display."""

    name: str
    reason: str
    in_directory: bool
    url: str | None = None
    tool_id: int | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        result: dict[str, Any] = {
            "name": self.name,
            "reason": self.reason,
            "inDirectory": self.in_directory,
        }
        if self.url:
            result["url"] = self.url
        if self.tool_id is not None:
            result["toolId"] = self.tool_id
        return result


@dataclass(frozen=True)
class ViewState:
    """
    What the directory is currently showing.

    Every transition returns a new ViewState; the projection onto the
    catalog lives in :func:`devtoolbox.search.compute_visible_entries`.
    """

    category: str = ALL_CATEGORIES
    price: str | None = None
    query: str = ""
    showing_bookmarks: bool = False

    def with_query(self, query: str) -> "ViewState":
        return replace(self, query=query)

    def select_category(self, category: str) -> "ViewState":
        """Apply a click on a category filter tag."""
        if category == BOOKMARKS_FILTER:
            if self.showing_bookmarks:
                return replace(self, category=ALL_CATEGORIES, showing_bookmarks=False)
            return ViewState(showing_bookmarks=True)

        if category == ALL_CATEGORIES or category == self.category:
            return replace(self, category=ALL_CATEGORIES, showing_bookmarks=False)

        return replace(self, category=category, showing_bookmarks=False)

    def select_price(self, price: str) -> "ViewState":
        """Apply a click on a price filter tag."""
        if self.showing_bookmarks:
            return self
        if price == self.price:
            return replace(self, price=None)
        return replace(self, price=price)

    def cleared(self) -> "ViewState":
        return ViewState()

    @classmethod
    def from_args(cls, args: Any) -> "ViewState":
        """Build a view state from request query arguments."""
        category = args.get("category") or ALL_CATEGORIES
        if category == BOOKMARKS_FILTER:
            return cls(showing_bookmarks=True)
        return cls(
            category=category,
            price=args.get("price") or None,
            query=args.get("q") or "",
            showing_bookmarks=args.get("bookmarks") in ("1", "true", "on"),
        )

    def to_args(self) -> dict[str, str]:
        """Query arguments that :meth:`from_args` turns back into this state."""
        if self.showing_bookmarks:
            return {"category": BOOKMARKS_FILTER}
        args = {}
        if self.query:
            args["q"] = self.query
        if self.category != ALL_CATEGORIES:
            args["category"] = self.category
        if self.price:
            args["price"] = self.price
        return args
