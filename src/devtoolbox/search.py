"""
Search ranking and filtering over the tool catalog.

Scoring uses plain substring semantics on lowercased fields, no
tokenization and no typo tolerance.  Bonuses, in priority order:

    name equals query       +1000
    name starts with query   +500   (only when not equal)
    name contains query      +300   (only when neither of the above)
    badges contain query     +200
    description contains     +100
    category contains         +50

Entries scoring zero are dropped, the rest are sorted by descending
score.  ``sorted`` is stable, so ties keep catalog order.
"""

from collections.abc import Iterable

from .models import ALL_CATEGORIES, ToolEntry, ViewState

EXACT_NAME_SCORE = 1000
NAME_PREFIX_SCORE = 500
NAME_CONTAINS_SCORE = 300
BADGE_SCORE = 200
DESCRIPTION_SCORE = 100
CATEGORY_SCORE = 50


def normalize_query(query: str | None) -> str:
    if not isinstance(query, str):
        return ""
    return query.strip().lower()


def score_entry(entry: ToolEntry, term: str) -> int:
    """Score one entry against an already-normalized search term."""
    score = 0
    name = entry.name.lower()

    if name == term:
        score += EXACT_NAME_SCORE
    elif name.startswith(term):
        score += NAME_PREFIX_SCORE
    elif term in name:
        score += NAME_CONTAINS_SCORE

    badges = " ".join(badge.lower() for badge in entry.badges)
    if term in badges:
        score += BADGE_SCORE

    if term in entry.description.lower():
        score += DESCRIPTION_SCORE

    if term in entry.category.lower():
        score += CATEGORY_SCORE

    return score


def matches_filters(entry: ToolEntry, category: str = ALL_CATEGORIES, price: str | None = None) -> bool:
    """Category and price predicates, ANDed."""
    matches_category = category == ALL_CATEGORIES or entry.category == category
    matches_price = not price or entry.price == price
    return matches_category and matches_price


def rank(
    catalog: Iterable[ToolEntry],
    query: str | None,
    category: str = ALL_CATEGORIES,
    price: str | None = None,
) -> list[ToolEntry]:
    """
    Rank catalog entries for a search query, then apply the filters.

    Args:
        catalog: Tool entries in catalog order
        query: Raw search text; blank disables scoring
        category: Selected category key, or "all"
        price: Selected price tier, or None

    Returns:
        Matching entries, best first.  With a blank query this is the
        filtered catalog in its original order.
    """
    term = normalize_query(query)

    if not term:
        return [entry for entry in catalog if matches_filters(entry, category, price)]

    scored = []
    for entry in catalog:
        score = score_entry(entry, term)
        if score > 0:
            scored.append((score, entry))

    scored = sorted(scored, key=lambda pair: pair[0], reverse=True)

    return [entry for _, entry in scored if matches_filters(entry, category, price)]


def compute_visible_entries(
    catalog: Iterable[ToolEntry],
    bookmarks: Iterable[int],
    view_state: ViewState,
) -> list[ToolEntry]:
    """
    Project the catalog through the current view state.

    The bookmarks view lists bookmarked tools in catalog order and
    ignores the query and both filters.
    """
    if view_state.showing_bookmarks:
        bookmarked = set(bookmarks)
        return [entry for entry in catalog if entry.id in bookmarked]

    return rank(catalog, view_state.query, view_state.category, view_state.price)
