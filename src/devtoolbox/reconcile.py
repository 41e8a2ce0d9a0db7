"""
Reconciliation of LLM tool recommendations against the local catalog.

The model answers with free-form JSON shaped roughly like
``{category: [{"name", "reason", "url", "inDirectory"}, ...]}``.  Nothing
about that shape is guaranteed, so every field is type-checked before
use and malformed parts are skipped rather than raised.

For each item, in category order and then list order:

1. the name is cleaned (parentheticals, version suffix, generic suffix
   word),
2. names already seen anywhere in the response are dropped,
3. the cleaned name is matched against the catalog (exact, normalized,
   then substring),
4. a display-ready :class:`RecommendationItem` is built.

Categories left empty are omitted.
"""

import logging
import re
from collections.abc import Iterable, Mapping
from typing import Any

from .models import RecommendationItem, ToolEntry

logger = logging.getLogger(__name__)

DEFAULT_REASON = "Recommended for your project needs"

PARENTHETICAL_RE = re.compile(r"\s*\([^)]*\)")
VERSION_SUFFIX_RE = re.compile(r"\s+v?\d+(\.\d+)*\s*$", re.IGNORECASE)
GENERIC_SUFFIX_RE = re.compile(r"\s+(framework|library|tool|js|css)$", re.IGNORECASE)
NON_ALNUM_RE = re.compile(r"[^a-z0-9]")


def clean_tool_name(name: str) -> str:
    """
    Best-effort cleanup of a model-supplied tool name.

    Each rule runs once, in order: drop parenthetical segments, drop a
    trailing version ("v2.1", "3.0"), drop a trailing generic word
    (framework, library, tool, js, css).

    >>> clean_tool_name("React (v18)")
    'React'
    >>> clean_tool_name("Vue.js 3.4")
    'Vue.js'
    """
    cleaned = name.strip()
    cleaned = PARENTHETICAL_RE.sub("", cleaned)
    cleaned = VERSION_SUFFIX_RE.sub("", cleaned)
    cleaned = GENERIC_SUFFIX_RE.sub("", cleaned)
    return cleaned.strip()


def normalize_name(name: str) -> str:
    """Lowercase and keep only ``[a-z0-9]``."""
    return NON_ALNUM_RE.sub("", name.lower())


def build_lookup(catalog: Iterable[ToolEntry]) -> dict[str, ToolEntry]:
    """
    Index catalog entries by normalized and by lowercased name.

    Keys keep their first insertion position; a later entry sharing a
    key replaces the value.
    """
    lookup: dict[str, ToolEntry] = {}
    for tool in catalog:
        lookup[normalize_name(tool.name)] = tool
        lookup[tool.name.lower()] = tool
    return lookup


def match_directory_tool(cleaned_name: str, lookup: Mapping[str, ToolEntry]) -> ToolEntry | None:
    """
    Find the catalog entry a cleaned recommendation name refers to.

    Tried in order, first hit wins: exact lowercased name, normalized
    name, then the first lookup key that contains the normalized name or
    is contained in it.  The substring step can pair short names with
    unrelated tools; an empty normalized name matches the first entry.
    """
    matched = lookup.get(cleaned_name.lower())
    if matched is not None:
        return matched

    normalized = normalize_name(cleaned_name)
    matched = lookup.get(normalized)
    if matched is not None:
        return matched

    for key, tool in lookup.items():
        if normalized in key or key in normalized:
            return tool
    return None


def _reconcile_item(
    raw_item: Any,
    seen: set[str],
    lookup: Mapping[str, ToolEntry],
) -> RecommendationItem | None:
    if not isinstance(raw_item, Mapping):
        return None

    raw_name = raw_item.get("name")
    if not isinstance(raw_name, str) or not raw_name:
        return None

    cleaned = clean_tool_name(raw_name)

    key = cleaned.lower()
    if key in seen:
        logger.warning(f"Duplicate tool detected and skipped: {cleaned}")
        return None
    seen.add(key)

    matched = match_directory_tool(cleaned, lookup)

    reason = raw_item.get("reason")
    if not isinstance(reason, str) or not reason:
        reason = DEFAULT_REASON

    item = RecommendationItem(
        name=matched.name if matched else cleaned,
        reason=reason,
        in_directory=matched is not None,
    )

    if matched is not None:
        item.tool_id = matched.id
    else:
        url = raw_item.get("url")
        if isinstance(url, str) and url:
            item.url = url

    return item


def reconcile(raw: Any, catalog: Iterable[ToolEntry]) -> dict[str, list[RecommendationItem]]:
    """
    Clean, deduplicate and directory-match a model recommendation response.

    Args:
        raw: Parsed model output, ``{category: [raw item, ...]}``
        catalog: Tool entries in catalog order

    Returns:
        Category to reconciled items, in input order.  Never raises on
        malformed input; unusable parts are skipped.
    """
    if not isinstance(raw, Mapping):
        logger.warning(f"Recommendations must be a JSON object, got {type(raw).__name__}")
        return {}

    lookup = build_lookup(catalog)
    seen: set[str] = set()
    result: dict[str, list[RecommendationItem]] = {}

    for category, raw_items in raw.items():
        if not isinstance(raw_items, list):
            continue

        items = []
        for raw_item in raw_items:
            item = _reconcile_item(raw_item, seen, lookup)
            if item is not None:
                items.append(item)

        if items:
            result[str(category)] = items

    return result


def reconciled_to_dict(reconciled: Mapping[str, list[RecommendationItem]]) -> dict[str, list[dict[str, Any]]]:
    """Serialize a reconciled mapping for a JSON response."""
    return {category: [item.to_dict() for item in items] for category, items in reconciled.items()}
