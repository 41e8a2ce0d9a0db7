"""
Catalog loading and catalog-wide queries for the tool directory.

The catalog is a static JSON document (a list of tool records) loaded
once at startup.  Load failures are logged and leave the catalog empty;
they are never raised to the caller.
"""

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import httpx

from .models import ToolEntry

logger = logging.getLogger(__name__)

DEFAULT_CATALOG_PATH = Path(__file__).parent / "data" / "tools.json"


@dataclass
class CatalogStats:
    """Headline numbers shown above the directory."""

    total_tools: int = 0
    free_tools: int = 0
    categories: int = 0

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "total_tools": self.total_tools,
            "free_tools": self.free_tools,
            "categories": self.categories,
        }


def parse_catalog(data: Any) -> list[ToolEntry]:
    """
    Convert a decoded catalog document into tool entries.

    Args:
        data: Decoded JSON, expected to be a list of tool records

    Returns:
        Valid entries in document order.  Invalid records are skipped.
    """
    if not isinstance(data, list):
        logger.error(f"Catalog must be a JSON array, got {type(data).__name__}")
        return []

    entries = []
    for position, record in enumerate(data):
        entry = ToolEntry.from_dict(record)
        if entry is None:
            logger.warning(f"Skipping invalid catalog record at position {position}")
            continue
        entries.append(entry)
    return entries


def load_catalog(path: Path) -> list[ToolEntry]:
    """Load the catalog from a JSON file, returning [] on any failure."""
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        logger.error(f"Error loading tools from {path}: {e}")
        return []

    entries = parse_catalog(data)
    logger.info(f"Loaded {len(entries)} tools from {path}")
    return entries


async def fetch_catalog(url: str) -> list[ToolEntry]:
    """Fetch the catalog over HTTP, returning [] on any failure."""
    async with httpx.AsyncClient() as client:
        try:
            response = await client.get(url, follow_redirects=True)
            response.raise_for_status()
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"Error loading tools from {url}: {e}")
            return []

    entries = parse_catalog(data)
    logger.info(f"Loaded {len(entries)} tools from {url}")
    return entries


async def load_catalog_source(source: str | Path | None = None) -> list[ToolEntry]:
    """Load the catalog from a URL or a file path (bundled catalog by default)."""
    if source is None or source == "":
        return load_catalog(DEFAULT_CATALOG_PATH)
    if isinstance(source, str) and source.startswith(("http://", "https://")):
        return await fetch_catalog(source)
    return load_catalog(Path(source))


# -----------------------------------------------------------------------------
# Catalog-wide queries
# -----------------------------------------------------------------------------


def tool_names(catalog: list[ToolEntry]) -> list[str]:
    """Lowercased, trimmed tool names in catalog order."""
    return [tool.name.lower().strip() for tool in catalog]


def tool_exists(catalog: list[ToolEntry], name: str) -> bool:
    """Check whether a tool with this name is already listed (case-insensitive)."""
    if not isinstance(name, str):
        return False
    return name.lower().strip() in tool_names(catalog)


def find_duplicates(catalog: list[ToolEntry]) -> list[str]:
    """
    Names that appear more than once in the catalog.

    Names are compared lowercased and trimmed.  Each repeat is reported,
    so a name listed three times appears twice in the result.
    """
    duplicates = []
    seen: set[str] = set()
    for name in tool_names(catalog):
        if name in seen:
            duplicates.append(name)
        else:
            seen.add(name)
    return duplicates


def find_tool(catalog: list[ToolEntry], tool_id: int) -> ToolEntry | None:
    for tool in catalog:
        if tool.id == tool_id:
            return tool
    return None


def calculate_stats(catalog: list[ToolEntry]) -> CatalogStats:
    """Count all tools, free tools (free or open-source) and distinct categories."""
    return CatalogStats(
        total_tools=len(catalog),
        free_tools=sum(1 for tool in catalog if tool.is_free),
        categories=len({tool.category for tool in catalog}),
    )
