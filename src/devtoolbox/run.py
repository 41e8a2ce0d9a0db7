"""
CLI runner for devtoolbox.

Usage:
    python -m devtoolbox.run [OPTIONS] COMMAND

    # Search the directory
    python -m devtoolbox.run search react --price open-source

    # Ask the model for recommendations
    python -m devtoolbox.run recommend --description "A blog" --experience beginner

    # Manage bookmarks
    python -m devtoolbox.run bookmarks toggle 3
"""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

import httpx

from .bookmarks import BookmarkStore
from .catalog import calculate_stats, find_duplicates, find_tool, load_catalog_source, tool_names
from .config import DirectoryConfig
from .llm import LLMError
from .models import ToolEntry
from .prompt import EXPERIENCE_LEVELS, generate_prompt, validate_recommendation_request
from .reconcile import reconcile, reconciled_to_dict
from .search import rank

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger("devtoolbox")


def cmd_search(catalog: list[ToolEntry], args) -> int:
    results = rank(catalog, args.query, args.category, args.price)
    for entry in results:
        print(f"{entry.id:>4}  {entry.name}  [{entry.category}, {entry.price}]")
    logger.info(f"{len(results)} result(s)")
    return 0


def cmd_stats(catalog: list[ToolEntry], args) -> int:
    print(json.dumps(calculate_stats(catalog).to_dict(), indent=2))
    return 0


def cmd_duplicates(catalog: list[ToolEntry], args) -> int:
    duplicates = find_duplicates(catalog)
    for name in duplicates:
        print(name)
    if duplicates:
        logger.warning(f"Found {len(duplicates)} duplicate name(s)")
        return 1
    logger.info("No duplicate tool names")
    return 0


def cmd_names(catalog: list[ToolEntry], args) -> int:
    for name in tool_names(catalog):
        print(name)
    return 0


async def recommend(config: DirectoryConfig, catalog: list[ToolEntry], args) -> int:
    """Build the prompt, call the model and print the reconciled result."""
    errors = validate_recommendation_request(args.description, args.experience)
    if errors:
        for error in errors:
            logger.error(error)
        return 1

    client = config.llm.build_client()
    if client is None:
        logger.error(f"No API key configured (set {config.llm.api_key_env} or llm.api_key)")
        return 1

    prompt = generate_prompt(args.description, args.experience, args.type or [], catalog)

    try:
        raw = await client.generate_json(prompt)
    except (LLMError, httpx.HTTPError, httpx.InvalidURL) as e:
        logger.error(f"Failed to get AI recommendations: {e}")
        return 1

    reconciled = reconcile(raw, catalog)
    print(json.dumps(reconciled_to_dict(reconciled), indent=2))
    return 0


def cmd_bookmarks(config: DirectoryConfig, catalog: list[ToolEntry], args) -> int:
    store = BookmarkStore(config.bookmarks_path)

    if args.action == "toggle":
        if args.id is None:
            logger.error("bookmarks toggle needs a tool id")
            return 1
        bookmarked = store.toggle(args.id)
        logger.info(f"Tool {args.id} {'bookmarked' if bookmarked else 'removed from bookmarks'}")
        return 0

    if args.action == "clear":
        store.clear()
        logger.info("Bookmarks cleared")
        return 0

    for tool_id in store.load():
        tool = find_tool(catalog, tool_id)
        print(f"{tool_id:>4}  {tool.name if tool else '(not in catalog)'}")
    return 0


def main() -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="devtoolbox: developer tool directory",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    # Ranked search, filtered to free tools
    python -m devtoolbox.run search "css" --price free

    # Catalog health
    python -m devtoolbox.run stats
    python -m devtoolbox.run duplicates

    # Recommendations (needs GEMINI_API_KEY)
    python -m devtoolbox.run recommend --description "Team chat app" \\
        --experience intermediate --type web --type mobile

    # Use a specific config file and catalog
    python -m devtoolbox.run --config datasette.yaml --catalog tools.json names
        """,
    )

    parser.add_argument(
        "--config",
        type=Path,
        default=Path("datasette.yaml"),
        help="Path to config file (default: datasette.yaml)",
    )
    parser.add_argument(
        "--catalog",
        type=str,
        help="Override catalog source (path or URL) from config",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose logging",
    )

    subparsers = parser.add_subparsers(dest="command")

    search_parser = subparsers.add_parser("search", help="Rank tools for a query")
    search_parser.add_argument("query", help="Search text")
    search_parser.add_argument("--category", default="all", help="Category key (default: all)")
    search_parser.add_argument("--price", help="Price tier (free, open-source, paid, freemium)")

    subparsers.add_parser("stats", help="Show catalog statistics")
    subparsers.add_parser("duplicates", help="List duplicate tool names")
    subparsers.add_parser("names", help="List normalized tool names")

    recommend_parser = subparsers.add_parser("recommend", help="Get AI tool recommendations")
    recommend_parser.add_argument("--description", required=True, help="What you're planning to build")
    recommend_parser.add_argument("--experience", required=True, choices=EXPERIENCE_LEVELS)
    recommend_parser.add_argument(
        "--type",
        action="append",
        help="Project type (repeatable, e.g. web, mobile, api)",
    )

    bookmarks_parser = subparsers.add_parser("bookmarks", help="List, toggle or clear bookmarks")
    bookmarks_parser.add_argument("action", choices=["list", "toggle", "clear"])
    bookmarks_parser.add_argument("id", type=int, nargs="?", help="Tool id (for toggle)")

    args = parser.parse_args()

    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    if not args.command:
        parser.print_help()
        return 0

    # Load config
    config = DirectoryConfig.from_yaml(args.config)
    if args.catalog:
        config.catalog_source = args.catalog

    logger.info(f"Config loaded from {args.config}")
    logger.info(f"Catalog: {config.catalog_source or 'bundled'}")

    catalog = asyncio.run(load_catalog_source(config.catalog_source))

    if args.command == "search":
        return cmd_search(catalog, args)
    if args.command == "stats":
        return cmd_stats(catalog, args)
    if args.command == "duplicates":
        return cmd_duplicates(catalog, args)
    if args.command == "names":
        return cmd_names(catalog, args)
    if args.command == "recommend":
        return asyncio.run(recommend(config, catalog, args))
    if args.command == "bookmarks":
        return cmd_bookmarks(config, catalog, args)

    parser.print_help()
    return 0


if __name__ == "__main__":
    sys.exit(main())
