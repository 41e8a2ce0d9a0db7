"""
Datasette plugin for the developer tool directory.

- Directory page with search, category/price filters and bookmarks
- JSON APIs for tools, stats and bookmarks
- "Suggest a tool" form forwarding
- AI recommendations: a thin relay to Gemini plus a reconciled endpoint
"""

import json
import logging
from pathlib import Path
from typing import Any
from urllib.parse import urlencode

import httpx
from datasette import Response, hookimpl
from datasette.utils.asgi import Request
from itsdangerous import BadSignature

from devtoolbox import __version__
from devtoolbox.bookmarks import BOOKMARKS_KEY, BookmarkSet
from devtoolbox.catalog import calculate_stats, load_catalog_source
from devtoolbox.categories import category_icon, category_title
from devtoolbox.config import PLUGIN_NAME, DirectoryConfig
from devtoolbox.llm import LLMError
from devtoolbox.models import BOOKMARKS_FILTER, PriceTier, ToolEntry, ViewState
from devtoolbox.prompt import generate_prompt, validate_recommendation_request
from devtoolbox.reconcile import reconcile, reconciled_to_dict
from devtoolbox.search import compute_visible_entries
from devtoolbox.suggestions import (
    THANK_YOU_MESSAGE,
    SuggestionFormClient,
    ToolSuggestion,
    validate_suggestion,
)

logger = logging.getLogger(__name__)

RECOMMENDATION_ERROR = "Error generating recommendations. Please try again later."

# -----------------------------------------------------------------------------
# Plugin Configuration
# -----------------------------------------------------------------------------


def get_plugin_config(datasette) -> DirectoryConfig:
    """Get plugin configuration from datasette.yaml."""
    return DirectoryConfig.from_dict(datasette.plugin_config(PLUGIN_NAME) or {})


# -----------------------------------------------------------------------------
# Catalog Helpers
# -----------------------------------------------------------------------------


async def load_catalog(datasette) -> list[ToolEntry]:
    """Load the configured catalog and keep it on the Datasette instance."""
    config = get_plugin_config(datasette)
    catalog = await load_catalog_source(config.catalog_source)
    datasette._devtoolbox_catalog = catalog
    return catalog


async def get_catalog(datasette) -> list[ToolEntry]:
    """The loaded catalog, loading it first if startup has not run yet."""
    catalog = getattr(datasette, "_devtoolbox_catalog", None)
    if catalog is None:
        catalog = await load_catalog(datasette)
    return catalog


# -----------------------------------------------------------------------------
# Bookmark Cookie Helpers
# -----------------------------------------------------------------------------


def get_bookmarks(request: Request, datasette) -> BookmarkSet:
    """Read the signed bookmark cookie; a missing or tampered cookie is empty."""
    value = request.cookies.get(BOOKMARKS_KEY)
    if not value:
        return BookmarkSet()
    try:
        return BookmarkSet.from_json(datasette.unsign(value, BOOKMARKS_KEY))
    except BadSignature:
        logger.warning("Ignoring bookmark cookie with a bad signature")
        return BookmarkSet()


def set_bookmarks_cookie(response: Response, datasette, bookmarks: BookmarkSet) -> None:
    response.set_cookie(
        BOOKMARKS_KEY,
        datasette.sign(bookmarks.to_json(), BOOKMARKS_KEY),
        httponly=True,
        samesite="lax",
        max_age=3600 * 24 * 365,  # one year
    )


def bookmarks_response(datasette, bookmarks: BookmarkSet, catalog: list[ToolEntry], **extra) -> Response:
    entries = compute_visible_entries(catalog, bookmarks, ViewState(showing_bookmarks=True))
    response = Response.json(
        {
            **extra,
            "ids": bookmarks.ids(),
            "tools": [entry.to_dict() for entry in entries],
        }
    )
    set_bookmarks_cookie(response, datasette, bookmarks)
    return response


# -----------------------------------------------------------------------------
# Request Helpers
# -----------------------------------------------------------------------------


async def read_json_body(request: Request) -> Any:
    """Decode a JSON request body; an empty or invalid body gives None."""
    body = await request.post_body()
    if not body:
        return None
    try:
        return json.loads(body)
    except ValueError:
        return None


def method_not_allowed() -> Response:
    return Response.json({"error": "Method not allowed"}, status=405)


def view_url(view_state: ViewState) -> str:
    args = view_state.to_args()
    return "/devtoolbox" + ("?" + urlencode(args) if args else "")


# -----------------------------------------------------------------------------
# Template Rendering Helper
# -----------------------------------------------------------------------------


async def render_template(datasette, request, template_name: str, context: dict) -> Response:
    """Render a template with the given context."""
    return Response.html(
        await datasette.render_template(
            template_name,
            {**context, "request": request},
            request=request,
        )
    )


# -----------------------------------------------------------------------------
# Routes
# -----------------------------------------------------------------------------


async def devtoolbox_index(request: Request, datasette) -> Response:
    """
    Main directory page.

    Query arguments ``q``, ``category``, ``price`` and ``bookmarks`` form
    the view state; every filter link points at the state its click
    would produce.
    """
    catalog = await get_catalog(datasette)
    bookmarks = get_bookmarks(request, datasette)
    view_state = ViewState.from_args(request.args)
    entries = compute_visible_entries(catalog, bookmarks, view_state)

    categories = []
    for key in dict.fromkeys(tool.category for tool in catalog):
        categories.append(
            {
                "key": key,
                "title": category_title(key),
                "icon": category_icon(key),
                "active": not view_state.showing_bookmarks and view_state.category == key,
                "url": view_url(view_state.select_category(key)),
            }
        )

    prices = [
        {
            "key": tier.value,
            "active": view_state.price == tier.value,
            "url": view_url(view_state.select_price(tier.value)),
        }
        for tier in PriceTier
    ]

    return await render_template(
        datasette,
        request,
        "devtoolbox_index.html",
        {
            "entries": entries,
            "stats": calculate_stats(catalog),
            "view_state": view_state,
            "bookmarks": bookmarks,
            "categories": categories,
            "prices": prices,
            "all_url": view_url(view_state.select_category("all")),
            "bookmarks_url": view_url(view_state.select_category(BOOKMARKS_FILTER)),
            "clear_url": view_url(view_state.cleared()),
            "category_title": category_title,
            "category_icon": category_icon,
        },
    )


async def tools_json(request: Request, datasette) -> Response:
    """Visible entries for the same query arguments as the directory page."""
    catalog = await get_catalog(datasette)
    bookmarks = get_bookmarks(request, datasette)
    entries = compute_visible_entries(catalog, bookmarks, ViewState.from_args(request.args))
    return Response.json({"tools": [entry.to_dict() for entry in entries], "count": len(entries)})


async def stats_json(request: Request, datasette) -> Response:
    catalog = await get_catalog(datasette)
    return Response.json(calculate_stats(catalog).to_dict())


async def api_recommendations(request: Request, datasette) -> Response:
    """
    Relay a prompt to Gemini and return the model's JSON unchanged.

    The API key stays on the server; the caller only ever sees the
    decoded recommendations or an error object.
    """
    if request.method != "POST":
        return method_not_allowed()

    body = await read_json_body(request)
    prompt = body.get("prompt") if isinstance(body, dict) else None
    if not isinstance(prompt, str) or not prompt:
        return Response.json({"error": "Prompt is required"}, status=400)

    config = get_plugin_config(datasette)
    client = config.llm.build_client()
    if client is None:
        logger.error("Gemini API key not configured")
        return Response.json({"error": "Gemini API key not configured"}, status=500)

    try:
        recommendations = await client.generate_json(prompt)
    except (LLMError, httpx.HTTPError, httpx.InvalidURL) as e:
        logger.exception("Recommendation relay failed")
        return Response.json(
            {"error": "Failed to get AI recommendations", "details": str(e)},
            status=500,
        )

    return Response.json({"success": True, "recommendations": recommendations})


async def recommend(request: Request, datasette) -> Response:
    """Validate a project description, ask the model and reconcile its answer."""
    if request.method != "POST":
        return method_not_allowed()

    body = await read_json_body(request)
    if not isinstance(body, dict):
        body = {}

    description = body.get("description")
    experience_level = body.get("experienceLevel")
    project_types = body.get("projectTypes") or []
    if not isinstance(description, str):
        description = None
    if not isinstance(experience_level, str):
        experience_level = None
    if not isinstance(project_types, list):
        project_types = []

    errors = validate_recommendation_request(description, experience_level)
    if errors:
        return Response.json({"error": errors[0], "errors": errors}, status=400)

    catalog = await get_catalog(datasette)
    prompt = generate_prompt(
        description.strip(),
        experience_level.strip(),
        [str(project_type) for project_type in project_types],
        catalog,
    )

    client = get_plugin_config(datasette).llm.build_client()
    if client is None:
        logger.error("Gemini API key not configured")
        return Response.json({"error": RECOMMENDATION_ERROR}, status=500)

    try:
        raw = await client.generate_json(prompt)
    except (LLMError, httpx.HTTPError, httpx.InvalidURL):
        logger.exception("Error getting AI recommendations")
        return Response.json({"error": RECOMMENDATION_ERROR}, status=500)

    reconciled = reconcile(raw, catalog)
    return Response.json({"success": True, "recommendations": reconciled_to_dict(reconciled)})


async def suggest_tool(request: Request, datasette) -> Response:
    """Validate a tool suggestion and forward it to the form backend."""
    if request.method != "POST":
        return method_not_allowed()

    config = get_plugin_config(datasette)
    if not config.suggestions.enabled:
        return Response.json({"error": "Suggestions are disabled."}, status=404)

    suggestion = ToolSuggestion.from_dict(await read_json_body(request))
    catalog = await get_catalog(datasette)

    errors = validate_suggestion(suggestion, catalog)
    if errors:
        return Response.json({"error": errors[0]}, status=400)

    client = SuggestionFormClient(config.suggestions.form_url, config.suggestions.fields)
    await client.submit(suggestion)
    logger.info(f"Tool suggestion forwarded: {suggestion.name}")

    return Response.json({"success": True, "message": THANK_YOU_MESSAGE})


async def bookmarks_json(request: Request, datasette) -> Response:
    catalog = await get_catalog(datasette)
    return bookmarks_response(datasette, get_bookmarks(request, datasette), catalog)


async def bookmarks_toggle(request: Request, datasette) -> Response:
    """Toggle one tool id in the bookmark cookie."""
    if request.method != "POST":
        return method_not_allowed()

    body = await read_json_body(request)
    tool_id = body.get("id") if isinstance(body, dict) else None
    if not isinstance(tool_id, int) or isinstance(tool_id, bool):
        return Response.json({"error": "Tool id must be an integer"}, status=400)

    bookmarks = get_bookmarks(request, datasette)
    bookmarked = bookmarks.toggle(tool_id)
    catalog = await get_catalog(datasette)
    return bookmarks_response(datasette, bookmarks, catalog, id=tool_id, bookmarked=bookmarked)


async def bookmarks_clear(request: Request, datasette) -> Response:
    if request.method != "POST":
        return method_not_allowed()

    catalog = await get_catalog(datasette)
    return bookmarks_response(datasette, BookmarkSet(), catalog)


# -----------------------------------------------------------------------------
# Datasette Hooks
# -----------------------------------------------------------------------------


@hookimpl
def register_routes():
    """Register plugin routes with Datasette."""
    return [
        # Directory page
        (r"^/devtoolbox$", devtoolbox_index),
        # JSON APIs
        (r"^/-/devtoolbox/tools\.json$", tools_json),
        (r"^/-/devtoolbox/stats\.json$", stats_json),
        (r"^/-/devtoolbox/recommend$", recommend),
        (r"^/-/devtoolbox/suggest$", suggest_tool),
        (r"^/-/devtoolbox/bookmarks\.json$", bookmarks_json),
        (r"^/-/devtoolbox/bookmarks/toggle$", bookmarks_toggle),
        (r"^/-/devtoolbox/bookmarks/clear$", bookmarks_clear),
        # Recommendation relay
        (r"^/api/recommendations$", api_recommendations),
    ]


@hookimpl
def extra_template_vars(datasette):
    """Provide extra template variables."""
    return {
        "devtoolbox_version": __version__,
    }


# Register templates directory
TEMPLATES_DIR = Path(__file__).parent / "templates"


@hookimpl
def prepare_jinja2_environment(env, datasette):
    """Add the plugin's templates directory to the Jinja2 environment."""
    from jinja2 import ChoiceLoader, FileSystemLoader

    # Prepend our templates to the loader
    if hasattr(env, "loader"):
        env.loader = ChoiceLoader([FileSystemLoader(str(TEMPLATES_DIR)), env.loader])


@hookimpl
def skip_csrf(datasette, scope):
    """
    Skip CSRF for the JSON API routes.

    They take JSON bodies from scripts, not forms, so there is no page
    to obtain a token from.
    """
    path = scope.get("path", "")
    if path.startswith("/-/devtoolbox/"):
        return True
    if path == "/api/recommendations":
        return True
    return None


@hookimpl
def startup(datasette):
    """
    Run on Datasette startup.

    Loads the configured catalog once and keeps it on the instance.
    """

    async def inner():
        await load_catalog(datasette)

    return inner
