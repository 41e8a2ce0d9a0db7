"""
"Suggest a tool" submissions.

Suggestions are validated against the catalog and then forwarded to an
external form backend.  Forwarding is fire-and-forget: the response is
not inspected and failures are only logged, so the submitter is always
thanked.  New tools reach the catalog through manual review of the
collected form responses.
"""

import logging
from dataclasses import dataclass
from typing import Any
from urllib.parse import urlparse

import httpx

from .catalog import tool_exists
from .models import ToolEntry

logger = logging.getLogger(__name__)

GOOGLE_FORM_URL = (
    "https://docs.google.com/forms/d/e/"
    "1FAIpQLSfE1oSG7RHEnSA2RGYLP-2VJEU5eGvA8dsaUqHrtqIgMdKwXA/formResponse"
)

DEFAULT_FORM_FIELDS = {
    "toolName": "entry.1806715086",
    "toolDescription": "entry.441835730",
    "toolCategory": "entry.1645444266",
    "toolUrl": "entry.669532944",
}

THANK_YOU_MESSAGE = "Thank you for your suggestion! We'll review it and add it to our directory soon."


@dataclass
class ToolSuggestion:
    """A tool proposed for the directory."""

    name: str = ""
    description: str = ""
    category: str = ""
    url: str = ""

    @classmethod
    def from_dict(cls, data: Any) -> "ToolSuggestion":
        """Create from submitted form data, trimming every field."""
        if not isinstance(data, dict):
            return cls()

        def _field(key: str) -> str:
            value = data.get(key)
            return value.strip() if isinstance(value, str) else ""

        return cls(
            name=_field("name"),
            description=_field("description"),
            category=_field("category"),
            url=_field("url"),
        )

    def form_data(self, fields: dict[str, str]) -> dict[str, str]:
        """Map suggestion fields onto the form backend's input names."""
        return {
            fields["toolName"]: self.name,
            fields["toolDescription"]: self.description,
            fields["toolCategory"]: self.category,
            fields["toolUrl"]: self.url,
        }


def is_valid_url(url: str) -> bool:
    """Absolute URL with a scheme and a host."""
    try:
        parsed = urlparse(url)
    except ValueError:
        return False
    return bool(parsed.scheme) and bool(parsed.netloc)


def validate_suggestion(suggestion: ToolSuggestion, catalog: list[ToolEntry]) -> list[str]:
    """
    Check a suggestion before it is forwarded.

    Returns a list of user-facing messages; empty means valid.  Checks
    stop at the first failure, in the order the form reports them.
    """
    if not (suggestion.name and suggestion.description and suggestion.category and suggestion.url):
        return ["Please fill in all fields."]

    if tool_exists(catalog, suggestion.name):
        return [f'A tool named "{suggestion.name}" already exists in the directory.']

    if not is_valid_url(suggestion.url):
        return ["Please enter a valid URL (including http:// or https://)"]

    return []


class SuggestionFormClient:
    """Forwards suggestions to the external form backend."""

    def __init__(self, form_url: str = GOOGLE_FORM_URL, fields: dict[str, str] | None = None):
        self.form_url = form_url
        self.fields = {**DEFAULT_FORM_FIELDS, **(fields or {})}

    async def submit(self, suggestion: ToolSuggestion) -> bool:
        """
        POST the suggestion to the form backend.

        Always returns True; delivery is assumed, not confirmed.
        """
        async with httpx.AsyncClient() as client:
            try:
                await client.post(self.form_url, data=suggestion.form_data(self.fields))
            except Exception as e:
                logger.warning(f"Suggestion submission error for {suggestion.name!r}: {e}")
        return True
