"""Shared pytest fixtures for devtoolbox tests."""

import json

import pytest
from datasette.app import Datasette

from devtoolbox.catalog import parse_catalog

SAMPLE_TOOLS = [
    {
        "id": 1,
        "name": "React",
        "description": "A JavaScript library for building user interfaces",
        "category": "frontend",
        "price": "open-source",
        "badges": ["Popular"],
        "logo": "⚛️",
        "url": "https://react.dev",
    },
    {
        "id": 2,
        "name": "Tailwind CSS",
        "description": "Utility-first CSS framework",
        "category": "frontend",
        "price": "open-source",
        "badges": [],
        "url": "https://tailwindcss.com",
    },
    {
        "id": 3,
        "name": "Vite",
        "description": "Next generation frontend tooling",
        "category": "developer-tools",
        "price": "open-source",
        "badges": ["Fast"],
        "url": "https://vitejs.dev",
    },
    {
        "id": 4,
        "name": "Express",
        "description": "Minimal web framework for Node.js",
        "category": "backend",
        "price": "open-source",
        "badges": [],
        "url": "https://expressjs.com",
    },
    {
        "id": 5,
        "name": "Postman",
        "description": "API platform for building and testing APIs",
        "category": "apis",
        "price": "freemium",
        "badges": [],
        "url": "https://www.postman.com",
    },
    {
        "id": 6,
        "name": "GitHub Copilot",
        "description": "AI pair programmer",
        "category": "ai",
        "price": "paid",
        "badges": ["AI"],
        "url": "https://github.com/features/copilot",
    },
    {
        "id": 7,
        "name": "Preact",
        "description": "Fast 3kB alternative to React",
        "category": "frontend",
        "price": "open-source",
        "badges": [],
        "url": "https://preactjs.com",
    },
    {
        "id": 8,
        "name": "Chrome DevTools",
        "description": "Browser developer tools",
        "category": "debugging",
        "price": "free",
        "badges": ["Essential"],
        "url": "https://developer.chrome.com/docs/devtools",
    },
]


@pytest.fixture
def catalog():
    """The sample catalog as tool entries."""
    return parse_catalog(SAMPLE_TOOLS)


@pytest.fixture
def catalog_path(tmp_path):
    """Write the sample catalog to a temporary JSON file."""
    path = tmp_path / "tools.json"
    path.write_text(json.dumps(SAMPLE_TOOLS), encoding="utf-8")
    return path


@pytest.fixture
def datasette(catalog_path):
    """Create a Datasette instance with the plugin configured.

    Uses config= (not metadata=) for Datasette v1 compatibility.
    """
    return Datasette(
        [],
        config={
            "plugins": {
                "datasette-devtoolbox": {
                    "catalog_source": str(catalog_path),
                    "llm": {
                        "api_key": "test-key",
                        "api_key_env": None,
                    },
                    "suggestions": {
                        "form_url": "http://forms.example.org/formResponse",
                    },
                }
            },
        },
    )


@pytest.fixture
def datasette_no_key(catalog_path, monkeypatch):
    """A Datasette instance with no Gemini credential anywhere."""
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    return Datasette(
        [],
        config={
            "plugins": {
                "datasette-devtoolbox": {
                    "catalog_source": str(catalog_path),
                }
            },
        },
    )
