"""
Configuration for devtoolbox.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from .llm import DEFAULT_MODEL, GEMINI_API_BASE, GeminiClient
from .suggestions import DEFAULT_FORM_FIELDS, GOOGLE_FORM_URL

PLUGIN_NAME = "datasette-devtoolbox"


@dataclass
class LLMConfig:
    """LLM provider configuration."""

    provider: str = "gemini"
    model: str = DEFAULT_MODEL
    base_url: str = GEMINI_API_BASE
    api_key: str | None = None
    api_key_env: str | None = "GEMINI_API_KEY"
    temperature: float = 0.3
    max_output_tokens: int = 2048

    def get_api_key(self) -> str | None:
        """Get API key from config or environment."""
        if self.api_key:
            return self.api_key
        if self.api_key_env:
            return os.environ.get(self.api_key_env)
        return None

    def build_client(self) -> GeminiClient | None:
        """Create a client, or None when no API key is configured."""
        api_key = self.get_api_key()
        if not api_key:
            return None
        return GeminiClient(
            api_key=api_key,
            model=self.model,
            base_url=self.base_url,
            temperature=self.temperature,
            max_output_tokens=self.max_output_tokens,
        )


@dataclass
class SuggestionFormConfig:
    """Where "suggest a tool" submissions are forwarded."""

    enabled: bool = True
    form_url: str = GOOGLE_FORM_URL
    fields: dict[str, str] = field(default_factory=lambda: dict(DEFAULT_FORM_FIELDS))


@dataclass
class DirectoryConfig:
    """Complete devtoolbox configuration."""

    catalog_source: str | None = None  # URL or path; None means the bundled catalog
    bookmarks_path: Path = field(default_factory=lambda: Path.home() / ".devtoolbox" / "bookmarks.json")

    llm: LLMConfig = field(default_factory=LLMConfig)
    suggestions: SuggestionFormConfig = field(default_factory=SuggestionFormConfig)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "DirectoryConfig":
        """Create config from a dictionary (e.g., from YAML)."""
        config = cls()

        if "catalog_source" in data:
            config.catalog_source = data["catalog_source"]
        if "bookmarks_path" in data:
            config.bookmarks_path = Path(data["bookmarks_path"])

        if "llm" in data:
            llm = data["llm"] or {}
            config.llm = LLMConfig(
                provider=llm.get("provider", "gemini"),
                model=llm.get("model", DEFAULT_MODEL),
                base_url=llm.get("base_url", GEMINI_API_BASE),
                api_key=llm.get("api_key"),
                api_key_env=llm.get("api_key_env", "GEMINI_API_KEY"),
                temperature=llm.get("temperature", 0.3),
                max_output_tokens=llm.get("max_output_tokens", 2048),
            )

        if "suggestions" in data:
            suggestions = data["suggestions"] or {}
            config.suggestions = SuggestionFormConfig(
                enabled=suggestions.get("enabled", True),
                form_url=suggestions.get("form_url", GOOGLE_FORM_URL),
                fields={**DEFAULT_FORM_FIELDS, **suggestions.get("fields", {})},
            )

        return config

    @classmethod
    def from_yaml(cls, path: Path) -> "DirectoryConfig":
        """Load config from a YAML file (datasette.yaml format)."""
        if not path.exists():
            return cls()

        with open(path) as f:
            data = yaml.safe_load(f) or {}

        plugin_config = (data.get("plugins") or {}).get(PLUGIN_NAME) or {}
        return cls.from_dict(plugin_config)

    def to_dict(self) -> dict[str, Any]:
        """Convert config to dictionary for JSON serialization (no secrets)."""
        return {
            "catalog_source": self.catalog_source,
            "bookmarks_path": str(self.bookmarks_path),
            "llm": {
                "provider": self.llm.provider,
                "model": self.llm.model,
                "base_url": self.llm.base_url,
                "api_key_env": self.llm.api_key_env,
                "temperature": self.llm.temperature,
                "max_output_tokens": self.llm.max_output_tokens,
            },
            "suggestions": {
                "enabled": self.suggestions.enabled,
                "form_url": self.suggestions.form_url,
            },
        }
