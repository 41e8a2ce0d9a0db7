"""
Gemini client for tool recommendations.

One stateless generateContent request per call: no retries, no
cancellation and no timeout beyond the httpx default.

API Documentation: https://ai.google.dev/api/generate-content
"""

import json
import logging
from typing import Any

import httpx

logger = logging.getLogger(__name__)

GEMINI_API_BASE = "https://generativelanguage.googleapis.com/v1beta/models"
DEFAULT_MODEL = "gemini-1.5-flash-latest"


class LLMError(Exception):
    """The model service answered, but not with usable recommendations."""


def extract_response_text(data: Any) -> str | None:
    """Pull ``candidates[0].content.parts[0].text`` out of a response, or None."""
    if not isinstance(data, dict):
        return None
    candidates = data.get("candidates")
    if not isinstance(candidates, list) or not candidates:
        return None
    first = candidates[0]
    content = first.get("content") if isinstance(first, dict) else None
    if not isinstance(content, dict):
        return None
    parts = content.get("parts")
    if not isinstance(parts, list) or not parts or not isinstance(parts[0], dict):
        return None
    text = parts[0].get("text")
    return text if isinstance(text, str) else None


class GeminiClient:
    """
    Client for the Gemini generateContent endpoint.

    Requests JSON output and parses the first candidate's text.
    """

    def __init__(
        self,
        api_key: str,
        model: str = DEFAULT_MODEL,
        base_url: str = GEMINI_API_BASE,
        temperature: float = 0.3,
        max_output_tokens: int = 2048,
    ):
        self.api_key = api_key
        self.model = model
        self.base_url = base_url.rstrip("/")
        self.temperature = temperature
        self.max_output_tokens = max_output_tokens

    @property
    def endpoint(self) -> str:
        return f"{self.base_url}/{self.model}:generateContent"

    def build_payload(self, prompt: str) -> dict[str, Any]:
        """Request body for a single-turn text prompt."""
        return {
            "contents": [{"parts": [{"text": prompt}]}],
            "generationConfig": {
                "temperature": self.temperature,
                "maxOutputTokens": self.max_output_tokens,
                "responseMimeType": "application/json",
            },
        }

    async def generate_json(self, prompt: str) -> Any:
        """
        Send a prompt and parse the model's JSON answer.

        Args:
            prompt: Full prompt text

        Returns:
            The decoded JSON value the model produced

        Raises:
            LLMError: the service reported an error, returned no
                candidate, or the candidate text was not valid JSON
            httpx.HTTPError: the request itself failed
        """
        logger.debug(f"Requesting recommendations from {self.model}")

        async with httpx.AsyncClient() as client:
            response = await client.post(
                self.endpoint,
                params={"key": self.api_key},
                json=self.build_payload(prompt),
            )

        try:
            data = response.json()
        except ValueError as e:
            raise LLMError(f"Unreadable response from Gemini (HTTP {response.status_code})") from e

        if isinstance(data, dict) and data.get("error"):
            error = data["error"]
            message = error.get("message") if isinstance(error, dict) else None
            raise LLMError(message or "Gemini API Error")

        text = extract_response_text(data)
        if text is None:
            raise LLMError("No response from Gemini")

        try:
            return json.loads(text)
        except ValueError as e:
            raise LLMError(f"Model returned invalid JSON: {e}") from e
