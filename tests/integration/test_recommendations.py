"""Integration tests for the recommendation relay and the reconciled endpoint."""

from unittest.mock import AsyncMock, patch

import httpx

from devtoolbox.llm import LLMError

GENERIC_ERROR = "Error generating recommendations. Please try again later."

MODEL_OUTPUT = {
    "frontend": [
        {"name": "React (v18)", "inDirectory": True},
        {"name": "Tailwind", "reason": "Styling", "inDirectory": False},
    ],
    "database": [
        {"name": "SomeNewTool", "reason": "Storage", "inDirectory": False, "url": "https://x.io"},
    ],
    "developer-tools": [
        {"name": "Vite", "reason": "Build"},
    ],
    "testing": [
        {"name": "Vite", "reason": "Again"},
    ],
}


class TestRecommendationRelay:
    """Tests for POST /api/recommendations."""

    async def test_missing_prompt(self, datasette):
        response = await datasette.client.post("/api/recommendations", json={})
        assert response.status_code == 400
        assert response.json() == {"error": "Prompt is required"}

    async def test_empty_prompt(self, datasette):
        response = await datasette.client.post("/api/recommendations", json={"prompt": ""})
        assert response.status_code == 400
        assert response.json() == {"error": "Prompt is required"}

    async def test_whitespace_prompt_is_relayed(self, datasette):
        """Only a missing or empty prompt is rejected."""
        with patch(
            "devtoolbox.llm.GeminiClient.generate_json",
            new_callable=AsyncMock,
            return_value={},
        ) as mock_generate:
            response = await datasette.client.post("/api/recommendations", json={"prompt": "   "})

        assert response.status_code == 200
        assert response.json() == {"success": True, "recommendations": {}}
        mock_generate.assert_awaited_once_with("   ")

    async def test_invalid_json_body_counts_as_missing_prompt(self, datasette):
        response = await datasette.client.post(
            "/api/recommendations",
            content=b"{not json",
            headers={"Content-Type": "application/json"},
        )
        assert response.status_code == 400
        assert response.json() == {"error": "Prompt is required"}

    async def test_missing_api_key(self, datasette_no_key):
        response = await datasette_no_key.client.post("/api/recommendations", json={"prompt": "Build a blog"})
        assert response.status_code == 500
        assert response.json() == {"error": "Gemini API key not configured"}

    async def test_success_relays_model_json(self, datasette):
        """The model's JSON comes back unchanged; reconciling is the caller's job."""
        with patch(
            "devtoolbox.llm.GeminiClient.generate_json",
            new_callable=AsyncMock,
            return_value=MODEL_OUTPUT,
        ) as mock_generate:
            response = await datasette.client.post("/api/recommendations", json={"prompt": "Build a blog"})

        assert response.status_code == 200
        assert response.json() == {"success": True, "recommendations": MODEL_OUTPUT}
        mock_generate.assert_awaited_once_with("Build a blog")

    async def test_model_error(self, datasette):
        with patch(
            "devtoolbox.llm.GeminiClient.generate_json",
            new_callable=AsyncMock,
            side_effect=LLMError("API key not valid"),
        ):
            response = await datasette.client.post("/api/recommendations", json={"prompt": "Build a blog"})

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to get AI recommendations", "details": "API key not valid"}

    async def test_transport_error(self, datasette):
        with patch(
            "devtoolbox.llm.GeminiClient.generate_json",
            new_callable=AsyncMock,
            side_effect=httpx.ConnectError("Connection refused"),
        ):
            response = await datasette.client.post("/api/recommendations", json={"prompt": "Build a blog"})

        assert response.status_code == 500
        assert response.json()["error"] == "Failed to get AI recommendations"

    async def test_invalid_base_url(self, datasette):
        """A malformed llm.base_url is an upstream failure, not a crash."""
        with patch(
            "devtoolbox.llm.GeminiClient.generate_json",
            new_callable=AsyncMock,
            side_effect=httpx.InvalidURL("Invalid non-printable ASCII character in URL"),
        ):
            response = await datasette.client.post("/api/recommendations", json={"prompt": "Build a blog"})

        assert response.status_code == 500
        assert response.json() == {
            "error": "Failed to get AI recommendations",
            "details": "Invalid non-printable ASCII character in URL",
        }

    async def test_get_not_allowed(self, datasette):
        response = await datasette.client.get("/api/recommendations")
        assert response.status_code == 405


class TestRecommend:
    """Tests for POST /-/devtoolbox/recommend."""

    async def test_validation_errors(self, datasette):
        response = await datasette.client.post("/-/devtoolbox/recommend", json={"description": ""})
        assert response.status_code == 400
        data = response.json()
        assert data["error"] == "Please describe what you're planning to build."
        assert data["errors"] == [
            "Please describe what you're planning to build.",
            "Please select your experience level.",
        ]

    async def test_reconciled_recommendations(self, datasette):
        with patch(
            "devtoolbox.llm.GeminiClient.generate_json",
            new_callable=AsyncMock,
            return_value=MODEL_OUTPUT,
        ) as mock_generate:
            response = await datasette.client.post(
                "/-/devtoolbox/recommend",
                json={
                    "description": "A personal blog",
                    "experienceLevel": "beginner",
                    "projectTypes": ["web"],
                },
            )

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["recommendations"] == {
            "frontend": [
                {
                    "name": "React",
                    "reason": "Recommended for your project needs",
                    "inDirectory": True,
                    "toolId": 1,
                },
                {"name": "Tailwind CSS", "reason": "Styling", "inDirectory": True, "toolId": 2},
            ],
            "database": [
                {"name": "SomeNewTool", "reason": "Storage", "inDirectory": False, "url": "https://x.io"},
            ],
            "developer-tools": [
                {"name": "Vite", "reason": "Build", "inDirectory": True, "toolId": 3},
            ],
        }

        prompt = mock_generate.await_args.args[0]
        assert "- Description: A personal blog" in prompt
        assert "- Project Types: web" in prompt
        assert "React, Tailwind CSS, Vite" in prompt

    async def test_model_failure_is_generic(self, datasette):
        """Any failure gives the single generic message, no partial results."""
        with patch(
            "devtoolbox.llm.GeminiClient.generate_json",
            new_callable=AsyncMock,
            side_effect=LLMError("No response from Gemini"),
        ):
            response = await datasette.client.post(
                "/-/devtoolbox/recommend",
                json={"description": "A blog", "experienceLevel": "advanced"},
            )

        assert response.status_code == 500
        assert response.json() == {"error": GENERIC_ERROR}

    async def test_invalid_base_url_is_generic(self, datasette):
        with patch(
            "devtoolbox.llm.GeminiClient.generate_json",
            new_callable=AsyncMock,
            side_effect=httpx.InvalidURL("Invalid URL"),
        ):
            response = await datasette.client.post(
                "/-/devtoolbox/recommend",
                json={"description": "A blog", "experienceLevel": "advanced"},
            )

        assert response.status_code == 500
        assert response.json() == {"error": GENERIC_ERROR}

    async def test_missing_api_key_is_generic(self, datasette_no_key):
        response = await datasette_no_key.client.post(
            "/-/devtoolbox/recommend",
            json={"description": "A blog", "experienceLevel": "advanced"},
        )
        assert response.status_code == 500
        assert response.json() == {"error": GENERIC_ERROR}
