#!/usr/bin/env python3
"""
Fake Gemini API server for local development and testing.

Implements just enough of generateContent to exercise the
recommendation relay without a real API key:
- POST /v1beta/models/{model}:generateContent?key=...
- Canned recommendations wrapped in a Gemini-style candidate
- "fail" in the prompt returns a Gemini-style error object

Run with: python scripts/fake_gemini.py --port 9010
Then set in datasette.yaml:
    plugins:
      datasette-devtoolbox:
        llm:
          base_url: "http://127.0.0.1:9010/v1beta/models"
          api_key: "anything"
"""

import argparse
import json
from http.server import BaseHTTPRequestHandler, HTTPServer
from urllib.parse import parse_qs, urlparse

# Mixes directory names, a decorated name and an external tool so the
# reconciler has something to do.
CANNED_RECOMMENDATIONS = {
    "frontend": [
        {"name": "React (v18)", "reason": "Component model suits interactive UIs", "inDirectory": True},
        {"name": "Tailwind", "reason": "Utility classes keep styling fast", "inDirectory": False},
    ],
    "backend": [
        {"name": "Express", "reason": "Minimal web framework for Node.js applications", "inDirectory": True},
    ],
    "database": [
        {
            "name": "MongoDB",
            "reason": "Flexible NoSQL database for rapid development",
            "inDirectory": False,
            "url": "https://www.mongodb.com",
        },
    ],
    "developer-tools": [
        {"name": "Vite", "reason": "Instant dev server", "inDirectory": True},
        {"name": "React", "reason": "Listed twice on purpose", "inDirectory": True},
    ],
}


class FakeGeminiHandler(BaseHTTPRequestHandler):
    """HTTP handler for fake Gemini API."""

    def log_message(self, format: str, *args) -> None:  # noqa: A002
        """Log requests to stdout."""
        print(f"[FakeGemini] {args[0]}")

    def send_json(self, data: dict, status: int = 200) -> None:
        """Send a JSON response."""
        self.send_response(status)
        self.send_header("Content-Type", "application/json")
        self.end_headers()
        self.wfile.write(json.dumps(data).encode())

    def send_error_json(self, status: int, message: str) -> None:
        """Send a Gemini-style error response."""
        self.send_json(
            {"error": {"code": status, "message": message, "status": "INVALID_ARGUMENT"}},
            status=status,
        )

    def do_POST(self) -> None:
        """Handle POST requests."""
        parsed = urlparse(self.path)
        path = parsed.path
        query_params = parse_qs(parsed.query)

        # Read body
        content_length = int(self.headers.get("Content-Length", 0))
        body = self.rfile.read(content_length).decode() if content_length > 0 else ""

        if path.startswith("/v1beta/models/") and path.endswith(":generateContent"):
            self.handle_generate(body, query_params)
        else:
            self.send_error_json(404, f"Unknown endpoint: {path}")

    def handle_generate(self, body: str, params: dict) -> None:
        """Answer a generateContent request with the canned recommendations."""
        if not params.get("key"):
            self.send_error_json(403, "Method doesn't allow unregistered callers")
            return

        try:
            data = json.loads(body)
            prompt = data["contents"][0]["parts"][0]["text"]
        except (json.JSONDecodeError, KeyError, IndexError, TypeError):
            self.send_error_json(400, "Invalid JSON payload received")
            return

        if "fail" in prompt.lower():
            self.send_error_json(400, "Simulated failure requested by prompt")
            return

        self.send_json(
            {
                "candidates": [
                    {
                        "content": {
                            "parts": [{"text": json.dumps(CANNED_RECOMMENDATIONS)}],
                            "role": "model",
                        },
                        "finishReason": "STOP",
                    }
                ]
            }
        )


def main() -> None:
    parser = argparse.ArgumentParser(description="Run fake Gemini API server")
    parser.add_argument(
        "--port",
        type=int,
        default=9010,
        help="Port to listen on (default: 9010)",
    )
    parser.add_argument(
        "--host",
        type=str,
        default="127.0.0.1",
        help="Host to bind to (default: 127.0.0.1)",
    )
    args = parser.parse_args()

    server = HTTPServer((args.host, args.port), FakeGeminiHandler)
    print(f"Fake Gemini API running at http://{args.host}:{args.port}/v1beta/models")
    print('Include "fail" in a prompt to get an error response.')
    print()

    try:
        server.serve_forever()
    except KeyboardInterrupt:
        print("\nShutting down...")
        server.shutdown()


if __name__ == "__main__":
    main()
