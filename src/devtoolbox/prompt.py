"""
Prompt construction for LLM tool recommendations.
"""

from collections.abc import Iterable, Sequence

from .categories import CATEGORY_TITLES
from .models import ToolEntry

EXPERIENCE_LEVELS = ("beginner", "intermediate", "advanced")

RESPONSE_EXAMPLE = """{
  "frontend": [
    {"name": "React", "reason": "Perfect for building interactive UIs with component-based architecture", "inDirectory": true}
  ],
  "backend": [
    {"name": "Express", "reason": "Minimal web framework for Node.js applications", "inDirectory": true}
  ],
  "database": [
    {"name": "MongoDB", "reason": "Flexible NoSQL database for rapid development", "inDirectory": false, "url": "https://www.mongodb.com"}
  ]
}"""


def tool_names_list(catalog: Iterable[ToolEntry]) -> str:
    """Comma-separated catalog names, as offered to the model."""
    return ", ".join(tool.name for tool in catalog)


def validate_recommendation_request(description: str | None, experience_level: str | None) -> list[str]:
    """Return user-facing problems with a recommendation request (empty if valid)."""
    errors = []
    if not description or not description.strip():
        errors.append("Please describe what you're planning to build.")
    if not experience_level or not experience_level.strip():
        errors.append("Please select your experience level.")
    return errors


def generate_prompt(
    description: str,
    experience_level: str,
    project_types: Sequence[str],
    catalog: Iterable[ToolEntry],
) -> str:
    """
    Build the recommendation prompt for a project description.

    The model is asked to answer with a JSON object keyed by category,
    using exact directory names where it can.
    """
    available_categories = ", ".join(CATEGORY_TITLES)
    project_type_text = ", ".join(project_types) or "General development"

    return f"""You are an expert software development consultant. Based on the project description and experience level, recommend the BEST tools for this project.

PROJECT DETAILS:
- Description: {description}
- Experience Level: {experience_level}
- Project Types: {project_type_text}

AVAILABLE TOOLS TO CHOOSE FROM:
{tool_names_list(catalog)}

AVAILABLE CATEGORIES (use these exact lowercase keys):
{available_categories}

CRITICAL INSTRUCTIONS:
1. Recommend 8-12 tools total across different categories
2. NEVER recommend the same tool in multiple categories
3. Each tool should appear only ONCE in the entire response
4. Consider the developer's experience level ({experience_level})
5. For tools from our directory: Use exact tool names and mark inDirectory: true
6. For external tools (not in our directory):
   - Use ONLY the tool name without any parentheses, versions, or extra text
   - Provide the official website URL
   - Keep descriptions concise and professional
7. Use ONLY the available category keys provided above
8. Provide specific reasons why each tool fits this project
9. IMPORTANT: Before marking any tool as external, check if a similar tool exists in our directory (e.g., "Tailwind" should match "Tailwind CSS")

RESPONSE FORMAT (EXAMPLE) - Follow this EXACT JSON structure:
{RESPONSE_EXAMPLE}"""
