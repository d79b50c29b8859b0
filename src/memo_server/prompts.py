"""Canned prompt templates served via prompts/list and prompts/get."""

from __future__ import annotations

from typing import Any

from memo_server.protocol import METHOD_NOT_FOUND, RPCError

PROMPTS: list[dict[str, Any]] = [
    {
        "name": "explain_concept",
        "description": "Explain a technical concept for a given audience level",
        "arguments": [
            {"name": "concept", "description": "Concept to explain", "required": True},
            {
                "name": "level",
                "description": "Explanation level (beginner/intermediate/advanced)",
                "required": False,
            },
        ],
    },
    {
        "name": "code_review",
        "description": "Review a piece of code",
        "arguments": [
            {"name": "code", "description": "Code to review", "required": True},
            {"name": "language", "description": "Programming language", "required": False},
        ],
    },
    {
        "name": "debug_help",
        "description": "Help debug an error",
        "arguments": [
            {"name": "error_message", "description": "The error message", "required": True},
            {
                "name": "context",
                "description": "What was happening when the error occurred",
                "required": False,
            },
        ],
    },
]


def _explain_concept(args: dict[str, str]) -> str:
    concept = args.get("concept", "")
    level = args.get("level") or "beginner"
    text = (
        f'Explain "{concept}" at a {level} level. Cover the following:\n\n'
        "1. The basic definition\n"
        "2. Why it matters\n"
        "3. Concrete usage examples\n"
        "4. Next steps for learning\n"
    )
    if level == "beginner":
        text += "\nExplain any jargon in plain language."
    elif level == "advanced":
        text += "\nInclude technical details and internals."
    return text


def _code_review(args: dict[str, str]) -> str:
    code = args.get("code", "")
    language = args.get("language") or "unknown"
    return (
        f"Please review the following {language} code:\n\n"
        f"```{language}\n{code}\n```\n\n"
        "Review it for:\n"
        "1. Correctness\n"
        "2. Readability and maintainability\n"
        "3. Performance\n"
        "4. Security\n"
        "5. Adherence to best practices\n"
        "6. Suggested improvements"
    )


def _debug_help(args: dict[str, str]) -> str:
    error_message = args.get("error_message", "")
    context = args.get("context") or "not provided"
    return (
        "Please help me debug the following error:\n\n"
        f"Error message:\n```\n{error_message}\n```\n\n"
        f"Context:\n{context}\n\n"
        "Please provide:\n"
        "1. An analysis of the cause\n"
        "2. Possible fixes\n"
        "3. How to prevent it in future\n"
        "4. Relevant documentation or resources"
    )


_RENDERERS = {
    "explain_concept": _explain_concept,
    "code_review": _code_review,
    "debug_help": _debug_help,
}


def get_prompt(name: str, arguments: dict[str, str] | None = None) -> dict[str, Any]:
    """Render a prompt as a single user message."""
    render = _RENDERERS.get(name)
    if render is None:
        raise RPCError(METHOD_NOT_FOUND, f"Unknown prompt: {name}")
    description = next(p["description"] for p in PROMPTS if p["name"] == name)
    return {
        "description": description,
        "messages": [
            {"role": "user", "content": {"type": "text", "text": render(arguments or {})}},
        ],
    }
