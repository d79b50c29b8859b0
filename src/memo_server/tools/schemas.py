"""Tool catalog returned by tools/list."""

from __future__ import annotations

from typing import Any


def _schema(properties: dict[str, Any], required: list[str] | None = None) -> dict[str, Any]:
    schema: dict[str, Any] = {"type": "object", "properties": properties}
    if required:
        schema["required"] = required
    return schema


_NUMBERS = _schema(
    {
        "a": {"type": "number", "description": "First number"},
        "b": {"type": "number", "description": "Second number"},
    },
    ["a", "b"],
)

TOOLS: list[dict[str, Any]] = [
    {
        "name": "add",
        "description": "Add two numbers",
        "inputSchema": _NUMBERS,
    },
    {
        "name": "multiply",
        "description": "Multiply two numbers",
        "inputSchema": _NUMBERS,
    },
    {
        "name": "echo",
        "description": "Return the given string unchanged",
        "inputSchema": _schema(
            {"message": {"type": "string", "description": "String to return"}},
            ["message"],
        ),
    },
    {
        "name": "create_memo",
        "description": "Create a memo and save it to a file",
        "inputSchema": _schema(
            {
                "title": {"type": "string", "description": "Memo title"},
                "content": {"type": "string", "description": "Memo content"},
            },
            ["title", "content"],
        ),
    },
    {
        "name": "list_memos",
        "description": "List saved memos, newest first",
        "inputSchema": _schema({}),
    },
    {
        "name": "read_memo",
        "description": "Read the content of a memo",
        "inputSchema": _schema(
            {"title": {"type": "string", "description": "Title of the memo to read"}},
            ["title"],
        ),
    },
    {
        "name": "delete_memo",
        "description": "Delete a memo",
        "inputSchema": _schema(
            {"title": {"type": "string", "description": "Title of the memo to delete"}},
            ["title"],
        ),
    },
    {
        "name": "search_memo",
        "description": "Search memos by title or content",
        "inputSchema": _schema(
            {"query": {"type": "string", "description": "Search query"}},
            ["query"],
        ),
    },
    {
        "name": "create_memo_with_category",
        "description": "Create a memo with a category and tags",
        "inputSchema": _schema(
            {
                "title": {"type": "string", "description": "Memo title"},
                "content": {"type": "string", "description": "Memo content"},
                "category": {"type": "string", "description": "Category (optional)"},
                "tags": {
                    "type": "array",
                    "items": {"type": "string"},
                    "description": "Tags (optional)",
                },
            },
            ["title", "content"],
        ),
    },
    {
        "name": "list_memos_by_category",
        "description": "List memos in a category",
        "inputSchema": _schema(
            {"category": {"type": "string", "description": "Category name"}},
            ["category"],
        ),
    },
    {
        "name": "list_memos_by_tag",
        "description": "List memos carrying a tag",
        "inputSchema": _schema(
            {"tag": {"type": "string", "description": "Tag name"}},
            ["tag"],
        ),
    },
    {
        "name": "list_categories",
        "description": "List the categories in use",
        "inputSchema": _schema({}),
    },
    {
        "name": "list_tags",
        "description": "List the tags in use",
        "inputSchema": _schema({}),
    },
]

TOOLS_BY_NAME: dict[str, dict[str, Any]] = {t["name"]: t for t in TOOLS}
