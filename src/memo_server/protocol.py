"""JSON-RPC 2.0 message helpers (no I/O)."""

from __future__ import annotations

import json
from typing import Any

PROTOCOL_VERSION = "2024-11-05"

INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602
INTERNAL_ERROR = -32603


class RPCError(Exception):
    """A protocol-level fault, reported to the client as a JSON-RPC error object."""

    def __init__(self, code: int, message: str) -> None:
        super().__init__(message)
        self.code = code
        self.message = message


def jsonrpc_result(req_id: Any, result: dict[str, Any]) -> dict[str, Any]:
    return {"jsonrpc": "2.0", "id": req_id, "result": result}


def jsonrpc_error(req_id: Any, code: int, message: str) -> dict[str, Any]:
    return {"jsonrpc": "2.0", "id": req_id, "error": {"code": code, "message": message}}


def text_content(text: str) -> dict[str, Any]:
    """Wrap text as a tools/call result."""
    return {"content": [{"type": "text", "text": text}]}


def parse_line(line: str) -> dict[str, Any]:
    """Parse one NDJSON line into a request dict.

    Raises json.JSONDecodeError for malformed JSON and RPCError when the
    payload is not a JSON object.
    """
    req = json.loads(line)
    if not isinstance(req, dict):
        raise RPCError(INVALID_REQUEST, "Request must be a JSON object")
    return req


def format_message(message: dict[str, Any]) -> str:
    """Serialize a response as one NDJSON line."""
    return json.dumps(message, ensure_ascii=False) + "\n"
