"""MCP server: memo tools, prompt templates and memo resources.

Protocol: JSON-RPC 2.0 over stdio (NDJSON). Requests are handled one at a
time, to completion, in arrival order. Diagnostics go to stderr through
``logging``; stdout carries responses only.
"""

from __future__ import annotations

import asyncio
import json
import logging
import re
import sys
from typing import Callable

from memo_server.config import ServerConfig
from memo_server.memo.errors import MemoError, MemoNotFoundError
from memo_server.memo.store import MemoStore
from memo_server.prompts import PROMPTS, get_prompt
from memo_server.protocol import (
    INTERNAL_ERROR,
    INVALID_PARAMS,
    INVALID_REQUEST,
    METHOD_NOT_FOUND,
    PROTOCOL_VERSION,
    RPCError,
    format_message,
    jsonrpc_error,
    jsonrpc_result,
    parse_line,
    text_content,
)
from memo_server.tools.basic_tools import get_basic_tools
from memo_server.tools.memo_tools import DATE_FORMAT, get_memo_tools
from memo_server.tools.schemas import TOOLS, TOOLS_BY_NAME

logger = logging.getLogger(__name__)

RESOURCE_URI = re.compile(r"^memo://(.+)$")


class MemoServer:
    """Routes JSON-RPC requests to tool, prompt and resource handlers."""

    def __init__(self, config: ServerConfig) -> None:
        self.config = config
        self.store = MemoStore(
            config.memos_dir,
            extension=config.extension,
            max_filename_length=config.max_filename_length,
        )
        self._tools: dict[str, Callable[..., str]] = {
            **get_basic_tools(),
            **get_memo_tools(self.store),
        }
        self._methods: dict[str, Callable[[dict], dict]] = {
            "initialize": self._initialize,
            "ping": lambda params: {},
            "tools/list": lambda params: {"tools": TOOLS},
            "tools/call": self.call_tool,
            "prompts/list": lambda params: {"prompts": PROMPTS},
            "prompts/get": self._get_prompt,
            "resources/list": self.list_resources,
            "resources/read": self.read_resource,
        }

    # ── Request handler ──────────────────────────────────────

    async def handle_request(self, req: dict) -> dict | None:
        req_id = req.get("id")
        method = req.get("method", "")
        params = req.get("params") or {}

        # Notifications (no id) get no response
        if req_id is None:
            if method == "notifications/initialized":
                logger.info("Client initialized")
            return None

        handler = self._methods.get(method)
        if handler is None:
            return jsonrpc_error(req_id, METHOD_NOT_FOUND, f"Method not found: {method}")

        try:
            return jsonrpc_result(req_id, handler(params))
        except RPCError as e:
            return jsonrpc_error(req_id, e.code, e.message)
        except Exception as e:
            logger.exception("Handler error in %s", method)
            return jsonrpc_error(req_id, INTERNAL_ERROR, f"Internal error: {e}")

    def _initialize(self, params: dict) -> dict:
        return {
            "protocolVersion": PROTOCOL_VERSION,
            "capabilities": {"tools": {}, "prompts": {}, "resources": {}},
            "serverInfo": {
                "name": self.config.server_name,
                "version": self.config.server_version,
            },
        }

    # ── Tools ────────────────────────────────────────────────

    def call_tool(self, params: dict) -> dict:
        name = params.get("name", "")
        args = params.get("arguments") or {}

        handler = self._tools.get(name)
        if handler is None:
            raise RPCError(METHOD_NOT_FOUND, f"Unknown tool: {name}")

        schema = TOOLS_BY_NAME[name]["inputSchema"]
        missing = [key for key in schema.get("required", []) if key not in args]
        if missing:
            raise RPCError(
                INVALID_PARAMS, f"Missing required argument(s) for {name}: {', '.join(missing)}"
            )
        kwargs = {k: v for k, v in args.items() if k in schema["properties"]}

        logger.debug("-> %s(%s)", name, ", ".join(kwargs))
        try:
            text = handler(**kwargs)
        except Exception as e:
            logger.exception("Tool %s failed", name)
            text = f"Tool {name} failed: {e}"
        return text_content(text)

    # ── Prompts ──────────────────────────────────────────────

    def _get_prompt(self, params: dict) -> dict:
        return get_prompt(params.get("name", ""), params.get("arguments"))

    # ── Resources ────────────────────────────────────────────

    def _uri_for(self, filename: str) -> str:
        return f"memo://{filename[: -len(self.store.extension)]}"

    def list_resources(self, params: dict) -> dict:
        try:
            memos = self.store.list_memos()
        except MemoError as e:
            logger.error("Error listing resources: %s", e)
            return {"resources": []}
        return {
            "resources": [
                {
                    "uri": self._uri_for(m.filename),
                    "name": m.title,
                    "description": (
                        f"Memo: {m.title} (created {m.created_at.strftime(DATE_FORMAT)})"
                    ),
                    "mimeType": "text/plain",
                }
                for m in memos
            ]
        }

    def read_resource(self, params: dict) -> dict:
        uri = params.get("uri", "")
        match = RESOURCE_URI.match(uri)
        if not match:
            raise RPCError(
                INVALID_REQUEST, f"Invalid resource URI: {uri}. Expected format: memo://filename"
            )

        filename = match.group(1) + self.store.extension
        try:
            content = self.store.read_file(filename)
        except MemoNotFoundError:
            raise RPCError(INVALID_REQUEST, f"Resource not found: {uri}") from None
        except MemoError as e:
            raise RPCError(INTERNAL_ERROR, f"Failed to read resource: {e}") from e

        return {"contents": [{"uri": uri, "mimeType": "text/plain", "text": content}]}

    # ── Stdio transport (NDJSON) ─────────────────────────────

    async def handle_line(self, raw: bytes) -> dict | None:
        """Decode and handle one stdin line. Undecodable lines are logged and skipped."""
        try:
            line = raw.decode("utf-8").strip()
            if not line:
                return None
            req = parse_line(line)
        except (UnicodeDecodeError, json.JSONDecodeError, RPCError) as e:
            logger.warning("Parse error: %s", e)
            return None

        logger.debug("<- %s", req.get("method", "?"))
        return await self.handle_request(req)

    async def run(self) -> None:
        logger.info("Starting %s (memos_dir=%s)", self.config.server_name, self.store.root)
        self.store.ensure_directory()

        reader = asyncio.StreamReader()
        protocol = asyncio.StreamReaderProtocol(reader)
        await asyncio.get_running_loop().connect_read_pipe(lambda: protocol, sys.stdin)

        while True:
            line = await reader.readline()
            if not line:
                break
            response = await self.handle_line(line)
            if response:
                sys.stdout.write(format_message(response))
                sys.stdout.flush()

        logger.info("stdin closed, shutting down")
