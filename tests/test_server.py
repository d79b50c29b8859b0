"""Tests for JSON-RPC request handling.

These call ``MemoServer.handle_request`` directly, bypassing the stdio
transport.
"""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from memo_server.config import ServerConfig
from memo_server.protocol import (
    INTERNAL_ERROR,
    INVALID_PARAMS,
    INVALID_REQUEST,
    METHOD_NOT_FOUND,
    RPCError,
    format_message,
    parse_line,
)
from memo_server.server import MemoServer


@pytest.fixture
def server(tmp_path: Path) -> MemoServer:
    return MemoServer(ServerConfig(memos_dir=tmp_path / "memos"))


async def call(server: MemoServer, method: str, params: dict | None = None, req_id: int = 1):
    req = {"jsonrpc": "2.0", "id": req_id, "method": method}
    if params is not None:
        req["params"] = params
    return await server.handle_request(req)


async def call_tool(server: MemoServer, name: str, **arguments) -> dict:
    return await call(server, "tools/call", {"name": name, "arguments": arguments})


def tool_text(response: dict) -> str:
    return response["result"]["content"][0]["text"]


class TestLifecycle:
    @pytest.mark.asyncio
    async def test_initialize(self, server: MemoServer):
        response = await call(server, "initialize", {})
        result = response["result"]
        assert response["id"] == 1
        assert result["serverInfo"]["name"] == "mcp-memo-server"
        assert set(result["capabilities"]) == {"tools", "prompts", "resources"}

    @pytest.mark.asyncio
    async def test_notification_has_no_response(self, server: MemoServer):
        req = {"jsonrpc": "2.0", "method": "notifications/initialized"}
        assert await server.handle_request(req) is None

    @pytest.mark.asyncio
    async def test_ping(self, server: MemoServer):
        assert (await call(server, "ping"))["result"] == {}

    @pytest.mark.asyncio
    async def test_unknown_method(self, server: MemoServer):
        response = await call(server, "nope/nope")
        assert response["error"]["code"] == METHOD_NOT_FOUND


class TestTools:
    @pytest.mark.asyncio
    async def test_list(self, server: MemoServer):
        tools = (await call(server, "tools/list"))["result"]["tools"]
        assert {t["name"] for t in tools} == {
            "add", "multiply", "echo",
            "create_memo", "list_memos", "read_memo", "delete_memo", "search_memo",
            "create_memo_with_category", "list_memos_by_category", "list_memos_by_tag",
            "list_categories", "list_tags",
        }
        by_name = {t["name"]: t for t in tools}
        schema = by_name["create_memo_with_category"]["inputSchema"]
        assert schema["required"] == ["title", "content"]
        assert schema["properties"]["tags"]["type"] == "array"

    @pytest.mark.asyncio
    async def test_add(self, server: MemoServer):
        assert tool_text(await call_tool(server, "add", a=2, b=3)) == "2 + 3 = 5"

    @pytest.mark.asyncio
    async def test_unknown_tool_is_fault(self, server: MemoServer):
        response = await call_tool(server, "divide", a=1, b=2)
        assert response["error"]["code"] == METHOD_NOT_FOUND
        assert "divide" in response["error"]["message"]

    @pytest.mark.asyncio
    async def test_missing_argument_is_fault(self, server: MemoServer):
        response = await call_tool(server, "create_memo", title="x")
        assert response["error"]["code"] == INVALID_PARAMS
        assert "content" in response["error"]["message"]

    @pytest.mark.asyncio
    async def test_extra_arguments_ignored(self, server: MemoServer):
        response = await call_tool(server, "echo", message="hi", extra=True)
        assert tool_text(response) == "hi"

    @pytest.mark.asyncio
    async def test_memo_failure_is_content(self, server: MemoServer):
        await call_tool(server, "create_memo", title="Dup", content="1")
        response = await call_tool(server, "create_memo", title="Dup", content="2")
        assert "error" not in response
        assert "already exists" in tool_text(response)

    @pytest.mark.asyncio
    async def test_not_found_is_content(self, server: MemoServer):
        response = await call_tool(server, "delete_memo", title="ghost")
        assert tool_text(response) == 'Memo "ghost" not found.'

    @pytest.mark.asyncio
    async def test_unexpected_exception_is_content(self, server: MemoServer, monkeypatch):
        def boom():
            raise RuntimeError("kaboom")

        monkeypatch.setattr(server.store, "list_memos", boom)
        response = await call_tool(server, "list_memos")
        assert "error" not in response
        assert "kaboom" in tool_text(response)

    @pytest.mark.asyncio
    async def test_wrong_argument_type_is_content(self, server: MemoServer):
        response = await call_tool(server, "read_memo", title=42)
        assert "error" not in response
        assert tool_text(response).startswith("Tool read_memo failed:")

    @pytest.mark.asyncio
    async def test_non_tool_exception_stays_internal_error(self, server: MemoServer, monkeypatch):
        def boom(params):
            raise RuntimeError("kaboom")

        monkeypatch.setitem(server._methods, "resources/list", boom)
        response = await call(server, "resources/list")
        assert response["error"]["code"] == INTERNAL_ERROR

    @pytest.mark.asyncio
    async def test_end_to_end(self, server: MemoServer):
        await call_tool(server, "create_memo", title="Shopping List", content="milk, bread, eggs")
        assert "milk, bread, eggs" in tool_text(await call_tool(server, "read_memo", title="Shopping List"))
        assert "shopping list" in tool_text(await call_tool(server, "search_memo", query="milk"))
        await call_tool(server, "delete_memo", title="Shopping List")
        assert "not found" in tool_text(await call_tool(server, "read_memo", title="Shopping List"))


class TestPrompts:
    @pytest.mark.asyncio
    async def test_list(self, server: MemoServer):
        prompts = (await call(server, "prompts/list"))["result"]["prompts"]
        assert [p["name"] for p in prompts] == ["explain_concept", "code_review", "debug_help"]

    @pytest.mark.asyncio
    async def test_get(self, server: MemoServer):
        response = await call(
            server, "prompts/get", {"name": "code_review", "arguments": {"code": "x = 1"}}
        )
        [message] = response["result"]["messages"]
        assert message["role"] == "user"
        assert "x = 1" in message["content"]["text"]

    @pytest.mark.asyncio
    async def test_unknown(self, server: MemoServer):
        response = await call(server, "prompts/get", {"name": "haiku"})
        assert response["error"]["code"] == METHOD_NOT_FOUND


class TestResources:
    @pytest.mark.asyncio
    async def test_list(self, server: MemoServer):
        await call_tool(server, "create_memo", title="Shopping List", content="milk")
        resources = (await call(server, "resources/list"))["result"]["resources"]
        assert len(resources) == 1
        assert resources[0]["uri"] == "memo://shopping_list"
        assert resources[0]["name"] == "shopping list"
        assert resources[0]["mimeType"] == "text/plain"

    @pytest.mark.asyncio
    async def test_list_empty(self, server: MemoServer):
        assert (await call(server, "resources/list"))["result"] == {"resources": []}

    @pytest.mark.asyncio
    async def test_read(self, server: MemoServer):
        await call_tool(server, "create_memo", title="Shopping List", content="milk")
        response = await call(server, "resources/read", {"uri": "memo://shopping_list"})
        [content] = response["result"]["contents"]
        assert content == {"uri": "memo://shopping_list", "mimeType": "text/plain", "text": "milk"}

    @pytest.mark.asyncio
    async def test_read_invalid_uri(self, server: MemoServer):
        response = await call(server, "resources/read", {"uri": "file:///etc/passwd"})
        assert response["error"]["code"] == INVALID_REQUEST
        assert "Invalid resource URI" in response["error"]["message"]

    @pytest.mark.asyncio
    async def test_read_missing(self, server: MemoServer):
        response = await call(server, "resources/read", {"uri": "memo://ghost"})
        assert response["error"]["code"] == INVALID_REQUEST
        assert response["error"]["message"] == "Resource not found: memo://ghost"


class TestFraming:
    def test_parse_line(self):
        assert parse_line('{"id": 1, "method": "ping"}') == {"id": 1, "method": "ping"}

    def test_parse_line_rejects_non_object(self):
        with pytest.raises(RPCError):
            parse_line("[1, 2]")

    def test_parse_line_malformed(self):
        with pytest.raises(json.JSONDecodeError):
            parse_line("{nope")

    @pytest.mark.asyncio
    async def test_handle_line(self, server: MemoServer):
        response = await server.handle_line(b'{"jsonrpc":"2.0","id":1,"method":"ping"}\n')
        assert response == {"jsonrpc": "2.0", "id": 1, "result": {}}

    @pytest.mark.asyncio
    async def test_handle_line_skips_invalid_utf8(self, server: MemoServer):
        assert await server.handle_line(b"\xff\xfe\n") is None
        # the next line is still served
        response = await server.handle_line(b'{"jsonrpc":"2.0","id":2,"method":"ping"}\n')
        assert response["id"] == 2

    @pytest.mark.asyncio
    async def test_handle_line_skips_blank_and_malformed(self, server: MemoServer):
        assert await server.handle_line(b"   \n") is None
        assert await server.handle_line(b"{nope\n") is None

    def test_format_message_is_one_line(self):
        line = format_message({"jsonrpc": "2.0", "id": 1, "result": {"text": "a\nb ×"}})
        assert line.endswith("\n")
        assert line.count("\n") == 1
        assert "×" in line
