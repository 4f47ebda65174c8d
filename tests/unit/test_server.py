"""
Tests for the MCP boundary: tool listing, call results as text content,
and domain errors mapped onto JSON-RPC error codes.
"""

import json
from unittest.mock import AsyncMock, MagicMock

import mcp.types as types
import pytest
from mcp.server.lowlevel import Server
from mcp.shared.exceptions import McpError

from customer_review_mcp.errors import (
    CredentialError,
    InvalidParamsError,
    UnknownToolError,
    UpstreamError,
)
from customer_review_mcp.server import (
    build_server,
    handle_call_tool,
    handle_list_tools,
    to_mcp_error,
)
from customer_review_mcp.tools.base import ToolAdapter


class TestErrorMapping:
    @pytest.mark.parametrize(
        "error, expected_code",
        [
            (UnknownToolError("nope"), types.METHOD_NOT_FOUND),
            (InvalidParamsError("appId is required"), types.INVALID_PARAMS),
            (CredentialError("key missing"), types.INTERNAL_ERROR),
            (UpstreamError("Review not found", status_code=404), types.INTERNAL_ERROR),
        ],
    )
    def test_codes(self, error, expected_code):
        mcp_error = to_mcp_error(error)

        assert isinstance(mcp_error, McpError)
        assert mcp_error.error.code == expected_code
        assert mcp_error.error.message == str(error)
        assert mcp_error.error.data == {"code": error.code}


class TestHandlers:
    @pytest.mark.asyncio
    async def test_list_tools_from_dispatcher(self, dispatcher):
        tools = await handle_list_tools(dispatcher)

        assert len(tools) == 9
        assert all(isinstance(tool, types.Tool) for tool in tools)
        by_name = {tool.name: tool for tool in tools}
        assert by_name["get_app_info"].inputSchema["required"] == ["appId"]

    @pytest.mark.asyncio
    async def test_call_returns_single_text_block(self, dispatcher, spy):
        body = {"data": {"id": "123", "type": "apps"}}
        spy.respond(200, body)

        content = await handle_call_tool(dispatcher, "get_app_info", {"appId": "123"})

        assert len(content) == 1
        assert content[0].type == "text"
        assert json.loads(content[0].text) == body

    @pytest.mark.asyncio
    async def test_none_arguments_treated_as_empty(self, dispatcher, spy):
        await handle_call_tool(dispatcher, "list_apps", None)

        assert spy.last.url.params["limit"] == "100"

    @pytest.mark.asyncio
    async def test_invalid_params_raise_mcp_error(self, dispatcher, spy):
        with pytest.raises(McpError) as exc_info:
            await handle_call_tool(dispatcher, "get_app_info", {})

        assert exc_info.value.error.code == types.INVALID_PARAMS
        assert spy.requests == []

    @pytest.mark.asyncio
    async def test_unknown_tool_raises_method_not_found(self, dispatcher):
        with pytest.raises(McpError) as exc_info:
            await handle_call_tool(dispatcher, "add_beta_tester", {})

        assert exc_info.value.error.code == types.METHOD_NOT_FOUND

    @pytest.mark.asyncio
    async def test_upstream_error_message_carries_detail(self, dispatcher, spy):
        spy.respond(404, {"errors": [{"detail": "Review not found"}]})

        with pytest.raises(McpError) as exc_info:
            await handle_call_tool(dispatcher, "get_customer_review_response", {"reviewId": "r1"})

        assert exc_info.value.error.code == types.INTERNAL_ERROR
        assert exc_info.value.error.message == "App Store Connect API error: Review not found"

    @pytest.mark.asyncio
    async def test_works_with_any_adapter(self):
        adapter = MagicMock(spec=ToolAdapter)
        adapter.call = AsyncMock(return_value={"text": "hello"})

        content = await handle_call_tool(adapter, "anything", {"x": 1})

        adapter.call.assert_awaited_once_with("anything", {"x": 1})
        assert content[0].text == "hello"


class TestBuildServer:
    def test_returns_named_lowlevel_server(self, dispatcher):
        server = build_server(dispatcher, "test-server")

        assert isinstance(server, Server)
        assert server.name == "test-server"

    def test_registers_list_and_call_handlers(self, dispatcher):
        server = build_server(dispatcher)

        assert types.ListToolsRequest in server.request_handlers
        assert types.CallToolRequest in server.request_handlers


def _call_request(name, arguments=None) -> types.CallToolRequest:
    return types.CallToolRequest(
        method="tools/call",
        params=types.CallToolRequestParams(name=name, arguments=arguments),
    )


class TestRegisteredCallHandler:
    """What a client receives through the handler the session dispatches to."""

    @pytest.fixture
    def call_handler(self, dispatcher):
        return build_server(dispatcher).request_handlers[types.CallToolRequest]

    @pytest.mark.asyncio
    async def test_success_is_text_result(self, call_handler, spy):
        body = {"data": [{"id": "g1", "type": "betaGroups"}]}
        spy.respond(200, body)

        response = await call_handler(_call_request("list_beta_groups", {}))

        result = response.root
        assert isinstance(result, types.CallToolResult)
        assert result.isError is False
        assert json.loads(result.content[0].text) == body

    @pytest.mark.asyncio
    async def test_unknown_tool_is_method_not_found(self, call_handler, spy):
        with pytest.raises(McpError) as exc_info:
            await call_handler(_call_request("nope", {}))

        assert exc_info.value.error.code == types.METHOD_NOT_FOUND
        assert exc_info.value.error.message == "Unknown tool: nope"
        assert spy.requests == []

    @pytest.mark.asyncio
    async def test_missing_required_argument_is_invalid_params(self, call_handler, spy):
        with pytest.raises(McpError) as exc_info:
            await call_handler(_call_request("get_app_info", {}))

        assert exc_info.value.error.code == types.INVALID_PARAMS
        assert "appId" in exc_info.value.error.message
        assert exc_info.value.error.data == {"code": "INVALID_PARAMS"}
        assert spy.requests == []

    @pytest.mark.asyncio
    async def test_missing_arguments_object_is_invalid_params(self, call_handler, spy):
        with pytest.raises(McpError) as exc_info:
            await call_handler(_call_request("delete_customer_review_response"))

        assert exc_info.value.error.code == types.INVALID_PARAMS
        assert spy.requests == []

    @pytest.mark.asyncio
    async def test_upstream_not_found_is_internal_error(self, call_handler, spy):
        spy.respond(404, {"errors": [{"detail": "Review not found"}]})

        with pytest.raises(McpError) as exc_info:
            await call_handler(_call_request("get_customer_review_response", {"reviewId": "r1"}))

        assert exc_info.value.error.code == types.INTERNAL_ERROR
        assert exc_info.value.error.message == "App Store Connect API error: Review not found"
        assert exc_info.value.error.data == {"code": "UPSTREAM_ERROR"}
