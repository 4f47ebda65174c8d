"""
MCP server wiring.

Exposes a ToolAdapter over the Model Context Protocol using the SDK's
low-level Server on stdio. Two inbound operations:

- tools/list: the static registry (name, description, inputSchema)
- tools/call: one dispatched call, returned as a single text content block

Domain errors become MCP protocol errors here and nowhere else.
"""

from typing import Any

import mcp.types as types
from mcp.server.lowlevel import Server
from mcp.server.stdio import stdio_server
from mcp.shared.exceptions import McpError

from customer_review_mcp import __version__
from customer_review_mcp.config.logging import get_logger
from customer_review_mcp.config.settings import Settings
from customer_review_mcp.errors import (
    InvalidParamsError,
    ReviewServerError,
    UnknownToolError,
)
from customer_review_mcp.tools.base import ToolAdapter
from customer_review_mcp.tools.dispatcher import RequestDispatcher

logger = get_logger(__name__)


def to_mcp_error(error: ReviewServerError) -> McpError:
    """Map a domain error onto the matching JSON-RPC error code."""
    if isinstance(error, UnknownToolError):
        code = types.METHOD_NOT_FOUND
    elif isinstance(error, InvalidParamsError):
        code = types.INVALID_PARAMS
    else:
        code = types.INTERNAL_ERROR
    return McpError(types.ErrorData(code=code, message=str(error), data={"code": error.code}))


async def handle_list_tools(adapter: ToolAdapter) -> list[types.Tool]:
    return [
        types.Tool(
            name=tool["name"],
            description=tool["description"],
            inputSchema=tool["input_schema"],
        )
        for tool in await adapter.list_tools()
    ]


async def handle_call_tool(
    adapter: ToolAdapter, name: str, arguments: dict[str, Any] | None
) -> list[types.TextContent]:
    """
    Run one tool call through the adapter.

    Raises:
        McpError: For every failure; nothing is retried or swallowed
    """
    try:
        result = await adapter.call(name, arguments or {})
    except ReviewServerError as e:
        logger.warning(f"{name} failed [{e.code}]: {e}")
        raise to_mcp_error(e) from e
    return [types.TextContent(type="text", text=result["text"])]


def build_server(adapter: ToolAdapter, name: str = "appstore-connect-server") -> Server:
    """
    Create the MCP server with list/call handlers bound to ``adapter``.

    tools/call is registered on ``request_handlers`` directly so an McpError
    reaches the session as a JSON-RPC error with its code; ``@server.call_tool()``
    would fold it into an ``isError`` result.
    """
    server = Server(name, version=__version__)

    @server.list_tools()
    async def list_tools() -> list[types.Tool]:
        return await handle_list_tools(adapter)

    async def call_tool(request: types.CallToolRequest) -> types.ServerResult:
        content = await handle_call_tool(adapter, request.params.name, request.params.arguments)
        return types.ServerResult(types.CallToolResult(content=content, isError=False))

    server.request_handlers[types.CallToolRequest] = call_tool
    return server


async def serve(settings: Settings) -> None:
    """Run the MCP server on stdio until the client disconnects."""
    async with RequestDispatcher.from_settings(settings.connect) as dispatcher:
        server = build_server(dispatcher, settings.server_name)
        async with stdio_server() as (read_stream, write_stream):
            logger.info("App Store Connect MCP server running on stdio")
            await server.run(
                read_stream,
                write_stream,
                server.create_initialization_options(),
            )
