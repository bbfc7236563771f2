"""
MCP protocol binding.

Builds a low-level ``mcp`` Server that lists the tool catalog and routes
tool calls through the ToolDispatcher. Every failure inside a call is turned
into an ``isError`` result so one bad call never ends the session.
"""

import json
import logging
from typing import Any

import mcp.types as types
from mcp.server.lowlevel import Server
from mcp.server.stdio import stdio_server

from drug_safety_mcp import SERVER_NAME, __version__
from drug_safety_mcp.tools.dispatcher import ToolDispatcher
from drug_safety_mcp.tools.errors import ToolError

logger = logging.getLogger(__name__)


def error_result(message: str) -> types.CallToolResult:
    return types.CallToolResult(
        content=[types.TextContent(type="text", text=f"Error: {message}")],
        isError=True,
    )


async def call_tool(
    dispatcher: ToolDispatcher, name: str, arguments: dict[str, Any] | None
) -> types.CallToolResult:
    """Run one tool call and render the result as pretty-printed JSON text."""
    try:
        result = await dispatcher.dispatch(name, arguments)
    except ToolError as e:
        logger.warning("Tool %s failed: %s", name, e.message)
        return error_result(e.message)
    except Exception as e:
        logger.exception("Unexpected error in tool %s", name)
        return error_result(str(e))

    return types.CallToolResult(
        content=[
            types.TextContent(type="text", text=json.dumps(result, indent=2, default=str))
        ]
    )


def create_mcp_server(dispatcher: ToolDispatcher) -> Server:
    server: Server = Server(SERVER_NAME, version=__version__)

    @server.list_tools()
    async def handle_list_tools() -> list[types.Tool]:
        return [tool.to_mcp() for tool in dispatcher.list_tools()]

    # Arguments are validated by the parameter models, which produce the
    # field-level messages clients rely on.
    @server.call_tool(validate_input=False)
    async def handle_call_tool(
        name: str, arguments: dict[str, Any] | None
    ) -> types.CallToolResult:
        return await call_tool(dispatcher, name, arguments)

    return server


async def run_stdio(dispatcher: ToolDispatcher) -> None:
    """Serve MCP over stdin/stdout until the client disconnects."""
    server = create_mcp_server(dispatcher)
    logger.info("%s v%s running on stdio", SERVER_NAME, __version__)
    try:
        async with stdio_server() as (read_stream, write_stream):
            await server.run(
                read_stream, write_stream, server.create_initialization_options()
            )
    finally:
        await dispatcher.close()
