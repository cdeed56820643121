from __future__ import annotations

import logging
from typing import Any, Mapping

import mcp.types as types
from mcp.server.lowlevel import Server
from mcp.server.stdio import stdio_server

from . import __version__
from .dispatcher import Dispatcher
from .execution.subprocess_engine import SubprocessEngine
from .registry import OperationSpec
from .settings import ServerSettings

logger = logging.getLogger(__name__)

SERVER_NAME = "just-mcp"


def to_mcp_tool(operation: OperationSpec) -> types.Tool:
    """Convert a registry entry into an MCP tool definition.

    Example:
        ```python
        tool = to_mcp_tool(REGISTRY["run"])
        ```
    """
    return types.Tool(
        name=operation.name,
        description=operation.description,
        inputSchema=operation.input_schema(),
    )


async def handle_call_tool(
    dispatcher: Dispatcher,
    name: str,
    arguments: Mapping[str, Any] | None,
) -> types.CallToolResult:
    """Dispatch one tool call and wrap the response for MCP.

    Example:
        ```python
        result = await handle_call_tool(dispatcher, "list", {})
        ```
    """
    response = await dispatcher.dispatch(name, arguments or {})
    return types.CallToolResult(
        content=[types.TextContent(type="text", text=response.text)],
        isError=response.is_error,
    )


def build_dispatcher(settings: ServerSettings) -> Dispatcher:
    """Create the dispatcher wired to a subprocess engine.

    Example:
        ```python
        dispatcher = build_dispatcher(ServerSettings())
        ```
    """
    return Dispatcher(
        SubprocessEngine(executable=settings.executable),
        default_timeout_ms=settings.default_timeout_ms,
    )


def build_server(dispatcher: Dispatcher) -> Server:
    """Create the MCP server exposing the dispatcher's tools.

    Example:
        ```python
        server = build_server(build_dispatcher(ServerSettings()))
        ```
    """
    server: Server = Server(SERVER_NAME, version=__version__)

    @server.list_tools()
    async def list_tools() -> list[types.Tool]:
        """Advertise every registered tool.

        Example:
            ```python
            tools = await list_tools()
            ```
        """
        return [to_mcp_tool(operation) for operation in dispatcher.operations()]

    async def call_tool(request: types.CallToolRequest) -> types.ServerResult:
        """Answer `tools/call` without SDK-side schema validation.

        Example:
            ```python
            result = await call_tool(request)
            ```
        """
        result = await handle_call_tool(dispatcher, request.params.name, request.params.arguments)
        return types.ServerResult(result)

    server.request_handlers[types.CallToolRequest] = call_tool
    return server


async def serve_stdio(settings: ServerSettings) -> None:
    """Run the MCP server over stdin/stdout until the client disconnects.

    Example:
        ```python
        asyncio.run(serve_stdio(ServerSettings()))
        ```
    """
    server = build_server(build_dispatcher(settings))
    async with stdio_server() as (read_stream, write_stream):
        logger.info("just-mcp server running on stdio")
        await server.run(read_stream, write_stream, server.create_initialization_options())
