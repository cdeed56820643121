from __future__ import annotations

import mcp.types as types
import pytest

from just_mcp import REGISTRY, Dispatcher, ExecutionOutcome, ExecutionRequest, ServerSettings
from just_mcp.server import build_dispatcher, build_server, handle_call_tool, to_mcp_tool


class _FakeEngine:
    def __init__(self) -> None:
        self.requests: list[ExecutionRequest] = []

    async def execute(self, request: ExecutionRequest) -> ExecutionOutcome:
        self.requests.append(request)
        return ExecutionOutcome(stdout="default\nbuild", stderr="", exit_code=0)


def test_to_mcp_tool_mirrors_registry() -> None:
    tool = to_mcp_tool(REGISTRY["run"])
    assert tool.name == "run"
    assert tool.description == "Run a recipe from the justfile"
    assert tool.inputSchema == REGISTRY["run"].input_schema()


def test_build_dispatcher_uses_settings() -> None:
    dispatcher = build_dispatcher(ServerSettings(executable="just-dev", default_timeout_ms=1000))
    assert [op.name for op in dispatcher.operations()] == ["list", "run", "show"]


@pytest.mark.asyncio
async def test_handle_call_tool_success() -> None:
    engine = _FakeEngine()
    result = await handle_call_tool(Dispatcher(engine), "list", None)
    assert result.isError is False
    assert result.content[0].text == "default\nbuild"
    assert engine.requests[0].argv == ("--color=never", "--list")


@pytest.mark.asyncio
async def test_handle_call_tool_failure_sets_error_flag() -> None:
    engine = _FakeEngine()
    result = await handle_call_tool(Dispatcher(engine), "delete", {})
    assert result.isError is True
    assert result.content[0].text == "Error: Unknown tool: delete"
    assert engine.requests == []


@pytest.mark.asyncio
async def test_registered_call_handler_skips_schema_validation() -> None:
    engine = _FakeEngine()
    server = build_server(Dispatcher(engine))
    handler = server.request_handlers[types.CallToolRequest]
    request = types.CallToolRequest(
        method="tools/call",
        params=types.CallToolRequestParams(name="run", arguments={"recipe": "build", "args": ["-v", 3]}),
    )
    result = await handler(request)
    assert isinstance(result.root, types.CallToolResult)
    assert result.root.isError is False
    assert engine.requests[0].argv == ("--color=never", "build", "-v")


@pytest.mark.asyncio
async def test_registered_list_handler_advertises_tools() -> None:
    server = build_server(Dispatcher(_FakeEngine()))
    handler = server.request_handlers[types.ListToolsRequest]
    result = await handler(types.ListToolsRequest(method="tools/list"))
    assert [tool.name for tool in result.root.tools] == ["list", "run", "show"]
