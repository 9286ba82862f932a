"""MCP server exposing the Jira backend tools plus the composite branch tools."""

import logging
from collections.abc import AsyncIterator, Sequence
from contextlib import asynccontextmanager
from typing import Any

import mcp.types as types
from mcp.server import Server
from mcp.server.stdio import stdio_server

from mcp_jira_branch.branching import BranchConfig, BranchOrchestrator
from mcp_jira_branch.exceptions import MCPJiraBackendError
from mcp_jira_branch.jira import BackendState, JiraConfig
from mcp_jira_branch.logging_config import log_operation
from mcp_jira_branch.models import error_message

from .context import MainAppContext
from .dispatcher import ToolDispatcher

logger = logging.getLogger("mcp-jira-branch.server.main")

SERVER_NAME = "mcp-jira-branch"

ToolContent = types.TextContent | types.ImageContent | types.EmbeddedResource


def build_app_context(
    jira_config: JiraConfig | None = None,
    branch_config: BranchConfig | None = None,
) -> MainAppContext:
    """Build the backend state, branch orchestrator and dispatcher once."""
    backend = BackendState(jira_config or JiraConfig.from_env())
    branches = BranchOrchestrator(branch_config or BranchConfig.from_env())
    return MainAppContext(
        backend=backend,
        branches=branches,
        dispatcher=ToolDispatcher(backend, branches),
    )


def to_tool_content(result: dict[str, Any]) -> list[ToolContent]:
    """Convert a dispatcher result into MCP content, raising for error results.

    Raises:
        MCPJiraBackendError: If the result is flagged as an error
    """
    failure = error_message(result)
    if failure is not None:
        raise MCPJiraBackendError(failure)
    call_result = types.CallToolResult.model_validate(
        {"content": result.get("content") or [], "isError": False}
    )
    return list(call_result.content)


def _without_output_schema(tool: types.Tool) -> types.Tool:
    # Results are relayed as unstructured content only.
    if getattr(tool, "outputSchema", None) is None:
        return tool
    return tool.model_copy(update={"outputSchema": None})


def create_server(app_context: MainAppContext | None = None) -> Server:
    """Create the low-level MCP server with list/call handlers bound to one context."""
    context = app_context or build_app_context()

    @asynccontextmanager
    async def main_lifespan(_: Server) -> AsyncIterator[MainAppContext]:
        logger.info("Jira branch MCP server lifespan starting...")
        logger.info(f"Jira backend mode: {context.backend.mode.value}")
        try:
            yield context
        finally:
            logger.info("Jira branch MCP server lifespan shutting down...")
            try:
                await context.backend.aclose()
            except Exception as e:  # noqa: BLE001
                logger.error(f"Error during cleanup: {e}", exc_info=True)

    server: Server = Server(SERVER_NAME, lifespan=main_lifespan)

    @server.list_tools()
    async def list_tools() -> list[types.Tool]:
        with log_operation(logger, "list_tools"):
            tools = await context.dispatcher.list_tools()
        return [_without_output_schema(tool) for tool in tools]

    @server.call_tool()
    async def call_tool(name: str, arguments: dict[str, Any] | None) -> Sequence[ToolContent]:
        result = await context.dispatcher.call_tool(name, arguments)
        return to_tool_content(result)

    return server


async def run_server(app_context: MainAppContext | None = None) -> None:
    """Serve over stdio until the client disconnects."""
    server = create_server(app_context)
    async with stdio_server() as (read_stream, write_stream):
        await server.run(
            read_stream, write_stream, server.create_initialization_options()
        )
