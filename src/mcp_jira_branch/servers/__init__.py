"""MCP server wiring for the Jira branch tools."""

from .dispatcher import ToolDispatcher
from .main import build_app_context, create_server, run_server

__all__ = ["ToolDispatcher", "build_app_context", "create_server", "run_server"]
