"""Cloud proxy adapter forwarding tool calls to the Atlassian remote MCP server."""

import logging
from collections.abc import Callable, Mapping
from contextlib import AsyncExitStack
from typing import Any

import anyio
from fastmcp import Client
from fastmcp.client.transports import StdioTransport
from mcp.types import Tool

from ..exceptions import MCPJiraBackendError
from .config import JiraConfig

logger = logging.getLogger("mcp-jira-branch.jira.cloud")


def build_remote_transport(config: JiraConfig) -> StdioTransport:
    """Bridge process reaching the remote server: ``npx -y mcp-remote <url>``."""
    return StdioTransport(
        command=config.remote_mcp_command,
        args=["-y", "mcp-remote", config.remote_mcp_url],
    )


class CloudProxyAdapter:
    """Forwards ``list``/``call`` verbatim over one shared, lazily opened connection.

    The first call opens the connection, later calls reuse it. If opening
    fails the adapter stays disconnected, the call raises
    ``MCPJiraBackendError`` and the next call tries again.
    """

    def __init__(
        self,
        config: JiraConfig,
        client_factory: Callable[[JiraConfig], Client] | None = None,
    ) -> None:
        self.config = config
        self._client_factory = client_factory or (
            lambda cfg: Client(build_remote_transport(cfg))
        )
        self._client: Client | None = None
        self._exit_stack: AsyncExitStack | None = None
        self._connect_lock = anyio.Lock()

    @property
    def is_connected(self) -> bool:
        return self._client is not None

    async def get_client(self) -> Client:
        """Return the shared client, connecting on first use."""
        if self._client is not None:
            return self._client

        async with self._connect_lock:
            if self._client is not None:
                return self._client

            logger.info(f"Connecting to remote MCP server at {self.config.remote_mcp_url}")
            stack = AsyncExitStack()
            try:
                client = self._client_factory(self.config)
                with anyio.fail_after(self.config.timeout):
                    await stack.enter_async_context(client)
            except Exception as e:
                await stack.aclose()
                logger.error(f"Failed to connect to remote MCP server: {e}")
                raise MCPJiraBackendError(
                    f"Unable to connect to remote MCP server: {e}"
                ) from e

            self._client = client
            self._exit_stack = stack
            return client

    async def list_tools(self) -> list[Tool]:
        client = await self.get_client()
        try:
            with anyio.fail_after(self.config.timeout):
                return list(await client.list_tools())
        except TimeoutError as e:
            raise MCPJiraBackendError("Remote MCP server timed out listing tools") from e
        except Exception as e:
            logger.error(f"Remote MCP server rejected tool listing: {e}")
            raise MCPJiraBackendError(f"Remote MCP server rejected tool listing: {e}") from e

    async def call_tool(self, name: str, arguments: Mapping[str, Any]) -> dict[str, Any]:
        """Forward one call and return the raw result as a JSON-compatible mapping.

        A result flagged ``isError`` is returned as-is; only transport-level
        failures raise.

        Raises:
            MCPJiraBackendError: If the connection or the call fails
        """
        client = await self.get_client()
        logger.debug(f"Forwarding {name} to remote MCP server")
        try:
            with anyio.fail_after(self.config.timeout):
                result = await client.call_tool_mcp(name, dict(arguments))
        except TimeoutError as e:
            raise MCPJiraBackendError(f"Remote MCP server timed out calling {name}") from e
        except Exception as e:
            logger.error(f"Remote MCP server rejected {name}: {e}")
            raise MCPJiraBackendError(f"Remote MCP server rejected {name}: {e}") from e
        return result.model_dump(mode="json", by_alias=True, exclude_none=True)

    async def aclose(self) -> None:
        if self._exit_stack is not None:
            await self._exit_stack.aclose()
        self._client = None
        self._exit_stack = None
