"""Backend state shared by the dispatcher for the lifetime of the process."""

import logging
from collections.abc import Mapping
from typing import Any, Protocol

from mcp.types import Tool

from .cloud import CloudProxyAdapter
from .config import BackendMode, JiraConfig
from .direct import DirectApiAdapter

logger = logging.getLogger("mcp-jira-branch.jira.backend")


class JiraBackend(Protocol):
    """What both adapters offer to the dispatcher."""

    async def list_tools(self) -> list[Tool]: ...

    async def call_tool(
        self, name: str, arguments: Mapping[str, Any]
    ) -> dict[str, Any]: ...

    async def aclose(self) -> None: ...


class BackendState:
    """Holds the frozen configuration and at most one lazily built adapter."""

    def __init__(self, config: JiraConfig, adapter: JiraBackend | None = None) -> None:
        self.config = config
        self.mode: BackendMode = config.mode
        self._adapter = adapter

    def get_adapter(self) -> JiraBackend:
        if self._adapter is None:
            logger.info(f"Using Jira backend: {self.mode.value}")
            if self.mode is BackendMode.DIRECT_API:
                self._adapter = DirectApiAdapter(self.config)
            else:
                self._adapter = CloudProxyAdapter(self.config)
        return self._adapter

    async def list_tools(self) -> list[Tool]:
        return await self.get_adapter().list_tools()

    async def call_tool(self, name: str, arguments: Mapping[str, Any]) -> dict[str, Any]:
        return await self.get_adapter().call_tool(name, arguments)

    async def aclose(self) -> None:
        if self._adapter is not None:
            await self._adapter.aclose()
