from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from mcp_jira_branch.branching import BranchOrchestrator
    from mcp_jira_branch.jira import BackendState
    from mcp_jira_branch.servers.dispatcher import ToolDispatcher


@dataclass(frozen=True)
class MainAppContext:
    """Process-lifetime state shared by the tool handlers."""

    backend: BackendState
    branches: BranchOrchestrator
    dispatcher: ToolDispatcher
