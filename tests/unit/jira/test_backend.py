"""Tests for the process-wide backend state."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from mcp_jira_branch.jira.backend import BackendState
from mcp_jira_branch.jira.cloud import CloudProxyAdapter
from mcp_jira_branch.jira.config import BackendMode, JiraConfig
from mcp_jira_branch.jira.direct import DirectApiAdapter


def test_direct_api_adapter_built_once():
    state = BackendState(JiraConfig(base_url="https://jira.example.com", personal_token="p"))

    adapter = state.get_adapter()

    assert state.mode is BackendMode.DIRECT_API
    assert isinstance(adapter, DirectApiAdapter)
    assert state.get_adapter() is adapter


def test_cloud_adapter_selected_without_base_url():
    state = BackendState(JiraConfig(cloud_id="site"))
    assert state.mode is BackendMode.CLOUD
    assert isinstance(state.get_adapter(), CloudProxyAdapter)


def test_adapter_not_built_until_used():
    with patch("mcp_jira_branch.jira.backend.CloudProxyAdapter") as mock_cloud:
        BackendState(JiraConfig())
    mock_cloud.assert_not_called()


@pytest.mark.anyio
async def test_calls_delegate_to_adapter():
    adapter = MagicMock()
    adapter.call_tool = AsyncMock(return_value={"content": []})
    adapter.aclose = AsyncMock()
    state = BackendState(JiraConfig(), adapter=adapter)

    assert await state.call_tool("getJiraIssue", {"issueIdOrKey": "A-1"}) == {"content": []}
    await state.aclose()

    adapter.call_tool.assert_awaited_once_with("getJiraIssue", {"issueIdOrKey": "A-1"})
    adapter.aclose.assert_awaited_once()
