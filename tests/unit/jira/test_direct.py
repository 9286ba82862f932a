"""Tests for the Direct API adapter."""

import json
from unittest.mock import MagicMock

import pytest

from mcp_jira_branch.exceptions import (
    MCPJiraBackendError,
    MCPJiraNotImplementedError,
    MCPJiraValidationError,
)
from mcp_jira_branch.jira.config import JiraConfig
from mcp_jira_branch.jira.direct import ROUTES, DirectApiAdapter, wrap_text_result
from mcp_jira_branch.jira.rest import JiraRestClient


@pytest.fixture
def rest_client():
    client = MagicMock(spec=JiraRestClient)
    client.request.return_value = {"key": "OPS-7", "id": "10007"}
    return client


@pytest.fixture
def adapter(rest_client):
    config = JiraConfig(base_url="https://jira.example.com", personal_token="pat")
    return DirectApiAdapter(config, client=rest_client)


def _payload(result):
    return json.loads(result["content"][0]["text"])


@pytest.mark.anyio
async def test_list_tools_covers_every_route(adapter):
    tools = await adapter.list_tools()

    assert [tool.name for tool in tools] == list(ROUTES)
    get_issue = next(tool for tool in tools if tool.name == "getJiraIssue")
    assert get_issue.inputSchema["required"] == ["issueIdOrKey"]


@pytest.mark.anyio
async def test_create_issue_maps_fields(adapter, rest_client):
    result = await adapter.call_tool(
        "createJiraIssue",
        {
            "projectKey": "OPS",
            "issueTypeName": "Bug",
            "summary": "Broken",
            "description": "Details",
            "fields": {"priority": {"name": "High"}, "labels": ["x"]},
        },
    )

    rest_client.request.assert_called_once_with(
        "POST",
        "issue",
        json_body={
            "fields": {
                "project": {"key": "OPS"},
                "summary": "Broken",
                "issuetype": {"name": "Bug"},
                "description": "Details",
                "priority": {"name": "High"},
                "labels": ["x"],
            }
        },
        params=None,
    )
    assert result["isError"] is False
    assert result["content"][0]["type"] == "text"
    assert _payload(result) == {"key": "OPS-7", "id": "10007"}


@pytest.mark.anyio
async def test_get_issue_quotes_path(adapter, rest_client):
    await adapter.call_tool("getJiraIssue", {"issueIdOrKey": " OPS-1 "})
    rest_client.request.assert_called_once_with(
        "GET", "issue/OPS-1", json_body=None, params=None
    )


@pytest.mark.anyio
async def test_edit_issue_body(adapter, rest_client):
    await adapter.call_tool(
        "editJiraIssue",
        {"issueIdOrKey": "OPS-1", "fields": {"assignee": None}, "update": "ignored"},
    )
    rest_client.request.assert_called_once_with(
        "PUT", "issue/OPS-1", json_body={"fields": {"assignee": None}}, params=None
    )


@pytest.mark.anyio
async def test_transition_issue_body(adapter, rest_client):
    await adapter.call_tool(
        "transitionJiraIssue", {"issueIdOrKey": "OPS-1", "transition": {"id": "31"}}
    )
    rest_client.request.assert_called_once_with(
        "POST",
        "issue/OPS-1/transitions",
        json_body={"transition": {"id": "31"}},
        params=None,
    )


@pytest.mark.anyio
async def test_createmeta_uses_query_params(adapter, rest_client):
    await adapter.call_tool(
        "getJiraIssueTypeMetaWithFields", {"projectIdOrKey": "OPS", "issueTypeId": "Bug"}
    )
    rest_client.request.assert_called_once_with(
        "GET",
        "issue/createmeta",
        json_body=None,
        params={"projectKeys": "OPS", "issuetypeNames": "Bug"},
    )


@pytest.mark.anyio
async def test_add_comment_body(adapter, rest_client):
    await adapter.call_tool(
        "addCommentToJiraIssue", {"issueIdOrKey": "OPS-1", "commentBody": "Hello"}
    )
    rest_client.request.assert_called_once_with(
        "POST", "issue/OPS-1/comment", json_body={"body": "Hello"}, params=None
    )


@pytest.mark.anyio
async def test_unknown_tool_is_not_implemented(adapter, rest_client):
    with pytest.raises(MCPJiraNotImplementedError, match="searchJiraIssuesUsingJql"):
        await adapter.call_tool("searchJiraIssuesUsingJql", {"jql": "project = OPS"})
    rest_client.request.assert_not_called()


@pytest.mark.anyio
async def test_missing_path_parameter(adapter, rest_client):
    with pytest.raises(MCPJiraValidationError) as excinfo:
        await adapter.call_tool("getJiraIssue", {"issueIdOrKey": "  "})
    assert excinfo.value.field == "issueIdOrKey"
    rest_client.request.assert_not_called()


@pytest.mark.anyio
async def test_backend_errors_propagate(adapter, rest_client):
    rest_client.request.side_effect = MCPJiraBackendError("HTTP 500: boom", 500, "boom")
    with pytest.raises(MCPJiraBackendError):
        await adapter.call_tool("getVisibleJiraProjects", {})


def test_wrap_text_result_serializes_payload():
    result = wrap_text_result({})
    assert result == {"content": [{"type": "text", "text": "{}"}], "isError": False}
