"""Tests for the Jira REST client."""

from unittest.mock import MagicMock

import pytest
import requests

from mcp_jira_branch.exceptions import MCPJiraBackendError, MCPJiraConfigError
from mcp_jira_branch.jira.config import JiraConfig
from mcp_jira_branch.jira.rest import JiraRestClient


def _response(status_code=200, text=""):
    response = MagicMock()
    response.status_code = status_code
    response.text = text
    return response


@pytest.fixture
def jira_config():
    return JiraConfig(
        base_url="https://jira.example.com/jira/", personal_token="pat", timeout=5
    )


@pytest.fixture
def rest_client(jira_config):
    session = MagicMock(spec=requests.Session)
    session.headers = {}
    return JiraRestClient(jira_config, session=session)


def test_requires_base_url():
    with pytest.raises(MCPJiraConfigError, match="JIRA_BASE_URL"):
        JiraRestClient(JiraConfig(personal_token="pat"))


@pytest.mark.parametrize(
    "base_url",
    [
        "https://jira.example.com/jira",
        "https://jira.example.com/jira/",
        "https://jira.example.com/jira//",
    ],
)
def test_build_url_handles_trailing_slashes(base_url):
    client = JiraRestClient(
        JiraConfig(base_url=base_url, personal_token="pat"), session=MagicMock()
    )
    assert (
        client.build_url("issue/OPS-1")
        == "https://jira.example.com/jira/rest/api/2/issue/OPS-1"
    )


def test_build_url_without_base_path():
    client = JiraRestClient(
        JiraConfig(base_url="https://jira.example.com", personal_token="pat"),
        session=MagicMock(),
    )
    assert client.build_url("/project") == "https://jira.example.com/rest/api/2/project"


def test_build_url_keeps_explicit_api_path(rest_client):
    assert (
        rest_client.build_url("/rest/api/latest/myself")
        == "https://jira.example.com/jira/rest/api/latest/myself"
    )


def test_request_sends_auth_and_json(rest_client):
    rest_client.session.request.return_value = _response(200, '{"key": "OPS-1"}')

    result = rest_client.request("POST", "issue", json_body={"fields": {}})

    assert result == {"key": "OPS-1"}
    rest_client.session.request.assert_called_once_with(
        "POST",
        "https://jira.example.com/jira/rest/api/2/issue",
        json={"fields": {}},
        params=None,
        headers={"Authorization": "Bearer pat"},
        timeout=5,
    )
    assert rest_client.session.headers["Accept"] == "application/json"
    assert rest_client.session.headers["Content-Type"] == "application/json"


@pytest.mark.parametrize("body", ["", "   ", "<html>ok</html>"])
def test_empty_or_non_json_success_is_empty_object(rest_client, body):
    rest_client.session.request.return_value = _response(204, body)
    assert rest_client.request("PUT", "issue/OPS-1", json_body={}) == {}


def test_non_2xx_raises_backend_error(rest_client):
    rest_client.session.request.return_value = _response(
        404, '{"errorMessages":["Issue does not exist"]}'
    )

    with pytest.raises(MCPJiraBackendError) as excinfo:
        rest_client.request("GET", "issue/OPS-404")

    assert excinfo.value.status_code == 404
    assert "Issue does not exist" in excinfo.value.body
    assert "HTTP 404" in str(excinfo.value)


def test_transport_error_raises_backend_error(rest_client):
    rest_client.session.request.side_effect = requests.ConnectionError("refused")

    with pytest.raises(MCPJiraBackendError, match="Request error") as excinfo:
        rest_client.request("GET", "project")

    assert excinfo.value.status_code is None


def test_missing_credentials_fail_before_request():
    session = MagicMock()
    session.headers = {}
    client = JiraRestClient(JiraConfig(base_url="https://jira.example.com"), session=session)

    with pytest.raises(MCPJiraConfigError):
        client.request("GET", "project")

    session.request.assert_not_called()
