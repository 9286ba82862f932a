"""
Root pytest configuration.

Provides the anyio backend and environment isolation shared by all tests.
"""

import pytest

JIRA_ENV_VARS = (
    "JIRA_BASE_URL",
    "JIRA_CLOUD_ID",
    "CLOUD_ID",
    "JIRA_PERSONAL_ACCESS_TOKEN",
    "JIRA_API_TOKEN",
    "JIRA_USERNAME",
    "JIRA_EMAIL",
    "JIRA_TIMEOUT",
    "JIRA_SSL_VERIFY",
    "ATLASSIAN_REMOTE_MCP_URL",
    "ATLASSIAN_REMOTE_MCP_COMMAND",
    "GITHUB_TOKEN",
    "GITHUB_REPO",
    "GITHUB_API_URL",
    "GITHUB_DEFAULT_BRANCH",
    "GITLAB_DEFAULT_BRANCH",
    "GIT_REMOTE",
    "GIT_TIMEOUT",
)


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def clean_env(monkeypatch):
    """Remove every Jira/GitHub variable so tests start from a blank environment."""
    for name in JIRA_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch
