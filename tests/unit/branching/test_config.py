"""Tests for branch automation configuration."""

import pytest

from mcp_jira_branch.branching.config import BranchConfig, parse_github_repo


@pytest.mark.parametrize(
    "repo,expected",
    [
        ("owner/repo", ("owner", "repo")),
        ("https://github.com/owner/repo", ("owner", "repo")),
        ("https://github.com/owner/repo.git", ("owner", "repo")),
        ("https://github.com/owner/repo/", ("owner", "repo")),
        ("owner/repo.git", ("owner", "repo")),
        ("just-a-name", None),
        ("", None),
        (None, None),
    ],
)
def test_parse_github_repo(repo, expected):
    assert parse_github_repo(repo) == expected


def test_from_env_defaults(clean_env):
    config = BranchConfig.from_env()

    assert config.github_token is None
    assert config.has_github is False
    assert config.remote_default_branch == "main"
    assert config.local_default_branch == "master"
    assert config.git_remote == "origin"
    assert config.github_api_url == "https://api.github.com"
    assert config.git_timeout == 60.0


def test_local_default_branch_precedence(clean_env):
    clean_env.setenv("GITHUB_DEFAULT_BRANCH", "trunk")
    assert BranchConfig.from_env().local_default_branch == "trunk"

    clean_env.setenv("GITLAB_DEFAULT_BRANCH", "develop")
    config = BranchConfig.from_env()
    assert config.local_default_branch == "develop"
    assert config.remote_default_branch == "trunk"


def test_github_configured(clean_env):
    clean_env.setenv("GITHUB_TOKEN", "ghp_x")
    clean_env.setenv("GITHUB_REPO", "https://github.com/acme/app.git")
    clean_env.setenv("GITHUB_API_URL", "https://ghe.example.com/api/v3/")

    config = BranchConfig.from_env()

    assert config.has_github is True
    assert config.github_repository == ("acme", "app")
    assert config.github_api_url == "https://ghe.example.com/api/v3"


def test_unparseable_repo_disables_github():
    config = BranchConfig(github_token="t", github_repo="nope")
    assert config.has_github is False
