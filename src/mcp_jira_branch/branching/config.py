"""Configuration for branch automation."""

import logging
from dataclasses import dataclass
from urllib.parse import urlsplit

from ..utils.env import get_env_float, getenv_stripped

logger = logging.getLogger("mcp-jira-branch.branching.config")

DEFAULT_GITHUB_API_URL = "https://api.github.com"
DEFAULT_REMOTE_BRANCH = "main"
DEFAULT_LOCAL_BRANCH = "master"
DEFAULT_GIT_REMOTE = "origin"
DEFAULT_GIT_TIMEOUT = 60.0


def parse_github_repo(repo: str | None) -> tuple[str, str] | None:
    """Split a GitHub repository reference into owner and name.

    Accepts ``owner/repo``, ``https://github.com/owner/repo`` and the same
    URL with a ``.git`` suffix.

    Returns:
        ``(owner, repo)`` or None if the reference cannot be parsed
    """
    if not repo or not repo.strip():
        return None
    repo_path = repo.strip()
    if repo_path.startswith(("http://", "https://")):
        repo_path = urlsplit(repo_path).path
    repo_path = repo_path.strip("/")
    if repo_path.endswith(".git"):
        repo_path = repo_path[: -len(".git")]

    parts = [part for part in repo_path.split("/") if part]
    if len(parts) >= 2:
        return parts[0], parts[1]
    return None


@dataclass(frozen=True)
class BranchConfig:
    """Settings for local git and GitHub branch creation."""

    github_token: str | None = None
    github_repo: str | None = None
    github_api_url: str = DEFAULT_GITHUB_API_URL
    remote_default_branch: str = DEFAULT_REMOTE_BRANCH  # default branch on GitHub
    local_default_branch: str = DEFAULT_LOCAL_BRANCH  # default branch for local git
    git_remote: str = DEFAULT_GIT_REMOTE
    git_timeout: float = DEFAULT_GIT_TIMEOUT

    @property
    def github_repository(self) -> tuple[str, str] | None:
        return parse_github_repo(self.github_repo)

    @property
    def has_github(self) -> bool:
        """Whether hosting-API credentials are usable."""
        return bool(self.github_token) and self.github_repository is not None

    @classmethod
    def from_env(cls) -> "BranchConfig":
        """Create configuration from environment variables.

        Environment variables:
            GITHUB_TOKEN: Token for the GitHub REST API
            GITHUB_REPO: ``owner/repo`` or repository URL
            GITHUB_API_URL: API root (GitHub Enterprise)
            GITHUB_DEFAULT_BRANCH: Default branch on GitHub (default: main)
            GITLAB_DEFAULT_BRANCH: Default branch for local git, falling back
                to GITHUB_DEFAULT_BRANCH, then master
            GIT_REMOTE: Remote to fetch and pull from (default: origin)
            GIT_TIMEOUT: Seconds allowed per git command (default: 60)
        """
        github_default = getenv_stripped("GITHUB_DEFAULT_BRANCH")
        return cls(
            github_token=getenv_stripped("GITHUB_TOKEN"),
            github_repo=getenv_stripped("GITHUB_REPO"),
            github_api_url=(
                getenv_stripped("GITHUB_API_URL") or DEFAULT_GITHUB_API_URL
            ).rstrip("/"),
            remote_default_branch=github_default or DEFAULT_REMOTE_BRANCH,
            local_default_branch=getenv_stripped("GITLAB_DEFAULT_BRANCH")
            or github_default
            or DEFAULT_LOCAL_BRANCH,
            git_remote=getenv_stripped("GIT_REMOTE") or DEFAULT_GIT_REMOTE,
            git_timeout=get_env_float("GIT_TIMEOUT", DEFAULT_GIT_TIMEOUT),
        )
