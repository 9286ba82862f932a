"""GitHub REST API strategy for issue branches."""

import logging
from typing import Any

import httpx

from .config import BranchConfig
from .naming import BranchSpec
from .results import StepResult

logger = logging.getLogger("mcp-jira-branch.branching.github")

USER_AGENT = "mcp-jira-branch"


class GitHubRefsClient:
    """Reads and creates git refs through the GitHub REST API."""

    def __init__(
        self,
        owner: str,
        repo: str,
        token: str,
        api_url: str = "https://api.github.com",
        timeout: float = 30.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.owner = owner
        self.repo = repo
        self.base_url = f"{api_url.rstrip('/')}/repos/{owner}/{repo}"
        self._headers = {
            "Authorization": f"token {token}",
            "User-Agent": USER_AGENT,
            "Accept": "application/vnd.github.v3+json",
        }
        self._timeout = timeout
        self._client = client

    async def _request(self, method: str, path: str, json: Any = None) -> Any:
        url = f"{self.base_url}{path}"
        logger.debug(f"Sending {method} request to {url}")
        if self._client is not None:
            response = await self._client.request(
                method, url, headers=self._headers, json=json, timeout=self._timeout
            )
        else:
            async with httpx.AsyncClient() as client:
                response = await client.request(
                    method, url, headers=self._headers, json=json, timeout=self._timeout
                )
        response.raise_for_status()
        return response.json() if response.content else {}

    async def get_ref_sha(self, branch: str) -> str:
        """Return the commit sha ``refs/heads/<branch>`` points at.

        Raises:
            httpx.HTTPError: If the request fails
            KeyError: If the response carries no sha
        """
        data = await self._request("GET", f"/git/ref/heads/{branch}")
        return str(data["object"]["sha"])

    async def create_ref(self, branch: str, sha: str) -> dict[str, Any]:
        """Create ``refs/heads/<branch>`` at ``sha``.

        Raises:
            httpx.HTTPError: If the request fails (422 when the ref exists)
        """
        return await self._request(
            "POST", "/git/refs", json={"ref": f"refs/heads/{branch}", "sha": sha}
        )

    @classmethod
    def from_config(cls, config: BranchConfig) -> "GitHubRefsClient | None":
        repository = config.github_repository
        if not config.github_token or repository is None:
            return None
        owner, repo = repository
        return cls(
            owner=owner,
            repo=repo,
            token=config.github_token,
            api_url=config.github_api_url,
            timeout=config.git_timeout,
        )


async def run_remote_steps(spec: BranchSpec, client: GitHubRefsClient) -> list[StepResult]:
    """Resolve the default branch head, then create the issue branch from it."""
    try:
        sha = await client.get_ref_sha(spec.source_branch)
    except (httpx.HTTPError, KeyError, TypeError, ValueError) as e:
        return [StepResult.failure("resolve-default", f"{spec.source_branch}: {e!r}")]

    steps = [StepResult.success("resolve-default", f"{spec.source_branch}@{sha[:12]}")]
    try:
        await client.create_ref(spec.sanitized_name, sha)
    except (httpx.HTTPError, ValueError) as e:
        steps.append(StepResult.failure("create-ref", f"{spec.sanitized_name}: {e!r}"))
    else:
        steps.append(StepResult.success("create-ref", f"refs/heads/{spec.sanitized_name}"))
    return steps
