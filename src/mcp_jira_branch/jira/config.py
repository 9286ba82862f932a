"""Configuration module for Jira backend selection."""

from dataclasses import dataclass
from enum import Enum

from ..exceptions import MCPJiraConfigError
from ..utils.env import get_env_float, getenv_stripped, is_env_ssl_verify

DEFAULT_REMOTE_MCP_URL = "https://mcp.atlassian.com/v1/mcp"
DEFAULT_REMOTE_MCP_COMMAND = "npx"
DEFAULT_TIMEOUT = 30.0


class BackendMode(str, Enum):
    """Which backend executes abstract tool calls."""

    CLOUD = "cloud"
    DIRECT_API = "datacenter"


@dataclass(frozen=True)
class JiraConfig:
    """Jira backend configuration.

    Handles both the Atlassian Cloud remote tool server (reached through
    ``mcp-remote``) and Jira Server/Data Center over its REST API, which
    accepts either a personal access token (Bearer) or a legacy API token
    with username (Basic).
    """

    base_url: str | None = None  # Server/DC base URL; selects the Direct API backend
    cloud_id: str | None = None  # Atlassian Cloud site id
    personal_token: str | None = None  # Personal access token (Server/DC)
    api_token: str | None = None  # Legacy API token, paired with username
    username: str | None = None  # Email or username for Basic auth
    remote_mcp_url: str = DEFAULT_REMOTE_MCP_URL
    remote_mcp_command: str = DEFAULT_REMOTE_MCP_COMMAND
    timeout: float = DEFAULT_TIMEOUT
    ssl_verify: bool = True

    @property
    def mode(self) -> BackendMode:
        return select_backend(self)

    @classmethod
    def from_env(cls) -> "JiraConfig":
        """Create configuration from environment variables.

        Returns:
            JiraConfig with values from environment variables. Credentials are
            not validated here; they are resolved per call.
        """
        return cls(
            base_url=getenv_stripped("JIRA_BASE_URL"),
            cloud_id=getenv_stripped("JIRA_CLOUD_ID", "CLOUD_ID", strip_quotes=True),
            personal_token=getenv_stripped("JIRA_PERSONAL_ACCESS_TOKEN"),
            api_token=getenv_stripped("JIRA_API_TOKEN"),
            username=getenv_stripped("JIRA_EMAIL", "JIRA_USERNAME"),
            remote_mcp_url=getenv_stripped("ATLASSIAN_REMOTE_MCP_URL")
            or DEFAULT_REMOTE_MCP_URL,
            remote_mcp_command=getenv_stripped("ATLASSIAN_REMOTE_MCP_COMMAND")
            or DEFAULT_REMOTE_MCP_COMMAND,
            timeout=get_env_float("JIRA_TIMEOUT", DEFAULT_TIMEOUT),
            ssl_verify=is_env_ssl_verify("JIRA_SSL_VERIFY"),
        )


def select_backend(config: JiraConfig) -> BackendMode:
    """Pick the backend for a configuration.

    A configured base URL means Server/Data Center over REST, otherwise the
    Atlassian Cloud remote tool server is used.
    """
    if config.base_url and config.base_url.strip():
        return BackendMode.DIRECT_API
    return BackendMode.CLOUD


def resolve_cloud_id(config: JiraConfig, explicit: object = None) -> str | None:
    """Resolve the cloud id to forward to the Cloud backend.

    Args:
        config: Active configuration
        explicit: The ``cloudId`` argument supplied by the caller, if any

    Returns:
        The cloud id for Cloud mode, or None for the Direct API backend where
        it is never needed.

    Raises:
        MCPJiraConfigError: If Cloud mode is active and no cloud id is known
    """
    if config.mode is BackendMode.DIRECT_API:
        return None
    if isinstance(explicit, str) and explicit.strip():
        return explicit.strip()
    if config.cloud_id:
        return config.cloud_id
    raise MCPJiraConfigError(
        "JIRA_CLOUD_ID not set. Please set it in environment variables for Jira "
        "Cloud, or set JIRA_BASE_URL for Data Center."
    )
