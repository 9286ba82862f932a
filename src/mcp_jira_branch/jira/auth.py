"""Authentication scheme resolution for the Jira REST API."""

import base64
import logging
from dataclasses import dataclass

from ..exceptions import MCPJiraConfigError
from ..logging_config import mask_sensitive
from .config import JiraConfig

logger = logging.getLogger("mcp-jira-branch.jira.auth")


@dataclass(frozen=True)
class BearerAuth:
    """Personal access token sent as a Bearer credential."""

    token: str

    @property
    def header(self) -> str:
        return f"Bearer {self.token}"


@dataclass(frozen=True)
class BasicAuth:
    """Legacy API token sent with the username as HTTP Basic credentials."""

    username: str
    token: str

    @property
    def header(self) -> str:
        credentials = f"{self.username}:{self.token}".encode()
        return f"Basic {base64.b64encode(credentials).decode('ascii')}"


AuthScheme = BearerAuth | BasicAuth


def resolve_auth(config: JiraConfig) -> AuthScheme:
    """Choose exactly one authentication scheme for a Direct API call.

    1. Personal access token configured and no legacy token: Bearer.
    2. Legacy token and username both configured: Basic.
    3. Anything else is a configuration error.

    Args:
        config: Active configuration

    Returns:
        The scheme to use for this call

    Raises:
        MCPJiraConfigError: If neither scheme can be built
    """
    personal_token = (config.personal_token or "").strip()
    api_token = (config.api_token or "").strip()
    username = (config.username or "").strip()

    if personal_token and not api_token:
        logger.debug(
            f"Using Bearer authentication, token: {mask_sensitive(personal_token)}"
        )
        return BearerAuth(token=personal_token)
    if api_token and username:
        logger.debug(f"Using Basic authentication for user {username}")
        return BasicAuth(username=username, token=api_token)
    if api_token:
        raise MCPJiraConfigError(
            "JIRA_USERNAME or JIRA_EMAIL is required for Data Center authentication "
            "when using API Token. For Personal Access Token, only "
            "JIRA_PERSONAL_ACCESS_TOKEN is needed."
        )
    raise MCPJiraConfigError(
        "Unable to determine authentication method. Please set "
        "JIRA_PERSONAL_ACCESS_TOKEN or JIRA_API_TOKEN with JIRA_USERNAME/JIRA_EMAIL."
    )
