"""Base client module for Jira Server/Data Center REST API interactions."""

import json
import logging
from typing import Any
from urllib.parse import urlsplit

import requests
from requests import Session

from ..exceptions import MCPJiraBackendError, MCPJiraConfigError
from .auth import resolve_auth
from .config import JiraConfig

logger = logging.getLogger("mcp-jira-branch.jira.rest")

API_PREFIX = "/rest/api/2/"


class JiraRestClient:
    """Thin JSON client for the versioned Jira REST API."""

    config: JiraConfig
    session: Session

    def __init__(self, config: JiraConfig, session: Session | None = None) -> None:
        """Initialize the REST client.

        Args:
            config: Jira configuration with a base URL
            session: Optional pre-built requests session

        Raises:
            MCPJiraConfigError: If no base URL is configured
        """
        if not config.base_url or not config.base_url.strip():
            raise MCPJiraConfigError("JIRA_BASE_URL is required for Data Center")
        self.config = config
        self.session = session or Session()
        self.session.verify = config.ssl_verify
        self.session.headers.update(
            {"Accept": "application/json", "Content-Type": "application/json"}
        )

    def build_url(self, endpoint: str) -> str:
        """Join the configured base URL with the versioned API prefix.

        ``https://jira.example.com/jira/`` and ``https://jira.example.com/jira``
        both yield ``https://jira.example.com/jira/rest/api/2/<endpoint>``.
        Endpoints already starting with ``/rest/api`` are used as given.
        """
        parts = urlsplit(self.config.base_url.strip())
        base_path = parts.path.rstrip("/")
        if endpoint.startswith("/rest/api"):
            api_path = endpoint
        else:
            api_path = f"{API_PREFIX}{endpoint.lstrip('/')}"
        return f"{parts.scheme}://{parts.netloc}{base_path}{api_path}"

    def request(
        self,
        method: str,
        endpoint: str,
        json_body: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
    ) -> Any:
        """Send a request and decode the JSON response.

        Args:
            method: HTTP method
            endpoint: Path relative to the API prefix
            json_body: Optional JSON body
            params: Optional query parameters

        Returns:
            Decoded JSON, or an empty dict for empty or non-JSON 2xx bodies

        Raises:
            MCPJiraConfigError: If no authentication scheme can be resolved
            MCPJiraBackendError: On non-2xx responses and transport failures
        """
        auth = resolve_auth(self.config)
        url = self.build_url(endpoint)
        logger.debug(f"Sending {method} request to {url}")

        try:
            response = self.session.request(
                method,
                url,
                json=json_body,
                params=params,
                headers={"Authorization": auth.header},
                timeout=self.config.timeout,
            )
        except requests.RequestException as e:
            logger.error(f"Request error for {method} {url}: {e}")
            raise MCPJiraBackendError(f"Request error: {e}") from e

        if not 200 <= response.status_code < 300:
            logger.error(
                f"HTTP error {response.status_code} for {method} {url}: {response.text}"
            )
            raise MCPJiraBackendError(
                f"HTTP {response.status_code}: {response.text}",
                status_code=response.status_code,
                body=response.text,
            )

        body = response.text
        if not body or not body.strip():
            return {}
        try:
            return json.loads(body)
        except ValueError:
            logger.debug(f"Non-JSON body for {method} {url}, returning empty object")
            return {}

    def close(self) -> None:
        self.session.close()
