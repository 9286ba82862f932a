"""Jira backends: Atlassian Cloud remote tool server or Server/Data Center REST."""

from .backend import BackendState, JiraBackend
from .cloud import CloudProxyAdapter
from .config import BackendMode, JiraConfig, resolve_cloud_id, select_backend
from .direct import DirectApiAdapter

__all__ = [
    "BackendMode",
    "BackendState",
    "CloudProxyAdapter",
    "DirectApiAdapter",
    "JiraBackend",
    "JiraConfig",
    "resolve_cloud_id",
    "select_backend",
]
