"""
Utility functions for the MCP Jira Branch server.
"""

from .env import get_env_float, getenv_stripped, is_env_ssl_verify

__all__ = [
    "get_env_float",
    "getenv_stripped",
    "is_env_ssl_verify",
]
