"""Environment variable utility functions for MCP Jira Branch."""

import os


def is_env_ssl_verify(env_var_name: str, default: str = "true") -> bool:
    """Check SSL verification setting with secure defaults.

    Defaults to true unless explicitly set to false values.
    """
    return os.getenv(env_var_name, default).lower() not in ("false", "0", "no")


def getenv_stripped(*env_var_names: str, strip_quotes: bool = False) -> str | None:
    """Return the first non-blank value among the given environment variables.

    Values are whitespace-trimmed. Blank values count as unset so that
    ``JIRA_BASE_URL=""`` in a .env file behaves like an absent variable.

    Args:
        *env_var_names: Variable names in priority order
        strip_quotes: Also strip one pair of surrounding single/double quotes

    Returns:
        The trimmed value, or None if every variable is unset or blank
    """
    for name in env_var_names:
        value = os.getenv(name)
        if value is None:
            continue
        if strip_quotes:
            value = value.strip().strip("\"'")
        value = value.strip()
        if value:
            return value
    return None


def get_env_float(env_var_name: str, default: float) -> float:
    """Read a positive float from the environment, falling back to ``default``."""
    raw = os.getenv(env_var_name)
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError:
        return default
    return value if value > 0 else default
