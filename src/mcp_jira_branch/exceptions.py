class MCPJiraError(Exception):
    """Base exception for MCP-Jira-Branch errors."""

    pass


class MCPJiraConfigError(MCPJiraError):
    """Raised when a required credential or base URL is not configured."""

    pass


class MCPJiraValidationError(MCPJiraError, ValueError):
    """Raised when a required tool argument is missing or blank."""

    def __init__(self, field: str, message: str | None = None) -> None:
        self.field = field
        super().__init__(message or f"{field} is required and cannot be empty")


class MCPJiraBackendError(MCPJiraError):
    """Raised for non-2xx Jira responses or rejections from the Cloud proxy."""

    def __init__(
        self, message: str, status_code: int | None = None, body: str | None = None
    ) -> None:
        self.status_code = status_code
        self.body = body
        super().__init__(message)


class MCPJiraNotImplementedError(MCPJiraError, NotImplementedError):
    """Raised when a tool has no mapping on the active backend."""

    def __init__(self, tool_name: str) -> None:
        self.tool_name = tool_name
        super().__init__(
            f"Tool {tool_name} not yet implemented for Data Center. "
            "Please use Jira Cloud or implement this tool."
        )
