"""Entry point for running the MCP Jira Branch server."""

from mcp_jira_branch import main

if __name__ == "__main__":
    main()
