"""Descriptors of the composite tools added on top of the backend's own tools."""

from mcp.types import Tool

CREATE_ISSUE_WITH_BRANCH = "createJiraIssueWithBranch"
ASSIGN_ISSUE_WITH_ANALYSIS = "assignJiraIssueWithAnalysis"
TRANSITION_ISSUE_TO_REVIEW = "transitionJiraIssueToReview"
ANALYZE_ISSUE = "analyzeJiraIssue"

_CLOUD_ID = {
    "type": "string",
    "description": (
        "Jira Cloud ID (optional, Cloud only; defaults to JIRA_CLOUD_ID). "
        "Ignored for Data Center, which is selected by JIRA_BASE_URL."
    ),
}
_ISSUE_KEY = {"type": "string", "description": "Issue key (e.g., OPS-123)"}
_BRANCH_NAME = {
    "type": "string",
    "description": "Custom branch name (optional, defaults to issue key)",
}

COMPOSITE_TOOLS: list[Tool] = [
    Tool(
        name=CREATE_ISSUE_WITH_BRANCH,
        description=(
            "Create a Jira issue and automatically create a GitHub/GitLab branch. "
            "Works with both Jira Cloud and Data Center."
        ),
        inputSchema={
            "type": "object",
            "properties": {
                "cloudId": _CLOUD_ID,
                "projectKey": {"type": "string", "description": "Project key (e.g., OPS)"},
                "issueTypeName": {
                    "type": "string",
                    "description": "Issue type (Task, Bug, Story, etc.)",
                },
                "summary": {"type": "string", "description": "Issue summary/title"},
                "description": {
                    "type": "string",
                    "description": "Issue description (optional)",
                },
                "branchName": _BRANCH_NAME,
                "fields": {"type": "object", "description": "Additional Jira fields"},
            },
            "required": ["projectKey", "issueTypeName", "summary"],
        },
    ),
    Tool(
        name=ASSIGN_ISSUE_WITH_ANALYSIS,
        description="Assign a Jira issue to a user, or unassign it.",
        inputSchema={
            "type": "object",
            "properties": {
                "cloudId": _CLOUD_ID,
                "issueIdOrKey": _ISSUE_KEY,
                "assignee": {
                    "type": "string",
                    "description": (
                        "Assignee email, accountId, username, or 'unassign' to remove"
                    ),
                },
            },
            "required": ["issueIdOrKey", "assignee"],
        },
    ),
    Tool(
        name=TRANSITION_ISSUE_TO_REVIEW,
        description="Transition a Jira issue to 'In Review' status.",
        inputSchema={
            "type": "object",
            "properties": {"cloudId": _CLOUD_ID, "issueIdOrKey": _ISSUE_KEY},
            "required": ["issueIdOrKey"],
        },
    ),
    Tool(
        name=ANALYZE_ISSUE,
        description=(
            "Analyze a Jira issue. Creates or checks out the issue branch in the "
            "local git repository, then returns the issue."
        ),
        inputSchema={
            "type": "object",
            "properties": {
                "cloudId": _CLOUD_ID,
                "issueIdOrKey": _ISSUE_KEY,
                "branchName": _BRANCH_NAME,
            },
            "required": ["issueIdOrKey"],
        },
    ),
]

COMPOSITE_TOOL_NAMES = frozenset(tool.name for tool in COMPOSITE_TOOLS)
