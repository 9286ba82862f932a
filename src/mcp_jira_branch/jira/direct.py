"""Direct REST adapter that maps abstract tool names onto Jira REST calls."""

import json
import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any
from urllib.parse import quote

from anyio import to_thread
from mcp.types import Tool

from ..exceptions import MCPJiraNotImplementedError, MCPJiraValidationError
from .config import JiraConfig
from .rest import JiraRestClient

logger = logging.getLogger("mcp-jira-branch.jira.direct")

JsonObject = dict[str, Any]


def _create_issue_body(args: Mapping[str, Any]) -> JsonObject:
    fields: JsonObject = {
        "project": {"key": args.get("projectKey")},
        "summary": args.get("summary"),
        "issuetype": {"name": args.get("issueTypeName")},
    }
    if args.get("description"):
        fields["description"] = args["description"]
    extra = args.get("fields")
    if isinstance(extra, dict):
        fields.update(extra)
    return {"fields": fields}


def _edit_issue_body(args: Mapping[str, Any]) -> JsonObject:
    body: JsonObject = {}
    if isinstance(args.get("fields"), dict):
        body["fields"] = args["fields"]
    if isinstance(args.get("update"), dict):
        body["update"] = args["update"]
    return body


def _transition_body(args: Mapping[str, Any]) -> JsonObject:
    body: JsonObject = {"transition": args.get("transition")}
    if args.get("fields"):
        body["fields"] = args["fields"]
    return body


def _comment_body(args: Mapping[str, Any]) -> JsonObject:
    return {"body": args.get("commentBody")}


def _createmeta_params(args: Mapping[str, Any]) -> JsonObject:
    return {
        "projectKeys": args.get("projectIdOrKey"),
        "issuetypeNames": args.get("issueTypeId"),
    }


@dataclass(frozen=True)
class ToolRoute:
    """How one abstract tool maps onto the REST API."""

    method: str
    path: str
    description: str
    input_schema: JsonObject
    path_params: tuple[str, ...] = ()
    build_body: Callable[[Mapping[str, Any]], JsonObject] | None = None
    build_params: Callable[[Mapping[str, Any]], JsonObject] | None = None

    def render_path(self, args: Mapping[str, Any]) -> str:
        values = {}
        for name in self.path_params:
            value = args.get(name)
            if value is None or not str(value).strip():
                raise MCPJiraValidationError(name)
            values[name] = quote(str(value).strip(), safe="")
        return self.path.format(**values)

    def to_tool(self, name: str) -> Tool:
        return Tool(name=name, description=self.description, inputSchema=self.input_schema)


def _schema(properties: JsonObject, required: list[str]) -> JsonObject:
    return {"type": "object", "properties": properties, "required": required}


_ISSUE_KEY = {"issueIdOrKey": {"type": "string"}}

ROUTES: dict[str, ToolRoute] = {
    "getJiraIssue": ToolRoute(
        method="GET",
        path="issue/{issueIdOrKey}",
        path_params=("issueIdOrKey",),
        description="Get a Jira issue by issue id or key",
        input_schema=_schema(_ISSUE_KEY, ["issueIdOrKey"]),
    ),
    "createJiraIssue": ToolRoute(
        method="POST",
        path="issue",
        build_body=_create_issue_body,
        description="Create a Jira issue",
        input_schema=_schema(
            {
                "projectKey": {"type": "string"},
                "issueTypeName": {"type": "string"},
                "summary": {"type": "string"},
                "description": {"type": "string"},
                "fields": {"type": "object"},
            },
            ["projectKey", "issueTypeName", "summary"],
        ),
    ),
    "editJiraIssue": ToolRoute(
        method="PUT",
        path="issue/{issueIdOrKey}",
        path_params=("issueIdOrKey",),
        build_body=_edit_issue_body,
        description=(
            "Edit a Jira issue. Use 'fields' to update issue fields, and 'update' "
            "to add comments, worklogs, etc."
        ),
        input_schema=_schema(
            {
                **_ISSUE_KEY,
                "fields": {
                    "type": "object",
                    "description": "Fields to update (e.g., assignee, priority)",
                },
                "update": {
                    "type": "object",
                    "description": (
                        "Update operations (e.g., comments, worklogs). "
                        "Format: { comment: [{ add: { body: 'text' } }] }"
                    ),
                },
            },
            ["issueIdOrKey"],
        ),
    ),
    "getTransitionsForJiraIssue": ToolRoute(
        method="GET",
        path="issue/{issueIdOrKey}/transitions",
        path_params=("issueIdOrKey",),
        description="Get available transitions for a Jira issue",
        input_schema=_schema(_ISSUE_KEY, ["issueIdOrKey"]),
    ),
    "transitionJiraIssue": ToolRoute(
        method="POST",
        path="issue/{issueIdOrKey}/transitions",
        path_params=("issueIdOrKey",),
        build_body=_transition_body,
        description="Transition a Jira issue",
        input_schema=_schema(
            {**_ISSUE_KEY, "transition": {"type": "object"}, "fields": {"type": "object"}},
            ["issueIdOrKey", "transition"],
        ),
    ),
    "getVisibleJiraProjects": ToolRoute(
        method="GET",
        path="project",
        description="List the Jira projects visible to the current user",
        input_schema=_schema({}, []),
    ),
    "getJiraProjectIssueTypesMetadata": ToolRoute(
        method="GET",
        path="project/{projectIdOrKey}/statuses",
        path_params=("projectIdOrKey",),
        description="Get the issue types and their statuses for a Jira project",
        input_schema=_schema({"projectIdOrKey": {"type": "string"}}, ["projectIdOrKey"]),
    ),
    "getJiraIssueTypeMetaWithFields": ToolRoute(
        method="GET",
        path="issue/createmeta",
        build_params=_createmeta_params,
        description="Get create metadata (fields) for an issue type in a project",
        input_schema=_schema(
            {"projectIdOrKey": {"type": "string"}, "issueTypeId": {"type": "string"}},
            ["projectIdOrKey", "issueTypeId"],
        ),
    ),
    "addCommentToJiraIssue": ToolRoute(
        method="POST",
        path="issue/{issueIdOrKey}/comment",
        path_params=("issueIdOrKey",),
        build_body=_comment_body,
        description="Add a comment to a Jira issue",
        input_schema=_schema(
            {**_ISSUE_KEY, "commentBody": {"type": "string"}},
            ["issueIdOrKey", "commentBody"],
        ),
    ),
}


def wrap_text_result(payload: Any) -> JsonObject:
    """Wrap a REST payload in the same envelope the Cloud backend returns."""
    return {
        "content": [
            {"type": "text", "text": json.dumps(payload, indent=2, ensure_ascii=False)}
        ],
        "isError": False,
    }


class DirectApiAdapter:
    """Executes abstract tool calls against Jira Server/Data Center REST."""

    def __init__(
        self,
        config: JiraConfig,
        client: JiraRestClient | None = None,
        routes: Mapping[str, ToolRoute] | None = None,
    ) -> None:
        self.config = config
        self.client = client or JiraRestClient(config)
        self.routes = dict(routes if routes is not None else ROUTES)

    async def list_tools(self) -> list[Tool]:
        return [route.to_tool(name) for name, route in self.routes.items()]

    async def call_tool(self, name: str, arguments: Mapping[str, Any]) -> JsonObject:
        """Translate and execute one abstract tool call.

        Raises:
            MCPJiraNotImplementedError: If the tool has no REST mapping
            MCPJiraValidationError: If a path parameter is missing
            MCPJiraConfigError: If authentication cannot be resolved
            MCPJiraBackendError: If Jira answers with a non-2xx status
        """
        route = self.routes.get(name)
        if route is None:
            raise MCPJiraNotImplementedError(name)

        path = route.render_path(arguments)
        body = route.build_body(arguments) if route.build_body else None
        params = route.build_params(arguments) if route.build_params else None
        logger.debug(f"Routing {name} to {route.method} {path}")

        payload = await to_thread.run_sync(
            lambda: self.client.request(
                route.method, path, json_body=body, params=params
            )
        )
        return wrap_text_result(payload)

    async def aclose(self) -> None:
        self.client.close()
