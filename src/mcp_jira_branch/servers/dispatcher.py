"""Composite tool handlers and pass-through dispatch to the active backend."""

import json
import logging
from collections.abc import Awaitable, Callable, Mapping
from typing import Any

import anyio
from mcp.types import Tool

from ..branching import BranchOrchestrator, BranchReport
from ..exceptions import MCPJiraError, MCPJiraValidationError
from ..jira import BackendState, resolve_cloud_id
from ..logging_config import log_operation
from ..models import error_message, extract_issue_key, extract_payload
from .catalog import (
    ANALYZE_ISSUE,
    ASSIGN_ISSUE_WITH_ANALYSIS,
    COMPOSITE_TOOLS,
    CREATE_ISSUE_WITH_BRANCH,
    TRANSITION_ISSUE_TO_REVIEW,
)

logger = logging.getLogger("mcp-jira-branch.servers.dispatcher")

JsonObject = dict[str, Any]
Handler = Callable[[Mapping[str, Any]], Awaitable[JsonObject]]

MAX_USERNAME_LENGTH = 30


def _required_text(args: Mapping[str, Any], name: str) -> str:
    value = args.get(name)
    if value is None or not str(value).strip():
        raise MCPJiraValidationError(name)
    return str(value).strip()


def _optional_text(args: Mapping[str, Any], name: str) -> str | None:
    value = args.get(name)
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def parse_additional_fields(additional_fields: Any) -> JsonObject:
    """Parse additional fields from a dict or JSON string.

    ``summary`` and ``description`` are dropped; they are passed separately.

    Raises:
        MCPJiraValidationError: If the input is neither a JSON object nor a dict
    """
    if additional_fields is None or additional_fields == "":
        return {}
    if isinstance(additional_fields, str):
        try:
            additional_fields = json.loads(additional_fields)
        except json.JSONDecodeError as e:
            raise MCPJiraValidationError(
                "fields", f"fields is not valid JSON: {e}"
            ) from e
    if not isinstance(additional_fields, dict):
        raise MCPJiraValidationError(
            "fields", "fields must be a dictionary or JSON object string."
        )
    return {
        key: value
        for key, value in additional_fields.items()
        if key not in ("summary", "description")
    }


def classify_assignee(assignee: str) -> JsonObject:
    """Build the ``assignee`` field update for a user reference.

    - ``""`` or ``unassign`` (any case) clears the assignee
    - anything with ``@`` is an email address
    - anything with ``:`` or longer than 30 characters is an account id
    - everything else is a username
    """
    if assignee == "" or assignee.lower() == "unassign":
        return {"assignee": None}
    if "@" in assignee:
        return {"assignee": {"emailAddress": assignee}}
    if ":" in assignee or len(assignee) > MAX_USERNAME_LENGTH:
        return {"assignee": {"accountId": assignee}}
    return {"assignee": {"name": assignee}}


def find_review_transition(transitions: Any) -> JsonObject | None:
    """First transition whose name or target status mentions "review"."""
    if isinstance(transitions, dict):
        transitions = transitions.get("transitions")
    if not isinstance(transitions, list):
        return None
    for transition in transitions:
        if not isinstance(transition, dict):
            continue
        name = str(transition.get("name") or "")
        target = transition.get("to")
        target_name = str(target.get("name") or "") if isinstance(target, dict) else ""
        if "review" in name.lower() or "review" in target_name.lower():
            return transition
    return None


def envelope(success: bool, message: str, **extra: Any) -> JsonObject:
    """Wrap a composite tool response as a single JSON text block."""
    payload = {"success": success, "message": message, **extra}
    return {
        "content": [
            {
                "type": "text",
                "text": json.dumps(payload, indent=2, ensure_ascii=False, default=str),
            }
        ],
        "isError": False,
    }


def _branch_name(report: BranchReport | None) -> str | None:
    if report is None or report.spec is None:
        return None
    return report.spec.sanitized_name


class ToolDispatcher:
    """Routes tool calls to composite handlers or straight to the backend.

    Calls are handled one at a time, including their branch automation.
    """

    def __init__(self, backend: BackendState, branches: BranchOrchestrator) -> None:
        self.backend = backend
        self.branches = branches
        self._lock = anyio.Lock()
        self._handlers: dict[str, Handler] = {
            CREATE_ISSUE_WITH_BRANCH: self.create_issue_with_branch,
            ASSIGN_ISSUE_WITH_ANALYSIS: self.assign_with_analysis,
            TRANSITION_ISSUE_TO_REVIEW: self.transition_to_review,
            ANALYZE_ISSUE: self.analyze_issue,
        }

    async def list_tools(self) -> list[Tool]:
        native = await self.backend.list_tools()
        return [*native, *COMPOSITE_TOOLS]

    async def call_tool(self, name: str, arguments: Mapping[str, Any] | None) -> JsonObject:
        """Run one tool call to completion.

        Returns:
            A result mapping ``{"content": [...], "isError": bool}``

        Raises:
            MCPJiraError: Configuration, validation and backend failures
        """
        args = dict(arguments or {})
        async with self._lock:
            with log_operation(logger, "call_tool", tool=name):
                handler = self._handlers.get(name)
                if handler is not None:
                    return await handler(args)
                return await self.backend.call_tool(name, args)

    def _with_cloud_id(self, args: Mapping[str, Any], call_args: JsonObject) -> JsonObject:
        cloud_id = resolve_cloud_id(self.backend.config, args.get("cloudId"))
        if cloud_id is not None:
            return {"cloudId": cloud_id, **call_args}
        return call_args

    async def create_issue_with_branch(self, args: Mapping[str, Any]) -> JsonObject:
        project_key = _required_text(args, "projectKey")
        issue_type = _required_text(args, "issueTypeName")
        summary = _required_text(args, "summary")
        description = _optional_text(args, "description")
        fields = parse_additional_fields(args.get("fields"))

        create_args: JsonObject = {
            "projectKey": project_key,
            "issueTypeName": issue_type,
            "summary": summary,
        }
        if description:
            create_args["description"] = description
        if fields:
            create_args["fields"] = fields
        create_args = self._with_cloud_id(args, create_args)

        result = await self.backend.call_tool("createJiraIssue", create_args)

        failure = error_message(result)
        if failure is not None:
            logger.warning(f"createJiraIssue failed for project {project_key}: {failure}")
            return envelope(
                False, f"Issue creation failed: {failure}", issueKey=None, data=result
            )

        issue_key = extract_issue_key(result)
        if not issue_key:
            return envelope(True, "Issue created successfully", issueKey=None, data=result)

        report = await self.branches.create_branch_for_issue(
            issue_key, _optional_text(args, "branchName")
        )
        if report.ok:
            message = (
                f"Issue {issue_key} created successfully and branch "
                f"{_branch_name(report)} created"
            )
        else:
            message = f"Issue {issue_key} created successfully"
        return envelope(
            True, message, issueKey=issue_key, branch=_branch_name(report), data=result
        )

    async def assign_with_analysis(self, args: Mapping[str, Any]) -> JsonObject:
        issue_key = _required_text(args, "issueIdOrKey")
        assignee = args.get("assignee")
        if assignee is None:
            raise MCPJiraValidationError("assignee")

        edit_args = self._with_cloud_id(
            args,
            {"issueIdOrKey": issue_key, "fields": classify_assignee(str(assignee))},
        )
        result = await self.backend.call_tool("editJiraIssue", edit_args)

        failure = error_message(result)
        if failure is not None:
            return envelope(False, f"Assigning {issue_key} failed: {failure}", data=result)
        return envelope(True, f"Issue {issue_key} assigned successfully", data=result)

    async def transition_to_review(self, args: Mapping[str, Any]) -> JsonObject:
        issue_key = _required_text(args, "issueIdOrKey")
        base_args = self._with_cloud_id(args, {"issueIdOrKey": issue_key})

        transitions_result = await self.backend.call_tool(
            "getTransitionsForJiraIssue", base_args
        )
        failure = error_message(transitions_result)
        if failure is not None:
            return envelope(
                False,
                f"Fetching transitions for {issue_key} failed: {failure}",
                data=transitions_result,
            )

        transition = find_review_transition(extract_payload(transitions_result))
        if transition is None:
            raise MCPJiraError("No 'In Review' transition found for this issue")

        logger.debug(
            f"Transitioning {issue_key} via '{transition.get('name')}' ({transition.get('id')})"
        )
        result = await self.backend.call_tool(
            "transitionJiraIssue",
            {**base_args, "transition": {"id": transition.get("id")}},
        )
        failure = error_message(result)
        if failure is not None:
            return envelope(False, f"Transition of {issue_key} failed: {failure}", data=result)
        return envelope(
            True,
            f"Issue {issue_key} transitioned to review",
            transition={"id": transition.get("id"), "name": transition.get("name")},
            data=result,
        )

    async def analyze_issue(self, args: Mapping[str, Any]) -> JsonObject:
        issue_key = _required_text(args, "issueIdOrKey")
        branch_name = _optional_text(args, "branchName")
        fetch_args = self._with_cloud_id(args, {"issueIdOrKey": issue_key})

        try:
            issue_result = await self.backend.call_tool("getJiraIssue", fetch_args)
        except MCPJiraError:
            await self.branches.run_local(issue_key, branch_name)
            raise

        report = await self.branches.run_local(issue_key, branch_name)

        failure = error_message(issue_result)
        if failure is not None:
            message = f"Fetching issue {issue_key} failed: {failure}"
        elif report.ok:
            message = (
                f"Branch {_branch_name(report)} created/checked out for issue "
                f"{issue_key}. Ready for analysis."
            )
        else:
            message = f"Issue {issue_key} fetched. Ready for analysis."
        return envelope(
            failure is None,
            message,
            issueKey=issue_key,
            branch=_branch_name(report),
            issue=issue_result,
        )
