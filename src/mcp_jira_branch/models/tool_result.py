"""
Tool result shapes returned by either Jira backend, and issue key extraction.
"""

import json
import logging
import re
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError

logger = logging.getLogger("mcp-jira-branch.models.tool_result")

ISSUE_KEY_RE = re.compile(r"[A-Z]+-[0-9]+")


class ContentBlock(BaseModel):
    """One block of a content-list result; only text blocks carry data."""

    model_config = ConfigDict(extra="allow")

    type: str = "text"
    text: str | None = None


class ErrorEnvelope(BaseModel):
    """A result flagged as failed by the backend."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    kind: Literal["error"] = "error"
    is_error: bool = Field(default=True, alias="isError")
    error: Any = None


class ContentBlockResult(BaseModel):
    """``{"content": [{"type": "text", "text": ...}, ...]}``"""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    kind: Literal["content"] = "content"
    content: list[ContentBlock]
    is_error: bool = Field(default=False, alias="isError")


class FlatFieldsResult(BaseModel):
    """A plain field mapping such as a REST issue payload."""

    kind: Literal["flat"] = "flat"
    fields: dict[str, Any]


class UnrecognizedResult(BaseModel):
    """Anything else; only a regex scan over its text applies."""

    kind: Literal["unrecognized"] = "unrecognized"
    text: str = ""


ToolResultShape = ErrorEnvelope | ContentBlockResult | FlatFieldsResult | UnrecognizedResult


def _as_text(raw: Any) -> str:
    if isinstance(raw, str):
        return raw
    try:
        return json.dumps(raw, ensure_ascii=False, default=str)
    except (TypeError, ValueError):
        return str(raw)


def decode_tool_result(raw: Any) -> ToolResultShape:
    """Classify a raw backend result into exactly one known shape.

    Args:
        raw: A mapping, a pydantic model (e.g. ``mcp.types.CallToolResult``),
            a JSON string, or anything else

    Returns:
        The decoded variant
    """
    if isinstance(raw, BaseModel):
        raw = raw.model_dump(mode="json", by_alias=True, exclude_none=True)
    if isinstance(raw, bytes):
        raw = raw.decode("utf-8", errors="replace")
    if isinstance(raw, str):
        try:
            parsed = json.loads(raw)
        except ValueError:
            return UnrecognizedResult(text=raw)
        if not isinstance(parsed, dict):
            return UnrecognizedResult(text=raw)
        raw = parsed
    if not isinstance(raw, dict):
        return UnrecognizedResult(text="" if raw is None else _as_text(raw))

    try:
        if raw.get("isError") or raw.get("error"):
            return ErrorEnvelope.model_validate(raw)
        if isinstance(raw.get("content"), list):
            return ContentBlockResult.model_validate(raw)
    except ValidationError as e:
        logger.debug(f"Result did not match a known envelope: {e}")
        return UnrecognizedResult(text=_as_text(raw))
    return FlatFieldsResult(fields=raw)


def _read_key(data: Any, names: tuple[str, ...]) -> str | None:
    if not isinstance(data, dict):
        return None
    for name in names:
        if name == "fields.key":
            nested = data.get("fields")
            value = nested.get("key") if isinstance(nested, dict) else None
        else:
            value = data.get(name)
        if value:
            return str(value)
    return None


def _scan(text: str) -> str | None:
    match = ISSUE_KEY_RE.search(text)
    return match.group(0) if match else None


def extract_issue_key(raw: Any) -> str | None:
    """Extract the issue key from a backend result.

    - Error results yield None.
    - Content blocks are scanned in order: JSON text is read for ``key``,
      ``fields.key`` then ``id``; non-JSON text is searched for ``ABC-123``.
    - Flat mappings are read for ``key``, ``fields.key``, ``id``, ``issueKey``.

    Args:
        raw: Result from either backend

    Returns:
        The first issue key found, or None
    """
    shape = decode_tool_result(raw)

    if isinstance(shape, ErrorEnvelope):
        return None

    if isinstance(shape, ContentBlockResult):
        for block in shape.content:
            if not block.text:
                continue
            try:
                parsed = json.loads(block.text)
            except ValueError:
                key = _scan(block.text)
            else:
                key = _read_key(parsed, ("key", "fields.key", "id"))
            if key:
                return key
        return None

    if isinstance(shape, FlatFieldsResult):
        return _read_key(shape.fields, ("key", "fields.key", "id", "issueKey"))

    return _scan(shape.text)


def extract_payload(raw: Any) -> Any:
    """Return the JSON document carried by a result.

    For content-block results this is the first text block that parses as
    JSON; flat results are returned as-is. Error and unrecognized results
    carry no payload.
    """
    shape = decode_tool_result(raw)
    if isinstance(shape, FlatFieldsResult):
        return shape.fields
    if isinstance(shape, ContentBlockResult):
        for block in shape.content:
            if not block.text:
                continue
            try:
                return json.loads(block.text)
            except ValueError:
                continue
    return None


def error_message(raw: Any) -> str | None:
    """Text of an error result, or None if the result is not an error."""
    shape = decode_tool_result(raw)
    if not isinstance(shape, ErrorEnvelope):
        return None
    texts = []
    for block in (shape.model_extra or {}).get("content") or []:
        if isinstance(block, dict) and block.get("text"):
            texts.append(str(block["text"]))
    if texts:
        return "\n".join(texts)
    return _as_text(shape.error) if shape.error else "Backend reported an error"
