from .tool_result import (
    ContentBlock,
    ContentBlockResult,
    ErrorEnvelope,
    FlatFieldsResult,
    ToolResultShape,
    UnrecognizedResult,
    decode_tool_result,
    error_message,
    extract_issue_key,
    extract_payload,
)

__all__ = [
    "ContentBlock",
    "ContentBlockResult",
    "ErrorEnvelope",
    "FlatFieldsResult",
    "ToolResultShape",
    "UnrecognizedResult",
    "decode_tool_result",
    "error_message",
    "extract_issue_key",
    "extract_payload",
]
