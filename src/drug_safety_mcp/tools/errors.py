"""Tool-layer errors, carrying JSON-RPC error codes."""

from mcp.types import INTERNAL_ERROR, INVALID_PARAMS, METHOD_NOT_FOUND


class ToolError(Exception):
    """Base class for errors raised while dispatching a tool call."""

    code: int = INTERNAL_ERROR

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class InvalidParamsError(ToolError):
    """Client fault: missing, empty, out-of-range or unrecognized parameter."""

    code = INVALID_PARAMS


class UnknownToolError(ToolError):
    """Client fault: the tool name is not in the registry."""

    code = METHOD_NOT_FOUND

    def __init__(self, name: str):
        self.tool_name = name
        super().__init__(f"Unknown tool: {name}")


class ToolExecutionError(ToolError):
    """Server fault: the upstream API failed or returned an error object."""

    code = INTERNAL_ERROR
