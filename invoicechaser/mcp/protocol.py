"""JSON-RPC 2.0 dispatcher for the MCP methods served by InvoiceChaser.

Supported methods:
- initialize: issues a session identifier
- tools/list: describes the registered tools
- tools/call: runs one tool with its arguments

Transport concerns (HTTP status codes, headers, streaming) live in the API
layer; this module maps request bodies to response envelopes only.
"""

import logging
from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, ValidationError

from invoicechaser.mcp.registry import ToolNotFoundError, ToolRegistry
from invoicechaser.mcp.sessions import SessionRegistry
from invoicechaser.shared.config import Settings

logger = logging.getLogger(__name__)

JSONRPC_VERSION = "2.0"

PARSE_ERROR = -32700
INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602

RequestId = str | int | float | None


class JsonRpcRequest(BaseModel):
    """Incoming JSON-RPC request; every member is optional on the wire."""

    jsonrpc: str | None = None
    id: RequestId = None
    method: str | None = None
    params: Any = None


class ToolCallParams(BaseModel):
    """Params of tools/call."""

    name: str
    arguments: Any = None


@dataclass
class DispatchOutcome:
    """Response envelope plus metadata the transport needs.

    Attributes:
        response: JSON-RPC response body
        method: Method name for metrics (None when missing)
        session_id: Session issued by initialize, if any
        tool: Tool named by tools/call, if any
        tool_status: success, invalid_params or unknown_tool
    """

    response: dict[str, Any]
    method: str | None = None
    session_id: str | None = None
    tool: str | None = None
    tool_status: str | None = None

    @property
    def ok(self) -> bool:
        return "error" not in self.response


def jsonrpc_result(request_id: RequestId, result: Any) -> dict[str, Any]:
    return {"jsonrpc": JSONRPC_VERSION, "id": request_id, "result": result}


def jsonrpc_error(
    request_id: RequestId, code: int, message: str, data: Any = None
) -> dict[str, Any]:
    error: dict[str, Any] = {"code": code, "message": message}
    if data is not None:
        error["data"] = data
    return {"jsonrpc": JSONRPC_VERSION, "id": request_id, "error": error}


def format_validation_error(exc: ValidationError) -> str:
    """Render pydantic errors as ``field: reason`` pairs joined by '; '."""
    parts = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error["loc"]) or "arguments"
        parts.append(f"{location}: {error['msg']}")
    return "; ".join(parts)


def _request_id(body: Any) -> RequestId:
    """Best-effort id for envelopes of requests that failed validation."""
    if isinstance(body, dict):
        candidate = body.get("id")
        if candidate is None or isinstance(candidate, str | int | float):
            return candidate
    return None


class McpDispatcher:
    """Routes JSON-RPC requests to MCP handlers."""

    def __init__(
        self, settings: Settings, tools: ToolRegistry, sessions: SessionRegistry
    ) -> None:
        """Initialize dispatcher.

        Args:
            settings: Application settings (server info)
            tools: Registered tools
            sessions: Session registry used by initialize
        """
        self.settings = settings
        self.tools = tools
        self.sessions = sessions

    def handle(self, body: Any) -> DispatchOutcome:
        """Handle one decoded request body.

        Non-object bodies are treated as an empty request.

        Args:
            body: Decoded JSON body (or None for an empty body)

        Returns:
            DispatchOutcome with the response envelope
        """
        if not isinstance(body, dict):
            body = {}

        try:
            request = JsonRpcRequest.model_validate(body)
        except ValidationError:
            return DispatchOutcome(
                jsonrpc_error(_request_id(body), INVALID_REQUEST, "Invalid Request")
            )

        request_id = request.id
        method = request.method

        if not method:
            return DispatchOutcome(
                jsonrpc_error(request_id, INVALID_REQUEST, "Invalid Request: missing method")
            )

        if method == "initialize":
            return self._initialize(request_id)

        if method == "tools/list":
            return DispatchOutcome(jsonrpc_result(request_id, self.tools.describe()), method)

        if method == "tools/call":
            return self._call_tool(request_id, request.params)

        return DispatchOutcome(
            jsonrpc_error(request_id, METHOD_NOT_FOUND, f"Method not found: {method}"), method
        )

    def _initialize(self, request_id: RequestId) -> DispatchOutcome:
        session = self.sessions.create()
        result = {
            "protocolVersion": self.settings.protocol_version,
            "serverInfo": {
                "name": self.settings.server_name,
                "version": self.settings.service_version,
            },
            "capabilities": {"tools": {"listChanged": False}},
            "sessionId": session.id,
        }
        return DispatchOutcome(jsonrpc_result(request_id, result), "initialize", session.id)

    def _call_tool(self, request_id: RequestId, params: Any) -> DispatchOutcome:
        method = "tools/call"
        try:
            call = ToolCallParams.model_validate(params if params is not None else {})
        except ValidationError:
            return DispatchOutcome(
                jsonrpc_error(request_id, INVALID_PARAMS, "Invalid params"), method
            )

        try:
            tool = self.tools.get(call.name)
        except ToolNotFoundError as e:
            return DispatchOutcome(
                jsonrpc_error(request_id, METHOD_NOT_FOUND, str(e)),
                method,
                tool=call.name,
                tool_status="unknown_tool",
            )

        try:
            result = tool.call(call.arguments)
        except ValidationError as e:
            message = format_validation_error(e)
            logger.warning(f"Rejected {call.name} arguments: {message}")
            errors = [
                {
                    "loc": [str(part) for part in error["loc"]],
                    "msg": error["msg"],
                    "type": error["type"],
                }
                for error in e.errors()
            ]
            return DispatchOutcome(
                jsonrpc_error(request_id, INVALID_PARAMS, message, {"errors": errors}),
                method,
                tool=call.name,
                tool_status="invalid_params",
            )

        return DispatchOutcome(
            jsonrpc_result(request_id, result.to_payload()),
            method,
            tool=call.name,
            tool_status="success",
        )
