"""Unit tests for the JSON-RPC dispatcher.

Tests cover:
- initialize handshake and session creation
- tools/list and tools/call
- JSON-RPC error codes for malformed requests
"""

from datetime import UTC, datetime

import pytest

from invoicechaser.mcp.protocol import (
    INVALID_PARAMS,
    INVALID_REQUEST,
    METHOD_NOT_FOUND,
    McpDispatcher,
)
from invoicechaser.mcp.registry import create_tool_registry
from invoicechaser.mcp.sessions import SessionRegistry
from invoicechaser.shared.config import Settings

SCENARIO_A = (
    "Acme Supplies Ltd\n"
    "Total Due: USD 2,450.00\n"
    "INVOICE #INV-1042\n"
    "Due Date: 2025-11-30\n"
    "Payment terms: Net 15\n"
)


def fixed_clock() -> datetime:
    return datetime(2025, 12, 15, tzinfo=UTC)


@pytest.fixture
def sessions() -> SessionRegistry:
    """Empty session registry."""
    return SessionRegistry()


@pytest.fixture
def dispatcher(sessions: SessionRegistry) -> McpDispatcher:
    """Dispatcher with the default tools and a fixed clock."""
    settings = Settings(_env_file=None)
    return McpDispatcher(settings, create_tool_registry(settings, fixed_clock), sessions)


def tool_call(arguments: object, request_id: object = 1, name: str = "invoicechaser_prepare"):  # type: ignore[no-untyped-def]
    return {
        "jsonrpc": "2.0",
        "id": request_id,
        "method": "tools/call",
        "params": {"name": name, "arguments": arguments},
    }


class TestInitialize:
    """initialize handshake."""

    def test_returns_server_info_and_session(
        self, dispatcher: McpDispatcher, sessions: SessionRegistry
    ) -> None:
        """Should report the server and issue a registered session id."""
        outcome = dispatcher.handle({"jsonrpc": "2.0", "id": "init", "method": "initialize"})

        result = outcome.response["result"]
        assert outcome.response["id"] == "init"
        assert result["protocolVersion"] == "2025-03-26"
        assert result["serverInfo"] == {"name": "InvoiceChaser", "version": "0.1.0"}
        assert result["capabilities"] == {"tools": {"listChanged": False}}
        assert result["sessionId"] == outcome.session_id
        assert outcome.session_id in sessions

    def test_each_initialize_issues_new_session(
        self, dispatcher: McpDispatcher, sessions: SessionRegistry
    ) -> None:
        """Should not reuse session ids."""
        first = dispatcher.handle({"method": "initialize"}).session_id
        second = dispatcher.handle({"method": "initialize"}).session_id

        assert first != second
        assert len(sessions) == 2


class TestToolsList:
    """tools/list."""

    def test_lists_prepare_tool(self, dispatcher: McpDispatcher) -> None:
        """Should describe invoicechaser_prepare."""
        outcome = dispatcher.handle({"jsonrpc": "2.0", "id": 2, "method": "tools/list"})

        tools = outcome.response["result"]["tools"]
        assert [tool["name"] for tool in tools] == ["invoicechaser_prepare"]
        assert outcome.ok is True
        assert outcome.method == "tools/list"


class TestToolsCall:
    """tools/call."""

    def test_prepare_success(self, dispatcher: McpDispatcher) -> None:
        """Should return text and structured content."""
        outcome = dispatcher.handle(tool_call({"invoiceText": SCENARIO_A}, request_id="7"))

        assert outcome.response["jsonrpc"] == "2.0"
        assert outcome.response["id"] == "7"
        structured = outcome.response["result"]["structuredContent"]
        assert structured["extracted"]["invoiceNumber"] == "INV-1042"
        assert structured["extracted"]["daysOverdue"] == 15
        assert structured["redFlags"] == []
        assert outcome.tool == "invoicechaser_prepare"
        assert outcome.tool_status == "success"

    def test_invalid_arguments(self, dispatcher: McpDispatcher) -> None:
        """Should map validation failures to -32602 with field details."""
        outcome = dispatcher.handle(tool_call({"invoiceText": ""}))

        error = outcome.response["error"]
        assert error["code"] == INVALID_PARAMS
        assert error["message"].startswith("invoiceText: ")
        assert error["data"]["errors"][0]["loc"] == ["invoiceText"]
        assert outcome.ok is False
        assert outcome.tool_status == "invalid_params"

    def test_invalid_tone(self, dispatcher: McpDispatcher) -> None:
        """Should name the tone field in the error."""
        outcome = dispatcher.handle(tool_call({"invoiceText": "x", "tone": "angry"}))

        assert outcome.response["error"]["code"] == INVALID_PARAMS
        assert "tone" in outcome.response["error"]["message"]

    def test_missing_arguments(self, dispatcher: McpDispatcher) -> None:
        """Should reject a call without arguments."""
        outcome = dispatcher.handle(
            {"id": 1, "method": "tools/call", "params": {"name": "invoicechaser_prepare"}}
        )

        assert outcome.response["error"]["code"] == INVALID_PARAMS

    def test_unknown_tool(self, dispatcher: McpDispatcher) -> None:
        """Should return -32601 naming the tool."""
        outcome = dispatcher.handle(tool_call({}, name="other_tool"))

        assert outcome.response["error"] == {
            "code": METHOD_NOT_FOUND,
            "message": "Unknown tool: other_tool",
        }
        assert outcome.tool_status == "unknown_tool"

    @pytest.mark.parametrize("params", [None, {}, {"name": 5}, ["invoicechaser_prepare"]])
    def test_invalid_params(self, dispatcher: McpDispatcher, params: object) -> None:
        """Should reject params without a string tool name."""
        outcome = dispatcher.handle({"id": 3, "method": "tools/call", "params": params})

        assert outcome.response["error"] == {"code": INVALID_PARAMS, "message": "Invalid params"}


class TestMalformedRequests:
    """Envelope-level errors."""

    @pytest.mark.parametrize("body", [None, {}, [], "text", 42, {"id": 9}])
    def test_missing_method(self, dispatcher: McpDispatcher, body: object) -> None:
        """Should reject requests without a method."""
        outcome = dispatcher.handle(body)

        assert outcome.response["error"]["code"] == INVALID_REQUEST
        assert outcome.response["error"]["message"] == "Invalid Request: missing method"
        assert outcome.method is None

    def test_missing_id_is_null(self, dispatcher: McpDispatcher) -> None:
        """Should answer with a null id when none was sent."""
        outcome = dispatcher.handle({"method": "tools/list"})

        assert outcome.response["id"] is None

    def test_unknown_method(self, dispatcher: McpDispatcher) -> None:
        """Should return -32601 naming the method."""
        outcome = dispatcher.handle({"id": 1, "method": "resources/list"})

        assert outcome.response["error"] == {
            "code": METHOD_NOT_FOUND,
            "message": "Method not found: resources/list",
        }

    def test_malformed_member_types(self, dispatcher: McpDispatcher) -> None:
        """Should reject a non-string method as an invalid request."""
        outcome = dispatcher.handle({"id": 4, "method": ["initialize"]})

        assert outcome.response == {
            "jsonrpc": "2.0",
            "id": 4,
            "error": {"code": INVALID_REQUEST, "message": "Invalid Request"},
        }
