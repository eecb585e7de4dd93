"""Abstract base class for tools exposed over MCP.

Every tool publishes a name, a description and a JSON Schema for its
arguments, and turns raw arguments into a ToolCallResult. Argument
validation errors are raised as ``pydantic.ValidationError`` and mapped to
JSON-RPC errors by the dispatcher.

Based on Strategy Pattern:
https://refactoring.guru/design-patterns/strategy/python
"""

from abc import ABC, abstractmethod
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from invoicechaser.shared.config import Settings


class TextContent(BaseModel):
    """Text block of a tool result."""

    type: str = "text"
    text: str


class ToolCallResult(BaseModel):
    """Result of a tools/call invocation.

    Attributes:
        content: Human-readable content blocks
        structured_content: Machine-readable payload
    """

    model_config = ConfigDict(populate_by_name=True)

    content: list[TextContent]
    structured_content: dict[str, Any] | None = Field(None, alias="structuredContent")

    def to_payload(self) -> dict[str, Any]:
        """Return the camelCase JSON-RPC result body."""
        return self.model_dump(by_alias=True, exclude_none=True)


class McpTool(ABC):
    """Abstract base class for MCP tools."""

    def __init__(self, settings: Settings) -> None:
        """Initialize tool with settings.

        Args:
            settings: Application settings
        """
        self.settings = settings

    @property
    @abstractmethod
    def name(self) -> str:
        """Tool identifier used in tools/call."""
        pass

    @property
    @abstractmethod
    def description(self) -> str:
        """One-line description shown in tools/list."""
        pass

    @property
    @abstractmethod
    def input_schema(self) -> dict[str, Any]:
        """JSON Schema of the tool arguments."""
        pass

    @abstractmethod
    def call(self, arguments: Any) -> ToolCallResult:
        """Run the tool.

        Args:
            arguments: Raw arguments from the request (may be any JSON value)

        Returns:
            ToolCallResult

        Raises:
            pydantic.ValidationError: If arguments do not match the input schema
        """
        pass

    def describe(self) -> dict[str, Any]:
        """Entry for the tools/list result."""
        return {
            "name": self.name,
            "description": self.description,
            "inputSchema": self.input_schema,
        }
