"""Registry of tools served over MCP.

Based on:
- Factory Pattern: https://refactoring.guru/design-patterns/factory-method/python
- Registry Pattern: Python Cookbook 3rd Edition, Recipe 9.22
"""

import logging
from typing import Any

from invoicechaser.mcp.base import McpTool
from invoicechaser.mcp.tools import PrepareInvoiceTool
from invoicechaser.reminders.overdue import Clock, utc_now
from invoicechaser.shared.config import Settings

logger = logging.getLogger(__name__)


class ToolNotFoundError(LookupError):
    """Raised when tools/call names a tool that is not registered."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Unknown tool: {name}")
        self.name = name


class ToolRegistry:
    """Mapping of tool names to tool instances, in registration order."""

    def __init__(self) -> None:
        self._tools: dict[str, McpTool] = {}

    def register(self, tool: McpTool) -> None:
        """Register a tool, replacing any tool with the same name.

        Args:
            tool: Tool implementing the McpTool interface
        """
        self._tools[tool.name] = tool
        logger.info(f"Registered MCP tool: {tool.name}")

    def get(self, name: str) -> McpTool:
        """Get tool by name.

        Raises:
            ToolNotFoundError: If no tool with that name is registered
        """
        if name not in self._tools:
            raise ToolNotFoundError(name)
        return self._tools[name]

    def list_tools(self) -> list[str]:
        """List all registered tool names."""
        return list(self._tools.keys())

    def describe(self) -> dict[str, Any]:
        """Result body of tools/list."""
        return {"tools": [tool.describe() for tool in self._tools.values()]}


def create_tool_registry(settings: Settings, clock: Clock = utc_now) -> ToolRegistry:
    """Build the registry with every built-in tool.

    Args:
        settings: Application settings passed to each tool
        clock: Reference-date clock for date-dependent tools

    Returns:
        Populated ToolRegistry
    """
    registry = ToolRegistry()
    registry.register(PrepareInvoiceTool(settings, clock))
    return registry
