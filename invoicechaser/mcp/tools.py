"""The invoicechaser_prepare tool."""

import json
import logging
from typing import Any

from invoicechaser.mcp.base import McpTool, TextContent, ToolCallResult
from invoicechaser.prepare.schema import PrepareArgs
from invoicechaser.prepare.service import PrepareService
from invoicechaser.reminders.overdue import Clock, utc_now
from invoicechaser.shared.config import Settings

logger = logging.getLogger(__name__)


class PrepareInvoiceTool(McpTool):
    """Extracts invoice fields and drafts friendly/neutral/firm reminders."""

    def __init__(self, settings: Settings, clock: Clock = utc_now) -> None:
        super().__init__(settings)
        self.service = PrepareService(settings, clock)

    @property
    def name(self) -> str:
        return "invoicechaser_prepare"

    @property
    def description(self) -> str:
        return (
            "Extracts key invoice fields and prepares friendly/neutral/firm follow-up emails "
            "(deterministic, no network calls)."
        )

    @property
    def input_schema(self) -> dict[str, Any]:
        return {
            "type": "object",
            "properties": {
                "invoiceText": {"type": "string"},
                "currency": {"type": "string"},
                "tone": {"type": "string", "enum": ["friendly", "neutral", "firm"]},
                "today": {"type": "string", "description": "ISO date like 2025-12-23 (optional)"},
            },
            "required": ["invoiceText"],
        }

    def call(self, arguments: Any) -> ToolCallResult:
        args = PrepareArgs.model_validate(arguments if arguments is not None else {})
        result = self.service.prepare(args)
        payload = result.to_payload()

        logger.info(f"{self.name} completed with {len(result.red_flags)} red flags")

        return ToolCallResult(
            content=[TextContent(text=json.dumps(payload, indent=2, ensure_ascii=False))],
            structured_content=payload,
        )
