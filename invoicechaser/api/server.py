"""uvicorn server runner.

Run with: python -m invoicechaser.api.server
Or: uvicorn invoicechaser.api.main:app --port 3000
"""

import logging
import os

import uvicorn

from invoicechaser.shared.config import get_settings

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
)

logger = logging.getLogger(__name__)


def resolve_port(default: int) -> int:
    """Port from the PORT environment variable, else ``default``."""
    raw = os.getenv("PORT")
    return int(raw) if raw else default


def main() -> None:
    """Run the HTTP server."""
    settings = get_settings()
    port = resolve_port(settings.port)

    logger.info(f"InvoiceChaser MCP server listening on :{port}")
    uvicorn.run(
        "invoicechaser.api.main:app",
        host=settings.host,
        port=port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
