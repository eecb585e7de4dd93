"""Server-sent events framing and the per-session stream generator."""

import asyncio
import json
import time
from collections.abc import AsyncIterator
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from invoicechaser.mcp.sessions import SessionRegistry

CONNECTED_EVENT = "mcp:connected"
MESSAGE_EVENT = "mcp:message"


def iso_now() -> str:
    """Current UTC time with millisecond precision and a Z suffix."""
    return datetime.now(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def format_sse(data: Any, event: str | None = None) -> str:
    """Frame one event: optional ``event:`` line plus a compact JSON ``data:`` line."""
    payload = json.dumps(data, separators=(",", ":"), ensure_ascii=False)
    prefix = f"event: {event}\n" if event else ""
    return f"{prefix}data: {payload}\n\n"


def format_heartbeat(epoch_ms: int | None = None) -> str:
    """SSE comment line that keeps intermediaries from closing the stream."""
    if epoch_ms is None:
        epoch_ms = int(time.time() * 1000)
    return f": heartbeat {epoch_ms}\n\n"


async def event_stream(
    registry: "SessionRegistry",
    session_id: str,
    heartbeat_seconds: float,
) -> AsyncIterator[str]:
    """Attach to a session and yield SSE frames until closed or cancelled.

    The first frame is the ``mcp:connected`` event; afterwards queued
    notifications are relayed and a heartbeat is emitted whenever the
    queue stays silent for ``heartbeat_seconds``. The channel is detached
    however the stream ends.

    Raises:
        SessionNotFoundError: If the session does not exist
    """
    channel = registry.attach(session_id)
    try:
        yield format_sse(
            {"ok": True, "sessionId": session_id, "connectedAt": iso_now()}, CONNECTED_EVENT
        )
        while True:
            try:
                frame = await asyncio.wait_for(channel.next_frame(), timeout=heartbeat_seconds)
            except TimeoutError:
                yield format_heartbeat()
                continue
            if frame is None:
                return
            yield frame
    finally:
        registry.detach(session_id, channel)
