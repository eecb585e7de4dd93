"""MCP session registry and server-push notification channels.

Sessions are issued on ``initialize`` and may hold at most one live
notification channel; attaching a new stream replaces the previous one.
The registry is owned by a single event loop and is not thread-safe.
"""

import asyncio
import logging
import time
import uuid
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from invoicechaser.mcp.sse import format_sse

logger = logging.getLogger(__name__)


class SessionNotFoundError(LookupError):
    """Raised when an operation names an unknown session."""


class NotificationChannel:
    """Bounded queue of preformatted SSE frames for one stream.

    A ``None`` item marks the channel as closed.
    """

    def __init__(self, maxsize: int) -> None:
        self.queue: asyncio.Queue[str | None] = asyncio.Queue(maxsize=maxsize)
        self.closed = False

    def push(self, frame: str) -> bool:
        """Enqueue a frame without blocking; returns False if closed or full."""
        if self.closed:
            return False
        try:
            self.queue.put_nowait(frame)
        except asyncio.QueueFull:
            return False
        return True

    def close(self) -> None:
        """Stop the stream after the frames already queued."""
        if self.closed:
            return
        self.closed = True
        try:
            self.queue.put_nowait(None)
        except asyncio.QueueFull:
            # Reader drains the backlog then sees ``closed``.
            pass

    async def next_frame(self) -> str | None:
        """Wait for the next frame; None once the channel is closed and drained."""
        if self.closed and self.queue.empty():
            return None
        return await self.queue.get()


@dataclass
class Session:
    """A live MCP session."""

    id: str
    created_at: datetime
    last_seen: float
    channel: NotificationChannel | None = field(default=None, repr=False)


class SessionRegistry:
    """Keyed registry of MCP sessions.

    Attributes:
        ttl_seconds: Idle time after which a session without a stream is pruned
        queue_size: Buffered frames per notification channel
    """

    def __init__(
        self,
        ttl_seconds: float = 3600.0,
        queue_size: int = 100,
        clock: Callable[[], float] = time.monotonic,
        id_factory: Callable[[], str] = lambda: str(uuid.uuid4()),
    ) -> None:
        self.ttl_seconds = ttl_seconds
        self.queue_size = queue_size
        self._clock = clock
        self._id_factory = id_factory
        self._sessions: dict[str, Session] = {}

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, session_id: object) -> bool:
        return session_id in self._sessions

    def create(self) -> Session:
        """Issue a new session, pruning idle ones first."""
        self.prune()
        session = Session(
            id=self._id_factory(),
            created_at=datetime.now(UTC),
            last_seen=self._clock(),
        )
        self._sessions[session.id] = session
        logger.info(f"Created MCP session {session.id}")
        return session

    def get(self, session_id: str) -> Session | None:
        return self._sessions.get(session_id)

    def touch(self, session_id: str) -> Session | None:
        """Record activity on a session; returns None if unknown."""
        session = self._sessions.get(session_id)
        if session is not None:
            session.last_seen = self._clock()
        return session

    def attach(self, session_id: str) -> NotificationChannel:
        """Open a notification channel, closing any previous one.

        Raises:
            SessionNotFoundError: If the session does not exist
        """
        session = self.touch(session_id)
        if session is None:
            raise SessionNotFoundError(session_id)
        if session.channel is not None:
            session.channel.close()
        session.channel = NotificationChannel(self.queue_size)
        logger.info(f"Attached stream to MCP session {session_id}")
        return session.channel

    def detach(self, session_id: str, channel: NotificationChannel) -> None:
        """Drop ``channel`` from the session if it is still the current one."""
        channel.close()
        session = self._sessions.get(session_id)
        if session is not None and session.channel is channel:
            session.channel = None
            session.last_seen = self._clock()
            logger.info(f"Detached stream from MCP session {session_id}")

    def publish(self, session_id: str, event: str, data: Any) -> bool:
        """Push an event to the session's stream.

        Returns:
            True if a live channel accepted the frame
        """
        session = self._sessions.get(session_id)
        if session is None or session.channel is None:
            return False
        delivered = session.channel.push(format_sse(data, event))
        if not delivered:
            logger.warning(f"Dropped {event} notification for MCP session {session_id}")
        return delivered

    def remove(self, session_id: str) -> bool:
        """Forget a session and close its stream."""
        session = self._sessions.pop(session_id, None)
        if session is None:
            return False
        if session.channel is not None:
            session.channel.close()
        logger.info(f"Removed MCP session {session_id}")
        return True

    def prune(self) -> int:
        """Remove idle sessions that have no live stream.

        Returns:
            Number of sessions removed
        """
        cutoff = self._clock() - self.ttl_seconds
        expired = [
            session_id
            for session_id, session in self._sessions.items()
            if session.channel is None and session.last_seen < cutoff
        ]
        for session_id in expired:
            del self._sessions[session_id]
        if expired:
            logger.info(f"Pruned {len(expired)} idle MCP sessions")
        return len(expired)
