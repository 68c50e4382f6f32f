"""In-process pub/sub feeding the Server-Sent Events stream."""

import asyncio
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

logger = logging.getLogger(__name__)

# Per-subscriber backlog; a page that stops reading loses the oldest events
_QUEUE_SIZE = 100


class EventHub:
    """Fan-out of JSON-able events to every connected page."""

    def __init__(self, queue_size: int = _QUEUE_SIZE) -> None:
        self._queue_size = queue_size
        self._subscribers: set[asyncio.Queue] = set()

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def publish(self, event_type: str, payload: dict[str, Any] | None = None) -> int:
        """Queue an event for all subscribers. Returns how many received it."""
        event = {"type": event_type, **(payload or {})}
        for queue in self._subscribers:
            if queue.full():
                queue.get_nowait()
            queue.put_nowait(event)
        return len(self._subscribers)

    @asynccontextmanager
    async def subscribe(self) -> AsyncIterator[asyncio.Queue]:
        queue: asyncio.Queue = asyncio.Queue(maxsize=self._queue_size)
        self._subscribers.add(queue)
        logger.info("Event subscriber connected (total=%d)", len(self._subscribers))
        try:
            yield queue
        finally:
            self._subscribers.discard(queue)
            logger.info("Event subscriber disconnected (total=%d)", len(self._subscribers))
