"""Server-Sent Events stream relaying alert, sound and toast events."""

import asyncio
import json
import logging
from typing import AsyncGenerator

from fastapi import APIRouter, Request
from fastapi.responses import StreamingResponse

from backoffice.dependencies import Hub
from backoffice.events.hub import EventHub

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Stream"])

KEEPALIVE_SECONDS = 30.0


async def _event_generator(
    request: Request,
    hub: EventHub,
    keepalive: float = KEEPALIVE_SECONDS,
) -> AsyncGenerator[str, None]:
    """Yield SSE-formatted events from the hub until the page disconnects."""
    async with hub.subscribe() as queue:
        yield f"data: {json.dumps({'type': 'connected'})}\n\n"

        # Current overlay state for a page that just connected
        pipeline = getattr(request.app.state, "pipeline", None)
        if pipeline is not None:
            yield f"data: {json.dumps({'type': 'alerts', **pipeline.presenter.snapshot()})}\n\n"

        try:
            while True:
                if await request.is_disconnected():
                    break
                try:
                    event = await asyncio.wait_for(queue.get(), timeout=keepalive)
                except asyncio.TimeoutError:
                    # Keepalive comment
                    yield ": keepalive\n\n"
                    continue
                yield f"data: {json.dumps(event, default=str)}\n\n"
        except asyncio.CancelledError:
            pass


@router.get("/stream/events")
async def stream_events(request: Request, hub: Hub):
    """Stream alert, sound and toast events via SSE."""
    return StreamingResponse(
        _event_generator(request, hub),
        media_type="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "X-Accel-Buffering": "no",  # Disable nginx buffering
            "Connection": "keep-alive",
        },
    )
