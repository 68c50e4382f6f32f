"""Tests for the event hub and the SSE relay."""

import asyncio
import json

import pytest

from backoffice.api.routes.stream import _event_generator
from backoffice.events.hub import EventHub


class _FakeRequest:
    def __init__(self, app):
        self.app = app
        self.disconnected = False

    async def is_disconnected(self):
        return self.disconnected


def _decode(chunk: str) -> dict:
    assert chunk.startswith("data: ")
    return json.loads(chunk[len("data: "):])


@pytest.mark.asyncio
async def test_hub_fans_out():
    hub = EventHub()
    async with hub.subscribe() as a, hub.subscribe() as b:
        assert hub.publish("toast", {"title": "Hi"}) == 2
        assert a.get_nowait() == {"type": "toast", "title": "Hi"}
        assert b.get_nowait() == {"type": "toast", "title": "Hi"}
    assert hub.subscriber_count == 0


@pytest.mark.asyncio
async def test_hub_drops_oldest_when_full():
    hub = EventHub(queue_size=2)
    async with hub.subscribe() as queue:
        for i in range(3):
            hub.publish("tick", {"n": i})
        assert [queue.get_nowait()["n"] for _ in range(2)] == [1, 2]


@pytest.mark.asyncio
async def test_event_stream_relays_hub_events(app, hub):
    request = _FakeRequest(app)
    stream = _event_generator(request, hub, keepalive=0.05)

    assert _decode(await stream.__anext__()) == {"type": "connected"}
    assert _decode(await stream.__anext__())["type"] == "alerts"

    hub.publish("playSound", {"handle": "snd_1", "soundPath": "/sounds/a.mp3", "loop": True})
    assert _decode(await stream.__anext__())["handle"] == "snd_1"

    assert await stream.__anext__() == ": keepalive\n\n"

    request.disconnected = True
    with pytest.raises(StopAsyncIteration):
        await asyncio.wait_for(stream.__anext__(), timeout=1)
    assert hub.subscriber_count == 0
