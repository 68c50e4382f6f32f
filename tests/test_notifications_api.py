"""Tests for the notification endpoints."""

import pytest


async def _create(client, **overrides) -> dict:
    payload = {"type": "order", "message": "New order", "details": {"orderId": 5}}
    payload.update(overrides)
    response = await client.post("/api/notifications", json=payload)
    assert response.status_code == 201
    return response.json()


@pytest.mark.asyncio
async def test_create_and_list(client):
    created = await _create(client)
    assert created["isRead"] is False
    assert created["details"] == {"orderId": 5}
    assert "createdAt" in created

    listed = (await client.get("/api/notifications")).json()
    assert [n["id"] for n in listed] == [created["id"]]


@pytest.mark.asyncio
async def test_unread_filter_and_mark_read(client):
    first = await _create(client)
    second = await _create(client, message="Second")

    response = await client.patch(f"/api/notifications/{first['id']}/read")
    assert response.status_code == 200
    assert response.json()["isRead"] is True

    unread = (await client.get("/api/notifications/unread")).json()
    assert [n["id"] for n in unread] == [second["id"]]


@pytest.mark.asyncio
async def test_mark_read_missing(client):
    response = await client.patch("/api/notifications/999/read")
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_user_filter_includes_broadcasts(client):
    mine = await _create(client, userId=1)
    broadcast = await _create(client)
    await _create(client, userId=2)

    listed = (await client.get("/api/notifications/unread", params={"userId": 1})).json()
    assert sorted(n["id"] for n in listed) == sorted([mine["id"], broadcast["id"]])


@pytest.mark.asyncio
async def test_read_all(client):
    await _create(client)
    await _create(client)
    response = await client.post("/api/notifications/read-all", json={})
    assert response.json() == {"success": True, "updated": 2}
    assert (await client.get("/api/notifications/unread")).json() == []


@pytest.mark.asyncio
async def test_ai_agent_notify(client, hub):
    async with hub.subscribe() as queue:
        response = await client.post("/api/ai-agent/notify", json={
            "type": "booking",
            "message": "Booking for 6",
            "details": {"bookingId": 3},
        })
        event = queue.get_nowait()

    assert response.status_code == 201
    body = response.json()
    assert body["success"] is True
    assert body["notification"]["type"] == "booking"
    assert event["type"] == "notification"
    assert event["notification"]["id"] == body["notification"]["id"]


@pytest.mark.asyncio
async def test_ai_agent_notify_requires_fields(client):
    response = await client.post("/api/ai-agent/notify", json={"type": "booking"})
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "VALIDATION_ERROR"
