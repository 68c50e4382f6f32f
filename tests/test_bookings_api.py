"""Tests for the booking endpoints."""

import pytest


async def _create(client, when: str, name: str = "Ana") -> dict:
    response = await client.post("/api/bookings", json={
        "customerName": name,
        "bookingTime": when,
        "partySize": 4,
        "specialOccasion": "Birthday",
    })
    assert response.status_code == 201
    return response.json()


@pytest.mark.asyncio
async def test_list_newest_booking_first(client):
    early = await _create(client, "2026-05-01T18:00:00Z")
    late = await _create(client, "2026-05-03T20:00:00Z")
    middle = await _create(client, "2026-05-02T19:00:00Z")

    listed = (await client.get("/api/bookings")).json()
    assert [b["id"] for b in listed] == [late["id"], middle["id"], early["id"]]


@pytest.mark.asyncio
async def test_booking_defaults(client):
    booking = await _create(client, "2026-05-01T18:00:00Z")
    assert booking["status"] == "confirmed"
    assert booking["source"] == "website"
    assert booking["specialOccasion"] == "Birthday"


@pytest.mark.asyncio
async def test_update_and_delete(client):
    booking = await _create(client, "2026-05-01T18:00:00Z")

    response = await client.patch(f"/api/bookings/{booking['id']}", json={"partySize": 6})
    assert response.json()["partySize"] == 6

    response = await client.delete(f"/api/bookings/{booking['id']}")
    assert response.status_code == 204
    assert (await client.get(f"/api/bookings/{booking['id']}")).status_code == 404


@pytest.mark.asyncio
async def test_invalid_party_size(client):
    response = await client.post("/api/bookings", json={
        "customerName": "Ana", "bookingTime": "2026-05-01T18:00:00Z", "partySize": 0,
    })
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_empty_update_rejected(client):
    booking = await _create(client, "2026-05-01T18:00:00Z")
    response = await client.patch(f"/api/bookings/{booking['id']}", json={})
    assert response.status_code == 400
