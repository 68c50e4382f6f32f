"""Tests for the order endpoints."""

import pytest

from backoffice.repositories.order_repo import OrderRepository


def _payload(**overrides) -> dict:
    payload = {
        "customerName": "Sam",
        "type": "dine-in",
        "tableNumber": "12",
        "items": [
            {"name": "Pizza", "price": "12.99", "quantity": 2},
            {"name": "Cola", "price": "2.50", "quantity": 1},
        ],
        "total": "28.48",
    }
    payload.update(overrides)
    return payload


@pytest.mark.asyncio
async def test_create_order_keeps_both_item_views(client):
    response = await client.post("/api/orders", json=_payload())
    assert response.status_code == 201
    order = response.json()
    assert order["type"] == "manual-dine-in"
    assert order["status"] == "processing"
    assert order["aiProcessed"] is False
    assert order["items"]["formatted"] == {"Pizza": 2, "Cola": 1}
    assert order["items"]["original"][0] == {"name": "Pizza", "price": "12.99", "quantity": 2}


@pytest.mark.asyncio
async def test_create_order_keeps_existing_prefix(client):
    response = await client.post("/api/orders", json=_payload(type="manual-delivery"))
    assert response.json()["type"] == "manual-delivery"


@pytest.mark.asyncio
async def test_create_order_rejects_unknown_type(client):
    response = await client.post("/api/orders", json=_payload(type="drone"))
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_get_order_items_normalised(client):
    order_id = (await client.post("/api/orders", json=_payload())).json()["id"]
    response = await client.get(f"/api/orders/{order_id}/items")
    assert response.json() == [
        {"name": "Pizza", "quantity": 2, "price": "12.99"},
        {"name": "Cola", "quantity": 1, "price": "2.50"},
    ]


@pytest.mark.asyncio
async def test_items_from_phone_agent_shape(client, db_session):
    row = await OrderRepository(db_session).create(
        customer_name="Caller",
        type="phone",
        items='{"Garlic Bread": "3 slices x 1", "Wings": "2 large"}',
        total="18.00",
        status="new",
    )
    await db_session.commit()

    response = await client.get(f"/api/orders/{row.id}/items")
    assert response.json() == [
        {"name": "Garlic Bread", "quantity": 1, "price": ""},
        {"name": "Wings (2 large)", "quantity": 2, "price": ""},
    ]


@pytest.mark.asyncio
async def test_status_only_patch(client):
    order_id = (await client.post("/api/orders", json=_payload())).json()["id"]
    response = await client.patch(f"/api/orders/{order_id}", json={"status": "new"})
    assert response.status_code == 200
    assert response.json()["status"] == "new"
    assert (await client.get(f"/api/orders/{order_id}")).json()["status"] == "new"


@pytest.mark.asyncio
async def test_invalid_status_rejected(client):
    order_id = (await client.post("/api/orders", json=_payload())).json()["id"]
    response = await client.patch(f"/api/orders/{order_id}", json={"status": "teleported"})
    assert response.status_code == 400
    assert "new" in response.json()["error"]["details"]["allowed"]


@pytest.mark.asyncio
async def test_partial_update(client):
    order_id = (await client.post("/api/orders", json=_payload())).json()["id"]
    response = await client.patch(
        f"/api/orders/{order_id}", json={"tableNumber": "7", "status": "ready"}
    )
    order = response.json()
    assert order["tableNumber"] == "7"
    assert order["status"] == "ready"
    assert order["customerName"] == "Sam"


@pytest.mark.asyncio
async def test_patch_missing_order(client):
    response = await client.patch("/api/orders/999", json={"status": "new"})
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_list_orders_by_status(client):
    first = (await client.post("/api/orders", json=_payload())).json()["id"]
    await client.post("/api/orders", json=_payload(customerName="Lee"))
    await client.patch(f"/api/orders/{first}", json={"status": "completed"})

    completed = (await client.get("/api/orders", params={"status": "completed"})).json()
    assert [o["id"] for o in completed] == [first]
    assert len((await client.get("/api/orders")).json()) == 2
