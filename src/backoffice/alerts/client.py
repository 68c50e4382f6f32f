"""Async HTTP client for the dashboard REST API."""

from __future__ import annotations

import logging
from typing import Any, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from backoffice.errors.exceptions import ApiRequestError
from backoffice.models.booking import Booking, BookingCreate
from backoffice.models.enums import OrderStatus
from backoffice.models.notification import Notification
from backoffice.models.order import Order

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return f"HTTP {response.status_code}"
    if isinstance(body, dict):
        error = body.get("error")
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
        if isinstance(error, str):
            return error
        if body.get("detail"):
            return str(body["detail"])
    return f"HTTP {response.status_code}"


class DashboardClient:
    """Thin async wrapper over ``/api`` used by the alert pipeline.

    Every failure, transport or HTTP, surfaces as :class:`ApiRequestError`.
    """

    def __init__(
        self,
        base_url: str = "http://localhost:8080/api",
        timeout: float = 30.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._client = client or httpx.AsyncClient(timeout=timeout)
        self._owns_client = client is None

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def _request(self, method: str, path: str, body: dict | None = None, params: dict | None = None) -> Any:
        try:
            response = await self._client.request(
                method, f"{self.base_url}{path}", json=body, params=params
            )
        except httpx.HTTPError as exc:
            raise ApiRequestError(method, path, str(exc) or type(exc).__name__) from exc
        if response.status_code >= 400:
            raise ApiRequestError(method, path, _error_message(response), response.status_code)
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as exc:
            raise ApiRequestError(method, path, f"invalid JSON response: {exc}", response.status_code) from exc

    async def _one(self, model: type[M], method: str, path: str, body: dict | None = None) -> M:
        data = await self._request(method, path, body)
        try:
            return model.model_validate(data)
        except ValidationError as exc:
            raise ApiRequestError(method, path, f"unexpected response: {exc.error_count()} invalid field(s)") from exc

    async def _many(self, model: type[M], path: str, params: dict | None = None) -> list[M]:
        """GET a list, skipping rows that do not validate."""
        data = await self._request("GET", path, params=params)
        if data is None:
            return []
        if not isinstance(data, list):
            raise ApiRequestError("GET", path, "expected a JSON array")
        rows = []
        for raw in data:
            try:
                rows.append(model.model_validate(raw))
            except ValidationError as exc:
                row_id = raw.get("id") if isinstance(raw, dict) else None
                logger.warning("Skipping malformed %s row %s from %s: %s", model.__name__, row_id, path, exc)
        return rows

    @staticmethod
    def _user_params(user_id: int | None) -> dict | None:
        return {"userId": user_id} if user_id is not None else None

    # --- Notifications ---

    async def list_notifications(self, user_id: int | None = None) -> list[Notification]:
        return await self._many(Notification, "/notifications", self._user_params(user_id))

    async def list_unread(self, user_id: int | None = None) -> list[Notification]:
        return await self._many(Notification, "/notifications/unread", self._user_params(user_id))

    async def mark_read(self, notification_id: int) -> Notification:
        return await self._one(Notification, "PATCH", f"/notifications/{notification_id}/read", {})

    async def mark_all_read(self, user_id: int | None = None) -> None:
        body = {"userId": user_id} if user_id is not None else {}
        await self._request("POST", "/notifications/read-all", body)

    # --- Orders ---

    async def list_orders(self) -> list[Order]:
        return await self._many(Order, "/orders")

    async def update_order_status(self, order_id: int, status: OrderStatus | str) -> Order:
        return await self._one(Order, "PATCH", f"/orders/{order_id}", {"status": str(status)})

    # --- Bookings ---

    async def list_bookings(self) -> list[Booking]:
        return await self._many(Booking, "/bookings")

    async def create_booking(self, booking: BookingCreate) -> Booking:
        return await self._one(Booking, "POST", "/bookings", booking.model_dump(mode="json", by_alias=True))
