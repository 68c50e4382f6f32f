"""Independent pollers for notifications, unread notifications and orders."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from backoffice.alerts.client import DashboardClient
from backoffice.errors.exceptions import ApiRequestError
from backoffice.models.notification import Notification
from backoffice.models.order import Order

logger = logging.getLogger(__name__)


@dataclass
class Snapshot:
    """Latest result from each poller. Sources refresh independently."""

    notifications: list[Notification] = field(default_factory=list)
    unread: list[Notification] = field(default_factory=list)
    orders: list[Order] = field(default_factory=list)
    updated_at: dict[str, datetime] = field(default_factory=dict)


class Poller:
    """Fetch on an interval and hand each result to a callback.

    In-flight requests are never cancelled by the next tick; results are
    applied in the order they arrive.
    """

    def __init__(
        self,
        name: str,
        fetch: Callable[[], Awaitable[Any]],
        interval: float,
        on_result: Callable[[Any], Awaitable[None]],
    ) -> None:
        self.name = name
        self.fetch = fetch
        self.interval = interval
        self.on_result = on_result

    async def poll_once(self) -> bool:
        try:
            result = await self.fetch()
        except ApiRequestError as exc:
            logger.warning("%s poll failed: %s", self.name, exc)
            return False
        await self.on_result(result)
        return True

    async def run(self) -> None:
        logger.info("%s poller started (interval=%.1fs)", self.name, self.interval)

        while True:
            try:
                await self.poll_once()
                await asyncio.sleep(self.interval)
            except asyncio.CancelledError:
                logger.info("%s poller stopped", self.name)
                break
            except Exception as exc:
                logger.exception("%s poller error: %s", self.name, exc)
                # Keep polling despite errors
                await asyncio.sleep(self.interval)


class NotificationFetcher:
    def __init__(
        self,
        client: DashboardClient,
        on_unread: Callable[[list[Notification]], Awaitable[Any]],
        unread_interval: float = 8.0,
        notifications_interval: float = 15.0,
        orders_interval: float = 30.0,
    ) -> None:
        self.client = client
        self.on_unread = on_unread
        self.snapshot = Snapshot()
        self.pollers = [
            Poller("unread", client.list_unread, unread_interval, self._apply_unread),
            Poller("notifications", client.list_notifications, notifications_interval, self._apply_notifications),
            Poller("orders", client.list_orders, orders_interval, self._apply_orders),
        ]
        self._tasks: list[asyncio.Task] = []

    def _stamp(self, source: str) -> None:
        self.snapshot.updated_at[source] = datetime.now(timezone.utc)

    async def _apply_unread(self, notifications: list[Notification]) -> None:
        self.snapshot.unread = notifications
        self._stamp("unread")
        await self.on_unread(notifications)

    async def _apply_notifications(self, notifications: list[Notification]) -> None:
        self.snapshot.notifications = notifications
        self._stamp("notifications")

    async def _apply_orders(self, orders: list[Order]) -> None:
        self.snapshot.orders = orders
        self._stamp("orders")

    @property
    def running(self) -> bool:
        return any(not t.done() for t in self._tasks)

    def start(self) -> None:
        if self.running:
            return
        self._tasks = [asyncio.create_task(p.run(), name=f"poll-{p.name}") for p in self.pollers]

    async def stop(self) -> None:
        for task in self._tasks:
            task.cancel()
        await asyncio.gather(*self._tasks, return_exceptions=True)
        self._tasks = []
