"""Staff-facing alerts for new orders and bookings.

Each alert moves ``idle -> shown -> {accepted | dismissed | auto_closed}``.
Alerts wait in a FIFO queue and one is shown at a time; resolving the active
alert promotes the next. Order alerts stay up until someone accepts or
dismisses them. Booking alerts close themselves after a timeout.
"""

from __future__ import annotations

import asyncio
import logging
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from backoffice.alerts.client import DashboardClient
from backoffice.alerts.sound import SoundSubsystem
from backoffice.alerts.toasts import ToastCenter
from backoffice.errors.exceptions import AlertStateError, ApiRequestError, ConflictError, NotFoundError
from backoffice.events.hub import EventHub
from backoffice.models.enums import AlertKind, AlertState, NotificationType, OrderStatus
from backoffice.models.notification import Notification

logger = logging.getLogger(__name__)

_TITLES = {
    AlertKind.ORDER: "New Order Received!",
    AlertKind.BOOKING: "New Booking Received!",
    AlertKind.FUNCTION_BOOKING: "New Function Booking Received!",
}

_TERMINAL = {AlertState.ACCEPTED, AlertState.DISMISSED, AlertState.AUTO_CLOSED}


def classify(notification: Notification) -> AlertKind:
    """Decide which kind of alert, if any, a notification raises."""
    ntype = NotificationType.coerce(notification.type)
    if ntype == NotificationType.ORDER:
        return AlertKind.ORDER
    # Phone agent reports orders taken on a call as call notifications
    if ntype == NotificationType.CALL and "order" in notification.message.lower():
        return AlertKind.ORDER
    if ntype == NotificationType.BOOKING:
        return AlertKind.BOOKING
    if ntype == NotificationType.FUNCTION_BOOKING:
        return AlertKind.FUNCTION_BOOKING
    return AlertKind.OTHER


@dataclass
class Alert:
    alert_id: int
    kind: AlertKind
    title: str
    message: str
    details: dict[str, Any] = field(default_factory=dict)
    auto_close_after: float | None = None
    state: AlertState = AlertState.IDLE
    shown_at: datetime | None = None
    resolved_at: datetime | None = None

    @property
    def order_id(self) -> int | None:
        value = self.details.get("orderId")
        try:
            return int(value) if value is not None else None
        except (TypeError, ValueError):
            return None

    @property
    def display_title(self) -> str:
        if self.kind == AlertKind.ORDER and self.order_id is not None:
            return f"{self.title} #{self.order_id}"
        return self.title

    def to_dict(self) -> dict:
        return {
            "alertId": self.alert_id,
            "kind": str(self.kind),
            "title": self.display_title,
            "message": self.message,
            "details": self.details,
            "state": str(self.state),
            "orderId": self.order_id,
            "autoCloseAfter": self.auto_close_after,
            "shownAt": self.shown_at.isoformat() if self.shown_at else None,
            "resolvedAt": self.resolved_at.isoformat() if self.resolved_at else None,
        }


class AlertPresenter:
    def __init__(
        self,
        client: DashboardClient,
        sound: SoundSubsystem,
        toasts: ToastCenter,
        booking_timeout: float = 5.0,
        hub: EventHub | None = None,
        history: int = 50,
    ) -> None:
        self.client = client
        self.sound = sound
        self.toasts = toasts
        self.booking_timeout = booking_timeout
        self.hub = hub
        self._queue: deque[Alert] = deque()
        self._active: Alert | None = None
        self._timers: dict[int, asyncio.Task] = {}
        self._resolved: deque[Alert] = deque(maxlen=history)

    @property
    def active(self) -> Alert | None:
        return self._active

    @property
    def pending(self) -> list[Alert]:
        return list(self._queue)

    @property
    def resolved(self) -> list[Alert]:
        return list(self._resolved)

    def snapshot(self) -> dict:
        return {
            "active": self._active.to_dict() if self._active else None,
            "pending": [a.to_dict() for a in self._queue],
        }

    def _publish(self) -> None:
        if self.hub is not None:
            self.hub.publish("alerts", self.snapshot())

    async def present(self, notification: Notification) -> Alert | None:
        """Queue an alert for a notification, or toast it if it is not alert-worthy."""
        kind = classify(notification)
        if kind == AlertKind.OTHER:
            label = (notification.type or "notification").replace("_", " ").capitalize()
            self.toasts.show(f"New {label}", notification.message)
            await self.sound.request(notification.id, kind)
            return None

        alert = Alert(
            alert_id=notification.id,
            kind=kind,
            title=_TITLES[kind],
            message=notification.message,
            details=dict(notification.details or {}),
            auto_close_after=None if kind == AlertKind.ORDER else self.booking_timeout,
        )
        self._queue.append(alert)
        logger.info("Queued %s alert for notification %s (pending=%d)", kind, alert.alert_id, len(self._queue))
        if self._active is None:
            await self._show_next()
        else:
            self._publish()
        return alert

    async def _show_next(self) -> None:
        while self._active is None and self._queue:
            alert = self._queue.popleft()
            alert.state = AlertState.SHOWN
            alert.shown_at = datetime.now(timezone.utc)
            self._active = alert
            if alert.auto_close_after is not None:
                self._timers[alert.alert_id] = asyncio.create_task(self._auto_close(alert))
            self._publish()
            await self.sound.request(alert.alert_id, alert.kind)

    async def _auto_close(self, alert: Alert) -> None:
        await asyncio.sleep(alert.auto_close_after)
        if alert.state != AlertState.SHOWN:
            return
        self._finish(alert, AlertState.AUTO_CLOSED)
        await self.sound.stop(alert.alert_id)
        await self._show_next()

    def _take(self, alert_id: int, action: str) -> Alert:
        alert = self._active
        if alert is not None and alert.alert_id == alert_id:
            return alert
        for queued in self._queue:
            if queued.alert_id == alert_id:
                raise AlertStateError(alert_id, str(queued.state), action)
        for done in self._resolved:
            if done.alert_id == alert_id:
                raise AlertStateError(alert_id, str(done.state), action)
        raise NotFoundError("Alert", alert_id)

    def _finish(self, alert: Alert, state: AlertState) -> None:
        """Move the active alert to a terminal state and free the slot."""
        alert.state = state
        alert.resolved_at = datetime.now(timezone.utc)
        timer = self._timers.pop(alert.alert_id, None)
        if timer is not None and timer is not asyncio.current_task():
            timer.cancel()
        if self._active is alert:
            self._active = None
        self._resolved.append(alert)
        logger.info("Alert %s %s", alert.alert_id, state)
        self._publish()

    async def accept(self, alert_id: int) -> Alert:
        """Accept an order alert: the order moves to processing."""
        alert = self._take(alert_id, "accept")
        if alert.kind != AlertKind.ORDER:
            raise ConflictError(f"Alert {alert_id} is a {alert.kind} alert; only order alerts can be accepted")
        self._finish(alert, AlertState.ACCEPTED)
        try:
            await self.sound.stop(alert.alert_id)
            if await self._set_order_status(alert, OrderStatus.PROCESSING):
                self.toasts.show("Order Status Updated", f"Order #{alert.order_id} is now processing")
            await self._mark_read(alert)
        finally:
            await self._show_next()
        return alert

    async def dismiss(self, alert_id: int) -> Alert:
        """Dismiss the active alert. Order alerts put the order back to new."""
        alert = self._take(alert_id, "dismiss")
        self._finish(alert, AlertState.DISMISSED)
        try:
            await self.sound.stop(alert.alert_id)
            if alert.kind == AlertKind.ORDER:
                await self._set_order_status(alert, OrderStatus.NEW)
                await self._mark_read(alert)
        finally:
            await self._show_next()
        return alert

    async def _set_order_status(self, alert: Alert, status: OrderStatus) -> bool:
        order_id = alert.order_id
        if order_id is None:
            logger.warning("Order alert %s carries no orderId; status left unchanged", alert.alert_id)
            return False
        try:
            await self.client.update_order_status(order_id, status)
        except ApiRequestError as exc:
            self.toasts.error("Failed to Update Order Status", exc.message)
            return False
        return True

    async def _mark_read(self, alert: Alert) -> None:
        try:
            await self.client.mark_read(alert.alert_id)
        except ApiRequestError as exc:
            self.toasts.error("Failed to mark notification as read", exc.message)

    async def close(self) -> None:
        """Cancel pending auto-close timers."""
        timers = list(self._timers.values())
        self._timers.clear()
        for timer in timers:
            timer.cancel()
        await asyncio.gather(*timers, return_exceptions=True)
