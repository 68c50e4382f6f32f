"""Toast messages shown to staff on the dashboard."""

from __future__ import annotations

import logging
from collections import deque
from datetime import datetime, timezone

from pydantic import Field

from backoffice.events.hub import EventHub
from backoffice.models.common import CamelModel
from backoffice.models.enums import ToastVariant

logger = logging.getLogger(__name__)


class Toast(CamelModel):
    title: str
    description: str = ""
    variant: ToastVariant = ToastVariant.DEFAULT
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class ToastCenter:
    """Keeps the most recent toasts and relays each one to connected pages."""

    def __init__(self, hub: EventHub | None = None, history: int = 50) -> None:
        self.hub = hub
        self._recent: deque[Toast] = deque(maxlen=history)

    def show(
        self,
        title: str,
        description: str = "",
        variant: ToastVariant = ToastVariant.DEFAULT,
    ) -> Toast:
        toast = Toast(title=title, description=description, variant=variant)
        self._recent.append(toast)
        if variant == ToastVariant.DESTRUCTIVE:
            logger.warning("Toast: %s - %s", title, description)
        else:
            logger.info("Toast: %s - %s", title, description)
        if self.hub is not None:
            self.hub.publish("toast", toast.to_wire())
        return toast

    def error(self, title: str, description: str = "") -> Toast:
        return self.show(title, description, ToastVariant.DESTRUCTIVE)

    def recent(self) -> list[Toast]:
        return list(self._recent)
