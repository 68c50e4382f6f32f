"""Wiring of fetcher, deduplicator, presenter and sound into one pipeline."""

from __future__ import annotations

import logging

from backoffice.alerts.client import DashboardClient
from backoffice.alerts.fetcher import NotificationFetcher
from backoffice.alerts.ledger import Deduplicator, JsonFileSeenIdStore, SeenIdStore
from backoffice.alerts.presenter import AlertPresenter
from backoffice.alerts.sound import AudioBackend, RelayAudioBackend, SoundSubsystem
from backoffice.alerts.toasts import ToastCenter
from backoffice.config import Settings
from backoffice.events.hub import EventHub
from backoffice.models.notification import Notification

logger = logging.getLogger(__name__)


class AlertPipeline:
    def __init__(
        self,
        client: DashboardClient,
        dedup: Deduplicator,
        presenter: AlertPresenter,
        unread_interval: float = 8.0,
        notifications_interval: float = 15.0,
        orders_interval: float = 30.0,
    ) -> None:
        self.client = client
        self.dedup = dedup
        self.presenter = presenter
        self.fetcher = NotificationFetcher(
            client,
            self.handle_unread,
            unread_interval=unread_interval,
            notifications_interval=notifications_interval,
            orders_interval=orders_interval,
        )

    @property
    def sound(self) -> SoundSubsystem:
        return self.presenter.sound

    @property
    def toasts(self) -> ToastCenter:
        return self.presenter.toasts

    async def handle_unread(self, notifications: list[Notification]) -> list[int]:
        """Alert on every unread notification not seen before, oldest first."""
        fired = []
        for notification in sorted(notifications, key=lambda n: n.id):
            if not self.dedup.should_alert(notification):
                continue
            logger.info("New notification %s (%s)", notification.id, notification.type)
            await self.presenter.present(notification)
            fired.append(notification.id)
        return fired

    def start(self) -> None:
        self.fetcher.start()

    async def stop(self) -> None:
        await self.fetcher.stop()
        await self.presenter.close()
        await self.client.aclose()


def build_pipeline(
    config: Settings,
    hub: EventHub,
    client: DashboardClient | None = None,
    store: SeenIdStore | None = None,
    backend: AudioBackend | None = None,
) -> AlertPipeline:
    """Assemble the pipeline from settings; collaborators may be injected."""
    toasts = ToastCenter(hub)
    sound = SoundSubsystem(
        backend or RelayAudioBackend(hub, config.sounds_dir),
        sound_filename=config.sound_filename,
        app_origin=config.app_origin,
        public_origin=config.public_origin,
        banner_ttl=config.sound_banner_ttl,
        hub=hub,
    )
    client = client or DashboardClient(config.api_base_url)
    presenter = AlertPresenter(
        client,
        sound,
        toasts,
        booking_timeout=config.booking_alert_timeout,
        hub=hub,
    )
    dedup = Deduplicator(
        store or JsonFileSeenIdStore(config.seen_ids_path),
        max_entries=config.seen_ids_max,
        retain=config.seen_ids_retain,
    )
    return AlertPipeline(
        client,
        dedup,
        presenter,
        unread_interval=config.poll_unread_seconds,
        notifications_interval=config.poll_notifications_seconds,
        orders_interval=config.poll_orders_seconds,
    )
