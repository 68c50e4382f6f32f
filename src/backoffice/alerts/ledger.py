"""Seen-notification ledger and the once-per-ID alert decision."""

from __future__ import annotations

import json
import logging
import os
from abc import ABC, abstractmethod
from pathlib import Path

from backoffice.models.notification import Notification

logger = logging.getLogger(__name__)

DEFAULT_MAX_ENTRIES = 500
DEFAULT_RETAIN = 300


class SeenIdStore(ABC):
    """Persisted, insertion-ordered set of notification IDs that already alerted."""

    @abstractmethod
    def _read(self) -> list[int]:
        ...

    @abstractmethod
    def _write(self, ids: list[int]) -> None:
        ...

    def get(self) -> list[int]:
        return self._read()

    def add(self, notification_id: int) -> None:
        ids = self._read()
        if notification_id not in ids:
            ids.append(notification_id)
            self._write(ids)

    def trim(self, max_entries: int = DEFAULT_MAX_ENTRIES, retain: int = DEFAULT_RETAIN) -> int:
        """Keep only the newest ``retain`` IDs once there are more than ``max_entries``.

        Returns the number of IDs dropped.
        """
        ids = self._read()
        if len(ids) <= max_entries:
            return 0
        self._write(ids[-retain:])
        return len(ids) - retain


class InMemorySeenIdStore(SeenIdStore):
    def __init__(self, ids: list[int] | None = None) -> None:
        self._ids = list(ids or [])

    def _read(self) -> list[int]:
        return list(self._ids)

    def _write(self, ids: list[int]) -> None:
        self._ids = list(ids)


class JsonFileSeenIdStore(SeenIdStore):
    """Ledger persisted as a JSON array in a single file.

    Unreadable or malformed content reads as an empty ledger, so a damaged
    file can at worst make each notification alert once more.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def _read(self) -> list[int]:
        if not self.path.exists():
            return []
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            logger.warning("Seen-ID ledger %s unreadable, starting empty: %s", self.path, exc)
            return []
        if not isinstance(data, list) or not all(
            isinstance(i, int) and not isinstance(i, bool) for i in data
        ):
            logger.warning("Seen-ID ledger %s is not a list of integers, starting empty", self.path)
            return []
        return data

    def _write(self, ids: list[int]) -> None:
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp.write_text(json.dumps(ids), encoding="utf-8")
            os.replace(tmp, self.path)
        except OSError as exc:
            logger.warning("Could not persist seen-ID ledger %s: %s", self.path, exc)


class Deduplicator:
    """Decides exactly once per notification ID whether to raise an alert."""

    def __init__(
        self,
        store: SeenIdStore,
        max_entries: int = DEFAULT_MAX_ENTRIES,
        retain: int = DEFAULT_RETAIN,
    ) -> None:
        if retain > max_entries:
            raise ValueError("retain must not exceed max_entries")
        self.store = store
        self.max_entries = max_entries
        self.retain = retain
        self._ids = store.get()
        self._seen = set(self._ids)

    def __len__(self) -> int:
        return len(self._ids)

    def __contains__(self, notification_id: int) -> bool:
        return notification_id in self._seen

    def should_alert(self, notification: Notification) -> bool:
        """Return True the first time an ID is offered, recording it first."""
        notification_id = notification.id
        if notification_id in self._seen:
            return False

        self.store.add(notification_id)
        self._ids.append(notification_id)
        self._seen.add(notification_id)

        if len(self._ids) > self.max_entries:
            self._ids = self._ids[-self.retain:]
            self._seen = set(self._ids)
            dropped = self.store.trim(self.max_entries, self.retain)
            logger.debug("Trimmed seen-ID ledger (dropped=%d)", dropped)
        return True
