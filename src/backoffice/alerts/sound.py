"""Best-effort audio cues for staff alerts.

Browsers refuse to start audio until the page has seen a user gesture, so a
sound request moves through an explicit state machine:

* ``playing``     - the backend accepted the play command;
* ``retry_armed`` - playback was refused; the request waits on the single
  shared :class:`GestureGate` and is retried once on the next gesture;
* ``blocked``     - the asset could not be loaded or the retry failed; a
  :class:`SoundBanner` offers a click-to-play fallback that walks a list of
  candidate URLs.

Nothing here raises to the caller: an alert without sound is still an alert.
"""

from __future__ import annotations

import logging
import time
import uuid
from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path

from backoffice.events.hub import EventHub
from backoffice.models.enums import AlertKind, SoundState

logger = logging.getLogger(__name__)

_BANNER_TEXT = {
    AlertKind.ORDER: "New Order! Click to enable sound",
    AlertKind.BOOKING: "New Booking! Click to enable sound",
    AlertKind.FUNCTION_BOOKING: "New Function Booking! Click to enable sound",
    AlertKind.OTHER: "New Notification! Click to enable sound",
}

_ASSET_PREFIXES = ("/sounds/", "/api/sound/")


class PlaybackBlockedError(Exception):
    """Playback was refused until the user interacts with the page."""


class AssetLoadError(Exception):
    """The sound asset could not be loaded."""


class AudioBackend(ABC):
    """Something that can start and stop an audio cue."""

    @abstractmethod
    async def play(self, url: str, loop: bool = False) -> str:
        """Start playback and return a handle for :meth:`stop`."""

    @abstractmethod
    async def stop(self, handle: str) -> None:
        ...


class RelayAudioBackend(AudioBackend):
    """Relays play/stop commands to connected dashboard pages.

    With no page subscribed there is nobody to play the sound, which is
    treated like a browser refusing autoplay: the request waits for the next
    gesture (a page posting ``/api/alerts/gesture``).
    """

    def __init__(self, hub: EventHub, sounds_dir: str | Path) -> None:
        self.hub = hub
        self.sounds_dir = Path(sounds_dir)

    def _local_asset(self, url: str) -> Path | None:
        for prefix in _ASSET_PREFIXES:
            if url.startswith(prefix):
                return self.sounds_dir / Path(url[len(prefix):]).name
        return None

    async def play(self, url: str, loop: bool = False) -> str:
        asset = self._local_asset(url)
        if asset is not None and not asset.is_file():
            raise AssetLoadError(f"{url} not found in {self.sounds_dir}")
        if self.hub.subscriber_count == 0:
            raise PlaybackBlockedError("no dashboard page connected")
        handle = f"snd_{uuid.uuid4().hex[:16]}"
        self.hub.publish("playSound", {"handle": handle, "soundPath": url, "loop": loop})
        return handle

    async def stop(self, handle: str) -> None:
        self.hub.publish("stopSound", {"handle": handle})


class GestureGate:
    """One document-wide gesture listener shared by every waiting sound."""

    def __init__(self) -> None:
        self.armed = False

    def arm(self) -> bool:
        """Arm the listener. Returns True if it was not armed already."""
        newly_armed = not self.armed
        self.armed = True
        return newly_armed

    def fire(self) -> bool:
        """Consume a gesture. Returns True if the listener was armed."""
        was_armed = self.armed
        self.armed = False
        return was_armed


@dataclass
class SoundRequest:
    alert_id: int
    kind: AlertKind
    loop: bool
    state: SoundState | None = None
    handle: str | None = None
    # Single chimes that never start are forgotten after this instant
    expires_at: float | None = None


@dataclass
class SoundBanner:
    alert_id: int
    kind: AlertKind
    message: str
    candidates: list[str] = field(default_factory=list)
    expires_at: float = 0.0

    def to_dict(self) -> dict:
        return {
            "alertId": self.alert_id,
            "kind": str(self.kind),
            "message": self.message,
            "candidates": list(self.candidates),
        }


class SoundSubsystem:
    def __init__(
        self,
        backend: AudioBackend,
        sound_filename: str = "alarm_clock.mp3",
        app_origin: str = "",
        public_origin: str = "",
        banner_ttl: float = 30.0,
        enabled: bool = True,
        hub: EventHub | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.backend = backend
        self.sound_filename = sound_filename
        self.app_origin = app_origin.rstrip("/")
        self.public_origin = public_origin.rstrip("/")
        self.banner_ttl = banner_ttl
        self.enabled = enabled
        self.hub = hub
        self.gate = GestureGate()
        self._clock = clock
        self._requests: dict[int, SoundRequest] = {}
        self._banners: dict[int, SoundBanner] = {}

    @property
    def primary_url(self) -> str:
        return f"/sounds/{self.sound_filename}"

    def candidate_urls(self) -> list[str]:
        """Fallback sources, most local first."""
        name = self.sound_filename
        urls = [f"/api/sound/{name}", f"/sounds/{name}"]
        for origin in (self.app_origin, self.public_origin):
            if origin:
                urls += [f"{origin}/api/sound/{name}", f"{origin}/sounds/{name}"]
        return urls

    def state_of(self, alert_id: int) -> SoundState | None:
        request = self._requests.get(alert_id)
        return request.state if request else None

    def _prune(self) -> None:
        """Forget expired banners and single chimes that never got to play."""
        now = self._clock()
        for alert_id in [a for a, b in self._banners.items() if b.expires_at <= now]:
            del self._banners[alert_id]
        for alert_id in [
            a for a, r in self._requests.items() if r.expires_at is not None and r.expires_at <= now
        ]:
            del self._requests[alert_id]
            self._banners.pop(alert_id, None)

    def _current(self, request: SoundRequest) -> bool:
        return self._requests.get(request.alert_id) is request

    def banners(self) -> list[SoundBanner]:
        self._prune()
        return list(self._banners.values())

    async def request(self, alert_id: int, kind: AlertKind) -> SoundState | None:
        """Start the cue for an alert. Order alerts loop until stopped."""
        if not self.enabled:
            return None
        self._prune()
        if alert_id in self._requests:
            return self._requests[alert_id].state

        loop = kind == AlertKind.ORDER
        request = SoundRequest(
            alert_id=alert_id,
            kind=kind,
            loop=loop,
            expires_at=None if loop else self._clock() + self.banner_ttl,
        )
        self._requests[alert_id] = request
        try:
            handle = await self.backend.play(self.primary_url, loop=request.loop)
        except PlaybackBlockedError as exc:
            if not self._current(request):
                return None
            request.state = SoundState.RETRY_ARMED
            if self.gate.arm():
                logger.info("Sound blocked (%s); waiting for a user gesture", exc)
            return request.state
        except AssetLoadError as exc:
            if not self._current(request):
                return None
            logger.warning("Alert sound unavailable for alert %s: %s", alert_id, exc)
            self._block(request)
            return request.state
        except Exception:
            if not self._current(request):
                return None
            logger.exception("Error starting sound for alert %s", alert_id)
            self._block(request)
            return request.state

        if not self._current(request):
            # Stopped while the play command was in flight
            await self._release(alert_id, handle)
            return None
        request.handle = handle
        return self._started(request)

    def _started(self, request: SoundRequest) -> SoundState:
        request.state = SoundState.PLAYING
        self._banners.pop(request.alert_id, None)
        if not request.loop:
            # A single chime ends by itself
            self._requests.pop(request.alert_id, None)
        return request.state

    def _block(self, request: SoundRequest) -> None:
        request.state = SoundState.BLOCKED
        banner = SoundBanner(
            alert_id=request.alert_id,
            kind=request.kind,
            message=_BANNER_TEXT[request.kind],
            candidates=self.candidate_urls(),
            expires_at=self._clock() + self.banner_ttl,
        )
        self._banners[request.alert_id] = banner
        if not request.loop:
            request.expires_at = banner.expires_at
        if self.hub is not None:
            self.hub.publish("soundBanner", banner.to_dict())

    async def _play_registered(self, request: SoundRequest, url: str) -> None:
        handle = await self.backend.play(url, loop=request.loop)
        if not self._current(request):
            # Resolved while the play command was in flight
            await self.backend.stop(handle)
            return
        request.handle = handle
        self._started(request)

    async def on_gesture(self) -> int:
        """Retry every sound waiting on a gesture. Returns how many started."""
        self._prune()
        if not self.gate.fire():
            return 0
        waiting = [r for r in self._requests.values() if r.state == SoundState.RETRY_ARMED]
        started = 0
        for request in waiting:
            try:
                await self._play_registered(request, self.primary_url)
            except Exception as exc:
                logger.warning("Sound for alert %s failed even after interaction: %s", request.alert_id, exc)
                if self._current(request):
                    self._block(request)
                continue
            if request.state == SoundState.PLAYING:
                started += 1
        return started

    async def on_banner_click(self, alert_id: int) -> str | None:
        """Try each candidate URL in turn. Returns the one that played."""
        banner = next((b for b in self.banners() if b.alert_id == alert_id), None)
        request = self._requests.get(alert_id)
        if banner is None or request is None:
            return None

        for url in banner.candidates:
            try:
                await self._play_registered(request, url)
            except Exception as exc:
                logger.info("Error playing alert sound from %s: %s", url, exc)
                continue
            logger.info("Playing alert sound from %s", url)
            return url

        logger.error("All sound sources failed for alert %s", alert_id)
        if not request.loop and self._current(request):
            self._requests.pop(alert_id, None)
            self._banners.pop(alert_id, None)
        return None

    async def stop(self, alert_id: int) -> None:
        request = self._requests.pop(alert_id, None)
        self._banners.pop(alert_id, None)
        if request is None or request.handle is None:
            return
        await self._release(alert_id, request.handle)

    async def _release(self, alert_id: int, handle: str) -> None:
        try:
            await self.backend.stop(handle)
        except Exception as exc:
            logger.warning("Error stopping sound for alert %s: %s", alert_id, exc)

    async def set_enabled(self, enabled: bool) -> None:
        self.enabled = enabled
        if not enabled:
            for alert_id in list(self._requests):
                await self.stop(alert_id)
