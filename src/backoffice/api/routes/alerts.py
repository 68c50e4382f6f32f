"""Routes driving the staff alert overlay from a dashboard page."""

from fastapi import APIRouter
from pydantic import BaseModel

from backoffice.dependencies import Presenter, Sound, Toasts

router = APIRouter(tags=["Alerts"])


class SoundToggle(BaseModel):
    enabled: bool


def _sound_status(sound) -> dict:
    return {
        "enabled": sound.enabled,
        "awaitingGesture": sound.gate.armed,
        "banners": [b.to_dict() for b in sound.banners()],
    }


@router.get("/alerts")
async def get_alerts(presenter: Presenter, sound: Sound) -> dict:
    """Active alert, the queue behind it, and sound status."""
    snapshot = presenter.snapshot()
    active = snapshot["active"]
    if active is not None:
        state = sound.state_of(active["alertId"])
        active["soundState"] = str(state) if state else None
    snapshot["resolved"] = [a.to_dict() for a in presenter.resolved]
    snapshot["sound"] = _sound_status(sound)
    return snapshot


@router.post("/alerts/{alert_id}/accept")
async def accept_alert(alert_id: int, presenter: Presenter) -> dict:
    alert = await presenter.accept(alert_id)
    return alert.to_dict()


@router.post("/alerts/{alert_id}/dismiss")
async def dismiss_alert(alert_id: int, presenter: Presenter) -> dict:
    alert = await presenter.dismiss(alert_id)
    return alert.to_dict()


@router.post("/alerts/gesture")
async def report_gesture(sound: Sound) -> dict:
    """A page saw a click or key press; sounds waiting on one are retried."""
    started = await sound.on_gesture()
    return {"started": started}


@router.post("/alerts/{alert_id}/sound-banner")
async def click_sound_banner(alert_id: int, sound: Sound) -> dict:
    url = await sound.on_banner_click(alert_id)
    return {"played": url is not None, "url": url}


@router.post("/alerts/sound")
async def toggle_sound(body: SoundToggle, sound: Sound) -> dict:
    await sound.set_enabled(body.enabled)
    return _sound_status(sound)


@router.get("/toasts")
async def list_toasts(toasts: Toasts) -> list[dict]:
    return [t.to_wire() for t in reversed(toasts.recent())]
