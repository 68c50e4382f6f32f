"""Shared test fixtures."""

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from backoffice.alerts.ledger import Deduplicator, InMemorySeenIdStore
from backoffice.alerts.pipeline import AlertPipeline, build_pipeline
from backoffice.alerts.presenter import AlertPresenter
from backoffice.alerts.sound import AssetLoadError, AudioBackend, PlaybackBlockedError, SoundSubsystem
from backoffice.alerts.toasts import ToastCenter
from backoffice.config import settings
from backoffice.db.base import Base
# Import all models to register with Base.metadata
import backoffice.db.models  # noqa: F401
from backoffice.errors.exceptions import ApiRequestError
from backoffice.events.hub import EventHub
from backoffice.services.chatbot import ChatbotRelay


class FakeAudioBackend(AudioBackend):
    """Records play/stop calls. ``mode`` is one of ok, blocked, missing."""

    def __init__(self):
        self.mode = "ok"
        self.failing_urls: set[str] = set()
        self.played: list[tuple[str, bool, str]] = []
        self.stopped: list[str] = []

    async def play(self, url: str, loop: bool = False) -> str:
        if self.mode == "blocked":
            raise PlaybackBlockedError("autoplay refused")
        if self.mode == "missing" or url in self.failing_urls:
            raise AssetLoadError(f"cannot load {url}")
        handle = f"h{len(self.played) + 1}"
        self.played.append((url, loop, handle))
        return handle

    async def stop(self, handle: str) -> None:
        self.stopped.append(handle)


class FakeDashboardClient:
    """Stands in for DashboardClient; records every mutation."""

    def __init__(self):
        self.status_updates: list[tuple[int, str]] = []
        self.marked_read: list[int] = []
        self.unread = []
        self.fail_status = False
        self.fail_unread = False
        self.closed = False

    async def list_unread(self, user_id=None):
        if self.fail_unread:
            raise ApiRequestError("GET", "/notifications/unread", "connection refused")
        return list(self.unread)

    async def list_notifications(self, user_id=None):
        return list(self.unread)

    async def list_orders(self):
        return []

    async def update_order_status(self, order_id, status):
        if self.fail_status:
            raise ApiRequestError("PATCH", f"/orders/{order_id}", "HTTP 500", 500)
        self.status_updates.append((order_id, str(status)))

    async def mark_read(self, notification_id):
        self.marked_read.append(notification_id)

    async def aclose(self):
        self.closed = True


@pytest.fixture
def hub():
    return EventHub()


@pytest.fixture
def audio():
    return FakeAudioBackend()


@pytest.fixture
def dashboard():
    return FakeDashboardClient()


@pytest.fixture
def toasts(hub):
    return ToastCenter(hub)


@pytest.fixture
def sound(audio, hub):
    return SoundSubsystem(
        audio,
        sound_filename="alarm_clock.mp3",
        app_origin="http://app.test",
        public_origin="https://public.test",
        hub=hub,
    )


@pytest.fixture
async def presenter(dashboard, sound, toasts, hub):
    _presenter = AlertPresenter(dashboard, sound, toasts, booking_timeout=0.05, hub=hub)
    yield _presenter
    await _presenter.close()


@pytest.fixture
async def pipeline(dashboard, presenter):
    _pipeline = AlertPipeline(dashboard, Deduplicator(InMemorySeenIdStore()), presenter)
    yield _pipeline
    await _pipeline.fetcher.stop()


@pytest.fixture
async def db_engine():
    """Create an in-memory SQLite async engine for testing."""
    engine = create_async_engine("sqlite+aiosqlite:///", echo=False)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
async def db_session(db_engine):
    """Create a test database session."""
    session_factory = async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)
    async with session_factory() as session:
        yield session


@pytest.fixture
async def app(db_engine, hub, dashboard, audio):
    """Create a test application instance with in-memory DB and fake collaborators."""
    from backoffice.main import create_app

    _app = create_app()
    session_factory = async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)
    _app.state.db_engine = db_engine
    _app.state.db_session_factory = session_factory
    _app.state.hub = hub
    _app.state.pipeline = build_pipeline(
        settings, hub, client=dashboard, store=InMemorySeenIdStore(), backend=audio
    )
    _app.state.chatbot = ChatbotRelay("")
    yield _app
    await _app.state.pipeline.presenter.close()


@pytest.fixture
async def client(app):
    """Async HTTP test client."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
