"""FastAPI application factory and lifespan management."""

import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from backoffice import __version__
from backoffice.alerts.pipeline import build_pipeline
from backoffice.config import settings
from backoffice.db.engine import create_db_engine, create_session_factory
from backoffice.events.hub import EventHub
from backoffice.logging_config import configure_logging
from backoffice.services.chatbot import ChatbotRelay

# Configure logging at import time
_json_logs = os.environ.get("BACKOFFICE_LOCAL", "0") != "1"
configure_logging(log_level=settings.log_level, json_output=_json_logs)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application startup and shutdown resources."""
    db_url = settings.effective_database_url
    engine = create_db_engine(db_url)

    # Auto-create tables for SQLite (local dev, no migrations)
    if "sqlite" in db_url:
        from backoffice.db.base import Base
        import backoffice.db.models  # noqa: F401 register all ORM models

        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("SQLite tables created (local mode)")

    app.state.db_engine = engine
    app.state.db_session_factory = create_session_factory(engine)

    hub = EventHub()
    pipeline = build_pipeline(settings, hub)
    app.state.hub = hub
    app.state.pipeline = pipeline
    app.state.chatbot = ChatbotRelay(settings.chatbot_webhook_url, settings.chatbot_timeout)

    if settings.alerts_enabled:
        pipeline.start()
    else:
        logger.info("Alert pipeline disabled")

    logger.info("Back-office API started (db=%s)", "sqlite" if "sqlite" in db_url else "postgresql")
    yield

    # Shutdown
    await pipeline.stop()
    await engine.dispose()
    logger.info("Back-office API shutdown complete")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="Restaurant Back-Office API",
        version=__version__,
        description="Notifications, orders and bookings with live staff alerts.",
        lifespan=lifespan,
    )

    # CORS middleware for the dashboard frontend
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    from backoffice.api.middleware.trace_id import TraceIdMiddleware
    app.add_middleware(TraceIdMiddleware)

    # Register error handlers
    from backoffice.errors.handlers import register_exception_handlers
    register_exception_handlers(app)

    # Import and mount routers
    from backoffice.api.router import api_router
    from backoffice.api.routes.sounds import public_router
    app.include_router(api_router)
    app.include_router(public_router)

    return app


app = create_app()
