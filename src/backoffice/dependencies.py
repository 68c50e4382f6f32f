"""FastAPI dependency injection providers."""

from collections.abc import AsyncGenerator
from typing import Annotated

from fastapi import Depends, Request

from backoffice.alerts.pipeline import AlertPipeline
from backoffice.alerts.presenter import AlertPresenter
from backoffice.alerts.sound import SoundSubsystem
from backoffice.alerts.toasts import ToastCenter
from backoffice.events.hub import EventHub
from backoffice.services.chatbot import ChatbotRelay


async def get_db(request: Request) -> AsyncGenerator:
    """Yield a database session from the app's session factory."""
    session_factory = request.app.state.db_session_factory
    async with session_factory() as session:
        yield session


def get_trace_id(request: Request) -> str:
    """Extract trace_id from request state (set by middleware)."""
    return getattr(request.state, "trace_id", "trc_unknown")


def get_hub(request: Request) -> EventHub:
    return request.app.state.hub


def get_pipeline(request: Request) -> AlertPipeline:
    return request.app.state.pipeline


def get_presenter(request: Request) -> AlertPresenter:
    return request.app.state.pipeline.presenter


def get_sound(request: Request) -> SoundSubsystem:
    return request.app.state.pipeline.sound


def get_toasts(request: Request) -> ToastCenter:
    return request.app.state.pipeline.toasts


def get_chatbot(request: Request) -> ChatbotRelay:
    return request.app.state.chatbot


# Type aliases for dependency injection
DBSession = Annotated[object, Depends(get_db)]
TraceId = Annotated[str, Depends(get_trace_id)]
Hub = Annotated[EventHub, Depends(get_hub)]
Presenter = Annotated[AlertPresenter, Depends(get_presenter)]
Sound = Annotated[SoundSubsystem, Depends(get_sound)]
Toasts = Annotated[ToastCenter, Depends(get_toasts)]
Chatbot = Annotated[ChatbotRelay, Depends(get_chatbot)]
