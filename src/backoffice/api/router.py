"""Master API router mounted at /api."""

from fastapi import APIRouter
from backoffice.api.routes import (
    alerts,
    bookings,
    chatbot,
    health,
    notifications,
    orders,
    sounds,
    stream,
)

api_router = APIRouter(prefix="/api")
api_router.include_router(health.router, tags=["Health"])
api_router.include_router(notifications.router)
api_router.include_router(orders.router)
api_router.include_router(bookings.router)
api_router.include_router(sounds.router)
api_router.include_router(alerts.router)
api_router.include_router(stream.router)
api_router.include_router(chatbot.router)
