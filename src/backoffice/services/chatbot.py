"""Assistant chat relay to an automation webhook with canned fallbacks."""

from __future__ import annotations

import logging
import re

import httpx
from pydantic import Field

from backoffice.models.common import CamelModel

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are the assistant for a restaurant back-office platform. Help owners "
    "and staff use the platform: calls, chats, reviews, bookings, orders and "
    "social media. Be concise, friendly and professional, and keep answers "
    "under 150 words unless more detail is requested."
)

_KEYWORD_REPLIES = [
    (("hello", "hi"), "Hello! I'm your restaurant assistant. How can I help with today's operations?"),
    (("help",), "I can explain features, help with bookings and answer questions about calls, chats and reviews. What would you like to know?"),
    (("feature",), "The platform answers calls, replies to chats, manages reviews and bookings, and shows everything on the dashboard. Which feature should I explain?"),
    (("booking",), "Bookings live in the Bookings section. New requests from calls or chats are added there automatically."),
    (("call",), "Incoming calls are answered automatically. Reservations and customer details from each call show up in the Calls section."),
    (("review",), "Customer reviews are answered automatically; you can read and manage them in the Reviews section."),
    (("dashboard",), "The dashboard summarises call volume, active chats, upcoming bookings and recent reviews."),
    (("notification",), "Notifications cover new bookings, orders, calls and reviews. Open them from the bell icon in the top bar."),
    (("n8n",), "n8n is the workflow automation platform behind most of the assistant's integrations."),
]

_DEFAULT_REPLY = (
    "I'm your restaurant management assistant. Ask me about bookings, orders, "
    "calls or reviews."
)

_UNAVAILABLE_REPLY = (
    "Sorry, I couldn't process your request at this time."
)


class ChatMessage(CamelModel):
    role: str
    content: str


class ChatRequest(CamelModel):
    message: str = Field(..., min_length=1)
    chat_history: list[ChatMessage] = Field(default_factory=list)


class ChatReply(CamelModel):
    content: str
    model: str


def fallback_reply(message: str) -> str:
    """Pick a canned answer by keyword."""
    text = message.lower()
    words = set(re.findall(r"[a-z0-9]+", text))
    for keywords, reply in _KEYWORD_REPLIES:
        for keyword in keywords:
            # Short greetings must be whole words ("hi" is inside "this")
            if (keyword in words) if len(keyword) <= 3 else (keyword in text):
                return reply
    return _DEFAULT_REPLY


class ChatbotRelay:
    """Forwards a conversation to the webhook; falls back on any failure."""

    def __init__(
        self,
        webhook_url: str = "",
        timeout: float = 10.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.webhook_url = webhook_url
        self.timeout = timeout
        self._client = client

    def _messages(self, request: ChatRequest) -> list[dict]:
        return [
            {"role": "system", "content": SYSTEM_PROMPT},
            *({"role": m.role, "content": m.content} for m in request.chat_history),
            {"role": "user", "content": request.message},
        ]

    async def _post(self, payload: dict) -> httpx.Response:
        if self._client is not None:
            return await self._client.post(self.webhook_url, json=payload, timeout=self.timeout)
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            return await client.post(self.webhook_url, json=payload)

    async def reply(self, request: ChatRequest) -> ChatReply:
        if not self.webhook_url:
            logger.info("Chatbot webhook not configured, using fallback replies")
            return ChatReply(content=fallback_reply(request.message), model="fallback")

        payload = {"messages": self._messages(request), "userQuery": request.message}
        try:
            resp = await self._post(payload)
            resp.raise_for_status()
            data = resp.json()
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning("Chatbot webhook failed: %s", exc)
            return ChatReply(content=fallback_reply(request.message), model="fallback_webhook_error")

        if not isinstance(data, dict):
            data = {}
        return ChatReply(
            content=data.get("response") or data.get("content") or _UNAVAILABLE_REPLY,
            model=data.get("model") or "n8n",
        )
