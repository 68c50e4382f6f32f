"""Tests for the assistant chat relay."""

import json

import httpx
import pytest

from backoffice.services.chatbot import ChatbotRelay, ChatRequest, fallback_reply


def _relay(handler) -> ChatbotRelay:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return ChatbotRelay("http://hooks.test/chat", timeout=10.0, client=client)


@pytest.mark.parametrize(
    "message, fragment",
    [
        ("Hi there", "How can I help"),
        ("I need help", "explain features"),
        ("How do bookings work?", "Bookings section"),
        ("this is odd", "restaurant management assistant"),
    ],
)
def test_fallback_keywords(message, fragment):
    assert fragment in fallback_reply(message)


@pytest.mark.asyncio
async def test_without_webhook_uses_fallback():
    reply = await ChatbotRelay("").reply(ChatRequest(message="hello"))
    assert reply.model == "fallback"
    assert "How can I help" in reply.content


@pytest.mark.asyncio
async def test_forwards_history_to_webhook():
    seen = {}

    def handler(request):
        seen.update(json.loads(request.content))
        return httpx.Response(200, json={"response": "Open until 11pm", "model": "gpt"})

    request = ChatRequest.model_validate({
        "message": "When do you close?",
        "chatHistory": [{"role": "assistant", "content": "Hello!"}],
    })
    reply = await _relay(handler).reply(request)

    assert reply.content == "Open until 11pm"
    assert reply.model == "gpt"
    assert seen["userQuery"] == "When do you close?"
    assert [m["role"] for m in seen["messages"]] == ["system", "assistant", "user"]


@pytest.mark.asyncio
async def test_timeout_falls_back():
    def handler(request):
        raise httpx.ReadTimeout("timed out", request=request)

    reply = await _relay(handler).reply(ChatRequest(message="booking question"))
    assert reply.model == "fallback_webhook_error"
    assert "Bookings section" in reply.content


@pytest.mark.asyncio
async def test_webhook_error_status_falls_back():
    reply = await _relay(lambda request: httpx.Response(503)).reply(ChatRequest(message="hi"))
    assert reply.model == "fallback_webhook_error"


@pytest.mark.asyncio
async def test_empty_webhook_answer():
    reply = await _relay(lambda request: httpx.Response(200, json={})).reply(ChatRequest(message="hi"))
    assert reply.content == "Sorry, I couldn't process your request at this time."
    assert reply.model == "n8n"


@pytest.mark.asyncio
async def test_chatbot_route(client):
    response = await client.post("/api/chatbot", json={"message": "tell me about the dashboard"})
    assert response.status_code == 200
    assert response.json()["model"] == "fallback"


@pytest.mark.asyncio
async def test_chatbot_route_requires_message(client):
    response = await client.post("/api/chatbot", json={"message": ""})
    assert response.status_code == 422
