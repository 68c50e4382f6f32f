"""Assistant chat endpoint."""

from fastapi import APIRouter

from backoffice.dependencies import Chatbot
from backoffice.services.chatbot import ChatRequest

router = APIRouter(tags=["Chatbot"])


@router.post("/chatbot")
async def chatbot(body: ChatRequest, relay: Chatbot) -> dict:
    reply = await relay.reply(body)
    return reply.to_wire()
