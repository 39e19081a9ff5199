"""Unit tests for the travel assistant."""

import json

import httpx
import pytest

from discoverzim.core.exceptions import NotFoundError
from discoverzim.services.chat_service import (
    FALLBACK_REPLY,
    SYSTEM_PROMPT,
    ChatAssistantClient,
    ChatService,
    ChatUpstreamError,
)

from conftest import ASSISTANT_TEXT, OTHER_USER_ID, USER_ID, assistant_handler


def client_with(handler, api_key="test-key"):
    return ChatAssistantClient(api_key=api_key, url="https://llm.example/generate", transport=httpx.MockTransport(handler))


def test_payload_starts_with_system_prompt():
    payload = ChatAssistantClient.build_payload([
        {"role": "user", "content": "Hi"},
        {"role": "assistant", "content": "Mhoro!"},
    ])

    assert payload["contents"][0] == {"role": "model", "parts": [{"text": SYSTEM_PROMPT}]}
    assert [c["role"] for c in payload["contents"][1:]] == ["user", "model"]
    assert payload["generationConfig"] == {"temperature": 0.7, "maxOutputTokens": 500}


@pytest.mark.asyncio
async def test_reply_sends_key_and_parses_text():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["key"] = request.headers.get("x-goog-api-key")
        seen["body"] = json.loads(request.content)
        return assistant_handler(request)

    text = await client_with(handler).reply([{"role": "user", "content": "When should I visit Hwange?"}])

    assert text == ASSISTANT_TEXT
    assert seen["key"] == "test-key"
    assert seen["body"]["contents"][-1]["parts"][0]["text"] == "When should I visit Hwange?"


@pytest.mark.asyncio
@pytest.mark.parametrize("response", [
    httpx.Response(500, json={"error": {"message": "boom"}}),
    httpx.Response(200, json={"error": {"message": "quota exceeded"}}),
    httpx.Response(200, json={"candidates": []}),
])
async def test_reply_upstream_failures(response):
    with pytest.raises(ChatUpstreamError):
        await client_with(lambda request: response).reply([{"role": "user", "content": "Hi"}])


@pytest.mark.asyncio
async def test_reply_without_api_key():
    with pytest.raises(ChatUpstreamError):
        await client_with(assistant_handler, api_key="").reply([{"role": "user", "content": "Hi"}])


@pytest.mark.asyncio
async def test_send_message_starts_conversation(test_session):
    service = ChatService(test_session, client_with(assistant_handler))

    conversation, message, reply = await service.send_message(USER_ID, "Best time for Victoria Falls?")

    assert conversation.title == "Best time for Victoria Falls?"
    assert message.role == "user"
    assert reply.role == "assistant"
    assert reply.content == ASSISTANT_TEXT

    loaded = await service.get_conversation(USER_ID, conversation.id)
    assert [m.role for m in loaded.messages] == ["user", "assistant"]


@pytest.mark.asyncio
async def test_send_message_includes_history(test_session):
    bodies = []

    def handler(request):
        bodies.append(json.loads(request.content))
        return assistant_handler(request)

    service = ChatService(test_session, client_with(handler))
    conversation, _, _ = await service.send_message(USER_ID, "Hello")
    await service.send_message(USER_ID, "And Hwange?", conversation.id)

    # system prompt + user + assistant + new user
    assert len(bodies[1]["contents"]) == 4


@pytest.mark.asyncio
async def test_upstream_failure_answers_with_fallback(test_session):
    service = ChatService(test_session, client_with(lambda request: httpx.Response(503)))

    _, _, reply = await service.send_message(USER_ID, "Hello")

    assert reply.content == FALLBACK_REPLY


@pytest.mark.asyncio
async def test_conversations_are_private(test_session):
    service = ChatService(test_session, client_with(assistant_handler))
    conversation, _, _ = await service.send_message(USER_ID, "Hello")

    with pytest.raises(NotFoundError):
        await service.get_conversation(OTHER_USER_ID, conversation.id)
    with pytest.raises(NotFoundError):
        await service.send_message(OTHER_USER_ID, "Hijack", conversation.id)

    assert await service.list_conversations(OTHER_USER_ID) == []

    await service.delete_conversation(USER_ID, conversation.id)
    assert await service.list_conversations(USER_ID) == []
