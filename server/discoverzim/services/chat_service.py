"""Travel assistant chat: persisted conversations relayed to a generative language API."""

import logging
from datetime import datetime
from typing import Optional
from uuid import UUID

import httpx
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from ..core.config import settings
from ..core.exceptions import NotFoundError
from ..core.observability import metrics_collector
from ..models.chat import ChatConversation, ChatMessage

logger = logging.getLogger(__name__)

FALLBACK_REPLY = "I'm sorry, I'm currently experiencing connectivity issues. Please try again later."

SYSTEM_PROMPT = (
    "You are Kombirai, a helpful AI travel assistant specializing in Zimbabwe tourism. "
    "Provide accurate, concise, and helpful information about Zimbabwe's attractions, accommodations, "
    "travel tips, events, wildlife, and culture. Use a friendly, professional tone. "
    "If you don't know something specific about Zimbabwe, acknowledge it and provide general travel advice. "
    "Include local terminology when appropriate to enhance authenticity."
)

TITLE_LENGTH = 60


class ChatUpstreamError(Exception):
    """The language API was unreachable or returned no usable answer."""


class ChatAssistantClient:
    """Thin async client for the generateContent endpoint."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key if api_key is not None else settings.chat_api_key
        self.url = url or settings.chat_api_url
        self.timeout = timeout or settings.chat_timeout_seconds
        self.transport = transport

    @staticmethod
    def build_payload(history: list[dict]) -> dict:
        """System prompt first, then the conversation with assistant turns as 'model'."""
        contents = [{"role": "model", "parts": [{"text": SYSTEM_PROMPT}]}]
        for message in history:
            contents.append({
                "role": "user" if message["role"] == "user" else "model",
                "parts": [{"text": message["content"]}],
            })
        return {
            "contents": contents,
            "generationConfig": {"temperature": 0.7, "maxOutputTokens": 500},
        }

    async def reply(self, history: list[dict]) -> str:
        """
        Ask the assistant for the next turn.

        Raises:
            ChatUpstreamError: If no key is configured or the call fails
        """
        if not self.api_key:
            raise ChatUpstreamError("chat API key is not configured")

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.post(
                    self.url,
                    json=self.build_payload(history),
                    headers={"x-goog-api-key": self.api_key},
                )
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            raise ChatUpstreamError(f"chat request failed: {e}") from e

        if response.status_code >= 400 or data.get("error"):
            error = data.get("error") or {}
            raise ChatUpstreamError(error.get("message") or f"upstream status {response.status_code}")

        try:
            text = data["candidates"][0]["content"]["parts"][0]["text"]
        except (KeyError, IndexError, TypeError):
            text = None
        if not text:
            raise ChatUpstreamError("no valid response from the language API")
        return text


class ChatService:
    """Service for assistant conversations."""

    def __init__(self, db: AsyncSession, client: Optional[ChatAssistantClient] = None):
        self.db = db
        self.client = client or ChatAssistantClient()

    async def list_conversations(self, user_id: str) -> list[ChatConversation]:
        """Most recently active first."""
        stmt = (
            select(ChatConversation)
            .where(ChatConversation.user_id == user_id)
            .order_by(ChatConversation.updated_at.desc())
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def get_conversation(self, user_id: str, conversation_id: UUID) -> ChatConversation:
        """
        Raises:
            NotFoundError: If the conversation does not exist or belongs to someone else
        """
        stmt = (
            select(ChatConversation)
            .where(ChatConversation.id == conversation_id, ChatConversation.user_id == user_id)
            .options(selectinload(ChatConversation.messages))
            .execution_options(populate_existing=True)
        )
        conversation = (await self.db.execute(stmt)).scalar_one_or_none()
        if not conversation:
            raise NotFoundError(resource_type="chat_conversation", resource_id=str(conversation_id))
        return conversation

    async def delete_conversation(self, user_id: str, conversation_id: UUID) -> None:
        conversation = await self.get_conversation(user_id, conversation_id)
        await self.db.delete(conversation)
        await self.db.commit()

    async def send_message(
        self, user_id: str, content: str, conversation_id: Optional[UUID] = None
    ) -> tuple[ChatConversation, ChatMessage, ChatMessage]:
        """
        Store the user's message, ask the assistant and store its reply.

        Upstream failures are answered with a fixed apology and never raised.
        """
        if conversation_id is not None:
            conversation = await self.get_conversation(user_id, conversation_id)
        else:
            conversation = ChatConversation(user_id=user_id, title=content.strip()[:TITLE_LENGTH], messages=[])
            self.db.add(conversation)
            await self.db.flush()

        history = [{"role": m.role, "content": m.content} for m in conversation.messages]
        history.append({"role": "user", "content": content})

        message = ChatMessage(conversation_id=conversation.id, role="user", content=content)
        self.db.add(message)
        await self.db.commit()

        try:
            reply_text = await self.client.reply(history)
            source = "assistant"
        except ChatUpstreamError as e:
            logger.warning(
                f"Chat assistant unavailable: {str(e)}",
                extra={"conversation_id": str(conversation.id)}
            )
            reply_text = FALLBACK_REPLY
            source = "fallback"
        metrics_collector.record_chat_reply(source)

        reply = ChatMessage(conversation_id=conversation.id, role="assistant", content=reply_text)
        self.db.add(reply)
        conversation.updated_at = datetime.utcnow()
        await self.db.commit()
        await self.db.refresh(message)
        await self.db.refresh(reply)

        logger.info(
            "Chat message answered",
            extra={"conversation_id": str(conversation.id), "user_id": user_id, "source": source}
        )
        return conversation, message, reply
