"""Chat assistant Pydantic schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field


class SendMessageRequest(BaseModel):
    """Request schema for sending a message to the travel assistant."""

    conversation_id: UUID | None = Field(None, description="Existing conversation; a new one is started when omitted")
    content: str = Field(..., min_length=1, max_length=4000, description="Message text")


class GetConversationRequest(BaseModel):
    """Request schema for addressing one conversation."""

    conversation_id: UUID


class ChatMessage(BaseModel):
    """Chat message response schema."""

    id: UUID
    conversation_id: UUID
    role: str
    content: str
    created_at: datetime

    class Config:
        from_attributes = True


class ChatConversation(BaseModel):
    """Conversation response schema."""

    id: UUID
    title: str | None = None
    created_at: datetime
    updated_at: datetime
    messages: list[ChatMessage] = Field(default_factory=list)

    class Config:
        from_attributes = True


class ChatConversationList(BaseModel):
    """Response schema for a user's conversations, without messages."""

    items: list[ChatConversation]


class ChatReply(BaseModel):
    """The stored user message and the assistant's reply."""

    conversation_id: UUID
    message: ChatMessage
    reply: ChatMessage
