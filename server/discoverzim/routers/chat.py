"""Travel assistant chat router."""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.database import get_db
from ..core.dependencies import get_current_profile
from ..models.profile import Profile
from ..schemas.chat import (
    ChatConversation,
    ChatConversationList,
    ChatMessage,
    ChatReply,
    GetConversationRequest,
    SendMessageRequest,
)
from ..schemas.common import DeletedResponse
from ..services.chat_service import ChatAssistantClient, ChatService
from .responses import ok

router = APIRouter(prefix="/v1/chat", tags=["chat"])

DB_DEPENDENCY = Depends(get_db)
PROFILE_DEPENDENCY = Depends(get_current_profile)


def get_chat_client() -> ChatAssistantClient:
    """Upstream client; overridden in tests."""
    return ChatAssistantClient()


CHAT_CLIENT_DEPENDENCY = Depends(get_chat_client)


@router.post("/send", response_model=ChatReply)
async def send_message(
    request: SendMessageRequest,
    db: AsyncSession = DB_DEPENDENCY,
    profile: Profile = PROFILE_DEPENDENCY,
    client: ChatAssistantClient = CHAT_CLIENT_DEPENDENCY,
) -> JSONResponse:
    """
    Send a message to the assistant.

    Starts a new conversation when no conversation_id is given. When the
    assistant is unavailable the reply is a fixed apology.
    """
    conversation, message, reply = await ChatService(db, client).send_message(
        profile.id, request.content, request.conversation_id
    )
    return ok(ChatReply(
        conversation_id=conversation.id,
        message=ChatMessage.model_validate(message),
        reply=ChatMessage.model_validate(reply),
    ))


@router.post("/conversations", response_model=ChatConversationList)
async def list_conversations(
    db: AsyncSession = DB_DEPENDENCY,
    profile: Profile = PROFILE_DEPENDENCY,
) -> JSONResponse:
    conversations = await ChatService(db).list_conversations(profile.id)
    return ok(ChatConversationList(items=[
        ChatConversation(
            id=c.id, title=c.title, created_at=c.created_at, updated_at=c.updated_at, messages=[]
        )
        for c in conversations
    ]))


@router.post("/conversation", response_model=ChatConversation)
async def get_conversation(
    request: GetConversationRequest,
    db: AsyncSession = DB_DEPENDENCY,
    profile: Profile = PROFILE_DEPENDENCY,
) -> JSONResponse:
    conversation = await ChatService(db).get_conversation(profile.id, request.conversation_id)
    return ok(ChatConversation.model_validate(conversation))


@router.post("/delete", response_model=DeletedResponse)
async def delete_conversation(
    request: GetConversationRequest,
    db: AsyncSession = DB_DEPENDENCY,
    profile: Profile = PROFILE_DEPENDENCY,
) -> JSONResponse:
    await ChatService(db).delete_conversation(profile.id, request.conversation_id)
    return ok(DeletedResponse(id=request.conversation_id))
