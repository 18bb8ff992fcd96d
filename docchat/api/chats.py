"""Chat history endpoints over the chat store."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status

from docchat.api.dependencies import get_chat_store
from docchat.models.records import ChatCreate, ChatRecord, ChatUpdate, MessageAppend
from docchat.storage import ChatStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/chats", tags=["chats"])

StoreDep = Annotated[ChatStore, Depends(get_chat_store)]


def _not_found() -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Chat not found")


@router.get("", response_model=list[ChatRecord])
async def list_chats(
    store: StoreDep,
    user_id: Annotated[str | None, Query()] = None,
) -> list[ChatRecord]:
    """List a user's chats, most recently updated first."""
    if not user_id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="User ID is required",
        )
    return list(await store.list_by_user(user_id))


@router.post("", response_model=ChatRecord, status_code=status.HTTP_201_CREATED)
async def create_chat(payload: ChatCreate, store: StoreDep) -> ChatRecord:
    """Create a chat, defaulting the title to "New Chat"."""
    chat = ChatRecord(
        user_id=payload.user_id,
        title=payload.title or "New Chat",
        messages=payload.messages,
    )
    return await store.create(chat)


@router.get("/{chat_id}", response_model=ChatRecord)
async def get_chat(chat_id: str, store: StoreDep) -> ChatRecord:
    chat = await store.get(chat_id)
    if chat is None:
        raise _not_found()
    return chat


@router.put("/{chat_id}", response_model=ChatRecord)
async def update_chat(chat_id: str, payload: ChatUpdate, store: StoreDep) -> ChatRecord:
    """Replace the title and/or the full message list of a chat."""
    chat = await store.replace(chat_id, payload)
    if chat is None:
        raise _not_found()
    return chat


@router.post("/{chat_id}/messages", response_model=ChatRecord)
async def append_message(chat_id: str, payload: MessageAppend, store: StoreDep) -> ChatRecord:
    chat = await store.append_message(chat_id, payload.message)
    if chat is None:
        raise _not_found()
    return chat


@router.delete("/{chat_id}")
async def delete_chat(chat_id: str, store: StoreDep) -> dict[str, str]:
    if not await store.delete_by_id(chat_id):
        raise _not_found()
    logger.info(f"Deleted chat {chat_id}")
    return {"message": "Chat deleted successfully"}
