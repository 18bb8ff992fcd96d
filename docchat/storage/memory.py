"""In-memory stores.

Good enough for development and tests; data is lost on restart.
"""

import asyncio
import logging
from datetime import UTC, datetime

from docchat.models.records import ChatRecord, ChatUpdate, FileMetadata, Message

logger = logging.getLogger(__name__)


class InMemoryChatStore:
    """Chat records keyed by id, guarded by an asyncio lock."""

    def __init__(self) -> None:
        self._chats: dict[str, ChatRecord] = {}
        self._lock = asyncio.Lock()

    async def list_by_user(self, user_id: str) -> list[ChatRecord]:
        """Return the user's chats, most recently updated first."""
        async with self._lock:
            chats = [c for c in self._chats.values() if c.user_id == user_id]
        return sorted(chats, key=lambda c: c.updated_at, reverse=True)

    async def get(self, chat_id: str) -> ChatRecord | None:
        async with self._lock:
            return self._chats.get(chat_id)

    async def create(self, chat: ChatRecord) -> ChatRecord:
        async with self._lock:
            self._chats[chat.id] = chat
        logger.info(f"Created chat {chat.id} for user {chat.user_id}")
        return chat

    async def append_message(self, chat_id: str, message: Message) -> ChatRecord | None:
        async with self._lock:
            chat = self._chats.get(chat_id)
            if chat is None:
                return None
            updated = chat.model_copy(
                update={
                    "messages": [*chat.messages, message],
                    "updated_at": datetime.now(UTC),
                }
            )
            self._chats[chat_id] = updated
            return updated

    async def replace(self, chat_id: str, fields: ChatUpdate) -> ChatRecord | None:
        """Overwrite the title and/or messages that are set in ``fields``."""
        async with self._lock:
            chat = self._chats.get(chat_id)
            if chat is None:
                return None
            changes = fields.model_dump(exclude_none=True)
            if fields.messages is not None:
                changes["messages"] = list(fields.messages)
            changes["updated_at"] = datetime.now(UTC)
            updated = chat.model_copy(update=changes)
            self._chats[chat_id] = updated
            return updated

    async def delete_by_id(self, chat_id: str) -> bool:
        async with self._lock:
            return self._chats.pop(chat_id, None) is not None


class InMemoryDocumentStore:
    """File metadata keyed by id."""

    def __init__(self) -> None:
        self._files: dict[str, FileMetadata] = {}
        self._lock = asyncio.Lock()

    async def list_by_user(self, user_id: str) -> list[FileMetadata]:
        """Return the user's files, newest upload first."""
        async with self._lock:
            files = [f for f in self._files.values() if f.user_id == user_id]
        return sorted(files, key=lambda f: f.uploaded_at, reverse=True)

    async def create(self, file: FileMetadata) -> FileMetadata:
        async with self._lock:
            self._files[file.id] = file
        return file

    async def delete_by_id(self, file_id: str) -> bool:
        async with self._lock:
            return self._files.pop(file_id, None) is not None
