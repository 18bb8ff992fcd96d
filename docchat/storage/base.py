"""Store interfaces consumed by the route layer."""

from collections.abc import Sequence
from typing import Protocol

from docchat.models.records import ChatRecord, ChatUpdate, FileMetadata, Message


class ChatStore(Protocol):
    """Persistence for conversations."""

    async def list_by_user(self, user_id: str) -> Sequence[ChatRecord]: ...

    async def get(self, chat_id: str) -> ChatRecord | None: ...

    async def create(self, chat: ChatRecord) -> ChatRecord: ...

    async def append_message(self, chat_id: str, message: Message) -> ChatRecord | None: ...

    async def replace(self, chat_id: str, fields: ChatUpdate) -> ChatRecord | None: ...

    async def delete_by_id(self, chat_id: str) -> bool: ...


class DocumentStore(Protocol):
    """Persistence for uploaded file metadata."""

    async def list_by_user(self, user_id: str) -> Sequence[FileMetadata]: ...

    async def create(self, file: FileMetadata) -> FileMetadata: ...

    async def delete_by_id(self, file_id: str) -> bool: ...
