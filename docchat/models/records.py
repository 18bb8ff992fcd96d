"""Stored chat and file records for the document-store routes."""

import uuid
from datetime import UTC, datetime
from typing import Literal

from pydantic import BaseModel, Field, field_validator


def _new_id() -> str:
    return uuid.uuid4().hex


def _now() -> datetime:
    return datetime.now(UTC)


class AttachedFile(BaseModel):
    """A file reference attached to a chat message."""

    id: str
    name: str
    size: int = Field(ge=0)
    type: str
    url: str
    uploaded_at: str | None = None


class Message(BaseModel):
    """A persisted chat message.

    Attributes:
        role: Speaker of the message (user or assistant).
        content: Message text.
        timestamp: When the message was recorded.
        attached_files: Files referenced by the message.
    """

    role: Literal["user", "assistant"]
    content: str = Field(..., min_length=1)
    timestamp: datetime = Field(default_factory=_now)
    attached_files: list[AttachedFile] = Field(default_factory=list)


class ChatRecord(BaseModel):
    """A stored conversation owned by a user."""

    id: str = Field(default_factory=_new_id)
    user_id: str
    title: str = "New Chat"
    messages: list[Message] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=_now)
    updated_at: datetime = Field(default_factory=_now)


class ChatCreate(BaseModel):
    """Payload for creating a chat."""

    user_id: str = Field(..., min_length=1)
    title: str | None = None
    messages: list[Message] = Field(default_factory=list)

    @field_validator("title", mode="before")
    @classmethod
    def blank_title_to_none(cls, v: str | None) -> str | None:
        if isinstance(v, str) and not v.strip():
            return None
        return v


class ChatUpdate(BaseModel):
    """Payload for replacing the title and/or messages of a chat."""

    title: str | None = None
    messages: list[Message] | None = None


class MessageAppend(BaseModel):
    """Payload for appending one message to a chat."""

    message: Message


class FileMetadata(BaseModel):
    """Metadata of an uploaded file; the bytes live elsewhere."""

    id: str = Field(default_factory=_new_id)
    user_id: str
    name: str
    size: int = Field(gt=0)
    type: str
    url: str
    uploaded_at: datetime = Field(default_factory=_now)


class FileCreate(BaseModel):
    """Payload for registering an uploaded file."""

    user_id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    size: int = Field(..., gt=0)
    type: str = Field(..., min_length=1)
    url: str = Field(..., min_length=1)
