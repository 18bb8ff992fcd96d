"""Pydantic models for the streaming chat boundary.

Models:
    - Role: Speaker of a conversation turn
    - ConversationTurn: One turn as presented to the model
    - DocumentContext: Active document text for a conversation
    - StreamEvent: One framed event of the completion stream
    - CompletionRequest: Validated chat request
"""

import json
from enum import Enum
from typing import Any, Self

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
    model_validator,
)

from docchat.errors import InputError


class Role(str, Enum):
    """Speaker of a conversation turn."""

    USER = "user"
    MODEL = "model"


# Stored chat messages use "assistant" for the model side
_ROLE_ALIASES = {"assistant": Role.MODEL}


class ConversationTurn(BaseModel):
    """A single turn in the conversation.

    Attributes:
        role: Who produced the turn (user or model).
        text: The turn text.
    """

    model_config = ConfigDict(frozen=True)

    role: Role
    text: str

    @field_validator("role", mode="before")
    @classmethod
    def normalize_role(cls, v: Any) -> Any:
        """Accept "assistant" as an alias of the model role."""
        if isinstance(v, str):
            v = v.strip().lower()
            return _ROLE_ALIASES.get(v, v)
        return v

    @classmethod
    def user(cls, text: str) -> Self:
        return cls(role=Role.USER, text=text)

    @classmethod
    def model(cls, text: str) -> Self:
        return cls(role=Role.MODEL, text=text)


class DocumentContext(BaseModel):
    """Extracted text of the document currently attached to a conversation.

    Attributes:
        full_text: Complete extracted text.
        is_new_upload: True when the document was extracted in this request.
    """

    model_config = ConfigDict(frozen=True)

    full_text: str
    is_new_upload: bool


class StreamEvent(BaseModel):
    """One framed event of the completion stream.

    A stream is a finite sequence of chunk events (``done=False``) followed
    by exactly one terminal event (``done=True``). Only the terminal event
    may carry ``documentText``.

    Attributes:
        text: Chunk text; always empty on the terminal event.
        done: Whether this is the terminal event.
        document_text: Freshly extracted document text for the caller to cache.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    text: str = ""
    done: bool
    document_text: str | None = Field(default=None, alias="documentText")

    @model_validator(mode="after")
    def check_terminal_shape(self) -> Self:
        if self.done and self.text:
            raise ValueError("terminal event must not carry text")
        if not self.done and self.document_text is not None:
            raise ValueError("documentText is only allowed on the terminal event")
        return self

    @classmethod
    def chunk(cls, text: str) -> Self:
        return cls(text=text, done=False)

    @classmethod
    def final(cls, document_text: str | None = None) -> Self:
        return cls(text="", done=True, document_text=document_text)

    def to_line(self) -> str:
        """Serialize as one newline-terminated JSON object."""
        return self.model_dump_json(by_alias=True, exclude_none=True) + "\n"


class CompletionRequest(BaseModel):
    """Validated chat completion request.

    Attributes:
        prompt: New user turn text (stripped, non-empty).
        file_bytes: Raw bytes of a newly attached document.
        history: Prior turns, most recent last.
        cached_document_text: Previously extracted document text.
    """

    model_config = ConfigDict(frozen=True)

    prompt: str = Field(..., min_length=1)
    file_bytes: bytes | None = None
    history: list[ConversationTurn] = Field(default_factory=list)
    cached_document_text: str | None = None

    @field_validator("prompt", mode="before")
    @classmethod
    def strip_prompt(cls, v: str) -> str:
        """Strip whitespace from prompt before validation."""
        if isinstance(v, str):
            return v.strip()
        return v


def parse_history(raw: str | None) -> list[ConversationTurn]:
    """Parse the JSON-encoded history field of a chat request.

    Args:
        raw: JSON array of ``{role, text}`` objects, or None/blank.

    Returns:
        Parsed turns in their original order.

    Raises:
        InputError: If the JSON is malformed or a turn has the wrong shape.
    """
    if raw is None or not raw.strip():
        return []

    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise InputError(f"History is not valid JSON: {e.msg}") from e

    if not isinstance(data, list):
        raise InputError("History must be a JSON array")

    turns: list[ConversationTurn] = []
    for i, item in enumerate(data):
        try:
            turns.append(ConversationTurn.model_validate(item))
        except ValidationError as e:
            raise InputError(f"Invalid history entry at index {i}") from e
    return turns


def build_request(
    prompt: str | None,
    history: str | None = None,
    cached_document_text: str | None = None,
    file_bytes: bytes | None = None,
) -> CompletionRequest:
    """Validate raw form fields into a CompletionRequest.

    Raises:
        InputError: If the prompt is missing or the history is malformed.
    """
    if prompt is None or not prompt.strip():
        raise InputError("Prompt is required")

    turns = parse_history(history)
    return CompletionRequest(
        prompt=prompt,
        file_bytes=file_bytes or None,
        history=turns,
        cached_document_text=cached_document_text or None,
    )
