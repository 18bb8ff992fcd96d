"""Pydantic models for API requests, responses and stored records.

Provides type safety, validation, and automatic OpenAPI documentation.

Models:
    - ConversationTurn: One turn sent to the model
    - DocumentContext: Active document text for a conversation
    - StreamEvent: Framed event of the completion stream
    - CompletionRequest: Validated chat completion request
    - ChatRecord / Message: Stored conversations
    - FileMetadata: Stored file references
"""

from docchat.models.records import (
    AttachedFile,
    ChatCreate,
    ChatRecord,
    ChatUpdate,
    FileCreate,
    FileMetadata,
    Message,
    MessageAppend,
)
from docchat.models.schemas import (
    CompletionRequest,
    ConversationTurn,
    DocumentContext,
    Role,
    StreamEvent,
    build_request,
    parse_history,
)

__all__ = [
    "AttachedFile",
    "ChatCreate",
    "ChatRecord",
    "ChatUpdate",
    "CompletionRequest",
    "ConversationTurn",
    "DocumentContext",
    "FileCreate",
    "FileMetadata",
    "Message",
    "MessageAppend",
    "Role",
    "StreamEvent",
    "build_request",
    "parse_history",
]
