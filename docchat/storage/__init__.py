"""Document stores for chats and uploaded file metadata.

The route layer depends on the ``ChatStore`` and ``DocumentStore``
protocols; the in-memory implementations back development and tests.
"""

from docchat.storage.base import ChatStore, DocumentStore
from docchat.storage.memory import InMemoryChatStore, InMemoryDocumentStore

__all__ = ["ChatStore", "DocumentStore", "InMemoryChatStore", "InMemoryDocumentStore"]
