"""FastAPI endpoints for docchat.

HTTP and streaming routes with async request handling.

Endpoints:
    - GET /health: Service health status
    - POST /api/chat: Streaming chat completion (newline-delimited JSON)
    - /chats: Chat history CRUD
    - /files: Uploaded file metadata CRUD
"""

from docchat.api.app import app, create_app

__all__ = ["app", "create_app"]
