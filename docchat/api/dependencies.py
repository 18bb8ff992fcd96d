"""Request-scoped access to the collaborators wired in ``create_app``."""

import logging

from fastapi import HTTPException, Request, status
from pydantic import ValidationError

from docchat.agent.bridge import CompletionBridge
from docchat.agent.chat_agent import AgentService, ModelClient
from docchat.agent.config import ChatSettings
from docchat.storage import ChatStore, DocumentStore

logger = logging.getLogger(__name__)


def get_chat_settings(request: Request) -> ChatSettings:
    return request.app.state.chat_settings


def get_model_client(request: Request) -> ModelClient:
    """Return the injected model client, creating the Agno one lazily.

    Raises:
        HTTPException: 503 if no API key is configured.
    """
    client = request.app.state.model_client
    if client is None:
        try:
            client = AgentService()
        except ValidationError as e:
            logger.error(f"Model client is not configured: {e}")
            raise HTTPException(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                detail="Model client is not configured",
            ) from e
        request.app.state.model_client = client
    return client


def get_bridge(request: Request) -> CompletionBridge:
    return CompletionBridge(get_model_client(request), get_chat_settings(request))


def get_chat_store(request: Request) -> ChatStore:
    return request.app.state.chat_store


def get_document_store(request: Request) -> DocumentStore:
    return request.app.state.document_store
