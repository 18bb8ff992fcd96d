"""FastAPI application factory and configuration.

Main application entry point with lifespan management, middleware,
router registration and collaborator wiring.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from docchat.agent.chat_agent import ModelClient
from docchat.agent.config import ChatSettings
from docchat.api.chat import router as chat_router
from docchat.api.chats import router as chats_router
from docchat.api.files import router as files_router
from docchat.storage import ChatStore, DocumentStore, InMemoryChatStore, InMemoryDocumentStore

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Manage application startup and shutdown lifecycle.

    Args:
        app: The FastAPI application instance.

    Yields:
        Control to the application while it runs.
    """
    # Startup
    logger.info("Starting docchat API...")
    yield
    # Shutdown
    logger.info("Shutting down docchat API...")


def create_app(
    model_client: ModelClient | None = None,
    settings: ChatSettings | None = None,
    chat_store: ChatStore | None = None,
    document_store: DocumentStore | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        model_client: Client used by the chat endpoint. When omitted, an
            Agno-backed client is created from the environment on first use.
        settings: Chat tuning settings; loaded from the environment if omitted.
        chat_store: Store for conversations.
        document_store: Store for uploaded file metadata.

    Returns:
        Configured FastAPI application instance.
    """
    application = FastAPI(
        title="docchat API",
        description=(
            "Document-aware chat API. Streams model completions as newline-"
            "delimited JSON, injects uploaded PDF text as conversational "
            "context, and stores chat history and file references."
        ),
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    application.state.model_client = model_client
    application.state.chat_settings = settings or ChatSettings()
    application.state.chat_store = chat_store or InMemoryChatStore()
    application.state.document_store = document_store or InMemoryDocumentStore()

    application.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["*"],
    )

    application.include_router(chat_router)
    application.include_router(chats_router)
    application.include_router(files_router)

    @application.get("/health")
    async def health_check() -> dict[str, str]:
        """Check service health status."""
        return {"status": "healthy", "service": "docchat"}

    return application


app = create_app()
