"""Model orchestration for document-aware chat.

Responsibilities:
    - Model client initialization with OpenAI models via Agno
    - Context assembly from history and document text
    - Prompt augmentation for chart requests
    - Streaming completion relay as framed events

Maintains clean separation from the HTTP layer.
"""

from docchat.agent.bridge import CompletionBridge, PreparedCompletion
from docchat.agent.chat_agent import AgentService, ModelClient
from docchat.agent.config import AgentConfig, ChatSettings, get_agent_config, get_chat_settings
from docchat.agent.context import assemble_context

__all__ = [
    "AgentConfig",
    "AgentService",
    "ChatSettings",
    "CompletionBridge",
    "ModelClient",
    "PreparedCompletion",
    "assemble_context",
    "get_agent_config",
    "get_chat_settings",
]
