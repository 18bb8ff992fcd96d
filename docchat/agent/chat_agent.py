"""Agno-backed model client with streaming support.

Architecture Decisions:

1. **Injected client** - The bridge receives any object satisfying
   ``ModelClient``. Production uses ``AgentService``; tests pass a fake.

2. **Stateless agent** - The caller sends its full history on every request,
   so the agent gets no storage and no session. A fresh Agent is built per
   request; nothing mutable is shared between concurrent streams.

3. **Explicit history** - Assembled turns are handed to Agno as a list of
   messages instead of letting the framework load history itself. The
   context window is decided by ``docchat.agent.context``.

4. **Streaming Generator** - Agno yields run events with metadata. We keep
   only content events and surface error events as ``UpstreamError``.
"""

import logging
from collections.abc import AsyncIterator, Sequence
from typing import Protocol

from agno.agent import Agent
from agno.models.message import Message
from agno.models.openai import OpenAIChat
from agno.run.agent import RunEvent

from docchat.agent.config import AgentConfig, get_agent_config
from docchat.agent.prompts import ASSISTANT_DESCRIPTION, ASSISTANT_INSTRUCTIONS
from docchat.errors import UpstreamError
from docchat.models.schemas import ConversationTurn, Role

logger = logging.getLogger(__name__)

_AGNO_ROLES = {Role.USER: "user", Role.MODEL: "assistant"}


class ModelClient(Protocol):
    """Anything that can stream a completion for assembled turns."""

    def stream_completion(self, turns: Sequence[ConversationTurn]) -> AsyncIterator[str]:
        """Stream text chunks answering the last (user) turn."""
        ...


def to_agno_messages(turns: Sequence[ConversationTurn]) -> list[Message]:
    """Convert conversation turns to Agno messages, preserving order."""
    return [Message(role=_AGNO_ROLES[turn.role], content=turn.text) for turn in turns]


class AgentService:
    """Model client built on Agno's Agent with an OpenAI chat model."""

    def __init__(self, config: AgentConfig | None = None) -> None:
        """Initialize the agent service.

        Args:
            config: Optional agent configuration.
                    Loads from environment if not provided.
        """
        self._config = config or get_agent_config()

    def _create_model(self) -> OpenAIChat:
        return OpenAIChat(
            id=self._config.model_name,
            api_key=self._config.api_key,
            base_url=self._config.base_url,
            temperature=self._config.temperature,
            max_tokens=self._config.max_tokens,
        )

    def _create_agent(self) -> Agent:
        """Create a single-use Agno agent.

        Returns:
            Agent with the OpenAI model and no storage.
        """
        return Agent(
            model=self._create_model(),
            description=ASSISTANT_DESCRIPTION,
            instructions=ASSISTANT_INSTRUCTIONS,
            add_history_to_context=False,
            markdown=True,
        )

    async def stream_completion(
        self,
        turns: Sequence[ConversationTurn],
    ) -> AsyncIterator[str]:
        """Stream response chunks for the assembled turns.

        Args:
            turns: Assembled context ending with the new user turn.

        Yields:
            Response text chunks as they arrive.

        Raises:
            UpstreamError: If the model reports an error.
        """
        logger.debug(f"Streaming from {self._config.model_name} with {len(turns)} turns")
        agent = self._create_agent()
        response_stream = agent.arun(to_agno_messages(turns), stream=True)

        async for chunk in response_stream:
            event = getattr(chunk, "event", None)
            if event == RunEvent.run_error:
                raise UpstreamError(str(getattr(chunk, "content", "") or "Model run failed"))
            if event != RunEvent.run_content:
                continue
            if chunk.content:
                yield chunk.content

