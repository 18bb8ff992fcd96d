"""Completion stream bridge.

Turns a validated chat request into a stream of ``StreamEvent``:
extracts a newly attached document, assembles the model context, relays
model chunks as they arrive and closes with a single terminal event that
hands freshly extracted text back to the caller for caching.

The bridge keeps no conversation state; everything arrives with the request.
"""

import asyncio
import logging
from collections.abc import AsyncGenerator, AsyncIterator

from pydantic import BaseModel, ConfigDict

from docchat.agent.chat_agent import ModelClient
from docchat.agent.config import ChatSettings
from docchat.agent.context import assemble_context
from docchat.agent.prompts import augment_prompt
from docchat.errors import UpstreamError
from docchat.models.schemas import (
    CompletionRequest,
    ConversationTurn,
    DocumentContext,
    StreamEvent,
)
from docchat.parsing.pdf_parser import extract_text

logger = logging.getLogger(__name__)


class PreparedCompletion(BaseModel):
    """Everything needed to start streaming one completion.

    Attributes:
        turns: Assembled context, new user turn last.
        prompt: Outgoing user text after augmentation.
        extracted_text: Text extracted from a new upload in this request.
    """

    model_config = ConfigDict(frozen=True)

    turns: list[ConversationTurn]
    prompt: str
    extracted_text: str | None = None


class CompletionBridge:
    """Streams model output for one request at a time, per call."""

    def __init__(self, client: ModelClient, settings: ChatSettings | None = None) -> None:
        self._client = client
        self._settings = settings or ChatSettings()

    async def _resolve_document(
        self, request: CompletionRequest
    ) -> tuple[DocumentContext | None, str | None]:
        if request.file_bytes is not None:
            extracted = await asyncio.to_thread(
                extract_text, request.file_bytes, self._settings.max_upload_bytes
            )
            return DocumentContext(full_text=extracted.text, is_new_upload=True), extracted.text

        if request.cached_document_text:
            return DocumentContext(full_text=request.cached_document_text, is_new_upload=False), None

        return None, None

    async def prepare(self, request: CompletionRequest) -> PreparedCompletion:
        """Extract, assemble and augment before any upstream call.

        Raises:
            ExtractionError: If a newly attached document cannot be parsed.
        """
        document, extracted_text = await self._resolve_document(request)
        prompt = augment_prompt(request.prompt)
        if prompt != request.prompt:
            logger.info("Chart request detected, appending chart reminder")

        turns = assemble_context(
            request.history,
            document,
            prompt,
            window=self._settings.history_window,
            excerpt_chars=self._settings.excerpt_chars,
        )
        return PreparedCompletion(
            turns=turns,
            prompt=prompt,
            extracted_text=extracted_text or None,
        )

    async def stream(self, prepared: PreparedCompletion) -> AsyncGenerator[StreamEvent]:
        """Relay model chunks as events, ending with one terminal event.

        Yields:
            Chunk events in production order, then the terminal event.

        Raises:
            UpstreamError: If the model fails or the time budget runs out.
                Events already yielded are not rolled back.
        """
        loop = asyncio.get_running_loop()
        deadline = loop.time() + self._settings.request_timeout
        upstream: AsyncIterator[str] = aiter(self._client.stream_completion(prepared.turns))
        chunk_count = 0
        total_length = 0

        logger.info(f"Starting stream response ({len(prepared.turns)} turns in context)")
        try:
            while True:
                remaining = deadline - loop.time()
                if remaining <= 0:
                    raise UpstreamError("Model did not finish within the time budget")
                try:
                    text = await asyncio.wait_for(anext(upstream), timeout=remaining)
                except StopAsyncIteration:
                    break
                except TimeoutError as e:
                    raise UpstreamError("Model did not finish within the time budget") from e
                except UpstreamError:
                    raise
                except Exception as e:
                    raise UpstreamError(f"Model stream failed: {e}") from e

                if not text:
                    continue
                chunk_count += 1
                total_length += len(text)
                if chunk_count % 10 == 0:
                    logger.debug(f"Streamed {chunk_count} chunks, total length: {total_length}")
                yield StreamEvent.chunk(text)
        except UpstreamError as e:
            logger.error(f"Stream aborted after {chunk_count} chunks: {e}")
            raise
        finally:
            aclose = getattr(upstream, "aclose", None)
            if aclose is not None:
                await aclose()

        logger.info(f"Stream complete. Total chunks: {chunk_count}, total length: {total_length}")
        yield StreamEvent.final(document_text=prepared.extracted_text)

    async def open_stream(
        self, prepared: PreparedCompletion
    ) -> AsyncGenerator[StreamEvent]:
        """Start streaming and wait for the first event.

        Lets the caller turn an upstream failure before any chunk into an
        immediate error response instead of a broken stream.

        Raises:
            UpstreamError: If the model fails before producing anything.
        """
        events = self.stream(prepared)
        try:
            first = await anext(events)
        except BaseException:
            await events.aclose()
            raise
        return _prepend(first, events)


async def _prepend(
    first: StreamEvent, rest: AsyncGenerator[StreamEvent]
) -> AsyncGenerator[StreamEvent]:
    try:
        yield first
        async for event in rest:
            yield event
    finally:
        await rest.aclose()
