"""Client-side consumer for the chat completion stream.

Reads newline-delimited StreamEvents, accumulates the answer for live
display and reports a final result the caller can persist. A stream that
breaks before its terminal event always ends in a failure result.
"""

import json
import logging
from collections.abc import AsyncIterable, AsyncIterator, Callable, Sequence
from enum import Enum

import httpx
from pydantic import BaseModel, ValidationError

from docchat.errors import TransportError
from docchat.models.schemas import ConversationTurn, StreamEvent

logger = logging.getLogger(__name__)

EMPTY_RESPONSE_MESSAGE = "I apologize, but I couldn't generate a response. Please try again."
ERROR_MESSAGE = "I apologize, but I encountered an error. Please try again."


class StreamState(str, Enum):
    """Lifecycle of one consumed stream."""

    STREAMING = "streaming"
    COMPLETE = "complete"
    FAILED = "failed"


class CompletionResult(BaseModel):
    """Outcome of consuming one completion stream.

    Attributes:
        message: Text to show and persist as the assistant turn.
        succeeded: Whether a terminal event was observed.
        partial_text: Whatever was accumulated before a failure.
        document_text: Extracted document text to cache for later turns.
        status_code: HTTP status of the response, None if none was received.
        detail: Error detail reported by the server for a rejected request.
    """

    message: str
    succeeded: bool
    partial_text: str = ""
    document_text: str | None = None
    status_code: int | None = None
    detail: str | None = None

    @property
    def rejected(self) -> bool:
        """Whether the server refused the request itself (4xx)."""
        return self.status_code is not None and 400 <= self.status_code < 500


class StreamReassembler:
    """Single-accumulator reassembly of a StreamEvent sequence."""

    def __init__(self) -> None:
        self.accumulated = ""
        self.document_text: str | None = None
        self.state = StreamState.STREAMING

    def feed(self, event: StreamEvent) -> str:
        """Apply one event and return the current accumulator.

        Raises:
            TransportError: If an event arrives after the stream finished.
        """
        if self.state is not StreamState.STREAMING:
            raise TransportError(f"Event received after stream was {self.state.value}")

        if event.done:
            if event.document_text:
                self.document_text = event.document_text
            self.state = StreamState.COMPLETE
        else:
            self.accumulated += event.text
        return self.accumulated

    def fail(self) -> None:
        if self.state is StreamState.STREAMING:
            self.state = StreamState.FAILED

    def result(self) -> CompletionResult:
        if self.state is StreamState.COMPLETE:
            return CompletionResult(
                message=self.accumulated or EMPTY_RESPONSE_MESSAGE,
                succeeded=True,
                partial_text=self.accumulated,
                document_text=self.document_text,
            )
        return CompletionResult(
            message=ERROR_MESSAGE,
            succeeded=False,
            partial_text=self.accumulated,
        )


async def iter_events(lines: AsyncIterable[str]) -> AsyncIterator[StreamEvent]:
    """Parse newline-delimited JSON into StreamEvents.

    Blank lines are ignored; lines that are not valid events are logged
    and skipped.
    """
    async for line in lines:
        line = line.strip()
        if not line:
            continue
        try:
            yield StreamEvent.model_validate_json(line)
        except ValidationError as e:
            logger.warning(f"Skipping malformed stream line: {e.error_count()} error(s)")


async def reassemble(
    events: AsyncIterable[StreamEvent],
    on_update: Callable[[str], None] | None = None,
) -> CompletionResult:
    """Consume events until the terminal one or a transport failure.

    Args:
        events: Event source in production order.
        on_update: Called with the accumulated text after every chunk.

    Returns:
        A successful result after a terminal event, otherwise a failure.
    """
    reassembler = StreamReassembler()
    try:
        async for event in events:
            accumulated = reassembler.feed(event)
            if event.done:
                break
            if on_update is not None:
                on_update(accumulated)
    except (TransportError, httpx.TransportError, OSError) as e:
        logger.error(f"Stream transport failed: {e}")

    if reassembler.state is StreamState.STREAMING:
        logger.warning("Stream ended without a terminal event")
        reassembler.fail()
    return reassembler.result()


def _failure(status_code: int | None = None, detail: str | None = None) -> CompletionResult:
    return CompletionResult(
        message=ERROR_MESSAGE,
        succeeded=False,
        status_code=status_code,
        detail=detail,
    )


def _error_detail(response: httpx.Response) -> str | None:
    try:
        detail = response.json().get("detail")
    except (ValueError, AttributeError):
        return None
    return detail if isinstance(detail, str) else None


def _history_payload(history: Sequence[ConversationTurn]) -> str:
    return json.dumps([{"role": turn.role.value, "text": turn.text} for turn in history])


async def stream_completion(
    client: httpx.AsyncClient,
    prompt: str,
    history: Sequence[ConversationTurn] = (),
    document_text: str | None = None,
    file: tuple[str, bytes] | None = None,
    on_update: Callable[[str], None] | None = None,
    url: str = "/api/chat",
) -> CompletionResult:
    """Post a chat request and consume its streamed answer.

    Args:
        client: HTTP client; its base URL points at the API.
        prompt: New user turn text.
        history: Prior turns, most recent last.
        document_text: Cached document text from an earlier turn.
        file: Optional ``(filename, bytes)`` of a new PDF.
        on_update: Called with the accumulated text after every chunk.
        url: Path of the chat endpoint.

    Returns:
        The reassembled result; HTTP and transport errors become failures.
    """
    # Plain fields go as filename-less parts so the body is always multipart
    parts: list[tuple[str, tuple]] = [
        ("prompt", (None, prompt.encode())),
        ("history", (None, _history_payload(history).encode())),
    ]
    if document_text:
        parts.append(("pdfContent", (None, document_text.encode())))
    if file:
        parts.append(("file", (file[0], file[1], "application/pdf")))

    try:
        async with client.stream(
            "POST",
            url,
            files=parts,
            headers={"Accept": "text/event-stream"},
        ) as response:
            if response.is_error:
                await response.aread()
                logger.error(
                    f"Chat request failed with HTTP {response.status_code}: {response.text}"
                )
                return _failure(response.status_code, _error_detail(response))
            result = await reassemble(iter_events(response.aiter_lines()), on_update)
            return result.model_copy(update={"status_code": response.status_code})
    except httpx.HTTPError as e:
        logger.error(f"Connection failed: {e}")
        return _failure()
