"""Streaming chat completion endpoint.

Accepts a multipart request, validates it, extracts an attached PDF and
streams the model answer as newline-delimited JSON events.
"""

import logging
from collections.abc import AsyncGenerator
from typing import Annotated

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile, status
from fastapi.responses import StreamingResponse

from docchat.agent.bridge import CompletionBridge
from docchat.agent.config import ChatSettings
from docchat.api.dependencies import get_bridge, get_chat_settings
from docchat.errors import InputError, UpstreamError
from docchat.models.schemas import StreamEvent, build_request
from docchat.parsing.pdf_parser import ExtractionError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["chat"])

STREAM_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
}


async def _read_and_validate_size(file: UploadFile | None, max_size: int) -> bytes | None:
    """Read an optional upload and validate its size.

    Returns:
        File content, or None when no file was attached.

    Raises:
        HTTPException: 413 if file exceeds size limit.
    """
    if file is None:
        return None

    content = await file.read()
    if not content and not file.filename:
        # Browsers send an empty part when no file was chosen
        return None

    if len(content) > max_size:
        size_mb = len(content) / (1024 * 1024)
        limit_mb = max_size / (1024 * 1024)
        raise HTTPException(
            status_code=status.HTTP_413_CONTENT_TOO_LARGE,
            detail=f"File size ({size_mb:.1f}MB) exceeds maximum allowed ({limit_mb:.0f}MB)",
        )

    return content


async def _encode(events: AsyncGenerator[StreamEvent]) -> AsyncGenerator[str]:
    try:
        async for event in events:
            yield event.to_line()
    except UpstreamError as e:
        # Headers are already sent; ending without a terminal event tells the client
        logger.warning(f"Stream ended abnormally: {e}")
    finally:
        await events.aclose()


@router.post("/chat")
async def chat(
    bridge: Annotated[CompletionBridge, Depends(get_bridge)],
    settings: Annotated[ChatSettings, Depends(get_chat_settings)],
    prompt: Annotated[str | None, Form()] = None,
    history: Annotated[str | None, Form()] = None,
    pdf_content: Annotated[str | None, Form(alias="pdfContent")] = None,
    file: Annotated[UploadFile | None, File()] = None,
) -> StreamingResponse:
    """Stream a completion for the new prompt.

    Args:
        prompt: New user turn text (required).
        history: JSON array of prior ``{role, text}`` turns, most recent last.
        pdf_content: Previously extracted document text to reuse.
        file: New PDF to extract and attach as context.

    Returns:
        Newline-delimited JSON StreamEvents; the last one has ``done: true``.

    Raises:
        400: Missing prompt, malformed history, or unreadable PDF.
        413: File exceeds the upload limit.
        502: The model failed before producing any output.
    """
    try:
        request = build_request(prompt, history, pdf_content)
    except InputError as e:
        logger.info(f"Rejected chat request: {e}")
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e

    file_bytes = await _read_and_validate_size(file, settings.max_upload_bytes)
    if file_bytes:
        request = request.model_copy(update={"file_bytes": file_bytes})

    try:
        prepared = await bridge.prepare(request)
    except ExtractionError as e:
        logger.warning(f"PDF extraction failed: {e}")
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e

    try:
        events = await bridge.open_stream(prepared)
    except UpstreamError as e:
        logger.error(f"Model call failed before streaming: {e}")
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="The model could not produce a response",
        ) from e

    return StreamingResponse(
        _encode(events),
        media_type="text/event-stream",
        headers=STREAM_HEADERS,
    )
