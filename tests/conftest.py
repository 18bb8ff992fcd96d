"""Pytest fixtures and shared test configuration.

Provides reusable fixtures for unit and integration tests.

Fixtures:
    - make_pdf: Builds small text PDFs in memory
    - sample_pdf: Three-page PDF with known text
    - fake_client: Scripted ModelClient standing in for the LLM
    - app / async_client: Application wired to the fake client
"""

import asyncio
from collections.abc import AsyncGenerator, AsyncIterator, Callable, Sequence

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from docchat.agent.config import ChatSettings
from docchat.api.app import create_app
from docchat.models.schemas import ConversationTurn

SAMPLE_PAGES = [
    "Quarterly report page one",
    "Revenue grew in the second quarter",
    "Outlook for next year is stable",
]


def build_pdf(page_texts: Sequence[str]) -> bytes:
    """Build a minimal PDF with one line of Helvetica text per page."""
    count = len(page_texts)
    page_ids = [4 + 2 * i for i in range(count)]
    kids = " ".join(f"{pid} 0 R" for pid in page_ids)

    objects: list[bytes] = [
        b"<< /Type /Catalog /Pages 2 0 R >>",
        f"<< /Type /Pages /Kids [{kids}] /Count {count} >>".encode(),
        b"<< /Type /Font /Subtype /Type1 /BaseFont /Helvetica >>",
    ]
    for page_id, text in zip(page_ids, page_texts, strict=True):
        content = f"BT /F1 12 Tf 72 720 Td ({text}) Tj ET".encode()
        objects.append(
            (
                "<< /Type /Page /Parent 2 0 R /MediaBox [0 0 612 792] "
                f"/Resources << /Font << /F1 3 0 R >> >> /Contents {page_id + 1} 0 R >>"
            ).encode()
        )
        objects.append(
            f"<< /Length {len(content)} >>\nstream\n".encode() + content + b"\nendstream"
        )

    out = bytearray(b"%PDF-1.4\n")
    offsets: list[int] = []
    for number, body in enumerate(objects, start=1):
        offsets.append(len(out))
        out += f"{number} 0 obj\n".encode() + body + b"\nendobj\n"

    xref_offset = len(out)
    out += f"xref\n0 {len(objects) + 1}\n".encode()
    out += b"0000000000 65535 f \n"
    for offset in offsets:
        out += f"{offset:010d} 00000 n \n".encode()
    out += (
        f"trailer\n<< /Size {len(objects) + 1} /Root 1 0 R >>\n"
        f"startxref\n{xref_offset}\n%%EOF\n"
    ).encode()
    return bytes(out)


class FakeModelClient:
    """Scripted stand-in for the model.

    Args:
        chunks: Text chunks to stream.
        fail_after: If set, raise after yielding this many chunks.
        delay: Seconds to sleep before each chunk.
    """

    def __init__(
        self,
        chunks: Sequence[str] = ("Hel", "lo"),
        fail_after: int | None = None,
        delay: float = 0.0,
    ) -> None:
        self.chunks = list(chunks)
        self.fail_after = fail_after
        self.delay = delay
        self.calls: list[list[ConversationTurn]] = []
        self.closed = False

    async def stream_completion(
        self, turns: Sequence[ConversationTurn]
    ) -> AsyncIterator[str]:
        self.calls.append(list(turns))
        try:
            for chunk in self.chunks[: self.fail_after]:
                if self.delay:
                    await asyncio.sleep(self.delay)
                yield chunk
            if self.fail_after is not None:
                raise ConnectionResetError("upstream connection dropped")
        finally:
            self.closed = True


@pytest.fixture
def make_pdf() -> Callable[[Sequence[str]], bytes]:
    """Return the in-memory PDF builder."""
    return build_pdf


@pytest.fixture
def sample_pdf() -> bytes:
    """Three-page PDF whose pages carry SAMPLE_PAGES."""
    return build_pdf(SAMPLE_PAGES)


@pytest.fixture
def fake_client() -> FakeModelClient:
    return FakeModelClient()


@pytest.fixture
def chat_settings() -> ChatSettings:
    return ChatSettings(
        history_window=20,
        excerpt_chars=8000,
        request_timeout=5.0,
        max_upload_bytes=10 * 1024 * 1024,
    )


@pytest.fixture
def app(fake_client: FakeModelClient, chat_settings: ChatSettings) -> FastAPI:
    """Application wired to the fake model client and in-memory stores."""
    return create_app(model_client=fake_client, settings=chat_settings)


@pytest.fixture
async def async_client(app: FastAPI) -> AsyncGenerator[AsyncClient]:
    """Create async HTTP client for API testing.

    Yields:
        Configured AsyncClient for making test requests.
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
