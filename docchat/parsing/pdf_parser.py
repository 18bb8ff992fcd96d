"""PDF text extraction using pypdf.

Stages uploaded bytes in a private temporary directory, parses them and
returns best-effort plain text. The staging directory is removed on every
exit path.
"""

import logging
import tempfile
from pathlib import Path

from pydantic import BaseModel, Field
from pypdf import PdfReader
from pypdf.errors import PdfReadError

from docchat.errors import ChatError

logger = logging.getLogger(__name__)

# Constants
MAX_FILE_SIZE = 10 * 1024 * 1024  # 10MB
PDF_MAGIC_BYTES = b"%PDF"


class ExtractedDocument(BaseModel):
    """Text extracted from a PDF file.

    Attributes:
        text: Combined text content from all pages.
        pages: Total number of pages in the document.
    """

    text: str
    pages: int = Field(ge=0)


class ExtractionError(ChatError):
    """Raised when a document cannot be parsed."""

    pass


def _validate_pdf_bytes(file_content: bytes, max_size: int) -> None:
    """Validate PDF file content before parsing.

    Raises:
        ExtractionError: If validation fails.
    """
    if not file_content:
        raise ExtractionError("Empty file provided")

    if len(file_content) > max_size:
        size_mb = len(file_content) / (1024 * 1024)
        limit_mb = max_size / (1024 * 1024)
        raise ExtractionError(
            f"File size ({size_mb:.1f}MB) exceeds maximum allowed ({limit_mb:.0f}MB)"
        )

    if not file_content.lstrip()[:10].startswith(PDF_MAGIC_BYTES):
        raise ExtractionError("Invalid PDF: file does not start with PDF header")


def _read_pages(path: Path) -> tuple[list[str], int]:
    try:
        reader = PdfReader(path)
    except PdfReadError as e:
        raise ExtractionError(f"Corrupt or invalid PDF: {e}") from e
    except Exception as e:
        raise ExtractionError(f"Failed to read PDF: {e}") from e

    try:
        pages = len(reader.pages)
    except Exception as e:
        raise ExtractionError(f"Corrupt or invalid PDF: {e}") from e
    if pages == 0:
        raise ExtractionError("PDF contains no pages")

    text_parts: list[str] = []
    for i, page in enumerate(reader.pages):
        try:
            page_text = page.extract_text()
        except Exception as e:
            logger.warning(f"Failed to extract text from page {i + 1}: {e}")
            continue
        if page_text and page_text.strip():
            text_parts.append(page_text.strip())

    return text_parts, pages


def extract_text(file_content: bytes, max_size: int = MAX_FILE_SIZE) -> ExtractedDocument:
    """Extract plain text from a PDF file.

    Args:
        file_content: Raw bytes of the PDF file.
        max_size: Largest accepted input in bytes.

    Returns:
        ExtractedDocument with the page texts joined by blank lines.

    Raises:
        ExtractionError: If the file is empty, too large, not a PDF, or corrupt.
    """
    _validate_pdf_bytes(file_content, max_size)

    with tempfile.TemporaryDirectory(prefix="docchat-") as staging:
        path = Path(staging) / "upload.pdf"
        path.write_bytes(file_content)
        text_parts, pages = _read_pages(path)

    text = "\n\n".join(text_parts)

    if not text:
        logger.warning("PDF contains no extractable text (may be scanned/image-based)")
    else:
        logger.info(f"Extracted {len(text)} characters from {pages} page(s)")

    return ExtractedDocument(text=text, pages=pages)
