"""Unit tests for PDF text extraction."""

import tempfile
from collections.abc import Callable, Sequence
from pathlib import Path

import pytest
import pytest_check as check

from docchat.parsing.pdf_parser import MAX_FILE_SIZE, ExtractionError, extract_text

TRUNCATED_PDF = b"%PDF-1.4\n1 0 obj\n<<"


@pytest.fixture
def staging_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point the tempfile module at an isolated directory."""
    monkeypatch.setattr(tempfile, "tempdir", str(tmp_path))
    return tmp_path


class TestExtractTextValid:
    """Tests for successful extraction."""

    def test_extracts_text_and_page_count(self, sample_pdf: bytes) -> None:
        """Valid PDF returns text from every page and the page count."""
        result = extract_text(sample_pdf)

        check.equal(result.pages, 3)
        check.is_in("Quarterly report page one", result.text)
        check.is_in("Revenue grew", result.text)
        check.is_in("Outlook for next year", result.text)

    def test_pages_are_in_order(self, sample_pdf: bytes) -> None:
        result = extract_text(sample_pdf)

        assert result.text.index("Quarterly") < result.text.index("Revenue")
        assert result.text.index("Revenue") < result.text.index("Outlook")

    def test_blank_page_pdf_returns_empty_text(
        self, make_pdf: Callable[[Sequence[str]], bytes]
    ) -> None:
        """PDF without text parses and yields empty text."""
        result = extract_text(make_pdf([""]))

        check.equal(result.pages, 1)
        check.equal(result.text, "")


class TestExtractTextRejection:
    """Tests for validation and parse failures."""

    def test_rejects_empty_bytes(self) -> None:
        with pytest.raises(ExtractionError, match="Empty file"):
            extract_text(b"")

    def test_rejects_non_pdf_bytes(self) -> None:
        with pytest.raises(ExtractionError, match="Invalid PDF"):
            extract_text(b"This is plain text pretending to be a PDF")

    def test_rejects_oversized_file(self) -> None:
        oversized = b"%PDF-1.4" + b"\x00" * (MAX_FILE_SIZE + 1)

        with pytest.raises(ExtractionError, match="exceeds maximum"):
            extract_text(oversized)

    def test_custom_size_limit(self, sample_pdf: bytes) -> None:
        with pytest.raises(ExtractionError, match="exceeds maximum"):
            extract_text(sample_pdf, max_size=16)

    def test_rejects_truncated_pdf(self) -> None:
        with pytest.raises(ExtractionError, match="Corrupt|Failed|no pages"):
            extract_text(TRUNCATED_PDF)


class TestStagingCleanup:
    """The temporary staging area never outlives the call."""

    def test_cleanup_after_success(self, staging_dir: Path, sample_pdf: bytes) -> None:
        extract_text(sample_pdf)

        assert list(staging_dir.iterdir()) == []

    def test_cleanup_after_parse_failure(self, staging_dir: Path) -> None:
        with pytest.raises(ExtractionError):
            extract_text(TRUNCATED_PDF)

        assert list(staging_dir.iterdir()) == []
