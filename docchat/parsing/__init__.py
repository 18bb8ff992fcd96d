"""Document text extraction.

Responsibilities:
    - PDF validation (size limit, header check)
    - Scoped on-disk staging of uploaded bytes
    - Page text extraction with pypdf

Output is plain text ready to be framed as conversational context.
"""

from docchat.parsing.pdf_parser import ExtractedDocument, ExtractionError, extract_text

__all__ = ["ExtractedDocument", "ExtractionError", "extract_text"]
