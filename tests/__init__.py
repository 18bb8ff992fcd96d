"""Test package for docchat.

Structure:
    - unit/: Individual modules in isolation
    - integration/: The FastAPI app end to end through httpx

The model is always replaced by a scripted client; PDFs are generated
in memory by conftest. Leverages pytest with pytest-check for soft assertions.
"""
