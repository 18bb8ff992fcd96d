"""docchat - document-aware streaming chat over a hosted LLM.

Combines FastAPI for HTTP streaming, Agno for model orchestration,
pypdf for document text, NiceGUI for the chat page, and Pydantic for
data validation.

Components:
    - api: HTTP endpoints and the streaming chat route
    - agent: Context assembly, model client and stream bridge
    - parsing: PDF text extraction
    - storage: Chat and file metadata stores
    - ui: Stream consumer and chat page
    - models: Request, event and record schemas
"""

__version__ = "0.1.0"
