"""Integration tests for the HTTP API with a scripted model client.

Coverage:
    - Streaming chat endpoint, including upload and error paths
    - Client-side consumer reading the real endpoint
    - Chat and file metadata routes
"""
