"""Unit tests for individual components in isolation.

Coverage:
    - models/: Boundary validation and event framing
    - parsing/: PDF extraction and staging cleanup
    - agent/: Configuration, context assembly, model client, stream bridge
    - storage/: In-memory stores
    - ui/: Stream consumer
"""
