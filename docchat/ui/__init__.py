"""Client side of the chat: stream consumer and NiceGUI display layer.

Responsibilities:
    - Reassemble the streamed answer and report a final result
    - Keep conversation state and cached document text on the client
    - Persist finished turns and uploads through the chat and file routes
    - Thin NiceGUI page that shows the answer as it grows

The NiceGUI page is imported explicitly by the entry point so that the
consumer can be used without NiceGUI.
"""
