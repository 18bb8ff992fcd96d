"""Error taxonomy shared by the bridge, the routes and the consumer."""


class ChatError(Exception):
    """Base class for failures surfaced by the chat pipeline."""

    pass


class InputError(ChatError):
    """Raised when a request is rejected before any upstream call.

    Covers a missing prompt, malformed history JSON and unknown turn roles.
    """

    pass


class UpstreamError(ChatError):
    """Raised when the model call fails, errors mid-stream or runs out of time."""

    pass


class TransportError(ChatError):
    """Raised on the client side when the response stream breaks."""

    pass
