"""
Error taxonomy for the Glide client.

Only ConnectionClosed ends a session; every other error aborts the command in
flight and the session carries on.
"""

from typing import Optional


class GlideError(Exception):
    """Base class for all Glide client errors."""
    pass


class ConnectionClosed(GlideError):
    """Raised when a read returns zero bytes because the peer closed the stream."""

    def __init__(self, message: str = "Connection closed by server"):
        super().__init__(message)


class MalformedFrame(GlideError):
    """Raised when a received frame is not valid text or metadata."""
    pass


class ValidationRejected(GlideError):
    """Raised when operator input fails the local grammar or username rules."""
    pass


class ServerRejected(GlideError):
    """Raised when the server answers a command with an unexpected response."""

    def __init__(self, response, message: Optional[str] = None):
        self.response = response
        super().__init__(message or str(response))


class LocalIOError(GlideError):
    """Raised when a local file cannot be opened, read or written."""
    pass
