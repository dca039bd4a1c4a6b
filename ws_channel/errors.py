"""Error types for WebSocket channel failures."""

from __future__ import annotations

from websockets.exceptions import ConnectionClosed


class ChannelError(Exception):
    """Base error for WebSocket channel failures."""


class WebSocketChannelError(ChannelError):
    """Failure while connecting or while reading from the connection.

    Connect errors, connect timeouts and read errors are all reported with
    this one type. The original exception is kept in ``inner``.
    """

    def __init__(self, message: str, inner: BaseException | None = None) -> None:
        super().__init__(message)
        self.inner = inner

    @classmethod
    def from_error(cls, error: BaseException) -> WebSocketChannelError:
        """Wrap an arbitrary transport error."""
        if isinstance(error, cls):
            return error
        if isinstance(error, ConnectionClosed):
            return cls("WebSocket connection closed unexpectedly", error)
        return cls(str(error) or type(error).__name__, error)


class ChannelStateError(ChannelError):
    """A channel component was used in a state that does not allow it."""


class DestinationAlreadySetError(ChannelStateError):
    """The deferred sink already has a destination."""


class SourceAlreadySetError(ChannelStateError):
    """The deferred stream already has a source."""


class StreamAlreadyListenedError(ChannelStateError):
    """The single-subscription stream already has a listener."""


class SinkClosedError(ChannelStateError):
    """Message added to a sink after close was requested."""
