"""Duplex message channels over WebSocket connections."""

__version__ = "0.1.0"

from .channel import WebSocketChannel, connect
from .errors import (
    ChannelError,
    ChannelStateError,
    DestinationAlreadySetError,
    SinkClosedError,
    SourceAlreadySetError,
    StreamAlreadyListenedError,
    WebSocketChannelError,
)
from .sink import ConnectionSink, WebSocketSink
from .sink_completer import SinkCompleter
from .stream_completer import StreamCompleter
from .ws import connect_websocket

__all__ = [
    "ChannelError",
    "ChannelStateError",
    "ConnectionSink",
    "DestinationAlreadySetError",
    "SinkClosedError",
    "SinkCompleter",
    "SourceAlreadySetError",
    "StreamAlreadyListenedError",
    "StreamCompleter",
    "WebSocketChannel",
    "WebSocketChannelError",
    "WebSocketSink",
    "__version__",
    "connect",
    "connect_websocket",
]
