"""Duplex message channel over a WebSocket connection.

A channel exposes the connection as two halves:
- ``stream``: single-subscription async iterable of inbound messages
- ``sink``: outbound messages plus close with code and reason

``WebSocketChannel.connect`` returns a channel synchronously, before the
handshake has finished. Until then writes are queued on a deferred sink and
readers wait on a deferred stream. Connect and read failures are raised from
``stream`` as WebSocketChannelError; ``ready`` only completes on success.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterable, AsyncIterator, Iterable, Mapping
from typing import TYPE_CHECKING, Any

from .errors import WebSocketChannelError
from .sink import ConnectionSink, WebSocketSink
from .sink_completer import SinkCompleter
from .stream_completer import StreamCompleter
from .ws import connect_websocket

if TYPE_CHECKING:
    from types import TracebackType

    from websockets.asyncio.client import ClientConnection
    from websockets.typing import Data

_LOGGER = logging.getLogger(__name__)


class WebSocketChannel:
    """Duplex channel backed by a websockets ClientConnection.

    Usage:
        channel = WebSocketChannel.connect("ws://localhost:8765", timeout=5)
        channel.sink.add("hello")
        async for message in channel.stream:
            ...
        await channel.sink.close(CloseCode.NORMAL_CLOSURE, "done")
    """

    def __init__(self, connection: ClientConnection) -> None:
        """Wrap an already connected socket. The channel is ready at once."""
        stream: StreamCompleter[Data] = StreamCompleter()
        stream.set_source_stream(connection)
        self._setup(stream.stream, ConnectionSink(connection))
        self._connection = connection
        self._ready.set_result(None)

    @classmethod
    def connect(
        cls,
        url: Any,
        *,
        protocols: Iterable[str] | None = None,
        headers: Mapping[str, str] | None = None,
        ping_interval: float | None = None,
        timeout: float | None = None,
    ) -> WebSocketChannel:
        """Create a channel and connect it in the background.

        Must be called while an event loop is running. The channel is returned
        immediately; await ``ready`` to wait for the handshake.

        Args:
            url: Endpoint URI, as a string or any object whose str() is one
            protocols: Sub-protocols offered in the handshake
            headers: Extra HTTP headers sent with the handshake
            ping_interval: Keepalive ping interval in seconds. A pong must
                arrive within the same interval or the connection is closed.
                None disables pings.
            timeout: Seconds to wait for the connection; None waits until the
                handshake finishes

        If the connection fails, ``stream`` raises a WebSocketChannelError
        wrapping the cause and then ends.
        """
        channel = cls.__new__(cls)
        sink_completer = SinkCompleter()
        stream = StreamCompleter.from_future(
            channel._establish(
                str(url),
                sink_completer,
                protocols=protocols,
                headers=headers,
                ping_interval=ping_interval,
                timeout=timeout,
            )
        )
        channel._setup(stream, sink_completer.sink)
        return channel

    def _setup(self, stream: AsyncIterable[Data], sink: WebSocketSink) -> None:
        self._connection: ClientConnection | None = None
        self._ready: asyncio.Future[None] = asyncio.get_running_loop().create_future()
        self.stream: AsyncIterable[Data] = _TranslatedStream(stream)
        self.sink = sink

    async def _establish(
        self,
        url: str,
        sink_completer: SinkCompleter,
        *,
        protocols: Iterable[str] | None,
        headers: Mapping[str, str] | None,
        ping_interval: float | None,
        timeout: float | None,
    ) -> ClientConnection:
        _LOGGER.debug("Connecting to %s", url)
        try:
            connection = await connect_websocket(
                url,
                subprotocols=protocols,
                headers=headers,
                ping_interval=ping_interval,
                timeout=timeout,
            )
            self._connection = connection
            self._ready.set_result(None)
            sink_completer.set_destination_sink(ConnectionSink(connection))
        except Exception as err:
            _LOGGER.warning("WebSocket connection to %s failed: %s", url, err)
            sink_completer.abandon()
            raise

        _LOGGER.info(
            "WebSocket connected to %s (subprotocol=%s)", url, connection.subprotocol
        )
        return connection

    @property
    def ready(self) -> asyncio.Future[None]:
        """Completes once the connection is established. Never fails."""
        return self._ready

    @property
    def protocol(self) -> str | None:
        """Sub-protocol negotiated during the handshake."""
        if self._connection is None:
            return None
        return self._connection.subprotocol

    @property
    def close_code(self) -> int | None:
        """Close code, once the connection is closed."""
        if self._connection is None:
            return None
        return self._connection.close_code

    @property
    def close_reason(self) -> str | None:
        """Close reason, once the connection is closed."""
        if self._connection is None:
            return None
        return self._connection.close_reason

    async def __aenter__(self) -> WebSocketChannel:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.sink.close()


def connect(
    url: Any,
    *,
    protocols: Iterable[str] | None = None,
    headers: Mapping[str, str] | None = None,
    ping_interval: float | None = None,
    timeout: float | None = None,
) -> WebSocketChannel:
    """Shortcut for WebSocketChannel.connect."""
    return WebSocketChannel.connect(
        url,
        protocols=protocols,
        headers=headers,
        ping_interval=ping_interval,
        timeout=timeout,
    )


class _TranslatedStream:
    """Re-raises inbound failures as WebSocketChannelError."""

    def __init__(self, source: AsyncIterable[Data]) -> None:
        self._source = source

    def __aiter__(self) -> AsyncIterator[Data]:
        return _translate_errors(self._source.__aiter__())


async def _translate_errors(messages: AsyncIterator[Data]) -> AsyncIterator[Data]:
    try:
        async for message in messages:
            yield message
    except WebSocketChannelError:
        raise
    except Exception as err:
        _LOGGER.debug("WebSocket read failed: %s", err)
        raise WebSocketChannelError.from_error(err) from err
