"""WebSocket helpers for channel transports."""

from __future__ import annotations

import asyncio
from collections.abc import Iterable, Mapping

import websockets
from websockets.asyncio.client import ClientConnection
from websockets.exceptions import (
    InvalidHandshake,
    InvalidURI,
    WebSocketException,
)

from .errors import WebSocketChannelError

CLOSE_TIMEOUT = 5
MAX_MESSAGE_SIZE: int | None = None


async def connect_websocket(
    url: str,
    *,
    subprotocols: Iterable[str] | None = None,
    headers: Mapping[str, str] | None = None,
    ping_interval: float | None = None,
    timeout: float | None = None,
) -> ClientConnection:
    """Connect to a WebSocket endpoint.

    Args:
        url: ws:// or wss:// URI of the endpoint
        subprotocols: Sub-protocols offered in the handshake
        headers: Extra HTTP headers sent with the handshake
        ping_interval: Interval for ping frames; a pong must arrive within
            the same interval. None disables keepalive pings.
        timeout: Connection timeout, covering the TCP connect and the
            handshake; None waits until the handshake finishes

    Raises:
        WebSocketChannelError: If the connection could not be established
    """
    try:
        return await asyncio.wait_for(
            websockets.connect(
                url,
                subprotocols=list(subprotocols) if subprotocols is not None else None,
                additional_headers=dict(headers) if headers is not None else None,
                ping_interval=ping_interval,
                ping_timeout=ping_interval,
                open_timeout=timeout,
                close_timeout=CLOSE_TIMEOUT,
                max_size=MAX_MESSAGE_SIZE,
            ),
            timeout=timeout,
        )
    except TimeoutError as err:
        raise WebSocketChannelError("WebSocket connection timed out", err) from err
    except (InvalidHandshake, InvalidURI) as err:
        raise WebSocketChannelError("WebSocket handshake failed", err) from err
    except (OSError, WebSocketException) as err:
        raise WebSocketChannelError("WebSocket connection failed", err) from err
