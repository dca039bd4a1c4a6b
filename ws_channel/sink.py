"""Outbound message sinks."""

from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from collections import deque
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from .errors import SinkClosedError

if TYPE_CHECKING:
    from collections.abc import AsyncIterable

    from websockets.asyncio.client import ClientConnection
    from websockets.typing import Data

_LOGGER = logging.getLogger(__name__)


class WebSocketSink(ABC):
    """Writable side of a WebSocket channel."""

    @abstractmethod
    def add(self, message: Data) -> None:
        """Queue a message for sending. Never suspends."""

    @abstractmethod
    async def close(self, code: int | None = None, reason: str | None = None) -> None:
        """Close the connection after every message added so far.

        Args:
            code: Close status code; transport default when omitted
            reason: Human-readable close reason; transport default when omitted
        """

    async def add_stream(self, messages: AsyncIterable[Data]) -> None:
        """Add every message produced by ``messages``, in order."""
        async for message in messages:
            self.add(message)


@dataclass(slots=True)
class _CloseRequest:
    """Close queued behind the outbound messages."""

    code: int | None
    reason: str | None
    done: asyncio.Future[None] = field(
        default_factory=lambda: asyncio.get_running_loop().create_future()
    )


class ConnectionSink(WebSocketSink):
    """Sink that forwards messages and close requests to a connection.

    Messages are sent unmodified and in the order they were added. Send and
    close errors are raised as the connection raised them. Close is always
    forwarded; an earlier send failure is raised once the close completes.
    """

    def __init__(self, connection: ClientConnection) -> None:
        self._connection = connection
        self._outbound: deque[Data | _CloseRequest] = deque()
        self._writer: asyncio.Task[None] | None = None
        self._close_request: _CloseRequest | None = None
        self._error: Exception | None = None

    def add(self, message: Data) -> None:
        if self._close_request is not None:
            raise SinkClosedError("Cannot add a message after closing")
        if self._error is not None:
            raise self._error
        self._enqueue(message)

    async def close(self, code: int | None = None, reason: str | None = None) -> None:
        if self._close_request is None:
            self._close_request = _CloseRequest(code, reason)
            self._enqueue(self._close_request)
        await asyncio.shield(self._close_request.done)

    def _enqueue(self, item: Data | _CloseRequest) -> None:
        self._outbound.append(item)
        if self._writer is None or self._writer.done():
            self._writer = asyncio.get_running_loop().create_task(self._drain())

    async def _drain(self) -> None:
        while self._outbound:
            item = self._outbound.popleft()
            if isinstance(item, _CloseRequest):
                await self._send_close(item)
                continue
            if self._error is not None:
                _LOGGER.warning(
                    "Dropping WebSocket message queued after a failed send: %s",
                    self._error,
                )
                continue
            try:
                await self._connection.send(item)
            except Exception as err:
                _LOGGER.warning("WebSocket send failed: %s", err)
                self._error = err

    async def _send_close(self, request: _CloseRequest) -> None:
        kwargs: dict[str, int | str] = {}
        if request.code is not None:
            kwargs["code"] = request.code
        if request.reason is not None:
            kwargs["reason"] = request.reason
        try:
            await self._connection.close(**kwargs)
        except Exception as err:
            request.done.set_exception(err)
            return

        if self._error is not None:
            request.done.set_exception(self._error)
        else:
            request.done.set_result(None)
