"""Sink that can be written to before its destination exists."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from .errors import DestinationAlreadySetError, SinkClosedError
from .sink import WebSocketSink

if TYPE_CHECKING:
    from websockets.typing import Data

_LOGGER = logging.getLogger(__name__)


class SinkCompleter:
    """Hands out a sink now and attaches its destination later.

    Usage:
        completer = SinkCompleter()
        completer.sink.add("hello")  # queued
        completer.set_destination_sink(ConnectionSink(connection))  # flushed

    The destination can be set once. If it never will be, ``abandon`` drops
    whatever was queued.
    """

    def __init__(self) -> None:
        self.sink = _CompleterSink()

    @property
    def is_bound(self) -> bool:
        """Whether a destination has been attached."""
        return self.sink._destination is not None

    def set_destination_sink(self, destination: WebSocketSink) -> None:
        """Attach the real sink and replay queued operations into it.

        Raises:
            DestinationAlreadySetError: If a destination was already set or the
                completer was abandoned
        """
        if self.sink._destination is not None or self.sink._abandoned:
            raise DestinationAlreadySetError("Destination sink already set")
        self.sink._set_destination(destination)

    def abandon(self) -> None:
        """Give up on ever binding a destination.

        Queued messages are discarded, later messages are ignored and close
        calls return immediately. Does nothing once a destination is set.
        """
        if self.sink._destination is not None or self.sink._abandoned:
            return
        self.sink._abandon()


class _CompleterSink(WebSocketSink):
    """Sink side of a SinkCompleter."""

    def __init__(self) -> None:
        self._destination: WebSocketSink | None = None
        self._abandoned = False
        self._pending: list[Data] = []
        self._close_args: tuple[int | None, str | None] | None = None
        self._close_done: asyncio.Future[None] | None = None
        self._close_task: asyncio.Task[None] | None = None

    def add(self, message: Data) -> None:
        if self._close_args is not None:
            raise SinkClosedError("Cannot add a message after closing")
        if self._destination is not None:
            self._destination.add(message)
            return
        if self._abandoned:
            _LOGGER.debug("Dropping message for a sink that will never connect")
            return
        self._pending.append(message)

    async def close(self, code: int | None = None, reason: str | None = None) -> None:
        if self._close_done is not None:
            await asyncio.shield(self._close_done)
            return
        if self._destination is not None:
            await self._destination.close(code, reason)
            return
        if self._abandoned:
            return
        self._close_args = (code, reason)
        self._close_done = asyncio.get_running_loop().create_future()
        await asyncio.shield(self._close_done)

    def _set_destination(self, destination: WebSocketSink) -> None:
        _LOGGER.debug("Flushing %d queued message(s) to destination", len(self._pending))
        self._destination = destination
        pending, self._pending = self._pending, []
        for message in pending:
            destination.add(message)

        if self._close_done is not None and self._close_args is not None:
            code, reason = self._close_args
            self._close_task = asyncio.get_running_loop().create_task(
                self._forward_close(destination, code, reason, self._close_done)
            )

    def _abandon(self) -> None:
        _LOGGER.debug("Discarding %d queued message(s)", len(self._pending))
        self._abandoned = True
        self._pending.clear()
        if self._close_done is not None and not self._close_done.done():
            self._close_done.set_result(None)

    @staticmethod
    async def _forward_close(
        destination: WebSocketSink,
        code: int | None,
        reason: str | None,
        done: asyncio.Future[None],
    ) -> None:
        try:
            await destination.close(code, reason)
        except Exception as err:
            done.set_exception(err)
        else:
            done.set_result(None)
