"""Single-subscription stream whose source is supplied later."""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterable, AsyncIterator, Awaitable
from typing import Generic, TypeVar, cast

from .errors import SourceAlreadySetError, StreamAlreadyListenedError

T = TypeVar("T")


class StreamCompleter(Generic[T]):
    """Hands out a stream now and attaches its source later.

    A listener may start iterating ``stream`` before the source is known; it
    waits until ``set_source_stream`` or ``set_error`` is called and then
    receives the source's elements from the start, in order.
    """

    def __init__(self) -> None:
        self._stream = _CompleterStream(self)
        self._source: AsyncIterable[T] | None = None
        self._error: BaseException | None = None
        self._resolved = asyncio.Event()
        self._resolver: asyncio.Task[None] | None = None

    @classmethod
    def from_future(cls, source: Awaitable[AsyncIterable[T]]) -> AsyncIterable[T]:
        """Build a stream from an awaitable that produces the source.

        If the awaitable raises, the stream raises that error once and ends.
        Must be called while an event loop is running.
        """
        completer: StreamCompleter[T] = cls()
        completer._resolver = asyncio.ensure_future(completer._resolve(source))
        return completer.stream

    @property
    def stream(self) -> AsyncIterable[T]:
        """The single-subscription stream."""
        return self._stream

    @property
    def is_resolved(self) -> bool:
        """Whether a source or an error has been supplied."""
        return self._resolved.is_set()

    def set_source_stream(self, source: AsyncIterable[T]) -> None:
        """Supply the stream's source.

        Raises:
            SourceAlreadySetError: If a source or error was already supplied
        """
        self._check_unresolved()
        self._source = source
        self._resolved.set()

    def set_error(self, error: BaseException) -> None:
        """Make the stream raise ``error`` once and end.

        Raises:
            SourceAlreadySetError: If a source or error was already supplied
        """
        self._check_unresolved()
        self._error = error
        self._resolved.set()

    def _check_unresolved(self) -> None:
        if self._resolved.is_set():
            raise SourceAlreadySetError("Source stream already set")

    async def _resolve(self, source: Awaitable[AsyncIterable[T]]) -> None:
        try:
            resolved = await source
        except Exception as err:
            self.set_error(err)
        else:
            self.set_source_stream(resolved)

    async def _iterate(self) -> AsyncIterator[T]:
        await self._resolved.wait()
        if self._error is not None:
            raise self._error
        source = cast("AsyncIterable[T]", self._source)
        async for item in source:
            yield item


class _CompleterStream(Generic[T]):
    """Stream side of a StreamCompleter."""

    def __init__(self, completer: StreamCompleter[T]) -> None:
        self._completer = completer
        self._listened = False

    def __aiter__(self) -> AsyncIterator[T]:
        if self._listened:
            raise StreamAlreadyListenedError("Stream has already been listened to")
        self._listened = True
        return self._completer._iterate()
