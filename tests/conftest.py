"""Pytest configuration and fixtures for ws_channel tests."""

from __future__ import annotations

from collections.abc import AsyncIterator, Callable
from typing import Any
from unittest.mock import AsyncMock

import pytest

from ws_channel.sink import WebSocketSink


class FakeConnection:
    """Stand-in for a websockets ClientConnection.

    Iterating yields ``messages`` and then raises ``raise_on_end`` if given.
    Every send and close is recorded in ``events`` in call order.
    """

    def __init__(
        self,
        messages: list[Any] | None = None,
        *,
        raise_on_end: Exception | None = None,
        subprotocol: str | None = None,
    ):
        self._messages = list(messages or [])
        self._index = 0
        self._raise_on_end = raise_on_end
        self.subprotocol = subprotocol
        self.close_code: int | None = None
        self.close_reason: str | None = None
        self.events: list[tuple[Any, ...]] = []
        self.send = AsyncMock(side_effect=self._record_send)
        self.close = AsyncMock(side_effect=self._record_close)

    async def _record_send(self, message: Any) -> None:
        self.events.append(("send", message))

    async def _record_close(self, code: int = 1000, reason: str = "") -> None:
        self.events.append(("close", code, reason))
        self.close_code = code
        self.close_reason = reason

    def __aiter__(self):
        return self

    async def __anext__(self):
        if self._index < len(self._messages):
            item = self._messages[self._index]
            self._index += 1
            return item
        if self._raise_on_end is not None:
            raise self._raise_on_end
        raise StopAsyncIteration


class RecordingSink(WebSocketSink):
    """Sink that records what it receives."""

    def __init__(self) -> None:
        self.events: list[tuple[Any, ...]] = []

    def add(self, message: Any) -> None:
        self.events.append(("add", message))

    async def close(self, code: int | None = None, reason: str | None = None) -> None:
        self.events.append(("close", code, reason))


async def _aiter_items(items: list[Any]):
    for item in items:
        yield item


@pytest.fixture
def fake_connection() -> FakeConnection:
    """Create a fake connection with no inbound messages."""
    return FakeConnection(subprotocol="chat")


@pytest.fixture
def connection_factory() -> type[FakeConnection]:
    """Return the fake connection class for tests that configure their own."""
    return FakeConnection


@pytest.fixture
def recording_sink() -> RecordingSink:
    """Create a recording sink."""
    return RecordingSink()


@pytest.fixture
def sink_factory() -> type[RecordingSink]:
    """Return the recording sink class."""
    return RecordingSink


@pytest.fixture
def async_items() -> Callable[[list[Any]], AsyncIterator[Any]]:
    """Return a helper that builds an async generator over a list."""
    return _aiter_items
