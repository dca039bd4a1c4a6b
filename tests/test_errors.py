"""Tests for channel error types."""

from __future__ import annotations

import pytest
from websockets.exceptions import ConnectionClosedError

from ws_channel.errors import (
    ChannelError,
    ChannelStateError,
    DestinationAlreadySetError,
    SinkClosedError,
    SourceAlreadySetError,
    StreamAlreadyListenedError,
    WebSocketChannelError,
)


class TestWebSocketChannelError:
    """Tests for the wrapped channel error."""

    def test_keeps_inner_error(self):
        """Test the original error is available as inner."""
        cause = OSError("refused")
        err = WebSocketChannelError("WebSocket connection failed", cause)
        assert str(err) == "WebSocket connection failed"
        assert err.inner is cause

    def test_inner_defaults_to_none(self):
        """Test inner is optional."""
        assert WebSocketChannelError("failed").inner is None

    def test_from_error_connection_closed(self):
        """Test abnormal closure gets a descriptive message."""
        cause = ConnectionClosedError(None, None)
        err = WebSocketChannelError.from_error(cause)
        assert str(err) == "WebSocket connection closed unexpectedly"
        assert err.inner is cause

    def test_from_error_uses_cause_message(self):
        """Test other errors keep their own message."""
        cause = RuntimeError("boom")
        err = WebSocketChannelError.from_error(cause)
        assert str(err) == "boom"
        assert err.inner is cause

    def test_from_error_without_message(self):
        """Test errors without a message fall back to the type name."""
        err = WebSocketChannelError.from_error(ValueError())
        assert str(err) == "ValueError"

    def test_from_error_does_not_double_wrap(self):
        """Test wrapping an already wrapped error returns it unchanged."""
        original = WebSocketChannelError("timed out", TimeoutError())
        assert WebSocketChannelError.from_error(original) is original


class TestErrorHierarchy:
    """Tests for the error class hierarchy."""

    @pytest.mark.parametrize(
        "error_cls",
        [
            DestinationAlreadySetError,
            SourceAlreadySetError,
            StreamAlreadyListenedError,
            SinkClosedError,
        ],
    )
    def test_state_errors(self, error_cls):
        """Test misuse errors share a base."""
        assert issubclass(error_cls, ChannelStateError)
        assert issubclass(error_cls, ChannelError)

    def test_wrapped_error_is_channel_error(self):
        """Test the wrapped error derives from the base."""
        assert issubclass(WebSocketChannelError, ChannelError)
        assert not issubclass(WebSocketChannelError, ChannelStateError)
