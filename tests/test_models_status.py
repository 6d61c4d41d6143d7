"""Tests for connection state and status models."""

import pytest

from embyconnect.models.status import ConnectionState, StatusMessage


class TestConnectionState:
    """Tests for ConnectionState helpers."""

    @pytest.mark.parametrize(
        "state",
        [
            ConnectionState.CHECKING_MANUAL,
            ConnectionState.CHECKING_SAVED,
            ConnectionState.DISCOVERING,
        ],
    )
    def test_busy_states(self, state: ConnectionState) -> None:
        """Test that in-flight states are busy and reject input."""
        assert state.is_busy is True
        assert state.accepts_input is False

    @pytest.mark.parametrize(
        "state", [ConnectionState.INITIALIZING, ConnectionState.REDIRECTING]
    )
    def test_closed_states(self, state: ConnectionState) -> None:
        """Test that startup and hand-off reject input without being busy."""
        assert state.is_busy is False
        assert state.accepts_input is False

    def test_idle_accepts_input(self) -> None:
        """Test that only IDLE accepts input."""
        assert ConnectionState.IDLE.accepts_input is True
        assert [s for s in ConnectionState if s.accepts_input] == [ConnectionState.IDLE]


class TestStatusMessage:
    """Tests for StatusMessage."""

    def test_defaults_to_normal(self) -> None:
        """Test that messages are not errors by default."""
        assert StatusMessage("hello").is_error is False

    def test_frozen(self) -> None:
        """Test that messages are immutable."""
        message = StatusMessage("hello")
        with pytest.raises(AttributeError):
            message.text = "bye"  # type: ignore[misc]
