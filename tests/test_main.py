"""Tests for command line parsing."""

import pytest

from embyconnect.__main__ import build_parser, handoff_failed_status


class TestBuildParser:
    """Tests for the argument parser."""

    def test_defaults(self) -> None:
        """Test defaults without arguments."""
        parsed = build_parser().parse_args([])
        assert parsed.debug is False
        assert parsed.delay is None

    def test_debug_and_delay(self) -> None:
        """Test the debug flag and delay override."""
        parsed = build_parser().parse_args(["--debug", "--delay", "0.5"])
        assert parsed.debug is True
        assert parsed.delay == 0.5

    def test_invalid_delay(self) -> None:
        """Test that a non-numeric delay is rejected."""
        with pytest.raises(SystemExit):
            build_parser().parse_args(["--delay", "soon"])


class TestHandoffFailedStatus:
    """Tests for the message shown when no browser opens."""

    def test_shows_url_as_error(self) -> None:
        """Test that the URL to copy is shown and flagged as an error."""
        url = "http://10.0.0.5:8096/web/index.html"
        message = handoff_failed_status(url)
        assert message.is_error is True
        assert url in message.text
        assert "Copy" in message.text
