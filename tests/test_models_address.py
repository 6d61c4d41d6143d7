"""Tests for server address normalization."""

import pytest

from embyconnect.models.address import (
    DEFAULT_PORT,
    base_url,
    has_scheme,
    normalize_url,
    probe_url,
)


class TestHasScheme:
    """Tests for scheme detection."""

    @pytest.mark.parametrize(
        "address",
        ["http://10.0.0.5", "https://emby.example.com", "HTTP://host", "  https://host  "],
    )
    def test_scheme_detected(self, address: str) -> None:
        """Test addresses with a scheme prefix."""
        assert has_scheme(address) is True

    @pytest.mark.parametrize("address", ["10.0.0.5", "nas.local:8096", "httpserver", "http:/typo"])
    def test_no_scheme(self, address: str) -> None:
        """Test bare hosts, including ones that merely start with 'http'."""
        assert has_scheme(address) is False


class TestNormalizeUrl:
    """Tests for the hand-off URL."""

    def test_bare_ip(self) -> None:
        """Test that a bare IP gets http and the default port."""
        assert normalize_url("10.0.0.5") == "http://10.0.0.5:8096/web/index.html"

    def test_bare_hostname(self) -> None:
        """Test that a bare hostname gets http and the default port."""
        assert normalize_url("nas.local") == f"http://nas.local:{DEFAULT_PORT}/web/index.html"

    def test_scheme_prefixed(self) -> None:
        """Test that a URL with scheme is used as-is."""
        assert (
            normalize_url("https://myemby.example.com:8096")
            == "https://myemby.example.com:8096/web/index.html"
        )

    def test_trailing_slash_stripped(self) -> None:
        """Test that a trailing slash does not produce a double slash."""
        assert normalize_url("https://emby.example.com/") == "https://emby.example.com/web/index.html"

    def test_bare_host_with_port_keeps_port(self) -> None:
        """Test that an explicit port on a bare host is not doubled."""
        assert normalize_url("nas.local:8920") == "http://nas.local:8920/web/index.html"

    def test_whitespace_trimmed(self) -> None:
        """Test that surrounding whitespace is ignored."""
        assert normalize_url("  10.0.0.5 ") == "http://10.0.0.5:8096/web/index.html"

    @pytest.mark.parametrize(
        "address", ["https://myemby.example.com:8096", "10.0.0.5", "http://host/"]
    )
    def test_idempotent(self, address: str) -> None:
        """Test that normalizing twice appends the web client path once."""
        once = normalize_url(address)
        assert normalize_url(once) == once
        assert once.count("/web/index.html") == 1


class TestProbeUrl:
    """Tests for the reachability probe URL."""

    def test_bare_ip(self) -> None:
        """Test the probe URL for a bare IP."""
        assert probe_url("10.0.0.5") == "http://10.0.0.5:8096/System/Info/Public"

    def test_scheme_prefixed(self) -> None:
        """Test the probe URL for a URL with scheme."""
        assert (
            probe_url("https://emby.example.com")
            == "https://emby.example.com/System/Info/Public"
        )

    def test_from_web_client_url(self) -> None:
        """Test that a web client URL probes the server root."""
        assert (
            probe_url("http://10.0.0.5:8096/web/index.html")
            == "http://10.0.0.5:8096/System/Info/Public"
        )


class TestBaseUrl:
    """Tests for the server root URL."""

    def test_invalid_port_kept_as_typed(self) -> None:
        """Test that a malformed port is not hidden behind the default port."""
        assert base_url("host:99999") == "http://host:99999"
        assert base_url("host:abc") == "http://host:abc"
