"""Tests for the Emby reachability probe."""

import http.client
import socket
import threading
import urllib.error
from collections.abc import Generator
from unittest.mock import MagicMock, patch

import pytest

from embyconnect.core.reachability import REQUEST_TIMEOUT, EmbyServerProbe, ReachabilityError


def _response(status: int) -> MagicMock:
    """Return a mock urlopen context manager answering with a status."""
    response = MagicMock()
    response.status = status
    response.__enter__.return_value = response
    response.__exit__.return_value = False
    return response


@pytest.fixture
def banner_server() -> Generator[int, None, None]:
    """Serve an SSH banner on a local port and yield the port."""
    server = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    server.bind(("127.0.0.1", 0))
    server.listen(1)
    server.settimeout(5.0)

    def serve() -> None:
        try:
            conn, _ = server.accept()
        except OSError:
            return
        with conn:
            conn.sendall(b"SSH-2.0-OpenSSH_9.0\r\n")

    thread = threading.Thread(target=serve, daemon=True)
    thread.start()
    yield server.getsockname()[1]
    server.close()
    thread.join(timeout=5.0)


class TestEmbyServerProbe:
    """Tests for EmbyServerProbe."""

    def test_default_timeout(self) -> None:
        """Test the default request timeout."""
        assert EmbyServerProbe().timeout == REQUEST_TIMEOUT == 10.0

    @pytest.mark.asyncio
    async def test_ok_is_reachable(self) -> None:
        """Test that HTTP 200 means reachable."""
        probe = EmbyServerProbe(timeout=3.0)
        with patch("urllib.request.urlopen", return_value=_response(200)) as mock_open:
            assert await probe.check("10.0.0.5") is True

        request = mock_open.call_args.args[0]
        assert request.full_url == "http://10.0.0.5:8096/System/Info/Public"
        assert mock_open.call_args.kwargs["timeout"] == 3.0

    @pytest.mark.asyncio
    async def test_scheme_prefixed_url(self) -> None:
        """Test that a URL with scheme probes under that URL."""
        probe = EmbyServerProbe()
        with patch("urllib.request.urlopen", return_value=_response(204)) as mock_open:
            assert await probe.check("https://emby.example.com") is True

        request = mock_open.call_args.args[0]
        assert request.full_url == "https://emby.example.com/System/Info/Public"

    @pytest.mark.asyncio
    async def test_http_error_is_unreachable(self) -> None:
        """Test that an HTTP error status means unreachable."""
        probe = EmbyServerProbe()
        error = urllib.error.HTTPError("http://x", 404, "Not Found", {}, None)  # type: ignore[arg-type]
        with patch("urllib.request.urlopen", side_effect=error):
            assert await probe.check("10.0.0.5") is False

    @pytest.mark.asyncio
    async def test_connection_refused_is_unreachable(self) -> None:
        """Test that a network error means unreachable."""
        probe = EmbyServerProbe()
        error = urllib.error.URLError(ConnectionRefusedError(111, "Connection refused"))
        with patch("urllib.request.urlopen", side_effect=error):
            assert await probe.check("10.0.0.5") is False

    @pytest.mark.asyncio
    async def test_timeout_is_unreachable(self) -> None:
        """Test that a timeout means unreachable."""
        probe = EmbyServerProbe()
        with patch("urllib.request.urlopen", side_effect=TimeoutError("timed out")):
            assert await probe.check("10.0.0.5") is False

    @pytest.mark.asyncio
    async def test_wrong_protocol_is_unreachable(
        self, banner_server: int, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Test that a non-HTTP service on the port means unreachable."""
        monkeypatch.setenv("no_proxy", "*")
        monkeypatch.setenv("NO_PROXY", "*")
        probe = EmbyServerProbe(timeout=3.0)
        assert await probe.check(f"127.0.0.1:{banner_server}") is False

    @pytest.mark.asyncio
    async def test_bad_status_line_is_unreachable(self) -> None:
        """Test that a garbled HTTP answer means unreachable."""
        probe = EmbyServerProbe()
        error = http.client.BadStatusLine("SSH-2.0-OpenSSH_9.0")
        with patch("urllib.request.urlopen", side_effect=error):
            assert await probe.check("10.0.0.5") is False

    @pytest.mark.asyncio
    @pytest.mark.parametrize("address", ["host:abc", "host:99999", "http://:8096"])
    async def test_malformed_address_raises(self, address: str) -> None:
        """Test that an address with a bad port or no host raises before any request."""
        probe = EmbyServerProbe()
        with patch("urllib.request.urlopen") as mock_open, pytest.raises(ReachabilityError):
            await probe.check(address)
        mock_open.assert_not_called()

    @pytest.mark.asyncio
    async def test_invalid_url_from_http_client_raises(self) -> None:
        """Test that a URL rejected by http.client raises instead of reading as unreachable."""
        probe = EmbyServerProbe()
        error = http.client.InvalidURL("nonnumeric port")
        with patch("urllib.request.urlopen", side_effect=error), pytest.raises(ReachabilityError):
            await probe.check("10.0.0.5")

    @pytest.mark.asyncio
    async def test_empty_address_raises(self) -> None:
        """Test that an empty address raises without a request."""
        probe = EmbyServerProbe()
        with patch("urllib.request.urlopen") as mock_open, pytest.raises(ReachabilityError):
            await probe.check("   ")
        mock_open.assert_not_called()
