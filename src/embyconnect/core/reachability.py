"""Reachability check for Emby servers.

A server counts as reachable when its public system info endpoint answers
with a 2xx status. Anything else (refused, timed out, wrong port, not Emby)
is reported as unreachable. Only an address that cannot be turned into a
request at all raises.
"""

from __future__ import annotations

import asyncio
import http.client
import logging
import urllib.error
import urllib.request
from typing import Protocol
from urllib.parse import urlsplit

from embyconnect.models.address import probe_url

logger = logging.getLogger(__name__)

# Request timeout in seconds
REQUEST_TIMEOUT = 10.0

USER_AGENT = "EmbyConnect/0.1"


class ReachabilityError(Exception):
    """The reachability check itself could not be performed."""


class ReachabilityOracle(Protocol):
    """Anything that can tell whether a server is live at an address."""

    async def check(self, address: str) -> bool:
        """Return True iff a server is confirmed live at ``address``."""
        ...


class EmbyServerProbe:
    """Check an address by fetching ``/System/Info/Public``.

    Example:
        probe = EmbyServerProbe(timeout=5.0)
        if await probe.check("192.168.1.100"):
            print("Emby is up")
    """

    def __init__(self, timeout: float = REQUEST_TIMEOUT) -> None:
        """Initialize the probe.

        Args:
            timeout: Per-request timeout in seconds.
        """
        self._timeout = timeout

    @property
    def timeout(self) -> float:
        """Return the request timeout in seconds."""
        return self._timeout

    async def check(self, address: str) -> bool:
        """Check whether an Emby server answers at an address.

        Args:
            address: Bare host or URL, as typed by the user.

        Returns:
            True if the server answered with a 2xx status.

        Raises:
            ReachabilityError: If the address cannot form a request.
        """
        if not address.strip():
            raise ReachabilityError("Empty server address")

        url = probe_url(address)
        try:
            parts = urlsplit(url)
            # .port raises ValueError for a non-numeric or out-of-range port
            if parts.port == 0 or not parts.hostname:
                raise ValueError("missing host or port")
            request = urllib.request.Request(url, headers={"User-Agent": USER_AGENT})
        except ValueError as e:
            raise ReachabilityError(f"Invalid server address {address!r}: {e}") from e

        # Run blocking request in thread pool
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self._fetch_status, request)

    def _fetch_status(self, request: urllib.request.Request) -> bool:
        """Perform the HTTP request (blocking).

        Args:
            request: Prepared request for the probe URL.

        Returns:
            True on a 2xx response.
        """
        url = request.full_url
        try:
            with urllib.request.urlopen(request, timeout=self._timeout) as response:  # noqa: S310
                status = response.status
        except urllib.error.HTTPError as e:
            logger.debug("Server at %s answered HTTP %d", url, e.code)
            return False
        except http.client.InvalidURL as e:
            raise ReachabilityError(f"Invalid server URL {url}: {e}") from e
        except (urllib.error.URLError, OSError, http.client.HTTPException) as e:
            # URLError covers refused connections and DNS failures, OSError covers timeouts,
            # HTTPException covers a non-HTTP service on the port
            logger.info("Error connecting to Emby server at %s: %s", url, e)
            return False

        logger.debug("Server at %s answered HTTP %d", url, status)
        return 200 <= status < 300
