"""Emby server discovery on a Tailscale network.

Lists the online peers reported by ``tailscale status --json`` and probes
each one for an Emby server on the default port. The first peer that
answers wins.

Note: discovery only sees devices that share the tailnet with this machine
and have Tailscale running. Servers reachable only through a LAN address
still have to be entered manually.
"""

from __future__ import annotations

import asyncio
import ipaddress
import json
import logging
import shutil
import subprocess
from dataclasses import dataclass, field
from typing import Any, Protocol, cast

from embyconnect.core.reachability import ReachabilityOracle
from embyconnect.models.status import DiscoveryErrorKind

logger = logging.getLogger(__name__)

TAILSCALE_BINARY = "tailscale"

# Timeout for ``tailscale status`` in seconds
COMMAND_TIMEOUT = 10.0

# Error texts, also used to classify errors from foreign discovery oracles
TOOL_UNAVAILABLE_TEXT = "Tailscale not found or not running"
NO_PEERS_TEXT = "No Tailscale devices found"

_TOOL_UNAVAILABLE_MARKERS = ("not found", "not running", "not installed")
_NO_PEERS_MARKERS = (NO_PEERS_TEXT.lower(), "no peer")


class DiscoveryError(Exception):
    """Discovery could not produce a result.

    Attributes:
        kind: Category used to pick the guidance shown to the user.
    """

    def __init__(self, kind: DiscoveryErrorKind, message: str) -> None:
        super().__init__(message)
        self.kind = kind


def classify_discovery_error(error: BaseException) -> DiscoveryError:
    """Return a typed DiscoveryError for any discovery failure.

    Errors raised by ``TailscaleDiscovery`` are already typed. Plain
    exceptions from other oracles are classified by their message text,
    unknown messages are kept verbatim.

    Args:
        error: Exception raised while discovering.

    Returns:
        DiscoveryError carrying a kind and the original message.
    """
    if isinstance(error, DiscoveryError):
        return error

    message = str(error) or type(error).__name__
    lowered = message.lower()
    if any(marker in lowered for marker in _NO_PEERS_MARKERS):
        return DiscoveryError(DiscoveryErrorKind.NO_PEERS, message)
    if any(marker in lowered for marker in _TOOL_UNAVAILABLE_MARKERS):
        return DiscoveryError(DiscoveryErrorKind.TOOL_UNAVAILABLE, message)
    return DiscoveryError(DiscoveryErrorKind.OTHER, message)


class DiscoveryOracle(Protocol):
    """Anything that can search for a candidate server address."""

    async def find(self) -> str | None:
        """Return a bare host of a live server, or None if none was found."""
        ...


@dataclass
class TailscalePeer:
    """An online device on the tailnet."""

    hostname: str
    addresses: list[str] = field(default_factory=list)

    @property
    def ipv4(self) -> str | None:
        """Return the first IPv4 address, if any."""
        for addr in self.addresses:
            try:
                if ipaddress.ip_address(addr).version == 4:
                    return addr
            except ValueError:
                continue
        return None


def parse_status(output: str) -> list[TailscalePeer]:
    """Parse ``tailscale status --json`` output into online peers.

    Args:
        output: Raw JSON printed by the CLI.

    Returns:
        Online peers that have at least one IPv4 address.

    Raises:
        DiscoveryError: If the output is not JSON or Tailscale is not running.
    """
    try:
        data = json.loads(output)
    except json.JSONDecodeError as e:
        raise DiscoveryError(
            DiscoveryErrorKind.OTHER, f"Could not parse Tailscale status: {e}"
        ) from e
    if not isinstance(data, dict):
        raise DiscoveryError(DiscoveryErrorKind.OTHER, "Unexpected Tailscale status format")

    status = cast(dict[str, Any], data)
    backend_state = status.get("BackendState")
    if backend_state is not None and backend_state != "Running":
        raise DiscoveryError(
            DiscoveryErrorKind.TOOL_UNAVAILABLE,
            f"{TOOL_UNAVAILABLE_TEXT} (state: {backend_state})",
        )

    raw_peers = status.get("Peer") or {}
    if not isinstance(raw_peers, dict):
        return []

    peers: list[TailscalePeer] = []
    for raw_item in cast(dict[str, object], raw_peers).values():
        if not isinstance(raw_item, dict):
            continue
        item = cast(dict[str, Any], raw_item)
        if not item.get("Online", False):
            continue
        peer = TailscalePeer(
            hostname=str(item.get("HostName") or item.get("DNSName") or ""),
            addresses=[str(a) for a in item.get("TailscaleIPs") or []],
        )
        if peer.ipv4:
            peers.append(peer)
    return peers


class TailscaleDiscovery:
    """Find an Emby server among the online devices of the tailnet.

    Example:
        discovery = TailscaleDiscovery(EmbyServerProbe(timeout=3.0))
        host = await discovery.find()
        if host:
            print(f"Found Emby at {host}")
    """

    def __init__(
        self,
        probe: ReachabilityOracle,
        command_timeout: float = COMMAND_TIMEOUT,
        binary: str = TAILSCALE_BINARY,
    ) -> None:
        """Initialize the discovery.

        Args:
            probe: Reachability check used on each candidate peer.
            command_timeout: Timeout for ``tailscale status`` in seconds.
            binary: Name or path of the Tailscale CLI.
        """
        self._probe = probe
        self._command_timeout = command_timeout
        self._binary = binary

    async def find(self) -> str | None:
        """Return the IPv4 address of the first peer running Emby.

        Returns:
            Bare IPv4 address, or None if no peer answered.

        Raises:
            DiscoveryError: If Tailscale is unavailable or has no online peers.
        """
        loop = asyncio.get_running_loop()
        output = await loop.run_in_executor(None, self._run_status)
        peers = parse_status(output)
        if not peers:
            raise DiscoveryError(DiscoveryErrorKind.NO_PEERS, NO_PEERS_TEXT)

        logger.info("Probing %d Tailscale peer(s) for an Emby server", len(peers))
        for peer in peers:
            host = peer.ipv4
            if host is None:
                continue
            try:
                if await self._probe.check(host):
                    logger.info("Found Emby server on %s at %s", peer.hostname or "peer", host)
                    return host
            except Exception as e:  # noqa: BLE001
                logger.debug("Probe of %s (%s) failed: %s", peer.hostname, host, e)
                continue

        logger.info("No Emby server answered on %d peer(s)", len(peers))
        return None

    def _run_status(self) -> str:
        """Run ``tailscale status --json`` (blocking).

        Returns:
            Command stdout.

        Raises:
            DiscoveryError: If the CLI is missing, fails, or times out.
        """
        binary = shutil.which(self._binary)
        if binary is None:
            raise DiscoveryError(DiscoveryErrorKind.TOOL_UNAVAILABLE, TOOL_UNAVAILABLE_TEXT)

        try:
            result = subprocess.run(
                [binary, "status", "--json"],
                capture_output=True,
                text=True,
                timeout=self._command_timeout,
                check=False,
            )
        except subprocess.TimeoutExpired as e:
            raise DiscoveryError(
                DiscoveryErrorKind.TOOL_UNAVAILABLE,
                f"{TOOL_UNAVAILABLE_TEXT} (timed out after {self._command_timeout:.0f}s)",
            ) from e
        except OSError as e:
            raise DiscoveryError(
                DiscoveryErrorKind.TOOL_UNAVAILABLE, f"{TOOL_UNAVAILABLE_TEXT}: {e}"
            ) from e

        if result.returncode != 0:
            detail = (result.stderr or result.stdout or "").strip()
            logger.debug("tailscale status exited with %d: %s", result.returncode, detail)
            raise DiscoveryError(
                DiscoveryErrorKind.TOOL_UNAVAILABLE,
                f"{TOOL_UNAVAILABLE_TEXT}: {detail}" if detail else TOOL_UNAVAILABLE_TEXT,
            )
        return result.stdout
