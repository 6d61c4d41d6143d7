"""Server address normalization.

A server address is what the user types (or what discovery returns): a bare
host or IP, optionally with a port, or a full URL with a scheme prefix.
"""

from __future__ import annotations

import re
from urllib.parse import urlsplit

# Default Emby HTTP port
DEFAULT_PORT = 8096

# Path of the Emby web client
WEB_CLIENT_PATH = "/web/index.html"

# Public, unauthenticated system info endpoint
PROBE_PATH = "/System/Info/Public"

_SCHEME_RE = re.compile(r"^[A-Za-z][A-Za-z0-9+.-]*://")


def has_scheme(address: str) -> bool:
    """Return True if the address starts with a URI scheme prefix."""
    return bool(_SCHEME_RE.match(address.strip()))


def _has_port(host: str) -> bool:
    """Return True if a bare host already names an explicit port."""
    try:
        return urlsplit(f"//{host}").port is not None
    except ValueError:
        # Out-of-range or non-numeric port; kept as typed so the probe rejects it
        return True


def base_url(address: str) -> str:
    """Return the server root URL for an address.

    Args:
        address: Bare host ("10.0.0.5", "nas:8920") or URL ("https://emby.example.com").

    Returns:
        URL without a trailing slash, e.g. "http://10.0.0.5:8096".
    """
    address = address.strip().rstrip("/")
    if has_scheme(address):
        return address
    if _has_port(address):
        return f"http://{address}"
    return f"http://{address}:{DEFAULT_PORT}"


def normalize_url(address: str) -> str:
    """Return the web client URL the application hands off to.

    Normalizing an already normalized URL returns it unchanged.

    Example:
        >>> normalize_url("10.0.0.5")
        'http://10.0.0.5:8096/web/index.html'
        >>> normalize_url("https://emby.example.com:8096")
        'https://emby.example.com:8096/web/index.html'
    """
    root = base_url(address)
    if root.endswith(WEB_CLIENT_PATH):
        return root
    return f"{root}{WEB_CLIENT_PATH}"


def probe_url(address: str) -> str:
    """Return the URL used to check whether an Emby server is live."""
    root = base_url(address)
    if root.endswith(WEB_CLIENT_PATH):
        root = root[: -len(WEB_CLIENT_PATH)]
    return f"{root}{PROBE_PATH}"
