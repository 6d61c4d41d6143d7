"""Data models for server addresses and connection status."""

from embyconnect.models.address import normalize_url, probe_url
from embyconnect.models.status import (
    ConnectionState,
    DiscoveryErrorKind,
    Outcome,
    StatusKind,
    StatusMessage,
)

__all__ = [
    "ConnectionState",
    "DiscoveryErrorKind",
    "Outcome",
    "StatusKind",
    "StatusMessage",
    "normalize_url",
    "probe_url",
]
