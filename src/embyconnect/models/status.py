"""Connection state and status message models."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class ConnectionState(Enum):
    """State of the connection orchestrator. Exactly one is active."""

    INITIALIZING = "initializing"
    IDLE = "idle"
    CHECKING_MANUAL = "checking_manual"
    CHECKING_SAVED = "checking_saved"
    DISCOVERING = "discovering"
    REDIRECTING = "redirecting"

    @property
    def is_busy(self) -> bool:
        """Return True while a reachability check or discovery is in flight."""
        return self in _BUSY_STATES

    @property
    def accepts_input(self) -> bool:
        """Return True if the user may submit an address or start discovery."""
        return self is ConnectionState.IDLE


_BUSY_STATES = frozenset(
    {
        ConnectionState.CHECKING_MANUAL,
        ConnectionState.CHECKING_SAVED,
        ConnectionState.DISCOVERING,
    }
)


class StatusKind(Enum):
    """What happened, as far as the user needs to know."""

    WELCOME = "welcome"
    ENTER_ADDRESS = "enter_address"
    CHECKING_SAVED = "checking_saved"
    CHECKING = "checking"
    FOUND = "found"
    SAVED_UNREACHABLE = "saved_unreachable"
    UNREACHABLE = "unreachable"
    CHECK_FAILED = "check_failed"
    SEARCHING = "searching"
    DISCOVERED = "discovered"
    NOT_FOUND = "not_found"
    TOOL_UNAVAILABLE = "tool_unavailable"
    NO_PEERS = "no_peers"
    DISCOVERY_FAILED = "discovery_failed"


class DiscoveryErrorKind(Enum):
    """Category of a failed discovery run."""

    TOOL_UNAVAILABLE = "tool_unavailable"  # Tailscale missing or not running
    NO_PEERS = "no_peers"  # Tailscale up, but no other device online
    OTHER = "other"


@dataclass(frozen=True, slots=True)
class Outcome:
    """Result of the most recent orchestrator step.

    Attributes:
        kind: Tagged outcome.
        detail: Address or error text, depending on kind.
    """

    kind: StatusKind
    detail: str = ""


@dataclass(frozen=True, slots=True)
class StatusMessage:
    """Human-readable status line.

    Attributes:
        text: Message shown to the user.
        is_error: Whether the message should be styled as an error.
    """

    text: str
    is_error: bool = False
