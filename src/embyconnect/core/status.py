"""Status text for the connection screen.

``report`` is a pure mapping from the orchestrator state and the latest
outcome to the message shown under the address field. The error flag comes
from the outcome tag, never from the message text.
"""

from __future__ import annotations

from embyconnect.models.status import ConnectionState, Outcome, StatusKind, StatusMessage

# Outcomes that are styled as errors
ERROR_KINDS = frozenset(
    {
        StatusKind.SAVED_UNREACHABLE,
        StatusKind.UNREACHABLE,
        StatusKind.CHECK_FAILED,
        StatusKind.TOOL_UNAVAILABLE,
        StatusKind.NO_PEERS,
        StatusKind.DISCOVERY_FAILED,
    }
)

_TEXT: dict[StatusKind, str] = {
    StatusKind.WELCOME: "Welcome! Enter your Emby server address or find it automatically.",
    StatusKind.ENTER_ADDRESS: "Please enter a server IP address",
    StatusKind.CHECKING_SAVED: "Checking saved server {detail}...",
    StatusKind.CHECKING: "Checking server connection...",
    StatusKind.FOUND: "Server found! Redirecting...",
    StatusKind.SAVED_UNREACHABLE: (
        "Saved server {detail} is not accessible. "
        "Enter a new address or find your server automatically."
    ),
    StatusKind.UNREACHABLE: "Server not accessible. Please check the IP address and try again.",
    StatusKind.CHECK_FAILED: "Error: {detail}",
    StatusKind.SEARCHING: "Searching for Emby servers on your Tailscale network...",
    StatusKind.DISCOVERED: "Found Emby server at {detail}! Redirecting...",
    StatusKind.NOT_FOUND: (
        "No Emby server found on your Tailscale network. Please enter the address manually."
    ),
    StatusKind.TOOL_UNAVAILABLE: (
        "Tailscale is not installed or not running. "
        "Start Tailscale or enter the server address manually."
    ),
    StatusKind.NO_PEERS: (
        "No Tailscale devices found. Make sure this device and your server "
        "are connected to the same Tailscale network."
    ),
    StatusKind.DISCOVERY_FAILED: "{detail}",
}


# Outcomes whose text is only meaningful with a detail
_DETAIL_REQUIRED = frozenset({StatusKind.CHECK_FAILED, StatusKind.DISCOVERY_FAILED})


def is_error(kind: StatusKind) -> bool:
    """Return True if an outcome of this kind is shown as an error."""
    return kind in ERROR_KINDS


def report(state: ConnectionState, outcome: Outcome | None) -> StatusMessage:
    """Map the current state and latest outcome to a status message.

    Args:
        state: Current orchestrator state.
        outcome: Latest outcome, or None if nothing has happened yet.

    Returns:
        StatusMessage to display. Empty text while initializing with no outcome.
    """
    if outcome is None:
        if state is ConnectionState.IDLE:
            outcome = Outcome(StatusKind.WELCOME)
        elif state is ConnectionState.REDIRECTING:
            return StatusMessage("Redirecting...")
        else:
            return StatusMessage("")

    detail = outcome.detail
    if not detail and outcome.kind in _DETAIL_REQUIRED:
        detail = "unknown error"
    text = _TEXT[outcome.kind].format(detail=detail)
    return StatusMessage(text=text.strip(), is_error=is_error(outcome.kind))
