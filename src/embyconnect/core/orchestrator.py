"""Connection orchestrator: decide which Emby server to open.

Three flows lead to a hand-off: re-checking the saved address at startup,
checking an address typed by the user, and discovering a server on the
tailnet. They are mutually exclusive. A flow can only start from ``IDLE``
and the state leaves ``IDLE`` before the first ``await``, so on a single
event loop two flows can never be in flight together.

Every oracle failure is absorbed here and turned into a status message;
the machine always lands back in ``IDLE`` or hands off.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from typing import Protocol

from embyconnect.core import status
from embyconnect.core.discovery import DiscoveryOracle, classify_discovery_error
from embyconnect.core.reachability import ReachabilityOracle
from embyconnect.models.address import normalize_url
from embyconnect.models.status import (
    ConnectionState,
    DiscoveryErrorKind,
    Outcome,
    StatusKind,
    StatusMessage,
)

logger = logging.getLogger(__name__)

# Type aliases for event handlers
StateHandler = Callable[[ConnectionState], None]
StatusHandler = Callable[[StatusMessage], None]
AddressHandler = Callable[[str], None]
HandoffHandler = Callable[[str], None]

# Pause between a discovery success and the hand-off, in seconds
DEFAULT_HANDOFF_DELAY = 1.5

_DISCOVERY_OUTCOMES = {
    DiscoveryErrorKind.TOOL_UNAVAILABLE: StatusKind.TOOL_UNAVAILABLE,
    DiscoveryErrorKind.NO_PEERS: StatusKind.NO_PEERS,
    DiscoveryErrorKind.OTHER: StatusKind.DISCOVERY_FAILED,
}


class AddressCache(Protocol):
    """Single-value store for the last validated server address."""

    def read(self) -> str | None:
        """Return the stored address, or None."""
        ...

    def write(self, address: str) -> bool:
        """Replace the stored address. Return False if it was not saved."""
        ...


class ConnectionOrchestrator:
    """State machine coordinating startup check, manual connect and discovery.

    Example:
        orchestrator = ConnectionOrchestrator(config, EmbyServerProbe(), discovery)
        orchestrator.set_event_handlers(on_handoff=open_web_client)
        await orchestrator.start()
        await orchestrator.submit_manual("192.168.1.100")
    """

    def __init__(
        self,
        cache: AddressCache,
        reachability: ReachabilityOracle,
        discovery: DiscoveryOracle,
        handoff_delay: float = DEFAULT_HANDOFF_DELAY,
    ) -> None:
        """Initialize the orchestrator.

        Args:
            cache: Persistent store for the last validated address.
            reachability: Server reachability check.
            discovery: Tailnet server discovery.
            handoff_delay: Seconds to keep the discovery result on screen
                before handing off.
        """
        self._cache = cache
        self._reachability = reachability
        self._discovery = discovery
        self._handoff_delay = max(0.0, handoff_delay)

        self._state = ConnectionState.INITIALIZING
        self._outcome: Outcome | None = None
        self._address = ""
        self._handoff_url: str | None = None

        # Event handlers
        self._on_state: StateHandler | None = None
        self._on_status: StatusHandler | None = None
        self._on_address: AddressHandler | None = None
        self._on_handoff: HandoffHandler | None = None

    @property
    def state(self) -> ConnectionState:
        """Return the current state."""
        return self._state

    @property
    def address(self) -> str:
        """Return the address field contents as known to the orchestrator."""
        return self._address

    @property
    def status(self) -> StatusMessage:
        """Return the status message for the current state and outcome."""
        return status.report(self._state, self._outcome)

    @property
    def handoff_url(self) -> str | None:
        """Return the URL handed off to, or None if no hand-off happened."""
        return self._handoff_url

    @property
    def handoff_delay(self) -> float:
        """Return the post-discovery hand-off delay in seconds."""
        return self._handoff_delay

    def set_event_handlers(
        self,
        on_state: StateHandler | None = None,
        on_status: StatusHandler | None = None,
        on_address: AddressHandler | None = None,
        on_handoff: HandoffHandler | None = None,
    ) -> None:
        """Set event handlers for orchestrator events.

        Args:
            on_state: Called with the new state on every transition.
            on_status: Called with the new status message.
            on_address: Called when the address field should be pre-filled.
            on_handoff: Called once with the web client URL.
        """
        self._on_state = on_state
        self._on_status = on_status
        self._on_address = on_address
        self._on_handoff = on_handoff

    # -- Flows -----------------------------------------------------------------

    async def start(self) -> None:
        """Run the startup check against the saved address.

        Must be called once, before any user input is accepted.
        """
        if self._state is not ConnectionState.INITIALIZING:
            logger.debug("Startup check already done (state: %s)", self._state.name)
            return

        saved = self._cache.read()
        if saved is None:
            logger.info("No saved server address")
            self._transition(ConnectionState.IDLE, Outcome(StatusKind.WELCOME))
            return

        self._set_address(saved)
        self._transition(ConnectionState.CHECKING_SAVED, Outcome(StatusKind.CHECKING_SAVED, saved))
        try:
            reachable = await self._reachability.check(saved)
        except Exception as e:  # noqa: BLE001
            logger.warning("Saved server check failed for %s: %s", saved, e)
            self._transition(ConnectionState.IDLE, Outcome(StatusKind.CHECK_FAILED, str(e)))
            return

        if not reachable:
            # The stale address stays in storage; it is only replaced by a later success
            logger.info("Saved server %s is not reachable", saved)
            self._transition(ConnectionState.IDLE, Outcome(StatusKind.SAVED_UNREACHABLE, saved))
            return

        self._persist(saved)
        self._transition(ConnectionState.REDIRECTING, Outcome(StatusKind.FOUND, saved))
        self._handoff(saved)

    async def submit_manual(self, address: str) -> None:
        """Check a user-typed address and hand off if it answers.

        Ignored unless the orchestrator is idle.

        Args:
            address: Raw text of the address field.
        """
        if not self._accepting("manual connect"):
            return

        self._address = address
        candidate = address.strip()
        if not candidate:
            self._transition(ConnectionState.IDLE, Outcome(StatusKind.ENTER_ADDRESS))
            return

        self._transition(ConnectionState.CHECKING_MANUAL, Outcome(StatusKind.CHECKING, candidate))
        try:
            reachable = await self._reachability.check(candidate)
        except Exception as e:  # noqa: BLE001
            logger.warning("Server check failed for %s: %s", candidate, e)
            self._transition(ConnectionState.IDLE, Outcome(StatusKind.CHECK_FAILED, str(e)))
            return

        if not reachable:
            logger.info("Server %s is not reachable", candidate)
            self._transition(ConnectionState.IDLE, Outcome(StatusKind.UNREACHABLE, candidate))
            return

        self._persist(candidate)
        self._transition(ConnectionState.REDIRECTING, Outcome(StatusKind.FOUND, candidate))
        self._handoff(candidate)

    async def discover(self) -> None:
        """Search the tailnet for a server and hand off after a short pause.

        Ignored unless the orchestrator is idle.
        """
        if not self._accepting("discovery"):
            return

        self._transition(ConnectionState.DISCOVERING, Outcome(StatusKind.SEARCHING))
        try:
            found = await self._discovery.find()
        except Exception as e:  # noqa: BLE001
            error = classify_discovery_error(e)
            logger.warning("Discovery failed (%s): %s", error.kind.value, error)
            outcome = Outcome(_DISCOVERY_OUTCOMES[error.kind], str(error))
            self._transition(ConnectionState.IDLE, outcome)
            return

        if not found:
            logger.info("Discovery found no server")
            self._transition(ConnectionState.IDLE, Outcome(StatusKind.NOT_FOUND))
            return

        logger.info("Discovered server at %s", found)
        self._persist(found)
        self._set_address(found)
        self._transition(ConnectionState.REDIRECTING, Outcome(StatusKind.DISCOVERED, found))
        if self._handoff_delay > 0:
            await asyncio.sleep(self._handoff_delay)
        self._handoff(found)

    # -- Internals -------------------------------------------------------------

    def _accepting(self, flow: str) -> bool:
        """Return True if a user-triggered flow may start now."""
        if self._state.accepts_input:
            return True
        logger.debug("Ignoring %s request while %s", flow, self._state.name)
        return False

    def _transition(self, state: ConnectionState, outcome: Outcome) -> None:
        logger.debug("State %s -> %s (%s)", self._state.name, state.name, outcome.kind.value)
        self._state = state
        self._outcome = outcome
        if self._on_state:
            self._on_state(state)
        if self._on_status:
            self._on_status(self.status)

    def _set_address(self, address: str) -> None:
        self._address = address
        if self._on_address:
            self._on_address(address)

    def _persist(self, address: str) -> None:
        """Save a validated address. A failed write does not stop the hand-off."""
        if not self._cache.write(address):
            logger.warning("Server address %s was not saved; it will not be remembered", address)

    def _handoff(self, address: str) -> None:
        """Hand off to the web client. Runs at most once."""
        if self._handoff_url is not None:
            logger.debug("Hand-off already done, ignoring %s", address)
            return
        url = normalize_url(address)
        self._handoff_url = url
        logger.info("Handing off to %s", url)
        if self._on_handoff:
            self._on_handoff(url)
