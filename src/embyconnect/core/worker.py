"""QThread worker hosting the connection orchestrator.

The orchestrator and its oracles use asyncio, while Qt widgets must run in
the main thread. This worker runs the asyncio event loop in a background
thread and bridges orchestrator events to the main thread via Qt signals.
All orchestrator calls happen on the worker loop, one thread, so flows
never race.
"""

import asyncio
import logging
from collections.abc import Coroutine
from concurrent.futures import Future
from typing import Any

from PySide6.QtCore import QThread, Signal

from embyconnect.core.orchestrator import ConnectionOrchestrator

logger = logging.getLogger(__name__)


class ConnectionWorker(QThread):
    """Background thread running the connection orchestrator.

    Example:
        worker = ConnectionWorker(orchestrator)
        worker.status_changed.connect(window.set_status)
        worker.handoff_requested.connect(open_web_client)
        worker.start()
    """

    # State signals
    state_changed = Signal(object)  # ConnectionState
    status_changed = Signal(object)  # StatusMessage
    address_loaded = Signal(str)  # Address to pre-fill

    # Hand-off signal, emitted at most once
    handoff_requested = Signal(str)  # Web client URL

    # Error signal
    error_occurred = Signal(object)  # Exception

    def __init__(self, orchestrator: ConnectionOrchestrator) -> None:
        """Initialize the worker.

        Args:
            orchestrator: Orchestrator to run. Its event handlers are replaced.
        """
        super().__init__()
        self._orchestrator = orchestrator
        self._loop: asyncio.AbstractEventLoop | None = None
        self._should_run = True
        self._orchestrator.set_event_handlers(
            on_state=self.state_changed.emit,
            on_status=self.status_changed.emit,
            on_address=self.address_loaded.emit,
            on_handoff=self.handoff_requested.emit,
        )

    @property
    def orchestrator(self) -> ConnectionOrchestrator:
        """Return the hosted orchestrator."""
        return self._orchestrator

    def stop(self) -> None:
        """Signal the worker to stop (called from main thread)."""
        self._should_run = False

    def submit_manual(self, address: str) -> None:
        """Check a typed address.

        Thread-safe call from main thread.

        Args:
            address: Raw text of the address field.
        """
        self._schedule(self._orchestrator.submit_manual(address))

    def discover(self) -> None:
        """Start automatic discovery.

        Thread-safe call from main thread.
        """
        self._schedule(self._orchestrator.discover())

    def _schedule(self, coro: Coroutine[Any, Any, None]) -> None:
        """Run a coroutine on the worker loop, or drop it if not running."""
        if self._loop and self._loop.is_running():
            future = asyncio.run_coroutine_threadsafe(coro, self._loop)
            future.add_done_callback(self._on_done)
        else:
            logger.debug("Worker loop not running, dropping request")
            coro.close()

    def _on_done(self, future: "Future[None] | asyncio.Task[None]") -> None:
        """Report unexpected errors from a finished request."""
        if future.cancelled():
            return
        error = future.exception()
        if error is not None:
            logger.error("Connection flow failed: %s", error)
            self.error_occurred.emit(error)

    def run(self) -> None:
        """Run the worker thread (entry point)."""
        # Create new event loop for this thread
        self._loop = asyncio.new_event_loop()
        asyncio.set_event_loop(self._loop)

        try:
            self._loop.run_until_complete(self._main())
        except Exception as e:
            logger.exception("Worker loop crashed")
            self.error_occurred.emit(e)
        finally:
            # Clean up
            pending = asyncio.all_tasks(self._loop)
            for task in pending:
                task.cancel()
            if pending:
                self._loop.run_until_complete(asyncio.gather(*pending, return_exceptions=True))
            self._loop.close()
            self._loop = None

    async def _main(self) -> None:
        """Run the startup check, then keep the loop alive for user requests."""
        startup = asyncio.create_task(self._orchestrator.start())
        startup.add_done_callback(self._on_done)

        while self._should_run:
            await asyncio.sleep(0.1)
