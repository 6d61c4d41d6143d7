"""Main entry point for the Emby Connect application."""

import argparse
import logging
import sys

from PySide6.QtCore import QTimer
from PySide6.QtWidgets import QApplication

from embyconnect import __version__
from embyconnect.core.config import ConfigManager
from embyconnect.core.discovery import TailscaleDiscovery
from embyconnect.core.handoff import open_web_client
from embyconnect.core.orchestrator import ConnectionOrchestrator
from embyconnect.core.reachability import EmbyServerProbe
from embyconnect.core.worker import ConnectionWorker
from embyconnect.models.status import StatusMessage
from embyconnect.ui.connect_window import ConnectWindow
from embyconnect.ui.theme import theme_manager

logger = logging.getLogger(__name__)

# Time to let the browser take over before the window closes, in ms
QUIT_AFTER_HANDOFF_MS = 500


def handoff_failed_status(url: str) -> StatusMessage:
    """Return the status shown when the desktop refuses to open the web client.

    The window stays in the redirecting state with its controls disabled;
    the URL is the only way forward.
    """
    return StatusMessage(
        f"Could not open a browser. Copy {url} into your browser to continue.",
        is_error=True,
    )


def build_parser() -> argparse.ArgumentParser:
    """Return the command line parser."""
    parser = argparse.ArgumentParser(
        prog="embyconnect",
        description="Emby Connect: find your Emby server and open its web client",
    )
    parser.add_argument("--debug", action="store_true", help="enable debug logging")
    parser.add_argument(
        "--delay",
        type=float,
        default=None,
        metavar="SECONDS",
        help="pause after automatic discovery before opening the server",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def main() -> int:
    """Run the Emby Connect application.

    Returns:
        Exit code (0 for success).
    """
    # Set app metadata before creating QApplication (required for macOS)
    QApplication.setApplicationName("EmbyConnect")
    QApplication.setApplicationDisplayName("Emby Connect")
    QApplication.setOrganizationName("EmbyConnect")

    app = QApplication(sys.argv)
    parsed = build_parser().parse_args(app.arguments()[1:])

    logging.basicConfig(
        level=logging.DEBUG if parsed.debug else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    theme_manager.apply_theme()
    theme_manager.connect_system_theme_changes()

    # Create core components
    config = ConfigManager()
    probe = EmbyServerProbe(timeout=config.get_probe_timeout())
    discovery = TailscaleDiscovery(probe, command_timeout=config.get_discovery_timeout())
    delay = parsed.delay if parsed.delay is not None else config.get_handoff_delay()
    orchestrator = ConnectionOrchestrator(config, probe, discovery, handoff_delay=delay)
    worker = ConnectionWorker(orchestrator)

    window = ConnectWindow()

    def on_handoff(url: str) -> None:
        if not open_web_client(url):
            window.set_status(handoff_failed_status(url))
            return
        # No return path: the browser owns the session from here
        QTimer.singleShot(QUIT_AFTER_HANDOFF_MS, app.quit)

    def on_error(err: object) -> None:
        logger.error("Error: %s", err)

    # Wire worker to window
    worker.state_changed.connect(window.set_state)
    worker.status_changed.connect(window.set_status)
    worker.address_loaded.connect(window.set_address)
    worker.handoff_requested.connect(on_handoff)
    worker.error_occurred.connect(on_error)

    window.connect_requested.connect(worker.submit_manual)
    window.discover_requested.connect(worker.discover)

    window.show()
    worker.start()

    # Run the application
    exit_code = app.exec()

    # Cleanup
    worker.stop()
    worker.wait()

    return exit_code


if __name__ == "__main__":
    sys.exit(main())
