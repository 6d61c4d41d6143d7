"""Core connection logic.

This module contains the connection orchestrator and the collaborators it
drives, plus the Qt bridge that hosts it.

Classes:
    ConnectionOrchestrator: State machine for startup check, manual connect, discovery.
    ConnectionWorker: QThread running the orchestrator's asyncio loop.
    ConfigManager: QSettings wrapper, also the saved-address cache.
    EmbyServerProbe: HTTP reachability check.
    TailscaleDiscovery: Server discovery on the tailnet.
"""

from embyconnect.core.config import ConfigManager
from embyconnect.core.discovery import DiscoveryError, TailscaleDiscovery
from embyconnect.core.orchestrator import ConnectionOrchestrator
from embyconnect.core.reachability import EmbyServerProbe, ReachabilityError
from embyconnect.core.worker import ConnectionWorker

__all__ = [
    "ConfigManager",
    "ConnectionOrchestrator",
    "ConnectionWorker",
    "DiscoveryError",
    "EmbyServerProbe",
    "ReachabilityError",
    "TailscaleDiscovery",
]
