"""Configuration manager using QSettings for persistent storage.

Also serves as the address cache: the last server address that answered a
reachability check is stored under a single key and only ever overwritten.
"""

import logging

from PySide6.QtCore import QSettings

logger = logging.getLogger(__name__)

# Settings keys
_KEY_SERVER_ADDRESS = "server/address"

# Connection
_KEY_PROBE_TIMEOUT = "connection/probe_timeout"
_KEY_HANDOFF_DELAY = "connection/handoff_delay"

# Discovery
_KEY_DISCOVERY_TIMEOUT = "discovery/command_timeout"

DEFAULT_PROBE_TIMEOUT = 10.0
DEFAULT_HANDOFF_DELAY = 1.5
DEFAULT_DISCOVERY_TIMEOUT = 10.0


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


class ConfigManager:
    """Wrapper around QSettings for type-safe config access.

    QSettings stores config in platform-specific locations:
    - Windows: HKEY_CURRENT_USER\\Software\\EmbyConnect\\EmbyConnect
    - macOS: ~/Library/Preferences/com.EmbyConnect.EmbyConnect.plist
    - Linux: ~/.config/EmbyConnect/EmbyConnect.conf

    Example:
        config = ConfigManager()
        address = config.read()
        if address is None:
            config.write("192.168.1.100")
    """

    def __init__(self, organization: str = "EmbyConnect", application: str = "EmbyConnect") -> None:
        """Initialize the config manager.

        Args:
            organization: Organization name for QSettings.
            application: Application name for QSettings.
        """
        self._settings = QSettings(organization, application)

    @property
    def settings(self) -> QSettings:
        """Return the underlying QSettings instance."""
        return self._settings

    # -- Address cache ---------------------------------------------------------

    def read(self) -> str | None:
        """Return the last validated server address.

        Missing, blank, or unreadable values are all reported as absent.

        Returns:
            Address string, or None if nothing usable is stored.
        """
        try:
            value = self._settings.value(_KEY_SERVER_ADDRESS, None)
        except (TypeError, ValueError) as e:
            logger.warning("Could not read saved server address: %s", e)
            return None
        if not isinstance(value, str) or not value.strip():
            return None
        return value.strip()

    def write(self, address: str) -> bool:
        """Persist a validated server address, replacing any previous one.

        Args:
            address: Address that just answered a reachability check.

        Returns:
            True if the value reached storage, False otherwise.
        """
        self._settings.setValue(_KEY_SERVER_ADDRESS, address)
        self._settings.sync()
        status = self._settings.status()
        if status != QSettings.Status.NoError:
            logger.warning("Could not save server address %s: %s", address, status)
            return False
        logger.debug("Saved server address: %s", address)
        return True

    # -- Connection settings ---------------------------------------------------

    def _get_float(self, key: str, default: float, low: float, high: float) -> float:
        value = self._settings.value(key, default)
        try:
            return _clamp(float(value), low, high)  # type: ignore[arg-type]
        except (TypeError, ValueError):
            logger.warning("Ignoring invalid value for %s: %r", key, value)
            return default

    def get_probe_timeout(self) -> float:
        """Return the reachability probe timeout in seconds.

        Returns:
            Timeout in seconds (default 10).
        """
        return self._get_float(_KEY_PROBE_TIMEOUT, DEFAULT_PROBE_TIMEOUT, 1.0, 60.0)

    def set_probe_timeout(self, seconds: float) -> None:
        """Set the reachability probe timeout.

        Args:
            seconds: Timeout in seconds (1-60).
        """
        self._settings.setValue(_KEY_PROBE_TIMEOUT, _clamp(seconds, 1.0, 60.0))

    def get_handoff_delay(self) -> float:
        """Return the pause between a discovery success and the hand-off.

        Returns:
            Delay in seconds (default 1.5).
        """
        return self._get_float(_KEY_HANDOFF_DELAY, DEFAULT_HANDOFF_DELAY, 0.0, 10.0)

    def set_handoff_delay(self, seconds: float) -> None:
        """Set the pause between a discovery success and the hand-off.

        Args:
            seconds: Delay in seconds (0-10).
        """
        self._settings.setValue(_KEY_HANDOFF_DELAY, _clamp(seconds, 0.0, 10.0))

    # -- Discovery settings ----------------------------------------------------

    def get_discovery_timeout(self) -> float:
        """Return the timeout for the ``tailscale status`` command.

        Returns:
            Timeout in seconds (default 10).
        """
        return self._get_float(_KEY_DISCOVERY_TIMEOUT, DEFAULT_DISCOVERY_TIMEOUT, 1.0, 60.0)

    def set_discovery_timeout(self, seconds: float) -> None:
        """Set the timeout for the ``tailscale status`` command.

        Args:
            seconds: Timeout in seconds (1-60).
        """
        self._settings.setValue(_KEY_DISCOVERY_TIMEOUT, _clamp(seconds, 1.0, 60.0))

    # -- General settings ------------------------------------------------------

    def clear(self) -> None:
        """Clear all settings (useful for testing or reset)."""
        self._settings.clear()

    def sync(self) -> None:
        """Force settings to be written to disk."""
        self._settings.sync()
