"""Hand-off to the Emby web client."""

import logging

from PySide6.QtCore import QUrl
from PySide6.QtGui import QDesktopServices

logger = logging.getLogger(__name__)


def open_web_client(url: str) -> bool:
    """Open the web client URL in the user's default browser.

    Args:
        url: Fully-qualified web client URL.

    Returns:
        True if the desktop accepted the URL.
    """
    qurl = QUrl(url)
    if not qurl.isValid():
        logger.error("Refusing to open invalid URL: %s", url)
        return False
    opened = QDesktopServices.openUrl(qurl)
    if not opened:
        logger.error("Could not open %s", url)
    return opened
