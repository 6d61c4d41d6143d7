"""Emby Connect: find an Emby media server and open its web client."""

__version__ = "0.1.0"
