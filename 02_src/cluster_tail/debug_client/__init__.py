"""Debug interface client module."""

from .client import DebugClient, DebugClientError, IDebugClient

__all__ = ["DebugClient", "DebugClientError", "IDebugClient"]
