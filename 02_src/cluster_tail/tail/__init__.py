"""Tail (aggregator) module."""

from .tail import ITail, PendingCounter, Tail

__all__ = ["ITail", "PendingCounter", "Tail"]
