"""Node poller module."""

from .poller import IEventSink, NodePoller, PollerFailure, PollerState

__all__ = ["IEventSink", "NodePoller", "PollerFailure", "PollerState"]
