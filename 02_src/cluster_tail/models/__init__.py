"""Core data models for the cluster tail."""

from .events import (
    DEBUG_INTERFACE_PORT,
    Commit,
    Event,
    NodeDescriptor,
    ValidatorEvent,
    unix_timestamp_now,
)
from .wire import GetEventsResponse, RawEvent

__all__ = [
    # Events
    "DEBUG_INTERFACE_PORT",
    "NodeDescriptor",
    "Commit",
    "Event",
    "ValidatorEvent",
    "unix_timestamp_now",
    # Wire
    "RawEvent",
    "GetEventsResponse",
]
