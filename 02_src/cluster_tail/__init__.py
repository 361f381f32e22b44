"""Cluster-wide event tail."""

from .config import TailConfig, parse_nodes
from .debug_client import DebugClient, DebugClientError, IDebugClient
from .decoder import (
    EventDecoderRegistry,
    ProtocolViolationError,
    decode_commit,
    decode_event,
    default_registry,
)
from .models import (
    Commit,
    Event,
    GetEventsResponse,
    NodeDescriptor,
    RawEvent,
    ValidatorEvent,
)
from .poller import NodePoller, PollerFailure, PollerState
from .spawner import SpawnError, spawn_tail
from .tail import ITail, PendingCounter, Tail

__version__ = "0.1.0"

__all__ = [
    # Entry point
    "spawn_tail",
    "SpawnError",
    # Config
    "TailConfig",
    "parse_nodes",
    # Models
    "NodeDescriptor",
    "Commit",
    "Event",
    "ValidatorEvent",
    "RawEvent",
    "GetEventsResponse",
    # Decoder
    "EventDecoderRegistry",
    "ProtocolViolationError",
    "decode_commit",
    "decode_event",
    "default_registry",
    # Components
    "IDebugClient",
    "DebugClient",
    "DebugClientError",
    "NodePoller",
    "PollerState",
    "PollerFailure",
    "ITail",
    "Tail",
    "PendingCounter",
]
