"""Validator event data models."""

import time
from dataclasses import dataclass
from datetime import timedelta
from typing import Union

# Well-known port of the node debug interface
DEBUG_INTERFACE_PORT = 6191


@dataclass(frozen=True)
class NodeDescriptor:
    """One monitored node: stable short identity plus network location."""

    identity: str
    address: str
    port: int = DEBUG_INTERFACE_PORT

    @property
    def base_url(self) -> str:
        """Root URL of the node's debug interface."""
        return f"http://{self.address}:{self.port}"

    def __str__(self) -> str:
        return f"{self.identity} ({self.address}:{self.port})"


@dataclass(frozen=True)
class Commit:
    """A node finalized a block."""

    commit_id: str
    round: int
    parent_id: str


# Union of every decoded event kind. New kinds are added here and
# registered with the decoder.
Event = Union[Commit]


@dataclass(frozen=True)
class ValidatorEvent:
    """An Event together with who reported it and when."""

    validator: str
    event_timestamp: timedelta  # node-reported, since the Unix epoch
    received_timestamp: timedelta  # local wall clock at decode time
    event: Event


def unix_timestamp_now() -> timedelta:
    """Current wall-clock time as a duration since the Unix epoch."""
    return timedelta(microseconds=time.time_ns() // 1000)
