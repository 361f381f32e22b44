"""Per-node polling loop."""

import asyncio
from dataclasses import dataclass, field
from datetime import timedelta
from enum import Enum
from typing import Protocol

from ..config import TailConfig
from ..debug_client import DebugClientError, IDebugClient
from ..decoder import EventDecoderRegistry, ProtocolViolationError, default_registry
from ..logging_config import get_logger, node_context
from ..models import NodeDescriptor, ValidatorEvent, unix_timestamp_now

logger = get_logger(__name__)


class PollerState(str, Enum):
    """Lifecycle of a NodePoller."""

    POLLING = "polling"
    BACKING_OFF = "backing_off"
    FAILED = "failed"  # protocol violation, terminal
    STOPPED = "stopped"  # cancelled, terminal


@dataclass(frozen=True)
class PollerFailure:
    """Terminal failure of one node's poller."""

    validator: str
    error: ProtocolViolationError
    failed_at: timedelta = field(default_factory=unix_timestamp_now)


class IEventSink(Protocol):
    """Where pollers deliver decoded events and terminal failures."""

    def send(self, event: ValidatorEvent) -> bool:
        """Enqueue an event without blocking. False if nobody listens."""
        ...

    def report_failure(self, failure: PollerFailure) -> None:
        """Record that a poller stopped on a protocol violation."""
        ...


class NodePoller:
    """Streams decoded events from one node into a sink until cancelled."""

    def __init__(
        self,
        node: NodeDescriptor,
        client: IDebugClient,
        sink: IEventSink,
        config: TailConfig,
        registry: EventDecoderRegistry | None = None,
    ):
        self._node = node
        self._client = client
        self._sink = sink
        self._config = config
        self._registry = registry or default_registry()
        self._state = PollerState.POLLING

    @property
    def node(self) -> NodeDescriptor:
        return self._node

    @property
    def client(self) -> IDebugClient:
        return self._client

    @property
    def state(self) -> PollerState:
        return self._state

    async def poll_once(self) -> bool:
        """
        Run one request/decode/forward pass.

        Returns:
            False if the request failed at the transport level, else True.

        Raises:
            ProtocolViolationError: A returned event broke the contract.
        """
        try:
            raw_events = await self._client.get_events(
                timeout=self._config.request_timeout
            )
        except DebugClientError as e:
            self._state = PollerState.BACKING_OFF
            log = logger.warning if self._config.verbose_failures else logger.debug
            log(
                "Failed to get events from %s: %s",
                self._node,
                e,
                extra=node_context(self._node.identity),
            )
            return False

        self._state = PollerState.POLLING
        for raw in raw_events:
            event = self._registry.decode(raw, self._node)
            if event is not None:
                # A closed sink drops the event; the poller keeps going
                self._sink.send(event)
        return True

    async def run(self) -> None:
        """Poll forever. Returns only after a protocol violation."""
        logger.info(
            "Polling %s via %s",
            self._node,
            self._client.label,
            extra=node_context(self._node.identity),
        )
        try:
            while True:
                if await self.poll_once():
                    await asyncio.sleep(self._config.poll_interval)
                else:
                    await asyncio.sleep(self._config.failure_backoff)
        except ProtocolViolationError as e:
            self._state = PollerState.FAILED
            logger.error(
                "Poller for %s stopped: %s",
                self._node,
                e,
                extra=node_context(self._node.identity),
            )
            self._sink.report_failure(PollerFailure(self._node.identity, e))
        except asyncio.CancelledError:
            self._state = PollerState.STOPPED
            raise
