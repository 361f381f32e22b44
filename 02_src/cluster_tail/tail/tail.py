"""Fan-in of every node poller into one consumer-facing stream."""

import asyncio
from typing import AsyncIterator, Protocol, runtime_checkable

from ..decoder import ProtocolViolationError
from ..logging_config import get_logger
from ..models import ValidatorEvent
from ..poller import NodePoller, PollerFailure, PollerState

logger = get_logger(__name__)


class PendingCounter:
    """
    Coarse backlog counter owned by the consumer.

    The tail only creates it at zero. Consumers increment it for work they
    expect and decrement it when that work shows up in the stream. Updates
    happen on the tail's event loop, so no lock is taken.
    """

    def __init__(self):
        self._value = 0

    @property
    def value(self) -> int:
        return self._value

    def increment(self, n: int = 1) -> int:
        self._value += n
        return self._value

    def decrement(self, n: int = 1) -> int:
        self._value -= n
        return self._value

    def __repr__(self) -> str:
        return f"PendingCounter({self._value})"


@runtime_checkable
class ITail(Protocol):
    """Live tail of the whole cluster, as seen by its consumer."""

    pending: PendingCounter

    @property
    def backlog(self) -> int:
        """Events delivered by pollers but not yet consumed."""
        ...

    @property
    def failures(self) -> list[PollerFailure]:
        """Terminal poller failures so far."""
        ...

    async def next_event(self, timeout: float | None = None) -> ValidatorEvent:
        """Wait for the next decoded event from any node."""
        ...

    def drain(self) -> list[ValidatorEvent]:
        """Take every event currently buffered."""
        ...

    def __aiter__(self) -> AsyncIterator[ValidatorEvent]:
        """Iterate events forever."""
        ...

    def raise_for_failures(self) -> None:
        """Raise if any poller stopped on a protocol violation."""
        ...

    def poller_states(self) -> dict[str, PollerState]:
        """Current state of every poller keyed by node identity."""
        ...

    async def stop(self) -> None:
        """Cancel all pollers and close their clients."""
        ...


class Tail:
    """Unbounded multi-producer, single-consumer event stream."""

    def __init__(self):
        self._events: asyncio.Queue[ValidatorEvent] = asyncio.Queue()
        self._failures: list[PollerFailure] = []
        self._pollers: list[NodePoller] = []
        self._tasks: list[asyncio.Task] = []
        self._closed = False
        self.pending = PendingCounter()

    # Producer side

    def send(self, event: ValidatorEvent) -> bool:
        """Enqueue without blocking. Dropped once the tail is closed."""
        if self._closed:
            return False
        self._events.put_nowait(event)
        return True

    def report_failure(self, failure: PollerFailure) -> None:
        """Record a poller's terminal protocol failure."""
        self._failures.append(failure)

    def attach(self, poller: NodePoller, task: asyncio.Task) -> None:
        """Track a running poller so stop() can cancel it."""
        self._pollers.append(poller)
        self._tasks.append(task)

    # Consumer side

    async def next_event(self, timeout: float | None = None) -> ValidatorEvent:
        """
        Wait for the next event from any node.

        Raises:
            asyncio.TimeoutError: Nothing arrived within ``timeout`` seconds.
        """
        if timeout is None:
            return await self._events.get()
        return await asyncio.wait_for(self._events.get(), timeout)

    def drain(self) -> list[ValidatorEvent]:
        """Take every event currently buffered, without waiting."""
        events = []
        while not self._events.empty():
            events.append(self._events.get_nowait())
        return events

    def __aiter__(self):
        return self

    async def __anext__(self) -> ValidatorEvent:
        return await self.next_event()

    @property
    def backlog(self) -> int:
        """Events delivered by pollers but not yet taken by the consumer."""
        return self._events.qsize()

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def failures(self) -> list[PollerFailure]:
        return list(self._failures)

    def raise_for_failures(self) -> None:
        """Raise if any poller stopped on a protocol violation."""
        if self._failures:
            first = self._failures[0]
            raise ProtocolViolationError(
                f"Poller for {first.validator} failed: {first.error}"
            ) from first.error

    def poller_states(self) -> dict[str, PollerState]:
        """Current state of every poller keyed by node identity."""
        return {p.node.identity: p.state for p in self._pollers}

    async def stop(self) -> None:
        """Cancel all pollers, close their clients, close the tail."""
        self._closed = True
        for task in self._tasks:
            task.cancel()
        await asyncio.gather(*self._tasks, return_exceptions=True)

        results = await asyncio.gather(
            *(poller.client.aclose() for poller in self._pollers),
            return_exceptions=True,
        )
        for poller, result in zip(self._pollers, results):
            if isinstance(result, Exception):
                logger.error("Failed to close client for %s: %s", poller.node, result)
        logger.info("Tail stopped (%d pollers)", len(self._pollers))
