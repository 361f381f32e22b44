"""Translate raw debug-interface events into typed ValidatorEvents."""

import json
from datetime import timedelta
from typing import Any, Callable

from ..logging_config import get_logger
from ..models import (
    Commit,
    Event,
    NodeDescriptor,
    RawEvent,
    ValidatorEvent,
    unix_timestamp_now,
)

logger = get_logger(__name__)

PayloadDecoder = Callable[[dict[str, Any]], Event]

U64_MAX = 2**64 - 1


class ProtocolViolationError(ValueError):
    """A node emitted an event that breaks the debug-interface contract."""


def _require_str(payload: dict[str, Any], key: str) -> str:
    if key not in payload:
        raise ProtocolViolationError(f"No {key} in commit event")
    value = payload[key]
    if not isinstance(value, str):
        raise ProtocolViolationError(f"{key} is not string: {value!r}")
    return value


def _require_u64(payload: dict[str, Any], key: str) -> int:
    if key not in payload:
        raise ProtocolViolationError(f"No {key} in commit event")
    value = payload[key]
    # bool is an int subclass but never a valid JSON integer here
    if isinstance(value, bool) or not isinstance(value, int):
        raise ProtocolViolationError(f"{key} is not u64: {value!r}")
    if not 0 <= value <= U64_MAX:
        raise ProtocolViolationError(f"{key} is not u64: {value!r}")
    return value


def decode_commit(payload: dict[str, Any]) -> Commit:
    """Decode the body of a ``committed`` event. All fields are required."""
    return Commit(
        commit_id=_require_str(payload, "block_id"),
        round=_require_u64(payload, "round"),
        parent_id=_require_str(payload, "parent_id"),
    )


class EventDecoderRegistry:
    """
    Event-name keyed table of payload decoders.

    Names without a registered decoder are logged and skipped; adding an
    event kind means registering a decoder, nothing else.
    """

    def __init__(self):
        self._decoders: dict[str, PayloadDecoder] = {}

    def register(self, name: str, decoder: PayloadDecoder) -> None:
        """Register a payload decoder for an event name."""
        if name in self._decoders:
            raise ValueError(f"Decoder already registered for event {name!r}")
        self._decoders[name] = decoder

    def names(self) -> list[str]:
        """Event names this registry can decode."""
        return sorted(self._decoders)

    def decode(
        self,
        raw: RawEvent,
        node: NodeDescriptor,
        now: Callable = unix_timestamp_now,
    ) -> ValidatorEvent | None:
        """
        Decode one raw event reported by ``node``.

        Args:
            raw: Event as returned by the debug interface.
            node: Node the event came from.
            now: Clock used for ``received_timestamp``.

        Returns:
            The decoded event, or None for an unrecognized event name.

        Raises:
            ProtocolViolationError: The payload is not valid JSON, a
                required field is missing or has the wrong type, or the
                registered decoder raised.
        """
        try:
            payload = json.loads(raw.payload)
        except json.JSONDecodeError as e:
            raise ProtocolViolationError(
                f"Failed to parse json from debug interface of {node}: {e}"
            ) from e

        decoder = self._decoders.get(raw.name)
        if decoder is None:
            logger.warning("Unknown event: %s from %s", raw.name, node)
            return None

        if not isinstance(payload, dict):
            raise ProtocolViolationError(
                f"Event {raw.name} from {node} is not a JSON object"
            )

        try:
            event = decoder(payload)
        except ProtocolViolationError as e:
            raise ProtocolViolationError(
                f"Bad {raw.name} event from {node}: {e}"
            ) from e
        except Exception as e:
            # Any failure inside a registered decoder is a payload mismatch
            raise ProtocolViolationError(
                f"Bad {raw.name} event from {node}: {type(e).__name__}: {e}"
            ) from e

        return ValidatorEvent(
            validator=node.identity,
            event_timestamp=timedelta(milliseconds=raw.timestamp),
            received_timestamp=now(),
            event=event,
        )


def default_registry() -> EventDecoderRegistry:
    """Registry with every event kind this package understands."""
    registry = EventDecoderRegistry()
    registry.register("committed", decode_commit)
    return registry


_default = default_registry()


def decode_event(raw: RawEvent, node: NodeDescriptor) -> ValidatorEvent | None:
    """Decode with the default registry."""
    return _default.decode(raw, node)
