"""Debug event decoder module."""

from .decoder import (
    EventDecoderRegistry,
    PayloadDecoder,
    ProtocolViolationError,
    decode_commit,
    decode_event,
    default_registry,
)

__all__ = [
    "EventDecoderRegistry",
    "PayloadDecoder",
    "ProtocolViolationError",
    "decode_commit",
    "decode_event",
    "default_registry",
]
