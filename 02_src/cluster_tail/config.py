"""Project-level configuration and path helpers."""

import math
import os
from dataclasses import dataclass
from pathlib import Path

from .models import DEBUG_INTERFACE_PORT, NodeDescriptor

PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
LOGS_DIR = PROJECT_ROOT / "04_logs"
DEFAULT_LOG_PATH = LOGS_DIR / "tail.log"

DEFAULT_DEBUG_PORT = DEBUG_INTERFACE_PORT

_FALSE_VALUES = {"", "0", "false", "no", "off"}


def env_flag(name: str) -> bool:
    """Read a boolean environment variable. Unset means False."""
    value = os.getenv(name)
    if value is None:
        return False
    return value.strip().lower() not in _FALSE_VALUES


def _env_seconds(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    value = float(raw)
    if not math.isfinite(value) or value < 0:
        raise ValueError(f"{name} must be a finite non-negative number, got {raw!r}")
    return value


def _env_port(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    value = int(raw)
    if not 0 < value < 65536:
        raise ValueError(f"{name} must be a port in 1..65535, got {raw!r}")
    return value


@dataclass(frozen=True)
class TailConfig:
    """Settings shared by every node poller."""

    verbose_failures: bool = False
    request_timeout: float = 5.0  # seconds per get_events call
    failure_backoff: float = 1.0  # sleep after a transport failure
    poll_interval: float = 0.2  # sleep after a successful poll
    debug_port: int = DEFAULT_DEBUG_PORT

    @classmethod
    def from_env(cls) -> "TailConfig":
        """Build config from VERBOSE and TAIL_* environment variables."""
        return cls(
            verbose_failures=env_flag("VERBOSE"),
            request_timeout=_env_seconds("TAIL_REQUEST_TIMEOUT", 5.0),
            failure_backoff=_env_seconds("TAIL_FAILURE_BACKOFF", 1.0),
            poll_interval=_env_seconds("TAIL_POLL_INTERVAL", 0.2),
            debug_port=_env_port("TAIL_DEBUG_PORT", DEFAULT_DEBUG_PORT),
        )


def parse_nodes(
    value: str | None, default_port: int = DEFAULT_DEBUG_PORT
) -> list[NodeDescriptor]:
    """
    Parse a node list such as ``node-1=10.0.0.1,node-2=10.0.0.2:7000``.

    Args:
        value: Comma-separated ``identity=address[:port]`` entries.
        default_port: Port used when an entry does not name one.

    Returns:
        Node descriptors in the order given.
    """
    if not value:
        return []

    nodes = []
    for entry in value.split(","):
        entry = entry.strip()
        if not entry:
            continue
        identity, sep, target = entry.partition("=")
        if not sep or not identity.strip() or not target.strip():
            raise ValueError(f"Invalid node entry: {entry!r}")

        address, _, port = target.strip().rpartition(":")
        if not address:
            address, port = port, ""
        nodes.append(
            NodeDescriptor(
                identity=identity.strip(),
                address=address,
                port=int(port) if port else default_port,
            )
        )
    return nodes
