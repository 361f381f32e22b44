"""Structured logging for the tail process.

Every record is one JSON object per line. Records about a single node carry
its identity as a top-level ``validator`` field so a cluster-wide log can be
filtered per node.
"""

import json
import logging
import logging.config
import os
from datetime import datetime, timezone
from pathlib import Path

from .config import DEFAULT_LOG_PATH

# Chatty per-request loggers of the HTTP stack; one line per poll otherwise
QUIET_LOGGERS = ("httpx", "httpcore")

LOG_ROTATE_BYTES = 10 * 1024 * 1024
LOG_ROTATE_KEEP = 5


def node_context(identity: str, **fields) -> dict:
    """``extra=`` mapping that tags a record with the node it concerns."""
    return {"context": {"validator": identity, **fields}}


class JSONFormatter(logging.Formatter):
    """One JSON object per record, node identity lifted to the top level."""

    def format(self, record: logging.LogRecord) -> str:
        created = datetime.fromtimestamp(record.created, timezone.utc)
        entry = {
            "timestamp": created.isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "location": f"{record.module}.{record.funcName}:{record.lineno}",
        }

        context = dict(getattr(record, "context", None) or {})
        validator = context.pop("validator", None)
        if validator is not None:
            entry["validator"] = validator
        if context:
            entry["context"] = context

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str)


def build_logging_config(log_level: str, log_file: str | None) -> dict:
    """dictConfig mapping: stdout always, rotating file when ``log_file`` is set."""
    handlers = {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "json",
            "stream": "ext://sys.stdout",
        },
    }
    if log_file:
        handlers["file"] = {
            "class": "logging.handlers.RotatingFileHandler",
            "filename": log_file,
            "maxBytes": LOG_ROTATE_BYTES,
            "backupCount": LOG_ROTATE_KEEP,
            "formatter": "json",
            "encoding": "utf-8",
        }

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "json": {"()": "cluster_tail.logging_config.JSONFormatter"},
        },
        "handlers": handlers,
        "loggers": {name: {"level": "WARNING"} for name in QUIET_LOGGERS},
        "root": {
            "level": log_level.upper(),
            "handlers": list(handlers),
        },
    }


def setup_logging(
    log_level: str | None = None,
    log_file: str | None = None,
) -> None:
    """
    Configure root logging for the tail process.

    Args:
        log_level: DEBUG, INFO, ... Defaults to LOG_LEVEL env var or INFO.
        log_file: Rotating log file. Defaults to LOG_FILE env var, then
                  04_logs/tail.log. An empty string logs to stdout only.
    """
    if log_level is None:
        log_level = os.getenv("LOG_LEVEL", "INFO")
    if log_file is None:
        log_file = os.getenv("LOG_FILE", str(DEFAULT_LOG_PATH))

    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)

    logging.config.dictConfig(build_logging_config(log_level, log_file))


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
