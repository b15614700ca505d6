"""
Logging setup for Job Copilot.

setup_logging installs one stdout handler on the root logger at startup.
get_logger wraps a module logger so every record carries the requesting
user and the operation name: as a "[user:abc123] [step]" message prefix in
the simple format, and as separate fields in the JSON format.

Usage:
    log = get_logger(__name__, user_id=user.id, step="generate_insights")
    log.info("Using default insights")
"""

import json
import logging
import os
import sys
from datetime import datetime, timezone
from typing import Any, MutableMapping, Optional, Tuple

# DEBUG_MODE=true lowers every context logger to DEBUG
DEBUG_MODE = os.getenv("DEBUG_MODE", "false").lower() == "true"

CONTEXT_FIELDS = ("user_id", "step")


class ContextLogger(logging.LoggerAdapter):
    """Adapter that tags records with user_id and step."""

    def __init__(self, logger: logging.Logger, user_id: Optional[str] = None, step: Optional[str] = None):
        super().__init__(logger, {"user_id": user_id, "step": step})

    @property
    def user_id(self) -> Optional[str]:
        return self.extra["user_id"]

    @property
    def step(self) -> Optional[str]:
        return self.extra["step"]

    def process(self, msg: Any, kwargs: MutableMapping[str, Any]) -> Tuple[Any, MutableMapping[str, Any]]:
        kwargs["extra"] = {**self.extra, **(kwargs.get("extra") or {})}

        tags = []
        if self.user_id:
            tags.append(f"[user:{str(self.user_id)[-6:]}]")
        if self.step:
            tags.append(f"[{self.step}]")
        if tags:
            msg = f"{' '.join(tags)} {msg}"
        return msg, kwargs


class JsonFormatter(logging.Formatter):
    """One JSON object per line; context fields are omitted when unset."""

    def format(self, record: logging.LogRecord) -> str:
        event = {
            "time": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "name": record.name,
            "message": record.getMessage(),
        }
        for field in CONTEXT_FIELDS:
            value = getattr(record, field, None)
            if value is not None:
                event[field] = str(value)
        if record.exc_info:
            event["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(event)


def setup_logging(level: str = "INFO", format: str = "simple") -> None:
    """
    Configure the root logger.

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ERROR)
        format: "simple" for human-readable lines, "json" for aggregators
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(log_level)
    if format == "json":
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        ))

    root_logger.addHandler(handler)
    root_logger.setLevel(log_level)


def get_logger(name: str, user_id: Optional[str] = None, step: Optional[str] = None) -> ContextLogger:
    """Context logger for module name, tagged with the caller's user and step."""
    logger = logging.getLogger(name)
    if DEBUG_MODE:
        logger.setLevel(logging.DEBUG)
    return ContextLogger(logger, user_id, step)
