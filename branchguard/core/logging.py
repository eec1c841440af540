"""Logging setup with contextual dimensions.

Every logger handed out by this module is a ``ContextualLogger``: a
``LoggerAdapter`` that carries a dict of dimensions (request id, user id,
branch root, ...) and attaches them to each record. Locally records are
rendered as readable text; elsewhere as one JSON object per line.

Usage:
    from branchguard.core.logging import logger

    request_logger = logger.with_context(request_id="abc", user_id="7")
    request_logger.info("Resolved branch root")
"""

import json
import logging
import sys
from typing import Any, Dict, MutableMapping, Optional, Tuple

from branchguard.core.config import settings

_RESERVED_ATTRS = frozenset(
    logging.LogRecord("", 0, "", 0, "", (), None).__dict__.keys() | {"message", "asctime"}
)


class JSONFormatter(logging.Formatter):
    """Render a record and its dimensions as a single JSON line."""

    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "timestamp": self.formatTime(record, "%Y-%m-%dT%H:%M:%S"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key, value in record.__dict__.items():
            if key not in _RESERVED_ATTRS and key != "dimensions" and not key.startswith("_"):
                payload[key] = value
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


class _DimensionFormatter(logging.Formatter):
    """Text formatter that appends dimensions as ``key=value`` pairs."""

    def format(self, record: logging.LogRecord) -> str:
        base = super().format(record)
        dims = getattr(record, "dimensions", None)
        if not dims:
            return base
        rendered = " ".join(f"{k}={v}" for k, v in dims.items())
        return f"{base} [{rendered}]"


class ContextualLogger(logging.LoggerAdapter):
    """Logger adapter that carries dimensions through ``with_context``."""

    def __init__(self, logger: logging.Logger, dimensions: Optional[Dict[str, Any]] = None):
        super().__init__(logger, dict(dimensions or {}))
        self.dimensions: Dict[str, Any] = dict(dimensions or {})

    def process(
        self, msg: Any, kwargs: MutableMapping[str, Any]
    ) -> Tuple[Any, MutableMapping[str, Any]]:
        extra = dict(self.dimensions)
        extra.update(kwargs.get("extra") or {})
        extra["dimensions"] = dict(self.dimensions)
        kwargs["extra"] = extra
        return msg, kwargs

    def with_context(self, **dimensions: Any) -> "ContextualLogger":
        """Return a new logger with additional dimensions merged in."""
        merged = {**self.dimensions, **{k: str(v) for k, v in dimensions.items()}}
        return ContextualLogger(self.logger, merged)


class LoggerConfigurator:
    """Builds configured loggers for the service."""

    _configured: set = set()

    @staticmethod
    def _handler() -> logging.Handler:
        handler = logging.StreamHandler(sys.stdout)
        if settings.is_local:
            handler.setFormatter(
                _DimensionFormatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
            )
        else:
            handler.setFormatter(JSONFormatter())
        return handler

    @classmethod
    def configure_logger(
        cls, name: str, dimensions: Optional[Dict[str, Any]] = None
    ) -> ContextualLogger:
        """Configure (once) and return a contextual logger for ``name``."""
        base = logging.getLogger(name)
        if name not in cls._configured:
            base.setLevel(settings.LOG_LEVEL.upper())
            base.addHandler(cls._handler())
            base.propagate = False
            cls._configured.add(name)
        return ContextualLogger(base, {k: str(v) for k, v in (dimensions or {}).items()})


logger = LoggerConfigurator.configure_logger("branchguard")
