"""Process logging setup shared by the HTTP and gRPC listeners."""

from __future__ import annotations

import logging

_LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
_SERVER_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access", "grpc")


def resolve_log_level(level: str) -> int:
    """Map a level name to its logging constant, falling back to INFO."""

    normalized_level = level.strip().upper() or "INFO"
    resolved_level = getattr(logging, normalized_level, logging.INFO)
    return resolved_level if isinstance(resolved_level, int) else logging.INFO


def configure_logging(*, level: str) -> None:
    """Configure root logging and route server library loggers through it."""

    resolved_level = resolve_log_level(level)
    logging.basicConfig(level=resolved_level, format=_LOG_FORMAT)

    for name in _SERVER_LOGGERS:
        server_logger = logging.getLogger(name)
        server_logger.handlers.clear()
        server_logger.propagate = True
        server_logger.setLevel(resolved_level)
