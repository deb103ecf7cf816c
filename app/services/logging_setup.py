from __future__ import annotations

import logging
import os
from datetime import datetime
from logging.handlers import RotatingFileHandler

_LOG_FORMAT = "[%(asctime)s] [%(levelname)s] [%(name)s] %(message)s"
_HANDLER_PREFIX = "summarizer_"


def _formatter() -> logging.Formatter:
    return logging.Formatter(_LOG_FORMAT, "%H:%M:%S")


def _build_file_handler(log_path: str) -> RotatingFileHandler:
    handler = RotatingFileHandler(log_path, maxBytes=5_000_000, backupCount=3, encoding="utf-8")
    handler.setFormatter(_formatter())
    handler.setLevel(logging.DEBUG)
    handler.name = f"{_HANDLER_PREFIX}file"
    return handler


def _build_stream_handler(level: int) -> logging.StreamHandler:
    handler = logging.StreamHandler()
    handler.setFormatter(_formatter())
    handler.setLevel(level)
    handler.name = f"{_HANDLER_PREFIX}stream"
    return handler


def _install(logger: logging.Logger, handlers: list[logging.Handler]) -> None:
    # Drop our handlers from a previous configure call; leave foreign ones alone.
    for existing in list(logger.handlers):
        if (existing.name or "").startswith(_HANDLER_PREFIX):
            logger.removeHandler(existing)
            if existing not in handlers:
                existing.close()
    for handler in handlers:
        logger.addHandler(handler)


def configure_logging(logs_dir: str | None = None) -> str:
    """Send logs to a per-boot rotating file and to stderr. Returns the file path."""
    logs_dir = logs_dir or os.path.join(os.getcwd(), "logs")
    os.makedirs(logs_dir, exist_ok=True)

    timestamp = datetime.now().strftime("%Y-%m-%d_%H-%M-%S")
    log_path = os.path.join(logs_dir, f"server_{timestamp}.log")
    stream_level = logging.getLevelName(os.environ.get("LOG_LEVEL", "INFO").upper())
    if not isinstance(stream_level, int):
        stream_level = logging.INFO

    handlers: list[logging.Handler] = [
        _build_file_handler(log_path),
        _build_stream_handler(stream_level),
    ]

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)
    _install(root_logger, handlers)

    # uvicorn loggers keep their own handlers; route them through ours instead.
    for name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        uv_logger = logging.getLogger(name)
        uv_logger.setLevel(logging.INFO)
        _install(uv_logger, handlers)
        uv_logger.propagate = False

    root_logger.info("Logging initialized: %s", log_path)
    return log_path
