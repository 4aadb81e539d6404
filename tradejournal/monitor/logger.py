"""Structured logging configuration."""

import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

TRADE_LOGGER_NAME = "tradejournal.trades"

# Record attributes copied into trade log lines
TRADE_FIELDS = ("trade_id", "symbol", "direction", "status", "price", "size", "pnl")

# Fields a log line may not take from context or extra_data
RESERVED_FIELDS = frozenset({"timestamp", "level", "logger", "message", "exception", "event"})


def _utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


def _merge(log_data: dict[str, Any], fields: Any) -> None:
    if not isinstance(fields, dict):
        return
    for key, value in fields.items():
        if key not in RESERVED_FIELDS:
            log_data[key] = value


class JsonFormatter(logging.Formatter):
    """
    One JSON object per line.

    Journal context from LogContext (owner_id and any bound ids) comes first,
    then the record's extra_data, passed as extra={"extra_data": {...}}.
    """

    def format(self, record: logging.LogRecord) -> str:
        log_data: dict[str, Any] = {
            "timestamp": _utc_timestamp(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        _merge(log_data, getattr(record, "context", None))
        _merge(log_data, getattr(record, "extra_data", None))

        return json.dumps(log_data, ensure_ascii=False, default=str)


class TradeFormatter(logging.Formatter):
    """Trade open/close events, tagged with the owning user."""

    def format(self, record: logging.LogRecord) -> str:
        log_data: dict[str, Any] = {
            "timestamp": _utc_timestamp(),
            "event": record.getMessage(),
        }

        context = getattr(record, "context", None) or {}
        if "owner_id" in context:
            log_data["owner_id"] = context["owner_id"]

        for attr in TRADE_FIELDS:
            if hasattr(record, attr):
                log_data[attr] = getattr(record, attr)

        return json.dumps(log_data, ensure_ascii=False, default=str)


def setup_logging(
    log_dir: Path,
    level: str = "INFO",
    json_format: bool = True,
) -> None:
    """
    Configure logging for the application.

    Creates three log files:
    - app.log: General application logs
    - trades.log: Trade open/close events
    - errors.log: Error logs only

    Console output goes to stderr so command output on stdout stays parseable.

    Args:
        log_dir: Directory for log files
        level: Log level (DEBUG, INFO, WARNING, ERROR)
        json_format: Use JSON formatting if True
    """
    log_dir.mkdir(parents=True, exist_ok=True)

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level))

    root_logger.handlers.clear()

    if json_format:
        app_formatter = JsonFormatter()
    else:
        app_formatter = logging.Formatter(
            "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(logging.WARNING)
    console_handler.setFormatter(app_formatter)
    root_logger.addHandler(console_handler)

    app_handler = logging.FileHandler(log_dir / "app.log")
    app_handler.setLevel(logging.DEBUG)
    app_handler.setFormatter(app_formatter)
    root_logger.addHandler(app_handler)

    error_handler = logging.FileHandler(log_dir / "errors.log")
    error_handler.setLevel(logging.ERROR)
    error_handler.setFormatter(app_formatter)
    root_logger.addHandler(error_handler)

    trade_logger = logging.getLogger(TRADE_LOGGER_NAME)
    trade_logger.setLevel(logging.INFO)
    trade_logger.propagate = False
    trade_logger.handlers.clear()

    trade_handler = logging.FileHandler(log_dir / "trades.log")
    trade_handler.setLevel(logging.INFO)
    if json_format:
        trade_handler.setFormatter(TradeFormatter())
    else:
        trade_handler.setFormatter(logging.Formatter(
            "%(asctime)s | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        ))
    trade_logger.addHandler(trade_handler)

    logging.getLogger("aiosqlite").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


def get_trade_logger() -> logging.Logger:
    """Get the trade lifecycle logger."""
    return logging.getLogger(TRADE_LOGGER_NAME)


class LogContext:
    """
    Bind the requesting owner (and optional ids) to every record logged inside.

    Contexts nest; inner fields extend and override outer ones.

    Usage:
        with LogContext("user-1", command="close"):
            await manager.close_trade(...)
    """

    def __init__(self, owner_id: str, **fields: Any) -> None:
        self.fields: dict[str, Any] = {"owner_id": owner_id, **fields}
        self._old_factory = None

    def __enter__(self) -> "LogContext":
        self._old_factory = logging.getLogRecordFactory()

        def record_factory(*args: Any, **kwargs: Any) -> logging.LogRecord:
            record = self._old_factory(*args, **kwargs)
            record.context = {**getattr(record, "context", {}), **self.fields}
            return record

        logging.setLogRecordFactory(record_factory)
        return self

    def __exit__(self, *args: Any) -> None:
        if self._old_factory:
            logging.setLogRecordFactory(self._old_factory)
