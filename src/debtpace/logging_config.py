"""Structured logging configuration with JSON output and rotation."""

from __future__ import annotations

import json
import logging
import logging.handlers
from datetime import datetime, timezone
from pathlib import Path

ROOT_LOGGER_NAME = "debtpace"


# Attributes every LogRecord carries; anything else arrived through ``extra=``.
_RECORD_ATTRS = frozenset(vars(logging.LogRecord("", 0, "", 0, "", (), None))) | {
    "message",
    "asctime",
}


class JSONFormatter(logging.Formatter):
    """One JSON object per record, with ``extra=`` values as top-level keys.

    Engine log calls carry their calculation inputs (debt ids, balances, rates)
    as extras, so each line can be filtered on them directly.
    """

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "ts": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "at": f"{record.module}:{record.lineno}",
        }
        for key, value in record.__dict__.items():
            if key not in _RECORD_ATTRS and key not in entry:
                entry[key] = value
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


def setup_logging(
    level: int | str = logging.WARNING,
    *,
    json_output: bool = False,
    log_dir: Path | None = None,
) -> logging.Logger:
    """Configure the ``debtpace`` logger tree.

    Args:
        level: Threshold for the console handler and the logger itself
        json_output: Emit JSON lines on the console instead of the readable format
        log_dir: When given, also write rotating JSON logs to ``log_dir/debtpace.log``

    Returns:
        Configured package logger
    """
    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    root_logger.setLevel(level)

    # Remove existing handlers to avoid duplicates
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    if json_output:
        console_handler.setFormatter(JSONFormatter())
    else:
        console_handler.setFormatter(
            logging.Formatter(
                fmt="[%(asctime)s] %(levelname)-8s [%(name)s.%(funcName)s:%(lineno)d] %(message)s",
                datefmt="%H:%M:%S",
            )
        )
    root_logger.addHandler(console_handler)

    if log_dir is not None:
        log_dir = Path(log_dir)
        log_dir.mkdir(parents=True, exist_ok=True)
        file_handler = logging.handlers.RotatingFileHandler(
            filename=log_dir / "debtpace.log",
            maxBytes=10 * 1024 * 1024,  # 10 MB
            backupCount=5,
            encoding="utf-8",
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(JSONFormatter())
        root_logger.addHandler(file_handler)

    root_logger.debug(
        "Logging initialized",
        extra={"json_output": json_output, "log_dir": str(log_dir) if log_dir else None},
    )
    return root_logger


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance for a specific module.

    Args:
        name: Logger name (usually the module's short name)

    Returns:
        Logger instance
    """
    if name.startswith(f"{ROOT_LOGGER_NAME}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


__all__ = ["JSONFormatter", "ROOT_LOGGER_NAME", "get_logger", "setup_logging"]
