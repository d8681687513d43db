"""Logging for swixter.

A single ``swixter`` logger writes warnings to stderr (level taken from
``SWIXTER_LOG_LEVEL``) and, once ``--log-file`` is given, every record to a
file with the record's ``extra`` fields appended as JSON.
"""

import json
import logging
import os
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional


# Attributes every LogRecord carries; anything else came in through ``extra``.
_STANDARD_ATTRS = frozenset(
    logging.LogRecord("", logging.NOTSET, "", 0, "", (), None).__dict__
) | {"message", "asctime"}


class StructuredFormatter(logging.Formatter):
    """UTC ISO timestamps, with ``extra`` fields serialized after the message."""

    def formatTime(self, record: logging.LogRecord, datefmt: Optional[str] = None) -> str:
        stamp = datetime.fromtimestamp(record.created, tz=timezone.utc)
        return stamp.strftime("%Y-%m-%dT%H:%M:%S.%f")[:-3] + "Z"

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        context = {
            key: value
            for key, value in vars(record).items()
            if key not in _STANDARD_ATTRS and not key.startswith("_")
        }
        if not context:
            return message
        return f"{message} | {json.dumps(context, sort_keys=True, default=str)}"


class SwixterLogger:
    """Thin wrapper owning the console and optional file handler."""

    def __init__(self, name: str = "swixter"):
        self.logger = logging.getLogger(name)
        self.logger.setLevel(logging.DEBUG)
        self.logger.propagate = False

        if not self.logger.handlers:
            level_name = os.getenv("SWIXTER_LOG_LEVEL", "WARNING").upper()
            console = logging.StreamHandler(sys.stderr)
            console.setLevel(getattr(logging, level_name, logging.WARNING))
            console.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))
            self.logger.addHandler(console)

        self._file_handler: Optional[logging.FileHandler] = None

    def attach_file_handler(self, log_file: Path) -> Path:
        """Send every record to ``log_file``, replacing a previous file handler."""
        if self._file_handler is not None:
            if self._file_handler.baseFilename == os.path.abspath(log_file):
                return log_file
            self.logger.removeHandler(self._file_handler)
            self._file_handler.close()

        log_file.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(log_file, encoding="utf-8")
        handler.setLevel(logging.DEBUG)
        handler.setFormatter(StructuredFormatter("%(asctime)s [%(levelname)s] %(message)s"))
        self.logger.addHandler(handler)
        self._file_handler = handler
        return log_file

    def debug(self, message: str, *args: Any, **kwargs: Any) -> None:
        self.logger.debug(message, *args, **kwargs)

    def info(self, message: str, *args: Any, **kwargs: Any) -> None:
        self.logger.info(message, *args, **kwargs)

    def warning(self, message: str, *args: Any, **kwargs: Any) -> None:
        self.logger.warning(message, *args, **kwargs)


_logger: Optional[SwixterLogger] = None


def get_logger() -> SwixterLogger:
    """Return the process-wide logger, creating it on first use."""
    global _logger
    if _logger is None:
        _logger = SwixterLogger()
    return _logger


def enable_file_logging(log_file: Path) -> Path:
    logger = get_logger()
    logger.attach_file_handler(log_file)
    logger.debug("[logging] File logging enabled", extra={"log_file": str(log_file)})
    return log_file
