"""
Logging setup for the ``tplkit`` logger hierarchy.

Applications embedding the library keep their own logging configuration;
the command line calls :func:`configure_logging` to attach handlers to the
``tplkit`` logger only.
"""
import json
import logging
import logging.handlers
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional, TextIO

LOGGER_NAME = "tplkit"

DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Attributes the registry attaches through ``extra``.
CONTEXT_FIELDS = ("composite", "fragment", "template", "path")


class JsonFormatter(logging.Formatter):
    """One JSON object per record, with template context when present."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for field in CONTEXT_FIELDS:
            if hasattr(record, field):
                log_data[field] = getattr(record, field)

        if record.exc_info:
            log_data["exception"] = {
                "type": record.exc_info[0].__name__,
                "message": str(record.exc_info[1]),
                "traceback": self.formatException(record.exc_info)
            }
        return json.dumps(log_data)


def parse_level(level: str) -> int:
    """Translate a level name such as ``debug`` into its numeric value."""
    value = logging.getLevelName(level.upper())
    if not isinstance(value, int):
        raise ValueError(f"Invalid log level '{level}'")
    return value


def configure_logging(
    level: str = "WARNING",
    log_file: Optional[str] = None,
    json_logging: bool = False,
    stream: Optional[TextIO] = None,
    max_bytes: int = 10 * 1024 * 1024,  # 10MB
    backup_count: int = 5
) -> List[logging.Handler]:
    """
    Replace the handlers of the ``tplkit`` logger.

    Args:
        level: Level name
        log_file: Also write to this file, rotated at ``max_bytes``
        json_logging: Emit JSON records instead of plain text
        stream: Console stream, stderr by default
        max_bytes: Size at which the log file rotates
        backup_count: Rotated files to keep

    Returns:
        The handlers now attached

    Raises:
        ValueError: If the level name is unknown
    """
    numeric_level = parse_level(level)
    formatter = JsonFormatter() if json_logging else logging.Formatter(DEFAULT_FORMAT)

    handlers: List[logging.Handler] = [logging.StreamHandler(stream)]
    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.handlers.RotatingFileHandler(
            log_file,
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding="utf-8"
        ))

    logger = logging.getLogger(LOGGER_NAME)
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
        handler.close()
    for handler in handlers:
        handler.setFormatter(formatter)
        handler.setLevel(numeric_level)
        logger.addHandler(handler)
    logger.setLevel(numeric_level)
    return handlers
