"""Centralized logging configuration using Loguru.

Usage:
    from csindex.utils.logging import logger
    logger.info("index {}", root)
    logger.debug("Debug message")  # Only shows if CSINDEX_LOG_LEVEL=DEBUG or --verbose

Environment Variables:
    CSINDEX_LOG_LEVEL: DEBUG|INFO|WARNING|ERROR (default: INFO)
    CSINDEX_LOG_JSON: 0|1 (default: 0, human-readable)
    CSINDEX_LOG_FILE: path to log file (optional, always NDJSON)
"""

import json
import os
import sys

from loguru import logger

# Remove default handler
logger.remove()

_log_level = os.environ.get("CSINDEX_LOG_LEVEL", "INFO").upper()
_json_mode = os.environ.get("CSINDEX_LOG_JSON", "0") == "1"
_log_file = os.environ.get("CSINDEX_LOG_FILE")


def _ndjson_record(message) -> str:
    """Render one loguru record as a single JSON line."""
    record = message.record
    payload = {
        "level": record["level"].name,
        "time": int(record["time"].timestamp() * 1000),
        "msg": record["message"],
        "pid": record["process"].id,
    }
    for key, value in record["extra"].items():
        payload[key] = value
    if record["exception"]:
        payload["err"] = {
            "type": record["exception"].type.__name__ if record["exception"].type else "Error",
            "message": str(record["exception"].value) if record["exception"].value else "",
        }
    return json.dumps(payload)


def ndjson_sink(message):
    """Write NDJSON records to stderr.

    Never call logger.* inside a sink, it recurses.
    """
    sys.stderr.write(_ndjson_record(message) + "\n")
    sys.stderr.flush()


# Human-readable format, same shape as the original cindex log lines
_human_format = (
    "<green>{time:HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<level>{message}</level>"
)

logger.level("DEBUG", color="<blue>")
logger.level("INFO", color="<white>")
logger.level("WARNING", color="<yellow>")
logger.level("ERROR", color="<red>")

_console_handler_id: int | None = None


def _add_console_handler(level: str) -> int:
    if _json_mode:
        return logger.add(ndjson_sink, level=level, colorize=False)
    return logger.add(
        sys.stderr,
        level=level,
        format=_human_format,
        colorize=None,  # Auto-detect: colors if TTY, plain if piped
    )


_console_handler_id = _add_console_handler(_log_level)

if _log_file:
    def _file_sink(message):
        """Append NDJSON records to the configured log file."""
        with open(_log_file, "a", encoding="utf-8") as f:
            f.write(_ndjson_record(message) + "\n")

    logger.add(_file_sink, level="DEBUG")


def set_console_level(level: str) -> None:
    """Swap the console handler for one at ``level``.

    Used by ``cindex --verbose`` to surface DEBUG diagnostics without
    touching the optional file handler.
    """
    global _console_handler_id, _log_level

    if _console_handler_id is not None:
        try:
            logger.remove(_console_handler_id)
        except ValueError:
            pass  # Already removed
    _log_level = level.upper()
    _console_handler_id = _add_console_handler(_log_level)


def get_console_level() -> str:
    """Return the level of the active console handler."""
    return _log_level


__all__ = [
    "logger",
    "ndjson_sink",
    "set_console_level",
    "get_console_level",
]
