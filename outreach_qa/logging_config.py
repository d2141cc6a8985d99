"""
Structured Logging Configuration - Single setup for the engine and its tools.

Call setup_logging() once at process startup (the CLI scripts do this). Engine
modules only ever fetch named loggers, so embedding applications keep full
control of handlers:
    from outreach_qa.logging_config import get_agent_logger
    logger = get_agent_logger("safe_optimizer")

Two formats:
- "text": Human-readable with timestamps and logger names
- "json": One JSON object per line for aggregation
"""

import json
import logging
import os
import sys
from datetime import datetime, timezone

from outreach_qa.config import LOG_LEVEL, LOG_FORMAT, LOG_FILE

# Extra fields copied into JSON log lines when a call site passes them
_EXTRA_FIELDS = ("phase", "request_id", "element", "email_type", "duration_ms", "agent_name")


class JSONFormatter(logging.Formatter):
    """Structured JSON log formatter."""

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        if record.exc_info and record.exc_info[0]:
            log_entry["exception"] = {
                "type": record.exc_info[0].__name__,
                "message": str(record.exc_info[1]),
            }

        for key in _EXTRA_FIELDS:
            if hasattr(record, key):
                log_entry[key] = getattr(record, key)

        return json.dumps(log_entry)


class TextFormatter(logging.Formatter):
    """Human-readable log formatter for development."""

    def __init__(self):
        super().__init__(
            fmt="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S"
        )


_initialized = False


def setup_logging(level: str = None, fmt: str = None, log_file: str = None):
    """Configure the "outreach_qa" logger tree.

    Safe to call multiple times (idempotent).

    Args:
        level: Log level override (default: LOG_LEVEL from config)
        fmt: Format override ("text" or "json", default: LOG_FORMAT from config)
        log_file: Log file path override (default: LOG_FILE from config)
    """
    global _initialized
    if _initialized:
        return
    _initialized = True

    level = level or LOG_LEVEL
    fmt = fmt or LOG_FORMAT
    log_file = log_file or LOG_FILE

    engine_logger = logging.getLogger("outreach_qa")
    engine_logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    engine_logger.handlers.clear()
    engine_logger.propagate = False

    formatter = JSONFormatter() if fmt == "json" else TextFormatter()

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)
    engine_logger.addHandler(console_handler)

    if log_file:
        os.makedirs(os.path.dirname(log_file) or ".", exist_ok=True)
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(formatter)
        engine_logger.addHandler(file_handler)

    engine_logger.info("Logging configured: level=%s, format=%s%s",
                       level, fmt, f", file={log_file}" if log_file else "")


def get_agent_logger(agent_name: str) -> logging.Logger:
    """Get a named logger for an agent module.

    Usage:
        logger = get_agent_logger("safe_optimizer")
        logger.info("Model call finished", extra={"request_id": "ab12", "duration_ms": 840})
    """
    return logging.getLogger(f"outreach_qa.agents.{agent_name}")
