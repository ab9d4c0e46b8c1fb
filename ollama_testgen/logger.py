"""
Structured Logging for ollama-testgen.
Outputs JSON-formatted logs for machine readability.
"""

import json
import sys
import logging
from datetime import datetime, timezone

LOGGER_NAME = "OllamaTestGen"

# Configure root logger
logger = logging.getLogger(LOGGER_NAME)
logger.setLevel(logging.INFO)
handler = logging.StreamHandler(sys.stdout)
logger.addHandler(handler)

class JsonFormatter(logging.Formatter):
    """JSON formatter that dynamically extracts all extra fields."""

    # Standard LogRecord attributes to exclude (these are Python logging internals)
    STANDARD_ATTRS = {
        'name', 'msg', 'args', 'created', 'filename', 'funcName', 'levelname',
        'levelno', 'lineno', 'module', 'msecs', 'message', 'pathname', 'process',
        'processName', 'relativeCreated', 'thread', 'threadName', 'exc_info',
        'exc_text', 'stack_info', 'asctime', 'taskName'
    }

    def format(self, record):
        log_record = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "message": record.getMessage(),
            "module": record.module,
        }

        for key, value in record.__dict__.items():
            if key not in self.STANDARD_ATTRS and not key.startswith('_'):
                try:
                    json.dumps(value)
                    log_record[key] = value
                except (TypeError, ValueError):
                    # Exceptions, paths and the like
                    log_record[key] = str(value)

        return json.dumps(log_record)

handler.setFormatter(JsonFormatter())

def get_logger(component: str = "SYSTEM"):
    return ComponentLogger(component)

def set_level(level: str) -> None:
    """Set the level of the shared logger (e.g. "DEBUG", "WARNING")."""
    logger.setLevel(level.upper())

class ComponentLogger:
    def __init__(self, component):
        self.component = component
        self.logger = logging.getLogger(LOGGER_NAME)

    def _extra(self, kwargs):
        extra = {"component": self.component}
        extra.update(kwargs)
        return extra

    def debug(self, msg, **kwargs):
        self.logger.debug(msg, extra=self._extra(kwargs))

    def info(self, msg, **kwargs):
        self.logger.info(msg, extra=self._extra(kwargs))

    def warning(self, msg, **kwargs):
        self.logger.warning(msg, extra=self._extra(kwargs))

    def error(self, msg, **kwargs):
        self.logger.error(msg, extra=self._extra(kwargs))
