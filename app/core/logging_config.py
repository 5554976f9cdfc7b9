"""
Logging setup for the interview portal.

One stdout handler on the root logger: JSON lines when JSON_LOGS is on,
a readable single-line format otherwise.
"""

import logging
import sys
from typing import Any, Dict, Optional
from pythonjsonlogger import jsonlogger

from app.core.clock import as_aware_utc, utcnow

# Third-party loggers that are only interesting when something breaks
QUIET_LOGGERS = {
    "sqlalchemy.engine": logging.WARNING,
    "passlib": logging.ERROR,  # bcrypt version probe noise
    "uvicorn.access": logging.WARNING,
    "alembic.runtime.migration": logging.WARNING,
}

TEXT_FORMAT = "%(asctime)s %(levelname)-8s [%(name)s] %(message)s"


class ServiceJsonFormatter(jsonlogger.JsonFormatter):
    """Adds timestamp, level, logger and service to every JSON record."""

    def __init__(self, *args, service: Optional[str] = None, **kwargs):
        super().__init__(*args, **kwargs)
        self.service = service

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)

        log_record["timestamp"] = as_aware_utc(utcnow()).isoformat()
        log_record["level"] = record.levelname
        log_record["logger"] = record.name
        if self.service:
            log_record["service"] = self.service

        if record.levelno >= logging.WARNING:
            log_record["location"] = f"{record.pathname}:{record.lineno}"


def setup_logging(log_level: str = "INFO", json_logs: bool = True, service: Optional[str] = None) -> None:
    """
    Configure the root logger. Safe to call more than once.

    Args:
        log_level: DEBUG, INFO, WARNING, ERROR or CRITICAL
        json_logs: JSON lines (production) or plain text (development)
        service: Value for the `service` field of JSON records
    """
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    if json_logs:
        handler.setFormatter(ServiceJsonFormatter("%(message)s", service=service))
    else:
        handler.setFormatter(logging.Formatter(TEXT_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))

    root_logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))
    root_logger.addHandler(handler)

    for name, level in QUIET_LOGGERS.items():
        logging.getLogger(name).setLevel(level)
