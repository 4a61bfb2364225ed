"""
Structured logging configuration.

Every record carries the service name, its logger and call site. Records
logged with ``extra={"identity_id": ...}`` keep that field, so auth and
workflow events can be filtered per account.
"""

import logging
import sys
from typing import Any, Dict
from datetime import datetime, timezone
from pythonjsonlogger import jsonlogger

# Libraries that are too chatty at INFO
QUIET_LOGGERS = {
    "sqlalchemy.engine": logging.WARNING,
    "passlib": logging.ERROR,
    "uvicorn.access": logging.INFO,
}


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """JSON formatter stamping service and source fields onto each record."""

    def __init__(self, *args, service: str = "job-match-api", **kwargs):
        super().__init__(*args, **kwargs)
        self.service = service

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)

        log_record['timestamp'] = datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat().replace('+00:00', 'Z')
        log_record['service'] = self.service
        log_record['level'] = record.levelname
        log_record['logger'] = record.name
        log_record['function'] = record.funcName

        identity_id = getattr(record, "identity_id", None)
        if identity_id is not None:
            log_record['identity_id'] = identity_id

        # Source location only where someone will go looking for it
        if record.levelno >= logging.WARNING:
            log_record['line'] = record.lineno
            log_record['pathname'] = record.pathname


def setup_logging(log_level: str = "INFO", json_logs: bool = True, service: str = "job-match-api") -> None:
    """
    Configure the root logger.

    Args:
        log_level: Logging level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_logs: JSON lines for production, plain text for local runs
        service: Value of the ``service`` field on JSON records
    """
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stdout)

    if json_logs:
        formatter = CustomJsonFormatter('%(timestamp)s %(level)s %(logger)s %(message)s', service=service)
    else:
        formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )

    console_handler.setFormatter(formatter)

    root_logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))
    root_logger.addHandler(console_handler)

    for name, level in QUIET_LOGGERS.items():
        logging.getLogger(name).setLevel(level)
