# 📄 File: harvest_hub/shared/utils/logging.py

# 🧭 Purpose (Layman Explanation):
# Sets up how Harvest Hub writes its logs, so every line says which request it belongs to
# and can be read by both people and log search tools.

# 🧪 Purpose (Technical Summary):
# Structured logging configuration with JSON formatting (python-json-logger), request
# correlation through context variables, and a plain-text fallback format for development.

# 🔗 Dependencies:
# - python-json-logger: JSON log formatting
# - logging: Python standard logging
# - contextvars: Request context tracking

# 🔄 Connected Modules / Calls From:
# Used by: harvest_hub.main (startup), RequestLoggingMiddleware (request ids), auth dependency (user ids)

import logging
import sys
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from pythonjsonlogger import jsonlogger

from harvest_hub.shared.config.settings import Settings

# Context variables for request tracking
request_id_var: ContextVar[str] = ContextVar("request_id", default="")
user_id_var: ContextVar[str] = ContextVar("user_id", default="")

SERVICE_NAME = "harvest-hub-api"


class ContextFilter(logging.Filter):
    """Attach request/user context to every record."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = request_id_var.get()
        record.user_id = user_id_var.get()
        record.service = SERVICE_NAME
        return True


class ContextualFormatter(logging.Formatter):
    """
    Plain-text formatter that prefixes the request id when one is set.
    """

    def format(self, record: logging.LogRecord) -> str:
        record.timestamp = datetime.now(timezone.utc).isoformat()
        request_id = getattr(record, "request_id", "")
        record.request_tag = f" [{request_id}]" if request_id else ""
        return super().format(record)


class JSONFormatter(jsonlogger.JsonFormatter):
    """
    JSON formatter for structured logging.

    Outputs logs in JSON format with consistent structure for
    log aggregation and analysis tools.
    """

    def add_fields(self, log_record, record, message_dict):
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["logger"] = record.name
        log_record["service"] = SERVICE_NAME
        if getattr(record, "request_id", ""):
            log_record["request_id"] = record.request_id
        if getattr(record, "user_id", ""):
            log_record["user_id"] = record.user_id


_logging_configured = False


def setup_logging(settings: Settings, force: bool = False) -> logging.Logger:
    """
    Setup application logging configuration.

    Args:
        settings: Application settings (LOG_LEVEL, LOG_FORMAT)
        force: Reconfigure even if logging was already set up

    Returns:
        logging.Logger: The startup logger
    """
    global _logging_configured

    if _logging_configured and not force:
        return logging.getLogger("startup")

    numeric_level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)

    if settings.LOG_FORMAT == "json":
        formatter: logging.Formatter = JSONFormatter("%(message)s")
    else:
        formatter = ContextualFormatter(
            "%(timestamp)s - %(name)s - %(levelname)s%(request_tag)s - %(message)s"
        )

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(numeric_level)
    console_handler.setFormatter(formatter)
    console_handler.addFilter(ContextFilter())
    root_logger.addHandler(console_handler)

    # Quiet noisy client libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("hpack").setLevel(logging.WARNING)

    _logging_configured = True
    return logging.getLogger("startup")


def bind_request_id(request_id: Optional[str]):
    """Set the request id for the current context; returns the reset token."""
    return request_id_var.set(request_id or "")


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def log_startup_event(service_name: str, version: str, extra: Optional[Dict[str, Any]] = None):
    """Log application startup event."""
    get_logger("startup").info(
        f"Service {service_name} starting up",
        extra={
            "event_type": "service_startup",
            "service_name": service_name,
            "version": version,
            **(extra or {}),
        },
    )


def log_shutdown_event(service_name: str, extra: Optional[Dict[str, Any]] = None):
    """Log application shutdown event."""
    get_logger("shutdown").info(
        f"Service {service_name} shutting down",
        extra={
            "event_type": "service_shutdown",
            "service_name": service_name,
            **(extra or {}),
        },
    )
