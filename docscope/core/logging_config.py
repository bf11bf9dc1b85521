"""
DocScope - Structured Logging Configuration
===========================================

Structured logging with:
- JSON output (for log aggregation) or colored console output
- Request correlation IDs for outbound service calls
- Context binding for the currently viewed document
- Standard library integration (modules log through logging.getLogger)

Usage:
    # At application startup
    from docscope.core.logging_config import configure_logging
    configure_logging(json_output=False)

    # In any module
    import logging
    logger = logging.getLogger(__name__)
    logger.info("Registry refreshed")

Environment Variables:
    LOG_LEVEL: DEBUG, INFO, WARNING, ERROR (default: INFO)
    LOG_FORMAT: json, console (default: json in production, console in dev)
    ENVIRONMENT: "production" enables JSON by default
"""

import logging
import logging.config
import os
import re
import uuid
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Optional

import structlog
from structlog.types import EventDict, WrappedLogger


# =============================================================================
# CONTEXT VARIABLES
# =============================================================================

# Correlation ID of the outbound request currently being made
request_id_var: ContextVar[Optional[str]] = ContextVar("request_id", default=None)

# Document currently selected in the detail view
document_id_var: ContextVar[Optional[str]] = ContextVar("document_id", default=None)


def generate_request_id() -> str:
    """Generate a new request ID."""
    return str(uuid.uuid4())[:8]


def set_request_id(request_id: Optional[str]) -> None:
    """Set request ID in context."""
    request_id_var.set(request_id)


def bind_document(document_id: Optional[str]) -> None:
    """Bind document ID to current context."""
    document_id_var.set(document_id)


# =============================================================================
# CUSTOM PROCESSORS
# =============================================================================

def add_request_context(
    logger: WrappedLogger,
    method_name: str,
    event_dict: EventDict
) -> EventDict:
    """Add request and document context from context variables."""
    request_id = request_id_var.get()
    if request_id:
        event_dict["request_id"] = request_id

    document_id = document_id_var.get()
    if document_id:
        event_dict["document_id"] = document_id

    return event_dict


def add_service_info(
    logger: WrappedLogger,
    method_name: str,
    event_dict: EventDict
) -> EventDict:
    """Add service metadata."""
    from docscope import __version__

    event_dict["service"] = "docscope"
    event_dict["version"] = __version__
    return event_dict


def add_timestamp_iso(
    logger: WrappedLogger,
    method_name: str,
    event_dict: EventDict
) -> EventDict:
    """Add ISO 8601 timestamp with timezone."""
    event_dict["timestamp"] = datetime.now(timezone.utc).isoformat()
    return event_dict


def rename_event_key(
    logger: WrappedLogger,
    method_name: str,
    event_dict: EventDict
) -> EventDict:
    """Rename 'event' to 'message' for consistency with common log formats."""
    if "event" in event_dict:
        event_dict["message"] = event_dict.pop("event")
    return event_dict


def drop_color_codes(
    logger: WrappedLogger,
    method_name: str,
    event_dict: EventDict
) -> EventDict:
    """Remove ANSI color codes from message for JSON output."""
    if "message" in event_dict and isinstance(event_dict["message"], str):
        event_dict["message"] = re.sub(r'\x1b\[[0-9;]*m', '', event_dict["message"])
    return event_dict


# =============================================================================
# CONFIGURATION
# =============================================================================

def configure_logging(
    json_output: Optional[bool] = None,
    log_level: Optional[str] = None,
    include_timestamp: bool = True
) -> None:
    """
    Configure structured logging for the client.

    Args:
        json_output: If True, output JSON. If None, auto-detect from environment.
        log_level: Log level (DEBUG, INFO, WARNING, ERROR). Defaults to LOG_LEVEL env var.
        include_timestamp: Include ISO timestamp in logs.
    """
    if log_level is None:
        log_level = os.getenv("LOG_LEVEL", "INFO").upper()

    if json_output is None:
        log_format = os.getenv("LOG_FORMAT", "").lower()
        if log_format == "json":
            json_output = True
        elif log_format == "console":
            json_output = False
        else:
            env = os.getenv("ENVIRONMENT", "development").lower()
            json_output = env in ("production", "prod", "staging")

    shared_processors = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        add_request_context,
        add_service_info,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if include_timestamp:
        shared_processors.insert(0, add_timestamp_iso)

    if json_output:
        shared_processors.extend([
            rename_event_key,
            drop_color_codes,
            structlog.processors.format_exc_info,
        ])
        final_processor = structlog.processors.JSONRenderer(sort_keys=True)
    else:
        final_processor = structlog.dev.ConsoleRenderer(
            colors=True,
            exception_formatter=structlog.dev.plain_traceback,
        )

    structlog.configure(
        processors=shared_processors + [final_processor],
        wrapper_class=structlog.make_filtering_bound_logger(
            getattr(logging, log_level, logging.INFO)
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

    # Standard library loggers (all docscope modules) render through structlog
    logging.config.dictConfig({
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "structlog": {
                "()": structlog.stdlib.ProcessorFormatter,
                "processors": [
                    structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                    final_processor,
                ],
                "foreign_pre_chain": shared_processors,
            },
        },
        "handlers": {
            "default": {
                "class": "logging.StreamHandler",
                "stream": "ext://sys.stdout",
                "formatter": "structlog",
            },
        },
        "loggers": {
            "": {
                "handlers": ["default"],
                "level": log_level,
                "propagate": True,
            },
            "aiohttp.access": {"level": "WARNING"},
            "aiohttp.client": {"level": "WARNING"},
            "asyncio": {"level": "WARNING"},
        },
    })

    logger = structlog.get_logger("logging_config")
    logger.info(
        "Logging configured",
        format="json" if json_output else "console",
        level=log_level,
    )
