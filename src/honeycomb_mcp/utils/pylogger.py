"""Structured logger utility for the Honeycomb MCP server."""

import logging
import sys
from typing import Any, Dict, List, Set

import structlog

HTTP_CLIENT_LOGGERS = {
    "httpx",
    "httpcore",
    "httpcore.connection",
    "httpcore.http11",
}

MCP_LOGGERS = {
    "mcp",
    "mcp.server",
    "mcp.server.lowlevel.server",
    "fastmcp",
    "fastmcp.server",
    "fastmcp.server.http",
    "fastmcp.utilities",
    "fastmcp.utilities.logging",
    "fastmcp.tools",
    "fastmcp.prompts",
    "fastmcp.resources",
}

# Wire-level chatter that is only useful when something breaks
ERROR_ONLY_LOGGERS: Set[str] = {
    "httpcore",
    "httpcore.connection",
    "httpcore.http11",
}

THIRD_PARTY_LOGGERS: Set[str] = HTTP_CLIENT_LOGGERS | MCP_LOGGERS

_LOGGING_CONFIGURED = False


def _clear_handlers(logger: logging.Logger) -> None:
    logger.handlers.clear()
    logger.filters.clear()


def _setup_logger(logger_name: str, level: str) -> None:
    logger = logging.getLogger(logger_name)
    _clear_handlers(logger)
    logger.setLevel(logging.ERROR if logger_name in ERROR_ONLY_LOGGERS else level)
    logger.propagate = True


def _configure_third_party_loggers(log_level: str) -> None:
    for name in THIRD_PARTY_LOGGERS:
        _setup_logger(name, log_level)


def force_reconfigure_all_loggers(log_level: str = "INFO") -> None:
    global _LOGGING_CONFIGURED
    _LOGGING_CONFIGURED = False
    get_python_logger(log_level)


def get_python_logger(log_level: str = "INFO", stream=None) -> structlog.stdlib.BoundLogger:
    """Configure structlog once and return a bound logger.

    ``stream`` defaults to stdout; the stdio transport passes stderr so log
    lines never interleave with JSON-RPC frames. Passing a stream always
    replaces the root handlers.
    """
    global _LOGGING_CONFIGURED
    log_level = log_level.upper()
    # An explicit stream re-targets the root handler even if modules already logged
    if not _LOGGING_CONFIGURED or stream is not None:
        logging.basicConfig(
            format="%(message)s",
            stream=stream or sys.stdout,
            level=log_level,
            force=stream is not None,
        )
        structlog.configure(
            processors=[
                structlog.stdlib.filter_by_level,
                structlog.stdlib.add_logger_name,
                structlog.stdlib.add_log_level,
                structlog.stdlib.PositionalArgumentsFormatter(),
                structlog.processors.TimeStamper(fmt="iso"),
                structlog.processors.StackInfoRenderer(),
                structlog.processors.format_exc_info,
                structlog.processors.UnicodeDecoder(),
                structlog.processors.JSONRenderer(),
            ],
            context_class=dict,
            logger_factory=structlog.stdlib.LoggerFactory(),
            wrapper_class=structlog.stdlib.BoundLogger,
            cache_logger_on_first_use=True,
        )
        _LOGGING_CONFIGURED = True
    _configure_third_party_loggers(log_level)
    return structlog.get_logger()


def get_uvicorn_log_config(log_level: str = "INFO") -> Dict[str, Any]:
    log_level = log_level.upper()
    default_formatter = {
        "()": "structlog.stdlib.ProcessorFormatter",
        "processor": structlog.processors.JSONRenderer(),
        "foreign_pre_chain": [
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
        ],
    }

    def make_logger_config(names: List[str], level: str) -> Dict[str, Any]:
        return {
            name: {"handlers": ["default"], "level": level, "propagate": False}
            for name in names
        }

    base_loggers = ["", "uvicorn", "uvicorn.error", "uvicorn.asgi", "uvicorn.protocols"]
    access_loggers = ["uvicorn.access"]

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {"default": default_formatter, "access": default_formatter},
        "handlers": {
            "default": {
                "formatter": "default",
                "class": "logging.StreamHandler",
                "stream": "ext://sys.stdout",
            },
            "access": {
                "formatter": "access",
                "class": "logging.StreamHandler",
                "stream": "ext://sys.stdout",
            },
        },
        "loggers": {
            **make_logger_config(base_loggers, log_level),
            **make_logger_config(access_loggers, log_level),
            **make_logger_config(list(THIRD_PARTY_LOGGERS - ERROR_ONLY_LOGGERS), log_level),
            **make_logger_config(list(ERROR_ONLY_LOGGERS), "ERROR"),
        },
    }
