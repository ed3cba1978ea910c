"""
Structured logging for scripts and services that drive the projection engine.

Library modules only call structlog.get_logger(); whoever runs them calls
configure_logging() once at startup.
"""

import logging
import os
import sys

import structlog


def configure_logging(level=None):
    """
    Send JSON log lines to stdout.

    level: name such as "DEBUG"; falls back to the LOG_LEVEL environment
    variable, then INFO.
    """
    level = (level or os.getenv("LOG_LEVEL", "INFO")).upper()

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, level, logging.INFO),
    )

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.add_log_level,
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
    return structlog.get_logger("portfolio_projection")
