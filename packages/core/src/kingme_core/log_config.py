"""structlog setup.

Library modules only call ``structlog.get_logger()``; the host application
calls ``configure_logging`` once at startup.
"""

import logging
from typing import Optional

import structlog

from .config import KingMeSettings, LogFormat
from .exceptions import ConfigurationError


def configure_logging(settings: Optional[KingMeSettings] = None) -> None:
    """Configure structlog processors from settings.

    Args:
        settings: Settings to apply. Loaded from the environment when omitted.

    Raises:
        ConfigurationError: If the log level is not a known logging level.
    """
    settings = settings or KingMeSettings()

    level = logging.getLevelName(settings.log_level)
    if not isinstance(level, int):
        raise ConfigurationError(
            f"Unknown log level: {settings.log_level}",
            config_key="KINGME_LOG_LEVEL",
            expected="DEBUG, INFO, WARNING, ERROR or CRITICAL",
            actual=settings.log_level,
        )

    if settings.log_format == LogFormat.JSON:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer()

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=False,
    )
