"""Logging setup for the git providers library.

Library modules log through ``logging.getLogger(__name__)``; applications
(and the bundled CLI) call ``setup_logging`` once to attach a console handler.

Example usage:
    from git_providers.core.logging import LoggingConfig, setup_logging, get_logger

    setup_logging(LoggingConfig(level="DEBUG", format="json"))
    logger = get_logger(__name__)
    logger.info("Reconciled repository", extra={"repository": "acme/widgets"})
"""

import logging

from .config import LogFormat, LoggingConfig, LogLevel
from .formatters import JSONFormatter, TextFormatter

_HANDLER_NAME = "git_providers.console"


def setup_logging(config: LoggingConfig | None = None) -> logging.Logger:
    """Attach (or replace) the console handler on the library logger."""
    config = config or LoggingConfig()
    logger = logging.getLogger(config.logger_name)
    logger.setLevel(config.level.value)

    for handler in list(logger.handlers):
        if handler.get_name() == _HANDLER_NAME:
            logger.removeHandler(handler)

    handler = logging.StreamHandler()
    handler.set_name(_HANDLER_NAME)
    if config.format is LogFormat.JSON:
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(TextFormatter(datefmt=config.datefmt))
    logger.addHandler(handler)
    return logger


def get_logger(name: str) -> logging.Logger:
    """Get a logger by name."""
    return logging.getLogger(name)


__all__ = [
    "JSONFormatter",
    "LogFormat",
    "LogLevel",
    "LoggingConfig",
    "TextFormatter",
    "get_logger",
    "setup_logging",
]
