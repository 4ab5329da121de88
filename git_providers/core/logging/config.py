"""Configuration for the library's logging setup."""

from dataclasses import dataclass
from enum import Enum


class LogLevel(Enum):
    """Log levels accepted by setup_logging."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LogFormat(Enum):
    """Output formats for log records."""

    TEXT = "text"
    JSON = "json"


@dataclass
class LoggingConfig:
    """Configuration for the console log handler.

    Attributes:
        level: Minimum level emitted by the root library logger.
        format: Record format, plain text or one JSON object per line.
        logger_name: Logger the handler is attached to.
        datefmt: Date format used by the text formatter.
    """

    level: LogLevel = LogLevel.INFO
    format: LogFormat = LogFormat.TEXT
    logger_name: str = "git_providers"
    datefmt: str | None = None

    def __post_init__(self) -> None:
        if isinstance(self.level, str):
            self.level = LogLevel(self.level.upper())
        if isinstance(self.format, str):
            self.format = LogFormat(self.format.lower())
