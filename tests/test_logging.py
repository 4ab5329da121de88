# tests/test_logging.py

import json
import logging
import sys

import pytest

from git_providers.core.exceptions import TransportError
from git_providers.core.logging import (
    JSONFormatter,
    LogFormat,
    LoggingConfig,
    LogLevel,
    TextFormatter,
    setup_logging,
)


def record(message="Reconciled repository", **extra):
    rec = logging.LogRecord("git_providers.test", logging.INFO, __file__, 10, message, None, None)
    rec.__dict__.update(extra)
    return rec


@pytest.fixture
def logger_name():
    name = "git_providers_test_logging"
    yield name
    logger = logging.getLogger(name)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)


class TestSetupLogging:
    def test_config_accepts_strings(self):
        config = LoggingConfig(level="debug", format="JSON")
        assert config.level is LogLevel.DEBUG
        assert config.format is LogFormat.JSON

    def test_invalid_level(self):
        with pytest.raises(ValueError):
            LoggingConfig(level="LOUD")

    def test_repeated_setup_replaces_the_handler(self, logger_name):
        setup_logging(LoggingConfig(logger_name=logger_name))
        logger = setup_logging(LoggingConfig(level="WARNING", format="json", logger_name=logger_name))

        assert len(logger.handlers) == 1
        assert isinstance(logger.handlers[0].formatter, JSONFormatter)
        assert logger.level == logging.WARNING

    def test_foreign_handlers_are_kept(self, logger_name):
        logger = logging.getLogger(logger_name)
        foreign = logging.NullHandler()
        logger.addHandler(foreign)

        setup_logging(LoggingConfig(logger_name=logger_name))

        assert foreign in logger.handlers
        assert len(logger.handlers) == 2


class TestFormatters:
    def test_text_appends_extra_fields(self):
        line = TextFormatter().format(record(repository="acme/widgets"))
        assert "Reconciled repository" in line
        assert line.endswith("| repository=acme/widgets")

    def test_text_without_extra(self):
        line = TextFormatter(fmt="%(levelname)s %(message)s").format(record())
        assert line == "INFO Reconciled repository"

    def test_json_document(self):
        data = json.loads(JSONFormatter().format(record(repository="acme/widgets", attempt=2)))

        assert data["level"] == "INFO"
        assert data["logger"] == "git_providers.test"
        assert data["message"] == "Reconciled repository"
        assert data["repository"] == "acme/widgets"
        assert data["attempt"] == 2
        assert "exception" not in data

    def test_json_includes_exception(self):
        try:
            raise RuntimeError("boom")
        except RuntimeError:
            rec = logging.LogRecord(
                "git_providers.test", logging.ERROR, __file__, 10, "failed", None, sys.exc_info()
            )

        data = json.loads(JSONFormatter().format(rec))

        assert data["exception"]["type"] == "RuntimeError"
        assert data["exception"]["message"] == "boom"
        assert "Traceback" in data["exception"]["traceback"]

    def test_json_includes_provider_error_code(self):
        try:
            raise TransportError("HTTP 502", status_code=502)
        except TransportError:
            rec = logging.LogRecord(
                "git_providers.test", logging.ERROR, __file__, 10, "failed", None, sys.exc_info()
            )

        exception = json.loads(JSONFormatter().format(rec))["exception"]

        assert exception["message"] == "HTTP 502"
        assert exception["error_code"] == "TRANSPORT_FAILURE"
        assert exception["details"] == {"status_code": 502}
