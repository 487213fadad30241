"""Tests for JSON logging configuration."""

import json
import logging

from cert_engine.lib.logging_config import LOGGER, CertificateJsonFormatter, _setup_logger


def _format(message: str, level: int = logging.INFO) -> dict[str, object]:
    """Format one record with CertificateJsonFormatter and parse the JSON."""
    formatter = CertificateJsonFormatter(
        fmt="%(timestamp)s %(levelname)s %(funcName)s %(lineno)d %(message)s",
        timestamp=True,
    )
    record = logging.LogRecord(
        name="cert_engine",
        level=level,
        pathname=__file__,
        lineno=10,
        msg=message,
        args=(),
        exc_info=None,
        func="issue",
    )
    return json.loads(formatter.format(record))


class TestCertificateJsonFormatter:
    """Tests for CertificateJsonFormatter."""

    def test_keeps_only_allowed_fields(self) -> None:
        """Output holds only the focused field set."""
        output = _format("Issued root certificate")
        assert set(output) == {"timestamp", "level", "message", "funcName", "lineno"}

    def test_renames_levelname(self) -> None:
        """levelname is renamed to level."""
        output = _format("boom", logging.ERROR)
        assert output["level"] == "ERROR"
        assert output["message"] == "boom"


class TestLogger:
    """Tests for the package logger."""

    def test_singleton_configuration(self) -> None:
        """Logger has one JSON stream handler and does not propagate."""
        assert LOGGER.name == "cert_engine"
        assert LOGGER.propagate is False
        json_handlers = [
            handler
            for handler in LOGGER.handlers
            if type(handler) is logging.StreamHandler
            and isinstance(handler.formatter, CertificateJsonFormatter)
        ]
        assert len(json_handlers) == 1

    def test_setup_does_not_duplicate_handler(self) -> None:
        """Configuring the logger again keeps a single JSON handler."""
        assert _setup_logger() is LOGGER
        json_handlers = [
            handler
            for handler in LOGGER.handlers
            if isinstance(handler.formatter, CertificateJsonFormatter)
        ]
        assert len(json_handlers) == 1
