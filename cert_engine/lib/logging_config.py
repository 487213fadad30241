"""JSON logging configuration for the certificate engine."""

import logging

from pythonjsonlogger import jsonlogger

LOGGER_NAME = "cert_engine"

# Fields that survive CertificateJsonFormatter, in addition to the message
ALLOWED_FIELDS = frozenset(
    {
        "timestamp",
        "level",
        "message",
        "exc_info",
        "funcName",
        "lineno",
    }
)


class CertificateJsonFormatter(jsonlogger.JsonFormatter):
    """JSON formatter that keeps a short, fixed field set.

    Process and thread details are dropped; ``levelname`` is renamed to
    ``level``.
    """

    def add_fields(self, log_record, record, message_dict):
        """Override to include only ALLOWED_FIELDS.

        Args:
            log_record: Dict to be logged as JSON
            record: LogRecord object from logging framework
            message_dict: Dict containing message and args
        """
        super().add_fields(log_record, record, message_dict)

        if "levelname" in log_record:
            log_record["level"] = log_record.pop("levelname")

        for key in [key for key in log_record if key not in ALLOWED_FIELDS]:
            log_record.pop(key)


def _setup_logger() -> logging.Logger:
    """Initialize and configure the package logger.

    Returns:
        Logger with a stream handler using CertificateJsonFormatter
    """
    logger = logging.getLogger(LOGGER_NAME)

    # Prevent duplicate handlers if module reloaded
    if logger.handlers:
        return logger

    handler = logging.StreamHandler()
    handler.setFormatter(
        CertificateJsonFormatter(
            fmt="%(timestamp)s %(levelname)s %(funcName)s %(lineno)d %(message)s",
            timestamp=True,
        )
    )

    logger.setLevel(logging.INFO)
    logger.addHandler(handler)
    logger.propagate = False

    return logger


LOGGER = _setup_logger()
