"""Logging Hardening and Redaction.

This module provides filters to keep credential material (envelope hex,
Kraken keys, bearer tokens) out of application logs.
"""
import logging
import re

SECRET_PATTERNS = [
    (re.compile(r'("iv":\s*")[0-9a-fA-F]{32}(")'), r'\1[REDACTED]\2'),
    (re.compile(r'("authTag":\s*")[0-9a-fA-F]{32}(")'), r'\1[REDACTED]\2'),
    (re.compile(r'("data":\s*")[0-9a-fA-F]+(")'), r'\1[REDACTED]\2'),
    (re.compile(r'("api_?[kK]ey":\s*")[^"]*(")'), r'\1[REDACTED]\2'),
    (re.compile(r'("api_?[sS]ecret":\s*")[^"]*(")'), r'\1[REDACTED]\2'),
    (re.compile(r'(Bearer\s+)[A-Za-z0-9+/=_-]+'), r'\1[REDACTED]'),
]

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def redact(text: str) -> str:
    for pattern, replacement in SECRET_PATTERNS:
        text = pattern.sub(replacement, text)
    return text


class SecretRedactionFilter(logging.Filter):
    """Filter that redacts secret-like patterns from log records."""

    def filter(self, record: logging.LogRecord) -> bool:
        if isinstance(record.msg, str):
            record.msg = redact(record.msg)

        if record.args:
            if isinstance(record.args, dict):
                record.args = {k: redact(v) if isinstance(v, str) else v for k, v in record.args.items()}
            else:
                record.args = tuple(redact(arg) if isinstance(arg, str) else arg for arg in record.args)

        return True


def setup_logging(level: str = "INFO") -> None:
    """Configure root logging and attach the redaction filter to its handlers."""
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)
    setup_logging_redaction()


def setup_logging_redaction() -> None:
    """Apply the SecretRedactionFilter to the root logger and its handlers."""
    root_logger = logging.getLogger()

    # Handler-level filters also see records propagated from child loggers
    targets = [root_logger, *root_logger.handlers]
    for target in targets:
        for f in target.filters[:]:
            if isinstance(f, SecretRedactionFilter):
                target.removeFilter(f)
        target.addFilter(SecretRedactionFilter())

    logging.getLogger(__name__).info("Logging redaction filters active.")
