"""
Logging helpers for the Storefront backend.

Rules:
- Bearer tokens, JWTs and API keys never reach a log line; get_logger
  attaches a filter that masks them in case a message interpolates a header
  or an exception string that echoes one
- LLM prompts are logged at DEBUG only (they contain browsing history)
- ids and counts (user_id, product_id, number of rows) are fine at INFO
"""

import logging
import re
from typing import Optional

from storefront.config import settings

REDACTED = "[REDACTED]"

_SECRET_PATTERNS = [
    # Authorization header values
    re.compile(r"(Bearer\s+)[A-Za-z0-9._~+/=-]+", re.IGNORECASE),
    # Bare JWTs (header.payload.signature, header always starts with eyJ)
    re.compile(r"()eyJ[A-Za-z0-9_-]+\.[A-Za-z0-9_-]+\.[A-Za-z0-9_-]+"),
    # key=... / api_key: ... pairs
    re.compile(r"((?:api[_-]?key|apikey|key)\s*[=:]\s*)[^\s&,;]+", re.IGNORECASE),
]


def redact_secrets(text: str) -> str:
    """Mask tokens and API keys in a log message."""
    for pattern in _SECRET_PATTERNS:
        text = pattern.sub(lambda m: f"{m.group(1)}{REDACTED}", text)
    return text


class SecretRedactingFilter(logging.Filter):
    """Rewrites each record's message with redact_secrets applied."""

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        redacted = redact_secrets(message)
        if redacted != message:
            record.msg = redacted
            record.args = None
        return True


def get_logger(name: str, level: Optional[int] = None) -> logging.Logger:
    """
    Return a module logger with secret redaction attached.

    Args:
        name: Module name (typically __name__)
        level: Explicit level; defaults to settings.LOG_LEVEL

    Usage:
        >>> from storefront.utils.logging import get_logger
        >>> logger = get_logger(__name__)
        >>> logger.info(f"Returning {len(products)} recommendations")
    """
    logger = logging.getLogger(name)

    if level is None:
        level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)
    logger.setLevel(level)

    if not any(isinstance(f, SecretRedactingFilter) for f in logger.filters):
        logger.addFilter(SecretRedactingFilter())

    return logger
