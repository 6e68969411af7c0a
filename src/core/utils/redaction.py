"""Scrubbing of personal data before it reaches the logs.

Privacy-sensitive flows log through `log_gdpr_event`, which redacts
sensitive keys and common PII patterns from the structured context.
"""

import re
from typing import Any

from aws_lambda_powertools import Logger

REDACTED = "[REDACTED]"
MAX_DEPTH = 10

SENSITIVE_FIELDS: frozenset[str] = frozenset(
    {
        "email",
        "phone",
        "phonenumber",
        "firstname",
        "lastname",
        "fullname",
        "name",
        "address",
        "street",
        "city",
        "zipcode",
        "postalcode",
        "password",
        "token",
        "sharetoken",
        "apikey",
        "accesstoken",
        "refreshtoken",
        "secret",
        "reason",
        "ipaddress",
        "useragent",
        "cardnumber",
    }
)

SENSITIVE_PATTERNS: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}\b"), "EMAIL"),
    (re.compile(r"\b\d{4}[\s-]?\d{4}[\s-]?\d{4}[\s-]?\d{4}\b"), "CARD_NUMBER"),
    (re.compile(r"\b(?:\d{1,3}\.){3}\d{1,3}\b"), "IP_ADDRESS"),
    (re.compile(r"\b\d{3}[-.]?\d{3}[-.]?\d{4}\b"), "PHONE"),
)


def _normalize_key(key: str) -> str:
    return key.lower().replace("_", "").replace("-", "")


def _is_sensitive_key(key: str) -> bool:
    normalized = _normalize_key(key)
    return any(field in normalized for field in SENSITIVE_FIELDS)


def scrub_string(value: str) -> str:
    """Replace PII-looking substrings with typed placeholders."""
    for pattern, label in SENSITIVE_PATTERNS:
        value = pattern.sub(f"[REDACTED_{label}]", value)
    return value


def scrub_sensitive(value: Any, _depth: int = 0) -> Any:
    """Recursively redact sensitive keys and patterns from a log payload."""
    if _depth > MAX_DEPTH:
        return "[MAX_DEPTH_EXCEEDED]"

    if isinstance(value, dict):
        return {
            key: REDACTED if _is_sensitive_key(str(key)) else scrub_sensitive(item, _depth + 1)
            for key, item in value.items()
        }

    if isinstance(value, (list, tuple)):
        return [scrub_sensitive(item, _depth + 1) for item in value]

    if isinstance(value, str):
        return scrub_string(value)

    return value


def log_gdpr_event(
    logger: Logger,
    action: str,
    user_id: str,
    **context: Any,
) -> None:
    """Emit a structured audit line for a data-subject request."""
    logger.info(
        f"GDPR {action}",
        extra={
            "gdpr_action": action,
            "user_id": user_id,
            **scrub_sensitive(context),
        },
    )
