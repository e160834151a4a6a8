# vedic_api/core/logging.py
from __future__ import annotations

import logging
import re
import sys
from typing import Any

import structlog

from vedic_api.core.config import settings

_JWT_RE = re.compile(r"\beyJ[a-zA-Z0-9_\-]+\.[a-zA-Z0-9_\-]+\.[a-zA-Z0-9_\-]+\b")
_BEARER_RE = re.compile(r"(?i)\bBearer\s+([A-Za-z0-9_\-\.=]+)")
_KV_RE = re.compile(
    r"(?i)\b(secret_key|secret|password|password_hash|refresh_token|access_token|token)\b\s*=\s*([^\s,;]+)"
)
# Event keys whose values are dropped outright
_SENSITIVE_KEYS = {"password", "password_hash", "secret_key", "access_token", "refresh_token", "token"}

REDACTED = "***REDACTED***"


def redact_str(s: str) -> str:
    secret = settings.SECRET_KEY.get_secret_value()
    if secret and secret in s:
        s = s.replace(secret, REDACTED)
    s = _JWT_RE.sub(REDACTED, s)
    s = _BEARER_RE.sub(f"Bearer {REDACTED}", s)
    s = _KV_RE.sub(lambda m: f"{m.group(1)}={REDACTED}", s)
    return s


def redact_event(_, __, event_dict: dict[str, Any]) -> dict[str, Any]:
    for k, v in list(event_dict.items()):
        if k in _SENSITIVE_KEYS:
            event_dict[k] = REDACTED
        elif isinstance(v, str):
            event_dict[k] = redact_str(v)
    return event_dict


def setup_logging(level: str | None = None) -> None:
    """Route stdlib and structlog records through one JSON formatter on stdout."""
    level = (level or settings.LOG_LEVEL).upper()

    shared = [
        structlog.processors.TimeStamper(fmt="iso", utc=True, key="ts"),
        structlog.stdlib.add_log_level,
        redact_event,
        structlog.processors.format_exc_info,
    ]

    formatter = structlog.stdlib.ProcessorFormatter(
        processor=structlog.processors.JSONRenderer(),
        foreign_pre_chain=shared,
    )
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)
    # passlib reads bcrypt.__about__, which bcrypt>=4.1 no longer ships
    logging.getLogger("passlib.handlers.bcrypt").setLevel(logging.ERROR)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.PositionalArgumentsFormatter(),
            *shared,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
