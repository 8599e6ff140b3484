"""
Structlog logging configuration

Every record (structlog or stdlib) flows through one processor chain; values
that grant access (download tokens, redirect targets, webhook signatures) are
masked before rendering.
"""
import json
import logging
from typing import Any, Dict, List

import structlog
from structlog.contextvars import merge_contextvars
from structlog.dev import ConsoleRenderer
from structlog.processors import JSONRenderer, TimeStamper, add_log_level
from structlog.stdlib import ProcessorFormatter

from core.config import settings


SENSITIVE_KEYS = frozenset({
    "token",
    "signature",
    "secret",
    "target_url",
    "download_link",
    "authorization",
    "password",
})

# third-party loggers that are chatty at INFO
NOISY_LOGGERS: Dict[str, int] = {
    "httpx": logging.WARNING,
    "httpcore": logging.WARNING,
    "aiosqlite": logging.WARNING,
    "asyncio": logging.WARNING,
}


def _mask(value: Any) -> str:
    text = str(value)
    if len(text) <= 8:
        return "***"
    return f"{text[:4]}***"


def mask_sensitive_values(_logger: Any, _method: str, event_dict: dict) -> dict:
    """Keep only a short prefix of sensitive values."""
    for key, value in event_dict.items():
        if value is not None and key.lower() in SENSITIVE_KEYS:
            event_dict[key] = _mask(value)
    return event_dict


def _json_dumps(obj: Any, default=None, **kwargs) -> str:
    # structlog forwards default/sort_keys to the serializer
    return json.dumps(obj, ensure_ascii=False, default=default, **kwargs)


def get_renderer() -> Any:
    """Console output while developing, one JSON object per line otherwise."""
    if settings.DEBUG:
        return ConsoleRenderer(colors=True)
    return JSONRenderer(serializer=_json_dumps)


def _root_level() -> int:
    if settings.LOG_LEVEL:
        return logging.getLevelName(settings.LOG_LEVEL.upper())
    return logging.DEBUG if settings.DEBUG else logging.INFO


def configure_logging() -> None:
    """Configure structlog and route stdlib logging through the same chain."""
    shared_pre_chain: List[Any] = [
        merge_contextvars,
        add_log_level,
        TimeStamper(fmt="iso", utc=True),
        structlog.stdlib.PositionalArgumentsFormatter(),
        mask_sensitive_values,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    structlog.configure(
        processors=[*shared_pre_chain, ProcessorFormatter.wrap_for_formatter],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler()
    handler.setFormatter(
        ProcessorFormatter(
            foreign_pre_chain=shared_pre_chain,
            processors=[ProcessorFormatter.remove_processors_meta, get_renderer()],
        )
    )

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(_root_level())

    for name, level in NOISY_LOGGERS.items():
        logging.getLogger(name).setLevel(level)
    # SQL echo is controlled by DATABASE__ECHO
    logging.getLogger("sqlalchemy.engine").setLevel(
        logging.INFO if settings.database.echo else logging.WARNING
    )


def get_logger(name: str = __name__) -> structlog.stdlib.BoundLogger:
    """Return a structlog logger."""
    return structlog.get_logger(name)


configure_logging()
