"""structlog setup for the payment backend.

One processor chain is shared by structlog loggers and the stdlib bridge, so
uvicorn, SQLAlchemy and the Stripe/Supabase HTTP clients render in the same
format. JSON in production, ConsoleRenderer when DEBUG is on.

Callback payloads carry customer addresses and signature headers; those keys
are masked before anything is rendered.
"""

import logging
import logging.config

import structlog
from asgi_correlation_id.context import correlation_id

# Third-party loggers that are chatty at INFO
NOISY_LOGGERS = {
    "uvicorn.access": "WARNING",
    "httpx": "WARNING",
    "httpcore": "WARNING",
    "hpack": "WARNING",
    "stripe": "WARNING",
    "sqlalchemy.engine": "WARNING",
    "asyncpg": "WARNING",
}

REDACTED_KEYS = frozenset({
    "email",
    "customer_email",
    "signature",
    "stripe_signature",
    "authorization",
    "secret",
    "webhook_secret",
    "service_role_key",
})


def add_correlation_id(logger, method, event_dict):
    """Attach the X-Request-ID of the current request, if any."""
    cid = correlation_id.get(None)
    if cid:
        event_dict["correlation_id"] = cid
    return event_dict


def redact_sensitive(logger, method, event_dict):
    for key in REDACTED_KEYS.intersection(event_dict):
        if event_dict[key]:
            event_dict[key] = "[redacted]"
    return event_dict


def configure_structlog(log_level: str = "INFO", json_logs: bool = True) -> None:
    """Install the processor chain. Must run before modules call get_logger().

    Args:
        log_level: root level for both structlog and stdlib loggers
        json_logs: JSONRenderer when true, ConsoleRenderer otherwise
    """
    shared_processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        add_correlation_id,
        redact_sensitive,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]
    renderer = structlog.processors.JSONRenderer() if json_logs else structlog.dev.ConsoleRenderer()

    logging.config.dictConfig({
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "subtrack": {
                "()": structlog.stdlib.ProcessorFormatter,
                "foreign_pre_chain": shared_processors,
                "processors": [
                    structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                    renderer,
                ],
            },
        },
        "handlers": {
            "stdout": {
                "class": "logging.StreamHandler",
                "formatter": "subtrack",
                "stream": "ext://sys.stdout",
            },
        },
        "root": {"handlers": ["stdout"], "level": log_level},
        "loggers": {name: {"level": level} for name, level in NOISY_LOGGERS.items()},
    })

    structlog.configure(
        processors=shared_processors + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
