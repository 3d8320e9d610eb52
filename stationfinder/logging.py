"""
structlog wired into Django's LOGGING.

Both structlog loggers and plain stdlib loggers (Django's own, runserver,
management commands) go through one ProcessorFormatter, so every line comes
out in the same format: JSON in production, key=value console lines elsewhere.
"""

import structlog
from structlog.types import Processor

# Applied to stdlib records before rendering, and to structlog events
# before they are handed over to stdlib.
PRE_CHAIN: list[Processor] = [
    structlog.contextvars.merge_contextvars,
    structlog.stdlib.add_logger_name,
    structlog.stdlib.add_log_level,
    structlog.processors.TimeStamper(fmt="iso"),
]


def renderer_for(environment: str) -> Processor:
    if environment == "production":
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=False)


def build_logging_config(log_level: str, environment: str) -> dict:
    """Value for settings.LOGGING."""
    level = log_level.upper()
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "structlog": {
                "()": structlog.stdlib.ProcessorFormatter,
                "processors": [
                    structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                    renderer_for(environment),
                ],
                "foreign_pre_chain": PRE_CHAIN,
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "structlog",
            },
        },
        "root": {"handlers": ["console"], "level": level},
        "loggers": {
            "django": {"handlers": ["console"], "level": level, "propagate": False},
            # request_completed from our middleware covers this
            "django.server": {"handlers": ["console"], "level": "WARNING", "propagate": False},
        },
    }


def setup_logging() -> None:
    """Point structlog at stdlib logging; Django has already applied LOGGING."""
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *PRE_CHAIN,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
