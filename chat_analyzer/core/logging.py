"""
Logging configuration and utilities.

Modules log through ``get_logger(__name__)`` and pass structured context with
``extra={...}``; ``ContextFormatter`` appends that context to the line as
``key=value`` pairs.
"""

import logging
import sys
from typing import Optional

# Attributes every LogRecord carries; anything else came in through ``extra``.
_RECORD_ATTRIBUTES = frozenset(vars(logging.LogRecord("", 0, "", 0, "", (), None))) | {"message", "asctime"}


class ContextFormatter(logging.Formatter):
    """Formatter that renders ``extra`` fields after the message."""

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        context = {k: v for k, v in vars(record).items() if k not in _RECORD_ATTRIBUTES}
        if not context:
            return line
        return f"{line} | " + " | ".join(f"{k}={v}" for k, v in context.items())


def setup_logging(level: Optional[str] = None) -> None:
    """
    Setup application logging configuration.

    Args:
        level: Overrides ``Settings.LOG_LEVEL`` when given
    """
    from chat_analyzer.core.config import get_settings

    settings = get_settings()
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(ContextFormatter(settings.LOG_FORMAT))

    logging.basicConfig(
        level=getattr(logging, (level or settings.LOG_LEVEL).upper()),
        handlers=[handler],
    )

    logging.getLogger("uvicorn").setLevel(logging.INFO)
    logging.getLogger("uvicorn.access").setLevel(logging.INFO)

    # Reduce noise from external libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("openai").setLevel(logging.WARNING)


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """
    Get a logger instance.

    Args:
        name: Logger name, typically __name__ from calling module
    """
    return logging.getLogger(name or "chat_analyzer")
