# booking_api/utils/my_logging.py
"""
Logging configuration.

LOG_LEVEL always sets the root level. DEBUG drops it to DEBUG and lets
SQL and access logs through; otherwise those stay at WARNING or above.
"""
import logging
import sys
from typing import Optional

from booking_api.config.settings import get_settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - [%(correlation_id)s] %(message)s"

# Library loggers this service actually produces records on
CHATTY_LOGGERS = (
    "sqlalchemy.engine",
    "sqlalchemy.pool",
    "uvicorn.access",
    "alembic",
)


class CorrelationIdFilter(logging.Filter):
    """Records logged outside a request get '-' as their correlation id"""

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "correlation_id"):
            record.correlation_id = "-"
        return True


def resolve_level(name: Optional[str]) -> int:
    """LOG_LEVEL name to a logging level; unknown names fall back to INFO"""
    level = logging.getLevelName((name or "").strip().upper())
    return level if isinstance(level, int) else logging.INFO


def setup_logging(debug: bool = False) -> int:
    """Configure application logging and return the root level in effect"""
    settings = get_settings()
    level = logging.DEBUG if debug else resolve_level(settings.LOG_LEVEL)

    handler = logging.StreamHandler(sys.stdout)
    handler.addFilter(CorrelationIdFilter())
    logging.basicConfig(level=level, format=LOG_FORMAT, handlers=[handler])
    # basicConfig is a no-op once the root has handlers
    logging.getLogger().setLevel(level)

    library_level = level if debug else max(level, logging.WARNING)
    for name in CHATTY_LOGGERS:
        logging.getLogger(name).setLevel(library_level)

    return level
