"""Logging configuration for the application."""

import logging
import sys

from expense_authz.core.config import get_settings


def setup_logging() -> None:
    """Configure application-wide logging.

    Level is DEBUG when settings.debug is True, otherwise INFO. Output goes
    to stdout with the correlation id of the current request when one is set.
    """
    settings = get_settings()
    log_level = logging.DEBUG if settings.debug else logging.INFO
    handler = logging.StreamHandler(sys.stdout)
    handler.addFilter(CorrelationIdFilter())
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - [%(correlation_id)s] %(message)s",
        handlers=[handler],
    )


class CorrelationIdFilter(logging.Filter):
    """Attach the request correlation id (or '-') to every record."""

    def filter(self, record: logging.LogRecord) -> bool:
        from expense_authz.middleware.correlation_id import get_correlation_id

        record.correlation_id = get_correlation_id() or "-"
        return True
