"""Shared repository helpers: driver error mapping."""

import logging
from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy.exc import DBAPIError, IntegrityError

from expense_authz.domain.exceptions import StorageUnavailable

logger = logging.getLogger(__name__)


@contextmanager
def storage_errors(operation: str) -> Iterator[None]:
    """Map driver failures (connection loss, timeouts) to StorageUnavailable.

    IntegrityError passes through so callers can translate constraint
    violations into domain errors. Nothing is retried.
    """
    try:
        yield
    except IntegrityError:
        raise
    except DBAPIError as exc:
        logger.error("Storage failure during %s: %s", operation, exc.__class__.__name__)
        raise StorageUnavailable(operation) from exc
