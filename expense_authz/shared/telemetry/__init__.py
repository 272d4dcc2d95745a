"""Shared telemetry: logging setup."""

from expense_authz.shared.telemetry.logging import (
    CorrelationIdFilter,
    setup_logging,
)

__all__ = ["CorrelationIdFilter", "setup_logging"]
