"""Shared utilities: datetime and generators."""

from expense_authz.shared.utils.datetime import ensure_utc, resolve_now, utc_now
from expense_authz.shared.utils.generators import generate_cuid

__all__ = [
    "generate_cuid",
    "utc_now",
    "ensure_utc",
    "resolve_now",
]
