"""HTTP middleware: correlation ID.

Applied in main app. Import and use from expense_authz.main.
"""

from expense_authz.middleware.correlation_id import (
    CorrelationIDMiddleware,
    get_correlation_id,
)

__all__ = ["CorrelationIDMiddleware", "get_correlation_id"]
