"""Company (tenant) ID format validation for the resolver, guards and API.

Shared by the resolver and the lifecycle services so that malformed company
IDs are rejected consistently as InvalidArgument (400), never as a denial.
"""

import re

from expense_authz.domain.exceptions import InvalidArgument

# CUID/UUID-style: alphanumeric, hyphen, underscore.
COMPANY_ID_MAX_LENGTH = 64
_COMPANY_ID_RE = re.compile(
    r"^[a-zA-Z0-9_-]{1," + str(COMPANY_ID_MAX_LENGTH) + r"}$"
)


def is_valid_company_id_format(value: object) -> bool:
    """Return True if value is a non-empty CUID/UUID-style string."""
    if not isinstance(value, str) or not value or len(value) > COMPANY_ID_MAX_LENGTH:
        return False
    return bool(_COMPANY_ID_RE.fullmatch(value))


def validate_company_id(value: object, field: str = "company_id") -> str:
    """Return value unchanged or raise InvalidArgument when the format is wrong."""
    if not is_valid_company_id_format(value):
        raise InvalidArgument(
            "Invalid company ID format (use alphanumeric, hyphen, underscore; "
            f"max {COMPANY_ID_MAX_LENGTH} characters)",
            field=field,
        )
    return value  # type: ignore[return-value]
