"""Principal entity: the already-authenticated actor of a request."""

from dataclasses import dataclass

from expense_authz.domain.enums import FixedRole
from expense_authz.domain.exceptions import InvalidArgument


@dataclass(frozen=True)
class Principal:
    """Authenticated user as handed over by the authentication collaborator.

    Loaded once per request and trusted as given; immutable for the request.
    A role passed as its string value is coerced to FixedRole.
    """

    id: str
    home_company_id: str
    fixed_role: FixedRole

    def __post_init__(self) -> None:
        if not isinstance(self.fixed_role, FixedRole):
            try:
                role = FixedRole(self.fixed_role)
            except ValueError:
                raise InvalidArgument(
                    f"Unknown fixed role: {self.fixed_role!r}", field="fixed_role"
                ) from None
            object.__setattr__(self, "fixed_role", role)

    @property
    def is_super_admin(self) -> bool:
        return self.fixed_role == FixedRole.SUPER_ADMIN
