"""Principal dependency: the authenticated actor of the request.

Authentication lives outside this service. The host installs an async loader
on ``app.state.principal_loader`` that turns a request into a Principal (or
None when the request carries no valid credentials).
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable

from fastapi import HTTPException, Request

from expense_authz.domain.entities import Principal

PrincipalLoader = Callable[[Request], Awaitable[Principal | None]]


async def get_current_principal(request: Request) -> Principal:
    """Return the authenticated principal or raise 401."""
    loader: PrincipalLoader | None = getattr(request.app.state, "principal_loader", None)
    if loader is None:
        raise HTTPException(status_code=401, detail="Not authenticated")
    principal = await loader(request)
    if principal is None:
        raise HTTPException(status_code=401, detail="Not authenticated")
    return principal
