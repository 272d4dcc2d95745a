"""Application lifespan: startup and shutdown.

Wiring only: catalog sanity check, optional schema creation and DB engine
dispose. No business logic here.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from expense_authz.core.config import get_settings
from expense_authz.domain.permissions import DEFAULT_CATALOG
from expense_authz.domain.permissions.fixed_roles import validate_fixed_grants

logger = logging.getLogger(__name__)


@asynccontextmanager
async def create_lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Run startup then yield; on exit dispose the SQL engine."""
    settings = get_settings()

    # ---- Startup ----
    validate_fixed_grants(DEFAULT_CATALOG)
    logger.info("Permission catalog loaded (%d keys)", len(DEFAULT_CATALOG))

    if settings.database_create_all:
        from expense_authz.infrastructure.persistence.database import create_all

        await create_all()
        logger.info("Database schema created")

    yield

    # ---- Shutdown ----
    from expense_authz.infrastructure.persistence.database import dispose_engine

    await dispose_engine()
