"""FastAPI application entry point.

Wiring only: lifespan, exception handlers, middleware, routers.

Settings are loaded inside create_app() so that tests can set env (and
optionally clear get_settings cache) before calling create_app().
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from expense_authz.api.v1 import api_router
from expense_authz.api.v1.dependencies.principal import PrincipalLoader
from expense_authz.core.config import get_settings
from expense_authz.core.exception_handlers import register_exception_handlers
from expense_authz.core.lifespan import create_lifespan
from expense_authz.middleware import CorrelationIDMiddleware
from expense_authz.shared.telemetry.logging import setup_logging


def create_app(principal_loader: PrincipalLoader | None = None) -> FastAPI:
    """Build and return the FastAPI application.

    Args:
        principal_loader: Async callable turning a request into a Principal.
            Provided by the host's authentication layer; without one every
            protected route answers 401.
    """
    settings = get_settings()
    setup_logging()
    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        debug=settings.debug,
        lifespan=create_lifespan,
    )
    app.state.principal_loader = principal_loader

    register_exception_handlers(app)

    # Middleware: first added = outermost.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(
        CorrelationIDMiddleware,
        header_name=settings.correlation_id_header,
    )

    app.include_router(api_router, prefix="/api/v1")
    return app
