"""Centralized exception handlers for the FastAPI app.

Register with register_exception_handlers(app). Maps authorization and
lifecycle exceptions to HTTP responses.
"""

import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from expense_authz.core.config import get_settings
from expense_authz.domain.exceptions import AuthzException

logger = logging.getLogger(__name__)

# Map domain error_code to HTTP status
_ERROR_CODE_STATUS: dict[str, int] = {
    "FORBIDDEN": 403,
    "INVALID_ARGUMENT": 400,
    "DUPLICATE_ASSIGNMENT": 409,
    "CROSS_TENANT_VIOLATION": 403,
    "ROLE_NOT_FOUND": 404,
    "ASSIGNMENT_NOT_FOUND": 404,
    "STORAGE_UNAVAILABLE": 503,
    "CATALOG_CONFLICT": 500,
}


def status_for(exc: AuthzException) -> int:
    """Return the HTTP status for a domain exception (400 when unmapped)."""
    return _ERROR_CODE_STATUS.get(exc.error_code, 400)


def _authz_exception_handler(request: Request, exc: AuthzException) -> JSONResponse:
    """Return JSON from AuthzException.to_dict() with the mapped status code."""
    status = status_for(exc)
    if exc.error_code == "CROSS_TENANT_VIOLATION":
        logger.error("Cross-tenant violation on %s: %s", request.url.path, exc.details)
    elif exc.error_code == "FORBIDDEN":
        logger.info("Forbidden: %s %s", request.method, request.url.path)
    elif status >= 500:
        logger.error("%s on %s: %s", exc.error_code, request.url.path, exc.message)
    return JSONResponse(status_code=status, content=exc.to_dict())


def _validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Return 422 with validation error details."""
    return JSONResponse(
        status_code=422,
        content={
            "error": "VALIDATION_ERROR",
            "message": "Request validation failed",
            "details": jsonable_errors(exc),
        },
    )


def jsonable_errors(exc: RequestValidationError) -> list[dict[str, Any]]:
    """Strip non-serializable ``ctx`` values (e.g. exceptions) from pydantic errors."""
    errors = []
    for err in exc.errors():
        err = dict(err)
        if "ctx" in err:
            err["ctx"] = {k: str(v) for k, v in err["ctx"].items()}
        errors.append(err)
    return errors


def _http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    """Return JSON for Starlette HTTP exceptions (status + detail)."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": "HTTP_ERROR", "message": exc.detail},
    )


def _generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Return 500; include detail only when debug is True."""
    logger.exception("Unhandled exception: %s", exc)
    settings = get_settings()
    detail: Any = str(exc) if settings.debug else "Internal server error"
    return JSONResponse(
        status_code=500,
        content={"error": "INTERNAL_ERROR", "message": detail},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers on the FastAPI app.

    Handlers: AuthzException (and subclasses), RequestValidationError,
    StarletteHTTPException, generic Exception.
    """
    app.add_exception_handler(AuthzException, _authz_exception_handler)
    app.add_exception_handler(RequestValidationError, _validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)
    app.add_exception_handler(Exception, _generic_exception_handler)
