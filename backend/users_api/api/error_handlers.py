"""Error Handlers - global handlers for failures that never reach the pipeline.

Invariants:
    - Framework HTTP errors (unknown prefix, method not allowed) -> {success: false, message}
    - UsersApiError raised outside the pipeline -> same mapping as inside it
    - Exception (catch-all) -> 500 generic body, never leaks internal details

Design Decisions:
    - Three-layer handler: framework (StarletteHTTPException), domain
      (UsersApiError), catch-all (Exception) - all rendered by the exception
      mapper so the body shape is identical to pipeline failures
"""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from users_api.core.errors import UsersApiError
from users_api.services.exception_mapper import (
    MappedError, map_exception, map_http_status,
)

logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""
    _register_http_error_handler(app)
    _register_domain_error_handler(app)
    _register_generic_error_handler(app)


def _to_response(mapped: MappedError) -> JSONResponse:
    return JSONResponse(status_code=mapped.status_code, content=mapped.body)


def _register_http_error_handler(app: FastAPI) -> None:
    """Register framework HTTP error handler."""

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        """Render framework 404/405 in the pipeline's envelope."""
        message = (
            f"Cannot {request.method} {request.url.path}"
            if exc.status_code in (404, 405) else str(exc.detail)
        )
        logger.warning(
            f"HTTP {exc.status_code} on {request.url.path}",
            extra={
                "method": request.method, "path": request.url.path,
                "status_code": exc.status_code,
            },
        )
        return _to_response(map_http_status(exc.status_code, message))


def _register_domain_error_handler(app: FastAPI) -> None:
    """Register classified error handler."""

    @app.exception_handler(UsersApiError)
    async def domain_error_handler(request: Request, exc: UsersApiError):
        """Handle classified errors raised outside the pipeline."""
        return _to_response(map_exception(exc, log_extra=_request_extra(request)))


def _register_generic_error_handler(app: FastAPI) -> None:
    """Register catch-all error handler."""

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        """Catch-all - never leaks internal details."""
        return _to_response(map_exception(exc, log_extra=_request_extra(request)))


def _request_extra(request: Request) -> dict:
    return {"method": request.method, "path": request.url.path}
