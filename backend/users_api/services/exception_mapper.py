"""Exception Mapper - the single place a pipeline failure becomes a response.

Invariants:
    - Every exception maps to exactly one (status, body) pair
    - Classified errors (UsersApiError) keep their message; status from http_status
    - Unclassified errors become 500 with a generic message - never the raw
      error text or a traceback
    - Unclassified errors are logged with traceback; classified ones are logged
      at warning level without one

Design Decisions:
    - Pure mapping + logging, no framework types: the pipeline and the FastAPI
      global handlers both call map_exception
"""

import logging
from dataclasses import dataclass

from users_api.core.errors import UsersApiError, ValidationFailed
from users_api.schemas.envelope import ErrorEnvelope, ValidationErrorEnvelope

logger = logging.getLogger(__name__)

INTERNAL_ERROR_MESSAGE = "Internal server error"


@dataclass(frozen=True)
class MappedError:
    status_code: int
    body: dict


def map_exception(exc: Exception, log_extra: dict | None = None) -> MappedError:
    """Convert any failure into a status code and structured body."""
    extra = dict(log_extra or {})

    if isinstance(exc, ValidationFailed):
        logger.warning(
            f"Validation failed: {exc.field_errors}",
            extra={**extra, "error_code": exc.code, "status_code": exc.http_status},
        )
        body = ValidationErrorEnvelope(
            statusCode=exc.http_status, message=exc.message,
            errors=exc.field_errors,
        )
        return MappedError(exc.http_status, body.model_dump())

    if isinstance(exc, UsersApiError):
        log = logger.error if exc.http_status >= 500 else logger.warning
        log(
            f"{type(exc).__name__}: {exc.message}",
            extra={**extra, "error_code": exc.code, "status_code": exc.http_status},
        )
        if exc.http_status >= 500:
            return internal_error()
        return MappedError(
            exc.http_status, ErrorEnvelope(message=exc.message).model_dump(),
        )

    logger.error(
        f"Unhandled exception: {exc!r}",
        exc_info=exc,
        extra={**extra, "error_code": "INTERNAL_ERROR", "status_code": 500},
    )
    return internal_error()


def map_http_status(status_code: int, message: str) -> MappedError:
    """Framework-raised HTTP errors (unknown prefix, 405) in the same envelope."""
    if status_code >= 500:
        return internal_error()
    return MappedError(status_code, ErrorEnvelope(message=message).model_dump())


def internal_error() -> MappedError:
    return MappedError(
        500, ErrorEnvelope(message=INTERNAL_ERROR_MESSAGE).model_dump(),
    )
