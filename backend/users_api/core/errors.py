"""Error Hierarchy - typed, categorized exceptions for every pipeline failure mode.

Invariants:
    - Every error has a code (str), category (ErrorCategory) and http_status
    - Client errors (400-level) are recoverable by the caller; 500-level are not
    - Errors never format responses - the exception mapper owns output shape
    - No internal details leaked in user-facing messages

Design Decisions:
    - Single hierarchy with UsersApiError base: the mapper dispatches on class,
      anything outside the hierarchy is treated as unclassified (500)
    - Field errors travel on ValidationFailed as plain dict[str, list[str]]
"""

from enum import Enum


class ErrorCategory(str, Enum):
    """High-level error categories for mapping and log filtering."""
    VALIDATION = "validation"
    AUTHENTICATION = "authentication"
    AUTHORIZATION = "authorization"
    RESOURCE_NOT_FOUND = "resource_not_found"
    INTERNAL = "internal"


class UsersApiError(Exception):
    """Base exception for all classified pipeline failures."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        http_status: int = 500,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.http_status = http_status


# ─── Client Errors (400-level) ──────────────────────────────────

class ValidationFailed(UsersApiError):
    """Payload violated one or more schema rules."""
    def __init__(
        self, field_errors: dict[str, list[str]],
        message: str = "Input validation failed",
    ):
        super().__init__(
            message, "VALIDATION_ERROR", ErrorCategory.VALIDATION, 400,
        )
        self.field_errors = field_errors


class BodyParseError(UsersApiError):
    """Request body is not a JSON object."""
    def __init__(self, message: str = "Request body must be a valid JSON object"):
        super().__init__(
            message, "BODY_PARSE_ERROR", ErrorCategory.VALIDATION, 400,
        )


class Unauthenticated(UsersApiError):
    """Caller supplied no usable credentials."""
    def __init__(self, message: str):
        super().__init__(
            message, "UNAUTHENTICATED", ErrorCategory.AUTHENTICATION, 401,
        )


class Forbidden(UsersApiError):
    """Caller is authenticated but not allowed to proceed."""
    def __init__(self, message: str):
        super().__init__(
            message, "FORBIDDEN", ErrorCategory.AUTHORIZATION, 403,
        )


class RouteNotFound(UsersApiError):
    """No route descriptor matches method + path."""
    def __init__(self, method: str, path: str):
        super().__init__(
            f"Cannot {method} {path}",
            "ROUTE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND, 404,
        )
        self.method = method
        self.path = path


class ResourceNotFoundError(UsersApiError):
    """Requested resource does not exist (or its id cannot name one)."""
    def __init__(self, message: str):
        super().__init__(
            message, "RESOURCE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND, 404,
        )


# ─── Server Errors (500-level) ──────────────────────────────────

class InvariantViolation(UsersApiError):
    """Store state is corrupted. Should never happen."""
    def __init__(self, message: str):
        super().__init__(
            message, "INVARIANT_VIOLATION", ErrorCategory.INTERNAL, 500,
        )
