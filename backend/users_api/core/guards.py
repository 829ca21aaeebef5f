"""Guards - pre-handler predicates that admit or deny a request.

Invariants:
    - A guard returns normally to admit, or raises Unauthenticated/Forbidden
    - Guards never format responses - the exception mapper does
    - Only an admitting guard may attach a principal to the context

Design Decisions:
    - Protocol over ABC: any object with check(ctx) is a guard, sync or async
    - BearerTokenGuard is a DEMO SEAM, not a security mechanism: sentinel
      tokens simulate specific failures for tests and manual poking. Real
      deployments must replace it with credential verification (e.g. signed
      tokens checked against a key)
"""

import logging
from typing import Awaitable, Protocol

from users_api.core.errors import Forbidden, Unauthenticated
from users_api.core.request_context import Principal, RequestContext

logger = logging.getLogger(__name__)

BEARER_PREFIX = "Bearer "

MISSING_HEADER_MESSAGE = (
    "Missing authorization header. Send 'Authorization: Bearer <token>'"
)
MALFORMED_MESSAGE = "Malformed authorization format. Use 'Bearer <token>'"
TOKEN_TOO_SHORT_MESSAGE = "Token too short"

# Sentinel token -> (denial class, message). Deterministic failures for demos.
SENTINEL_TOKENS: dict[str, tuple[type, str]] = {
    "invalid-token": (
        Unauthenticated, "The provided access token is invalid or expired",
    ),
    "forbidden-token": (
        Forbidden, "Insufficient permissions to access this resource",
    ),
    "expired-token": (
        Unauthenticated, "Access token has expired, please log in again",
    ),
}


class Guard(Protocol):
    """Structural contract for guards listed on a route descriptor."""
    def check(self, ctx: RequestContext) -> None | Awaitable[None]: ...


def extract_bearer_token(header_value: str) -> str:
    """Strip the 'Bearer ' prefix and surrounding whitespace.

    A header without the prefix is taken as the raw token.
    """
    token = header_value.strip()
    if token == BEARER_PREFIX.strip():
        return ""
    if token.startswith(BEARER_PREFIX):
        token = token[len(BEARER_PREFIX):]
    return token.strip()


class BearerTokenGuard:
    """Admits requests carrying a plausible bearer token."""

    def __init__(
        self, min_token_length: int = 8,
        principal_id: int = 1, principal_username: str = "test-user",
    ):
        self._min_token_length = min_token_length
        self._principal_id = principal_id
        self._principal_username = principal_username

    def check(self, ctx: RequestContext) -> None:
        header = ctx.header("authorization")
        if not header:
            raise Unauthenticated(MISSING_HEADER_MESSAGE)

        token = extract_bearer_token(header)
        if not token:
            raise Unauthenticated(MALFORMED_MESSAGE)

        sentinel = SENTINEL_TOKENS.get(token)
        if sentinel:
            denial, message = sentinel
            raise denial(message)

        if len(token) < self._min_token_length:
            raise Unauthenticated(TOKEN_TOO_SHORT_MESSAGE)

        ctx.principal = Principal(
            id=self._principal_id,
            username=self._principal_username,
            token=token,
        )
        logger.info(
            f"Request authenticated as {self._principal_username}",
            extra={"user_id": self._principal_id, "path": ctx.path},
        )
