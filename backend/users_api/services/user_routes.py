"""User Routes - handlers for /users and the explicit descriptor list that routes them.

Invariants:
    - Every handler takes (ctx, payload) and returns a plain success dict
    - Store "absent" results become ResourceNotFoundError; handlers catch nothing
    - Path ids must be positive decimal integers, otherwise the user "does not exist"
    - No handler awaits: each store read/write pair runs without suspension

Design Decisions:
    - Store injected through the constructor, guards passed into build_user_routes:
      no container, every dependency visible at the call site in create_app()
    - Every route -> handler mapping is explicit in one list
    - Only GET /users/:id is guarded, matching the public listing and sign-up flow
"""

import logging
import re

from users_api.core.dispatch import RouteDescriptor
from users_api.core.domain_types import HttpMethod, UserId
from users_api.core.errors import ResourceNotFoundError
from users_api.core.guards import Guard
from users_api.core.request_context import RequestContext
from users_api.core.user_store import UserStore
from users_api.core.validation import CREATE_USER_SCHEMA, UPDATE_USER_SCHEMA
from users_api.schemas.envelope import SuccessEnvelope

logger = logging.getLogger(__name__)

_POSITIVE_INT = re.compile(r"[0-9]+")


def parse_user_id(raw: str) -> UserId:
    """Path segment -> positive id. Anything else cannot name a user (404)."""
    if not _POSITIVE_INT.fullmatch(raw or ""):
        raise ResourceNotFoundError(f"Invalid user id: {raw}")
    try:
        user_id = int(raw)
    except ValueError as e:
        # digit strings past the interpreter's int conversion limit
        raise ResourceNotFoundError("Invalid user id: too many digits") from e
    if user_id <= 0:
        raise ResourceNotFoundError(f"Invalid user id: {raw}")
    return UserId(user_id)


def _not_found(user_id: int) -> ResourceNotFoundError:
    return ResourceNotFoundError(f"User not found, id: {user_id}")


class UserHandlers:
    """CRUD handlers bound to one store instance."""

    def __init__(self, store: UserStore):
        self._store = store

    def list_users(self, ctx: RequestContext, payload: dict | None) -> dict:
        users = [u.to_dict() for u in self._store.find_all()]
        return SuccessEnvelope(data=users, message="Users retrieved").model_dump()

    def get_user(self, ctx: RequestContext, payload: dict | None) -> dict:
        user_id = parse_user_id(ctx.path_params.get("id", ""))
        user = self._store.find_by_id(user_id)
        if user is None:
            raise _not_found(user_id)
        return SuccessEnvelope(
            data=user.to_dict(), message="User retrieved",
        ).model_dump()

    def create_user(self, ctx: RequestContext, payload: dict | None) -> dict:
        data = payload or {}
        user = self._store.create(
            name=data["name"], email=data["email"],
            age=data.get("age"), bio=data.get("bio"),
        )
        logger.info(f"Created user {user.id}", extra={"user_id": user.id})
        return SuccessEnvelope(
            data=user.to_dict(), message="User created",
        ).model_dump()

    def update_user(self, ctx: RequestContext, payload: dict | None) -> dict:
        user_id = parse_user_id(ctx.path_params.get("id", ""))
        user = self._store.update(user_id, payload or {})
        if user is None:
            raise _not_found(user_id)
        logger.info(f"Updated user {user_id}", extra={"user_id": user_id})
        return SuccessEnvelope(
            data=user.to_dict(), message="User updated",
        ).model_dump()

    def delete_user(self, ctx: RequestContext, payload: dict | None) -> dict:
        user_id = parse_user_id(ctx.path_params.get("id", ""))
        if not self._store.delete(user_id):
            raise _not_found(user_id)
        logger.info(f"Deleted user {user_id}", extra={"user_id": user_id})
        return SuccessEnvelope(message="User deleted").model_dump(
            exclude_none=True,
        )


def build_user_routes(
    store: UserStore, auth_guards: tuple[Guard, ...],
) -> list[RouteDescriptor]:
    """Explicit route list for the /users resource."""
    users = UserHandlers(store)
    return [
        RouteDescriptor(HttpMethod.GET, "/users", users.list_users),
        RouteDescriptor(
            HttpMethod.GET, "/users/:id", users.get_user, guards=auth_guards,
        ),
        RouteDescriptor(
            HttpMethod.POST, "/users", users.create_user,
            schema=CREATE_USER_SCHEMA,
        ),
        RouteDescriptor(
            HttpMethod.PUT, "/users/:id", users.update_user,
            schema=UPDATE_USER_SCHEMA,
        ),
        RouteDescriptor(HttpMethod.DELETE, "/users/:id", users.delete_user),
    ]
