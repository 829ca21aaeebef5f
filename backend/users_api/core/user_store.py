"""User Store - in-memory collection of user records.

Invariants:
    - id uniqueness holds at all times; ids are never reused or rewritten
    - New id = max(existing ids) + 1, or 1 when the store is empty
    - Size changes only through create() and delete()
    - Every method is synchronous: no await can split a read from its write

Design Decisions:
    - In-memory list, not DB: single-process uvicorn, state lost on restart
      (persistence is out of scope)
    - Absence returned as None/False, never raised: callers decide what
      "missing" means (handlers translate it to ResourceNotFoundError)
"""

from dataclasses import dataclass, asdict, field

from users_api.core.domain_types import UserId
from users_api.core.errors import InvariantViolation

# Fields update() may overwrite. id is deliberately absent.
MUTABLE_FIELDS = ("name", "email", "age", "bio")


@dataclass
class User:
    """A single user record. Optional profile fields are omitted when unset."""
    id: UserId
    name: str
    email: str
    age: int | None = None
    bio: str | None = None

    def to_dict(self) -> dict:
        return {k: v for k, v in asdict(self).items() if v is not None}


DEMO_USERS = (
    ("Alice Zhang", "alice@example.com"),
    ("Bob Li", "bob@example.com"),
    ("Carol Wang", "carol@example.com"),
)


@dataclass
class UserStore:
    """Owns the mutable user list. Pure data operations, no IO."""

    users: list[User] = field(default_factory=list)

    @classmethod
    def with_demo_users(cls) -> "UserStore":
        """Store pre-populated with three demo records (ids 1-3)."""
        store = cls()
        for name, email in DEMO_USERS:
            store.create(name=name, email=email)
        return store

    def find_all(self) -> list[User]:
        return list(self.users)

    def find_by_id(self, user_id: int) -> User | None:
        for user in self.users:
            if user.id == user_id:
                return user
        return None

    def count(self) -> int:
        return len(self.users)

    def create(
        self, name: str, email: str,
        age: int | None = None, bio: str | None = None,
    ) -> User:
        """Insert a record with a freshly assigned id."""
        ids = [u.id for u in self.users]
        if len(ids) != len(set(ids)):
            raise InvariantViolation("User store contains duplicate ids")
        new_id = UserId(max(ids) + 1 if ids else 1)
        user = User(id=new_id, name=name, email=email, age=age, bio=bio)
        self.users.append(user)
        return user

    def update(self, user_id: int, fields: dict) -> User | None:
        """Merge provided fields into the record. Unknown keys and id are ignored."""
        user = self.find_by_id(user_id)
        if user is None:
            return None
        for key in MUTABLE_FIELDS:
            if key in fields:
                setattr(user, key, fields[key])
        return user

    def delete(self, user_id: int) -> bool:
        for index, user in enumerate(self.users):
            if user.id == user_id:
                del self.users[index]
                return True
        return False
