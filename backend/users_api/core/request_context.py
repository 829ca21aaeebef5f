"""Request Context - per-request state owned by the pipeline executor.

Invariants:
    - One context per request; never shared across requests, never persisted
    - Header lookup is case-insensitive (names stored lower-cased)
    - principal is None until a guard admits the request

Design Decisions:
    - Plain dataclass over framework Request: core stays framework-free, the
      binding copies what the pipeline needs
    - Body is an async reader, not bytes: only routes that accept a body pay
      for reading it, and only after guards have admitted the request
"""

from dataclasses import dataclass, field
from typing import Awaitable, Callable

from users_api.core.domain_types import PipelineStage

BodyReader = Callable[[], Awaitable[bytes]]


async def _empty_body() -> bytes:
    return b""


@dataclass(frozen=True)
class Principal:
    """Identity a guard attaches to an admitted request."""
    id: int
    username: str
    token: str


@dataclass
class RequestContext:
    """Mutable per-request container threaded through every pipeline stage."""

    method: str
    path: str
    headers: dict[str, str] = field(default_factory=dict)
    read_body: BodyReader = _empty_body
    path_params: dict[str, str] = field(default_factory=dict)
    principal: Principal | None = None
    stage: PipelineStage = PipelineStage.ROUTING

    def __post_init__(self):
        self.method = self.method.upper()
        self.headers = {k.lower(): v for k, v in self.headers.items()}

    def header(self, name: str) -> str | None:
        return self.headers.get(name.lower())
