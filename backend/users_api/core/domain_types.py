"""Domain Types - rich types that replace bare primitives across the codebase.

Invariants:
    - UserId is always a positive int once assigned by the store
    - All valid states encoded as Enums - no raw string matching

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON and log records without custom encoders
"""

from enum import Enum
from typing import NewType


# ─── Identity Types ──────────────────────────────────────────────

UserId = NewType("UserId", int)


# ─── Enums ───────────────────────────────────────────────────────

class HttpMethod(str, Enum):
    """Methods the dispatch table can route."""
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"


class PipelineStage(str, Enum):
    """Per-request pipeline states. FAILED is reachable from any stage."""
    ROUTING = "routing"
    GUARDING = "guarding"
    VALIDATING = "validating"
    HANDLING = "handling"
    RESPONDING = "responding"
    FAILED = "failed"


class FieldType(str, Enum):
    """Value types a validation rule can require."""
    STRING = "string"
    INTEGER = "integer"
