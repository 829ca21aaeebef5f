"""Response Envelopes - the fixed body shapes of success and failure responses.

Invariants:
    - Success bodies: {success: true, message, data?}
    - Validation failures: {statusCode, error: "Validation Error", message, errors}
    - Every other failure: {success: false, message}

Design Decisions:
    - model_dump(exclude_none=True) drops data on message-only responses
      (DELETE) instead of a separate model
"""

from typing import Any, Literal

from pydantic import BaseModel


class SuccessEnvelope(BaseModel):
    """Handler result wrapper."""
    success: Literal[True] = True
    data: Any = None
    message: str


class ErrorEnvelope(BaseModel):
    """Body for 401/403/404/405/500 and body-parse failures."""
    success: Literal[False] = False
    message: str


class ValidationErrorEnvelope(BaseModel):
    """Body for 400 schema violations."""
    statusCode: int = 400
    error: Literal["Validation Error"] = "Validation Error"
    message: str
    errors: dict[str, list[str]]
