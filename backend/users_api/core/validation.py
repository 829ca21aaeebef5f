"""Payload Validation - declarative per-field rules with exhaustive error reporting.

Invariants:
    - All functions are PURE: no IO, no async, no side effects
    - Every rule for every field is evaluated; nothing stops at the first violation
    - Integer fields supplied as strings are coerced before range checks;
      a failed coercion is a field error, never an exception
    - Strict schemas report undeclared fields; non-strict schemas drop them
    - The returned payload contains only declared fields that were supplied

Design Decisions:
    - Hand-rolled rules over Pydantic models: Pydantic reports one error per
      field, clients here expect one message per violated rule
    - An absent required field reports "is required" and then every other
      rule judged against the missing value; absent optional fields pass
    - Messages built from the field name so schemas stay one-liners
"""

import re
from dataclasses import dataclass, field
from typing import Any

from users_api.core.domain_types import FieldType
from users_api.core.errors import ValidationFailed

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
# Plain decimal notation only: no underscores, exponents, inf or nan
DECIMAL_PATTERN = re.compile(r"-?[0-9]+(\.[0-9]+)?")


@dataclass(frozen=True)
class FieldRule:
    """Rule set for one field. Each populated attribute is an independent check."""
    type: FieldType = FieldType.STRING
    required: bool = False
    min_length: int | None = None
    max_length: int | None = None
    min_value: int | None = None
    max_value: int | None = None
    email: bool = False


@dataclass(frozen=True)
class ValidationSchema:
    """Named field rules. strict=True rejects fields the schema does not declare."""
    fields: dict[str, FieldRule] = field(default_factory=dict)
    strict: bool = True


# ─── Coercion ────────────────────────────────────────────────────

_NOT_COERCIBLE = object()


def coerce_integer(value: Any) -> Any:
    """Turn "42" / 42 / 42.0 into 42. Returns _NOT_COERCIBLE for anything else.

    Non-integral floats pass through unchanged so range rules still see them.
    """
    if isinstance(value, bool):
        return _NOT_COERCIBLE
    if isinstance(value, (int, float)):
        return int(value) if float(value).is_integer() else value
    if isinstance(value, str):
        text = value.strip()
        if not DECIMAL_PATTERN.fullmatch(text):
            return _NOT_COERCIBLE
        try:
            if "." not in text:
                return int(text)
            number = float(text)
        except ValueError:
            return _NOT_COERCIBLE
        return int(number) if number.is_integer() else number
    return _NOT_COERCIBLE


# ─── Individual rules ────────────────────────────────────────────

def check_type(name: str, rule: FieldRule, value: Any) -> str | None:
    if rule.type == FieldType.STRING and not isinstance(value, str):
        return f"{name} must be a string"
    if rule.type == FieldType.INTEGER and not isinstance(value, int):
        return f"{name} must be an integer"
    return None


def check_not_empty(name: str, rule: FieldRule, value: Any) -> str | None:
    if rule.required and isinstance(value, str) and not value.strip():
        return f"{name} must not be empty"
    return None


def check_length(name: str, rule: FieldRule, value: Any) -> list[str]:
    if not isinstance(value, str):
        return []
    errors = []
    if rule.min_length is not None and len(value) < rule.min_length:
        errors.append(f"{name} must be at least {rule.min_length} characters")
    if rule.max_length is not None and len(value) > rule.max_length:
        errors.append(f"{name} must not exceed {rule.max_length} characters")
    return errors


def check_range(name: str, rule: FieldRule, value: Any) -> list[str]:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return []
    errors = []
    if rule.min_value is not None and value < rule.min_value:
        errors.append(f"{name} must not be less than {rule.min_value}")
    if rule.max_value is not None and value > rule.max_value:
        errors.append(f"{name} must not be greater than {rule.max_value}")
    return errors


def check_email(name: str, rule: FieldRule, value: Any) -> str | None:
    if rule.email and not (isinstance(value, str) and EMAIL_PATTERN.match(value)):
        return f"{name} must be a valid email address"
    return None


def check_field(name: str, rule: FieldRule, value: Any) -> list[str]:
    """Run every rule on a value (None when absent). Returns all violation messages."""
    errors = [
        e for e in (
            check_type(name, rule, value),
            check_not_empty(name, rule, value),
        ) if e
    ]
    errors.extend(check_length(name, rule, value))
    errors.extend(check_range(name, rule, value))
    email_error = check_email(name, rule, value)
    if email_error:
        errors.append(email_error)
    return errors


# ─── Schema validation ──────────────────────────────────────────

def collect_errors(
    payload: dict, schema: ValidationSchema,
) -> tuple[dict, dict[str, list[str]]]:
    """Validate payload against schema. Returns (clean_payload, field_errors)."""
    clean: dict = {}
    field_errors: dict[str, list[str]] = {}

    for name, rule in schema.fields.items():
        value = payload.get(name)
        if value is None:
            if rule.required:
                field_errors[name] = [f"{name} is required"]
                field_errors[name].extend(check_field(name, rule, None))
            continue
        if rule.type == FieldType.INTEGER:
            coerced = coerce_integer(value)
            if coerced is _NOT_COERCIBLE:
                field_errors[name] = [f"{name} must be an integer"]
                continue
            value = coerced
        errors = check_field(name, rule, value)
        if errors:
            field_errors[name] = errors
        else:
            clean[name] = value

    if schema.strict:
        for name in payload:
            if name not in schema.fields:
                field_errors.setdefault(name, []).append(
                    f"property {name} should not exist",
                )

    return clean, field_errors


def validate_payload(payload: dict, schema: ValidationSchema) -> dict:
    """Return the sanitized payload or raise ValidationFailed with every violation."""
    clean, field_errors = collect_errors(payload, schema)
    if field_errors:
        raise ValidationFailed(field_errors)
    return clean


# ─── User schemas ───────────────────────────────────────────────

CREATE_USER_SCHEMA = ValidationSchema(
    fields={
        "email": FieldRule(required=True, email=True),
        "name": FieldRule(required=True, min_length=2, max_length=50),
        "age": FieldRule(type=FieldType.INTEGER, min_value=18, max_value=120),
        "password": FieldRule(required=True, min_length=6, max_length=20),
        "bio": FieldRule(max_length=500),
    },
    strict=True,
)

UPDATE_USER_SCHEMA = ValidationSchema(
    fields={
        "email": FieldRule(email=True),
        "name": FieldRule(min_length=2, max_length=50),
        "age": FieldRule(type=FieldType.INTEGER, min_value=18, max_value=120),
        "bio": FieldRule(max_length=500),
    },
    strict=False,
)
