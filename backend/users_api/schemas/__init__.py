"""Pydantic Schemas - response envelopes for the HTTP surface.

Invariants:
    - Every response body is built from one of these models
    - Field names match the wire format exactly (statusCode stays camelCase)

Design Decisions:
    - Separate from core: envelopes are API contracts, core types are domain data
"""
