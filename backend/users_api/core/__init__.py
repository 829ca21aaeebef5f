"""Core Layer - pure pipeline pieces, no IO, no async, no framework imports.

Invariants:
    - No module in core/ imports from services/, api/, or infrastructure/
    - Store, validation, guards and dispatch are deterministic and testable without mocks

Design Decisions:
    - Functional core separated from imperative shell: the executor (services/)
      owns awaiting the body and calling the framework, core owns the rules
"""
