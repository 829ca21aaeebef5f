"""API Layer - FastAPI binding, routes and global error handlers.

Invariants:
    - Routes registered explicitly in main.create_app (no auto-discovery)
    - All responses are structured JSON envelopes

Design Decisions:
    - FastAPI is only the transport: /users routing, guards and validation
      live in the pipeline, the framework just hands requests over
"""
