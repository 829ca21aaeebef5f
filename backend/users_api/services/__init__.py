"""Services Layer - the imperative shell around the pure core.

Invariants:
    - Only this layer awaits (body reads, async guards)
    - Handlers here return plain dicts or raise classified errors

Design Decisions:
    - Executor, mapper and route table kept apart: one concern per module
"""
