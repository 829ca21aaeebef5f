"""Infrastructure Layer - logging and other process-level concerns."""
