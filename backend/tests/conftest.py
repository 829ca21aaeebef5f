"""Root conftest - shared test configuration."""

import os

# Human-readable logs in test output; demo seed on for the default app
os.environ.setdefault("LOG_FORMAT", "text")
os.environ.setdefault("SEED_DEMO_USERS", "true")
