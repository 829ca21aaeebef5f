"""API test fixtures - isolated app + httpx client per test.

Invariants:
    - Every test gets a fresh app with its own seeded store (ids 1-3)
    - Requests go through the real FastAPI binding and pipeline

Design Decisions:
    - create_app(settings, store) over the module-level app: no state leaks
      between tests
"""

import pytest
from httpx import ASGITransport, AsyncClient

from users_api.config import Settings
from users_api.core.user_store import UserStore
from users_api.main import create_app

VALID_TOKEN = "valid-token-123"


@pytest.fixture
def store():
    return UserStore.with_demo_users()


@pytest.fixture
def app(store):
    settings = Settings(api_prefix="/api", log_format="text")
    return create_app(settings=settings, store=store)


@pytest.fixture
async def client(app):
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as ac:
        yield ac


@pytest.fixture
def auth_headers():
    return {"Authorization": f"Bearer {VALID_TOKEN}"}
