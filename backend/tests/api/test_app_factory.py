"""App Factory - tests for create_app wiring.

Tests cover:
    - Seeding follows settings when no store is passed
    - A custom prefix moves the whole surface
    - The executor shares the app's store
"""

from httpx import ASGITransport, AsyncClient

from users_api.config import Settings
from users_api.main import create_app


def _client(app) -> AsyncClient:
    return AsyncClient(transport=ASGITransport(app=app), base_url="http://test")


def test_seeded_store_by_default():
    app = create_app(settings=Settings(seed_demo_users=True))
    assert app.state.store.count() == 3


def test_unseeded_store_when_disabled():
    app = create_app(settings=Settings(seed_demo_users=False))
    assert app.state.store.count() == 0


async def test_first_user_on_empty_store_gets_id_1():
    app = create_app(settings=Settings(seed_demo_users=False))
    async with _client(app) as client:
        res = await client.post(
            "/api/users",
            json={"email": "a@b.com", "name": "Ann", "password": "secret1"},
        )
    assert res.json()["data"]["id"] == 1


async def test_custom_prefix_moves_routes():
    app = create_app(settings=Settings(api_prefix="/v1"))
    async with _client(app) as client:
        moved = await client.get("/v1/users")
        old = await client.get("/api/users")
    assert moved.status_code == 200
    assert old.status_code == 404
