"""Users Endpoints - end-to-end tests through FastAPI, the binding and the pipeline.

Tests cover:
    - GET /api/users listing envelope
    - GET /api/users/:id guard outcomes (401/403/404/200)
    - POST /api/users validation (400) and creation (200)
    - PUT /api/users/:id merge, 404 and body-parse failure
    - DELETE /api/users/:id success and repeat 404
    - Unknown routes and foreign prefixes share the 404 envelope
"""


# ─── GET /users ──────────────────────────────────────────────────

async def test_list_users_returns_seeded_records(client):
    res = await client.get("/api/users")
    assert res.status_code == 200
    body = res.json()
    assert body["success"] is True
    assert [u["id"] for u in body["data"]] == [1, 2, 3]
    assert "message" in body


async def test_list_users_trailing_slash(client):
    res = await client.get("/api/users/")
    assert res.status_code == 200


# ─── GET /users/:id ──────────────────────────────────────────────

async def test_get_user_with_valid_token(client, auth_headers):
    res = await client.get("/api/users/1", headers=auth_headers)
    assert res.status_code == 200
    assert res.json()["data"]["id"] == 1


async def test_get_user_without_header_is_401(client):
    res = await client.get("/api/users/1")
    assert res.status_code == 401
    assert res.json()["success"] is False


async def test_get_user_with_forbidden_token_is_403(client):
    res = await client.get(
        "/api/users/1", headers={"Authorization": "Bearer forbidden-token"},
    )
    assert res.status_code == 403
    assert res.json()["success"] is False


async def test_get_user_with_expired_token_is_401(client):
    res = await client.get(
        "/api/users/1", headers={"Authorization": "Bearer expired-token"},
    )
    assert res.status_code == 401


async def test_get_user_with_short_token_is_401(client):
    res = await client.get("/api/users/1", headers={"Authorization": "Bearer abc"})
    assert res.status_code == 401


async def test_get_missing_user_is_404_with_id(client, auth_headers):
    res = await client.get("/api/users/999", headers=auth_headers)
    assert res.status_code == 404
    body = res.json()
    assert body["success"] is False
    assert "999" in body["message"]


async def test_get_non_numeric_id_is_404(client, auth_headers):
    res = await client.get("/api/users/abc", headers=auth_headers)
    assert res.status_code == 404


async def test_get_non_positive_id_is_404(client, auth_headers):
    res = await client.get("/api/users/0", headers=auth_headers)
    assert res.status_code == 404


async def test_guard_runs_before_id_parsing(client):
    res = await client.get("/api/users/abc")
    assert res.status_code == 401


# ─── POST /users ─────────────────────────────────────────────────

async def test_create_user_returns_next_id(client, store):
    expected_id = max(u.id for u in store.find_all()) + 1
    res = await client.post(
        "/api/users",
        json={"email": "a@b.com", "name": "Ann", "password": "secret1"},
    )
    assert res.status_code == 200
    body = res.json()
    assert body["success"] is True
    assert body["data"]["id"] == expected_id
    assert body["data"]["name"] == "Ann"
    assert "password" not in body["data"]


async def test_created_user_is_retrievable(client, auth_headers):
    created = await client.post(
        "/api/users",
        json={"email": "a@b.com", "name": "Ann", "password": "secret1", "age": "30"},
    )
    new_id = created.json()["data"]["id"]
    res = await client.get(f"/api/users/{new_id}", headers=auth_headers)
    assert res.json()["data"] == created.json()["data"]
    assert res.json()["data"]["age"] == 30


async def test_create_user_invalid_body_is_400_with_field_errors(client):
    res = await client.post("/api/users", json={"name": "A"})
    assert res.status_code == 400
    body = res.json()
    assert body["statusCode"] == 400
    assert body["error"] == "Validation Error"
    assert {"name", "email", "password"} <= set(body["errors"])


async def test_create_user_rejects_unknown_field(client):
    res = await client.post(
        "/api/users",
        json={"email": "a@b.com", "name": "Ann", "password": "secret1", "role": "admin"},
    )
    assert res.status_code == 400
    assert res.json()["errors"] == {"role": ["property role should not exist"]}


async def test_create_user_malformed_json_is_400(client):
    res = await client.post(
        "/api/users", content=b"{oops",
        headers={"Content-Type": "application/json"},
    )
    assert res.status_code == 400
    assert res.json()["success"] is False


# ─── PUT /users/:id ──────────────────────────────────────────────

async def test_update_user_merges_fields(client, store):
    original_email = store.find_by_id(1).email
    res = await client.put("/api/users/1", json={"name": "Renamed", "id": 77})
    assert res.status_code == 200
    data = res.json()["data"]
    assert data == {"id": 1, "name": "Renamed", "email": original_email}


async def test_update_user_empty_body_keeps_record(client, store):
    before = store.find_by_id(2).to_dict()
    res = await client.put("/api/users/2", json={})
    assert res.status_code == 200
    assert res.json()["data"] == before


async def test_update_missing_user_is_404(client):
    res = await client.put("/api/users/999", json={"name": "Nobody"})
    assert res.status_code == 404
    assert res.json()["success"] is False


async def test_update_malformed_body_is_400(client):
    res = await client.put(
        "/api/users/1", content=b"not-json",
        headers={"Content-Type": "application/json"},
    )
    assert res.status_code == 400
    assert res.json()["success"] is False


async def test_update_invalid_email_is_400(client):
    res = await client.put("/api/users/1", json={"email": "nope"})
    assert res.status_code == 400
    assert "email" in res.json()["errors"]


# ─── DELETE /users/:id ───────────────────────────────────────────

async def test_delete_user_then_repeat_is_404(client):
    first = await client.delete("/api/users/3")
    assert first.status_code == 200
    assert first.json() == {"success": True, "message": "User deleted"}

    second = await client.delete("/api/users/3")
    assert second.status_code == 404


async def test_delete_oversized_id_is_404(client):
    res = await client.delete("/api/users/" + "1" * 5000)
    assert res.status_code == 404
    assert res.json()["success"] is False


async def test_deleted_user_not_listed(client):
    await client.delete("/api/users/1")
    res = await client.get("/api/users")
    assert 1 not in [u["id"] for u in res.json()["data"]]


# ─── unknown routes ─────────────────────────────────────────────

async def test_unknown_path_under_prefix_is_404(client):
    res = await client.get("/api/accounts")
    assert res.status_code == 404
    assert res.json() == {"success": False, "message": "Cannot GET /api/accounts"}


async def test_path_outside_prefix_is_404_envelope(client):
    res = await client.get("/users")
    assert res.status_code == 404
    assert res.json()["success"] is False


async def test_unrouted_method_is_404(client):
    res = await client.post("/api/users/1", json={})
    assert res.status_code == 404
