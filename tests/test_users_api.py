"""Users HTTP API: status mapping, response shape and API-key checks.

Invariants:
    - validation failures and lookup absence → 400
    - delete of a missing user → 404
    - create → 201, delete → 204 with empty body
"""

from uuid import uuid4

import pytest

USERS = "/api/v1/users"


@pytest.fixture
async def created_user(client):
    res = await client.post(USERS, json={"username": "jdoe", "email": "jdoe@example.com", "full_name": "John Doe"})
    assert res.status_code == 201
    return res.json()


async def test_create_returns_201_with_identity(created_user):
    assert created_user["id"] > 0
    assert created_user["uuid"]
    assert created_user["username"] == "jdoe"
    assert created_user["email"] == "jdoe@example.com"
    assert created_user["full_name"] == "John Doe"
    assert "created_at" in created_user and "updated_at" in created_user


async def test_create_invalid_input_returns_400(client):
    res = await client.post(USERS, json={"username": "jd", "email": "jdoe@example.com", "full_name": "John Doe"})
    assert res.status_code == 400
    assert res.json() == {"detail": "username is invalid"}


async def test_create_missing_fields_reports_first_required(client):
    res = await client.post(USERS, json={})
    assert res.status_code == 400
    assert res.json()["detail"] == "username is required"


async def test_create_duplicate_username_is_server_error(client, created_user):
    res = await client.post(USERS, json={"username": "jdoe", "email": "x@example.com", "full_name": "X"})
    assert res.status_code == 500


async def test_list_users(client, created_user):
    res = await client.get(USERS)
    assert res.status_code == 200
    assert [u["username"] for u in res.json()] == ["jdoe"]


async def test_list_users_empty(client):
    res = await client.get(USERS)
    assert res.status_code == 200
    assert res.json() == []


async def test_get_by_username_id_and_uuid(client, created_user):
    for path in (
        f"{USERS}/username/jdoe",
        f"{USERS}/id/{created_user['id']}",
        f"{USERS}/uuid/{created_user['uuid']}",
    ):
        res = await client.get(path)
        assert res.status_code == 200, path
        assert res.json()["uuid"] == created_user["uuid"]


async def test_lookup_absence_is_bad_request(client):
    res = await client.get(f"{USERS}/username/nobody")
    assert res.status_code == 400
    assert res.json() == {"detail": "user not found"}


async def test_get_by_non_numeric_id(client):
    res = await client.get(f"{USERS}/id/abc")
    assert res.status_code == 400
    assert res.json() == {"detail": "invalid id"}


async def test_get_by_negative_id(client):
    res = await client.get(f"{USERS}/id/-5")
    assert res.status_code == 400
    assert res.json() == {"detail": "id must be positive"}


@pytest.mark.parametrize("raw", ["1_0", " 5", "١", "+", "9223372036854775808", "-9223372036854775809", "99999999999999999999999"])
async def test_get_by_id_rejects_non_int64_input(client, created_user, raw):
    res = await client.get(f"{USERS}/id/{raw}")
    assert res.status_code == 400
    assert res.json() == {"detail": "invalid id"}


async def test_get_by_max_int64_id_is_plain_absence(client):
    res = await client.get(f"{USERS}/id/9223372036854775807")
    assert res.status_code == 400
    assert res.json() == {"detail": "user not found"}


async def test_create_malformed_json_returns_400(client):
    res = await client.post(USERS, content=b"{not json", headers={"Content-Type": "application/json"})
    assert res.status_code == 400
    assert res.json() == {"detail": "invalid request body"}


async def test_create_wrong_field_type_returns_400(client):
    res = await client.post(USERS, json={"username": 123, "email": "jdoe@example.com", "full_name": "John Doe"})
    assert res.status_code == 400
    assert res.json() == {"detail": "invalid request body"}


@pytest.mark.parametrize(
    "body, message",
    [
        ({"username": None, "email": "jdoe@example.com", "full_name": "John Doe"}, "username is required"),
        ({"username": "jdoe", "email": None, "full_name": "John Doe"}, "email is required"),
        ({"username": "jdoe", "email": "jdoe@example.com", "full_name": None}, "full name is required"),
    ],
)
async def test_create_null_field_counts_as_missing(client, body, message):
    res = await client.post(USERS, json=body)
    assert res.status_code == 400
    assert res.json() == {"detail": message}


async def test_patch_malformed_json_returns_400(client, created_user):
    res = await client.patch(f"{USERS}/{created_user['uuid']}", content=b"{not json", headers={"Content-Type": "application/json"})
    assert res.status_code == 400
    assert res.json() == {"detail": "invalid request body"}


async def test_patch_to_taken_username_is_server_error_and_rolls_back(client, created_user):
    res = await client.post(USERS, json={"username": "other", "email": "o@example.com", "full_name": "Other"})
    other = res.json()

    res = await client.patch(f"{USERS}/{other['uuid']}", json={"username": "jdoe"})
    assert res.status_code == 500
    assert res.json() == {"detail": "Failed update user"}

    res = await client.get(f"{USERS}/uuid/{other['uuid']}")
    assert res.json()["username"] == "other"


async def test_get_by_malformed_uuid(client):
    res = await client.get(f"{USERS}/uuid/not-a-uuid")
    assert res.status_code == 400
    assert res.json() == {"detail": "uuid is invalid"}


async def test_patch_keeps_omitted_fields(client, created_user):
    res = await client.patch(f"{USERS}/{created_user['uuid']}", json={"full_name": "Johnny Doe"})
    assert res.status_code == 200
    body = res.json()
    assert body["full_name"] == "Johnny Doe"
    assert body["email"] == "jdoe@example.com"
    assert body["username"] == "jdoe"


async def test_patch_without_fields(client, created_user):
    res = await client.patch(f"{USERS}/{created_user['uuid']}", json={})
    assert res.status_code == 400
    assert res.json() == {"detail": "no fields to update"}


async def test_patch_missing_user(client):
    res = await client.patch(f"{USERS}/{uuid4()}", json={"full_name": "Ghost"})
    assert res.status_code == 400
    assert res.json() == {"detail": "user not found"}


async def test_delete_returns_204_then_404(client, created_user):
    res = await client.delete(f"{USERS}/{created_user['uuid']}")
    assert res.status_code == 204
    assert res.content == b""

    res = await client.delete(f"{USERS}/{created_user['uuid']}")
    assert res.status_code == 404
    assert res.json() == {"detail": "user not found"}


async def test_delete_invalid_uuid(client):
    res = await client.delete(f"{USERS}/not-a-uuid")
    assert res.status_code == 400
    assert res.json() == {"detail": "uuid is invalid"}


async def test_request_id_is_echoed(client):
    res = await client.get(USERS, headers={"X-Request-ID": "req-123"})
    assert res.headers["X-Request-ID"] == "req-123"


async def test_request_id_generated_when_absent(client):
    res = await client.get(USERS)
    assert res.headers["X-Request-ID"]


async def test_health_check(client):
    res = await client.get("/health")
    assert res.status_code == 200
    assert res.json()["status"] == "ok"


class TestApiKey:
    @pytest.fixture(autouse=True)
    def enable_api_key(self, settings_override):
        settings_override.API_KEY = "s3cret"

    async def test_missing_key_is_401(self, client):
        res = await client.get(USERS)
        assert res.status_code == 401
        assert res.json() == {"detail": "missing X-API-Key header"}

    async def test_wrong_key_is_403(self, client):
        res = await client.get(USERS, headers={"X-API-Key": "nope"})
        assert res.status_code == 403
        assert res.json() == {"detail": "invalid X-API-Key"}

    async def test_correct_key_passes(self, client):
        res = await client.get(USERS, headers={"X-API-Key": "s3cret"})
        assert res.status_code == 200

    async def test_health_needs_no_key(self, client):
        res = await client.get("/health")
        assert res.status_code == 200
