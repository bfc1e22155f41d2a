from unittest import mock

import pytest

from auth import Identity, JWTTokenVerifier, find_or_create_user
from errors import AuthInvalid, UniquenessConflict
from storage import MemStorage

from conftest import bearer, make_token

SECRET = "test-token-secret-0123456789abcdef"

ALERT = {
    "title": "Burst pipe on Moi Avenue",
    "description": "Water is flooding the road near the bus stop.",
    "type": "Service Interruption",
    "location": "Moi Avenue",
}


def test_verifier_reads_provider_claims():
    verifier = JWTTokenVerifier(SECRET)
    identity = verifier.verify(make_token(
        sub="uid-42", email="baraka@example.com", name="Baraka",
        picture="https://img.example/b.png", phone_number="+254700000000",
    ))
    assert identity == Identity(
        uid="uid-42",
        email="baraka@example.com",
        display_name="Baraka",
        photo_url="https://img.example/b.png",
        phone_number="+254700000000",
    )


@pytest.mark.parametrize("token", [
    make_token(secret="some-other-secret-0123456789abcdef"),
    make_token(expires_in=-60),
    "not-a-jwt",
])
def test_verifier_rejects_bad_tokens(token):
    with pytest.raises(AuthInvalid):
        JWTTokenVerifier(SECRET).verify(token)


def test_verifier_checks_audience_and_issuer():
    verifier = JWTTokenVerifier(SECRET, audience="jamii-app", issuer="https://issuer.example")
    good = make_token(aud="jamii-app", iss="https://issuer.example")
    assert verifier.verify(good).uid == "provider-uid-1"
    with pytest.raises(AuthInvalid):
        verifier.verify(make_token(aud="someone-else", iss="https://issuer.example"))


def test_find_or_create_provisions_verified_user_once():
    store = MemStorage()
    identity = Identity(uid="u1", email="njeri@example.com", display_name="Njeri")

    user = find_or_create_user(store, identity)
    again = find_or_create_user(store, identity)

    assert user["id"] == again["id"]
    assert user["username"] == "njeri"
    assert user["password"] == ""
    assert user["verified"] is True
    assert user["displayName"] == "Njeri"


def test_find_or_create_without_email_has_no_user():
    assert find_or_create_user(MemStorage(), Identity(uid="u1")) is None


def test_find_or_create_avoids_taken_username():
    store = MemStorage()
    store.create_user(username="njeri", email="njeri@other.example", password="x")

    user = find_or_create_user(store, Identity(uid="u2", email="njeri@example.com"))

    assert user["username"].startswith("njeri-")
    assert user["email"] == "njeri@example.com"


def test_find_or_create_recovers_from_concurrent_first_write():
    store = MemStorage()
    winner = store.create_user(username="winner", email="race@example.com", password="")

    real_lookup = store.get_user_by_email
    calls = []

    # the first lookup misses, as if the other request had not committed yet
    def stale_then_real(email):
        calls.append(email)
        return None if len(calls) == 1 else real_lookup(email)

    with mock.patch.object(store, "get_user_by_email", side_effect=stale_then_real):
        user = find_or_create_user(store, Identity(uid="u3", email="race@example.com"))

    assert user["id"] == winner["id"]


def test_find_or_create_verifies_registered_user():
    store = MemStorage()
    registered = store.create_user(username="wafula", email="wafula@example.com", password="hash")
    assert registered["verified"] is False

    user = find_or_create_user(store, Identity(uid="u4", email="wafula@example.com"))

    assert user["id"] == registered["id"]
    assert user["verified"] is True


def test_find_or_create_reraises_unrelated_conflict():
    store = MemStorage()
    with mock.patch.object(store, "create_user", side_effect=UniquenessConflict()):
        with pytest.raises(UniquenessConflict):
            find_or_create_user(store, Identity(uid="u5", email="ghost@example.com"))


def test_post_without_authorization_header_is_401(client):
    response = client.post("/api/alerts", json=ALERT)
    assert response.status_code == 401
    assert response.get_json()["message"] == "Authentication required"


@pytest.mark.parametrize("header", ["Bearer", "Bearer   ", "Basic abc123", "Token xyz"])
def test_post_with_malformed_header_is_401(client, header):
    response = client.post("/api/alerts", json=ALERT, headers={"Authorization": header})
    assert response.status_code == 401


def test_post_with_invalid_token_is_403(client):
    response = client.post("/api/alerts", json=ALERT, headers=bearer("garbage.token.value"))
    assert response.status_code == 403
    assert response.get_json()["message"] == "Invalid authentication token"


def test_post_with_expired_token_is_403(client):
    response = client.post("/api/alerts", json=ALERT, headers=bearer(make_token(expires_in=-10)))
    assert response.status_code == 403


def test_rejected_request_writes_nothing(client):
    client.post("/api/alerts", json=ALERT)
    client.post("/api/alerts", json=ALERT, headers=bearer("garbage"))
    assert client.get("/api/alerts").get_json() == []


def test_get_routes_need_no_token(client):
    assert client.get("/api/alerts").status_code == 200
    assert client.get("/api/events").status_code == 200


def test_first_write_provisions_user_and_fills_owner(client, app):
    response = client.post("/api/alerts", json=ALERT,
                           headers=bearer(email="zawadi@example.com", name="Zawadi"))
    assert response.status_code == 201
    alert = response.get_json()

    with app.app_context():
        user = app.extensions["storage"].get_user_by_email("zawadi@example.com")
    assert user["verified"] is True
    assert user["displayName"] == "Zawadi"
    assert alert["createdBy"] == user["id"]

    client.post("/api/alerts", json=ALERT, headers=bearer(email="zawadi@example.com"))
    profile = client.get(f"/api/users/{user['id']}").get_json()
    assert profile["username"] == "zawadi"
    assert "password" not in profile
    assert client.get("/api/users/2").status_code == 404


def test_explicit_owner_in_body_is_kept(client):
    response = client.post("/api/alerts", json={**ALERT, "createdBy": 77}, headers=bearer())
    assert response.status_code == 201
    assert response.get_json()["createdBy"] == 77


def test_token_without_email_requires_owner_in_body(client):
    headers = bearer(make_token(email=None))
    response = client.post("/api/alerts", json=ALERT, headers=headers)
    assert response.status_code == 400
    assert '"createdBy"' in response.get_json()["message"]
