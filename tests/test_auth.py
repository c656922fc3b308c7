"""Tests for signup and login."""

from fastapi import status
from fastapi.testclient import TestClient

from parley.core import security
from parley.schemas.user import SessionUser
from tests.conftest import TEST_PASSWORD


class TestSignup:
    def test_signup_opens_session(self, client: TestClient, session_store) -> None:
        r = client.post(
            "/api/signup",
            json={"username": "dave", "email": "dave@example.com", "password": "pw"},
        )
        assert r.status_code == status.HTTP_200_OK
        data = r.json()
        assert data["username"] == "dave"
        assert data["email"] == "dave@example.com"
        assert data["externalId"]

        user = session_store.get(data["token"])
        assert user == SessionUser(
            id=data["id"],
            username="dave",
            email="dave@example.com",
            external_id=data["externalId"],
        )

    def test_signup_token_authenticates(self, client: TestClient) -> None:
        data = client.post(
            "/api/signup",
            json={"username": "dave", "email": "dave@example.com", "password": "pw"},
        ).json()
        r = client.get("/api/rooms", headers={"Authorization": f"Bearer {data['token']}"})
        assert r.status_code == status.HTTP_200_OK

    def test_password_is_stored_hashed(self, client: TestClient, db_session) -> None:
        from parley.models import User

        client.post(
            "/api/signup",
            json={"username": "dave", "email": "dave@example.com", "password": "pw"},
        )
        user = db_session.query(User).filter_by(username="dave").one()
        assert user.password.startswith("$pbkdf2-sha256$")
        assert security.verify_password("pw", user.password)
        assert not security.verify_password("pW", user.password)

    def test_hashes_are_salted(self) -> None:
        first = security.hash_password("same password")
        second = security.hash_password("same password")
        assert first != second
        assert security.verify_password("same password", first)
        assert security.verify_password("same password", second)

    def test_duplicate_username(self, client: TestClient, alice) -> None:
        r = client.post(
            "/api/signup",
            json={"username": "alice", "email": "other@example.com", "password": "pw"},
        )
        assert r.status_code == status.HTTP_409_CONFLICT
        assert r.json()["code"] == "USERNAME_EXISTS"

    def test_duplicate_email(self, client: TestClient, alice) -> None:
        r = client.post(
            "/api/signup",
            json={"username": "alice2", "email": alice.email, "password": "pw"},
        )
        assert r.status_code == status.HTTP_409_CONFLICT
        assert r.json()["code"] == "EMAIL_EXISTS"

    def test_missing_fields(self, client: TestClient) -> None:
        r = client.post("/api/signup", json={"username": "dave"})
        assert r.status_code == status.HTTP_400_BAD_REQUEST
        assert r.json()["code"] == "VALIDATION_ERROR"


class TestLogin:
    def test_login_success(self, client: TestClient, alice, session_store, fake_redis) -> None:
        r = client.post("/api/login", json={"username": "alice", "password": TEST_PASSWORD})
        assert r.status_code == status.HTTP_200_OK
        data = r.json()
        assert data["id"] == alice.user_id
        assert data["externalId"] == alice.external_id

        assert session_store.get(data["token"]).username == "alice"
        fake_redis.advance(3600)
        assert session_store.get(data["token"]) is None

    def test_login_records_last_login(self, client: TestClient, alice) -> None:
        assert alice.last_login is None
        client.post("/api/login", json={"username": "alice", "password": TEST_PASSWORD})
        assert alice.last_login is not None

    def test_each_login_issues_a_new_token(self, client: TestClient, alice) -> None:
        payload = {"username": "alice", "password": TEST_PASSWORD}
        first = client.post("/api/login", json=payload).json()["token"]
        second = client.post("/api/login", json=payload).json()["token"]
        assert first != second

    def test_wrong_password(self, client: TestClient, alice) -> None:
        r = client.post("/api/login", json={"username": "alice", "password": "nope"})
        assert r.status_code == status.HTTP_401_UNAUTHORIZED
        assert r.json() == {"code": "UNAUTHORIZED", "message": "Invalid username or password"}

    def test_unknown_user(self, client: TestClient) -> None:
        r = client.post("/api/login", json={"username": "ghost", "password": "pw"})
        assert r.status_code == status.HTTP_401_UNAUTHORIZED

    def test_session_store_outage(self, client: TestClient, alice, fake_redis) -> None:
        fake_redis.available = False
        r = client.post("/api/login", json={"username": "alice", "password": TEST_PASSWORD})
        assert r.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert r.json() == {"code": "SESSION_STORE_ERROR", "message": "Internal server error"}
