"""Tests for the Redis-backed session store and the bearer verifier."""

import pytest

from parley.core.errors import SessionStoreError
from parley.schemas.user import SessionUser
from parley.services.session_store import SessionStore, mask_token
from parley.services.session_verifier import (
    extract_bearer_token,
    resolve_token,
    verify_authorization,
)

ALICE = SessionUser(id=1, username="alice", email="alice@example.com", external_id="ext-alice")
BOB = SessionUser(id=2, username="bob", email=None, external_id="ext-bob")


class TestSessionStore:
    """Put/get semantics with absolute expiry."""

    def test_get_returns_stored_snapshot(self, session_store: SessionStore) -> None:
        session_store.put("t1", ALICE, 3600)
        assert session_store.get("t1") == ALICE

    def test_unknown_token_is_absent(self, session_store: SessionStore) -> None:
        assert session_store.get("missing") is None

    def test_snapshot_expires_after_ttl(self, session_store: SessionStore, fake_redis) -> None:
        session_store.put("t1", ALICE, 3600)
        fake_redis.advance(3599)
        assert session_store.get("t1") == ALICE
        fake_redis.advance(1)
        assert session_store.get("t1") is None

    def test_reads_do_not_extend_ttl(self, session_store: SessionStore, fake_redis) -> None:
        session_store.put("t1", ALICE, 10)
        for _ in range(5):
            fake_redis.advance(1)
            assert session_store.get("t1") is not None
        fake_redis.advance(5)
        assert session_store.get("t1") is None

    def test_put_overwrites_previous_value(self, session_store: SessionStore) -> None:
        session_store.put("t1", ALICE, 3600)
        session_store.put("t1", BOB, 3600)
        assert session_store.get("t1") == BOB

    def test_default_ttl_comes_from_settings(self, session_store: SessionStore, fake_redis) -> None:
        session_store.put("t1", ALICE)
        fake_redis.advance(3600)
        assert session_store.get("t1") is None

    def test_unreadable_payload_is_treated_as_absent(
        self, session_store: SessionStore, fake_redis
    ) -> None:
        fake_redis.set("t1", "not json", ex=60)
        assert session_store.get("t1") is None

    def test_outage_raises_session_store_error(self, session_store: SessionStore, fake_redis) -> None:
        fake_redis.available = False
        with pytest.raises(SessionStoreError):
            session_store.put("t1", ALICE, 60)
        with pytest.raises(SessionStoreError):
            session_store.get("t1")

    def test_mask_token_hides_most_of_the_token(self) -> None:
        assert mask_token("0123456789abcdef") == "01234567..."
        assert mask_token("short") == "***"


class TestBearerExtraction:
    """Header parsing never consults the store."""

    @pytest.mark.parametrize(
        ("header", "expected"),
        [
            ("Bearer abc", "abc"),
            ("bearer abc", "abc"),
            ("BEARER  abc ", "abc"),
            (None, None),
            ("", None),
            ("abc", None),
            ("Bearer", None),
            ("Bearer   ", None),
            ("Basic abc", None),
        ],
    )
    def test_extract_bearer_token(self, header, expected) -> None:
        assert extract_bearer_token(header) == expected

    @pytest.mark.parametrize("header", [None, "", "Token abc", "Bearer"])
    def test_malformed_header_skips_store(self, session_store: SessionStore, fake_redis, header) -> None:
        assert verify_authorization(header, session_store) is None
        assert fake_redis.get_calls == 0


class TestVerification:
    def test_live_token_resolves_to_user(self, session_store: SessionStore) -> None:
        session_store.put("t1", ALICE, 3600)
        assert verify_authorization("Bearer t1", session_store) == ALICE

    def test_expired_token_fails(self, session_store: SessionStore, fake_redis) -> None:
        session_store.put("t1", ALICE, 3600)
        fake_redis.advance(3601)
        assert verify_authorization("Bearer t1", session_store) is None

    def test_store_outage_fails_closed(self, session_store: SessionStore, fake_redis) -> None:
        session_store.put("t1", ALICE, 3600)
        fake_redis.available = False
        assert resolve_token("t1", session_store) is None
        assert verify_authorization("Bearer t1", session_store) is None
