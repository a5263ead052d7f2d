# File: tests/test_auth.py
"""Tests for login, logout and session expiry."""

import uuid
from datetime import datetime, timedelta

import pytest

from dailyledger.api.auth import AuthSession
from dailyledger.core.security import check_credentials, hash_password
from dailyledger.utils.datetime import now_utc
from tests.factories import UserFactory


class TestAuthSession:
    """Session expiry is a pure function of the clock."""

    def test_issue_sets_expiry(self):
        now = datetime(2024, 3, 4, 8, 0)
        auth = AuthSession.issue(uuid.uuid4(), now, ttl=timedelta(hours=24))

        assert auth.issued_at == now
        assert auth.expires_at == datetime(2024, 3, 5, 8, 0)

    def test_is_expired(self):
        now = datetime(2024, 3, 4, 8, 0)
        auth = AuthSession.issue(uuid.uuid4(), now, ttl=timedelta(hours=1))

        assert not auth.is_expired(now)
        assert not auth.is_expired(now + timedelta(hours=1))
        assert auth.is_expired(now + timedelta(hours=1, seconds=1))


class TestPasswords:
    def test_hash_and_check(self):
        hashed = hash_password("testpass123")

        valid, _ = check_credentials("testpass123", hashed)
        invalid, _ = check_credentials("wrongpass1", hashed)

        assert valid
        assert not invalid

    def test_short_password_rejected(self):
        with pytest.raises(ValueError, match="at least 8"):
            hash_password("short")


class TestLogin:
    """POST /login and /logout"""

    @pytest.mark.asyncio
    async def test_login_then_access(self, unauthenticated_client):
        await UserFactory.create(unauthenticated_client.db_session, username="maria")

        response = await unauthenticated_client.post(
            "/login", json={"username": " Maria ", "password": "testpass123"}
        )

        assert response.status_code == 200
        body = response.json()
        assert body["user"]["username"] == "maria"
        assert "expires_at" in body

        listing = await unauthenticated_client.get("/api/daily-records")
        assert listing.status_code == 200

    @pytest.mark.asyncio
    async def test_wrong_password(self, unauthenticated_client):
        await UserFactory.create(unauthenticated_client.db_session, username="maria")

        response = await unauthenticated_client.post(
            "/login", json={"username": "maria", "password": "nope-nope"}
        )

        assert response.status_code == 401
        assert response.json()["message"] == "Invalid username or password"

    @pytest.mark.asyncio
    async def test_unknown_user(self, unauthenticated_client):
        response = await unauthenticated_client.post(
            "/login", json={"username": "ghost", "password": "testpass123"}
        )
        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_disabled_account(self, unauthenticated_client):
        await UserFactory.create(unauthenticated_client.db_session, username="maria", is_active=False)

        response = await unauthenticated_client.post(
            "/login", json={"username": "maria", "password": "testpass123"}
        )

        assert response.status_code == 401
        assert response.json()["message"] == "Account is disabled"

    @pytest.mark.asyncio
    async def test_logout_ends_session(self, unauthenticated_client):
        await UserFactory.create(unauthenticated_client.db_session, username="maria")
        await unauthenticated_client.post(
            "/login", json={"username": "maria", "password": "testpass123"}
        )

        response = await unauthenticated_client.post("/logout")
        assert response.status_code == 204

        listing = await unauthenticated_client.get("/api/daily-records")
        assert listing.status_code == 401

    @pytest.mark.asyncio
    async def test_expired_session_rejected(self, unauthenticated_client, monkeypatch):
        await UserFactory.create(unauthenticated_client.db_session, username="maria")
        await unauthenticated_client.post(
            "/login", json={"username": "maria", "password": "testpass123"}
        )

        later = now_utc() + timedelta(days=2)
        monkeypatch.setattr("dailyledger.api.auth.now_utc", lambda: later)

        response = await unauthenticated_client.get("/api/daily-records")

        assert response.status_code == 401
        assert response.json()["message"] == "Session expired"

    @pytest.mark.asyncio
    async def test_no_session(self, unauthenticated_client):
        response = await unauthenticated_client.get("/api/petty-cash")

        assert response.status_code == 401
        assert response.json()["code"] == "UNAUTHORIZED"


class TestCreateUserPrompts:
    """Interactive createuser command."""

    def test_username_is_normalized_and_validated(self, monkeypatch):
        from dailyledger.scripts import createuser

        answers = iter(["ab", "Bad Name", "  Maria.R  "])
        monkeypatch.setattr("builtins.input", lambda prompt="": next(answers))

        assert createuser.prompt_for_username() == "maria.r"

    def test_password_must_match(self, monkeypatch):
        from dailyledger.scripts import createuser

        answers = iter(["short", "longenough1", "different1", "longenough1", "longenough1"])
        monkeypatch.setattr(createuser, "getpass", lambda prompt="": next(answers))

        assert createuser.prompt_for_password() == "longenough1"
