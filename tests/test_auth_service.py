"""
Tests for AuthService: registration rules, password storage and the
session lifecycle (login, current user, logout, expiry).
"""

import pytest
from pwdlib.hashers.argon2 import Argon2Hasher
from sqlalchemy import select

from app.core.exceptions import AuthError, ConflictError, UnauthenticatedError, ValidationError
from app.core.security import get_password_hash, verify_password
from app.crud.user import backfill_missing_emails
from app.models.session import UserSession
from app.models.user import User
from app.services.auth import AuthService


class TestRegister:
    async def test_returns_public_projection(self, auth_service):
        user = await auth_service.register("alice", "Alice@Example.com", "secret123")

        assert user.username == "alice"
        assert user.email == "alice@example.com"
        dumped = user.model_dump()
        assert "password" not in dumped
        assert "hashed_password" not in dumped

    async def test_password_is_stored_hashed(self, auth_service, db_session):
        user = await auth_service.register("alice", "alice@example.com", "secret123")

        stored = (await db_session.execute(select(User).where(User.id == user.id))).scalar_one()
        assert stored.hashed_password != "secret123"
        assert "secret123" not in stored.hashed_password
        verified, _ = verify_password("secret123", stored.hashed_password)
        assert verified

    @pytest.mark.parametrize(
        "username,email,password",
        [
            ("alice", "alice.example.com", "secret123"),
            ("alice", "alice@example.com", "12345"),
            ("   ", "alice@example.com", "secret123"),
            ("al@ce", "alice@example.com", "secret123"),
            ("a" * 51, "alice@example.com", "secret123"),
        ],
    )
    async def test_rejects_invalid_input(self, auth_service, db_session, username, email, password):
        with pytest.raises(ValidationError):
            await auth_service.register(username, email, password)

        users = (await db_session.execute(select(User))).scalars().all()
        assert users == []

    async def test_six_character_password_is_enough(self, auth_service):
        user = await auth_service.register("alice", "alice@example.com", "123456")
        assert user.username == "alice"

    async def test_duplicate_email_conflicts(self, auth_service, alice):
        with pytest.raises(ConflictError):
            await auth_service.register("alice2", "ALICE@example.com", "secret123")

    async def test_duplicate_username_conflicts(self, auth_service, alice):
        with pytest.raises(ConflictError):
            await auth_service.register("alice", "other@example.com", "secret123")


class TestLogin:
    async def test_login_by_username_then_current_user(self, auth_service, alice):
        session = await auth_service.login("alice", "secret123")

        assert session.user.id == alice.id
        current = await auth_service.current_user(session.token)
        assert current.id == alice.id

    async def test_login_by_email_is_case_insensitive(self, auth_service, alice):
        session = await auth_service.login("Alice@Example.COM", "secret123")
        assert session.user.id == alice.id

    async def test_wrong_password(self, auth_service, alice):
        with pytest.raises(AuthError):
            await auth_service.login("alice", "wrong-password")

    async def test_unknown_user(self, auth_service):
        with pytest.raises(AuthError) as excinfo:
            await auth_service.login("nobody@example.com", "secret123")
        assert excinfo.value.message == "Invalid credentials"

    async def test_each_login_gets_its_own_session(self, auth_service, alice, db_session):
        first = await auth_service.login("alice", "secret123")
        second = await auth_service.login("alice", "secret123")

        assert first.token != second.token
        rows = (await db_session.execute(select(UserSession))).scalars().all()
        assert len(rows) == 2


class TestSessionLifecycle:
    async def test_missing_token_is_unauthenticated(self, auth_service):
        with pytest.raises(UnauthenticatedError):
            await auth_service.current_user(None)

    async def test_garbage_token_is_unauthenticated(self, auth_service):
        with pytest.raises(UnauthenticatedError):
            await auth_service.current_user("not-a-token")

    async def test_logout_invalidates_only_that_session(self, auth_service, alice):
        first = await auth_service.login("alice", "secret123")
        second = await auth_service.login("alice", "secret123")

        await auth_service.logout(first.token)

        with pytest.raises(UnauthenticatedError):
            await auth_service.current_user(first.token)
        assert (await auth_service.current_user(second.token)).id == alice.id

    async def test_logout_is_idempotent(self, auth_service, alice):
        session = await auth_service.login("alice", "secret123")

        await auth_service.logout(session.token)
        await auth_service.logout(session.token)
        await auth_service.logout(None)
        await auth_service.logout("not-a-token")

    async def test_expired_session(self, db_session, settings, alice):
        short_lived = AuthService(db_session, settings.model_copy(update={"SESSION_LIFETIME_MINUTES": 0}))
        session = await short_lived.login("alice", "secret123")

        with pytest.raises(UnauthenticatedError):
            await short_lived.current_user(session.token)

    async def test_token_signed_with_other_key_is_rejected(self, db_session, settings, auth_service, alice):
        forger = AuthService(db_session, settings.model_copy(update={"SECRET_KEY": "another-secret-key-of-decent-length"}))
        session = await forger.login("alice", "secret123")

        with pytest.raises(UnauthenticatedError):
            await auth_service.current_user(session.token)


class TestLegacyUsers:
    async def test_backfill_gives_placeholder_email(self, auth_service, db_session):
        db_session.add(User(username="OldTimer", email=None, hashed_password=get_password_hash("secret123")))
        await db_session.commit()

        assert await backfill_missing_emails("temporary.com", db_session) == (1, 0)
        assert await backfill_missing_emails("temporary.com", db_session) == (0, 0)

        session = await auth_service.login("oldtimer@temporary.com", "secret123")
        assert session.user.username == "OldTimer"

    async def test_backfill_skips_taken_placeholders(self, db_session):
        hashed = get_password_hash("secret123")
        db_session.add(User(username="bob", email="BOB@temporary.com", hashed_password=hashed))
        db_session.add(User(username="Bob", email=None, hashed_password=hashed))
        db_session.add(User(username="carol", email=None, hashed_password=hashed))
        await db_session.commit()

        assert await backfill_missing_emails("temporary.com", db_session) == (1, 1)

        emails = dict((await db_session.execute(select(User.username, User.email))).all())
        assert emails == {"bob": "BOB@temporary.com", "Bob": None, "carol": "carol@temporary.com"}


class TestPasswordUpgrade:
    async def test_outdated_hash_is_replaced_on_login(self, auth_service, db_session):
        weak_hash = Argon2Hasher(time_cost=1).hash("secret123")
        db_session.add(User(username="carol", email="carol@example.com", hashed_password=weak_hash))
        await db_session.commit()

        await auth_service.login("carol", "secret123")

        stored = (
            await db_session.execute(select(User.hashed_password).where(User.username == "carol"))
        ).scalar_one()
        assert stored != weak_hash
        verified, updated_hash = verify_password("secret123", stored)
        assert verified
        assert updated_hash is None
