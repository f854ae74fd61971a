"""Tests for calcsaas.services.credentials against in-memory SQLite."""

import unittest
from collections.abc import Callable
from unittest.mock import MagicMock

from sqlalchemy.exc import OperationalError

from calcsaas.core.config import Settings
from calcsaas.core.database import build_engine, build_session_factory
from calcsaas.core.errors import (
    DuplicateIdentity,
    InvalidCredentials,
    PersistenceFailure,
    ValidationError,
)
from calcsaas.models import Base
from calcsaas.services.credentials import CredentialStore


def _memory_store() -> tuple[CredentialStore, Callable[[], None]]:
    """CredentialStore on a fresh in-memory database, plus a cleanup callable."""
    engine = build_engine(Settings(_env_file=None, DATABASE_URL="sqlite://"))
    Base.metadata.create_all(engine)
    session = build_session_factory(engine)()

    def cleanup() -> None:
        session.close()
        engine.dispose()

    return CredentialStore(session, bcrypt_rounds=4), cleanup


class _StoreTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self.store, cleanup = _memory_store()
        self.addCleanup(cleanup)


class TestCreateUser(_StoreTestCase):
    def test_creates_user_with_hashed_password(self) -> None:
        user = self.store.create_user("alice", "alice@example.com", "secret1")
        self.assertIsNotNone(user.id)
        self.assertEqual(user.username, "alice")
        self.assertEqual(user.email, "alice@example.com")
        self.assertNotEqual(user.password_hash, "secret1")
        self.assertTrue(user.password_hash.startswith("$2b$04$"))
        self.assertIsNotNone(user.created_at)

    def test_ids_increase(self) -> None:
        first = self.store.create_user("alice", "alice@example.com", "secret1")
        second = self.store.create_user("bob", "bob@example.com", "secret1")
        self.assertGreater(second.id, first.id)

    def test_missing_fields(self) -> None:
        for args in (
            ("", "a@example.com", "secret1"),
            ("alice", "", "secret1"),
            ("alice", "a@example.com", ""),
        ):
            with self.subTest(args=args):
                with self.assertRaises(ValidationError) as ctx:
                    self.store.create_user(*args)
                self.assertEqual(ctx.exception.message, "All fields are required")

    def test_short_password(self) -> None:
        with self.assertRaises(ValidationError) as ctx:
            self.store.create_user("alice", "alice@example.com", "12345")
        self.assertEqual(ctx.exception.message, "Password must be at least 6 characters")

    def test_six_character_password_is_enough(self) -> None:
        self.assertIsNotNone(self.store.create_user("alice", "alice@example.com", "123456").id)

    def test_duplicate_username(self) -> None:
        self.store.create_user("alice", "alice@example.com", "secret1")
        with self.assertRaises(DuplicateIdentity):
            self.store.create_user("alice", "other@example.com", "secret1")

    def test_duplicate_email(self) -> None:
        self.store.create_user("alice", "alice@example.com", "secret1")
        with self.assertRaises(DuplicateIdentity):
            self.store.create_user("alice2", "alice@example.com", "secret1")

    def test_uniqueness_is_case_sensitive(self) -> None:
        self.store.create_user("alice", "alice@example.com", "secret1")
        user = self.store.create_user("Alice", "Alice@example.com", "secret1")
        self.assertEqual(user.username, "Alice")

    def test_store_usable_after_duplicate(self) -> None:
        self.store.create_user("alice", "alice@example.com", "secret1")
        with self.assertRaises(DuplicateIdentity):
            self.store.create_user("alice", "alice@example.com", "secret1")
        self.assertEqual(self.store.create_user("bob", "bob@example.com", "secret1").username, "bob")
        self.assertEqual([u.username for u in self.store.list_users()], ["alice", "bob"])


class TestLookupAndAuthenticate(_StoreTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.user = self.store.create_user("alice", "alice@example.com", "secret1")

    def test_find_by_username(self) -> None:
        self.assertEqual(self.store.find_by_username_or_email("alice").id, self.user.id)

    def test_find_by_email(self) -> None:
        self.assertEqual(self.store.find_by_username_or_email("alice@example.com").id, self.user.id)

    def test_find_is_case_sensitive(self) -> None:
        self.assertIsNone(self.store.find_by_username_or_email("ALICE"))

    def test_find_unknown(self) -> None:
        self.assertIsNone(self.store.find_by_username_or_email("nobody"))

    def test_verify_password(self) -> None:
        self.assertTrue(self.store.verify_password(self.user, "secret1"))
        self.assertFalse(self.store.verify_password(self.user, "secret2"))

    def test_authenticate_by_username_or_email(self) -> None:
        self.assertEqual(self.store.authenticate("alice", "secret1").id, self.user.id)
        self.assertEqual(self.store.authenticate("alice@example.com", "secret1").id, self.user.id)

    def test_wrong_password_and_unknown_user_fail_alike(self) -> None:
        with self.assertRaises(InvalidCredentials) as wrong:
            self.store.authenticate("alice", "wrong-password")
        with self.assertRaises(InvalidCredentials) as unknown:
            self.store.authenticate("nobody", "secret1")
        self.assertEqual(wrong.exception.message, unknown.exception.message)
        self.assertEqual(wrong.exception.status_code, 401)


class TestPersistenceFailures(unittest.TestCase):
    """Database errors surface as PersistenceFailure with a generic message."""

    def setUp(self) -> None:
        self.session = MagicMock()
        self.session.execute.side_effect = OperationalError("SELECT", {}, Exception("db down"))
        self.store = CredentialStore(self.session, bcrypt_rounds=4)

    def test_lookup_failure(self) -> None:
        with self.assertRaises(PersistenceFailure) as ctx:
            self.store.find_by_username_or_email("alice")
        self.assertEqual(ctx.exception.message, "Server error")

    def test_create_failure_rolls_back(self) -> None:
        self.session.commit.side_effect = OperationalError("INSERT", {}, Exception("db down"))
        with self.assertRaises(PersistenceFailure):
            self.store.create_user("alice", "alice@example.com", "secret1")
        self.session.rollback.assert_called_once()


if __name__ == "__main__":
    unittest.main()
