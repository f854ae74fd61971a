"""Tests for the create_user CLI."""

import io
import os
import tempfile
import unittest
from contextlib import redirect_stderr, redirect_stdout
from unittest.mock import patch

from calcsaas.core.config import Settings
from calcsaas.scripts import create_user


class TestCreateUserScript(unittest.TestCase):
    def setUp(self) -> None:
        tmp = tempfile.TemporaryDirectory()
        self.addCleanup(tmp.cleanup)
        db_path = os.path.join(tmp.name, "calc.db")
        settings = Settings(_env_file=None, DATABASE_URL=f"sqlite:///{db_path}", BCRYPT_ROUNDS=4)
        patcher = patch.object(create_user, "get_settings", return_value=settings)
        patcher.start()
        self.addCleanup(patcher.stop)

    def run_main(self, *argv: str) -> tuple[int, str, str]:
        out, err = io.StringIO(), io.StringIO()
        with redirect_stdout(out), redirect_stderr(err):
            code = create_user.main(list(argv))
        return code, out.getvalue(), err.getvalue()

    def test_creates_user(self) -> None:
        code, out, _ = self.run_main("alice", "alice@example.com", "secret1")
        self.assertEqual(code, 0)
        self.assertIn("Created user 'alice'", out)

    def test_duplicate_fails(self) -> None:
        self.run_main("alice", "alice@example.com", "secret1")
        code, _, err = self.run_main("alice", "alice2@example.com", "secret1")
        self.assertEqual(code, 1)
        self.assertIn("Username or email already exists", err)

    def test_short_password_fails(self) -> None:
        code, _, err = self.run_main("alice", "alice@example.com", "12345")
        self.assertEqual(code, 1)
        self.assertIn("at least 6 characters", err)


if __name__ == "__main__":
    unittest.main()
