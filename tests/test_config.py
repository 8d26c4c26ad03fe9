"""Unit tests for app.core.config: required signing secret and validated defaults."""

import os
import unittest
from unittest.mock import patch

from pydantic import ValidationError

from app.core.config import DatabaseSettings, Settings


def _env_without(*names: str) -> dict[str, str]:
    return {k: v for k, v in os.environ.items() if k not in names}


class TestJwtSecretRequired(unittest.TestCase):
    """The app must refuse to start without a signing secret."""

    def test_missing_secret_fails(self) -> None:
        with patch.dict(os.environ, _env_without("JWT_SECRET"), clear=True):
            with self.assertRaises(ValidationError):
                Settings(_env_file=None)

    def test_blank_secret_fails(self) -> None:
        with self.assertRaises(ValidationError):
            Settings(JWT_SECRET="   ", _env_file=None)

    def test_secret_is_not_exposed_in_repr(self) -> None:
        settings = Settings(JWT_SECRET="super-secret-value", _env_file=None)
        self.assertNotIn("super-secret-value", repr(settings))
        self.assertEqual(settings.JWT_SECRET.get_secret_value(), "super-secret-value")


class TestDatabaseSettings(unittest.TestCase):
    """Migrations read only DATABASE_URL and must work without a signing secret."""

    def test_loads_without_jwt_secret(self) -> None:
        env = _env_without("JWT_SECRET")
        env["DATABASE_URL"] = "sqlite://"
        with patch.dict(os.environ, env, clear=True):
            settings = DatabaseSettings(_env_file=None)
        self.assertEqual(settings.DATABASE_URL, "sqlite://")

    def test_rejects_unsupported_url(self) -> None:
        with self.assertRaises(ValidationError):
            DatabaseSettings(DATABASE_URL="mysql://localhost/db", _env_file=None)


class TestDefaults(unittest.TestCase):
    def test_token_lifetime_defaults_to_20_minutes(self) -> None:
        with patch.dict(os.environ, _env_without("JWT_EXPIRE_MINUTES"), clear=True):
            settings = Settings(JWT_SECRET="x" * 32, _env_file=None)
        self.assertEqual(settings.JWT_EXPIRE_MINUTES, 20)
        self.assertEqual(settings.JWT_ALGORITHM, "HS256")

    def test_sqlite_url_accepted(self) -> None:
        settings = Settings(JWT_SECRET="x" * 32, DATABASE_URL="sqlite://", _env_file=None)
        self.assertEqual(settings.DATABASE_URL, "sqlite://")

    def test_unsupported_database_url_rejected(self) -> None:
        with self.assertRaises(ValidationError):
            Settings(JWT_SECRET="x" * 32, DATABASE_URL="mysql://localhost/db", _env_file=None)

    def test_expire_minutes_bounds(self) -> None:
        with self.assertRaises(ValidationError):
            Settings(JWT_SECRET="x" * 32, JWT_EXPIRE_MINUTES=0, _env_file=None)

    def test_bcrypt_rounds_bounds(self) -> None:
        with self.assertRaises(ValidationError):
            Settings(JWT_SECRET="x" * 32, BCRYPT_ROUNDS=3, _env_file=None)


if __name__ == "__main__":
    unittest.main()
