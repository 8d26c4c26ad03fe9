"""Integration tests for app.repositories.users against in-memory SQLite."""

import unittest

from app.core.database import build_engine, build_session_factory
from app.models import Base, User
from app.repositories.users import UniqueConstraintViolation, UserStore


def _user(email: str = "a@x.com", username: str = "alice") -> User:
    return User(username=username, email=email, password_hash="$2b$04$notarealhash")


class UserStoreTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self.engine = build_engine("sqlite://")
        Base.metadata.create_all(self.engine)
        self.session = build_session_factory(self.engine)()
        self.store = UserStore(self.session)

    def tearDown(self) -> None:
        self.session.close()
        self.engine.dispose()


class TestInsertAndFind(UserStoreTestCase):
    def test_insert_generates_id_and_default_roles(self) -> None:
        user = self.store.insert(_user())
        self.assertTrue(user.id)
        self.assertEqual(user.roles, ["guest"])
        self.assertEqual(user.reviews, [])
        self.assertEqual(user.liked_products, [])

    def test_find_by_id_and_email(self) -> None:
        user = self.store.insert(_user())
        self.assertEqual(self.store.find_by_id(user.id).email, "a@x.com")
        self.assertEqual(self.store.find_by_email("a@x.com").id, user.id)
        self.assertIsNone(self.store.find_by_id("missing"))
        self.assertIsNone(self.store.find_by_email("nobody@x.com"))


class TestEmailUniqueness(UserStoreTestCase):
    def test_duplicate_email_raises_and_keeps_one_row(self) -> None:
        self.store.insert(_user())
        with self.assertRaises(UniqueConstraintViolation):
            self.store.insert(_user(username="mallory"))
        users = self.store.list_all()
        self.assertEqual(len(users), 1)
        self.assertEqual(users[0].username, "alice")

    def test_update_to_taken_email_raises(self) -> None:
        self.store.insert(_user())
        bob = self.store.insert(_user(email="b@x.com", username="bob"))
        with self.assertRaises(UniqueConstraintViolation):
            self.store.update_by_id(bob.id, {"email": "a@x.com"})
        self.assertEqual(self.store.find_by_id(bob.id).email, "b@x.com")


class TestUpdateAndDelete(UserStoreTestCase):
    def test_update_reports_matched_and_modified(self) -> None:
        user = self.store.insert(_user())
        result = self.store.update_by_id(user.id, {"username": "alice2"})
        self.assertTrue(result.matched)
        self.assertTrue(result.modified)
        self.assertEqual(self.store.find_by_id(user.id).username, "alice2")

    def test_update_with_same_values_is_not_modified(self) -> None:
        user = self.store.insert(_user())
        result = self.store.update_by_id(user.id, {"username": "alice"})
        self.assertTrue(result.matched)
        self.assertFalse(result.modified)

    def test_update_missing_id(self) -> None:
        result = self.store.update_by_id("missing", {"username": "x"})
        self.assertFalse(result.matched)
        self.assertFalse(result.modified)

    def test_update_rejects_id_change(self) -> None:
        user = self.store.insert(_user())
        with self.assertRaises(ValueError):
            self.store.update_by_id(user.id, {"id": "other"})

    def test_find_after_delete_in_same_session_returns_none(self) -> None:
        user = self.store.insert(_user())
        self.assertIsNotNone(self.store.find_by_id(user.id))
        self.store.delete_by_id(user.id)
        self.assertIsNone(self.store.find_by_id(user.id))
        self.assertIsNone(self.store.find_by_email("a@x.com"))

    def test_delete(self) -> None:
        user = self.store.insert(_user())
        self.assertTrue(self.store.delete_by_id(user.id).matched)
        self.assertIsNone(self.store.find_by_id(user.id))
        self.assertFalse(self.store.delete_by_id(user.id).matched)


if __name__ == "__main__":
    unittest.main()
