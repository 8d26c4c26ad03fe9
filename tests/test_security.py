"""Unit tests for app.core.security: bcrypt hashing and verification."""

import unittest

from app.core.security import hash_password, verify_password

# Low cost keeps the suite fast; the digest format is the same.
ROUNDS = 4


class TestHashPassword(unittest.TestCase):
    """hash_password produces salted bcrypt digests and rejects empty input."""

    def test_digest_is_not_plaintext(self) -> None:
        digest = hash_password("secret123", rounds=ROUNDS)
        self.assertNotIn("secret123", digest)
        self.assertTrue(digest.startswith("$2"))

    def test_digest_embeds_cost(self) -> None:
        digest = hash_password("secret123", rounds=ROUNDS)
        self.assertEqual(digest.split("$")[2], "04")

    def test_same_password_gets_different_salts(self) -> None:
        self.assertNotEqual(
            hash_password("secret123", rounds=ROUNDS),
            hash_password("secret123", rounds=ROUNDS),
        )

    def test_empty_password_raises(self) -> None:
        with self.assertRaises(ValueError):
            hash_password("", rounds=ROUNDS)


class TestVerifyPassword(unittest.TestCase):
    """verify_password accepts only the original plaintext."""

    def setUp(self) -> None:
        self.digest = hash_password("secret123", rounds=ROUNDS)

    def test_correct_password(self) -> None:
        self.assertTrue(verify_password("secret123", self.digest))

    def test_wrong_password(self) -> None:
        for other in ("secret124", "Secret123", "secret12", " secret123", "x"):
            with self.subTest(other=other):
                self.assertFalse(verify_password(other, self.digest))

    def test_empty_password_is_false(self) -> None:
        self.assertFalse(verify_password("", self.digest))

    def test_malformed_hash_is_false(self) -> None:
        self.assertFalse(verify_password("secret123", "not-a-bcrypt-hash"))
        self.assertFalse(verify_password("secret123", ""))

    def test_unicode_password(self) -> None:
        digest = hash_password("pässwörd-ß", rounds=ROUNDS)
        self.assertTrue(verify_password("pässwörd-ß", digest))
        self.assertFalse(verify_password("passwort-ss", digest))

    def test_72_byte_password_is_accepted(self) -> None:
        pw = "a" * 72
        digest = hash_password(pw, rounds=ROUNDS)
        self.assertTrue(verify_password(pw, digest))
        self.assertFalse(verify_password("a" * 71, digest))


class TestOverlongPasswords(unittest.TestCase):
    """Passwords past bcrypt's 72-byte input limit are refused, never truncated."""

    def test_hash_rejects_over_72_bytes(self) -> None:
        with self.assertRaises(ValueError):
            hash_password("a" * 73, rounds=ROUNDS)

    def test_limit_counts_utf8_bytes(self) -> None:
        # 37 two-byte characters = 74 bytes
        with self.assertRaises(ValueError):
            hash_password("\u00e9" * 37, rounds=ROUNDS)

    def test_shared_72_byte_prefix_does_not_verify(self) -> None:
        digest = hash_password("a" * 72, rounds=ROUNDS)
        self.assertFalse(verify_password("a" * 72 + "anything", digest))


if __name__ == "__main__":
    unittest.main()
