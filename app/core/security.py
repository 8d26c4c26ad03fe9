"""Password hashing and verification (bcrypt)."""

import bcrypt

# Bcrypt cost (log2 rounds); 12 is a good default for security vs speed.
BCRYPT_ROUNDS = 12

# bcrypt ignores everything past 72 bytes, so longer passwords are refused outright.
PASSWORD_MAX_BYTES = 72

USERNAME_MAX_LEN = 255
EMAIL_MAX_LEN = 255
PASSWORD_MIN_LEN = 1


def password_fits(plain_password: str) -> bool:
    """True if the password is non-empty and its UTF-8 form is at most PASSWORD_MAX_BYTES."""
    return PASSWORD_MIN_LEN <= len(plain_password) and (
        len(plain_password.encode("utf-8")) <= PASSWORD_MAX_BYTES
    )


def hash_password(plain_password: str, rounds: int = BCRYPT_ROUNDS) -> str:
    """
    Hash a plain-text password for storage. The digest embeds its salt and cost.

    Raises ValueError for an empty password or one longer than 72 UTF-8 bytes.
    Errors from bcrypt itself propagate.
    """
    if not plain_password:
        raise ValueError("Password must be non-empty")
    if not password_fits(plain_password):
        raise ValueError(f"Password must be at most {PASSWORD_MAX_BYTES} bytes")
    return bcrypt.hashpw(plain_password.encode("utf-8"), bcrypt.gensalt(rounds=rounds)).decode("utf-8")


def verify_password(plain_password: str, hashed: str) -> bool:
    """Verify a plain password against a stored hash. Over-long input never matches."""
    if not plain_password or not hashed or not password_fits(plain_password):
        return False
    try:
        return bcrypt.checkpw(plain_password.encode("utf-8"), hashed.encode("utf-8"))
    except (ValueError, TypeError):
        return False
