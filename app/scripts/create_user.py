"""
Create a user directly in the database (e.g. the first admin). Run from project root:
  python -m app.scripts.create_user USERNAME EMAIL PASSWORD [role ...]
Example:
  python -m app.scripts.create_user admin admin@example.com your-secure-password admin
"""
import argparse
import logging
import sys

from app.core.config import get_settings
from app.core.database import build_engine, build_session_factory
from app.core.security import PASSWORD_MAX_BYTES, USERNAME_MAX_LEN, hash_password, password_fits
from app.models.user import DEFAULT_ROLE, User
from app.repositories.users import UniqueConstraintViolation, UserStore

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)
logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create a user without going through the API.")
    parser.add_argument("username", help=f"Username (1-{USERNAME_MAX_LEN} chars)")
    parser.add_argument("email", help="Unique login email")
    parser.add_argument("password", help=f"Password (at most {PASSWORD_MAX_BYTES} bytes)")
    parser.add_argument("roles", nargs="*", default=[DEFAULT_ROLE], help="Roles (default: guest)")
    args = parser.parse_args(argv)

    username = args.username.strip()
    email = args.email.strip().lower()
    if not username or len(username) > USERNAME_MAX_LEN:
        print("Invalid username length.", file=sys.stderr)
        return 1
    if "@" not in email:
        print("Invalid email.", file=sys.stderr)
        return 1
    if not password_fits(args.password):
        print(f"Password must be 1-{PASSWORD_MAX_BYTES} bytes.", file=sys.stderr)
        return 1

    settings = get_settings()
    session_factory = build_session_factory(build_engine(settings.DATABASE_URL))
    db = session_factory()
    try:
        user = User(
            username=username,
            email=email,
            password_hash=hash_password(args.password, rounds=settings.BCRYPT_ROUNDS),
            roles=list(dict.fromkeys(args.roles)),
        )
        try:
            UserStore(db).insert(user)
        except UniqueConstraintViolation:
            print(f"A user with email '{email}' already exists.", file=sys.stderr)
            return 1
        logger.info("Created user id=%s with roles %s", user.id, user.roles)
        return 0
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
