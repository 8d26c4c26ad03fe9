"""User lifecycle: registration, login, reads, updates and deletes on top of UserStore."""

import logging
from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy.exc import SQLAlchemyError

from app.core.errors import (
    ConflictError,
    ForbiddenError,
    InternalError,
    NotFoundError,
    UnauthenticatedError,
)
from app.core.security import BCRYPT_ROUNDS, hash_password, verify_password
from app.core.tokens import TokenService
from app.models.user import DEFAULT_ROLE, User
from app.repositories.users import UniqueConstraintViolation, UserStore
from app.schemas.auth import Identity, IdentityClaims
from app.schemas.user import UserCreate, UserUpdate

logger = logging.getLogger(__name__)

ADMIN_ROLE = "admin"

# Same message for unknown email and wrong password.
INVALID_LOGIN_MESSAGE = "Invalid email or password."


@contextmanager
def store_errors(operation: str) -> Iterator[None]:
    """Downgrade store failures to InternalError; the detail only goes to the log."""
    try:
        yield
    except SQLAlchemyError:
        logger.exception("Store failure during %s", operation)
        raise InternalError()


def claims_for(user: User) -> IdentityClaims:
    return IdentityClaims(username=user.username, email=user.email, roles=tuple(user.roles))


def register_user(
    store: UserStore,
    tokens: TokenService,
    payload: UserCreate,
    rounds: int = BCRYPT_ROUNDS,
) -> tuple[User, str]:
    """Hash the password, insert the record and issue a session token for it."""
    password_hash = hash_password(payload.password, rounds=rounds)
    user = User(
        username=payload.username,
        email=payload.email,
        password_hash=password_hash,
        roles=[DEFAULT_ROLE],
        profile_picture_url=payload.profile_picture_url,
        reviews=[],
        liked_products=[],
    )
    with store_errors("register"):
        try:
            user = store.insert(user)
        except UniqueConstraintViolation:
            raise ConflictError("A user with this email already exists")
    logger.info("Registered user id=%s", user.id)
    return user, tokens.issue(claims_for(user))


def authenticate(
    store: UserStore,
    tokens: TokenService,
    email: str,
    password: str,
) -> tuple[User, str]:
    """Check email and password; on success issue a fresh session token."""
    with store_errors("login"):
        user = store.find_by_email(email.strip().lower())
    if user is None or not verify_password(password, user.password_hash):
        raise UnauthenticatedError(INVALID_LOGIN_MESSAGE)
    logger.info("User id=%s logged in", user.id)
    return user, tokens.issue(claims_for(user))


def list_users(store: UserStore) -> list[User]:
    with store_errors("list users"):
        return store.list_all()


def get_user(store: UserStore, user_id: str) -> User:
    with store_errors("get user"):
        user = store.find_by_id(user_id)
    if user is None:
        raise NotFoundError("User not found")
    return user


def update_user(
    store: UserStore,
    user_id: str,
    payload: UserUpdate,
    identity: Identity,
    rounds: int = BCRYPT_ROUNDS,
) -> None:
    """
    Apply a partial update. A new password is always re-hashed; changing roles
    requires the admin role.
    """
    changes = payload.model_dump(exclude_unset=True)
    if "roles" in changes and not identity.has_any_role({ADMIN_ROLE}):
        raise ForbiddenError("Only administrators may change roles")
    if "password" in changes:
        changes["password_hash"] = hash_password(changes.pop("password"), rounds=rounds)

    with store_errors("update user"):
        try:
            result = store.update_by_id(user_id, changes)
        except UniqueConstraintViolation:
            raise ConflictError("A user with this email already exists")
    if not result.matched:
        raise NotFoundError("User not found")
    logger.info("Updated user id=%s modified=%s", user_id, result.modified)


def set_roles(store: UserStore, user_id: str, roles: list[str]) -> User:
    with store_errors("set roles"):
        result = store.update_by_id(user_id, {"roles": roles})
        if not result.matched:
            raise NotFoundError("User not found")
        user = store.find_by_id(user_id)
    logger.info("Set roles for user id=%s: %s", user_id, roles)
    return user


def delete_user(store: UserStore, user_id: str) -> None:
    with store_errors("delete user"):
        result = store.delete_by_id(user_id)
    if not result.matched:
        raise NotFoundError("User not found")
    logger.info("Deleted user id=%s", user_id)
