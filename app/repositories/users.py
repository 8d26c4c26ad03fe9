"""Persistence boundary for user records."""

import logging
from dataclasses import dataclass
from typing import Any

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.models.user import User

logger = logging.getLogger(__name__)

# Columns that update_by_id may change; id is immutable.
UPDATABLE_COLUMNS = frozenset(
    {
        "username",
        "email",
        "password_hash",
        "roles",
        "profile_picture_url",
        "reviews",
        "liked_products",
    }
)


class UniqueConstraintViolation(Exception):
    """A write collided with a unique index (email)."""


@dataclass(frozen=True)
class UpdateResult:
    matched: bool
    modified: bool


@dataclass(frozen=True)
class DeleteResult:
    matched: bool


class UserStore:
    """
    Store adapter over a SQLAlchemy session.

    Email uniqueness is left to the database's unique index; an IntegrityError
    on write is rolled back and re-raised as UniqueConstraintViolation. Other
    SQLAlchemy errors propagate unchanged.
    """

    def __init__(self, session: Session) -> None:
        self.session = session

    def insert(self, user: User) -> User:
        self.session.add(user)
        self._commit()
        self.session.refresh(user)
        return user

    def find_by_id(self, user_id: str) -> User | None:
        return self.session.get(User, user_id)

    def find_by_email(self, email: str) -> User | None:
        return self.session.query(User).filter(User.email == email).first()

    def list_all(self) -> list[User]:
        return self.session.query(User).order_by(User.username, User.id).all()

    def update_by_id(self, user_id: str, changes: dict[str, Any]) -> UpdateResult:
        unknown = set(changes) - UPDATABLE_COLUMNS
        if unknown:
            raise ValueError(f"Cannot update columns: {sorted(unknown)}")
        user = self.find_by_id(user_id)
        if user is None:
            return UpdateResult(matched=False, modified=False)
        modified = False
        for column, value in changes.items():
            if getattr(user, column) != value:
                setattr(user, column, value)
                modified = True
        if modified:
            self._commit()
        return UpdateResult(matched=True, modified=modified)

    def delete_by_id(self, user_id: str) -> DeleteResult:
        user = self.find_by_id(user_id)
        if user is None:
            return DeleteResult(matched=False)
        # session.delete also evicts the instance from the identity map
        self.session.delete(user)
        self.session.commit()
        return DeleteResult(matched=True)

    def _commit(self) -> None:
        try:
            self.session.commit()
        except IntegrityError as e:
            self.session.rollback()
            logger.info("Unique constraint violation on users: %s", type(e.orig).__name__)
            raise UniqueConstraintViolation("email already in use") from e
