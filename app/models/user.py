"""ORM model for user accounts (auth and RBAC)."""

import uuid

from sqlalchemy import JSON, Column, String

from app.models.base import Base

DEFAULT_ROLE = "guest"


def _new_user_id() -> str:
    return uuid.uuid4().hex


def _default_roles() -> list[str]:
    return [DEFAULT_ROLE]


class User(Base):
    """
    User account for JWT session authentication and role-based access control.

    email is unique at the database level; roles is a non-empty list of role
    names, ["guest"] unless assigned otherwise. reviews and liked_products are
    stored as JSON and not interpreted by the auth layer.
    """

    __tablename__ = "users"

    id = Column(String(32), primary_key=True, default=_new_user_id)
    username = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    roles = Column(JSON, nullable=False, default=_default_roles)
    profile_picture_url = Column(String(2048), nullable=True)
    reviews = Column(JSON, nullable=False, default=list)
    liked_products = Column(JSON, nullable=False, default=list)
