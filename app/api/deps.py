"""
Request dependencies: settings, store, token service and the auth gate.

Protected routes depend on get_identity (authentication) and optionally on
require_roles(...) (authorization). The session token is read from the
`token` cookie only; the Authorization header is ignored.
"""

import logging
from collections.abc import Callable
from typing import Annotated

from fastapi import Depends, Request
from fastapi.security import APIKeyCookie
from sqlalchemy.orm import Session

from app.core.config import Settings
from app.core.database import get_db
from app.core.errors import ForbiddenError, InvalidCredentialError, UnauthenticatedError
from app.core.tokens import TokenService
from app.repositories.users import UserStore
from app.schemas.auth import Identity

logger = logging.getLogger(__name__)

SESSION_COOKIE_NAME = "token"

session_cookie = APIKeyCookie(name=SESSION_COOKIE_NAME, auto_error=False)


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_token_service(request: Request) -> TokenService:
    return request.app.state.token_service


def get_user_store(db: Annotated[Session, Depends(get_db)]) -> UserStore:
    return UserStore(db)


def get_identity(
    token: Annotated[str | None, Depends(session_cookie)],
    tokens: Annotated[TokenService, Depends(get_token_service)],
) -> Identity:
    """Dependency: require a valid session cookie and return the verified identity."""
    if not token:
        raise UnauthenticatedError()
    result = tokens.verify(token)
    if not result.ok:
        logger.debug("Session token rejected (%s)", result.failure.value)
        raise InvalidCredentialError()
    return result.identity


def require_roles(*roles: str) -> Callable[[Identity], Identity]:
    """
    Build a dependency that admits only identities holding at least one of roles.
    Runs after get_identity, so an unauthenticated request still gets 401.
    """
    required = frozenset(roles)
    if not required:
        raise ValueError("require_roles needs at least one role")

    def role_gate(identity: Annotated[Identity, Depends(get_identity)]) -> Identity:
        if not identity.has_any_role(required):
            raise ForbiddenError()
        return identity

    return role_gate


CurrentIdentity = Annotated[Identity, Depends(get_identity)]
