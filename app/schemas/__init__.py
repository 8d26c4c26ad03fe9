"""Pydantic request/response schemas."""

from app.schemas.auth import Identity, IdentityClaims, LoginRequest
from app.schemas.health import HealthResponse
from app.schemas.user import (
    RolesUpdate,
    UserCreate,
    UserPublic,
    UserUpdate,
)

__all__ = [
    "HealthResponse",
    "Identity",
    "IdentityClaims",
    "LoginRequest",
    "RolesUpdate",
    "UserCreate",
    "UserPublic",
    "UserUpdate",
]
