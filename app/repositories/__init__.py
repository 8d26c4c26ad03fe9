"""Store adapters."""

from app.repositories.users import (
    DeleteResult,
    UniqueConstraintViolation,
    UpdateResult,
    UserStore,
)

__all__ = ["DeleteResult", "UniqueConstraintViolation", "UpdateResult", "UserStore"]
