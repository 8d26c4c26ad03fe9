"""Request/response schemas for user endpoints. Nothing here ever carries password_hash."""

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.core.security import (
    EMAIL_MAX_LEN,
    PASSWORD_MAX_BYTES,
    PASSWORD_MIN_LEN,
    USERNAME_MAX_LEN,
    password_fits,
)

# Fields a registration payload must carry (checked before type validation).
REQUIRED_CREATE_FIELDS = ("username", "email", "password")


def _clean_username(v: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError("username must not be blank")
    return v


def _check_password(v: str) -> str:
    if not password_fits(v):
        raise ValueError(f"password must be at most {PASSWORD_MAX_BYTES} bytes in UTF-8")
    return v


def _normalize_roles(roles: list[str]) -> list[str]:
    """Strip, drop blanks and de-duplicate while keeping first-seen order."""
    seen: list[str] = []
    for role in roles:
        name = role.strip()
        if name and name not in seen:
            seen.append(name)
    if not seen:
        raise ValueError("roles must contain at least one role")
    return seen


class Review(BaseModel):
    review: str = Field(..., min_length=1)


class UserCreate(BaseModel):
    """Registration payload. Roles are not accepted here; new users get the baseline role."""

    model_config = ConfigDict(extra="ignore")

    username: str = Field(..., min_length=1, max_length=USERNAME_MAX_LEN)
    email: str = Field(..., min_length=3, max_length=EMAIL_MAX_LEN)
    password: str = Field(..., min_length=PASSWORD_MIN_LEN)
    profile_picture_url: str | None = Field(default=None, max_length=2048)

    @field_validator("username")
    @classmethod
    def validate_username(cls, v: str) -> str:
        return _clean_username(v)

    @field_validator("password")
    @classmethod
    def validate_password(cls, v: str) -> str:
        return _check_password(v)

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        v = v.strip().lower()
        if "@" not in v:
            raise ValueError("email must contain '@'")
        return v


class UserUpdate(BaseModel):
    """Partial update. Only fields present in the payload are applied."""

    model_config = ConfigDict(extra="forbid")

    username: str | None = Field(default=None, min_length=1, max_length=USERNAME_MAX_LEN)
    email: str | None = Field(default=None, min_length=3, max_length=EMAIL_MAX_LEN)
    password: str | None = Field(default=None, min_length=PASSWORD_MIN_LEN)
    roles: list[str] | None = None
    profile_picture_url: str | None = Field(default=None, max_length=2048)
    reviews: list[Review] | None = None
    liked_products: list[int] | None = None

    @field_validator("username", "email", "password", "roles", "reviews", "liked_products")
    @classmethod
    def reject_null(cls, v: object) -> object:
        if v is None:
            raise ValueError("may not be null")
        return v

    @field_validator("username")
    @classmethod
    def validate_username(cls, v: str) -> str:
        return _clean_username(v)

    @field_validator("password")
    @classmethod
    def validate_password(cls, v: str) -> str:
        return _check_password(v)

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        v = v.strip().lower()
        if "@" not in v:
            raise ValueError("email must contain '@'")
        return v

    @field_validator("roles")
    @classmethod
    def validate_roles(cls, v: list[str]) -> list[str]:
        return _normalize_roles(v)


class RolesUpdate(BaseModel):
    """Body for the admin-only role assignment endpoint."""

    model_config = ConfigDict(extra="forbid")

    roles: list[str]

    @field_validator("roles")
    @classmethod
    def validate_roles(cls, v: list[str]) -> list[str]:
        return _normalize_roles(v)


class UserPublic(BaseModel):
    """Public-safe projection of a user record."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    username: str
    email: str
    roles: list[str]
    profile_picture_url: str | None = None
    reviews: list[Review] = Field(default_factory=list)
    liked_products: list[int] = Field(default_factory=list)
