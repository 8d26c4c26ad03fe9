"""Identity and credential schemas shared by the token service and auth dependencies."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class IdentityClaims(BaseModel):
    """Identity facts embedded in a session token. No id, no password material."""

    model_config = ConfigDict(frozen=True)

    username: str
    email: str
    roles: tuple[str, ...] = Field(default=("guest",))


class Identity(IdentityClaims):
    """Verified identity attached to a request after the token has been checked."""

    issued_at: datetime
    expires_at: datetime

    def has_any_role(self, required: set[str] | frozenset[str]) -> bool:
        return bool(set(self.roles) & set(required))


class LoginRequest(BaseModel):
    """Credentials for login."""

    email: str = Field(..., min_length=1, max_length=255, description="Account email")
    password: str = Field(..., min_length=1, max_length=128, description="Password")
