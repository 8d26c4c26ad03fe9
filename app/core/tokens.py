"""Session token issuance and verification (signed JWT, HS256 by default)."""

import enum
import logging
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any

import jwt

from app.schemas.auth import Identity, IdentityClaims

logger = logging.getLogger(__name__)

DEFAULT_EXPIRE_MINUTES = 20


class TokenFailure(str, enum.Enum):
    """Why a token was rejected. Only logged; callers see a single rejection."""

    EXPIRED = "expired"
    INVALID = "invalid"


@dataclass(frozen=True)
class TokenResult:
    """Outcome of TokenService.verify: either an identity or a failure kind."""

    identity: Identity | None = None
    failure: TokenFailure | None = None

    @property
    def ok(self) -> bool:
        return self.identity is not None

    @classmethod
    def success(cls, identity: Identity) -> "TokenResult":
        return cls(identity=identity)

    @classmethod
    def fail(cls, failure: TokenFailure) -> "TokenResult":
        return cls(failure=failure)


class TokenService:
    """
    Issues and verifies session tokens with a process-wide secret.

    The secret is passed in once at startup and never re-read. Instances are
    immutable and safe to share across concurrent requests.
    """

    def __init__(
        self,
        secret: str,
        algorithm: str = "HS256",
        expire_minutes: int = DEFAULT_EXPIRE_MINUTES,
    ) -> None:
        if not secret or not secret.strip():
            raise ValueError("Token signing secret must be non-empty")
        if expire_minutes < 1:
            raise ValueError("expire_minutes must be at least 1")
        self._secret = secret
        self._algorithm = algorithm
        self._lifetime = timedelta(minutes=expire_minutes)

    @property
    def lifetime(self) -> timedelta:
        return self._lifetime

    def issue(self, claims: IdentityClaims, now: datetime | None = None) -> str:
        """Create a signed token with username, email, roles, iat and exp."""
        issued_at = now or datetime.now(UTC)
        payload: dict[str, Any] = {
            "username": claims.username,
            "email": claims.email,
            "roles": list(claims.roles),
            "iat": issued_at,
            "exp": issued_at + self._lifetime,
        }
        return jwt.encode(payload, self._secret, algorithm=self._algorithm)

    def verify(self, token: str) -> TokenResult:
        """
        Check signature and expiry and decode the identity.

        Never raises for bad input; returns TokenResult.fail(EXPIRED) for an
        expired token and TokenResult.fail(INVALID) for anything else wrong.
        """
        if not token:
            return TokenResult.fail(TokenFailure.INVALID)
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                options={"require": ["exp", "iat"]},
            )
        except jwt.ExpiredSignatureError:
            logger.info("Rejected session token: expired")
            return TokenResult.fail(TokenFailure.EXPIRED)
        except jwt.PyJWTError as e:
            logger.info("Rejected session token: %s", type(e).__name__)
            return TokenResult.fail(TokenFailure.INVALID)

        username = payload.get("username")
        email = payload.get("email")
        roles = payload.get("roles")
        if (
            not isinstance(username, str)
            or not isinstance(email, str)
            or not isinstance(roles, list)
            or not all(isinstance(r, str) for r in roles)
        ):
            logger.info("Rejected session token: malformed claims")
            return TokenResult.fail(TokenFailure.INVALID)

        identity = Identity(
            username=username,
            email=email,
            roles=tuple(roles),
            issued_at=datetime.fromtimestamp(payload["iat"], UTC),
            expires_at=datetime.fromtimestamp(payload["exp"], UTC),
        )
        return TokenResult.success(identity)
