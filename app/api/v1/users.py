"""User endpoints: registration, login/logout, and token-protected CRUD."""

from typing import Annotated, Any

from fastapi import APIRouter, Body, Depends, Response, status
from pydantic import BaseModel, ValidationError

from app.api.deps import (
    SESSION_COOKIE_NAME,
    CurrentIdentity,
    get_app_settings,
    get_token_service,
    get_user_store,
    require_roles,
)
from app.core.config import Settings
from app.core.errors import BadRequestError, ValidationFailedError
from app.core.tokens import TokenService
from app.repositories.users import UserStore
from app.schemas.auth import Identity, LoginRequest
from app.schemas.user import (
    REQUIRED_CREATE_FIELDS,
    RolesUpdate,
    UserCreate,
    UserPublic,
    UserUpdate,
)
from app.services import users as user_service

router = APIRouter()

Payload = Annotated[dict[str, Any] | None, Body()]


def _parse(model: type[BaseModel], body: dict[str, Any] | None, required: tuple[str, ...] = ()):
    """Empty body -> BAD_REQUEST; missing required or ill-typed fields -> VALIDATION_ERROR."""
    if not body:
        raise BadRequestError("Invalid payload")
    missing = [name for name in required if body.get(name) in (None, "")]
    if missing:
        raise ValidationFailedError(missing, "Missing required fields")
    try:
        return model.model_validate(body)
    except ValidationError as e:
        fields = sorted({".".join(str(p) for p in err["loc"]) or "body" for err in e.errors()})
        raise ValidationFailedError(fields, "Invalid fields")


def _set_session_cookie(response: Response, token: str, settings: Settings, tokens: TokenService) -> None:
    response.set_cookie(
        key=SESSION_COOKIE_NAME,
        value=token,
        max_age=int(tokens.lifetime.total_seconds()),
        httponly=True,
        samesite="lax",
        secure=settings.AUTH_COOKIE_SECURE,
    )


@router.post("/create", response_model=UserPublic, status_code=status.HTTP_201_CREATED)
def create_user(
    body: Payload,
    response: Response,
    store: Annotated[UserStore, Depends(get_user_store)],
    tokens: Annotated[TokenService, Depends(get_token_service)],
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> UserPublic:
    """Register a user; the session token is returned in the `token` cookie."""
    payload = _parse(UserCreate, body, REQUIRED_CREATE_FIELDS)
    user, token = user_service.register_user(store, tokens, payload, rounds=settings.BCRYPT_ROUNDS)
    _set_session_cookie(response, token, settings, tokens)
    return UserPublic.model_validate(user)


@router.post("/login", response_model=UserPublic)
def login(
    body: Payload,
    response: Response,
    store: Annotated[UserStore, Depends(get_user_store)],
    tokens: Annotated[TokenService, Depends(get_token_service)],
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> UserPublic:
    """Authenticate with email and password; sets a fresh `token` cookie."""
    credentials = _parse(LoginRequest, body, ("email", "password"))
    user, token = user_service.authenticate(store, tokens, credentials.email, credentials.password)
    _set_session_cookie(response, token, settings, tokens)
    return UserPublic.model_validate(user)


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
def logout() -> Response:
    """Drop the session cookie. The token itself stays valid until it expires."""
    response = Response(status_code=status.HTTP_204_NO_CONTENT)
    response.delete_cookie(SESSION_COOKIE_NAME)
    return response


@router.get("/me", response_model=Identity)
def read_identity(identity: CurrentIdentity) -> Identity:
    """Return the claims carried by the caller's session token."""
    return identity


@router.get("/get", response_model=list[UserPublic])
def get_users(
    _identity: CurrentIdentity,
    store: Annotated[UserStore, Depends(get_user_store)],
) -> list[UserPublic]:
    return [UserPublic.model_validate(u) for u in user_service.list_users(store)]


@router.get("/get/{user_id}", response_model=UserPublic)
def get_user(
    user_id: str,
    _identity: CurrentIdentity,
    store: Annotated[UserStore, Depends(get_user_store)],
) -> UserPublic:
    return UserPublic.model_validate(user_service.get_user(store, user_id))


@router.patch("/update/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def update_user(
    user_id: str,
    body: Payload,
    identity: CurrentIdentity,
    store: Annotated[UserStore, Depends(get_user_store)],
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> Response:
    payload = _parse(UserUpdate, body)
    user_service.update_user(store, user_id, payload, identity, rounds=settings.BCRYPT_ROUNDS)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.put("/roles/{user_id}", response_model=UserPublic)
def assign_roles(
    user_id: str,
    body: Payload,
    _admin: Annotated[Identity, Depends(require_roles(user_service.ADMIN_ROLE))],
    store: Annotated[UserStore, Depends(get_user_store)],
) -> UserPublic:
    """Replace a user's roles (admin only)."""
    payload = _parse(RolesUpdate, body, ("roles",))
    return UserPublic.model_validate(user_service.set_roles(store, user_id, payload.roles))


@router.delete("/delete/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_user(
    user_id: str,
    _identity: CurrentIdentity,
    store: Annotated[UserStore, Depends(get_user_store)],
) -> Response:
    user_service.delete_user(store, user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
