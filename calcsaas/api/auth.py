"""Registration and login endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, status

from calcsaas.api.deps import get_credential_store, get_token_service
from calcsaas.core.errors import ValidationError
from calcsaas.core.security import TokenService
from calcsaas.schemas.auth import AuthResponse, LoginRequest, RegisterRequest, UserPublic
from calcsaas.services.credentials import CredentialStore

router = APIRouter()


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register(
    body: RegisterRequest,
    store: Annotated[CredentialStore, Depends(get_credential_store)],
    tokens: Annotated[TokenService, Depends(get_token_service)],
) -> AuthResponse:
    """
    Create an account and return a token for it.
    400 when a field is missing, the password is shorter than 6 characters,
    or the username/email is taken.
    """
    user = store.create_user(body.username or "", body.email or "", body.password or "")
    return AuthResponse(
        message="User created successfully",
        token=tokens.issue(user.id, user.username),
        user=UserPublic.model_validate(user),
    )


@router.post("/login", response_model=AuthResponse)
def login(
    body: LoginRequest,
    store: Annotated[CredentialStore, Depends(get_credential_store)],
    tokens: Annotated[TokenService, Depends(get_token_service)],
) -> AuthResponse:
    """
    Authenticate with username (or email) and password.
    Include the token in the Authorization header as: Bearer <token>
    """
    if not body.username or not body.password:
        raise ValidationError("Username and password are required")
    user = store.authenticate(body.username, body.password)
    return AuthResponse(
        message="Login successful",
        token=tokens.issue(user.id, user.username),
        user=UserPublic.model_validate(user),
    )
