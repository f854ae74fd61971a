"""FastAPI dependencies that hand app-lifetime components to route handlers."""

from typing import Annotated

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from calcsaas.core.config import Settings
from calcsaas.core.database import get_db, get_session_factory
from calcsaas.core.errors import MissingToken
from calcsaas.core.security import Identity, TokenService
from calcsaas.services.credentials import CredentialStore
from calcsaas.services.history import HistoryLedger

security = HTTPBearer(auto_error=False)


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_token_service(request: Request) -> TokenService:
    return request.app.state.token_service


def get_credential_store(
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> CredentialStore:
    return CredentialStore(db, bcrypt_rounds=settings.BCRYPT_ROUNDS)


def get_history_ledger(request: Request) -> HistoryLedger:
    return HistoryLedger(get_session_factory(request))


def get_current_identity(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    tokens: Annotated[TokenService, Depends(get_token_service)],
) -> Identity:
    """
    Dependency: require a valid Bearer token and return the identity it carries.
    Missing token -> 401, rejected token -> 403. No database lookup.
    """
    if credentials is None or not credentials.credentials:
        raise MissingToken()
    return tokens.verify(credentials.credentials)


CurrentIdentity = Annotated[Identity, Depends(get_current_identity)]
