"""User listing for local debugging. Only mounted when DEBUG is enabled."""

from typing import Annotated

from fastapi import APIRouter, Depends

from calcsaas.api.deps import get_credential_store
from calcsaas.schemas.debug import DebugUserItem
from calcsaas.services.credentials import CredentialStore

router = APIRouter()


@router.get("/users", response_model=list[DebugUserItem])
def list_users(
    store: Annotated[CredentialStore, Depends(get_credential_store)],
) -> list[DebugUserItem]:
    return [DebugUserItem.model_validate(u) for u in store.list_users()]
