"""Calculation history for the authenticated user."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query

from calcsaas.api.deps import CurrentIdentity, get_app_settings, get_history_ledger
from calcsaas.core.config import Settings
from calcsaas.schemas.calculation import HistoryItem
from calcsaas.schemas.common import MessageResponse
from calcsaas.services.history import HistoryLedger, parse_limit

router = APIRouter()


@router.get("", response_model=list[HistoryItem])
def get_history(
    identity: CurrentIdentity,
    ledger: Annotated[HistoryLedger, Depends(get_history_ledger)],
    settings: Annotated[Settings, Depends(get_app_settings)],
    limit: Annotated[str | None, Query(description="Maximum number of records (default 50)")] = None,
) -> list[HistoryItem]:
    """Most recent calculations first."""
    n = parse_limit(limit, default=settings.HISTORY_DEFAULT_LIMIT, maximum=settings.HISTORY_MAX_LIMIT)
    return [HistoryItem.model_validate(entry) for entry in ledger.list(identity.user_id, limit=n)]


@router.delete("", response_model=MessageResponse)
def clear_history(
    identity: CurrentIdentity,
    ledger: Annotated[HistoryLedger, Depends(get_history_ledger)],
) -> MessageResponse:
    ledger.clear(identity.user_id)
    return MessageResponse(message="History cleared successfully")
