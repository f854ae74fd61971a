"""Expression evaluation endpoints, with and without history."""

from datetime import UTC, datetime
from typing import Annotated

from fastapi import APIRouter, BackgroundTasks, Depends, Request
from pydantic import ValidationError as PydanticValidationError

from calcsaas.api.deps import CurrentIdentity, get_history_ledger
from calcsaas.core.errors import ValidationError
from calcsaas.schemas.calculation import CalculateRequest, CalculateResponse
from calcsaas.services.evaluator import evaluate, format_number
from calcsaas.services.history import HistoryLedger

router = APIRouter()


def _iso_timestamp() -> str:
    return datetime.now(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _run_calculation(expression: str | None) -> CalculateResponse:
    if not expression:
        raise ValidationError("Expression is required")
    result = format_number(evaluate(expression))
    return CalculateResponse(expression=expression, result=result, timestamp=_iso_timestamp())


async def _authenticated_body(request: Request, identity: CurrentIdentity) -> CalculateRequest:
    """Parse the request body only once the bearer token has been accepted."""
    try:
        data = await request.json()
    except ValueError as e:
        raise ValidationError("Invalid request body") from e
    try:
        return CalculateRequest.model_validate(data)
    except PydanticValidationError as e:
        raise ValidationError("Invalid request body") from e


@router.post("", response_model=CalculateResponse)
def calculate(
    body: Annotated[CalculateRequest, Depends(_authenticated_body)],
    identity: CurrentIdentity,
    ledger: Annotated[HistoryLedger, Depends(get_history_ledger)],
    background_tasks: BackgroundTasks,
) -> CalculateResponse:
    """Evaluate for the authenticated user; the history append runs after the response is sent."""
    response = _run_calculation(body.expression)
    background_tasks.add_task(
        ledger.record_calculation, identity.user_id, response.expression, response.result
    )
    return response


@router.post("/public", response_model=CalculateResponse)
def calculate_public(body: CalculateRequest) -> CalculateResponse:
    """Evaluate without authentication. Nothing is stored."""
    return _run_calculation(body.expression)
