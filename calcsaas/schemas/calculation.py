"""Schemas for expression evaluation and calculation history."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class CalculateRequest(BaseModel):
    expression: str | None = Field(
        default=None,
        description="Arithmetic expression using digits, + - * / . ( ) and spaces",
    )


class CalculateResponse(BaseModel):
    """Evaluated expression; result is the canonical decimal rendering."""

    expression: str
    result: str
    timestamp: str = Field(..., description="UTC ISO-8601 with milliseconds, e.g. 2024-01-01T00:00:00.000Z")


class HistoryItem(BaseModel):
    """One stored calculation, as listed by GET /history."""

    model_config = ConfigDict(from_attributes=True)

    expression: str
    result: str
    created_at: datetime
