"""Pydantic request/response schemas."""

from calcsaas.schemas.auth import AuthResponse, LoginRequest, RegisterRequest, UserPublic
from calcsaas.schemas.calculation import (
    CalculateRequest,
    CalculateResponse,
    HistoryItem,
)
from calcsaas.schemas.common import ErrorResponse, MessageResponse
from calcsaas.schemas.debug import DebugUserItem
from calcsaas.schemas.health import HealthResponse

__all__ = [
    "AuthResponse",
    "CalculateRequest",
    "CalculateResponse",
    "DebugUserItem",
    "ErrorResponse",
    "HealthResponse",
    "HistoryItem",
    "LoginRequest",
    "MessageResponse",
    "RegisterRequest",
    "UserPublic",
]
