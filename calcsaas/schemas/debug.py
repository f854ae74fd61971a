"""Schemas for the DEBUG-only user listing."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict


class DebugUserItem(BaseModel):
    """User entry without the password hash."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    email: str
    created_at: datetime
