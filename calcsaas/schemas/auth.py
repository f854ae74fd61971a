"""Request/response schemas for registration and login."""

from pydantic import BaseModel, ConfigDict, Field


class RegisterRequest(BaseModel):
    """New account. Presence and password length are checked by the credential store."""

    username: str | None = Field(default=None, max_length=255, description="Username")
    email: str | None = Field(default=None, max_length=255, description="Email address")
    password: str | None = Field(default=None, description="Password (min 6 chars)")


class LoginRequest(BaseModel):
    """Credentials for login; username also accepts the account email."""

    username: str | None = Field(default=None, max_length=255, description="Username or email")
    password: str | None = Field(default=None, description="Password")


class UserPublic(BaseModel):
    """User fields safe to return to the client."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    email: str


class AuthResponse(BaseModel):
    """Returned by register and login: a bearer token plus the user it belongs to."""

    message: str
    token: str = Field(..., description="JWT; send as 'Authorization: Bearer <token>'")
    user: UserPublic
